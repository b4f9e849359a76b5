"""Candidate statement parsing and filtering.

Model output is consumed tolerantly: a JSON array of strings is preferred,
anything else degrades to one candidate per non-empty line.
"""

import json
import re

from backend.smartcite.models.citation import CitationCandidate

MIN_STATEMENT_LENGTH = 20
MAX_STATEMENTS = 10

_BRACKETED = re.compile(r"^\[.*\]$")
_BRACED = re.compile(r"^\{.*\}$")
_CODE_FENCE = "```"
# Case-sensitive on purpose: "JSON" or "Code" in prose are kept.
_CODE_LIKE = re.compile(r"json|code|function|let |const |var |=>|<|>")
_FENCED_BLOCK = re.compile(r"^```[A-Za-z]*\s*\n(.*)\n\s*```$", re.DOTALL)


def _unwrap_code_fence(reply: str) -> str:
    match = _FENCED_BLOCK.match(reply.strip())
    return match.group(1) if match else reply


def parse_statements(reply: str) -> list[str]:
    """Parse raw extraction output into candidate strings.

    Args:
        reply: Completion text, ideally a JSON array of strings

    Returns:
        Candidate statements in reply order (unfiltered)
    """
    try:
        parsed = json.loads(_unwrap_code_fence(reply))
    except ValueError:
        parsed = None

    if isinstance(parsed, list):
        return [item for item in parsed if isinstance(item, str)]

    return [line for line in re.split(r"\r\n|\r|\n", reply) if line.strip()]


def is_citable(statement: str) -> bool:
    """Check whether a candidate looks like a prose claim rather than code."""
    trimmed = statement.strip()

    if len(trimmed) < MIN_STATEMENT_LENGTH:
        return False
    if _BRACKETED.match(trimmed):
        return False
    if trimmed.startswith(_CODE_FENCE):
        return False
    if _BRACED.match(trimmed):
        return False
    if _CODE_LIKE.search(trimmed):
        return False
    return True


def filter_candidates(
    statements: list[str], limit: int = MAX_STATEMENTS
) -> list[CitationCandidate]:
    """Drop non-citable candidates and keep at most ``limit``, in order.

    Survivors are kept verbatim; trimming only applies to the checks.
    """
    kept = [
        CitationCandidate(statement=statement)
        for statement in statements
        if is_citable(statement)
    ]
    return kept[:limit]
