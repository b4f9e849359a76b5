"""Smart citation pipeline.

Stages, strictly sequential per invocation:
1. Resolve the session's stored document text
2. Ask the completion service for citable statements
3. Filter candidates (length, brackets, code markers) and cap the count
4. For each statement in order: search the web, then format an APA citation

A statement with no search hit gets a sentinel result and the batch
continues. Any other failure aborts the run and nothing partial is returned.
"""

import logging
from collections.abc import Callable
from datetime import date

from backend.smartcite.adapters.serpapi import SearchClient
from backend.smartcite.citations.extract import MAX_STATEMENTS, filter_candidates, parse_statements
from backend.smartcite.config import ConfigurationError
from backend.smartcite.llm.client import CompletionClient
from backend.smartcite.models.citation import CitationResult, SearchResult
from backend.smartcite.models.session import Turn
from backend.smartcite.sessions.store import InMemorySessionStore, SessionNotFoundError
from backend.smartcite.tools.executor import ToolContext, ToolExecutor
from backend.smartcite.utils.metrics import citation_results_total

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = "You are an academic writing assistant."
EXTRACTION_PROMPT = (
    "From the following text, extract up to 10 statements that would require a citation "
    "in an academic paper. Only include factual claims, statistics, research findings, or "
    "historical events. Do NOT include code, formatting, or non-informational lines. "
    "Return only the statements as a JSON array of strings.\n\n{text}"
)

CITATION_SYSTEM_PROMPT = "You are a citation formatting assistant."
CITATION_PROMPT = (
    "Generate an APA citation for the following source.\n"
    'Title: "{title}"\n'
    'URL: "{link}"\n'
    'Publisher: "{publisher}"\n'
    "Date Accessed: {accessed}"
)


class CitationGenerationError(Exception):
    """The pipeline aborted; no results are available for this run."""

    pass


def build_extraction_messages(document_text: str) -> list[Turn]:
    return [
        Turn.system(EXTRACTION_SYSTEM_PROMPT),
        Turn.user(EXTRACTION_PROMPT.format(text=document_text)),
    ]


def build_citation_messages(result: SearchResult, accessed: date) -> list[Turn]:
    prompt = CITATION_PROMPT.format(
        title=result.title,
        link=result.link,
        publisher=result.source,
        accessed=accessed.isoformat(),
    )
    return [Turn.system(CITATION_SYSTEM_PROMPT), Turn.user(prompt)]


class CitationPipeline:
    """Turns a session's document into sourced, formatted citations."""

    def __init__(
        self,
        store: InMemorySessionStore,
        completion_client: CompletionClient,
        search_client: SearchClient | None,
        executor: ToolExecutor | None = None,
        *,
        max_statements: int = MAX_STATEMENTS,
        extraction_temperature: float = 0.7,
        citation_temperature: float = 0.2,
        citation_model: str | None = None,
        completion_timeout_s: float = 60.0,
        search_timeout_s: float = 15.0,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._llm = completion_client
        self._search = search_client
        self._executor = executor or ToolExecutor()
        self._max_statements = max_statements
        self._extraction_temperature = extraction_temperature
        self._citation_temperature = citation_temperature
        self._citation_model = citation_model
        self._completion_timeout_s = completion_timeout_s
        self._search_timeout_s = search_timeout_s
        self._today = today

    async def generate(self, session_id: str) -> list[CitationResult]:
        """Run the full pipeline for one session.

        Raises:
            SessionNotFoundError: If the session id is unknown
            ConfigurationError: If no search client is configured
            CitationGenerationError: If extraction or enrichment fails
        """
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        if self._search is None:
            raise ConfigurationError("SerpAPI key not set.")
        search = self._search

        try:
            statements = await self._extract_statements(session_id, session.document_text)
            candidates = filter_candidates(statements, limit=self._max_statements)
            logger.info(
                f"Citation candidates: session_id={session_id}, "
                f"extracted={len(statements)}, kept={len(candidates)}"
            )

            results: list[CitationResult] = []
            for candidate in candidates:
                results.append(await self._enrich(session_id, candidate.statement, search))
        except Exception as e:
            logger.error(
                f"Citation generation failed: session_id={session_id}: {e}", exc_info=True
            )
            raise CitationGenerationError(f"Citation generation failed: {e}") from e

        return results

    async def _extract_statements(self, session_id: str, document_text: str) -> list[str]:
        ctx = ToolContext(tool_name="completion", stage="extract_statements", session_id=session_id)
        messages = build_extraction_messages(document_text)
        reply = await self._executor.execute(
            ctx,
            lambda: self._llm.complete(messages, temperature=self._extraction_temperature),
            timeout_s=self._completion_timeout_s,
        )
        return parse_statements(reply)

    async def _enrich(
        self, session_id: str, statement: str, search: SearchClient
    ) -> CitationResult:
        search_ctx = ToolContext(tool_name="search", stage="search", session_id=session_id)
        hits = await self._executor.execute(
            search_ctx,
            lambda: search.search(statement),
            timeout_s=self._search_timeout_s,
        )

        if not hits:
            citation_results_total.labels(outcome="not_found").inc()
            return CitationResult.not_found(statement)

        best = hits[0]
        format_ctx = ToolContext(
            tool_name="completion", stage="format_citation", session_id=session_id
        )
        messages = build_citation_messages(best, self._today())
        reply = await self._executor.execute(
            format_ctx,
            lambda: self._llm.complete(
                messages, temperature=self._citation_temperature, model=self._citation_model
            ),
            timeout_s=self._completion_timeout_s,
        )

        citation_results_total.labels(outcome="sourced").inc()
        return CitationResult(statement=statement, source=best.link, citation=reply.strip())
