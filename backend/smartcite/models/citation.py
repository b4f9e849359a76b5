"""Citation domain models."""

from pydantic import BaseModel, Field

NO_SOURCE_CITATION = "No credible source found."


class SearchResult(BaseModel):
    """Single organic web search hit."""

    title: str = ""
    link: str
    source: str = ""  # publisher name as reported by the search engine


class CitationCandidate(BaseModel):
    """Document statement that survived filtering and awaits a source."""

    statement: str = Field(..., min_length=20)


class CitationResult(BaseModel):
    """Statement paired with its web source and formatted citation."""

    statement: str
    source: str | None = None
    citation: str  # empty when the formatter returned only whitespace

    @classmethod
    def not_found(cls, statement: str) -> "CitationResult":
        """Sentinel result for a statement with no search hit."""
        return cls(statement=statement, source=None, citation=NO_SOURCE_CITATION)
