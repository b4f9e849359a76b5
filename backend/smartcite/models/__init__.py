"""Models package - re-exports for convenience."""

from backend.smartcite.models.api import (
    FollowupRequest,
    FollowupResponse,
    GenerateCitationsRequest,
    UploadResponse,
    UploadTextRequest,
)
from backend.smartcite.models.citation import (
    NO_SOURCE_CITATION,
    CitationCandidate,
    CitationResult,
    SearchResult,
)
from backend.smartcite.models.session import Role, StartSessionResult, Turn

__all__ = [
    # Session
    "Role",
    "Turn",
    "StartSessionResult",
    # Citation
    "NO_SOURCE_CITATION",
    "SearchResult",
    "CitationCandidate",
    "CitationResult",
    # API
    "UploadTextRequest",
    "UploadResponse",
    "FollowupRequest",
    "FollowupResponse",
    "GenerateCitationsRequest",
]
