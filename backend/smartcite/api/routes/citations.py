"""Smart citation endpoint - POST /api/generate-citations."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from backend.smartcite.api.deps import get_citation_pipeline
from backend.smartcite.citations.pipeline import CitationGenerationError, CitationPipeline
from backend.smartcite.config import ConfigurationError
from backend.smartcite.models.api import GenerateCitationsRequest
from backend.smartcite.models.citation import CitationResult
from backend.smartcite.sessions.store import SessionNotFoundError

router = APIRouter(prefix="/api", tags=["citations"])
logger = logging.getLogger(__name__)


@router.post(
    "/generate-citations",
    response_model=list[CitationResult],
    status_code=status.HTTP_200_OK,
)
async def generate_citations(
    request: GenerateCitationsRequest,
    pipeline: Annotated[CitationPipeline, Depends(get_citation_pipeline)],
) -> list[CitationResult]:
    """Extract citable statements from the session's document and source them.

    Returns:
        Ordered list of {statement, source, citation}

    Raises:
        HTTPException: 404 if the session is unknown, 500 if search is not
            configured or the pipeline fails
    """
    logger.info(f"[POST /api/generate-citations] session_id={request.session_id}")

    try:
        results = await pipeline.generate(request.session_id)
    except SessionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found.",
        ) from e
    except ConfigurationError as e:
        logger.error(f"[POST /api/generate-citations] configuration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Search service is not configured.",
        ) from e
    except CitationGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Citation generation failed.",
        ) from e

    logger.info(
        f"[POST /api/generate-citations] session_id={request.session_id} "
        f"returned {len(results)} citations"
    )
    return results
