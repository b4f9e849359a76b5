"""Session endpoints - POST /api/upload, POST /api/followup."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from backend.smartcite.adapters.pdf import ExtractionError, extract_text_from_pdf, truncate_document
from backend.smartcite.api.deps import get_conversation_manager
from backend.smartcite.config import Settings, get_settings
from backend.smartcite.conversation.manager import ConversationManager, UpstreamGenerationError
from backend.smartcite.models.api import (
    FollowupRequest,
    FollowupResponse,
    UploadResponse,
    UploadTextRequest,
)
from backend.smartcite.sessions.store import SessionNotFoundError

router = APIRouter(prefix="/api", tags=["sessions"])
logger = logging.getLogger(__name__)

UPLOAD_FIELD = "pdf"


async def read_document_text(request: Request) -> str:
    """Pull document text out of a multipart PDF upload or a JSON body.

    Raises:
        HTTPException: 400 if no document is present or it cannot be read
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get(UPLOAD_FIELD)
        if not isinstance(upload, UploadFile):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"No file uploaded. Make sure the form field is named '{UPLOAD_FIELD}'.",
            )

        data = await upload.read()
        try:
            return await run_in_threadpool(extract_text_from_pdf, data)
        except ExtractionError as e:
            logger.warning(f"[POST /api/upload] extraction failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not read text from the uploaded PDF.",
            ) from e

    try:
        body = UploadTextRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Expected a PDF upload or a JSON body with 'extractedText'.",
        ) from e

    return body.extracted_text


async def uploaded_document(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Read, truncate and validate the uploaded document.

    Must precede the conversation manager in the upload route signature.

    Raises:
        HTTPException: 400 for missing, unreadable or empty documents
    """
    text = await read_document_text(request)
    text = truncate_document(text, settings.max_document_chars)

    if not text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Extracted text is empty.",
        )

    return text


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_200_OK)
async def upload(
    text: Annotated[str, Depends(uploaded_document)],
    manager: Annotated[ConversationManager, Depends(get_conversation_manager)],
) -> UploadResponse:
    """Upload a document, summarize it and open a session.

    Accepts either a multipart form with the PDF in the ``pdf`` field or a
    JSON body ``{"extractedText": "..."}``.

    Returns:
        UploadResponse with the new sessionId and the summary as reply

    Raises:
        HTTPException: 400 for missing/unreadable/empty documents, 500 on upstream failure
    """
    logger.info(f"[POST /api/upload] document_chars={len(text)}")

    try:
        result = await manager.start_session(text)
    except UpstreamGenerationError as e:
        logger.error(f"[POST /api/upload] failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing document.",
        ) from e

    return UploadResponse(session_id=result.session_id, reply=result.summary)


@router.post("/followup", response_model=FollowupResponse, status_code=status.HTTP_200_OK)
async def followup(
    request: FollowupRequest,
    manager: Annotated[ConversationManager, Depends(get_conversation_manager)],
) -> FollowupResponse:
    """Ask a follow-up question in an existing session.

    Raises:
        HTTPException: 404 if the session is unknown, 500 on upstream failure
    """
    logger.info(f"[POST /api/followup] session_id={request.session_id}")

    try:
        reply = await manager.followup(request.session_id, request.message)
    except SessionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found.",
        ) from e
    except UpstreamGenerationError as e:
        logger.error(
            f"[POST /api/followup] session_id={request.session_id} failed: {e}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error handling follow-up.",
        ) from e

    return FollowupResponse(reply=reply)
