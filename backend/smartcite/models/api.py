"""Request and response bodies for the public HTTP API.

Field names on the wire are camelCase (``sessionId``); Python code uses the
snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UploadTextRequest(_CamelModel):
    """JSON body for POST /api/upload when text was extracted client-side."""

    extracted_text: str = Field(..., alias="extractedText")


class UploadResponse(_CamelModel):
    """Response for POST /api/upload."""

    session_id: str = Field(..., alias="sessionId")
    reply: str


class FollowupRequest(_CamelModel):
    """Request body for POST /api/followup."""

    session_id: str = Field(..., alias="sessionId", min_length=1)
    message: str

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be empty")
        return value


class FollowupResponse(BaseModel):
    """Response for POST /api/followup."""

    reply: str


class GenerateCitationsRequest(_CamelModel):
    """Request body for POST /api/generate-citations."""

    session_id: str = Field(..., alias="sessionId", min_length=1)
