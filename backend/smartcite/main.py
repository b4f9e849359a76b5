"""FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.smartcite.api.routes.citations import router as citations_router
from backend.smartcite.api.routes.health import router as health_router
from backend.smartcite.api.routes.metrics import router as metrics_router
from backend.smartcite.api.routes.sessions import router as sessions_router
from backend.smartcite.config import get_settings
from backend.smartcite.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

if not settings.completion_configured:
    logger.error("OPENAI_API_KEY is not set; upload, follow-up and citations will fail")

app = FastAPI(title="SmartCite API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(sessions_router)
app.include_router(citations_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 Bad Request."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Missing or invalid request fields."},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "SmartCite API", "version": "0.1.0"}
