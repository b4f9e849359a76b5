"""Health check endpoints.

- /health: liveness, always 200
- /healthz: which external services have credentials configured
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.smartcite.api.deps import get_session_store
from backend.smartcite.config import Settings, get_settings
from backend.smartcite.sessions.store import InMemorySessionStore

router = APIRouter()


def check_completion(settings: Settings) -> str:
    return "configured" if settings.completion_configured else "missing_api_key"


def check_search(settings: Settings) -> str:
    return "configured" if settings.search_configured else "missing_api_key"


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[InMemorySessionStore, Depends(get_session_store)],
) -> dict[str, Any]:
    """Report configuration status of external services.

    A missing search key only degrades citations; a missing completion key
    degrades every endpoint.
    """
    completion = check_completion(settings)
    search = check_search(settings)

    if completion != "configured":
        overall = "unavailable"
    elif search != "configured":
        overall = "degraded"
    else:
        overall = "ok"

    return {
        "status": overall,
        "components": {
            "completion": completion,
            "search": search,
        },
        "sessions": len(store),
    }
