"""FastAPI dependency providers.

Tests swap any of these through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from backend.smartcite.adapters.serpapi import SearchClient, get_search_client
from backend.smartcite.citations.pipeline import CitationPipeline
from backend.smartcite.config import ConfigurationError, Settings, get_settings
from backend.smartcite.conversation.manager import ConversationManager
from backend.smartcite.llm.client import CompletionClient, get_completion_client
from backend.smartcite.sessions.store import InMemorySessionStore
from backend.smartcite.tools.executor import ToolExecutor
from backend.smartcite.utils.logging import StructuredToolLogger
from backend.smartcite.utils.metrics import PrometheusToolMetrics

logger = logging.getLogger(__name__)


@lru_cache
def get_session_store() -> InMemorySessionStore:
    """Process-wide session store."""
    return InMemorySessionStore()


@lru_cache
def get_tool_executor() -> ToolExecutor:
    """Shared executor wired to Prometheus metrics and structured logs."""
    return ToolExecutor(metrics=PrometheusToolMetrics(), logger=StructuredToolLogger())


def get_completion_client_dep() -> CompletionClient:
    """Resolve the completion client, failing the request when unconfigured."""
    try:
        return get_completion_client()
    except ConfigurationError as e:
        logger.error(f"Completion service not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Completion service is not configured.",
        ) from e


def get_search_client_dep() -> SearchClient | None:
    """Resolve the search client; None means citations are unavailable."""
    return get_search_client()


def get_conversation_manager(
    store: Annotated[InMemorySessionStore, Depends(get_session_store)],
    completion_client: Annotated[CompletionClient, Depends(get_completion_client_dep)],
    executor: Annotated[ToolExecutor, Depends(get_tool_executor)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConversationManager:
    """Conversation manager bound to the shared store."""
    return ConversationManager(
        store,
        completion_client,
        executor,
        summary_temperature=settings.summary_temperature,
        followup_temperature=settings.followup_temperature,
        timeout_s=settings.completion_timeout_s,
    )


def get_citation_pipeline(
    store: Annotated[InMemorySessionStore, Depends(get_session_store)],
    completion_client: Annotated[CompletionClient, Depends(get_completion_client_dep)],
    search_client: Annotated[SearchClient | None, Depends(get_search_client_dep)],
    executor: Annotated[ToolExecutor, Depends(get_tool_executor)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CitationPipeline:
    """Citation pipeline bound to the shared store."""
    return CitationPipeline(
        store,
        completion_client,
        search_client,
        executor,
        max_statements=settings.max_citation_statements,
        extraction_temperature=settings.extraction_temperature,
        citation_temperature=settings.citation_temperature,
        citation_model=settings.citation_model,
        completion_timeout_s=settings.completion_timeout_s,
        search_timeout_s=settings.search_timeout_s,
    )
