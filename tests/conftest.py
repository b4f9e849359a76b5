"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from backend.smartcite.api.deps import (
    get_completion_client_dep,
    get_search_client_dep,
    get_session_store,
)
from backend.smartcite.citations.pipeline import CitationPipeline
from backend.smartcite.conversation.manager import ConversationManager
from backend.smartcite.main import app
from backend.smartcite.sessions.store import InMemorySessionStore
from tests.fakes import FIXED_TODAY, FakeCompletionClient, FakeSearchClient


@pytest.fixture
def store() -> InMemorySessionStore:
    """Fresh session store."""
    return InMemorySessionStore()


@pytest.fixture
def make_manager(
    store: InMemorySessionStore,
) -> Callable[..., ConversationManager]:
    """Factory for a ConversationManager bound to the test store."""

    def _make(client: FakeCompletionClient, timeout_s: float = 5.0) -> ConversationManager:
        return ConversationManager(store, client, timeout_s=timeout_s)

    return _make


@pytest.fixture
def make_pipeline(
    store: InMemorySessionStore,
) -> Callable[..., CitationPipeline]:
    """Factory for a CitationPipeline bound to the test store."""

    def _make(
        client: FakeCompletionClient,
        search: FakeSearchClient | None,
        **kwargs: object,
    ) -> CitationPipeline:
        return CitationPipeline(
            store,
            client,
            search,
            today=lambda: FIXED_TODAY,
            **kwargs,  # type: ignore[arg-type]
        )

    return _make


@pytest.fixture
def make_api_client(
    store: InMemorySessionStore,
) -> Iterator[Callable[..., TestClient]]:
    """Factory for a TestClient whose external services are test doubles."""

    def _make(
        client: FakeCompletionClient,
        search: FakeSearchClient | None = None,
    ) -> TestClient:
        app.dependency_overrides[get_session_store] = lambda: store
        app.dependency_overrides[get_completion_client_dep] = lambda: client
        app.dependency_overrides[get_search_client_dep] = lambda: search
        return TestClient(app)

    yield _make

    app.dependency_overrides.clear()
