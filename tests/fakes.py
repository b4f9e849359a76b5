"""Test doubles for the completion and search services."""

import asyncio
from collections.abc import Callable, Sequence
from datetime import date

from backend.smartcite.models.citation import SearchResult
from backend.smartcite.models.session import Turn

FIXED_TODAY = date(2025, 3, 14)


class FakeCompletionClient:
    """Completion client returning scripted replies and recording calls.

    ``replies`` items are returned in order; an Exception item is raised
    instead. A callable ``responder`` takes precedence when given.
    """

    def __init__(
        self,
        replies: Sequence[str | Exception] = (),
        responder: Callable[[list[Turn]], str] | None = None,
        delay_s: float = 0.0,
    ) -> None:
        self._replies = list(replies)
        self._responder = responder
        self._delay_s = delay_s
        self.calls: list[dict] = []

    async def complete(
        self,
        messages: Sequence[Turn],
        *,
        temperature: float,
        model: str | None = None,
    ) -> str:
        self.calls.append(
            {"messages": list(messages), "temperature": temperature, "model": model}
        )
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        if self._responder is not None:
            return self._responder(list(messages))
        if not self._replies:
            raise AssertionError("FakeCompletionClient ran out of scripted replies")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeSearchClient:
    """Search client with canned results keyed by query."""

    def __init__(
        self,
        results: dict[str, list[SearchResult]] | None = None,
        default: list[SearchResult] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._results = results or {}
        self._default = default or []
        self._error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if self._error is not None:
            raise self._error
        return list(self._results.get(query, self._default))


def make_hit(link: str = "https://example.org/article", title: str = "An Article") -> SearchResult:
    """Helper to create a search hit."""
    return SearchResult(title=title, link=link, source="Example Press")


