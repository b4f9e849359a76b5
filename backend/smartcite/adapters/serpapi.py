"""Web search adapter using SerpAPI (Google engine)."""

import logging
from functools import lru_cache
from typing import Any, Protocol

import httpx

from backend.smartcite.config import get_settings
from backend.smartcite.models.citation import SearchResult

logger = logging.getLogger(__name__)


class SearchError(Exception):
    """The search service request failed.

    The message never includes the request URL, which carries the API key.
    """

    pass


class SearchClient(Protocol):
    """Protocol for web search implementations."""

    async def search(self, query: str) -> list[SearchResult]:
        """Return organic results for a query, best first."""
        ...


def parse_organic_results(data: dict[str, Any]) -> list[SearchResult]:
    """Convert a SerpAPI payload into SearchResults.

    Entries without a link are skipped. A payload without ``organic_results``
    (SerpAPI reports "no results" this way) yields an empty list.
    """
    results: list[SearchResult] = []
    for item in data.get("organic_results") or []:
        link = item.get("link")
        if not link:
            continue
        results.append(
            SearchResult(
                title=item.get("title") or "",
                link=link,
                source=item.get("source") or "",
            )
        )
    return results


async def fetch_search_results(
    query: str,
    api_key: str,
    base_url: str = "https://serpapi.com/search.json",
    hl: str = "en",
    gl: str = "us",
    client: httpx.AsyncClient | None = None,
) -> list[SearchResult]:
    """Run one SerpAPI query.

    Args:
        query: Search string, sent verbatim
        api_key: SerpAPI key
        base_url: SerpAPI endpoint
        hl: Interface language
        gl: Country
        client: Optional httpx client (for testing with mocks)

    Returns:
        Organic results in rank order

    Raises:
        SearchError: On network or HTTP errors
    """
    params = {"q": query, "hl": hl, "gl": gl, "api_key": api_key}

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=10.0)
        close_client = True

    try:
        try:
            response = await client.get(base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SearchError(
                f"SerpAPI request failed: HTTP {e.response.status_code}"
            ) from None
        except httpx.HTTPError as e:
            raise SearchError(f"SerpAPI request failed: {type(e).__name__}") from None

        data = response.json()

        if "error" in data:
            # e.g. "Google hasn't returned any results for this query."
            logger.info(f"SerpAPI reported: {data['error']}")

        return parse_organic_results(data)
    finally:
        if close_client:
            await client.aclose()


class SerpApiClient:
    """SearchClient backed by SerpAPI."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://serpapi.com/search.json",
        hl: str = "en",
        gl: str = "us",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._hl = hl
        self._gl = gl
        self._client = client

    async def search(self, query: str) -> list[SearchResult]:
        return await fetch_search_results(
            query,
            api_key=self._api_key,
            base_url=self._base_url,
            hl=self._hl,
            gl=self._gl,
            client=self._client,
        )


@lru_cache
def get_search_client() -> SearchClient | None:
    """Build the configured search client, or None when no key is set."""
    settings = get_settings()

    if not settings.search_configured:
        logger.warning("No SerpAPI key configured, citation generation is unavailable")
        return None

    assert settings.serpapi_api_key is not None
    return SerpApiClient(
        api_key=settings.serpapi_api_key.get_secret_value(),
        base_url=settings.serpapi_base_url,
        hl=settings.search_hl,
        gl=settings.search_gl,
    )
