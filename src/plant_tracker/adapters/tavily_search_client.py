"""Tavily web search client."""

from dataclasses import dataclass

import httpx

from plant_tracker.domain.identification import SearchResult
from plant_tracker.services.research import SearchClient

_TRUSTED_DOMAINS = [
    "rhs.org.uk",
    "missouribotanicalgarden.org",
    "extension.org",
    ".edu",
    ".gov",
]


@dataclass
class HttpxTavilySearchClient(SearchClient):
    """HTTPX-backed Tavily search client.

    Without an API key every search returns no results.
    """

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "HttpxTavilySearchClient":
        """Create a search client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search(self, query: str, max_results: int = 5) -> list[SearchResult]:
        """Search trusted horticulture domains."""
        if not self.api_key:
            return []
        response = await self.http_client.post(
            f"{self.base_url}/search",
            json={
                "api_key": self.api_key,
                "query": query,
                "search_depth": "advanced",
                "include_domains": _TRUSTED_DOMAINS,
                "max_results": max_results,
            },
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        return [
            SearchResult(
                title=str(item.get("title", "")),
                url=str(item.get("url", "")),
                snippet=str(item.get("content", "")),
            )
            for item in payload.get("results") or []
            if item.get("url")
        ]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
