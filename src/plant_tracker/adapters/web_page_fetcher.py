"""Fetches web pages and extracts their plant care text."""

import logging
import re
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from plant_tracker.services.research import PageFetcher

MAX_PAGE_CHARS = 10_000

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}
_NOISE_SELECTOR = (
    "script, style, nav, footer, header, iframe, noscript, .advertisement, .ad, "
    "#comments, .cookie-banner, .popup"
)
_CONTENT_SELECTORS = (
    '[role="main"]',
    "main",
    "article",
    ".main-content",
    ".article-content",
    "#main-content",
    ".content",
    "#content",
    ".article-body",
    ".post-content",
    ".entry-content",
)
_CARE_KEYWORDS = (
    "water",
    "fertiliz",
    "light",
    "sun",
    "temperature",
    "humidity",
    "soil",
    "care",
    "growing",
    "plant",
)
_MIN_CONTENT_CHARS = 100
_MIN_RELEVANT_SENTENCES = 5
_SENTENCE_BREAK = re.compile(r"[.!?]+\s+")

_logger = logging.getLogger(__name__)


@dataclass
class HttpxWebPageFetcher(PageFetcher):
    """HTTPX-backed page fetcher."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 8

    @classmethod
    def create(cls) -> "HttpxWebPageFetcher":
        """Create a page fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch_text(self, url: str) -> str:
        """Download a page and return its care text, or "" on any failure."""
        try:
            response = await self.http_client.get(
                url, headers=_HEADERS, timeout=self.timeout_seconds
            )
        except httpx.HTTPError as exc:
            _logger.warning("Page fetch failed: url=%s error=%s", url, exc)
            return ""
        if response.is_error:
            _logger.warning(
                "Page fetch failed: url=%s status=%s", url, response.status_code
            )
            return ""
        content_type = response.headers.get("content-type", "")
        if "text/html" not in content_type:
            _logger.warning("Page skipped: url=%s content_type=%s", url, content_type)
            return ""
        return extract_care_text(response.text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def extract_care_text(html: str) -> str:
    """Return the main content of a page, narrowed to care sentences."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup.select(_NOISE_SELECTOR):
        element.decompose()

    content = ""
    for selector in _CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            content = element.get_text(" ")
            break
    if len(content.strip()) < _MIN_CONTENT_CHARS and soup.body is not None:
        content = soup.body.get_text(" ")
    content = " ".join(content.split())

    relevant = [
        sentence
        for sentence in _SENTENCE_BREAK.split(content)
        if len(sentence) > 20
        and any(keyword in sentence.lower() for keyword in _CARE_KEYWORDS)
    ]
    if len(relevant) > _MIN_RELEVANT_SENTENCES:
        content = ". ".join(relevant) + "."
    return content[:MAX_PAGE_CHARS]
