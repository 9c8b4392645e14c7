"""Fetches pages the user linked so they can be summarized into documents."""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from focus_engine.engine.errors import ProviderFailure

logger = logging.getLogger(__name__)


def html_to_text(markup: str) -> tuple[str, str | None]:
    """Return ``(visible_text, title)`` for an HTML page."""
    soup = BeautifulSoup(markup, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else None
    for tag in soup(["script", "style", "noscript", "title"]):
        tag.decompose()
    return soup.get_text(separator="\n", strip=True), title or None


class LinkFetcher:
    def __init__(
        self,
        timeout: float = 10.0,
        max_chars: int = 12000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_chars = max_chars
        self._client = client

    async def fetch(self, url: str) -> tuple[str, str | None]:
        """Raises ``ProviderFailure`` for any unreachable or malformed URL."""
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self._timeout, follow_redirects=True)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise ProviderFailure(f"link {url}: {exc}") from exc

        if "html" in response.headers.get("content-type", "text/html"):
            text, title = html_to_text(response.text)
        else:
            text, title = response.text.strip(), None
        logger.debug("fetched link %s chars=%d", url, len(text))
        return text[: self._max_chars], title
