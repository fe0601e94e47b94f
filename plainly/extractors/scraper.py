"""Firecrawl scraping API client (returns pre-cleaned Markdown)."""

from typing import Optional

import httpx

from plainly.errors import (
    ScraperAuthError,
    ScraperError,
    ScraperQuotaError,
    ScraperRateLimitError,
)
from plainly.extractors.fetch import FetchedContent

FIRECRAWL_URL = "https://api.firecrawl.dev/v1/scrape"


class FirecrawlScraper:
    """Scrape a page through Firecrawl."""

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
        endpoint: str = FIRECRAWL_URL,
    ):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout
        self.endpoint = endpoint

    async def scrape(self, url: str) -> FetchedContent:
        """Scrape `url`. Raises ScraperError (or a subclass) on any failure."""
        if not self.api_key:
            raise ScraperAuthError("Firecrawl API key is not configured")

        owns_client = self.client is None
        client = self.client or httpx.AsyncClient(timeout=self.timeout)
        try:
            response = await client.post(
                self.endpoint,
                json={"url": url, "formats": ["markdown"], "onlyMainContent": True},
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
            )
        finally:
            if owns_client:
                await client.aclose()

        status = response.status_code
        if status in (401, 403):
            raise ScraperAuthError(f"Firecrawl rejected the API key ({status})", status=status)
        if status == 402:
            raise ScraperQuotaError("Firecrawl credits exhausted (402)", status=status)
        if status == 429:
            raise ScraperRateLimitError("Firecrawl rate limit hit (429)", status=status)
        if status >= 400:
            raise ScraperError(f"Firecrawl error ({status})", status=status)

        try:
            body = response.json()
        except ValueError as e:
            raise ScraperError("Firecrawl returned a non-JSON body", status=status) from e
        if not isinstance(body, dict):
            raise ScraperError("Firecrawl returned an unexpected body", status=status)

        if not body.get("success", False):
            raise ScraperError(f"Firecrawl scrape failed: {body.get('error', 'unknown error')}", status=status)

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise ScraperError("Firecrawl returned an unexpected data payload", status=status)

        markdown = data.get("markdown")
        if isinstance(markdown, str) and markdown.strip():
            return FetchedContent(url=url, text=markdown, is_markdown=True, method="firecrawl", status=status)

        html = data.get("html")
        if isinstance(html, str) and html.strip():
            return FetchedContent(url=url, text=html, is_markdown=False, method="firecrawl", status=status)

        raise ScraperError("Firecrawl returned no content", status=status)
