"""Article fetcher: URL normalization + a single HTTP retrieval.

Two paths:
1. Scraper path: a third-party scraping API returning Markdown (only when
   configured). Any failure there is logged and falls through.
2. Direct path: httpx GET with browser-like headers.

No retries on either path; the admin decides whether to try again.
"""

import random
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

import httpx
from rich.console import Console

from plainly.errors import (
    BlockedError,
    EmptyResponseError,
    HTTPStatusError,
    InvalidURLError,
    NetworkUnreachableError,
    NotFoundError,
    RateLimitedError,
    ScraperError,
    UpstreamServerError,
)

if TYPE_CHECKING:
    from plainly.extractors.scraper import FirecrawlScraper

console = Console()

# Realistic Firefox User-Agents
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.7; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:134.0) Gecko/20100101 Firefox/134.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
]

SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*)://")
ALLOWED_SCHEMES = {"http", "https"}

DEFAULT_TIMEOUT = 30.0


@dataclass
class FetchedContent:
    """Raw page content plus how it was obtained."""

    url: str
    text: str
    is_markdown: bool
    method: str  # "firecrawl" or "httpx"
    status: Optional[int] = None


def normalize_url(raw: str) -> str:
    """Turn admin input into an absolute http(s) URL.

    Prepends https:// when no scheme is given.

    Raises:
        InvalidURLError: empty input, non-http(s) scheme, or no usable host.
    """
    url = (raw or "").strip()
    if not url:
        raise InvalidURLError("URL cannot be empty")

    match = SCHEME_RE.match(url)
    if match:
        scheme = match.group(1).lower()
        if scheme not in ALLOWED_SCHEMES:
            raise InvalidURLError(f"URL must use http or https, got {scheme}://", url=url)
    else:
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        host = parsed.hostname
        parsed.port  # Raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {raw.strip()}", url=url) from e

    if not host or any(ch.isspace() for ch in url):
        raise InvalidURLError(
            f"Invalid URL format: {raw.strip()}. Please include http:// or https://",
            url=url,
        )
    return url


def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
    }


def raise_for_status(response: httpx.Response, url: str) -> None:
    """Map a failed response to the matching, user-actionable FetchError."""
    status = response.status_code
    if status < 400:
        return
    if status == 403:
        raise BlockedError(
            "Access denied (403): the site blocks automated requests. "
            "Try the scraper service or paste the content manually.",
            url=url, status=status,
        )
    if status == 404:
        raise NotFoundError("Page not found (404): check the URL.", url=url, status=status)
    if status == 429:
        raise RateLimitedError(
            "Rate limited (429): the site received too many requests. Wait and try again.",
            url=url, status=status,
        )
    if status >= 500:
        raise UpstreamServerError(
            f"Server error ({status}): the site is having problems. Try again later.",
            url=url, status=status,
        )
    raise HTTPStatusError(
        f"Failed to fetch URL: {status} {response.reason_phrase}",
        url=url, status=status,
    )


async def fetch_direct(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchedContent:
    """One GET against `url` (already normalized)."""
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    try:
        response = await client.get(url, headers=browser_headers(), follow_redirects=True)
    except httpx.TransportError as e:
        raise NetworkUnreachableError(
            f"Network error: unable to reach {url} ({type(e).__name__}). "
            "The site may be down, blocking requests, or unreachable from here.",
            url=url,
        ) from e
    finally:
        if owns_client:
            await client.aclose()

    raise_for_status(response, url)

    text = response.text
    if not text or not text.strip():
        raise EmptyResponseError("Received empty response from the URL", url=url, status=response.status_code)

    return FetchedContent(
        url=str(response.url),
        text=text,
        is_markdown=False,
        method="httpx",
        status=response.status_code,
    )


class ContentFetcher:
    """Fetch article content, preferring the scraper when one is configured."""

    def __init__(
        self,
        scraper: Optional["FirecrawlScraper"] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.scraper = scraper
        self.client = client
        self.timeout = timeout

    async def fetch(self, raw_url: str) -> FetchedContent:
        """Normalize `raw_url` and retrieve it.

        Raises:
            FetchError: a subclass describing why the direct fetch failed.
        """
        url = normalize_url(raw_url)

        if self.scraper is not None:
            try:
                return await self.scraper.scrape(url)
            except (ScraperError, httpx.TransportError) as e:
                console.print(f"[dim]Scraper failed for {url[:60]} ({e}), using direct fetch[/dim]")

        return await fetch_direct(url, client=self.client, timeout=self.timeout)


async def fetch_url(raw_url: str, client: Optional[httpx.AsyncClient] = None) -> FetchedContent:
    """Direct-path fetch without a scraper."""
    return await ContentFetcher(client=client).fetch(raw_url)
