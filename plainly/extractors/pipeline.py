"""Main extraction pipeline orchestrator.

URL -> article event data, in five sequential stages:
1. Fetch (scraper if configured, else direct HTTP)
2. Clean (HTML/Markdown -> bounded text)
3. Prompt the configured language model
4. Parse its JSON
5. Validate against the event contract

Each stage fails with its own error kind; nothing is retried.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

import httpx
from rich.console import Console

from plainly.config import Settings
from plainly.extractors.clean import clean_content
from plainly.extractors.fetch import ContentFetcher, FetchedContent
from plainly.extractors.scraper import FirecrawlScraper
from plainly.llm.backends import CompletionBackend, get_backend
from plainly.llm.parse import parse_json_response, validate_extracted_data
from plainly.llm.schema import ExtractedEventData, build_extraction_prompt

console = Console()


@dataclass
class ExtractionResult:
    """Validated data plus what it was derived from."""

    data: ExtractedEventData
    payload: dict  # Parsed model JSON before validation
    raw_text: str  # Model output verbatim
    fetched: FetchedContent
    content_chars: int


class Extractor:
    """Fetch -> clean -> prompt -> parse -> validate."""

    def __init__(self, fetcher: ContentFetcher, backend: CompletionBackend):
        self.fetcher = fetcher
        self.backend = backend

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "Extractor":
        scraper = None
        if settings.firecrawl_api_key:
            scraper = FirecrawlScraper(settings.firecrawl_api_key, client=client)
        fetcher = ContentFetcher(scraper=scraper, client=client, timeout=settings.http_timeout)
        return cls(fetcher, get_backend(settings, client=client))

    async def extract(self, url: str, today: Optional[date] = None) -> ExtractionResult:
        """Extract structured event data from the article at `url`."""
        fetched = await self.fetcher.fetch(url)
        console.print(f"[dim]Fetched {fetched.url[:60]} via {fetched.method} ({len(fetched.text)} chars)[/dim]")

        content = clean_content(fetched.text, is_markdown=fetched.is_markdown)
        console.print(f"[dim]Extracting from {len(content)} chars with {self.backend.name}...[/dim]")

        raw_text = await self.backend.complete(build_extraction_prompt(content))
        payload = parse_json_response(raw_text)
        data = validate_extracted_data(payload, today=today)

        console.print(f"[green]Extracted:[/green] {data.title[:60]} [dim]({data.category})[/dim]")
        return ExtractionResult(
            data=data,
            payload=payload,
            raw_text=raw_text,
            fetched=fetched,
            content_chars=len(content),
        )


async def extract_from_url(url: str, settings: Optional[Settings] = None) -> ExtractedEventData:
    """One-shot extraction with settings from the environment by default."""
    extractor = Extractor.from_settings(settings or Settings.from_env())
    result = await extractor.extract(url)
    return result.data
