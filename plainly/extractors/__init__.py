"""URL -> event data extraction.

This module provides the article extraction pipeline that:
1. Normalizes and fetches the URL (scraper API or direct HTTP)
2. Cleans HTML/Markdown into bounded prompt text
3. Hands the text to a language model and validates its JSON
"""

from plainly.extractors.fetch import ContentFetcher, FetchedContent, fetch_url, normalize_url
from plainly.extractors.scraper import FirecrawlScraper
from plainly.extractors.clean import clean_content, extract_text_from_html
from plainly.extractors.pipeline import Extractor, ExtractionResult, extract_from_url

__all__ = [
    "ContentFetcher",
    "FetchedContent",
    "fetch_url",
    "normalize_url",
    "FirecrawlScraper",
    "clean_content",
    "extract_text_from_html",
    "Extractor",
    "ExtractionResult",
    "extract_from_url",
]
