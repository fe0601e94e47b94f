"""Turn fetched HTML or Markdown into bounded plain text for the prompt."""

import re

from plainly.errors import InsufficientContentError

MAX_HTML_CHARS = 8000
MAX_MARKDOWN_CHARS = 12000
MIN_CONTENT_CHARS = 100

# Named entities decoded after tag stripping; &amp; last so "&amp;lt;" stays "&lt;"
HTML_ENTITIES = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
]


def extract_main_html(html: str) -> str:
    """Inner HTML of the first <article>, else <main>, else the whole page."""
    for tag in ("article", "main"):
        match = re.search(rf"<{tag}\b[^>]*>(.*?)</{tag}>", html, flags=re.DOTALL | re.IGNORECASE)
        if match:
            return match.group(1)
    return html


def decode_entities(text: str) -> str:
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def extract_text_from_html(html: str) -> str:
    """Extract readable text from HTML, stripping scripts/styles."""
    text = re.sub(r'<script[^>]*>.*?</script>', '', html, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r'<style[^>]*>.*?</style>', '', text, flags=re.DOTALL | re.IGNORECASE)
    text = extract_main_html(text)
    text = re.sub(r'<[^>]+>', ' ', text)
    text = decode_entities(text)
    text = re.sub(r'\s+', ' ', text).strip()
    return text[:MAX_HTML_CHARS]


def clean_markdown(markdown: str) -> str:
    """Collapse runs of blank lines and truncate."""
    text = re.sub(r'\n{3,}', '\n\n', markdown).strip()
    return text[:MAX_MARKDOWN_CHARS]


def clean_content(raw: str, is_markdown: bool = False) -> str:
    """Bounded plain text ready for the extraction prompt.

    Raises:
        InsufficientContentError: fewer than 100 characters survive cleaning.
    """
    text = clean_markdown(raw or "") if is_markdown else extract_text_from_html(raw or "")
    if len(text) < MIN_CONTENT_CHARS:
        raise InsufficientContentError(len(text), MIN_CONTENT_CHARS)
    return text
