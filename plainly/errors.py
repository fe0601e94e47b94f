"""Error taxonomy for the feed and extraction flows.

Every error carries a `stage` so callers can tell fetch, content, model,
parse and validation failures apart without isinstance ladders.
"""

from typing import Optional


class PlainlyError(Exception):
    """Base class for all plainly errors."""

    stage = "core"


# ===== FETCH =====

class FetchError(PlainlyError):
    """The article could not be retrieved."""

    stage = "fetch"

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class InvalidURLError(FetchError):
    """Input is empty, malformed, or not http(s)."""


class BlockedError(FetchError):
    """403 - the site refuses automated requests."""


class NotFoundError(FetchError):
    """404 - the page does not exist."""


class RateLimitedError(FetchError):
    """429 - too many requests to this site."""


class UpstreamServerError(FetchError):
    """5xx - the site itself failed."""


class HTTPStatusError(FetchError):
    """Any other non-success status."""


class NetworkUnreachableError(FetchError):
    """Connection, DNS, TLS or timeout failure before a response arrived."""


class EmptyResponseError(FetchError):
    """The server answered with an empty body."""


# ===== THIRD-PARTY SCRAPER (never surfaced, triggers direct fetch) =====

class ScraperError(PlainlyError):
    """The scraping API failed."""

    stage = "fetch"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ScraperAuthError(ScraperError):
    """Missing or rejected scraper API key."""


class ScraperQuotaError(ScraperError):
    """Scraper credits exhausted."""


class ScraperRateLimitError(ScraperError):
    """Scraper rate limit hit."""


# ===== CONTENT / MODEL / PARSE =====

class InsufficientContentError(PlainlyError):
    """Cleaned content is too short to extract anything from."""

    stage = "content"

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"Could not extract sufficient content from the page "
            f"({length} characters, need at least {minimum})"
        )
        self.length = length
        self.minimum = minimum


class ModelCallError(PlainlyError):
    """The language model request failed or returned nothing usable."""

    stage = "model"

    def __init__(self, message: str, provider: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status = status


class ParseError(PlainlyError):
    """The model output does not contain a JSON object."""

    stage = "parse"

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text


# ===== VALIDATION =====

class EventValidationError(PlainlyError):
    """Event fields violate the publishing contract.

    Reports every violation at once: all missing required fields plus the
    invalid category, if any.
    """

    stage = "validation"

    def __init__(
        self,
        missing_fields: Optional[list[str]] = None,
        invalid_category: Optional[object] = None,
        allowed_categories: Optional[list[str]] = None,
    ):
        self.missing_fields = list(missing_fields or [])
        self.invalid_category = invalid_category
        self.allowed_categories = list(allowed_categories or [])
        super().__init__(self._build_message())

    @property
    def has_invalid_category(self) -> bool:
        return bool(self.allowed_categories)

    def _build_message(self) -> str:
        problems = []
        if self.missing_fields:
            problems.append(f"missing required fields: {', '.join(self.missing_fields)}")
        if self.has_invalid_category:
            problems.append(
                f"invalid category {self.invalid_category!r} "
                f"(allowed: {', '.join(self.allowed_categories)})"
            )
        return "Extraction failed validation - " + "; ".join(problems)


class MissingFieldsError(EventValidationError):
    """Only required fields are missing."""


class InvalidCategoryError(EventValidationError):
    """Only the category is wrong."""


# ===== CONFIG =====

class ConfigError(PlainlyError, ValueError):
    """An environment variable holds an unusable value."""

    stage = "config"


# ===== DRAFTS / STORAGE =====

class DraftNotFoundError(PlainlyError):
    stage = "drafts"

    def __init__(self, draft_id: str):
        super().__init__(f"Draft not found: {draft_id}")
        self.draft_id = draft_id


class DraftStateError(PlainlyError):
    """Illegal status transition, or an edit to a published/rejected draft."""

    stage = "drafts"


class StorageError(PlainlyError):
    """The record store could not be read or written."""

    stage = "storage"
