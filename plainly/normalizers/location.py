"""Country matching against free-text event content."""

from typing import Optional

from plainly.models import Event


def normalize_country(country: Optional[str]) -> str:
    """Lowercase, trimmed country name ('' when blank)."""
    if not country:
        return ""
    return country.strip().lower()


def event_mentions_country(event: Event, country: Optional[str]) -> bool:
    """True if `country` appears anywhere in the event's title or narrative.

    Plain case-insensitive substring matching, so "US" also matches
    "status". Blank countries never match.
    """
    needle = normalize_country(country)
    if not needle:
        return False
    return needle in event.searchable_text().lower()
