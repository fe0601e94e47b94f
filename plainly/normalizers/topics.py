"""Profile answer -> event category mappings used for relevance scoring.

Interests can map to several categories; career fields map to at most one.
"""

from typing import Optional

# Interest -> categories it cares about
INTEREST_CATEGORY_MAP: dict[str, list[str]] = {
    "money": ["economy"],
    "health": ["health"],
    "environment": ["environment"],
    "tech": ["technology"],
    "work": ["economy", "technology"],
}

# Career field -> the single category it aligns with (None = no match)
CAREER_CATEGORY_MAP: dict[str, Optional[str]] = {
    "technology": "technology",
    "finance": "economy",
    "healthcare": "health",
    "government": "politics",
    "media": "social",
    "education": "social",
    "retail": "economy",
    "manufacturing": "economy",
    "other": None,
}


def normalize_tag(tag: str) -> str:
    """Normalize a single answer to lowercase, trimmed."""
    return tag.lower().strip()


def interest_categories(interest: str) -> list[str]:
    """Categories an interest maps to (empty if unknown)."""
    return INTEREST_CATEGORY_MAP.get(normalize_tag(interest), [])


def career_category(career_field: str) -> Optional[str]:
    """Category a career field maps to, or None."""
    return CAREER_CATEGORY_MAP.get(normalize_tag(career_field))


def matching_interests(interests: list[str], category: str) -> list[str]:
    """Interests whose mapped categories include `category`.

    Duplicates are kept: each listed interest counts on its own.
    """
    return [interest for interest in interests if category in interest_categories(interest)]
