"""Parse and validate raw model output.

Backend-agnostic: the same rules apply whichever provider produced the text.
"""

import json
import re
from datetime import date
from typing import Any, Optional

from rich.console import Console

from plainly.errors import (
    EventValidationError,
    InvalidCategoryError,
    MissingFieldsError,
    ParseError,
)
from plainly.llm.schema import ExtractedEventData, today_iso
from plainly.models import EVENT_CATEGORIES, REQUIRED_NARRATIVE_FIELDS

console = Console()

FENCE_START_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_END_RE = re.compile(r"\s*```$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` and a trailing ``` if present."""
    cleaned = text.strip()
    cleaned = FENCE_START_RE.sub("", cleaned)
    cleaned = FENCE_END_RE.sub("", cleaned)
    return cleaned.strip()


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse a JSON object out of an LLM response.

    Tries the fence-stripped text as-is, then the greedy span from the
    first "{" to the last "}".

    Raises:
        ParseError: no JSON object could be recovered.
    """
    cleaned = strip_code_fences(content or "")

    candidates = [cleaned]
    match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    if match and match.group(0) != cleaned:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    console.print(f"[red]Unparseable model output:[/red] [dim]{(content or '')[:500]!r}[/dim]")
    raise ParseError(
        "Failed to parse AI response as JSON. The AI may have returned invalid data.",
        raw_text=content or "",
    )


def is_blank(value: Any) -> bool:
    """Absent, null, or a whitespace-only string."""
    return value is None or (isinstance(value, str) and not value.strip())


def check_event_fields(payload: dict[str, Any]) -> None:
    """Enforce the event contract, reporting every violation at once.

    Raises:
        MissingFieldsError: only required fields are missing.
        InvalidCategoryError: only the category is wrong.
        EventValidationError: both kinds of violation.
    """
    missing = [name for name in REQUIRED_NARRATIVE_FIELDS if is_blank(payload.get(name))]
    category = payload.get("category")
    category_ok = isinstance(category, str) and category in EVENT_CATEGORIES

    if not missing and category_ok:
        return

    if missing and category_ok:
        raise MissingFieldsError(missing_fields=missing)
    if not missing:
        raise InvalidCategoryError(invalid_category=category, allowed_categories=EVENT_CATEGORIES)
    raise EventValidationError(
        missing_fields=missing,
        invalid_category=category,
        allowed_categories=EVENT_CATEGORIES,
    )


def normalize_date(value: Any, today: Optional[date] = None) -> str:
    """YYYY-MM-DD date, defaulting to today when absent or unreadable."""
    if isinstance(value, str) and ISO_DATE_RE.match(value.strip()):
        try:
            return date.fromisoformat(value.strip()).isoformat()
        except ValueError:
            pass
    if not is_blank(value):
        console.print(f"[yellow]Unrecognised date {value!r}, using today[/yellow]")
    return today_iso(today)


def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text.strip()


def validate_extracted_data(
    payload: dict[str, Any],
    today: Optional[date] = None,
) -> ExtractedEventData:
    """Validate a parsed payload and fill the date default."""
    check_event_fields(payload)
    optional = as_text(payload.get("what_likely_does_not_change"))
    return ExtractedEventData(
        title=as_text(payload["title"]),
        date=normalize_date(payload.get("date"), today),
        category=payload["category"],
        what_happened=as_text(payload["what_happened"]),
        why_people_care=as_text(payload["why_people_care"]),
        what_this_means=as_text(payload["what_this_means"]),
        what_likely_does_not_change=optional or None,
    )
