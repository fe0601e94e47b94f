"""Event creation: the single contract both manual entry and draft publishing go through."""

from datetime import datetime
from typing import Any, Optional

from rich.console import Console

from plainly.llm.parse import as_text, check_event_fields, normalize_date
from plainly.models import Event, default_expiry
from plainly.store.base import Storage

console = Console()

DEFAULT_EXPIRES_IN_DAYS = 7

EVENT_FIELDS = [
    "title",
    "date",
    "category",
    "what_happened",
    "why_people_care",
    "what_this_means",
    "what_likely_does_not_change",
]


def build_event_fields(
    fields: dict[str, Any],
    expires_in_days: int = DEFAULT_EXPIRES_IN_DAYS,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Validate `fields` and shape them for `Storage.insert_event`.

    Raises:
        EventValidationError: (or a subclass) listing every violation.
    """
    check_event_fields(fields)
    optional = as_text(fields.get("what_likely_does_not_change"))
    return {
        "title": as_text(fields["title"]),
        "date": normalize_date(fields.get("date")),
        "category": fields["category"],
        "what_happened": as_text(fields["what_happened"]),
        "why_people_care": as_text(fields["why_people_care"]),
        "what_this_means": as_text(fields["what_this_means"]),
        "what_likely_does_not_change": optional or None,
        "expires_at": default_expiry(expires_in_days, now),
    }


async def create_event(
    storage: Storage,
    fields: dict[str, Any],
    expires_in_days: int = DEFAULT_EXPIRES_IN_DAYS,
    now: Optional[datetime] = None,
) -> Event:
    """Validate and insert a new event."""
    event = await storage.insert_event(build_event_fields(fields, expires_in_days, now))
    console.print(
        f"[green]Created event:[/green] {event.title[:50]} "
        f"[dim](expires in {event.days_until_expiry()} days)[/dim]"
    )
    return event
