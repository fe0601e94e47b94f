"""Event draft model - the editable precursor of a published event."""

from datetime import datetime
from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, Field

from plainly.models.profile import utcnow

DraftStatus = Literal["extracting", "draft", "published", "rejected"]
DRAFT_STATUSES: list[str] = list(get_args(DraftStatus))

# Allowed forward moves. Terminal states have no outgoing edges.
DRAFT_TRANSITIONS: dict[str, set[str]] = {
    "extracting": {"draft", "rejected"},
    "draft": {"published", "rejected"},
    "published": set(),
    "rejected": set(),
}
TERMINAL_STATUSES = {"published", "rejected"}

# Fields an admin may edit on a draft
DRAFT_EDITABLE_FIELDS = [
    "title",
    "date",
    "category",
    "what_happened",
    "why_people_care",
    "what_this_means",
    "what_likely_does_not_change",
]


class EventDraft(BaseModel):
    """AI-extracted event content awaiting review.

    Narrative fields are all optional and unvalidated; they are checked
    only when the draft is published.
    """

    id: str
    admin_id: Optional[str] = None
    source_url: str
    extracted_data: Optional[dict[str, Any]] = None  # Raw model payload, opaque

    title: Optional[str] = None
    date: Optional[str] = None  # "2026-01-15", kept as typed by the admin
    category: Optional[str] = None
    what_happened: Optional[str] = None
    why_people_care: Optional[str] = None
    what_this_means: Optional[str] = None
    what_likely_does_not_change: Optional[str] = None

    status: DraftStatus = "draft"
    published_event_id: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Config:
        extra = "ignore"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def narrative_fields(self) -> dict[str, Any]:
        """The editable content fields, as a plain dict."""
        return {name: getattr(self, name) for name in DRAFT_EDITABLE_FIELDS}


def can_transition(current: str, target: str) -> bool:
    """True if a draft may move from `current` to `target`."""
    return target in DRAFT_TRANSITIONS.get(current, set())
