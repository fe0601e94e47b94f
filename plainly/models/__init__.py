"""Data models for plainly."""

from plainly.models.profile import (
    UserProfile,
    CAREER_FIELDS,
    INTERESTS,
    RISK_TOLERANCES,
    utcnow,
)
from plainly.models.event import (
    Event,
    ScoredEvent,
    ScoreBreakdown,
    PersonalizedEvent,
    ReadReceipt,
    EVENT_CATEGORIES,
    REQUIRED_NARRATIVE_FIELDS,
    default_expiry,
)
from plainly.models.draft import (
    EventDraft,
    DRAFT_STATUSES,
    DRAFT_EDITABLE_FIELDS,
    can_transition,
)

__all__ = [
    "UserProfile",
    "CAREER_FIELDS",
    "INTERESTS",
    "RISK_TOLERANCES",
    "utcnow",
    "Event",
    "ScoredEvent",
    "ScoreBreakdown",
    "PersonalizedEvent",
    "ReadReceipt",
    "EVENT_CATEGORIES",
    "REQUIRED_NARRATIVE_FIELDS",
    "default_expiry",
    "EventDraft",
    "DRAFT_STATUSES",
    "DRAFT_EDITABLE_FIELDS",
    "can_transition",
]
