"""Event models: published events and their per-user derived forms."""

import math
from datetime import date, datetime, timedelta
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

from plainly.models.profile import utcnow

EventCategory = Literal[
    "politics",
    "economy",
    "technology",
    "health",
    "environment",
    "international",
    "social",
]
EVENT_CATEGORIES: list[str] = list(get_args(EventCategory))

# Narrative fields an event cannot be published without
REQUIRED_NARRATIVE_FIELDS = ["title", "what_happened", "why_people_care", "what_this_means"]

SECONDS_PER_DAY = 86400


class Event(BaseModel):
    """A published, time-bounded piece of content."""

    id: str
    title: str
    date: date
    category: EventCategory
    what_happened: str
    why_people_care: str
    what_this_means: str  # Base implications, personalized at read time
    what_likely_does_not_change: Optional[str] = None
    expires_at: datetime
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Config:
        extra = "ignore"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Expired once `expires_at` is not strictly in the future."""
        return self.expires_at <= (now or utcnow())

    def days_until_expiry(self, now: Optional[datetime] = None) -> int:
        """Whole days left before expiry (0 once expired)."""
        diff_seconds = (self.expires_at - (now or utcnow())).total_seconds()
        return max(0, math.ceil(diff_seconds / SECONDS_PER_DAY))

    def searchable_text(self) -> str:
        """Title and the three required narrative fields, space-joined."""
        return f"{self.title} {self.what_happened} {self.why_people_care} {self.what_this_means}"


class ScoreBreakdown(BaseModel):
    """Points contributed by each relevance pool before clamping."""

    interest: int = 0
    career: int = 0
    geographic: int = 0
    recency: int = 0

    @property
    def total(self) -> int:
        return self.interest + self.career + self.geographic + self.recency


class ScoredEvent(BaseModel):
    """An event paired with its relevance score for one profile. Never persisted."""

    event: Event
    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)


class PersonalizedEvent(Event):
    """An event as shown to a specific user."""

    personalized_what_this_means: str
    relevance_score: Optional[int] = None
    is_fallback: bool = False  # True if nothing cleared the relevance threshold


class ReadReceipt(BaseModel):
    """Marks that a user has been shown an event."""

    user_id: str
    event_id: str
    read_at: datetime = Field(default_factory=utcnow)


def default_expiry(days: int, now: Optional[datetime] = None) -> datetime:
    """Expiry timestamp `days` from now."""
    return (now or utcnow()) + timedelta(days=days)
