"""User profile model (onboarding answers + flags)."""

from datetime import datetime, timezone
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

CareerField = Literal[
    "technology",
    "finance",
    "healthcare",
    "education",
    "government",
    "media",
    "retail",
    "manufacturing",
    "other",
]
Interest = Literal["money", "work", "health", "environment", "tech"]
RiskTolerance = Literal["low", "medium", "high"]

CAREER_FIELDS: list[str] = list(get_args(CareerField))
INTERESTS: list[str] = list(get_args(Interest))
RISK_TOLERANCES: list[str] = list(get_args(RiskTolerance))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(BaseModel):
    """A user's preferences as collected during onboarding."""

    id: str
    email: Optional[str] = None
    country: str = ""  # Free text, e.g. "France"
    career_field: CareerField = "other"
    interests: list[Interest] = Field(default_factory=list)
    risk_tolerance: RiskTolerance = "medium"
    onboarding_completed: bool = False
    is_admin: bool = False  # Only ever set outside the app
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Config:
        extra = "ignore"
