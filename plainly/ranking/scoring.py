"""Relevance scoring: how well an event matches a user profile (0-100).

Four additive point pools, then the total is clamped to 100:

- Interest: +40 for *every* profile interest mapped to the event category.
  Two matching interests give 80; the pool is not capped on its own.
- Career: +30 if the career field maps to the event category.
- Geographic: +20 if the profile country appears in the event text.
- Recency: 10 minus whole days since creation (ceil), floored at 0.
"""

import math
from datetime import datetime
from typing import Optional

from plainly.config import RelevanceWeights
from plainly.models import Event, ScoreBreakdown, ScoredEvent, UserProfile, utcnow
from plainly.normalizers.location import event_mentions_country
from plainly.normalizers.topics import career_category, matching_interests

MAX_SCORE = 100
SECONDS_PER_DAY = 86400


def days_between(earlier: datetime, later: datetime) -> int:
    """Absolute distance in days, rounded up (1 second apart = 1 day)."""
    diff_seconds = abs((later - earlier).total_seconds())
    return math.ceil(diff_seconds / SECONDS_PER_DAY)


def clamp_score(value: int) -> int:
    return max(0, min(MAX_SCORE, value))


class RelevanceScorer:
    """Deterministic scorer. The only clock input is the explicit `now`."""

    def __init__(self, weights: Optional[RelevanceWeights] = None):
        self.weights = weights or RelevanceWeights()

    def interest_points(self, event: Event, profile: UserProfile) -> int:
        return self.weights.interest * len(matching_interests(profile.interests, event.category))

    def career_points(self, event: Event, profile: UserProfile) -> int:
        category = career_category(profile.career_field)
        if category and category == event.category:
            return self.weights.career
        return 0

    def geographic_points(self, event: Event, profile: UserProfile) -> int:
        if event_mentions_country(event, profile.country):
            return self.weights.geographic
        return 0

    def recency_points(self, event: Event, now: datetime) -> int:
        return max(0, self.weights.recency - days_between(event.created_at, now))

    def breakdown(
        self,
        event: Event,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> ScoreBreakdown:
        """Per-pool contributions, unclamped."""
        now = now or utcnow()
        return ScoreBreakdown(
            interest=self.interest_points(event, profile),
            career=self.career_points(event, profile),
            geographic=self.geographic_points(event, profile),
            recency=self.recency_points(event, now),
        )

    def score(
        self,
        event: Event,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> int:
        """Relevance of `event` for `profile`, in [0, 100]."""
        return clamp_score(self.breakdown(event, profile, now).total)

    def score_event(
        self,
        event: Event,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> ScoredEvent:
        breakdown = self.breakdown(event, profile, now)
        return ScoredEvent(event=event, score=clamp_score(breakdown.total), breakdown=breakdown)


def calculate_relevance_score(
    event: Event,
    profile: UserProfile,
    now: Optional[datetime] = None,
    weights: Optional[RelevanceWeights] = None,
) -> int:
    """Functional shortcut for `RelevanceScorer(weights).score(...)`."""
    return RelevanceScorer(weights).score(event, profile, now)
