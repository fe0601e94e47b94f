"""Event selection: which event(s) a user sees right now.

Stateless: every call reloads the profile and the non-expired events and
rescores them. Nothing is cached between calls.
"""

from datetime import datetime
from typing import Callable, Optional

from rich.console import Console

from plainly.config import Settings
from plainly.models import Event, PersonalizedEvent, ScoredEvent, UserProfile, utcnow
from plainly.ranking.personalization import personalize_event
from plainly.ranking.scoring import RelevanceScorer
from plainly.store.base import Storage

console = Console()

DEFAULT_MIN_RELEVANCE = 20

Personalizer = Callable[..., PersonalizedEvent]


def sort_key(scored: ScoredEvent) -> tuple[int, datetime]:
    """Score desc, then newest first (used with reverse=True)."""
    return scored.score, scored.event.created_at


class EventSelector:
    """Scores candidate events for a user and picks what to show."""

    def __init__(
        self,
        storage: Storage,
        scorer: Optional[RelevanceScorer] = None,
        min_relevance_threshold: int = DEFAULT_MIN_RELEVANCE,
        personalizer: Personalizer = personalize_event,
    ):
        self.storage = storage
        self.scorer = scorer or RelevanceScorer()
        self.min_relevance_threshold = min_relevance_threshold
        self.personalizer = personalizer

    @classmethod
    def from_settings(cls, storage: Storage, settings: Settings) -> "EventSelector":
        return cls(
            storage,
            scorer=RelevanceScorer(settings.relevance_weights),
            min_relevance_threshold=settings.min_relevance_threshold,
        )

    def rank(
        self,
        profile: UserProfile,
        events: list[Event],
        now: Optional[datetime] = None,
    ) -> list[ScoredEvent]:
        """Events at or above the threshold, best first.

        Falls back to the single most recently created event when nothing
        qualifies, so a non-empty input never yields an empty ranking.
        """
        now = now or utcnow()
        scored = [self.scorer.score_event(event, profile, now) for event in events]
        survivors = [s for s in scored if s.score >= self.min_relevance_threshold]
        survivors.sort(key=sort_key, reverse=True)

        if survivors or not scored:
            return survivors

        newest = max(scored, key=lambda s: s.event.created_at)
        console.print(
            f"[dim]No event reached relevance {self.min_relevance_threshold} for {profile.id}, "
            f"falling back to newest: {newest.event.title[:50]}[/dim]"
        )
        return [newest]

    async def _load(
        self,
        user_id: str,
        now: datetime,
    ) -> tuple[Optional[UserProfile], list[Event]]:
        profile = await self.storage.get_user_profile(user_id)
        if profile is None:
            console.print(f"[yellow]No profile for user {user_id}[/yellow]")
            return None, []
        events = await self.storage.list_non_expired_events(now)
        return profile, events

    def _personalize(
        self,
        profile: UserProfile,
        ranked: list[ScoredEvent],
        min_score_met: bool,
    ) -> list[PersonalizedEvent]:
        return [
            self.personalizer(
                s.event,
                profile,
                score=s.score,
                is_fallback=not min_score_met,
            )
            for s in ranked
        ]

    async def select_top_n(
        self,
        user_id: str,
        n: int,
        now: Optional[datetime] = None,
    ) -> list[PersonalizedEvent]:
        """Up to `n` best events for the user ([] if the profile is missing)."""
        now = now or utcnow()
        profile, events = await self._load(user_id, now)
        if profile is None or n <= 0:
            return []

        ranked = self.rank(profile, events, now)
        min_score_met = bool(ranked) and ranked[0].score >= self.min_relevance_threshold
        return self._personalize(profile, ranked[:n], min_score_met)

    async def select_active_event(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[PersonalizedEvent]:
        """The single event to show now, recording a read receipt for it."""
        top = await self.select_top_n(user_id, 1, now)
        if not top:
            return None

        active = top[0]
        await self.storage.upsert_read_receipt(user_id, active.id)
        return active
