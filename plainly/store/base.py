"""Record store interface consumed by the selector and draft lifecycle.

All operations are coroutines: in production they are network round-trips
to the hosted backend.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from plainly.models import Event, EventDraft, ReadReceipt, UserProfile


class Storage(ABC):
    """Query/insert/update surface over profiles, events, read receipts and drafts."""

    # ===== PROFILES =====

    @abstractmethod
    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """Profile for `user_id`, or None if the user has none yet."""

    @abstractmethod
    async def upsert_user_profile(self, profile: UserProfile) -> UserProfile:
        ...

    # ===== EVENTS =====

    @abstractmethod
    async def list_non_expired_events(self, now: datetime) -> list[Event]:
        """Events with `expires_at` strictly after `now`, newest first."""

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[Event]:
        ...

    @abstractmethod
    async def insert_event(self, fields: dict[str, Any]) -> Event:
        """Create an event; the store assigns id and timestamps."""

    # ===== READ RECEIPTS =====

    @abstractmethod
    async def upsert_read_receipt(self, user_id: str, event_id: str) -> ReadReceipt:
        """Record that `user_id` saw `event_id`. Repeating it is a no-op."""

    @abstractmethod
    async def list_read_receipts(self, user_id: str) -> list[ReadReceipt]:
        ...

    # ===== DRAFTS =====

    @abstractmethod
    async def insert_draft(self, fields: dict[str, Any]) -> EventDraft:
        ...

    @abstractmethod
    async def get_draft(self, draft_id: str) -> Optional[EventDraft]:
        ...

    @abstractmethod
    async def update_draft(self, draft_id: str, fields: dict[str, Any]) -> EventDraft:
        """Apply `fields` to an existing draft. Raises DraftNotFoundError."""

    @abstractmethod
    async def list_drafts(self, status: Optional[str] = None) -> list[EventDraft]:
        """Drafts, newest first, optionally filtered by status."""

    @abstractmethod
    async def delete_draft(self, draft_id: str) -> bool:
        """True if a draft was removed."""
