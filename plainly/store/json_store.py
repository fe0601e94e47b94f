"""File-backed record store.

Keeps profiles, events, read receipts and drafts in one JSON document,
rewritten on every mutation. Good enough for the CLI and for tests; the
app proper talks to its hosted backend through the same interface.
"""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.console import Console

from plainly.config import DEFAULT_STORE_PATH
from plainly.errors import DraftNotFoundError, StorageError
from plainly.models import Event, EventDraft, ReadReceipt, UserProfile, utcnow
from plainly.store.base import Storage

console = Console()


def new_id() -> str:
    return str(uuid.uuid4())


class JSONStore(Storage):
    """Persistent store backed by a single JSON file."""

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path or DEFAULT_STORE_PATH)
        self._profiles: dict[str, UserProfile] = {}
        self._events: dict[str, Event] = {}
        self._reads: dict[tuple[str, str], ReadReceipt] = {}
        self._drafts: dict[str, EventDraft] = {}
        self._load()

    def _load(self) -> None:
        """Load store from disk. A missing file is an empty store."""
        if not self.store_path.exists():
            return
        try:
            with open(self.store_path) as f:
                data = json.load(f)
            for row in data.get("profiles", []):
                profile = UserProfile.model_validate(row)
                self._profiles[profile.id] = profile
            for row in data.get("events", []):
                event = Event.model_validate(row)
                self._events[event.id] = event
            for row in data.get("reads", []):
                receipt = ReadReceipt.model_validate(row)
                self._reads[(receipt.user_id, receipt.event_id)] = receipt
            for row in data.get("drafts", []):
                draft = EventDraft.model_validate(row)
                self._drafts[draft.id] = draft
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load store {self.store_path}: {e}") from e
        console.print(
            f"[dim]Loaded store: {len(self._profiles)} profiles, {len(self._events)} events, "
            f"{len(self._drafts)} drafts[/dim]"
        )

    def _save(self) -> None:
        """Save store to disk."""
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.store_path, "w") as f:
                json.dump({
                    "updated_at": utcnow().isoformat(),
                    "profiles": [p.model_dump(mode="json") for p in self._profiles.values()],
                    "events": [e.model_dump(mode="json") for e in self._events.values()],
                    "reads": [r.model_dump(mode="json") for r in self._reads.values()],
                    "drafts": [d.model_dump(mode="json") for d in self._drafts.values()],
                }, f, indent=2)
        except OSError as e:
            raise StorageError(f"Failed to write store {self.store_path}: {e}") from e

    # ===== PROFILES =====

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(user_id)

    async def upsert_user_profile(self, profile: UserProfile) -> UserProfile:
        existing = self._profiles.get(profile.id)
        if existing:
            profile = profile.model_copy(update={"created_at": existing.created_at, "updated_at": utcnow()})
        self._profiles[profile.id] = profile
        self._save()
        return profile

    # ===== EVENTS =====

    async def list_non_expired_events(self, now: datetime) -> list[Event]:
        active = [event for event in self._events.values() if event.expires_at > now]
        active.sort(key=lambda e: e.created_at, reverse=True)
        return active

    async def get_event(self, event_id: str) -> Optional[Event]:
        return self._events.get(event_id)

    async def insert_event(self, fields: dict[str, Any]) -> Event:
        now = utcnow()
        try:
            event = Event.model_validate({"created_at": now, "updated_at": now, **fields, "id": new_id()})
        except ValidationError as e:
            raise StorageError(f"Event rejected by store: {e}") from e
        self._events[event.id] = event
        self._save()
        return event

    # ===== READ RECEIPTS =====

    async def upsert_read_receipt(self, user_id: str, event_id: str) -> ReadReceipt:
        key = (user_id, event_id)
        if key in self._reads:
            return self._reads[key]
        receipt = ReadReceipt(user_id=user_id, event_id=event_id)
        self._reads[key] = receipt
        self._save()
        return receipt

    async def list_read_receipts(self, user_id: str) -> list[ReadReceipt]:
        return [r for (uid, _), r in self._reads.items() if uid == user_id]

    # ===== DRAFTS =====

    async def insert_draft(self, fields: dict[str, Any]) -> EventDraft:
        now = utcnow()
        try:
            draft = EventDraft.model_validate({"created_at": now, "updated_at": now, **fields, "id": new_id()})
        except ValidationError as e:
            raise StorageError(f"Draft rejected by store: {e}") from e
        self._drafts[draft.id] = draft
        self._save()
        return draft

    async def get_draft(self, draft_id: str) -> Optional[EventDraft]:
        return self._drafts.get(draft_id)

    async def update_draft(self, draft_id: str, fields: dict[str, Any]) -> EventDraft:
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        try:
            updated = EventDraft.model_validate({
                **draft.model_dump(),
                **fields,
                "id": draft.id,
                "created_at": draft.created_at,
                "updated_at": utcnow(),
            })
        except ValidationError as e:
            raise StorageError(f"Draft update rejected by store: {e}") from e
        self._drafts[draft_id] = updated
        self._save()
        return updated

    async def list_drafts(self, status: Optional[str] = None) -> list[EventDraft]:
        drafts = [d for d in self._drafts.values() if status is None or d.status == status]
        drafts.sort(key=lambda d: d.created_at, reverse=True)
        return drafts

    async def delete_draft(self, draft_id: str) -> bool:
        if draft_id not in self._drafts:
            return False
        del self._drafts[draft_id]
        self._save()
        return True

    def stats(self) -> dict:
        """Get store statistics."""
        by_status: dict[str, int] = {}
        for draft in self._drafts.values():
            by_status[draft.status] = by_status.get(draft.status, 0) + 1
        return {
            "profiles": len(self._profiles),
            "events": len(self._events),
            "reads": len(self._reads),
            "drafts": len(self._drafts),
            "drafts_by_status": by_status,
        }
