"""Draft lifecycle: extracting -> draft -> published | rejected.

Drafts hold AI output for admin review. Their fields are not validated
until publish time, which goes through the same contract as manual event
creation.
"""

from datetime import datetime
from typing import Any, Optional

from rich.console import Console

from plainly.errors import DraftNotFoundError, DraftStateError
from plainly.events import DEFAULT_EXPIRES_IN_DAYS, create_event
from plainly.llm.schema import ExtractedEventData
from plainly.models import DRAFT_EDITABLE_FIELDS, Event, EventDraft, can_transition
from plainly.store.base import Storage

console = Console()


def editable_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Keep only known narrative keys. None values are kept (they clear a field)."""
    unknown = set(fields) - set(DRAFT_EDITABLE_FIELDS) - {"status"}
    if unknown:
        raise DraftStateError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
    return {k: v for k, v in fields.items() if k in DRAFT_EDITABLE_FIELDS}


class DraftService:
    """Create, edit, list, publish and reject drafts."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def get(self, draft_id: str) -> EventDraft:
        draft = await self.storage.get_draft(draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        return draft

    async def start(self, source_url: str, admin_id: Optional[str] = None) -> EventDraft:
        """Placeholder draft while extraction runs."""
        return await self.storage.insert_draft({
            "source_url": source_url,
            "admin_id": admin_id,
            "status": "extracting",
        })

    async def create(
        self,
        source_url: str,
        extracted_payload: Optional[dict[str, Any]] = None,
        fields: Optional[dict[str, Any]] = None,
        admin_id: Optional[str] = None,
    ) -> EventDraft:
        """New draft in `draft` status, optionally pre-filled."""
        draft = await self.storage.insert_draft({
            **editable_fields(fields or {}),
            "source_url": source_url,
            "admin_id": admin_id,
            "extracted_data": extracted_payload,
            "status": "draft",
        })
        console.print(f"[dim]Saved draft {draft.id} for {source_url[:60]}[/dim]")
        return draft

    async def create_from_extraction(
        self,
        source_url: str,
        data: ExtractedEventData,
        payload: Optional[dict[str, Any]] = None,
        admin_id: Optional[str] = None,
    ) -> EventDraft:
        return await self.create(
            source_url,
            extracted_payload=payload if payload is not None else data.model_dump(),
            fields=data.to_draft_fields(),
            admin_id=admin_id,
        )

    async def complete(
        self,
        draft_id: str,
        data: ExtractedEventData,
        payload: Optional[dict[str, Any]] = None,
    ) -> EventDraft:
        """Fill an `extracting` draft with model output and move it to `draft`."""
        draft = await self.get(draft_id)
        self._check_transition(draft, "draft")
        return await self.storage.update_draft(draft_id, {
            **data.to_draft_fields(),
            "extracted_data": payload if payload is not None else data.model_dump(),
            "status": "draft",
        })

    async def update(self, draft_id: str, fields: dict[str, Any]) -> EventDraft:
        """Partial update: keys not given are left untouched.

        A `status` key is applied through the transition table. Publishing
        is refused here; it has to go through `publish`, which validates.
        """
        draft = await self.get(draft_id)
        if draft.is_terminal:
            raise DraftStateError(f"Draft {draft_id} is {draft.status} and can no longer be edited")

        updates = editable_fields(fields)
        status = fields.get("status")
        if status is not None and status != draft.status:
            if status == "published":
                raise DraftStateError(f"Draft {draft_id} must be published with publish(), not update()")
            self._check_transition(draft, status)
            updates["status"] = status

        if not updates:
            return draft
        return await self.storage.update_draft(draft_id, updates)

    async def list_drafts(self, status: Optional[str] = None) -> list[EventDraft]:
        return await self.storage.list_drafts(status)

    async def delete(self, draft_id: str) -> bool:
        deleted = await self.storage.delete_draft(draft_id)
        if not deleted:
            raise DraftNotFoundError(draft_id)
        return True

    async def publish(
        self,
        draft_id: str,
        expires_in_days: int = DEFAULT_EXPIRES_IN_DAYS,
        now: Optional[datetime] = None,
    ) -> tuple[Event, EventDraft]:
        """Validate the draft as an event, insert it, mark the draft published.

        Raises:
            EventValidationError: the draft is incomplete (draft is unchanged).
            DraftStateError: the draft is not in `draft` status.
        """
        draft = await self.get(draft_id)
        self._check_transition(draft, "published")

        event = await create_event(self.storage, draft.narrative_fields(), expires_in_days, now)
        draft = await self.storage.update_draft(draft_id, {
            "status": "published",
            "published_event_id": event.id,
        })
        return event, draft

    async def reject(self, draft_id: str) -> EventDraft:
        draft = await self.get(draft_id)
        self._check_transition(draft, "rejected")
        return await self.storage.update_draft(draft_id, {"status": "rejected"})

    @staticmethod
    def _check_transition(draft: EventDraft, target: str) -> None:
        if not can_transition(draft.status, target):
            raise DraftStateError(f"Cannot move draft {draft.id} from {draft.status} to {target}")
