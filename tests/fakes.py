"""In-memory collaborators for the chat service."""

import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from api.features.chat.clients.base import CompletionClient
from api.features.chat.entities.conversation import Conversation


class FakeCompletionClient(CompletionClient):
    """Completion client returning a canned reply and recording every call."""

    def __init__(self, reply: str = "Hello! How can I help?", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[List[Dict[str, str]]] = []

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        self.calls.append(copy.deepcopy(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class InMemoryConversationRepository:
    """Conversation store keeping snapshots, so unsaved mutations never leak in."""

    def __init__(self) -> None:
        self._rows: Dict[str, dict] = {}
        self.saves = 0

    @staticmethod
    def _build(row: dict) -> Conversation:
        return Conversation(**copy.deepcopy(row))

    def seed(
        self,
        messages: Optional[List[dict]] = None,
        is_finished: bool = False,
        started_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
    ) -> str:
        conversation_id = str(uuid4())
        now = datetime.now(timezone.utc)
        self._rows[conversation_id] = {
            "id": conversation_id,
            "messages": list(messages or []),
            "is_finished": is_finished,
            "started_at": started_at or now,
            "finished_at": finished_at,
            "updated_at": now,
        }
        return conversation_id

    def row(self, conversation_id: str) -> dict:
        return copy.deepcopy(self._rows[conversation_id])

    def __len__(self) -> int:
        return len(self._rows)

    def new_conversation(self) -> Conversation:
        return Conversation(messages=[], is_finished=False)

    async def get_by_id(self, conversation_id) -> Optional[Conversation]:
        row = self._rows.get(str(conversation_id))
        return self._build(row) if row else None

    async def get_by_id_and_finished(self, conversation_id, finished: bool) -> Optional[Conversation]:
        row = self._rows.get(str(conversation_id))
        if row is None or row["is_finished"] != finished:
            return None
        return self._build(row)

    async def list_recent(self, limit: int) -> List[Conversation]:
        finished = sorted(
            (r for r in self._rows.values() if r["finished_at"] is not None),
            key=lambda r: (r["finished_at"], r["started_at"]),
            reverse=True,
        )
        active = sorted(
            (r for r in self._rows.values() if r["finished_at"] is None),
            key=lambda r: r["started_at"],
            reverse=True,
        )
        return [self._build(r) for r in (finished + active)[:limit]]

    async def save(self, entity: Conversation) -> Conversation:
        self.saves += 1
        now = datetime.now(timezone.utc)
        if entity.id is None:
            entity.id = str(uuid4())
        if entity.started_at is None:
            entity.started_at = now
        entity.updated_at = now
        self._rows[entity.id] = {
            "id": entity.id,
            "messages": [dict(m) for m in entity.messages],
            "is_finished": bool(entity.is_finished),
            "started_at": entity.started_at,
            "finished_at": entity.finished_at,
            "updated_at": entity.updated_at,
        }
        return self._build(self._rows[entity.id])
