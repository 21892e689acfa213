"""Conversation repository using base repository pattern."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from api.features.chat.entities.conversation import Conversation
from api.shared.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversation entities with lifecycle-aware queries."""

    model = Conversation

    def new_conversation(self) -> Conversation:
        """Build an unsaved, active conversation with no messages."""
        return Conversation(messages=[], is_finished=False)

    async def get_by_id_and_finished(
        self, conversation_id: UUID | str, finished: bool
    ) -> Optional[Conversation]:
        """Get conversation by ID only if its finished flag matches."""
        entities = await self.get_by_fields(
            limit=1, id=str(conversation_id), is_finished=finished
        )
        return entities[0] if entities else None

    async def list_recent(self, limit: int) -> List[Conversation]:
        """Most recently finished first; unfinished conversations sort last."""
        stmt = (
            select(Conversation)
            .order_by(
                Conversation.finished_at.desc().nulls_last(),
                Conversation.started_at.desc(),
            )
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
