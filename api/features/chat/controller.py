"""Controller for the Chat feature."""
from typing import List
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.chat.clients.base import CompletionClient
from api.features.chat.dtos import (
    ChatResponse,
    ConversationHistoryItem,
    SendMessageRequest,
)
from api.features.chat.repositories.conversation_repository import (
    ConversationRepository,
)
from api.features.chat.service import DEFAULT_HISTORY_LIMIT, ChatService

service_logger = structlog.get_logger("chat.service")


class ChatController:
    """Controller for chat operations - builds a request-scoped service."""

    def __init__(
        self,
        completion_client: CompletionClient,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.completion_client = completion_client
        self.history_limit = history_limit

    def _service(self, db_session: AsyncSession) -> ChatService:
        return ChatService(
            repository=ConversationRepository(db_session),
            completion_client=self.completion_client,
            logger=service_logger.bind(request_id=str(uuid4())),
            history_limit=self.history_limit,
        )

    async def send_message(
        self, request: SendMessageRequest, *, db_session: AsyncSession
    ) -> ChatResponse:
        service = self._service(db_session)
        model = await service.send_message(request.message, request.conversation_id)
        await db_session.commit()
        return ChatResponse.from_model(model)

    async def get_conversation(
        self, conversation_id: UUID, *, db_session: AsyncSession
    ) -> ChatResponse:
        model = await self._service(db_session).get_conversation(conversation_id)
        return ChatResponse.from_model(model)

    async def finish_conversation(
        self, conversation_id: UUID, *, db_session: AsyncSession
    ) -> None:
        await self._service(db_session).finish_conversation(conversation_id)
        await db_session.commit()

    async def get_conversation_history(
        self, *, db_session: AsyncSession
    ) -> List[ConversationHistoryItem]:
        items = await self._service(db_session).get_conversation_history()
        return [ConversationHistoryItem.from_model(i) for i in items]
