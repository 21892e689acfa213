"""Service layer for the Chat feature.

One instance serves one request: the repository is bound to the request's
session and the logger to the request's context.
"""
from typing import List, Optional
from uuid import UUID

import structlog

from api.features.chat.clients.base import CompletionClient
from api.features.chat.entities.conversation import MessageRole
from api.features.chat.exceptions import (
    CONVERSATION_NOT_FOUND_OR_FINISHED,
    ConversationNotFoundError,
)
from api.features.chat.models import (
    ConversationModel,
    ConversationSummaryModel,
    MessageModel,
)
from api.features.chat.repositories.conversation_repository import (
    ConversationRepository,
)
from api.shared.exceptions import ValidationError

DEFAULT_HISTORY_LIMIT = 20


class ChatService:
    """Orchestrates message exchange and conversation lifecycle queries."""

    def __init__(
        self,
        repository: ConversationRepository,
        completion_client: CompletionClient,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.repository = repository
        self.completion_client = completion_client
        self.logger = logger or structlog.get_logger("chat.service")
        self.history_limit = history_limit

    async def send_message(
        self, message: str, conversation_id: Optional[UUID | str] = None
    ) -> ConversationModel:
        """Append a user turn, relay the transcript upstream, append the reply."""
        log = self.logger.bind(
            operation="send_message",
            conversation_id=str(conversation_id) if conversation_id else None,
        )
        try:
            if not message:
                raise ValidationError("message must not be empty")

            if conversation_id:
                conversation = await self.repository.get_by_id(conversation_id)
                if conversation is None:
                    log.warning("conversation_not_found")
                    raise ConversationNotFoundError(
                        str(conversation_id), CONVERSATION_NOT_FOUND_OR_FINISHED
                    )
                log.info("conversation_loaded", message_count=len(conversation.messages))
            else:
                conversation = self.repository.new_conversation()
                log.info("conversation_created")

            conversation.messages.append(
                MessageModel(role=MessageRole.USER, content=message).to_record()
            )

            prompt = [
                MessageModel.model_validate(m).to_prompt() for m in conversation.messages
            ]
            log.info("completion_requested", message_count=len(prompt))
            reply = await self.completion_client.complete(prompt)

            conversation.messages.append(
                MessageModel(role=MessageRole.ASSISTANT, content=reply).to_record()
            )

            saved = await self.repository.save(conversation)
            log.info("conversation_saved", saved_id=str(saved.id))
            return ConversationModel.from_entity(saved)
        except Exception as e:
            log.error("send_message_failed", error_type=type(e).__name__, error=str(e))
            raise

    async def get_conversation(self, conversation_id: UUID | str) -> ConversationModel:
        """Fetch one conversation with its full transcript."""
        log = self.logger.bind(
            operation="get_conversation", conversation_id=str(conversation_id)
        )
        try:
            conversation = await self.repository.get_by_id(conversation_id)
            if conversation is None:
                log.warning("conversation_not_found")
                raise ConversationNotFoundError(str(conversation_id))

            log.info("conversation_loaded", message_count=len(conversation.messages))
            return ConversationModel.from_entity(conversation)
        except Exception as e:
            log.error("get_conversation_failed", error_type=type(e).__name__, error=str(e))
            raise

    async def finish_conversation(self, conversation_id: UUID | str) -> None:
        """Close an active conversation; unknown and finished ids both fail."""
        log = self.logger.bind(
            operation="finish_conversation", conversation_id=str(conversation_id)
        )
        try:
            conversation = await self.repository.get_by_id_and_finished(
                conversation_id, finished=False
            )
            if conversation is None:
                log.warning("conversation_not_found_or_finished")
                raise ConversationNotFoundError(
                    str(conversation_id), CONVERSATION_NOT_FOUND_OR_FINISHED
                )

            conversation.finish()
            await self.repository.save(conversation)
            log.info("conversation_finished")
        except Exception as e:
            log.error("finish_conversation_failed", error_type=type(e).__name__, error=str(e))
            raise

    async def get_conversation_history(self) -> List[ConversationSummaryModel]:
        """Summaries of the most recently finished conversations."""
        log = self.logger.bind(operation="get_conversation_history")
        try:
            conversations = await self.repository.list_recent(self.history_limit)
            log.info("history_loaded", count=len(conversations))
            return [ConversationSummaryModel.from_entity(c) for c in conversations]
        except Exception as e:
            log.error("get_conversation_history_failed", error_type=type(e).__name__, error=str(e))
            raise
