"""DTOs for the Chat feature."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from api.features.chat.entities.conversation import MessageRole
from api.features.chat.models import ConversationModel, ConversationSummaryModel
from api.shared.dtos import CamelDTO


class SendMessageRequest(CamelDTO):
    """Send a user message, optionally continuing a conversation."""

    message: str = Field(min_length=1, description="User message text")
    conversation_id: Optional[UUID] = Field(
        default=None, description="Existing conversation to continue"
    )


class MessageDTO(CamelDTO):
    """Conversation message DTO."""

    id: str = Field(description="Message identifier")
    role: MessageRole = Field(description="Message role: user or assistant")
    content: str = Field(description="Message content")
    timestamp: datetime = Field(description="Message creation time")


class ChatResponse(CamelDTO):
    """Conversation identifier and its messages in transcript order."""

    conversation_id: str = Field(description="Conversation identifier")
    messages: List[MessageDTO] = Field(description="Messages in transcript order")

    @classmethod
    def from_model(cls, model: ConversationModel) -> "ChatResponse":
        return cls(
            conversation_id=model.conversation_id,
            messages=[MessageDTO(**m.model_dump()) for m in model.messages],
        )


class ConversationHistoryItem(CamelDTO):
    """History summary of one conversation."""

    id: str = Field(description="Conversation identifier")
    started_at: datetime = Field(description="Creation timestamp")
    finished_at: Optional[datetime] = Field(default=None, description="Finish timestamp")
    message_count: int = Field(description="Number of messages")
    last_message: str = Field(description="Content of the final message, or empty")

    @classmethod
    def from_model(cls, model: ConversationSummaryModel) -> "ConversationHistoryItem":
        return cls(**model.model_dump())
