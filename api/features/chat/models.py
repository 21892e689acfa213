"""Domain models for the Chat feature."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from api.features.chat.entities.conversation import (
    Conversation as ConversationEntity,
    MessageRole,
)


class MessageModel(BaseModel):
    """One turn of a conversation as stored in the messages column."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Message identifier")
    role: MessageRole = Field(description="Speaker role")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation time",
    )

    def to_record(self) -> Dict[str, Any]:
        """JSON-safe dict for the messages column."""
        return self.model_dump(mode="json")

    def to_prompt(self) -> Dict[str, str]:
        """Role/content projection sent upstream."""
        return {"role": self.role.value, "content": self.content}


class ConversationModel(BaseModel):
    """Conversation identifier plus its full transcript."""

    conversation_id: str = Field(description="Conversation identifier")
    messages: List[MessageModel] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: ConversationEntity) -> "ConversationModel":
        """Create model from database entity."""
        return cls(
            conversation_id=str(entity.id),
            messages=[MessageModel.model_validate(m) for m in entity.messages or []],
        )


class ConversationSummaryModel(BaseModel):
    """Reduced projection of a conversation used for history listings."""

    id: str = Field(description="Conversation identifier")
    started_at: datetime = Field(description="Creation timestamp")
    finished_at: Optional[datetime] = Field(default=None, description="Finish timestamp")
    message_count: int = Field(description="Number of messages")
    last_message: str = Field(description="Content of the final message, or empty")

    @classmethod
    def from_entity(cls, entity: ConversationEntity) -> "ConversationSummaryModel":
        """Create summary from database entity."""
        return cls(
            id=str(entity.id),
            started_at=entity.started_at,
            finished_at=entity.finished_at,
            message_count=len(entity.messages or []),
            last_message=entity.last_message_content(),
        )
