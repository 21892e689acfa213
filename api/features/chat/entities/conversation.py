"""Conversation entity: a persisted chat transcript with a finish lifecycle."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, utcnow


class MessageRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Conversation(BaseEntity):
    """Conversation entity; messages are stored inline as a JSON list."""

    # In-place appends must mark the row dirty
    messages: Mapped[List[Dict[str, Any]]] = mapped_column(
        MutableList.as_mutable(JSON().with_variant(JSONB(), "postgresql")),
        nullable=False,
        default=list,
    )
    is_finished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_conversation_finished_at", "finished_at"),
    )

    def finish(self) -> None:
        """Mark the conversation finished."""
        self.is_finished = True
        self.finished_at = utcnow()

    def last_message_content(self) -> str:
        """Content of the final message, or empty string if there is none."""
        if not self.messages:
            return ""
        return self.messages[-1].get("content") or ""
