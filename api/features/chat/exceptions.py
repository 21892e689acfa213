"""Exceptions for the Chat feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import ExternalServiceError, NotFoundError

CONVERSATION_NOT_FOUND = "Conversation not found"
CONVERSATION_NOT_FOUND_OR_FINISHED = "Conversation not found or already finished"
COMPLETION_FAILED = "Internal server error while processing message"


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation is absent, or absent under the active filter."""

    def __init__(self, conversation_id: str, message: str = CONVERSATION_NOT_FOUND):
        super().__init__("Conversation", str(conversation_id), message)
        self.error_code = "CONVERSATION_NOT_FOUND"


class CompletionError(ExternalServiceError):
    """Raised when the completion upstream fails or times out.

    The message is fixed so upstream error detail never reaches the caller.
    """

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__("openai", COMPLETION_FAILED, details)
        self.error_code = "COMPLETION_ERROR"
