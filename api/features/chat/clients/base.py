"""Completion client interface. All upstream providers must implement this."""
from abc import ABC, abstractmethod
from typing import Dict, List

FALLBACK_REPLY = "Sorry, I could not generate a response."


class CompletionClient(ABC):
    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """Return the next assistant turn for a role/content transcript.

        Implementations return FALLBACK_REPLY when the upstream yields no
        usable content and raise CompletionError on any upstream failure.
        """
        ...
