"""OpenAI chat completion client."""
import time
from typing import Any, Dict, List, Optional

import structlog
from openai import AsyncOpenAI

from api.features.chat.clients.base import FALLBACK_REPLY, CompletionClient
from api.features.chat.exceptions import CompletionError

logger = structlog.get_logger("chat.openai")


class OpenAICompletionClient(CompletionClient):
    """Relays a transcript to OpenAI chat completions.

    The SDK's own retries are disabled; a single failed or timed-out call
    aborts the request.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 1000,
        temperature: float = 0.7,
        timeout: float = 30.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        start = time.time()
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            content = self._extract_content(completion)
        except Exception as e:
            logger.error(
                "openai_completion_failed",
                model=self.model,
                error_type=type(e).__name__,
                error=str(e),
                latency_ms=int((time.time() - start) * 1000),
            )
            raise CompletionError(details={"model": self.model}) from e

        logger.info(
            "openai_completion_succeeded",
            model=self.model,
            message_count=len(messages),
            latency_ms=int((time.time() - start) * 1000),
        )
        if not content:
            logger.warning("openai_completion_empty", model=self.model)
            return FALLBACK_REPLY
        return content

    @staticmethod
    def _extract_content(completion: Any) -> Optional[str]:
        # Tolerates responses missing choices, message or content
        choices = getattr(completion, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None)
