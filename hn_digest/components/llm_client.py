"""
Completion client for OpenAI-compatible chat endpoints.

OpenAI, Groq and a local Ollama server all expose the same
chat-completions API, so a single client pointed at the provider's base
URL covers every ProviderName.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import openai

from ..models.config import ProviderConfig

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Raw response from the completion provider."""

    content: str
    model: str
    base_url: str
    response_time: float
    tokens_used: Optional[int] = None


class OpenAICompatibleClient:
    """Single-attempt chat completion against one configured provider."""

    def __init__(
        self,
        provider: ProviderConfig,
        timeout: float = 120.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize completion client.

        Args:
            provider: Active provider settings
            timeout: Request timeout in seconds
            client: Pre-built ``openai.AsyncOpenAI`` (tests inject a mock)
        """
        self.provider = provider
        self.model = provider.model
        self.timeout = timeout
        self.client = client or openai.AsyncOpenAI(
            api_key=provider.api_key,
            base_url=provider.base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, prompt: str) -> LLMResponse:
        """
        Send ``prompt`` as a single user message.

        Returns:
            LLMResponse whose content is the first choice's message text,
            or an empty string when the provider returned none.
        """
        start_time = time.time()

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )

        content = ""
        if response.choices:
            message = response.choices[0].message
            content = (message.content if message is not None else None) or ""

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            model=self.model,
            base_url=self.provider.base_url,
            response_time=time.time() - start_time,
            tokens_used=getattr(usage, "total_tokens", None) if usage else None,
        )
