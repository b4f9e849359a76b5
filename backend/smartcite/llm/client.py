"""Chat completion client with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
"""

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Protocol

from openai import AsyncOpenAI

from backend.smartcite.config import ConfigurationError, get_settings
from backend.smartcite.models.session import Turn

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Completion service returned an unusable reply."""

    pass


class CompletionClient(Protocol):
    """Protocol for completion client implementations."""

    async def complete(
        self,
        messages: Sequence[Turn],
        *,
        temperature: float,
        model: str | None = None,
    ) -> str:
        """Generate one assistant reply for an ordered message list.

        Args:
            messages: Role-tagged conversation, oldest first
            temperature: Sampling temperature
            model: Model override (defaults to the client's model)

        Returns:
            Reply text
        """
        ...


class OpenAIClient:
    """OpenAI-compatible chat completions client."""

    def __init__(self, api_key: str, model: str = "gpt-4o", base_url: str | None = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Default model name
            base_url: Alternative endpoint for OpenAI-compatible providers
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model

    async def complete(
        self,
        messages: Sequence[Turn],
        *,
        temperature: float,
        model: str | None = None,
    ) -> str:
        """Generate reply using the chat completions API."""
        response = await self.client.chat.completions.create(
            model=model or self.model,
            messages=[turn.model_dump() for turn in messages],
            temperature=temperature,
        )

        if not response.choices:
            raise CompletionError("Completion service returned no choices")

        content = response.choices[0].message.content
        if content is None:
            raise CompletionError("Completion service returned empty content")

        return content


@lru_cache
def get_completion_client() -> CompletionClient:
    """Build the configured completion client.

    Raises:
        ConfigurationError: If no API key is configured
    """
    settings = get_settings()

    if not settings.completion_configured:
        raise ConfigurationError("OPENAI_API_KEY is not set")

    assert settings.openai_api_key is not None
    logger.info(f"Using OpenAI-compatible client, model={settings.openai_model}")
    return OpenAIClient(
        api_key=settings.openai_api_key.get_secret_value(),
        model=settings.openai_model,
        base_url=settings.openai_base_url,
    )
