# src/llm/adapters/anthropic_adapter.py — v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK, initialised lazily on the first call.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from readnext.llm.base_client import BaseLLMClient
from readnext.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install anthropic"
                ) from e
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or None)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        # The Messages API takes the system prompt separately.
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": m.role, "content": m.content}
                for m in messages
                if m.role != "system"
            ],
        }
        if system:
            kwargs["system"] = system

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_text(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self._model

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Concatenate the text blocks of an Anthropic response."""
        return "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )
