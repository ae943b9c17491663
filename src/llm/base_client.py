# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from readnext.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all chat completion providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic, ollama)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier."""
