# src/llm/adapters/openai_adapter.py — v2
"""OpenAI chat adapter implementing BaseLLMClient.

Uses the official openai SDK. The client is created on first use so that
building a ReadNext instance never requires network access or a key.
"""

from __future__ import annotations

import time
from typing import Any

from readnext.llm.base_client import BaseLLMClient
from readnext.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """OpenAI chat completions adapter."""

    def __init__(self, model: str = "gpt-4o-mini", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError(
                    "openai package required: pip install openai"
                ) from e
            self.__client = openai.AsyncOpenAI(api_key=self._api_key or None)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(
            model=self._model,
            messages=oai_messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model
