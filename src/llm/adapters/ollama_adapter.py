# src/llm/adapters/ollama_adapter.py — v3
"""Ollama local LLM adapter implementing BaseLLMClient.

One AsyncClient is kept per adapter, so concurrent summaries share the
underlying HTTP connection pool.
"""

from __future__ import annotations

import time
from typing import Any

from readnext.llm.base_client import BaseLLMClient
from readnext.llm.models import LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self, model: str = "llama3", base_url: str = "http://localhost:11434", **kwargs: Any,
    ):
        self._model = model
        self._host = base_url
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import ollama
            except ImportError as e:
                raise ImportError("ollama package required: pip install ollama") from e
            self.__client = ollama.AsyncClient(host=self._host)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        chat: list[dict[str, str]] = [{"role": "system", "content": system}] if system else []
        chat.extend({"role": m.role, "content": m.content} for m in messages)

        t0 = time.monotonic()
        resp = await self._client.chat(
            model=self._model,
            messages=chat,
            options={"num_predict": max_tokens, "temperature": temperature},
        )
        latency = int((time.monotonic() - t0) * 1000)

        return LLMResponse(
            content=resp["message"]["content"],
            input_tokens=resp.get("prompt_eval_count", 0) or 0,
            output_tokens=resp.get("eval_count", 0) or 0,
            model=self._model,
            provider="ollama",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model
