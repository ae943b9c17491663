# src/pipeline/summarizer.py — v2
"""Summarizer: turns one document into the text that gets embedded.

The system prompt is the summarization prompt and the user message is the
raw document content. The prompt may be a fixed string or a callable that
builds a prompt from the document; callables are evaluated per document.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Union

from readnext.core.deadline import call_with_timeout
from readnext.core.models import Document
from readnext.llm.models import Message

if TYPE_CHECKING:
    from readnext.llm.base_client import BaseLLMClient

_PROMPT_PATH = Path(__file__).parent / "prompts" / "summarizer.txt"

SummarizationPrompt = Union[str, Callable[[Document], str]]

_default_prompt: str | None = None


def default_summarization_prompt() -> str:
    """Load and cache the built-in summarization prompt."""
    global _default_prompt
    if _default_prompt is None:
        _default_prompt = _PROMPT_PATH.read_text(encoding="utf-8").strip()
    return _default_prompt


def resolve_prompt(prompt: SummarizationPrompt, document: Document) -> str:
    """Evaluate a prompt for a document."""
    if callable(prompt):
        return prompt(document)
    return prompt


class Summarizer:
    """Summarization capability backed by a chat LLM.

    Args:
        llm: Chat completion client.
        prompt: Default summarization prompt (string or callable).
        max_tokens: Completion token budget.
        temperature: Sampling temperature.
        timeout_s: Per-call timeout (None = unbounded).
        logger: Logger for the expensive-call trail.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        prompt: SummarizationPrompt | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
        timeout_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._llm = llm
        self._prompt = prompt or default_summarization_prompt()
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout_s = timeout_s
        self._logger = logger or logging.getLogger(__name__)

    @property
    def prompt(self) -> SummarizationPrompt:
        return self._prompt

    async def summarize(
        self,
        document: Document,
        prompt: SummarizationPrompt | None = None,
    ) -> str:
        """Summarize a document. Nothing is cached here.

        Args:
            document: The source document.
            prompt: Overrides the default prompt for this call.

        Raises:
            CallTimeoutError: If the model call exceeds the timeout.
        """
        system = resolve_prompt(prompt or self._prompt, document)

        self._logger.info(
            "Generating summary for %s", document.id,
            extra={"data": {"expensive": True, "id": document.id}},
        )
        response = await call_with_timeout(
            self._llm.complete(
                messages=[Message(role="user", content=document.content)],
                system=system,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            ),
            self._timeout_s,
            operation=f"summarize {document.id}",
        )
        self._logger.info(
            "Summarization completed (%d tokens, %d ms)",
            response.output_tokens, response.latency_ms,
            extra={"data": {"id": document.id}},
        )
        return response.content
