# src/core/deadline.py — v1
"""Per-call timeouts for external service calls.

Nothing is retried here: a call that exceeds its budget fails once with
CallTimeoutError and the caller decides what to do.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallTimeoutError(TimeoutError):
    """An external call did not complete within its configured timeout."""

    def __init__(self, operation: str, timeout_s: float):
        self.operation = operation
        self.timeout_s = timeout_s
        super().__init__(f"'{operation}' timed out after {timeout_s:.1f}s")


async def call_with_timeout(
    awaitable: Awaitable[T],
    timeout_s: float | None,
    operation: str = "external call",
) -> T:
    """Await an external call, bounded by timeout_s when one is configured.

    Args:
        awaitable: The pending call.
        timeout_s: Timeout in seconds. None waits indefinitely.
        operation: Label used in the error and log message.

    Raises:
        CallTimeoutError: If the call exceeds timeout_s.
    """
    if timeout_s is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as e:
        logger.warning("%s timed out after %.1fs", operation, timeout_s)
        raise CallTimeoutError(operation, timeout_s) from e
