# src/batch/scheduler.py — v1
"""Bounded-concurrency scheduler for per-document work.

A fixed pool of min(parallel, len(items)) asyncio workers pulls items from
a shared cursor in input order. Each worker runs one item to completion
before claiming the next, so there are never more than `parallel` items in
flight and N items never spawn N concurrent calls.

Failures are recorded per item and do not stop sibling workers. There is
no cross-worker cancellation unless fail_fast is set, in which case
workers stop claiming after the first failure and the unclaimed items are
reported as skipped. Cancelling run() cancels every worker.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Sequence, TypeVar

from readnext.batch.models import DocumentOutcome
from readnext.logging.context import set_document_context

T = TypeVar("T")


class BoundedScheduler:
    """Run an async function over a sequence with bounded concurrency.

    Args:
        parallel: Maximum items in flight (1 = sequential).
        logger: Logger for per-item failures.
    """

    def __init__(self, parallel: int = 1, logger: logging.Logger | None = None) -> None:
        if parallel < 1:
            raise ValueError(f"parallel must be >= 1, got {parallel}")
        self._parallel = parallel
        self._logger = logger or logging.getLogger(__name__)

    @property
    def parallel(self) -> int:
        return self._parallel

    async def run(
        self,
        items: Sequence[T],
        fn: Callable[[T], Awaitable[object]],
        key: Callable[[T], str | None] | None = None,
        fail_fast: bool = False,
    ) -> list[DocumentOutcome]:
        """Process all items and return one outcome per item, in input order.

        Args:
            items: Items to process.
            fn: Coroutine function applied to each item.
            key: Extracts the document id used in outcomes and logs.
            fail_fast: Stop claiming new items after the first failure.
        """
        key = key or (lambda item: getattr(item, "id", None))
        outcomes: list[DocumentOutcome | None] = [None] * len(items)
        cursor = 0
        failed = False

        async def worker(worker_id: int) -> None:
            nonlocal cursor, failed
            while cursor < len(items) and not (fail_fast and failed):
                # Claiming is atomic: nothing awaits between read and increment.
                position = cursor
                cursor += 1
                item = items[position]
                document_id = key(item)
                set_document_context(document_id)

                t0 = time.perf_counter()
                try:
                    value = await fn(item)
                except Exception as e:
                    failed = True
                    self._logger.error(
                        "Worker %d failed on %s: %s", worker_id, document_id, e,
                        exc_info=self._logger.isEnabledFor(logging.DEBUG),
                    )
                    outcomes[position] = DocumentOutcome(
                        position=position,
                        document_id=document_id,
                        status="failed",
                        error=e,
                        duration_ms=_elapsed_ms(t0),
                    )
                else:
                    outcomes[position] = DocumentOutcome(
                        position=position,
                        document_id=document_id,
                        status="succeeded",
                        value=value,
                        duration_ms=_elapsed_ms(t0),
                    )

        pool_size = min(self._parallel, len(items))
        if pool_size:
            await asyncio.gather(*(worker(i) for i in range(pool_size)))

        return [
            outcome
            if outcome is not None
            else DocumentOutcome(position=i, document_id=key(items[i]), status="skipped")
            for i, outcome in enumerate(outcomes)
        ]


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)
