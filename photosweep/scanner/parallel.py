"""
Parallel processing module for the scanner package.

Runs a list of coroutine factories on a fixed pool of asyncio workers that
pull from a shared cursor, with cooperative cancellation.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from ..state import CancellationToken
from .dependencies import _logger

T = TypeVar('T')


async def run_bounded(
    tasks: Sequence[Callable[[], Awaitable[T]]],
    limit: int,
    token: Optional[CancellationToken] = None,
    label: str = 'Task',
) -> list[Optional[T]]:
    """
    Run tasks with at most limit of them in flight.

    Each of min(limit, len(tasks)) workers repeatedly claims the next task
    index, stops if cancellation was requested, and awaits the task. A
    failing task is logged and leaves its slot as None; the worker moves on.

    Args:
        tasks: Zero-argument callables returning awaitables
        limit: Maximum number of concurrently running tasks
        token: Optional cancellation token checked before each task
        label: Name used in failure log messages

    Returns:
        Results in task order; None for failed or never started tasks
    """
    results: list[Optional[T]] = [None] * len(tasks)
    if not tasks:
        return results

    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(tasks):
            index = cursor
            cursor += 1
            if token is not None and token.cancel_requested:
                break
            try:
                results[index] = await tasks[index]()
            except Exception as e:
                _logger.error(f"{label} {index} failed: {e}")

    worker_count = min(max(1, limit), len(tasks))
    await asyncio.gather(*(worker() for _ in range(worker_count)))
    return results


__all__ = ['run_bounded']
