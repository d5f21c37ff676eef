"""Detached background tasks.

The webhook acknowledges as soon as the request is authenticated and hands
the rest of the work to spawn_detached(). The caller gets no handle and is
never told how the work ended. The registry below only keeps each task
alive until it finishes, because the event loop holds tasks weakly.
"""

import asyncio
from typing import Any, Coroutine, Optional, Set

from ..log import get_logger

logger = get_logger("tasks")

_pending: Set[asyncio.Task] = set()


def _on_done(task: asyncio.Task):
    _pending.discard(task)
    if task.cancelled():
        logger.warning(f"Background task {task.get_name()} was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} crashed: {exc!r}", exc_info=exc)


def spawn_detached(coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> None:
    """Schedule `coro` on the running loop and forget about it."""
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_on_done)


def pending_count() -> int:
    return len(_pending)


async def drain(timeout: Optional[float] = None) -> None:
    """
    Wait for in-flight background tasks (including ones they spawn).
    With a timeout, gives up after one wait and leaves stragglers running.
    """
    while _pending:
        await asyncio.wait(set(_pending), timeout=timeout)
        if timeout is not None:
            return
