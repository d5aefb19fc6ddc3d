from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

LOGGER = logging.getLogger(__name__)

__all__ = ("create_task",)

# the event loop only keeps weak references to tasks
_background_tasks: set[asyncio.Task[Any]] = set()


def create_task[T](
    coro: Coroutine[Any, Any, T],
    *,
    suppressed_exceptions: tuple[type[Exception], ...] = (),
    name: str | None = None,
) -> asyncio.Task[T]:
    """
    Wrapper for creating an :obj:`asyncio.Task` which logs exceptions raised in the task.

    The task is referenced until it is done so it cannot be garbage collected mid-flight.

    Args:
        coro: The function to call.
        suppressed_exceptions: Exceptions to be handled by the task, logged at debug level instead of error.
        name: The name of the task, shown in logs.

    Returns:
        asyncio.Task: The wrapped task.
    """
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    task.add_done_callback(partial(_log_task_exception, suppressed_exceptions=suppressed_exceptions))
    return task


def _log_task_exception(task: asyncio.Task[Any], *, suppressed_exceptions: tuple[type[Exception], ...]) -> None:
    if task.cancelled():
        return

    exception = task.exception()
    if exception is None:
        return

    if isinstance(exception, suppressed_exceptions):
        LOGGER.debug("Suppressed %r in task %s.", exception, task.get_name())
        return

    LOGGER.error("Error in task %s %d!", task.get_name(), id(task), exc_info=exception)
