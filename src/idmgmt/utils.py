"""
Calling-convention helpers shared by the resource client and the managers.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Any], Any]

# Tasks scheduled for callbacks, held until they finish
_pending: Set["asyncio.Task[Any]"] = set()


def split_callback(args: Sequence[Any]) -> Tuple[Tuple[Any, ...], Optional[Callback]]:
    """
    Separate a trailing callback from positional arguments.

    Returns:
        Tuple of (remaining arguments, callback or None)
    """
    if args and callable(args[-1]):
        return tuple(args[:-1]), args[-1]
    return tuple(args), None


def dispatch(coro: Awaitable[Any], callback: Optional[Callback] = None) -> Optional[Awaitable[Any]]:
    """
    Deliver the outcome of ``coro`` through the caller's chosen convention.

    Without a callback the awaitable is handed back untouched. With one, the
    awaitable is driven to completion and ``callback(error, result)`` is called
    exactly once; nothing is returned. Inside a running event loop the work is
    scheduled as a task, otherwise it runs to completion before returning.

    Args:
        coro: Awaitable performing the request
        callback: Optional ``(error, result)`` continuation

    Returns:
        The awaitable when no callback is given, otherwise None
    """
    if callback is None:
        return coro

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        try:
            result = asyncio.run(_consume(coro))
        except Exception as e:
            callback(e, None)
            return None
        callback(None, result)
        return None

    task = loop.create_task(_consume(coro))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    task.add_done_callback(partial(_deliver, callback))
    return None


async def _consume(coro: Awaitable[Any]) -> Any:
    return await coro


def _deliver(callback: Callback, task: "asyncio.Task[Any]") -> None:
    if task.cancelled():
        callback(asyncio.CancelledError(), None)
        return

    error = task.exception()
    if error is not None:
        logger.debug(f"Delivering error to callback: {error}")
        callback(error, None)
    else:
        callback(None, task.result())


def with_callback(args: Sequence[Any], callback: Optional[Callback]) -> Tuple[Any, ...]:
    """Append ``callback`` to ``args`` when it is callable."""
    if callable(callback):
        return (*args, callback)
    return tuple(args)
