"""
Async Runner Utility - Safely run async functions in Firebase Functions.

Firebase request handlers are synchronous. When no event loop is running the
coroutine is driven with asyncio.run(); when the worker already owns a running
loop (gunicorn pre-fork workers can inherit one) nest_asyncio is applied to
that loop so it can be re-entered.
"""

import asyncio
import logging
import weakref
from collections.abc import Coroutine
from typing import Any

import nest_asyncio

logger = logging.getLogger(__name__)

# Entries vanish once a loop is garbage collected, so a recycled id() never matches
_patched_loops: weakref.WeakSet[asyncio.AbstractEventLoop] = weakref.WeakSet()


def _ensure_nest_asyncio(loop: asyncio.AbstractEventLoop) -> None:
    """Apply nest_asyncio to the given loop exactly once."""
    if loop in _patched_loops:
        return
    nest_asyncio.apply(loop)
    _patched_loops.add(loop)
    logger.debug("nest_asyncio patch applied to running loop")


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """
    Safely run an async coroutine from synchronous handler code.

    Args:
        coro: The coroutine to run

    Returns:
        The result of the coroutine

    Example:
        >>> async def my_async_function():
        ...     return "result"
        >>> run_async(my_async_function())
        'result'
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    if loop.is_closed():
        coro.close()
        raise RuntimeError("Event loop is closed, cannot run coroutine")

    _ensure_nest_asyncio(loop)
    return loop.run_until_complete(coro)
