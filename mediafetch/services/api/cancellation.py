# mediafetch/services/api/cancellation.py
from __future__ import annotations

import functools
import threading
from typing import Callable, TypeVar

import anyio
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from mediafetch.common.logging import get_logger

R = TypeVar("R")

logger = get_logger()


async def run_cancellable(
    request: Request,
    fn: Callable[..., R],
    /,
    *args,
    poll_sec: float = 0.5,
    **kwargs,
) -> R:
    """
    Run a blocking `fn(*args, cancel=<Event>, **kwargs)` in the threadpool and
    set the event if the client goes away before it finishes, so subprocesses
    started by `fn` get terminated instead of orphaned.
    """
    cancel = threading.Event()

    async def _watch_disconnect() -> None:
        while not cancel.is_set():
            if await request.is_disconnected():
                logger.info("client disconnected; cancelling %s", getattr(fn, "__name__", fn))
                cancel.set()
                return
            await anyio.sleep(poll_sec)

    outcome: dict = {}
    async with anyio.create_task_group() as tg:
        tg.start_soon(_watch_disconnect)
        try:
            outcome["result"] = await run_in_threadpool(functools.partial(fn, *args, cancel=cancel, **kwargs))
        except Exception as e:
            # raised outside the task group so handlers see it unwrapped
            outcome["error"] = e
        finally:
            tg.cancel_scope.cancel()
    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]
