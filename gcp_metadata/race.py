"""Races a request to the metadata server by IP against the same request by DNS name.

Both addresses are tried because:

1. DNS is slow in some GCP environments, so checking both can detect the
   runtime environment significantly faster.
2. The IP alone is not enough: off GCP it is tarpitted and slow to respond.

The first success wins. A failure is only raised once both paths have
failed, and then it is the failure of the path that finished last. An
outcome arriving after the race has settled is observed and dropped, so a
late failure never surfaces as an unretrieved task exception.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx
from loguru import logger

from .models import TransportRequest
from .transport import request

Sender = Callable[[TransportRequest], Awaitable[httpx.Response]]

# Paths still running after their race settled
_inflight: set[asyncio.Task] = set()


@dataclass
class RaceTracker:
    """Outcome state of a single race, shared by its two paths."""

    responded: bool = False


async def fast_fail_request(
    req: TransportRequest, send: Optional[Sender] = None
) -> httpx.Response:
    """Sends `req` to the primary and secondary metadata addresses concurrently.

    The losing path is not cancelled; it runs until it completes or times out.

    Parameters
    ----------
    req : `TransportRequest`
        Request addressed to the primary (IP) host.
    send : `Optional[Sender]`
        Coroutine function performing one request. Defaults to `transport.request`.

    Returns
    -------
    `httpx.Response`
        The response of the first path to succeed.

    Raises
    ------
    `Exception`
        The error of the path that failed last, if both paths failed.
    """
    send = send or request
    loop = asyncio.get_running_loop()
    settled: asyncio.Future[httpx.Response] = loop.create_future()
    tracker = RaceTracker()

    def on_done(task: asyncio.Task) -> None:
        _inflight.discard(task)
        if task.cancelled():
            if tracker.responded and not settled.done():
                settled.cancel()
            tracker.responded = True
            return

        exc = task.exception()  # marks the exception as retrieved
        if settled.done():
            if exc is not None:
                logger.debug(
                    f"Dropping failure of {task.get_name()} after race settled: {exc!r}"
                )
            return

        if exc is None:
            logger.debug(f"Metadata race won by {task.get_name()}")
            settled.set_result(task.result())
        elif tracker.responded:
            settled.set_exception(exc)
        else:
            logger.debug(
                f"{task.get_name()} failed first, waiting for the other path: {exc!r}"
            )
        tracker.responded = True

    secondary = req.to_secondary()
    tasks = [
        asyncio.create_task(send(req), name=f"metadata-primary {req.url}"),
        asyncio.create_task(
            send(secondary), name=f"metadata-secondary {secondary.url}"
        ),
    ]
    for task in tasks:
        _inflight.add(task)
        task.add_done_callback(on_done)

    try:
        return await settled
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise
