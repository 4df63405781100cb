import asyncio
import errno
import socket
from typing import Optional

import backoff
import httpx
from loguru import logger

from .exceptions import (
    MetadataConnectionError,
    MetadataHTTPError,
    MetadataTimeoutError,
    TransportError,
)
from .models import TransportRequest
from .utils.backoff import on_backoff, on_giveup

# Seconds before the first retry; doubled on every further retry
RETRY_FACTOR = 0.1
RETRY_MAX_WAIT = 2.0

# Name resolution failures that mean "no such host"
_NOT_FOUND_EAI = {
    getattr(socket, name)
    for name in ("EAI_NONAME", "EAI_NODATA", "EAI_FAIL")
    if hasattr(socket, name)
}


def build_client(timeout: float) -> httpx.AsyncClient:
    """Creates the short-lived client used for one metadata request."""
    # Link-local server: never route through a proxy from the environment
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout), follow_redirects=False, trust_env=False
    )


async def request(req: TransportRequest) -> httpx.Response:
    """Sends a GET request to the metadata server.

    Requests that never got a response (timeouts, connection failures)
    are retried up to `req.no_response_retries` times. A response with
    a non-2xx status code is never retried.

    Parameters
    ----------
    req : `TransportRequest`
        The request to send.

    Returns
    -------
    `httpx.Response`
        The response, with its body read.

    Raises
    ------
    `MetadataTimeoutError`
        The request (and every retry) timed out.
    `MetadataConnectionError`
        No connection could be established.
    `MetadataHTTPError`
        The server answered with a non-2xx status code.
    """
    send = backoff.on_exception(
        backoff.expo,
        httpx.RequestError,
        max_tries=req.no_response_retries + 1,
        on_backoff=on_backoff if req.no_response_retries else [],
        on_giveup=on_giveup if req.no_response_retries else [],
        logger=None,
        factor=RETRY_FACTOR,
        max_value=RETRY_MAX_WAIT,
    )(_send)
    try:
        res = await send(req)
    except httpx.RequestError as e:
        raise to_transport_error(e) from e
    if not res.is_success:
        raise MetadataHTTPError(res)
    return res


async def _send(req: TransportRequest) -> httpx.Response:
    logger.debug(f"GET {req.url} (timeout={req.timeout}s)")
    async with build_client(req.timeout) as client:
        # httpx times each phase separately; the whole attempt gets one limit
        try:
            return await asyncio.wait_for(
                client.get(req.url, headers=req.headers, params=req.params),
                req.timeout,
            )
        except asyncio.TimeoutError as e:
            raise httpx.TimeoutException(
                f"Request to {req.url} took longer than {req.timeout}s"
            ) from e


def to_transport_error(exc: httpx.RequestError) -> TransportError:
    """Maps an `httpx` request failure to the metadata transport taxonomy."""
    msg = str(exc) or exc.__class__.__name__
    if isinstance(exc, httpx.TimeoutException):
        return MetadataTimeoutError(msg)
    return MetadataConnectionError(msg, code=error_code(exc))


def error_code(exc: BaseException) -> Optional[str]:
    """Finds the OS-level error code (e.g. ``"ENOTFOUND"``) behind an exception.

    `httpx` wraps the socket error of a failed connection a few levels deep,
    so the cause/context chain (and any exception group on it) is searched.
    """
    return _error_code(exc, set())


def _error_code(exc: Optional[BaseException], seen: set[int]) -> Optional[str]:
    if exc is None or id(exc) in seen:
        return None
    seen.add(id(exc))

    if isinstance(exc, socket.gaierror):
        if exc.errno in _NOT_FOUND_EAI:
            return "ENOTFOUND"
        return "EAI_AGAIN"
    if isinstance(exc, OSError) and exc.errno:
        return errno.errorcode.get(exc.errno)

    for sub in getattr(exc, "exceptions", ()):
        code = _error_code(sub, seen)
        if code:
            return code
    return _error_code(exc.__cause__ or exc.__context__, seen)
