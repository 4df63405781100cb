import asyncio
from typing import Any, Callable, Optional

import httpx

from gcp_metadata.constants import BASE_URL, HEADERS, SECONDARY_BASE_URL
from gcp_metadata.models import TransportRequest


def metadata_response(
    text: str = "",
    status_code: int = 200,
    headers: Optional[dict[str, str]] = None,
    url: str = BASE_URL + "/instance",
) -> httpx.Response:
    """Builds a response as the metadata server would send it."""
    return httpx.Response(
        status_code,
        headers=dict(HEADERS) if headers is None else headers,
        text=text,
        request=httpx.Request("GET", url),
    )


def path_sender(primary: tuple[float, Any], secondary: tuple[float, Any]) -> Callable:
    """Fake transport for races.

    Each path is a `(delay, outcome)` pair; an exception outcome is raised,
    anything else is returned.
    """
    calls: list[str] = []

    async def send(req: TransportRequest) -> httpx.Response:
        is_secondary = req.url.startswith(SECONDARY_BASE_URL)
        calls.append(req.url)
        delay, outcome = secondary if is_secondary else primary
        await asyncio.sleep(delay)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    send.calls = calls  # type: ignore
    return send
