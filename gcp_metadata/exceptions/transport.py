from typing import Optional

import httpx

from .base import MetadataError

TIMEOUT_TYPE = "request-timeout"


class TransportError(MetadataError):
    """Base class for failures of a single HTTP request.

    Attributes
    ----------
    type : `Optional[str]`
        Failure kind, e.g. ``"request-timeout"``.
    code : `Optional[str]`
        OS-level error code, e.g. ``"ENOTFOUND"`` or ``"ENETUNREACH"``.
    response : `Optional[httpx.Response]`
        The response, if the server answered at all.
    """

    type: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.code = code
        self.response = response
        super().__init__(message)

    @property
    def status_code(self) -> Optional[int]:
        if self.response is None:
            return None
        return self.response.status_code


class MetadataTimeoutError(TransportError):
    """Exception raised when a request did not complete within its timeout."""

    type = TIMEOUT_TYPE


class MetadataConnectionError(TransportError):
    """Exception raised when no connection could be made (DNS, routing, refused)."""


class MetadataHTTPError(TransportError):
    """Exception raised for a non-2xx response."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(
            "Request to {} failed with status code {}.".format(
                response.request.url, response.status_code
            ),
            response=response,
        )
