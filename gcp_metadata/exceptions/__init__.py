"""Exceptions raised by the metadata client.

Configuration and protocol errors are raised before or after a request
completes and are never retried. Transport errors carry the `type` and `code`
used by `is_available()` to tell an absent server from an unexpected failure.
"""

from .base import *
from .transport import *

__all__ = [
    "MetadataError",
    "ConfigurationError",
    "InvalidOptionError",
    "InvalidResourceError",
    "InvalidOptionValueError",
    "ProtocolError",
    "InvalidResponseError",
    "EmptyResponseError",
    "TransportError",
    "MetadataTimeoutError",
    "MetadataConnectionError",
    "MetadataHTTPError",
]
