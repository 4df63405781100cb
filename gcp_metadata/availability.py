from typing import Optional

from loguru import logger

from .accessor import metadata_accessor
from .config import MetadataSettings
from .exceptions import MetadataError
from .exceptions.transport import TIMEOUT_TYPE
from .models import MetadataResource

# Error codes meaning the metadata server cannot be reached from here
UNAVAILABLE_CODES = frozenset({"ENOTFOUND", "ENOENT", "ENETUNREACH"})


def detect_gcp_retries(settings: Optional[MetadataSettings] = None) -> int:
    """How many times to retry detecting the GCP environment."""
    settings = settings or MetadataSettings()
    return settings.detect_gcp_retries


async def is_available(settings: Optional[MetadataSettings] = None) -> bool:
    """Determines if the metadata server is currently available.

    Errors that mean the server is absent (timeouts, unresolvable host,
    unreachable network) yield `False`; any other error is re-raised.
    """
    settings = settings or MetadataSettings()
    try:
        await metadata_accessor(
            MetadataResource.INSTANCE,
            None,
            detect_gcp_retries(settings),
            True,
        )
        return True
    except Exception as e:
        if settings.debug_auth:
            logger.info(f"Metadata server availability check failed: {e!r}")
        if isinstance(e, MetadataError) and is_unavailable_error(e):
            return False
        # Unexpected errors
        raise


def is_unavailable_error(exc: BaseException) -> bool:
    """Whether `exc` means there is no metadata server to talk to."""
    if getattr(exc, "type", None) == TIMEOUT_TYPE:
        # On GCP the metadata server answers within milliseconds
        return True
    return getattr(exc, "code", None) in UNAVAILABLE_CODES
