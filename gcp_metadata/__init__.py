"""Client for the Google Compute Engine metadata server."""

from .accessor import instance, metadata_accessor, project
from .availability import detect_gcp_retries, is_available
from .config import MetadataSettings
from .constants import (
    BASE_PATH,
    BASE_URL,
    HEADER_NAME,
    HEADER_VALUE,
    HEADERS,
    HOST_ADDRESS,
    REQUEST_TIMEOUT,
    SECONDARY_BASE_URL,
    SECONDARY_HOST_ADDRESS,
)
from .exceptions import *
from .models import MetadataOptions, MetadataResource, validate_options
from .race import fast_fail_request

__version__ = "0.1.0"
