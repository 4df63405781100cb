"""Fixed addresses and headers of the Compute Engine metadata server."""

from types import MappingProxyType

HOST_ADDRESS = "http://169.254.169.254"
BASE_PATH = "/computeMetadata/v1"
BASE_URL = HOST_ADDRESS + BASE_PATH

# Trailing dot makes the name fully qualified (skips search domains)
SECONDARY_HOST_ADDRESS = "http://metadata.google.internal."
SECONDARY_BASE_URL = SECONDARY_HOST_ADDRESS + BASE_PATH

HEADER_NAME = "Metadata-Flavor"
HEADER_VALUE = "Google"
HEADERS = MappingProxyType({HEADER_NAME: HEADER_VALUE})

# Seconds
REQUEST_TIMEOUT = 3.0

DEFAULT_NO_RESPONSE_RETRIES = 3
