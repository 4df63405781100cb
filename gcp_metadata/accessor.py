from typing import Any, Mapping, Optional, Union

import httpx
from loguru import logger

from .constants import DEFAULT_NO_RESPONSE_RETRIES, HEADER_NAME, HEADER_VALUE, HEADERS
from .decoding import decode_body
from .exceptions import (
    EmptyResponseError,
    InvalidResourceError,
    InvalidResponseError,
    MetadataError,
)
from .models import MetadataOptions, MetadataRequest, MetadataResource, TransportRequest
from .race import fast_fail_request
from .transport import request

OptionsInput = Union[None, str, Mapping[str, Any], MetadataOptions]

UNSUCCESSFUL_PREFIX = "Unsuccessful response status code. "


async def metadata_accessor(
    resource: Union[str, MetadataResource],
    options: OptionsInput = None,
    no_response_retries: int = DEFAULT_NO_RESPONSE_RETRIES,
    fast_fail: bool = False,
) -> Any:
    """Retrieves a value from the metadata server.

    Parameters
    ----------
    resource : `Union[str, MetadataResource]`
        ``"instance"`` or ``"project"``.
    options : `OptionsInput`
        A property name (``"hostname"``), a mapping with the keys
        ``params``, ``property`` and ``headers``, or `MetadataOptions`.
    no_response_retries : `int`
        How often the transport retries a request that got no response.
    fast_fail : `bool`
        Race the IP and DNS addresses against each other instead of
        only asking the IP address.

    Returns
    -------
    `Any`
        The decoded JSON value, or the raw text if the body is not JSON.

    Raises
    ------
    `ConfigurationError`
        Unknown resource or option key. Raised before any request is made.
    `ProtocolError`
        The response lacks the Metadata-Flavor header or has an empty body.
    `TransportError`
        The request failed.
    """
    req = build_request(resource, options, no_response_retries, fast_fail)
    send = fast_fail_request if req.fast_fail else request
    try:
        res = await send(to_transport_request(req))
        return decode_response(res)
    except MetadataError as e:
        response = getattr(e, "response", None)
        if response is not None and response.status_code != 200:
            e.prefix_message(UNSUCCESSFUL_PREFIX)
        raise


def build_request(
    resource: Union[str, MetadataResource],
    options: OptionsInput = None,
    no_response_retries: int = DEFAULT_NO_RESPONSE_RETRIES,
    fast_fail: bool = False,
) -> MetadataRequest:
    """Resolves accessor arguments to a `MetadataRequest`, validating options."""
    try:
        resource = MetadataResource(resource)
    except ValueError:
        raise InvalidResourceError(str(resource))
    return MetadataRequest(
        resource=resource,
        options=MetadataOptions.from_input(options),
        retries=no_response_retries,
        fast_fail=fast_fail,
    )


def to_transport_request(req: MetadataRequest) -> TransportRequest:
    return TransportRequest(
        url=req.url,
        headers=merge_headers(req.options.headers),
        params=req.options.params,
        no_response_retries=req.retries,
    )


def merge_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Merges caller headers with the Metadata-Flavor header.

    The Metadata-Flavor header is always sent with its fixed value; a caller
    header of the same name (in any casing) is dropped.
    """
    merged = {}
    for name, value in (headers or {}).items():
        if name.lower() == HEADER_NAME.lower():
            if value != HEADER_VALUE:
                logger.warning(f"Ignoring reserved header {name}: {value!r}")
            continue
        merged[name] = value
    merged.update(HEADERS)
    return merged


def decode_response(res: httpx.Response) -> Any:
    """Checks that `res` came from the metadata server and decodes its body."""
    # httpx.Headers lookups are case-insensitive
    if res.headers.get(HEADER_NAME) != HEADER_VALUE:
        raise InvalidResponseError()
    if not res.content:
        raise EmptyResponseError()
    return decode_body(res.text)


async def instance(options: OptionsInput = None) -> Any:
    """Retrieves an instance attribute.

    Example:
        >>> await instance("hostname")
        'my-host.c.my-project.internal'
    """
    return await metadata_accessor(MetadataResource.INSTANCE, options)


async def project(options: OptionsInput = None) -> Any:
    """Retrieves a project attribute.

    Example:
        >>> await project("project-id")
        'my-project'
    """
    return await metadata_accessor(MetadataResource.PROJECT, options)
