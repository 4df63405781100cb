from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from .constants import (
    BASE_URL,
    DEFAULT_NO_RESPONSE_RETRIES,
    REQUEST_TIMEOUT,
    SECONDARY_BASE_URL,
)
from .exceptions import InvalidOptionError, InvalidOptionValueError

OPTION_KEYS = frozenset({"params", "property", "headers"})


class MetadataResource(str, Enum):
    INSTANCE = "instance"
    PROJECT = "project"


def validate_options(options: Mapping[str, Any]) -> None:
    """Raises `InvalidOptionError` for the first key not in `OPTION_KEYS`.

    Older releases accepted arbitrary request options (including `qs`),
    so callers upgrading get a pointed error instead of a silently ignored key.
    """
    for key in options:
        if key not in OPTION_KEYS:
            raise InvalidOptionError(key)


class MetadataOptions(BaseModel):
    """Caller-facing options for a metadata lookup."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    params: Optional[dict[str, str]] = Field(
        None, description="Query parameters, e.g. {'recursive': 'true'}."
    )
    property: Optional[str] = Field(
        None, description="Path below the resource, e.g. 'hostname'."
    )
    headers: Optional[dict[str, str]] = Field(
        None, description="Extra request headers."
    )

    @classmethod
    def from_input(
        cls, options: Union[None, str, Mapping[str, Any], "MetadataOptions"]
    ) -> "MetadataOptions":
        """Resolves the accepted option shapes to one `MetadataOptions`.

        A bare string is shorthand for ``{"property": options}``.
        """
        if isinstance(options, MetadataOptions):
            return options
        if not options:
            return cls()
        if isinstance(options, str):
            options = {"property": options}
        validate_options(options)
        try:
            return cls(**options)
        except ValidationError as e:
            fields = [".".join(map(str, err["loc"])) for err in e.errors()]
            raise InvalidOptionValueError(fields) from e


class TransportRequest(BaseModel):
    """A single GET as handed to the transport."""

    model_config = ConfigDict(frozen=True)

    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    params: Optional[dict[str, str]] = None
    timeout: float = REQUEST_TIMEOUT
    no_response_retries: NonNegativeInt = DEFAULT_NO_RESPONSE_RETRIES

    def to_secondary(self) -> "TransportRequest":
        """Same request, addressed to the metadata server by DNS name."""
        return self.model_copy(
            update={"url": self.url.replace(BASE_URL, SECONDARY_BASE_URL, 1)}
        )


class MetadataRequest(BaseModel):
    """Fully resolved description of one metadata lookup."""

    model_config = ConfigDict(frozen=True)

    resource: MetadataResource
    options: MetadataOptions = Field(default_factory=MetadataOptions)
    retries: NonNegativeInt = DEFAULT_NO_RESPONSE_RETRIES
    fast_fail: bool = False

    @property
    def url(self) -> str:
        url = f"{BASE_URL}/{self.resource.value}"
        if self.options.property:
            url += f"/{self.options.property}"
        return url
