from ..constants import HEADER_NAME


class MetadataError(Exception):
    """Base class for metadata client exceptions."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def prefix_message(self, prefix: str) -> None:
        """Prepends `prefix` to the message in place, keeping the exception chain."""
        self.args = (f"{prefix}{self.message}",) + self.args[1:]


class ConfigurationError(MetadataError):
    """Base class for invalid caller-supplied configuration."""


class InvalidOptionError(ConfigurationError):
    """Exception raised when an options object contains an unsupported key."""

    key: str

    def __init__(self, key: str) -> None:
        self.key = key
        if key == "qs":
            msg = (
                "'qs' is not a valid configuration option. "
                "Please use 'params' instead."
            )
        else:
            msg = "'{}' is not a valid configuration option.".format(key)
        super().__init__(msg)


class ProtocolError(MetadataError):
    """Base class for responses that did not come from a metadata server."""


class InvalidResponseError(ProtocolError):
    """Exception raised when the Metadata-Flavor header is missing or wrong."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid response from metadata service: incorrect {} header.".format(
                HEADER_NAME
            )
        )


class EmptyResponseError(ProtocolError):
    """Exception raised when the metadata server returned an empty body."""

    def __init__(self) -> None:
        super().__init__("Invalid response from the metadata service")


class InvalidResourceError(ConfigurationError):
    """Exception raised for a resource type the metadata server does not serve."""

    def __init__(self, resource: str) -> None:
        super().__init__("'{}' is not a valid metadata resource.".format(resource))


class InvalidOptionValueError(ConfigurationError):
    """Exception raised when a supported option has a value of the wrong type."""

    fields: list[str]

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            "Invalid value for configuration option(s): {}.".format(", ".join(fields))
        )
