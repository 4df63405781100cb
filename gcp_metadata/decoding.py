import json
from decimal import Decimal
from typing import Any, Union

# Significant digits a float carries without rounding
FLOAT_PRECISION = 15


def parse_float(s: str) -> Union[float, Decimal]:
    """Parses a JSON number with a fraction or exponent.

    Numbers with more significant digits than a float can hold are kept
    as `Decimal` so the exact digits survive. JSON integers need no such
    handling, Python's `int` has no size limit.
    """
    mantissa = s.lower().split("e")[0].lstrip("-").replace(".", "").lstrip("0")
    if len(mantissa) > FLOAT_PRECISION:
        return Decimal(s)
    return float(s)


def decode_body(data: Union[str, bytes]) -> Any:
    """Decodes a metadata response body.

    Text that parses as JSON is returned as the parsed value, anything
    else (plain text values such as a hostname, or non-text bodies) is
    returned as-is.

    Example:
        >>> decode_body('{"id": 4520031799277581759}')
        {'id': 4520031799277581759}
        >>> decode_body("my-host.example")
        'my-host.example'
    """
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data, parse_float=parse_float)
    except ValueError:
        return data
