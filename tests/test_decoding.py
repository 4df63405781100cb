from decimal import Decimal

from gcp_metadata.decoding import decode_body, parse_float


def test_decode_json_string() -> None:
    assert decode_body('"my-host.example"') == "my-host.example"


def test_decode_plain_text_falls_back() -> None:
    assert decode_body("my-host.example") == "my-host.example"
    assert decode_body("{not json") == "{not json"


def test_decode_non_text_passthrough() -> None:
    assert decode_body(b"\x00\x01") == b"\x00\x01"


def test_decode_large_integer_keeps_digits() -> None:
    # Larger than 2**53, where doubles start rounding
    decoded = decode_body('{"id": 4520031799277581759, "n": [9007199254740993]}')
    assert decoded["id"] == 4520031799277581759
    assert str(decoded["n"][0]) == "9007199254740993"


def test_parse_float_precision() -> None:
    assert parse_float("1.5") == 1.5
    assert isinstance(parse_float("1.5"), float)
    assert parse_float("-0.00012345678901234567") == Decimal("-0.00012345678901234567")
    assert parse_float("1.23456789012345678e5") == Decimal("1.23456789012345678e5")
