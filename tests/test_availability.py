from unittest.mock import AsyncMock, patch

import pytest

import gcp_metadata
from gcp_metadata import availability, race
from gcp_metadata.config import MetadataSettings
from gcp_metadata.exceptions import (
    InvalidResponseError,
    MetadataConnectionError,
    MetadataTimeoutError,
)

from .helpers import metadata_response, path_sender


def _both_paths(primary, secondary):
    return patch.object(race, "request", path_sender(primary, secondary))


@pytest.mark.asyncio
async def test_available() -> None:
    with _both_paths((0.0, metadata_response("{}")), (0.01, metadata_response("{}"))):
        assert await gcp_metadata.is_available() is True


@pytest.mark.asyncio
async def test_available_when_one_path_fails() -> None:
    unexpected = MetadataConnectionError("reset", code="ECONNRESET")
    with _both_paths((0.0, unexpected), (0.01, metadata_response("{}"))):
        assert await gcp_metadata.is_available() is True


@pytest.mark.asyncio
async def test_both_paths_time_out() -> None:
    with _both_paths(
        (0.0, MetadataTimeoutError("timed out")),
        (0.01, MetadataTimeoutError("timed out")),
    ):
        assert await gcp_metadata.is_available() is False


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["ENOTFOUND", "ENOENT", "ENETUNREACH"])
async def test_unreachable_codes(code: str) -> None:
    with _both_paths(
        (0.01, MetadataConnectionError("first", code=code)),
        (0.0, MetadataConnectionError("second", code=code)),
    ):
        assert await gcp_metadata.is_available() is False


@pytest.mark.asyncio
async def test_unexpected_error_propagates() -> None:
    with _both_paths(
        (0.0, MetadataConnectionError("refused", code="ECONNREFUSED")),
        (0.01, MetadataConnectionError("refused", code="ECONNREFUSED")),
    ):
        with pytest.raises(MetadataConnectionError, match="refused"):
            await gcp_metadata.is_available()


@pytest.mark.asyncio
async def test_unexpected_non_transport_error_propagates() -> None:
    with _both_paths((0.0, RuntimeError("boom")), (0.01, RuntimeError("boom"))):
        with pytest.raises(RuntimeError):
            await gcp_metadata.is_available()


@pytest.mark.asyncio
async def test_invalid_response_propagates() -> None:
    res = metadata_response("<html></html>", headers={})
    with _both_paths((0.0, res), (0.01, res)):
        with pytest.raises(InvalidResponseError):
            await gcp_metadata.is_available()


@pytest.mark.asyncio
async def test_last_error_decides() -> None:
    # Timeout on the path that finished last makes the server unavailable
    with _both_paths(
        (0.0, MetadataConnectionError("refused", code="ECONNREFUSED")),
        (0.01, MetadataTimeoutError("timed out")),
    ):
        assert await gcp_metadata.is_available() is False


@pytest.mark.asyncio
async def test_uses_retry_setting_and_fast_fail() -> None:
    mock = AsyncMock(return_value={})
    with patch.object(availability, "metadata_accessor", mock):
        assert await gcp_metadata.is_available(MetadataSettings(detect_gcp_retries=2))
    mock.assert_awaited_once_with(gcp_metadata.MetadataResource.INSTANCE, None, 2, True)


@pytest.mark.asyncio
async def test_retry_setting_from_env(monkeypatch) -> None:
    monkeypatch.setenv("DETECT_GCP_RETRIES", "5")
    mock = AsyncMock(return_value={})
    with patch.object(availability, "metadata_accessor", mock):
        await gcp_metadata.is_available()
    assert mock.await_args.args[2] == 5


def test_detect_gcp_retries(monkeypatch) -> None:
    assert gcp_metadata.detect_gcp_retries() == 0
    monkeypatch.setenv("DETECT_GCP_RETRIES", "3")
    assert gcp_metadata.detect_gcp_retries() == 3


@pytest.mark.asyncio
async def test_debug_logs_suppressed_error(monkeypatch, log_messages) -> None:
    monkeypatch.setenv("DEBUG_AUTH", "true")
    with _both_paths(
        (0.0, MetadataTimeoutError("primary timed out")),
        (0.01, MetadataTimeoutError("secondary timed out")),
    ):
        assert await gcp_metadata.is_available() is False
    assert any("secondary timed out" in m for m in log_messages)


@pytest.mark.asyncio
async def test_no_debug_logging_by_default(log_messages) -> None:
    with _both_paths(
        (0.0, MetadataTimeoutError("primary timed out")),
        (0.01, MetadataTimeoutError("secondary timed out")),
    ):
        assert await gcp_metadata.is_available() is False
    assert not any("availability check failed" in m for m in log_messages)


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["", "verbose", "0"])
async def test_debug_auth_any_value(monkeypatch, value: str) -> None:
    monkeypatch.setenv("DEBUG_AUTH", value)
    mock = AsyncMock(return_value={})
    with patch.object(availability, "metadata_accessor", mock):
        assert await gcp_metadata.is_available() is True
    assert MetadataSettings().debug_auth is bool(value)


def test_empty_retry_setting(monkeypatch) -> None:
    monkeypatch.setenv("DETECT_GCP_RETRIES", "")
    assert gcp_metadata.detect_gcp_retries() == 0


@pytest.mark.asyncio
async def test_debug_logs_unexpected_error(monkeypatch, log_messages) -> None:
    monkeypatch.setenv("DEBUG_AUTH", "1")
    with _both_paths((0.0, RuntimeError("boom")), (0.01, RuntimeError("kaput"))):
        with pytest.raises(RuntimeError):
            await gcp_metadata.is_available()
    assert any("RuntimeError('kaput')" in m for m in log_messages)
