from typing import Any, TypedDict

from loguru import logger

# Longest rendering of call arguments in a log line
MAX_LEN_CALL_ARGS = 250


class HandlerDict(TypedDict, total=False):
    """Dictionary of details for a backoff or giveup."""

    target: Any
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    tries: int
    elapsed: float
    wait: float
    exception: BaseException


def on_backoff(details: HandlerDict) -> None:
    """Fired whenever a request to the metadata server is retried."""
    _log(
        (
            "Metadata request failed ({exception}), retrying in {wait:.2f}s "
            "after {tries} tries. Args: {args} Kwargs: {kwargs}"
        ),
        details,
    )


def on_giveup(details: HandlerDict) -> None:
    """Fired once the no-response retry budget is spent."""
    _log(
        (
            "Gave up on metadata request ({exception}) after {tries} tries "
            "and {elapsed:.2f}s. Args: {args} Kwargs: {kwargs}"
        ),
        details,
    )


def _log(msg: str, details: HandlerDict) -> None:
    """Log the message with the given details."""
    logger.error(
        msg.format(
            exception=repr(details.get("exception")),
            wait=details.get("wait", 0.0),
            tries=details["tries"],
            elapsed=details.get("elapsed", 0.0),
            args=_truncate(details.get("args", ())),
            kwargs=_truncate(details.get("kwargs", {})),
        )
    )


def _truncate(value: Any) -> str:
    text = str(value)
    if len(text) > MAX_LEN_CALL_ARGS:
        return text[:MAX_LEN_CALL_ARGS] + "..."
    return text
