import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collects loguru messages at DEBUG and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DETECT_GCP_RETRIES", raising=False)
    monkeypatch.delenv("DEBUG_AUTH", raising=False)
