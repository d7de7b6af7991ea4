"""pytest fixtures for hmacgate tests.

Provides:
- Test environment variables (set before any Settings is constructed)
- webhook_secret / signature_header: Values the test app is configured with
- settings: Settings instance for the test environment
"""

import os

import pytest

os.environ["APP_ENV"] = "test"
os.environ["HEADER"] = "X-Test-Signature"
os.environ["WEBHOOK_SECRET"] = "test_webhook_secret"
os.environ["HMAC_ALGORITHM"] = "sha256"

from hmacgate.core.config import Settings  # noqa: E402


@pytest.fixture
def webhook_secret() -> str:
    """Shared secret the test app verifies against."""
    return os.environ["WEBHOOK_SECRET"]


@pytest.fixture
def signature_header() -> str:
    """Header name the test app reads the envelope from."""
    return os.environ["HEADER"]


@pytest.fixture
def settings() -> Settings:
    """Settings loaded from the test environment."""
    return Settings()  # type: ignore[call-arg]
