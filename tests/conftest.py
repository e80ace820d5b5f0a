"""
Pytest configuration and shared fixtures.
"""

import random
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from aws_resilience.retry.models import JitterType, RetryConfig

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


class FakeAWSError(Exception):
    """Exception shaped like an AWS SDK error (name, code, metadata)."""

    def __init__(
        self,
        name: str,
        message: str = "",
        code: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.message = message
        self.code = code
        self.metadata = metadata


@pytest.fixture
def make_error() -> Callable[..., FakeAWSError]:
    """Factory for AWS-shaped exceptions."""

    def factory(
        name: str,
        message: str = "",
        code: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> FakeAWSError:
        return FakeAWSError(name, message, code=code, metadata=metadata)

    return factory


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Sleep replacement that records requested waits without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def no_jitter_config() -> RetryConfig:
    """Deterministic config used across retry tests."""
    return RetryConfig(
        max_retries=3,
        base_delay=100,
        max_delay=1000,
        jitter_type=JitterType.NONE,
        retryable_errors=("TestError", "RetryableError"),
    )


@pytest.fixture
def seeded_rng() -> random.Random:
    """Seeded random source for reproducible jitter."""
    return random.Random(1234)


@pytest.fixture
def sample_context() -> dict[str, Any]:
    """Correlation context passed to the classifier."""
    return {
        "operation": "UploadDocument",
        "userId": "user123",
        "documentId": "doc456",
    }
