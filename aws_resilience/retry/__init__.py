"""
Retry framework for AWS operations.

This module provides bounded exponential backoff with jitter, pluggable
retry policies, and the @with_retry decorator for async AWS calls.
"""

from .models import (
    DEFAULT_RETRYABLE_ERRORS,
    ExecutionResult,
    JitterType,
    RetryConfig,
    RetryError,
    default_retry_config,
)
from .policy import ClassifierRetryPolicy, NamePatternRetryPolicy, RetryPolicy
from .backoff import ExponentialBackoff, compute_delay, default_retry
from .decorators import with_retry

__all__ = [
    "DEFAULT_RETRYABLE_ERRORS",
    "ExecutionResult",
    "JitterType",
    "RetryConfig",
    "RetryError",
    "default_retry_config",
    "ClassifierRetryPolicy",
    "NamePatternRetryPolicy",
    "RetryPolicy",
    "ExponentialBackoff",
    "compute_delay",
    "default_retry",
    "with_retry",
]
