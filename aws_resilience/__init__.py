"""
AWS Resilience - error classification and exponential backoff retries for AWS calls.

This library sits between application code and AWS services (S3, DynamoDB,
EventBridge, ...) and answers two questions about a failed call: what kind of
failure was it, and is it safe to try again.

Core Features:
- ErrorClassifier: maps any failure to a category, user/technical messages and a
  retryability verdict
- ExponentialBackoff: bounded retries with capped exponential backoff and jitter
- Pluggable retry policies shared between the retry loop and error reporting
- @with_retry and @handle_aws_errors decorators for async AWS calls
- Optional environment-driven configuration (requires [config] extra)

Example:
    from aws_resilience import ErrorClassifier, ExponentialBackoff, RetryError

    backoff = ExponentialBackoff(max_retries=5)

    try:
        outcome = await backoff.execute(lambda: table.put_item(Item=item), "put_item")
    except RetryError as e:
        details = ErrorClassifier.classify(e.last_error)
        return {"statusCode": 503, "body": details.user_message}
"""

__version__ = "0.1.0"

# Core exports - always available (zero dependencies)
from .errors import (
    AWSServiceError,
    ErrorCategory,
    ErrorClassifier,
    ErrorDetails,
    ResilienceError,
    ServiceOrigin,
    handle_aws_errors,
)
from .retry import (
    ClassifierRetryPolicy,
    ExecutionResult,
    ExponentialBackoff,
    JitterType,
    NamePatternRetryPolicy,
    RetryConfig,
    RetryError,
    RetryPolicy,
    default_retry,
    default_retry_config,
    with_retry,
)
from .utils import configure_logging

__all__ = [
    "AWSServiceError",
    "ErrorCategory",
    "ErrorClassifier",
    "ErrorDetails",
    "ResilienceError",
    "ServiceOrigin",
    "handle_aws_errors",
    "ClassifierRetryPolicy",
    "ExecutionResult",
    "ExponentialBackoff",
    "JitterType",
    "NamePatternRetryPolicy",
    "RetryConfig",
    "RetryError",
    "RetryPolicy",
    "default_retry",
    "default_retry_config",
    "with_retry",
    "configure_logging",
]

# Optional module exports
try:
    from .config import ResilienceSettings, get_settings
    __all__.extend(["ResilienceSettings", "get_settings"])
    HAS_CONFIG = True
except ImportError:
    HAS_CONFIG = False
