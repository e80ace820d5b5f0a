"""
Error classification framework for AWS service failures.

This module maps arbitrary failures raised by AWS clients to a structured
category, user-facing message, and retryability verdict, and provides the
@handle_aws_errors decorator that applies it to async calls.
"""

from .models import (
    AWSServiceError,
    ContextValue,
    ErrorCategory,
    ErrorContext,
    ErrorDetails,
    ResilienceError,
    ServiceOrigin,
)
from .failure import FailureInfo
from .classifier import ErrorClassifier
from .decorators import handle_aws_errors

__all__ = [
    "AWSServiceError",
    "ContextValue",
    "ErrorCategory",
    "ErrorContext",
    "ErrorDetails",
    "ResilienceError",
    "ServiceOrigin",
    "FailureInfo",
    "ErrorClassifier",
    "handle_aws_errors",
]
