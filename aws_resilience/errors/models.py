"""
Error models and data classes for AWS failure classification.
"""

from dataclasses import dataclass
from enum import Enum
from collections.abc import Mapping
from typing import Any, Union

ContextValue = Union[str, int, float, bool, None]
ErrorContext = dict[str, ContextValue]


class ErrorCategory(Enum):
    """Error categories for classification."""

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMIT = "rate_limit"
    SYSTEM = "system"


class ServiceOrigin(Enum):
    """Remote service a failure originated from."""

    S3 = "S3"
    DYNAMODB = "DynamoDB"


@dataclass(frozen=True)
class ErrorDetails:
    """Structured verdict produced by classifying a failure."""

    category: ErrorCategory
    retryable: bool
    user_message: str
    technical_message: str
    error_code: str | None = None
    http_status_code: int | None = None
    context: ErrorContext | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for logging."""
        return {
            "category": self.category.value,
            "retryable": self.retryable,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "error_code": self.error_code,
            "http_status_code": self.http_status_code,
            "context": dict(self.context) if self.context is not None else None,
        }


class ResilienceError(Exception):
    """Base class for failures raised by this package."""


class AWSServiceError(ResilienceError):
    """A classified AWS failure carrying its ErrorDetails and original cause."""

    def __init__(
        self, details: ErrorDetails, original_error: BaseException | Any | None = None
    ) -> None:
        """
        Initialize a classified service error.

        Args:
            details: Classification verdict for the failure
            original_error: The failure that was classified
        """
        super().__init__(details.technical_message)
        self.details = details
        self.original_error = original_error

    @classmethod
    def from_failure(
        cls,
        failure: Any,
        context: Mapping[str, ContextValue] | None = None,
        *,
        origin: ServiceOrigin | None = None,
    ) -> "AWSServiceError":
        """Classify a failure and wrap it in one step."""
        from .classifier import ErrorClassifier

        details = ErrorClassifier.classify(failure, context, origin=origin)
        return cls(details, failure)

    @property
    def category(self) -> ErrorCategory:
        """Category of the failure."""
        return self.details.category

    @property
    def retryable(self) -> bool:
        """Whether the failure is safe to retry."""
        return self.details.retryable

    @property
    def user_message(self) -> str:
        """Message safe to show to end users."""
        return self.details.user_message

    @property
    def technical_message(self) -> str:
        """Diagnostic message for logs."""
        return self.details.technical_message

    @property
    def error_code(self) -> str | None:
        """Provider error code, if one was present."""
        return self.details.error_code

    @property
    def http_status_code(self) -> int | None:
        """HTTP status of the failed call, if known."""
        return self.details.http_status_code

    @property
    def context(self) -> ErrorContext | None:
        """Caller-supplied context echoed from classification."""
        return self.details.context
