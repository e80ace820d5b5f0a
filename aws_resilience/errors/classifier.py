"""
Error classifier for AWS service failures.

Maps an opaque failure to ErrorDetails by inferring the originating service,
then looking the error name up in a per-service table, then falling back to
the HTTP status code, and finally to a conservative generic verdict.
"""

from collections.abc import Mapping
from typing import Any, NamedTuple

from .failure import FailureInfo
from .models import (
    ContextValue,
    ErrorCategory,
    ErrorContext,
    ErrorDetails,
    ServiceOrigin,
)

GENERIC_SERVICE_LABEL = "AWS"

# Error names only S3 produces; used when the failure carries no service label.
S3_ONLY_ERROR_NAMES = frozenset(
    {"NoSuchBucket", "NoSuchKey", "EntityTooLarge", "SlowDown"}
)

DYNAMODB_ONLY_ERROR_NAMES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ConditionalCheckFailedException",
        "ResourceNotFoundException",
    }
)


class _Verdict(NamedTuple):
    category: ErrorCategory
    retryable: bool
    user_message: str
    technical_message: str


_S3_ERRORS: dict[str, _Verdict] = {
    "NoSuchBucket": _Verdict(
        ErrorCategory.SYSTEM,
        False,
        "Storage service configuration error. Please contact support.",
        "S3 bucket does not exist",
    ),
    "NoSuchKey": _Verdict(
        ErrorCategory.RESOURCE_NOT_FOUND,
        False,
        "The requested file was not found.",
        "S3 object does not exist",
    ),
    "AccessDenied": _Verdict(
        ErrorCategory.AUTHORIZATION,
        False,
        "You do not have permission to access this file.",
        "S3 access denied",
    ),
    "EntityTooLarge": _Verdict(
        ErrorCategory.VALIDATION,
        False,
        "File is too large to upload.",
        "S3 entity too large",
    ),
    "SlowDown": _Verdict(
        ErrorCategory.RATE_LIMIT,
        True,
        "Upload service is busy. Please try again in a moment.",
        "S3 slow down error",
    ),
    "ServiceUnavailable": _Verdict(
        ErrorCategory.SYSTEM,
        True,
        "Upload service is temporarily unavailable. Please try again.",
        "S3 service unavailable",
    ),
    "InternalError": _Verdict(
        ErrorCategory.SYSTEM,
        True,
        "Upload service is temporarily unavailable. Please try again.",
        "S3 service unavailable",
    ),
    "RequestTimeout": _Verdict(
        ErrorCategory.TRANSIENT,
        True,
        "Upload timed out. Please try again.",
        "S3 request timeout",
    ),
}

_DYNAMODB_ERRORS: dict[str, _Verdict] = {
    "ProvisionedThroughputExceededException": _Verdict(
        ErrorCategory.RATE_LIMIT,
        True,
        "Service is temporarily busy. Please try again in a moment.",
        "DynamoDB provisioned throughput exceeded",
    ),
    "ThrottlingException": _Verdict(
        ErrorCategory.RATE_LIMIT,
        True,
        "Too many requests. Please try again in a moment.",
        "DynamoDB throttling exception",
    ),
    "ResourceNotFoundException": _Verdict(
        ErrorCategory.RESOURCE_NOT_FOUND,
        False,
        "The requested resource was not found.",
        "DynamoDB resource not found",
    ),
    "ConditionalCheckFailedException": _Verdict(
        ErrorCategory.VALIDATION,
        False,
        "The operation could not be completed due to a conflict.",
        "DynamoDB conditional check failed",
    ),
    # Technical message gets the original message appended, see _classify_dynamodb.
    "ValidationException": _Verdict(
        ErrorCategory.VALIDATION,
        False,
        "Invalid input provided. Please check your data and try again.",
        "DynamoDB validation error",
    ),
    "AccessDeniedException": _Verdict(
        ErrorCategory.AUTHORIZATION,
        False,
        "You do not have permission to perform this operation.",
        "DynamoDB access denied",
    ),
    "UnauthorizedException": _Verdict(
        ErrorCategory.AUTHORIZATION,
        False,
        "You do not have permission to perform this operation.",
        "DynamoDB access denied",
    ),
    "ServiceUnavailable": _Verdict(
        ErrorCategory.SYSTEM,
        True,
        "Service is temporarily unavailable. Please try again later.",
        "DynamoDB service unavailable",
    ),
    "InternalServerError": _Verdict(
        ErrorCategory.SYSTEM,
        True,
        "Service is temporarily unavailable. Please try again later.",
        "DynamoDB service unavailable",
    ),
    "RequestTimeout": _Verdict(
        ErrorCategory.TRANSIENT,
        True,
        "Request timed out. Please try again.",
        "DynamoDB request timeout",
    ),
    "TimeoutError": _Verdict(
        ErrorCategory.TRANSIENT,
        True,
        "Request timed out. Please try again.",
        "DynamoDB request timeout",
    ),
    "NetworkingError": _Verdict(
        ErrorCategory.TRANSIENT,
        True,
        "Network connection error. Please check your connection and try again.",
        "DynamoDB networking error",
    ),
    "ConnectionError": _Verdict(
        ErrorCategory.TRANSIENT,
        True,
        "Network connection error. Please check your connection and try again.",
        "DynamoDB networking error",
    ),
}

_ERROR_TABLES: dict[ServiceOrigin, dict[str, _Verdict]] = {
    ServiceOrigin.S3: _S3_ERRORS,
    ServiceOrigin.DYNAMODB: _DYNAMODB_ERRORS,
}

_UNKNOWN_ERROR_NAME = "UnknownError"
_UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class ErrorClassifier:
    """Classifies AWS failures into structured, user-presentable verdicts."""

    @classmethod
    def classify(
        cls,
        failure: Any,
        context: Mapping[str, ContextValue] | None = None,
        *,
        origin: ServiceOrigin | None = None,
    ) -> ErrorDetails:
        """
        Classify a failure and return structured error details.

        Args:
            failure: The failure to classify (exception, mapping, or object)
            context: Correlation data echoed back on the result
            origin: Service that produced the failure, when the caller knows it

        Returns:
            ErrorDetails for the failure; never raises
        """
        info = FailureInfo.from_failure(failure)
        detected = origin or cls.detect_origin(info)
        table_origin = detected or ServiceOrigin.DYNAMODB
        label = detected.value if detected else GENERIC_SERVICE_LABEL
        copied_context: ErrorContext | None = (
            dict(context) if context is not None else None
        )

        name = info.name or _UNKNOWN_ERROR_NAME
        message = info.message or _UNKNOWN_ERROR_MESSAGE

        verdict = _ERROR_TABLES[table_origin].get(name)
        if verdict is not None:
            technical_message = verdict.technical_message
            if table_origin is ServiceOrigin.DYNAMODB and name == "ValidationException":
                technical_message = f"{technical_message}: {message}"
            return ErrorDetails(
                category=verdict.category,
                retryable=verdict.retryable,
                user_message=verdict.user_message,
                technical_message=technical_message,
                error_code=info.error_code,
                http_status_code=info.http_status_code,
                context=copied_context,
            )

        return cls._classify_generic(info, message, label, copied_context)

    @staticmethod
    def detect_origin(info: FailureInfo) -> ServiceOrigin | None:
        """
        Infer the originating service from a failure's attributes.

        Returns None when nothing identifies the service.
        """
        service = (info.service or "").lower()
        if service == "s3":
            return ServiceOrigin.S3
        if service == "dynamodb":
            return ServiceOrigin.DYNAMODB

        name = info.name or ""
        code = info.code or ""
        if "S3" in name or "S3" in code or name in S3_ONLY_ERROR_NAMES:
            return ServiceOrigin.S3
        if name in DYNAMODB_ONLY_ERROR_NAMES:
            return ServiceOrigin.DYNAMODB
        return None

    @staticmethod
    def _classify_generic(
        info: FailureInfo,
        message: str,
        label: str,
        context: ErrorContext | None,
    ) -> ErrorDetails:
        """Classify by HTTP status code, then fall back to a generic verdict."""
        status = info.http_status_code

        if status is not None and status >= 500:
            category = ErrorCategory.SYSTEM
            retryable = True
            user_message = "Service is temporarily unavailable. Please try again later."
            technical_message = f"{label} server error: {message}"
        elif status == 429:
            category = ErrorCategory.RATE_LIMIT
            retryable = True
            user_message = "Too many requests. Please try again in a moment."
            technical_message = f"{label} rate limit exceeded"
        elif status is not None and 400 <= status < 500:
            category = ErrorCategory.VALIDATION
            retryable = False
            user_message = "Invalid request. Please check your input and try again."
            technical_message = f"{label} client error: {message}"
        else:
            category = ErrorCategory.SYSTEM
            retryable = False
            user_message = (
                "An unexpected error occurred. Please try again or contact support."
            )
            technical_message = f"Unknown {label} error: {message}"

        return ErrorDetails(
            category=category,
            retryable=retryable,
            user_message=user_message,
            technical_message=technical_message,
            error_code=info.error_code,
            http_status_code=status,
            context=context,
        )

    @classmethod
    def is_retryable(cls, failure: Any) -> bool:
        """Check if a failure is retryable."""
        return cls.classify(failure).retryable

    @classmethod
    def get_user_message(cls, failure: Any) -> str:
        """Get a message safe to show to end users."""
        return cls.classify(failure).user_message

    @classmethod
    def get_technical_message(cls, failure: Any) -> str:
        """Get the technical message for logging."""
        return cls.classify(failure).technical_message
