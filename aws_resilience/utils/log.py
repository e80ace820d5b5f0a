"""
Structured logging helpers for AWS operations.

Log calls across the package pass machine-readable fields through the
standard logging ``extra`` mechanism. configure_logging renders each record
and those fields as a single JSON line via structlog's ProcessorFormatter
(requires the [logging] extra).
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..errors.classifier import ErrorClassifier
from ..errors.failure import FailureInfo
from ..errors.models import ErrorDetails

try:
    import structlog

    HAS_STRUCTLOG = True
except ImportError:
    HAS_STRUCTLOG = False

PACKAGE_LOGGER = "aws_resilience"

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_json_formatter() -> logging.Formatter:
    """
    Create a formatter rendering stdlib records as single-line JSON.

    Each line carries timestamp, level, logger and event, plus every field
    passed through ``extra=``.

    Raises:
        ImportError: If structlog is not installed
    """
    if not HAS_STRUCTLOG:
        raise ImportError(
            "JSON logging requires structlog. "
            "Install it with: pip install aws-resilience[logging]"
        )

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(level: int | str = logging.INFO, json_format: bool = True) -> None:
    """
    Attach a stream handler to the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level for the package logger
        json_format: Emit JSON lines (default, requires structlog) or plain text
    """
    formatter = build_json_formatter() if json_format else logging.Formatter(PLAIN_FORMAT)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_aws_resilience_handler", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._aws_resilience_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


class AWSOperationLogger:
    """Logs the outcome of AWS operations with consistent structured fields."""

    def __init__(self, service: str, logger: logging.Logger | None = None) -> None:
        """
        Initialize the operation logger.

        Args:
            service: Service label included on every entry (e.g. "DynamoDB")
            logger: Logger to write to (defaults to this module's logger)
        """
        self.service = service
        self.logger = logger or logging.getLogger(__name__)

    def _extra(self, operation: str, **fields: Any) -> dict[str, Any]:
        extra = {"service": self.service, "operation": operation}
        extra.update({k: v for k, v in fields.items() if v is not None})
        return extra

    def log_operation(
        self,
        operation: str,
        resource: str | None = None,
        key: Mapping[str, Any] | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Log a completed operation."""
        self.logger.info(
            f"{self.service} operation completed",
            extra=self._extra(
                operation, resource=resource, key=key, duration_ms=duration_ms
            ),
        )

    def log_error(
        self,
        operation: str,
        error: Any,
        resource: str | None = None,
        key: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
        details: ErrorDetails | None = None,
    ) -> None:
        """
        Log a failed operation together with its classification.

        The error is classified here unless details are supplied.
        """
        if details is None:
            details = ErrorClassifier.classify(error, context)
        self.logger.error(
            f"{self.service} operation failed",
            extra=self._extra(
                operation,
                resource=resource,
                key=key,
                error_category=details.category.value,
                error_code=details.error_code,
                http_status_code=details.http_status_code,
                retryable=details.retryable,
                technical_message=details.technical_message,
                original_error=FailureInfo.from_failure(error).message,
                context=details.context,
            ),
        )


def configure_logging_from_settings(settings: Any) -> None:
    """Configure package logging from ResilienceSettings (LOG_LEVEL, LOG_JSON)."""
    configure_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
