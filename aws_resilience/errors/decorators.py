"""
Decorator classifying failures of async AWS calls.

This module provides:
- @handle_aws_errors - Log outcomes and re-raise failures as AWSServiceError
"""

import functools
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..utils.log import AWSOperationLogger
from .models import AWSServiceError, ResilienceError, ServiceOrigin

T = TypeVar("T", bound=Callable[..., Awaitable[Any]])


def require_async(decorator_name: str, func: Callable[..., Any]) -> None:
    """Raise TypeError unless func is a coroutine function."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError(
            f"@{decorator_name} can only be applied to async functions. "
            f"{func.__name__} is not async."
        )


def handle_aws_errors(
    func: T | None = None,
    *,
    origin: ServiceOrigin | None = None,
    operation_name: str | None = None,
    operation_logger: AWSOperationLogger | None = None,
) -> Callable[[T], T] | T:
    """
    Decorator that logs AWS call outcomes and classifies failures.

    On success the call is logged with its duration. On failure the error is
    logged with its classification and re-raised as AWSServiceError, with the
    original failure as its cause. Failures already raised by this package
    (AWSServiceError, RetryError) pass through unchanged.

    Args:
        func: Function to decorate (if used as @handle_aws_errors)
        origin: Service the wrapped call talks to, used for classification
        operation_name: Name used in logs and error context
        operation_logger: Logger for outcomes (defaults to one labelled by origin)

    Returns:
        Decorated function

    Example:
        @handle_aws_errors(origin=ServiceOrigin.S3)
        async def download(key):
            return await s3.get_object(Bucket=BUCKET, Key=key)
    """

    def decorator(target: T) -> T:
        require_async("handle_aws_errors", target)
        name = operation_name or target.__qualname__
        op_logger = operation_logger or AWSOperationLogger(
            origin.value if origin else "AWS"
        )

        @functools.wraps(target)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            try:
                result = await target(*args, **kwargs)
            except ResilienceError:
                raise
            except Exception as error:
                duration_ms = round((time.monotonic() - start) * 1000, 3)
                context = {"operation": name, "duration_ms": duration_ms}
                service_error = AWSServiceError.from_failure(
                    error, context, origin=origin
                )
                op_logger.log_error(name, error, details=service_error.details)
                raise service_error from error

            op_logger.log_operation(
                name, duration_ms=round((time.monotonic() - start) * 1000, 3)
            )
            return result

        return wrapper  # type: ignore[return-value]

    # Support both @handle_aws_errors and @handle_aws_errors(...) syntax
    if func is None:
        return decorator
    else:
        return decorator(func)
