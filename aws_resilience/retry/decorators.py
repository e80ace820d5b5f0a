"""
Decorator applying retry with exponential backoff to async AWS calls.

This module provides:
- @with_retry - Run an async function through ExponentialBackoff
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..errors.decorators import require_async
from .backoff import ExponentialBackoff
from .models import RetryConfig
from .policy import RetryPolicy

T = TypeVar("T", bound=Callable[..., Awaitable[Any]])


def with_retry(
    func: T | None = None,
    *,
    config: RetryConfig | None = None,
    policy: RetryPolicy | None = None,
    operation_name: str | None = None,
) -> Callable[[T], T] | T:
    """
    Decorator retrying an async function with exponential backoff.

    Every call of the decorated function runs through ExponentialBackoff.execute;
    the decorated function returns the wrapped function's result and raises
    RetryError on terminal failure.

    Args:
        func: Function to decorate (if used as @with_retry)
        config: Retry configuration (defaults to RetryConfig())
        policy: Retry policy injected into the orchestrator
        operation_name: Name used in logs (defaults to the function's qualname)

    Returns:
        Decorated function

    Example:
        @with_retry(config=RetryConfig(max_retries=5))
        async def put_item(table, item):
            return await table.put_item(Item=item)
    """

    def decorator(target: T) -> T:
        require_async("with_retry", target)
        backoff = ExponentialBackoff(config, policy=policy)
        name = operation_name or target.__qualname__

        @functools.wraps(target)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            execution = await backoff.execute(lambda: target(*args, **kwargs), name)
            return execution.result

        wrapper.retry = backoff  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    # Support both @with_retry and @with_retry(...) syntax
    if func is None:
        return decorator
    else:
        return decorator(func)
