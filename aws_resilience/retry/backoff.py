"""
Exponential backoff retry orchestrator with jitter.

Runs an async operation, retrying failures the configured RetryPolicy
judges retryable, and waiting an exponentially growing, jittered delay
between attempts.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..errors.failure import FailureInfo
from .models import (
    ExecutionResult,
    JitterType,
    RetryConfig,
    RetryError,
)
from .policy import NamePatternRetryPolicy, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]

# Largest power of two representable as a float; 2.0 ** 1024 overflows.
_MAX_EXPONENT = 1023


def compute_delay(
    attempt: int, config: RetryConfig, rng: random.Random | None = None
) -> float:
    """
    Calculate the delay before the retry that follows a failed attempt.

    Args:
        attempt: Index of the attempt that just failed (1 for the first try)
        config: Retry configuration
        rng: Random source for jitter (defaults to the random module)

    Returns:
        Delay in milliseconds
    """
    if attempt < 1:
        raise ValueError("attempt must be >= 1")

    uniform = (rng or random).uniform
    exponent = min(attempt - 1, _MAX_EXPONENT)
    capped = min(config.base_delay * 2.0**exponent, config.max_delay)

    if config.jitter_type is JitterType.NONE:
        return capped
    if config.jitter_type is JitterType.FULL:
        return uniform(0, capped)
    # Equal jitter: half guaranteed, half random
    half = capped / 2
    return half + uniform(0, half)


class ExponentialBackoff:
    """Retries async operations with capped exponential backoff and jitter."""

    def __init__(
        self,
        config: RetryConfig | None = None,
        *,
        policy: RetryPolicy | None = None,
        sleep: SleepFunc = asyncio.sleep,
        rng: random.Random | None = None,
        **overrides: Any,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Base retry configuration (defaults to RetryConfig())
            policy: Retry policy; defaults to a NamePatternRetryPolicy built
                from the config's retryable_errors on every execution
            sleep: Awaitable sleep taking seconds
            rng: Random source for jitter
            **overrides: RetryConfig fields merged over config
        """
        base = config or RetryConfig()
        self._config = base.merge(**overrides) if overrides else base
        self._policy = policy
        self._sleep = sleep
        self._rng = rng

    def get_config(self) -> RetryConfig:
        """Get the current configuration."""
        return self._config

    def update_config(self, **fields: Any) -> None:
        """
        Replace configuration fields, leaving unspecified fields untouched.

        Executions already in flight keep the config they started with.
        """
        self._config = self._config.merge(**fields)

    def calculate_delay(self, attempt: int) -> float:
        """Delay in milliseconds after the given failed attempt."""
        return compute_delay(attempt, self._config, self._rng)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "unknown",
    ) -> ExecutionResult[T]:
        """
        Execute an operation with exponential backoff retry logic.

        The operation may be invoked several times and must be safe to repeat.

        Args:
            operation: Zero-argument callable returning an awaitable
            operation_name: Name used in log lines and the RetryError message

        Returns:
            ExecutionResult with the operation's result, the number of
            attempts made, and the total delay in milliseconds

        Raises:
            RetryError: If the failure is non-retryable or retries are exhausted
        """
        config = self._config
        policy = self._policy or NamePatternRetryPolicy(config.retryable_errors)
        max_attempts = config.max_retries + 1
        attempt = 1
        total_delay = 0.0

        while True:
            try:
                result = await operation()
            except Exception as error:
                error_name = _error_name(error)
                logger.warning(
                    f"Operation {operation_name} failed on attempt {attempt}: {error}",
                    extra={
                        "operation": operation_name,
                        "error": str(error),
                        "error_name": error_name,
                        "attempt": attempt,
                        "max_retries": config.max_retries,
                    },
                )

                if not policy.is_retryable(error):
                    logger.error(
                        f"Non-retryable error encountered in {operation_name}: "
                        f"{error_name}",
                        extra={
                            "operation": operation_name,
                            "error_name": error_name,
                            "attempt": attempt,
                        },
                    )
                    raise RetryError(
                        operation_name, attempt, error, total_delay
                    ) from error

                if attempt >= max_attempts:
                    logger.error(
                        f"Operation {operation_name} exhausted {config.max_retries} "
                        f"retries",
                        extra={
                            "operation": operation_name,
                            "error_name": error_name,
                            "attempts": attempt,
                            "total_delay_ms": total_delay,
                        },
                    )
                    raise RetryError(
                        operation_name, attempt, error, total_delay
                    ) from error

                delay = compute_delay(attempt, config, self._rng)
                logger.info(
                    f"Retrying operation {operation_name} in {delay:.0f}ms "
                    f"(attempt {attempt + 1}/{max_attempts})",
                    extra={
                        "operation": operation_name,
                        "delay_ms": delay,
                        "next_attempt": attempt + 1,
                        "max_attempts": max_attempts,
                    },
                )
                await self._sleep(delay / 1000)
                total_delay += delay
                attempt += 1
                continue

            if attempt > 1:
                logger.info(
                    f"Operation {operation_name} succeeded on attempt {attempt}",
                    extra={
                        "operation": operation_name,
                        "attempts": attempt,
                        "total_delay_ms": total_delay,
                    },
                )
            return ExecutionResult(
                result=result, attempts=attempt, total_delay=total_delay
            )


def default_retry(**overrides: Any) -> ExponentialBackoff:
    """
    Create an orchestrator with the default retry policy.

    Each call returns a new instance, so updating one never affects another.
    """
    return ExponentialBackoff(RetryConfig(), **overrides)


def _error_name(error: BaseException) -> str:
    return FailureInfo.from_failure(error).name or type(error).__name__
