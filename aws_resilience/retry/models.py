"""
Retry configuration, results, and terminal failure types.
"""

import dataclasses
from dataclasses import dataclass
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..errors.models import ResilienceError

if TYPE_CHECKING:
    from ..config.settings import ResilienceSettings

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 100.0
DEFAULT_MAX_DELAY_MS = 5000.0

DEFAULT_RETRYABLE_ERRORS: tuple[str, ...] = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "ServiceUnavailable",
    "InternalServerError",
    "RequestTimeout",
    "NetworkingError",
    "UnknownError",
)


class JitterType(Enum):
    """Randomization applied to a computed backoff delay."""

    NONE = "none"
    FULL = "full"
    EQUAL = "equal"


@dataclass(frozen=True)
class RetryConfig:
    """
    Immutable retry policy.

    Delays are in milliseconds. max_delay caps each per-attempt delay
    before jitter is applied.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY_MS
    max_delay: float = DEFAULT_MAX_DELAY_MS
    jitter_type: JitterType = JitterType.FULL
    retryable_errors: tuple[str, ...] = DEFAULT_RETRYABLE_ERRORS

    def __post_init__(self) -> None:
        """Validate fields and normalize jitter type and error names."""
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise TypeError("max_retries must be an integer")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.max_delay < 0:
            raise ValueError("max_delay must be non-negative")

        # Frozen dataclass: normalize through object.__setattr__
        if not isinstance(self.jitter_type, JitterType):
            try:
                jitter_type = JitterType(self.jitter_type)
            except ValueError:
                valid = ", ".join(j.value for j in JitterType)
                raise ValueError(
                    f"Unknown jitter type {self.jitter_type!r}; expected one of: {valid}"
                ) from None
            object.__setattr__(self, "jitter_type", jitter_type)

        if isinstance(self.retryable_errors, str):
            raise TypeError("retryable_errors must be a collection of names, not a str")
        object.__setattr__(
            self, "retryable_errors", _ordered_unique(self.retryable_errors)
        )

    def merge(self, **fields: Any) -> "RetryConfig":
        """
        Return a new config with the supplied fields replaced.

        Fields not supplied keep their current values.
        """
        return dataclasses.replace(self, **fields)

    @classmethod
    def from_settings(cls, settings: "ResilienceSettings") -> "RetryConfig":
        """
        Build a config from environment-driven settings.

        Args:
            settings: Loaded ResilienceSettings instance

        Returns:
            RetryConfig carrying the settings' retry values
        """
        return cls(
            max_retries=settings.RETRY_MAX_RETRIES,
            base_delay=settings.RETRY_BASE_DELAY_MS,
            max_delay=settings.RETRY_MAX_DELAY_MS,
            jitter_type=JitterType(settings.RETRY_JITTER_TYPE),
            retryable_errors=tuple(settings.RETRY_RETRYABLE_ERRORS),
        )


def default_retry_config() -> RetryConfig:
    """Return a fresh config with the default policy and retryable error names."""
    return RetryConfig()


@dataclass(frozen=True)
class ExecutionResult(Generic[T]):
    """Result of an operation that eventually succeeded."""

    result: T
    attempts: int
    total_delay: float


class RetryError(ResilienceError):
    """Raised once retries are exhausted or a failure is judged non-retryable."""

    def __init__(
        self,
        operation_name: str,
        attempts: int,
        last_error: BaseException,
        total_delay: float,
    ) -> None:
        """
        Initialize a terminal retry failure.

        Args:
            operation_name: Name of the operation that failed
            attempts: Total number of invocations made, including the first
            last_error: The final failure raised by the operation
            total_delay: Milliseconds spent waiting between attempts
        """
        self.message = f"{operation_name} failed after {attempts} attempts"
        super().__init__(self.message)
        self.operation_name = operation_name
        self.attempts = attempts
        self.last_error = last_error
        self.total_delay = total_delay


def _ordered_unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))
