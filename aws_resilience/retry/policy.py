"""
Retry policies deciding whether a failure is worth another attempt.

ExponentialBackoff depends on the RetryPolicy protocol only, so the policy
used by the retry loop can be the same one used for reporting.
"""

import re
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from ..errors.classifier import ErrorClassifier
from ..errors.failure import FailureInfo

RETRYABLE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"throttl",
        r"timeout",
        r"timed out",
        r"network",
        r"connection",
        r"service unavailable",
        r"internal server error",
        r"provisioned throughput exceeded",
    )
)

NON_RETRYABLE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"validation",
        r"invalid",
    )
)


@runtime_checkable
class RetryPolicy(Protocol):
    """Protocol for deciding whether a failure may be retried."""

    def is_retryable(self, failure: Any) -> bool:
        """
        Decide whether the operation that raised failure may be retried.

        Args:
            failure: The failure raised by the operation

        Returns:
            True if a retry may succeed without corrective action
        """
        ...


class NamePatternRetryPolicy:
    """
    Retry policy keyed on error names, then message heuristics.

    A failure is retryable if its name or code is in retryable_errors.
    Otherwise validation-looking tokens in its name or message make it
    non-retryable and transient-looking tokens make it retryable. Anything
    else is non-retryable.
    """

    def __init__(self, retryable_errors: Iterable[str]) -> None:
        self.retryable_errors = frozenset(retryable_errors)

    def is_retryable(self, failure: Any) -> bool:
        info = FailureInfo.from_failure(failure)
        if info.name in self.retryable_errors or info.code in self.retryable_errors:
            return True

        texts = [text for text in (info.message, info.name) if text]
        # Validation wording wins over transient wording in the same message
        if any(p.search(text) for p in NON_RETRYABLE_PATTERNS for text in texts):
            return False
        return any(p.search(text) for p in RETRYABLE_PATTERNS for text in texts)


class ClassifierRetryPolicy:
    """Retry policy that follows ErrorClassifier's service-aware verdict."""

    def is_retryable(self, failure: Any) -> bool:
        return ErrorClassifier.is_retryable(failure)
