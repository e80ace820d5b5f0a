"""
Extraction of classification attributes from opaque failure values.

Failures reach the classifier in several shapes: botocore exceptions,
plain mappings shaped like AWS SDK errors, or arbitrary exceptions.
FailureInfo normalizes them into the handful of fields classification needs.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

try:
    from botocore.exceptions import (
        ClientError,
        ConnectTimeoutError,
        ReadTimeoutError,
    )
    from botocore.exceptions import ConnectionError as BotoConnectionError

    HAS_BOTOCORE = True
except ImportError:
    HAS_BOTOCORE = False

_METADATA_KEYS = ("$metadata", "metadata")


@dataclass(frozen=True)
class FailureInfo:
    """Normalized view of a failure value."""

    name: str | None = None
    code: str | None = None
    message: str | None = None
    http_status_code: int | None = None
    service: str | None = None
    metadata_error_code: str | None = None

    @property
    def error_code(self) -> str | None:
        """Provider error code, preferring the top-level code."""
        return self.code or self.metadata_error_code

    @classmethod
    def from_failure(cls, failure: Any) -> "FailureInfo":
        """
        Build a FailureInfo from any failure value.

        Args:
            failure: Exception, mapping, or other object describing a failure

        Returns:
            FailureInfo with every field that could be read; missing or
            unreadable fields are None
        """
        if failure is None:
            return cls()
        if isinstance(failure, Mapping):
            return cls._from_mapping(failure)
        if HAS_BOTOCORE and isinstance(failure, ClientError):
            return cls._from_client_error(failure)
        return cls._from_object(failure)

    @classmethod
    def _from_mapping(cls, failure: Mapping[str, Any]) -> "FailureInfo":
        metadata = _first_mapping(_safe_get(failure, key) for key in _METADATA_KEYS)
        return cls(
            name=_as_str(_safe_get(failure, "name")),
            code=_as_str(_safe_get(failure, "code")),
            message=_as_str(_safe_get(failure, "message")),
            **_metadata_fields(metadata),
        )

    @classmethod
    def _from_client_error(cls, failure: Any) -> "FailureInfo":
        response = _as_mapping(_safe_getattr(failure, "response"))
        error = _as_mapping(_safe_get(response, "Error"))
        response_metadata = _as_mapping(_safe_get(response, "ResponseMetadata"))
        code = _as_str(_safe_get(error, "Code"))
        return cls(
            name=code,
            code=code,
            message=_as_str(_safe_get(error, "Message")) or _safe_str(failure),
            http_status_code=_as_int(_safe_get(response_metadata, "HTTPStatusCode")),
        )

    @classmethod
    def _from_object(cls, failure: Any) -> "FailureInfo":
        name = _as_str(_safe_getattr(failure, "name"))
        if name is None and isinstance(failure, BaseException):
            name = _transport_error_name(failure) or type(failure).__name__

        message = _as_str(_safe_getattr(failure, "message"))
        if message is None and isinstance(failure, BaseException):
            message = _safe_str(failure) or None

        metadata = _first_mapping(
            _safe_getattr(failure, key) for key in _METADATA_KEYS
        )
        return cls(
            name=name,
            code=_as_str(_safe_getattr(failure, "code")),
            message=message,
            **_metadata_fields(metadata),
        )


def _transport_error_name(failure: BaseException) -> str | None:
    """Map botocore transport errors onto the SDK's generic error names."""
    if not HAS_BOTOCORE:
        return None
    if isinstance(failure, (ReadTimeoutError, ConnectTimeoutError)):
        return "RequestTimeout"
    if isinstance(failure, BotoConnectionError):
        return "NetworkingError"
    return None


def _metadata_fields(metadata: Mapping[str, Any] | None) -> dict[str, Any]:
    if metadata is None:
        return {}
    status = _safe_get(metadata, "httpStatusCode")
    if status is None:
        status = _safe_get(metadata, "http_status_code")
    return {
        "http_status_code": _as_int(status),
        "service": _as_str(_safe_get(metadata, "service")),
        "metadata_error_code": _as_str(
            _safe_get(metadata, "errorCode") or _safe_get(metadata, "error_code")
        ),
    }


def _first_mapping(candidates: Any) -> Mapping[str, Any] | None:
    for candidate in candidates:
        if isinstance(candidate, Mapping):
            return candidate
    return None


def _safe_getattr(obj: Any, attr: str) -> Any:
    # Properties on third-party exceptions may raise; treat that as absent.
    try:
        return getattr(obj, attr, None)
    except Exception:
        return None


def _safe_get(mapping: Mapping[str, Any], key: str) -> Any:
    # Mappings from callers may raise on lookup; treat that as absent.
    try:
        return mapping.get(key)
    except Exception:
        return None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _safe_str(obj: Any) -> str:
    try:
        return str(obj)
    except Exception:
        return ""


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdecimal():
        return int(value)
    return None
