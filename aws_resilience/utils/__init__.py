"""
Logging utilities shared by the error and retry modules.
"""

from .log import (
    AWSOperationLogger,
    build_json_formatter,
    configure_logging,
    configure_logging_from_settings,
)

__all__ = [
    "AWSOperationLogger",
    "build_json_formatter",
    "configure_logging",
    "configure_logging_from_settings",
]
