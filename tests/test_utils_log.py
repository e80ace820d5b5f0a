"""
Tests for structured logging utilities.
"""

import json
import logging
import sys
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import structlog

from aws_resilience.utils.log import (
    PACKAGE_LOGGER,
    AWSOperationLogger,
    build_json_formatter,
    configure_logging,
    configure_logging_from_settings,
)


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "aws_resilience.test", logging.WARNING, __file__, 1, msg, None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def is_json_handler(handler: logging.Handler) -> bool:
    return isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)


@pytest.fixture
def reset_package_logger():
    """Remove handlers installed by configure_logging."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(package_logger.handlers)
    level = package_logger.level

    yield package_logger

    package_logger.handlers = handlers
    package_logger.setLevel(level)


class TestJsonFormatter:
    """Tests for the structlog-backed JSON formatter."""

    @pytest.mark.unit
    def test_formats_single_json_line(self):
        """Test that records render as one JSON object."""
        formatter = build_json_formatter()

        line = formatter.format(make_record("retrying", operation="put", attempt=2))

        assert "\n" not in line
        entry = json.loads(line)
        assert entry["level"] == "warning"
        assert entry["logger"] == "aws_resilience.test"
        assert entry["event"] == "retrying"
        assert entry["operation"] == "put"
        assert entry["attempt"] == 2
        assert "timestamp" in entry

    @pytest.mark.unit
    def test_standard_attributes_are_not_duplicated(self):
        """Test that LogRecord internals stay out of the payload."""
        entry = json.loads(build_json_formatter().format(make_record()))

        for attr in ("args", "msg", "lineno", "pathname", "levelno", "_record"):
            assert attr not in entry

    @pytest.mark.unit
    def test_non_serializable_values_are_stringified(self):
        """Test that arbitrary objects do not break formatting."""
        entry = json.loads(
            build_json_formatter().format(make_record(error=ValueError("x")))
        )

        assert isinstance(entry["error"], str)
        assert "x" in entry["error"]

    @pytest.mark.unit
    def test_exception_info_included(self):
        """Test that exception tracebacks are captured."""
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        line = build_json_formatter().format(record)

        assert "\n" not in line
        assert "kaboom" in json.loads(line)["exception"]

    @pytest.mark.unit
    def test_missing_structlog_raises_import_error(self):
        """Test that JSON output without structlog points at the extra."""
        with patch("aws_resilience.utils.log.HAS_STRUCTLOG", False):
            with pytest.raises(ImportError, match=r"aws-resilience\[logging\]"):
                build_json_formatter()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_installs_json_handler(self, reset_package_logger):
        """Test that a JSON handler is attached to the package logger."""
        configure_logging("DEBUG")

        installed = [h for h in reset_package_logger.handlers if is_json_handler(h)]
        assert len(installed) == 1
        assert reset_package_logger.level == logging.DEBUG

    @pytest.mark.unit
    def test_repeated_calls_replace_handler(self, reset_package_logger):
        """Test that configure_logging does not stack handlers."""
        before = len(reset_package_logger.handlers)

        configure_logging()
        configure_logging(json_format=False)

        assert len(reset_package_logger.handlers) == before + 1
        assert not is_json_handler(reset_package_logger.handlers[-1])

    @pytest.mark.unit
    def test_plain_format_without_structlog(self, reset_package_logger):
        """Test that plain text output needs no structlog."""
        with patch("aws_resilience.utils.log.HAS_STRUCTLOG", False):
            configure_logging(json_format=False)

        assert not is_json_handler(reset_package_logger.handlers[-1])

    @pytest.mark.unit
    def test_configure_from_settings(self, reset_package_logger):
        """Test configuring from a settings object."""
        configure_logging_from_settings(SimpleNamespace(LOG_LEVEL="WARNING", LOG_JSON=True))

        assert reset_package_logger.level == logging.WARNING
        assert is_json_handler(reset_package_logger.handlers[-1])


class TestAWSOperationLogger:
    """Tests for AWSOperationLogger."""

    @pytest.mark.unit
    def test_log_operation(self, caplog):
        """Test completed operations are logged with their fields."""
        op_logger = AWSOperationLogger("DynamoDB")

        with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
            op_logger.log_operation(
                "UserRepository.get", resource="users", key={"id": "1"}, duration_ms=12.5
            )

        record = caplog.records[-1]
        assert record.getMessage() == "DynamoDB operation completed"
        assert record.service == "DynamoDB"
        assert record.operation == "UserRepository.get"
        assert record.resource == "users"
        assert record.key == {"id": "1"}
        assert record.duration_ms == 12.5

    @pytest.mark.unit
    def test_log_operation_omits_missing_fields(self, caplog):
        """Test that None-valued fields are left out."""
        op_logger = AWSOperationLogger("S3")

        with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
            op_logger.log_operation("upload")

        assert not hasattr(caplog.records[-1], "resource")

    @pytest.mark.unit
    def test_log_error_classifies(self, caplog, sample_context):
        """Test failed operations carry the classification."""
        op_logger = AWSOperationLogger("DynamoDB")

        with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
            op_logger.log_error(
                "UserRepository.put",
                {"name": "ThrottlingException", "message": "Rate exceeded"},
                resource="users",
                context=sample_context,
            )

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_category == "rate_limit"
        assert record.retryable is True
        assert record.technical_message == "DynamoDB throttling exception"
        assert record.original_error == "Rate exceeded"
        assert record.context == sample_context

    @pytest.mark.unit
    def test_custom_logger(self):
        """Test that a supplied logger is used."""
        custom = logging.getLogger("custom.aws")

        assert AWSOperationLogger("S3", custom).logger is custom
