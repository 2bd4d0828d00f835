"""
Test suite for correlation ID propagation and logging helpers.

System role: Verification of observability utilities
"""

import logging

import pytest

from pagecraft.models.results import Styling
from pagecraft.observability.correlation import clear_correlation_id, get_correlation_id, set_correlation_id
from pagecraft.observability.log_utils import log_with_context, safe_log_value
from pagecraft.observability.logger import CorrelationIdFilter, configure_logging


@pytest.fixture(autouse=True)
def reset_correlation_id():
    yield
    clear_correlation_id()


class TestCorrelationContext:
    """Test suite for the correlation ID context variable."""

    def test_should_default_to_empty(self) -> None:
        assert get_correlation_id() == ""

    def test_should_keep_supplied_id(self) -> None:
        assert set_correlation_id("abc") == "abc"
        assert get_correlation_id() == "abc"

    def test_should_generate_id_when_missing(self) -> None:
        generated = set_correlation_id()

        assert generated
        assert get_correlation_id() == generated

    def test_clear_should_reset(self) -> None:
        set_correlation_id("abc")

        clear_correlation_id()

        assert get_correlation_id() == ""


class TestCorrelationIdFilter:
    """Test suite for CorrelationIdFilter."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("pagecraft", logging.INFO, __file__, 1, "message", None, None)

    def test_should_attach_current_id(self) -> None:
        set_correlation_id("req-9")
        record = self._record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-9"

    def test_should_use_placeholder_outside_request(self) -> None:
        record = self._record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


class TestLogUtils:
    """Test suite for structured logging helpers."""

    def test_safe_log_value_should_truncate_long_strings(self) -> None:
        value = safe_log_value("x" * 1000, max_length=10)

        assert value.startswith("x" * 10)
        assert len(value) < 1000

    def test_safe_log_value_should_summarize_collections(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_log_with_context_should_attach_extra(self, caplog) -> None:
        logger = logging.getLogger("pagecraft.tests")

        with caplog.at_level(logging.WARNING, logger="pagecraft.tests"):
            log_with_context(logger, logging.WARNING, "repair failed", response_length=42)

        record = caplog.records[-1]
        assert record.getMessage() == "repair failed"
        assert record.response_length == "42"

    def test_safe_log_value_should_flatten_model_output(self) -> None:
        assert safe_log_value("<p>one</p>\n\n  <p>two</p>") == "<p>one</p> <p>two</p>"
        assert safe_log_value(Styling(css="p {}")) == "Styling(2 fields)"

    def test_log_with_context_should_attach_exception(self, caplog) -> None:
        logger = logging.getLogger("pagecraft.tests")
        error = ValueError("bad\nchunk")

        with caplog.at_level(logging.ERROR, logger="pagecraft.tests"):
            log_with_context(logger, logging.ERROR, "chunk failed", exc=error, chunk_index=1)

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad chunk"
        assert record.chunk_index == "1"
        assert record.exc_info[1] is error


class TestConfigureLogging:
    """Test suite for configure_logging."""

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_should_install_single_correlated_handler(self, restore_root_logger) -> None:
        # Act
        configure_logging("debug")
        configure_logging("DEBUG")

        # Assert
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_unknown_level_should_default_to_info(self, restore_root_logger) -> None:
        configure_logging("verbose")

        assert restore_root_logger.level == logging.INFO
