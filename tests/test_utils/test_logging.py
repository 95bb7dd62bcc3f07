"""Tests for the structured logging utilities."""

import logging
import time
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from workbook_assertions.utils.exceptions import RowMissingError, TypeMismatchError
from workbook_assertions.utils.logging import (
    LogContext,
    PerformanceMetrics,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_extra_context,
    get_logger,
    get_sheet,
    set_extra_context,
    set_sheet,
    timed_operation,
)


class TestContextVariables:
    """Tests for context variable management."""

    def test_sheet_default_none(self) -> None:
        """Sheet should default to None."""
        assert get_sheet() is None

    def test_set_and_get_sheet(self) -> None:
        """Should be able to set and get the sheet."""
        set_sheet("Totals")
        assert get_sheet() == "Totals"

    def test_extra_context_default_empty(self) -> None:
        """Extra context should default to empty dict."""
        assert get_extra_context() == {}

    def test_set_and_get_extra_context(self) -> None:
        """Should be able to set and get extra context."""
        ctx = {"workbook": "book.xlsx", "side": "actual"}
        set_extra_context(ctx)
        assert get_extra_context() == ctx

    def test_clear_context(self) -> None:
        """Clear context should reset all context variables."""
        set_sheet("Totals")
        set_extra_context({"key": "value"})

        clear_context()

        assert get_sheet() is None
        assert get_extra_context() == {}


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics class."""

    def test_initialization(self) -> None:
        """Test basic initialization."""
        metrics = PerformanceMetrics(operation="compare_sheets")
        assert metrics.operation == "compare_sheets"
        assert metrics.duration_seconds == 0.0
        assert metrics.sheets_compared == 0
        assert metrics.rows_compared == 0
        assert metrics.cells_compared == 0
        assert metrics.custom_metrics == {}

    def test_finish_calculates_duration(self) -> None:
        """Finish should calculate duration."""
        metrics = PerformanceMetrics(operation="compare_sheets")
        time.sleep(0.01)
        metrics.finish()
        assert metrics.duration_seconds > 0
        assert metrics.end_time is not None

    def test_to_dict_with_counts(self) -> None:
        """to_dict should include populated counts."""
        metrics = PerformanceMetrics(operation="compare_workbooks")
        metrics.duration_seconds = 0.25
        metrics.sheets_compared = 2
        metrics.rows_compared = 10
        metrics.cells_compared = 40
        metrics.custom_metrics = {"tolerance": 0.01}

        assert metrics.to_dict() == {
            "operation": "compare_workbooks",
            "duration_seconds": 0.25,
            "sheets_compared": 2,
            "rows_compared": 10,
            "cells_compared": 40,
            "custom_metrics": {"tolerance": 0.01},
        }

    def test_to_dict_excludes_zero_values(self) -> None:
        """to_dict should exclude zero values."""
        metrics = PerformanceMetrics(operation="compare_sheets")
        result = metrics.to_dict()
        assert "rows_compared" not in result
        assert "sheets_compared" not in result
        assert "custom_metrics" not in result


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        """get_logger should return StructuredLogger."""
        assert isinstance(get_logger(__name__), StructuredLogger)
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message_without_kwargs(self) -> None:
        """_build_message without kwargs should return original message."""
        assert self.logger._build_message("Test message") == "Test message"

    def test_build_message_with_kwargs(self) -> None:
        """_build_message with kwargs should append key-value pairs."""
        msg = self.logger._build_message("Loaded workbook", path="a.xlsx", sheets=2)
        assert msg == "Loaded workbook | path=a.xlsx, sheets=2"

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        """Info method should log at INFO level."""
        self.logger.info("Test info", status="ok")
        mock_info.assert_called_once_with("Test info | status=ok")

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        """Warning method should log at WARNING level."""
        self.logger.warning("Test warning")
        mock_warning.assert_called_once()

    @patch.object(logging.Logger, "error")
    def test_error_logging(self, mock_error: MagicMock) -> None:
        """Error method should pass exc_info through."""
        self.logger.error("Test error", exc_info=True)
        mock_error.assert_called_once_with("Test error", exc_info=True)

    @patch.object(logging.Logger, "exception")
    def test_exception_logging(self, mock_exception: MagicMock) -> None:
        """Exception method should log with traceback."""
        self.logger.exception("Test exception")
        mock_exception.assert_called_once()

    @patch.object(logging.Logger, "debug")
    def test_log_performance(self, mock_debug: MagicMock) -> None:
        """log_performance should log metrics at DEBUG."""
        metrics = PerformanceMetrics(operation="compare_sheets")
        metrics.rows_compared = 3
        self.logger.log_performance(metrics)

        call_args = mock_debug.call_args[0][0]
        assert call_args.startswith("Performance: compare_sheets")
        assert "rows_compared=3" in call_args

    @patch.object(logging.Logger, "debug")
    def test_log_discrepancy_with_coordinate(self, mock_debug: MagicMock) -> None:
        """log_discrepancy should include the coordinate."""
        self.logger.log_discrepancy(TypeMismatchError("B2", "STRING", "NUMERIC"))

        mock_debug.assert_called_once_with(
            "Discrepancy found: Cell at B2 has different types: "
            "expected: 'STRING' actual 'NUMERIC' | "
            "kind=TypeMismatch, error_code=E1004, coordinate=B2"
        )

    @patch.object(logging.Logger, "debug")
    def test_log_discrepancy_without_coordinate(self, mock_debug: MagicMock) -> None:
        """log_discrepancy should omit a missing coordinate."""
        self.logger.log_discrepancy(RowMissingError(0))

        call_args = mock_debug.call_args[0][0]
        assert call_args.endswith("kind=RowMissing, error_code=E1001")


class TestLogContext:
    """Tests for LogContext context manager."""

    def test_context_sets_values(self) -> None:
        """LogContext should set context values within block."""
        with LogContext(sheet="Totals", side="expected"):
            assert get_sheet() == "Totals"
            assert get_extra_context() == {"side": "expected"}

    def test_context_restores_values(self) -> None:
        """LogContext should restore original values after block."""
        set_sheet("Original")
        set_extra_context({"original": "value"})

        with LogContext(sheet="New", workbook="a.xlsx"):
            assert get_sheet() == "New"
            assert get_extra_context() == {"original": "value", "workbook": "a.xlsx"}

        assert get_sheet() == "Original"
        assert get_extra_context() == {"original": "value"}

    def test_nested_contexts(self) -> None:
        """Nested LogContext should work correctly."""
        with LogContext(sheet="Outer"):
            with LogContext(sheet="Inner"):
                assert get_sheet() == "Inner"
            assert get_sheet() == "Outer"
        assert get_sheet() is None

    def test_context_restored_on_error(self) -> None:
        """LogContext should restore values when the block raises."""
        with pytest.raises(RuntimeError), LogContext(sheet="Broken"):
            raise RuntimeError("boom")

        assert get_sheet() is None


class TestTimedOperation:
    """Tests for timed_operation context manager."""

    @patch.object(StructuredLogger, "log_performance")
    def test_timed_operation_logs_metrics(self, mock_log: MagicMock) -> None:
        """timed_operation should log metrics on exit."""
        logger = get_logger("test")
        with timed_operation(logger, "compare_sheets") as metrics:
            metrics.cells_compared = 12

        mock_log.assert_called_once()
        logged_metrics = mock_log.call_args[0][0]
        assert logged_metrics.operation == "compare_sheets"
        assert logged_metrics.cells_compared == 12
        assert logged_metrics.end_time is not None

    @patch.object(StructuredLogger, "log_performance")
    def test_timed_operation_logs_on_error(self, mock_log: MagicMock) -> None:
        """timed_operation should log metrics when the block raises."""
        logger = get_logger("test")
        with pytest.raises(ValueError), timed_operation(logger, "compare_sheets"):
            raise ValueError("bad input")

        mock_log.assert_called_once()


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter."""

    def _record(self, msg: str) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)

    def test_no_context(self) -> None:
        """Without context the message is unchanged."""
        formatter = StructuredLogFormatter("%(message)s")
        assert formatter.format(self._record("hello")) == "hello"

    def test_prefixes_context(self) -> None:
        """Context values prefix the message."""
        formatter = StructuredLogFormatter("%(message)s")
        record = self._record("Comparing rows")

        with LogContext(sheet="Totals", side="actual"):
            formatted = formatter.format(record)

        assert formatted == "[sheet=Totals side=actual] Comparing rows"
        assert record.msg == "Comparing rows"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.fixture(autouse=True)
    def _restore_root_logger(self) -> Generator[None, None, None]:
        root_logger = logging.getLogger()
        handlers = root_logger.handlers[:]
        level = root_logger.level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    def test_configure_with_string_level(self) -> None:
        """configure_logging should accept string level."""
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_int_level(self) -> None:
        """configure_logging should accept int level."""
        configure_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_installs_single_structured_handler(self) -> None:
        """configure_logging should install one structured handler."""
        configure_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, StructuredLogFormatter)

    def test_plain_formatter(self) -> None:
        """configure_logging can use a plain formatter."""
        configure_logging(use_structured_formatter=False)

        formatter = logging.getLogger().handlers[0].formatter
        assert not isinstance(formatter, StructuredLogFormatter)
