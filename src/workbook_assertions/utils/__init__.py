"""Utilities package for workbook assertions.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from workbook_assertions.utils.exceptions import (
    CellCountMismatchError,
    CellMissingError,
    ConfigurationError,
    DiscrepancyKind,
    ErrorCode,
    RowMissingError,
    SheetCountMismatchError,
    SheetNameMismatchError,
    SheetNotFoundError,
    TypeMismatchError,
    ValueMismatchError,
    WorkbookAssertionsError,
    WorkbookDiscrepancyError,
    WorkbookLoadError,
)
from workbook_assertions.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
    get_sheet,
    set_sheet,
)

__all__ = [
    # Exceptions
    "CellCountMismatchError",
    "CellMissingError",
    "ConfigurationError",
    "DiscrepancyKind",
    "ErrorCode",
    "RowMissingError",
    "SheetCountMismatchError",
    "SheetNameMismatchError",
    "SheetNotFoundError",
    "TypeMismatchError",
    "ValueMismatchError",
    "WorkbookAssertionsError",
    "WorkbookDiscrepancyError",
    "WorkbookLoadError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "get_sheet",
    "set_sheet",
]
