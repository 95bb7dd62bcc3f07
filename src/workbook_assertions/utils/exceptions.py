"""Centralized exception classes for workbook assertions.

This module provides a hierarchy of custom exceptions with error codes and
structured error details. Discrepancy errors describe *why two workbooks
differ*; they are raised while walking a comparison and converted into a
comparison result before they reach the caller. Load and configuration errors
are genuine program errors and propagate.

Exception Hierarchy:
    WorkbookAssertionsError (base)
    ├── WorkbookDiscrepancyError
    │   ├── RowMissingError
    │   ├── CellCountMismatchError
    │   ├── CellMissingError
    │   ├── TypeMismatchError
    │   ├── ValueMismatchError
    │   ├── SheetCountMismatchError
    │   └── SheetNameMismatchError
    ├── WorkbookLoadError
    │   └── SheetNotFoundError
    └── ConfigurationError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the library.

    Error codes are grouped by category:
    - E1xxx: Row and cell discrepancies
    - E2xxx: Workbook structure discrepancies
    - E3xxx: Workbook loading errors
    - E9xxx: Internal/unexpected errors
    """

    # Row and cell discrepancies (E1xxx)
    ROW_MISSING = "E1001"
    CELL_COUNT_MISMATCH = "E1002"
    CELL_MISSING = "E1003"
    TYPE_MISMATCH = "E1004"
    VALUE_MISMATCH = "E1005"

    # Workbook structure discrepancies (E2xxx)
    SHEET_COUNT_MISMATCH = "E2001"
    SHEET_NAME_MISMATCH = "E2002"

    # Loading errors (E3xxx)
    FILE_NOT_FOUND = "E3001"
    UNSUPPORTED_FORMAT = "E3002"
    FILE_READ_ERROR = "E3003"
    SHEET_NOT_FOUND = "E3004"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class DiscrepancyKind(str, Enum):
    """The kinds of difference a comparison can report."""

    ROW_MISSING = "RowMissing"
    CELL_COUNT_MISMATCH = "CellCountMismatch"
    CELL_MISSING = "CellMissing"
    TYPE_MISMATCH = "TypeMismatch"
    VALUE_MISMATCH = "ValueMismatch"
    SHEET_COUNT_MISMATCH = "SheetCountMismatch"
    SHEET_NAME_MISMATCH = "SheetNameMismatch"


class WorkbookAssertionsError(Exception):
    """Base exception for all workbook assertion errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Discrepancies (E1xxx, E2xxx)
# =============================================================================


class WorkbookDiscrepancyError(WorkbookAssertionsError):
    """Base class for differences found between expected and actual.

    Attributes:
        kind: Which kind of discrepancy was found.
        coordinate: A1-style coordinate of the offending cell, if any.
        expected: The expected side of the difference, if any.
        actual: The actual side of the difference, if any.
    """

    kind: DiscrepancyKind

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        coordinate: str | None = None,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["kind"] = self.kind.value
        if coordinate:
            details["coordinate"] = coordinate
        super().__init__(message, error_code, details)
        self.coordinate = coordinate
        self.expected = expected
        self.actual = actual


class RowMissingError(WorkbookDiscrepancyError):
    """Raised when one side has a row the other lacks."""

    kind = DiscrepancyKind.ROW_MISSING

    def __init__(self, row_index: int) -> None:
        """Initialize with the zero-based index of the missing row."""
        super().__init__(
            f"One of rows was null (row {row_index + 1})",
            ErrorCode.ROW_MISSING,
            details={"row_index": row_index},
        )
        self.row_index = row_index


class CellCountMismatchError(WorkbookDiscrepancyError):
    """Raised when two rows have a different highest populated column."""

    kind = DiscrepancyKind.CELL_COUNT_MISMATCH

    def __init__(self, row_index: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Different number of cells: expected: '{expected}' actual '{actual}'",
            ErrorCode.CELL_COUNT_MISMATCH,
            expected=expected,
            actual=actual,
            details={"row_index": row_index},
        )
        self.row_index = row_index


class CellMissingError(WorkbookDiscrepancyError):
    """Raised when one side has a non-blank cell the other lacks."""

    kind = DiscrepancyKind.CELL_MISSING

    def __init__(self, coordinate: str) -> None:
        super().__init__(
            f"One of cells was null (at {coordinate})",
            ErrorCode.CELL_MISSING,
            coordinate=coordinate,
        )


class TypeMismatchError(WorkbookDiscrepancyError):
    """Raised when two cells exist but their semantic kinds differ."""

    kind = DiscrepancyKind.TYPE_MISMATCH

    def __init__(self, coordinate: str, expected: str, actual: str) -> None:
        """Initialize with the coordinate and both kind names.

        Args:
            coordinate: A1-style coordinate of the cell.
            expected: Kind name of the expected cell.
            actual: Kind name of the actual cell.
        """
        super().__init__(
            f"Cell at {coordinate} has different types: "
            f"expected: '{expected}' actual '{actual}'",
            ErrorCode.TYPE_MISMATCH,
            coordinate=coordinate,
            expected=expected,
            actual=actual,
        )


class ValueMismatchError(WorkbookDiscrepancyError):
    """Raised when two cells share a kind but hold different values."""

    kind = DiscrepancyKind.VALUE_MISMATCH

    def __init__(
        self,
        coordinate: str,
        cell_type: str,
        expected: Any,
        actual: Any,
        max_repr_length: int | None = None,
    ) -> None:
        """Initialize with the coordinate, kind and both values.

        Args:
            coordinate: A1-style coordinate of the cell.
            cell_type: Kind name shared by both cells.
            expected: Expected cell value.
            actual: Actual cell value.
            max_repr_length: Truncate rendered values beyond this length.
        """
        super().__init__(
            f"Cell at {coordinate} has different {cell_type} values: "
            f"expected: '{render_value(expected, max_repr_length)}' "
            f"actual '{render_value(actual, max_repr_length)}'",
            ErrorCode.VALUE_MISMATCH,
            coordinate=coordinate,
            expected=expected,
            actual=actual,
            details={"cell_type": cell_type},
        )
        self.cell_type = cell_type


class SheetCountMismatchError(WorkbookDiscrepancyError):
    """Raised when two workbooks hold a different number of sheets."""

    kind = DiscrepancyKind.SHEET_COUNT_MISMATCH

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Different number of sheets: expected: '{expected}' actual '{actual}'",
            ErrorCode.SHEET_COUNT_MISMATCH,
            expected=expected,
            actual=actual,
        )


class SheetNameMismatchError(WorkbookDiscrepancyError):
    """Raised when two workbooks name (or order) their sheets differently."""

    kind = DiscrepancyKind.SHEET_NAME_MISMATCH

    def __init__(self, expected: list[str], actual: list[str]) -> None:
        super().__init__(
            f"Different sheet names: expected: {expected} actual {actual}",
            ErrorCode.SHEET_NAME_MISMATCH,
            expected=expected,
            actual=actual,
        )


# =============================================================================
# Loading Errors (E3xxx)
# =============================================================================


class WorkbookLoadError(WorkbookAssertionsError):
    """Raised when a workbook cannot be read."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic file.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class SheetNotFoundError(WorkbookLoadError):
    """Raised when a named sheet does not exist in a workbook."""

    def __init__(
        self,
        sheet_name: str,
        available: list[str],
        file_path: str | None = None,
    ) -> None:
        super().__init__(
            f"Sheet '{sheet_name}' not found in workbook",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            file_path=file_path,
            details={"sheet_name": sheet_name, "available_sheets": available},
        )
        self.sheet_name = sheet_name


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================


class ConfigurationError(WorkbookAssertionsError):
    """Raised when settings are unusable."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


def render_value(value: Any, max_length: int | None = None) -> str:
    """Render a cell value for a message, truncating long text."""
    text = str(value)
    if max_length is not None and len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text
