"""Row-by-row, cell-by-cell comparison of spreadsheet sheets and workbooks.

Only rows and cells present on the *expected* side are walked, so the
comparison is asymmetric: trailing rows that exist only in the
actual sheet are never inspected. The first discrepancy found ends the walk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
from openpyxl.worksheet._read_only import ReadOnlyWorksheet
from openpyxl.worksheet.worksheet import Worksheet

from workbook_assertions.cell_types import CellType, formula_text
from workbook_assertions.config import Settings, settings
from workbook_assertions.excel_document import Sheet, SheetCell, SheetRow, Workbook
from workbook_assertions.services.sheet_reader import SheetReader
from workbook_assertions.utils.exceptions import (
    CellCountMismatchError,
    CellMissingError,
    DiscrepancyKind,
    ErrorCode,
    RowMissingError,
    SheetCountMismatchError,
    SheetNameMismatchError,
    TypeMismatchError,
    ValueMismatchError,
    WorkbookDiscrepancyError,
)
from workbook_assertions.utils.logging import (
    LogContext,
    PerformanceMetrics,
    get_logger,
    timed_operation,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Discrepancy:
    """The first difference found between expected and actual."""

    kind: DiscrepancyKind
    message: str
    error_code: ErrorCode
    coordinate: str | None = None
    expected: Any = None
    actual: Any = None
    sheet_name: str | None = None

    @classmethod
    def from_error(
        cls, error: WorkbookDiscrepancyError, sheet_name: str | None = None
    ) -> Discrepancy:
        return cls(
            kind=error.kind,
            message=error.message,
            error_code=error.error_code,
            coordinate=error.coordinate,
            expected=error.expected,
            actual=error.actual,
            sheet_name=sheet_name,
        )

    @property
    def description(self) -> str:
        if self.sheet_name is None:
            return self.message
        return f"Sheet '{self.sheet_name}': {self.message}"


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of a comparison: equal, or the first discrepancy."""

    discrepancy: Discrepancy | None = None
    sheets_compared: int = 0
    rows_compared: int = 0
    cells_compared: int = 0

    @property
    def equal(self) -> bool:
        return self.discrepancy is None

    @property
    def description(self) -> str | None:
        """One sentence describing the discrepancy, or None when equal."""
        if self.discrepancy is None:
            return None
        return self.discrepancy.description

    def as_tuple(self) -> tuple[bool, str | None]:
        return self.equal, self.description

    def __bool__(self) -> bool:
        return self.equal


class SheetComparator:
    """Compare sheets and workbooks, stopping at the first discrepancy.

    Inputs may be ``Sheet``/``Workbook`` snapshots or openpyxl objects, which
    are snapshotted first. Workbooks may also be given as file paths.
    """

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or settings
        self._reader = SheetReader(self._settings)

    def compare_sheets(self, expected: Any, actual: Any) -> ComparisonResult:
        """Compare every row present in ``expected`` against ``actual``."""
        expected_sheet = self.as_sheet(expected)
        actual_sheet = self.as_sheet(actual)

        with (
            LogContext(sheet=expected_sheet.name),
            timed_operation(logger, "compare_sheets") as metrics,
        ):
            self._record_tolerance(metrics)
            try:
                self._verify_sheet(expected_sheet, actual_sheet, metrics)
            except WorkbookDiscrepancyError as e:
                logger.log_discrepancy(e)
                return self._result(metrics, Discrepancy.from_error(e))
            return self._result(metrics)

    def compare_workbooks(self, expected: Any, actual: Any) -> ComparisonResult:
        """Compare sheet count, sheet names, then each sheet in order."""
        expected_book = self.as_workbook(expected)
        actual_book = self.as_workbook(actual)

        with timed_operation(logger, "compare_workbooks") as metrics:
            self._record_tolerance(metrics)
            current_sheet: str | None = None
            try:
                if len(expected_book) != len(actual_book):
                    raise SheetCountMismatchError(len(expected_book), len(actual_book))
                if expected_book.sheet_names != actual_book.sheet_names:
                    raise SheetNameMismatchError(
                        expected_book.sheet_names, actual_book.sheet_names
                    )
                for expected_sheet, actual_sheet in zip(
                    expected_book, actual_book, strict=True
                ):
                    current_sheet = expected_sheet.name
                    metrics.sheets_compared += 1
                    with LogContext(sheet=current_sheet):
                        self._verify_sheet(expected_sheet, actual_sheet, metrics)
            except WorkbookDiscrepancyError as e:
                logger.log_discrepancy(e)
                return self._result(metrics, Discrepancy.from_error(e, current_sheet))
            return self._result(metrics)

    def as_sheet(self, value: Any) -> Sheet:
        """Coerce a ``Sheet`` or openpyxl worksheet into a ``Sheet``.

        Raises:
            TypeError: If the value is neither.
        """
        if isinstance(value, Sheet):
            return value
        if isinstance(value, (Worksheet, ReadOnlyWorksheet)):
            return self._reader.read_worksheet(value)
        raise TypeError(f"Expected a Sheet or openpyxl worksheet, got {type(value)!r}")

    def as_workbook(self, value: Any) -> Workbook:
        """Coerce a ``Workbook``, openpyxl workbook or file path.

        Raises:
            TypeError: If the value is none of these.
        """
        if isinstance(value, Workbook):
            return value
        if isinstance(value, OpenpyxlWorkbook):
            return self._reader.read_workbook(value)
        if isinstance(value, (str, Path)):
            return self._reader.load(value)
        raise TypeError(
            f"Expected a Workbook, openpyxl workbook or path, got {type(value)!r}"
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _verify_sheet(
        self, expected: Sheet, actual: Sheet, metrics: PerformanceMetrics
    ) -> None:
        for row in expected:
            metrics.rows_compared += 1
            self._verify_row(row, actual.row(row.index), row.index, metrics)

    def _verify_row(
        self,
        expected: SheetRow | None,
        actual: SheetRow | None,
        row_index: int,
        metrics: PerformanceMetrics,
    ) -> None:
        if expected is None and actual is None:
            return

        if expected is None or actual is None:
            raise RowMissingError(row_index)

        if expected.last_cell_num != actual.last_cell_num:
            raise CellCountMismatchError(
                row_index, expected.last_cell_num, actual.last_cell_num
            )

        for cell in expected:
            metrics.cells_compared += 1
            self._verify_cell(cell, actual.cell(cell.column_index))

    def _verify_cell(self, expected: SheetCell | None, actual: SheetCell | None) -> None:
        if expected is None and actual is None:
            return

        expected_type = CellType.of(expected)
        actual_type = CellType.of(actual)

        # An explicitly blank cell is interchangeable with no cell at all
        if expected_type is CellType.BLANK and actual_type is CellType.BLANK:
            return

        if actual is None:
            raise CellMissingError(expected.coordinate)
        if expected is None:
            raise CellMissingError(actual.coordinate)

        if expected_type is not actual_type:
            raise TypeMismatchError(
                expected.coordinate, expected_type.value, actual_type.value
            )

        if not expected_type.values_equal(
            expected,
            actual,
            abs_tol=self._settings.numeric_abs_tolerance,
            rel_tol=self._settings.numeric_rel_tolerance,
        ):
            raise ValueMismatchError(
                expected.coordinate,
                expected_type.value,
                self._display_value(expected_type, expected),
                self._display_value(expected_type, actual),
                max_repr_length=self._settings.max_value_repr_length,
            )

    def _record_tolerance(self, metrics: PerformanceMetrics) -> None:
        if self._settings.exact_numeric_comparison:
            return
        metrics.custom_metrics["numeric_abs_tolerance"] = (
            self._settings.numeric_abs_tolerance
        )
        metrics.custom_metrics["numeric_rel_tolerance"] = (
            self._settings.numeric_rel_tolerance
        )

    @staticmethod
    def _display_value(cell_type: CellType, cell: SheetCell) -> Any:
        if cell_type is CellType.FORMULA:
            return formula_text(cell.value)
        return cell.value

    @staticmethod
    def _result(
        metrics: PerformanceMetrics, discrepancy: Discrepancy | None = None
    ) -> ComparisonResult:
        return ComparisonResult(
            discrepancy=discrepancy,
            sheets_compared=metrics.sheets_compared,
            rows_compared=metrics.rows_compared,
            cells_compared=metrics.cells_compared,
        )


def compare_sheets(
    expected: Any, actual: Any, config: Settings | None = None
) -> ComparisonResult:
    """Compare two sheets with the default (or given) settings."""
    return SheetComparator(config).compare_sheets(expected, actual)


def compare_workbooks(
    expected: Any, actual: Any, config: Settings | None = None
) -> ComparisonResult:
    """Compare two workbooks with the default (or given) settings."""
    return SheetComparator(config).compare_workbooks(expected, actual)


def sheets_equal(expected: Any, actual: Any) -> tuple[bool, str | None]:
    """Return ``(equal, description)`` for two sheets."""
    return compare_sheets(expected, actual).as_tuple()
