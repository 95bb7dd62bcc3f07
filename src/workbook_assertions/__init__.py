"""Workbook Assertions - cell-by-cell spreadsheet comparison for test suites."""

from workbook_assertions.cell_types import CellType
from workbook_assertions.excel_document import Sheet, SheetCell, SheetRow, Workbook
from workbook_assertions.matchers import (
    assert_sheets_equal,
    assert_that,
    assert_workbooks_equal,
    rows_equal,
    same_workbook,
)
from workbook_assertions.services.comparator import (
    ComparisonResult,
    compare_sheets,
    compare_workbooks,
    sheets_equal,
)

__all__ = [
    "CellType",
    "ComparisonResult",
    "Sheet",
    "SheetCell",
    "SheetRow",
    "Workbook",
    "assert_sheets_equal",
    "assert_that",
    "assert_workbooks_equal",
    "compare_sheets",
    "compare_workbooks",
    "rows_equal",
    "same_workbook",
    "sheets_equal",
]
__version__ = "0.1.0"
