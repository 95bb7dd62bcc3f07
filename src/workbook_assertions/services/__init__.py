"""Services for workbook assertions."""

from workbook_assertions.services.comparator import (
    ComparisonResult,
    Discrepancy,
    SheetComparator,
    compare_sheets,
    compare_workbooks,
    sheets_equal,
)
from workbook_assertions.services.sheet_reader import (
    SheetReader,
    WorkbookLoadOptions,
    load_workbook_document,
    read_sheet,
)

__all__ = [
    "ComparisonResult",
    "Discrepancy",
    "SheetComparator",
    "SheetReader",
    "WorkbookLoadOptions",
    "compare_sheets",
    "compare_workbooks",
    "load_workbook_document",
    "read_sheet",
    "sheets_equal",
]
