"""Semantic cell kinds and per-kind value equality.

openpyxl tags every cell with a short data-type code (``n``, ``s``, ``b``,
``f``, ``e``, ``d`` ...). The comparator works with the coarser kinds below so
that, for example, a date and a number are both NUMERIC and an empty styled
cell is BLANK regardless of its tag.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from numbers import Number
from typing import TYPE_CHECKING, Any

from openpyxl.cell.cell import ERROR_CODES, STRING_TYPES, TIME_TYPES
from openpyxl.compat import NUMERIC_TYPES
from openpyxl.utils.datetime import to_excel
from openpyxl.worksheet.formula import ArrayFormula, DataTableFormula

if TYPE_CHECKING:
    from workbook_assertions.excel_document import SheetCell


class CellType(str, Enum):
    """Semantic kind of a spreadsheet cell."""

    NUMERIC = "NUMERIC"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    FORMULA = "FORMULA"
    BLANK = "BLANK"
    ERROR = "ERROR"

    @classmethod
    def of(cls, cell: SheetCell | None) -> CellType:
        """Classify a cell; absent cells and cells without a value are BLANK."""
        if cell is None or cell.value is None:
            return cls.BLANK
        return cls.from_data_type(cell.data_type)

    @classmethod
    def from_data_type(cls, data_type: str) -> CellType:
        """Map an openpyxl data-type code to a semantic kind.

        Raises:
            ValueError: If the code is not one openpyxl produces.
        """
        try:
            return _DATA_TYPE_KINDS[data_type]
        except KeyError:
            raise ValueError(f"Unknown cell data type: {data_type!r}") from None

    def values_equal(
        self,
        expected: SheetCell,
        actual: SheetCell,
        *,
        abs_tol: float = 0.0,
        rel_tol: float = 0.0,
    ) -> bool:
        """Compare two cells already known to be of this kind.

        Numeric values compare exactly unless a tolerance is given; two NaNs are
        equal. Dates and times compare by Excel serial number, so a ``date``
        equals the midnight ``datetime`` openpyxl reads back, and never use a
        tolerance.
        """
        if self is CellType.BLANK:
            return True
        if self is CellType.FORMULA:
            return formula_text(expected.value) == formula_text(actual.value)
        if self is CellType.NUMERIC:
            return _numbers_equal(
                expected.value, actual.value, abs_tol=abs_tol, rel_tol=rel_tol
            )
        if self is CellType.STRING:
            return str(expected.value) == str(actual.value)
        return bool(expected.value == actual.value)


_DATA_TYPE_KINDS: dict[str, CellType] = {
    "n": CellType.NUMERIC,
    "d": CellType.NUMERIC,
    "s": CellType.STRING,
    "str": CellType.STRING,
    "inlineStr": CellType.STRING,
    "b": CellType.BOOLEAN,
    "f": CellType.FORMULA,
    "e": CellType.ERROR,
}


def _numbers_equal(
    expected: Any, actual: Any, *, abs_tol: float, rel_tol: float
) -> bool:
    if expected == actual or (_is_nan(expected) and _is_nan(actual)):
        return True
    # Dates and times compare by serial number and never with tolerance
    if isinstance(expected, TIME_TYPES) or isinstance(actual, TIME_TYPES):
        return bool(to_serial(expected) == to_serial(actual))
    if not (abs_tol or rel_tol):
        return False
    if not (isinstance(expected, Number) and isinstance(actual, Number)):
        return False
    return math.isclose(
        float(expected), float(actual), rel_tol=rel_tol, abs_tol=abs_tol
    )


def _is_nan(value: Any) -> bool:
    return isinstance(value, Number) and value != value


def to_serial(value: Any) -> Any:
    """Return the Excel serial number of a date or time value.

    Other values, and timezone-aware datetimes (which Excel cannot store), are
    returned unchanged.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value
    if isinstance(value, TIME_TYPES):
        return to_excel(value)
    return value


def formula_text(value: Any) -> str:
    """Return the formula text for a FORMULA cell value."""
    if isinstance(value, ArrayFormula):
        return str(value.text)
    if isinstance(value, DataTableFormula):
        return f"TABLE({value.ref})"
    return str(value)


def infer_data_type(value: Any) -> str:
    """Infer the openpyxl data-type code for a raw Python value.

    Follows the rules openpyxl applies when a value is assigned to a cell.

    Raises:
        ValueError: If openpyxl could not store the value in a cell.
    """
    if value is None:
        return "n"
    if isinstance(value, bool):
        return "b"
    if isinstance(value, NUMERIC_TYPES):
        return "n"
    if isinstance(value, TIME_TYPES):
        return "d"
    if isinstance(value, (ArrayFormula, DataTableFormula)):
        return "f"
    if isinstance(value, STRING_TYPES):
        text = str(value)
        if len(text) > 1 and text.startswith("="):
            return "f"
        if text in ERROR_CODES:
            return "e"
        return "s"
    raise ValueError(f"Cannot convert {value!r} to Excel")
