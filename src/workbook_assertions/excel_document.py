"""Dataclasses representing a read-only view of a spreadsheet workbook.

Rows and cells are addressed by zero-based indices and may be absent, so
lookups return ``None`` rather than raising.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from openpyxl.utils import get_column_letter

from workbook_assertions.cell_types import infer_data_type

NO_CELLS = -1
"""Sentinel ``last_cell_num`` for a row that holds no cells."""


def excel_coordinate(row_index: int, column_index: int) -> str:
    """Format zero-based indices as an A1-style coordinate (e.g. ``B3``)."""
    return f"{get_column_letter(column_index + 1)}{row_index + 1}"


@dataclass(frozen=True)
class SheetCell:
    """Represents a single present cell with its openpyxl type tag."""

    row_index: int
    column_index: int
    data_type: str
    value: Any = None

    @property
    def coordinate(self) -> str:
        return excel_coordinate(self.row_index, self.column_index)


@dataclass(frozen=True)
class SheetRow:
    """Represents a populated row; cells are keyed by column index."""

    index: int
    cells: dict[int, SheetCell] = field(default_factory=dict)

    @property
    def last_cell_num(self) -> int:
        """One past the highest populated column index, or ``NO_CELLS``."""
        if not self.cells:
            return NO_CELLS
        return max(self.cells) + 1

    def cell(self, column_index: int) -> SheetCell | None:
        return self.cells.get(column_index)

    def __iter__(self) -> Iterator[SheetCell]:
        for column_index in sorted(self.cells):
            yield self.cells[column_index]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class Sheet:
    """Represents a single worksheet as a sparse collection of rows."""

    name: str
    rows: dict[int, SheetRow] = field(default_factory=dict)

    def row(self, index: int) -> SheetRow | None:
        return self.rows.get(index)

    def __iter__(self) -> Iterator[SheetRow]:
        for index in sorted(self.rows):
            yield self.rows[index]

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_values(
        cls, name: str, values: dict[tuple[int, int], Any]
    ) -> Sheet:
        """Build a sheet from ``{(row, column): value}`` using openpyxl's typing.

        Intended for tests and quick fixtures; the data type is inferred the
        same way openpyxl infers it on assignment.
        """
        rows: dict[int, dict[int, SheetCell]] = {}
        for (row_index, column_index), value in values.items():
            rows.setdefault(row_index, {})[column_index] = SheetCell(
                row_index=row_index,
                column_index=column_index,
                data_type=infer_data_type(value),
                value=value,
            )
        return cls(
            name=name,
            rows={index: SheetRow(index, cells) for index, cells in rows.items()},
        )


@dataclass(frozen=True)
class Workbook:
    """Represents a workbook as an ordered list of sheets."""

    sheets: list[Sheet]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def sheet(self, name: str) -> Sheet | None:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None

    def __iter__(self) -> Iterator[Sheet]:
        return iter(self.sheets)

    def __len__(self) -> int:
        return len(self.sheets)
