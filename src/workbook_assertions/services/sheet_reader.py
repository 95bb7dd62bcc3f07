"""Read openpyxl workbooks into the sparse document model."""

from __future__ import annotations

import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook

from workbook_assertions.config import Settings, settings
from workbook_assertions.excel_document import Sheet, SheetCell, SheetRow, Workbook
from workbook_assertions.utils.exceptions import (
    ErrorCode,
    SheetNotFoundError,
    WorkbookLoadError,
)
from workbook_assertions.utils.logging import LogContext, get_logger

logger = get_logger(__name__)


@dataclass
class WorkbookLoadOptions:
    """Options controlling how a workbook file is read."""

    sheet_name: str | None = None
    data_only: bool | None = None


class SheetReader:
    """Build ``Sheet``/``Workbook`` snapshots from openpyxl objects.

    Only cells openpyxl actually holds are read, so rows and cells that were
    never written stay absent. Note that touching a cell through openpyxl
    (``ws["A1"]``, ``ws.iter_rows()`` on a writable sheet) creates it.

    openpyxl only saves a blank cell when it carries a style, so an unstyled
    touched cell is present in memory but absent after a file round trip.
    """

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or settings

    def read_worksheet(self, worksheet: Any) -> Sheet:
        """Snapshot a ``Worksheet`` or ``ReadOnlyWorksheet``."""
        rows: dict[int, dict[int, SheetCell]] = {}
        for cell in self._iter_present_cells(worksheet):
            row_index = cell.row - 1
            column_index = cell.column - 1
            rows.setdefault(row_index, {})[column_index] = SheetCell(
                row_index=row_index,
                column_index=column_index,
                data_type=cell.data_type,
                value=cell.value,
            )
        return Sheet(
            name=worksheet.title,
            rows={index: SheetRow(index, cells) for index, cells in rows.items()},
        )

    def read_workbook(
        self, workbook: OpenpyxlWorkbook, sheet_name: str | None = None
    ) -> Workbook:
        """Snapshot every worksheet (or the one named) of an open workbook.

        Chartsheets hold no cells and are skipped.

        Raises:
            SheetNotFoundError: If ``sheet_name`` is not in the workbook.
        """
        names = [worksheet.title for worksheet in workbook.worksheets]
        if sheet_name is not None and sheet_name not in names:
            raise SheetNotFoundError(sheet_name, names)

        targets = [sheet_name] if sheet_name is not None else names
        sheets = [self.read_worksheet(workbook[name]) for name in targets]
        return Workbook(sheets=sheets, metadata={"sheet_names": names})

    def load(
        self, file_path: Path | str, options: WorkbookLoadOptions | None = None
    ) -> Workbook:
        """Load an ``.xlsx`` file and snapshot it.

        Raises:
            WorkbookLoadError: If the file is missing or cannot be parsed.
            SheetNotFoundError: If the requested sheet does not exist.
        """
        path = Path(file_path)
        opts = options or WorkbookLoadOptions()
        data_only = (
            self._settings.data_only if opts.data_only is None else opts.data_only
        )

        if not path.exists():
            raise WorkbookLoadError(
                f"Workbook file not found: {path}",
                error_code=ErrorCode.FILE_NOT_FOUND,
                file_path=str(path),
            )

        with LogContext(workbook=path.name):
            try:
                workbook = load_workbook(filename=path, data_only=data_only)
            except InvalidFileException as e:
                raise WorkbookLoadError(
                    f"Unsupported workbook format: {e}",
                    error_code=ErrorCode.UNSUPPORTED_FORMAT,
                    file_path=str(path),
                ) from e
            except (zipfile.BadZipFile, KeyError, OSError) as e:
                raise WorkbookLoadError(
                    f"Failed to read workbook: {e}",
                    file_path=str(path),
                ) from e

            try:
                document = self.read_workbook(workbook, opts.sheet_name)
            except SheetNotFoundError as e:
                raise SheetNotFoundError(
                    e.sheet_name, e.details["available_sheets"], file_path=str(path)
                ) from None
            finally:
                workbook.close()

            logger.debug(
                "Loaded workbook",
                sheets=len(document),
                data_only=data_only,
            )
        return document

    def load_sheet(
        self,
        file_path: Path | str,
        sheet_name: str | None = None,
        data_only: bool | None = None,
    ) -> Sheet:
        """Load one sheet from a file; the first sheet when no name is given."""
        document = self.load(
            file_path, WorkbookLoadOptions(sheet_name=sheet_name, data_only=data_only)
        )
        return document.sheets[0]

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _iter_present_cells(worksheet: Any) -> Iterator[Any]:
        cells = getattr(worksheet, "_cells", None)
        if cells is not None:
            for key in sorted(cells):
                yield cells[key]
            return

        # Read-only worksheets pad gaps with EmptyCell
        for row in worksheet.iter_rows():
            for cell in row:
                if not isinstance(cell, EmptyCell):
                    yield cell


def read_sheet(worksheet: Any) -> Sheet:
    """Snapshot an openpyxl worksheet with default settings."""
    return SheetReader().read_worksheet(worksheet)


def load_workbook_document(
    file_path: Path | str, options: WorkbookLoadOptions | None = None
) -> Workbook:
    """Load an ``.xlsx`` file into a ``Workbook`` snapshot."""
    return SheetReader().load(file_path, options)
