from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from workbook_assertions.config import Settings
from workbook_assertions.utils.logging import clear_context

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def _reset_log_context() -> None:
    clear_context()


@pytest.fixture
def exact_settings() -> Settings:
    """Default settings, isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def make_worksheet() -> Callable[..., Worksheet]:
    """Build a worksheet from ``{"A1": value}`` assignments."""

    def _make(values: dict[str, Any], title: str = "Sheet1") -> Worksheet:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for coordinate, value in values.items():
            ws[coordinate] = value
        return ws

    return _make


@pytest.fixture
def invoice_values() -> dict[str, Any]:
    return {
        "A1": "Item",
        "B1": "Qty",
        "C1": "Price",
        "A2": "Widget",
        "B2": 4,
        "C2": 3.14,
        "A3": "Gadget",
        "B3": 1,
        "C3": 10.0,
        "D3": True,
        "A4": "Total",
        "C4": "=SUM(C2:C3)",
    }


@pytest.fixture
def save_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Save ``{sheet title: {"A1": value}}`` to an .xlsx file."""

    def _save(sheets: dict[str, dict[str, Any]], name: str = "book.xlsx") -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for title, values in sheets.items():
            ws = wb.create_sheet(title)
            for coordinate, value in values.items():
                ws[coordinate] = value
        path = tmp_path / name
        wb.save(path)
        return path

    return _save
