"""pytest plugin rendering sheet and workbook discrepancies in assert output.

Registered through the ``pytest11`` entry point, so installing the package is
enough for::

    assert actual_sheet == rows_equal(expected_sheet)

to report the first discrepancy instead of two object reprs.
"""

from __future__ import annotations

from typing import Any

import pytest

from workbook_assertions.matchers import Matcher


def pytest_assertrepr_compare(
    config: pytest.Config, op: str, left: Any, right: Any
) -> list[str] | None:
    if op not in ("==", "!="):
        return None

    if isinstance(right, Matcher):
        matcher, actual = right, left
    elif isinstance(left, Matcher):
        matcher, actual = left, right
    else:
        return None

    summary = f"{type(actual).__name__} {op} {matcher!r}"
    if op == "!=":
        return [summary, f"Unexpectedly matched {matcher.describe()}"]

    return [
        summary,
        f"Expected: {matcher.describe()}",
        f"     but: {matcher.describe_mismatch(actual)}",
    ]
