"""Assertion-style matchers for sheets and workbooks.

Usage:
    from workbook_assertions.matchers import assert_that, rows_equal

    assert_that(actual_sheet, rows_equal(expected_sheet))

    # or, with the pytest plugin active, a bare assert:
    assert actual_sheet == rows_equal(expected_sheet)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from workbook_assertions.config import Settings
from workbook_assertions.services.comparator import ComparisonResult, SheetComparator


class Matcher(ABC):
    """Base class for matchers that remember their last comparison."""

    def __init__(self, config: Settings | None = None) -> None:
        self._comparator = SheetComparator(config)
        self.last_result: ComparisonResult | None = None
        self._last_actual: Any = None

    @abstractmethod
    def _compare(self, actual: Any) -> ComparisonResult:
        """Run the comparison against ``actual``."""

    @abstractmethod
    def describe(self) -> str:
        """Describe what this matcher expects."""

    def matches(self, actual: Any) -> bool:
        self.last_result = self._compare(actual)
        self._last_actual = actual
        return self.last_result.equal

    def describe_mismatch(self, actual: Any) -> str:
        """Describe why ``actual`` does not match.

        The last result is reused only when it was computed for this very
        object; any other value is compared afresh.
        """
        result = self.last_result
        if result is None or actual is not self._last_actual:
            result = self._compare(actual)
        return result.description or "was equal"

    def __eq__(self, other: object) -> bool:
        return self.matches(other)

    def __ne__(self, other: object) -> bool:
        return not self.matches(other)

    __hash__ = None  # type: ignore[assignment]


class RowsEqualMatcher(Matcher):
    """Matches a sheet whose rows equal every row of the expected sheet."""

    def __init__(self, expected: Any, config: Settings | None = None) -> None:
        super().__init__(config)
        self.expected = self._comparator.as_sheet(expected)

    def _compare(self, actual: Any) -> ComparisonResult:
        return self._comparator.compare_sheets(self.expected, actual)

    def describe(self) -> str:
        return f"equality on all rows in '{self.expected.name}'"

    def __repr__(self) -> str:
        return f"rows_equal({self.expected.name!r})"


class SameWorkbookMatcher(Matcher):
    """Matches a workbook with the same sheets holding equal rows."""

    def __init__(self, expected: Any, config: Settings | None = None) -> None:
        super().__init__(config)
        self.expected = self._comparator.as_workbook(expected)

    def _compare(self, actual: Any) -> ComparisonResult:
        return self._comparator.compare_workbooks(self.expected, actual)

    def describe(self) -> str:
        names = ", ".join(f"'{name}'" for name in self.expected.sheet_names)
        return f"the same workbook with sheets [{names}]"

    def __repr__(self) -> str:
        return f"same_workbook({self.expected.sheet_names!r})"


def rows_equal(expected: Any, config: Settings | None = None) -> RowsEqualMatcher:
    """Matcher for a sheet equal, row by row, to ``expected``."""
    return RowsEqualMatcher(expected, config)


def same_workbook(expected: Any, config: Settings | None = None) -> SameWorkbookMatcher:
    """Matcher for a workbook equal, sheet by sheet, to ``expected``."""
    return SameWorkbookMatcher(expected, config)


def describe_failure(matcher: Matcher, actual: Any, reason: str = "") -> str:
    """Build the ``Expected: ... but: ...`` failure text."""
    lines = [reason] if reason else []
    lines.append(f"Expected: {matcher.describe()}")
    lines.append(f"     but: {matcher.describe_mismatch(actual)}")
    return "\n".join(lines)


def assert_that(actual: Any, matcher: Matcher, reason: str = "") -> None:
    """Assert that ``actual`` satisfies ``matcher``.

    Raises:
        AssertionError: With the matcher's description of the first discrepancy.
    """
    if not matcher.matches(actual):
        raise AssertionError(describe_failure(matcher, actual, reason))


def assert_sheets_equal(
    expected: Any, actual: Any, config: Settings | None = None
) -> None:
    """Check that two sheets are equal, in the style of ``pandas.testing``.

    Raises:
        AssertionError: Describing the first discrepancy.
    """
    result = SheetComparator(config).compare_sheets(expected, actual)
    if not result.equal:
        raise AssertionError(result.description)


def assert_workbooks_equal(
    expected: Any, actual: Any, config: Settings | None = None
) -> None:
    """Check that two workbooks are equal sheet by sheet.

    Raises:
        AssertionError: Describing the first discrepancy.
    """
    result = SheetComparator(config).compare_workbooks(expected, actual)
    if not result.equal:
        raise AssertionError(result.description)
