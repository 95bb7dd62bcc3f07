"""Command-line comparison of two workbook files.

Exit status is 0 when the workbooks are equal, 1 when a discrepancy is found
and 2 when a workbook or the configuration cannot be loaded, or the comparison
fails unexpectedly.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from pydantic import ValidationError as SettingsValidationError

from workbook_assertions.config import Settings
from workbook_assertions.services.comparator import SheetComparator
from workbook_assertions.services.sheet_reader import SheetReader
from workbook_assertions.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    WorkbookAssertionsError,
)
from workbook_assertions.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_EQUAL = 0
EXIT_DISCREPANCY = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workbook-assertions",
        description="Compare two .xlsx workbooks and report the first discrepancy.",
    )
    parser.add_argument("expected", help="Path to the expected workbook")
    parser.add_argument("actual", help="Path to the actual workbook")
    parser.add_argument(
        "--sheet",
        default=None,
        help="Compare only this sheet (present in both workbooks)",
    )
    parser.add_argument(
        "--data-only",
        action="store_true",
        default=None,
        help="Compare cached formula results instead of formula text",
    )
    parser.add_argument("--abs-tol", type=float, default=None)
    parser.add_argument("--rel-tol", type=float, default=None)
    parser.add_argument("--log-level", default=None)
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, overridden by command-line flags.

    Raises:
        ConfigurationError: If the combined settings are invalid.
    """
    overrides: dict[str, Any] = {
        "data_only": args.data_only,
        "numeric_abs_tolerance": args.abs_tol,
        "numeric_rel_tolerance": args.rel_tol,
        "log_level": args.log_level,
    }
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except SettingsValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_settings(args)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR

    configure_logging(config.log_level_int)
    logger.debug("Configuration loaded", **config.to_safe_dict())

    comparator = SheetComparator(config)
    try:
        if args.sheet is not None:
            reader = SheetReader(config)
            result = comparator.compare_sheets(
                reader.load_sheet(args.expected, args.sheet),
                reader.load_sheet(args.actual, args.sheet),
            )
        else:
            result = comparator.compare_workbooks(args.expected, args.actual)
    except WorkbookAssertionsError as e:
        logger.error("Could not compare workbooks", error_code=e.error_code.value)
        print(str(e), file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        logger.exception(
            f"Unexpected error: {type(e).__name__}", error_type=type(e).__name__
        )
        error = WorkbookAssertionsError(
            f"Internal error: {type(e).__name__}: {e}",
            error_code=ErrorCode.INTERNAL_ERROR,
        )
        print(str(error), file=sys.stderr)
        return EXIT_ERROR

    if result.equal:
        print(
            f"Equal: {result.rows_compared} rows, "
            f"{result.cells_compared} cells compared"
        )
        return EXIT_EQUAL

    print(result.description)
    return EXIT_DISCREPANCY


if __name__ == "__main__":
    sys.exit(main())
