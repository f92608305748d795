"""
Run one sales analysis pass from CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys

from app.config import load_env_files
from app.errors import ParseError
from app.logging_utils import configure_logging
from app.schemas.analysis import build_analysis_response
from app.services.analysis_service import SalesAnalysisService

logger = logging.getLogger(__name__)


def _parse_month(value: str) -> tuple[int, int]:
    try:
        year_text, month_text = value.split("-", 1)
        year, month = int(year_text), int(month_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from exc
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"month must be between 1 and 12, got {month}")
    return year, month


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze one or more sales CSV exports.")
    parser.add_argument("files", nargs="+", help="CSV export files to merge and analyze.")
    parser.add_argument(
        "--department",
        dest="department",
        default="All",
        help="Department to keep, or 'All'.",
    )
    parser.add_argument(
        "--month",
        dest="month",
        type=_parse_month,
        default=None,
        help="Optional calendar month filter as YYYY-MM.",
    )
    args = parser.parse_args(argv)

    load_env_files()
    configure_logging()

    year, month = args.month if args.month is not None else (None, None)
    service = SalesAnalysisService()
    try:
        result = service.analyze_paths(
            args.files,
            department=args.department,
            year=year,
            month=month,
        )
    except ParseError as exc:
        logger.error("Sales analysis failed: %s", exc)
        print(str(exc), file=sys.stderr)
        return 1

    print(build_analysis_response(result).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
