"""Command line helpers for the Localization Content Comparer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from lcc.delivery.export import export_display_rows, export_line_by_line
from lcc.embedding import SentenceTransformerEmbedder
from lcc.errors import LccError, validate_threshold
from lcc.io.tabular import read_records
from lcc.pipeline import ComparisonOptions, LocalizationComparer


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _write_output(result: Any, path: Path | None) -> None:
    if not path:
        print(json.dumps(result, indent=2, default=str))
        return
    path.write_text(json.dumps(result, indent=2, default=str))


def _build_comparer(args: argparse.Namespace) -> LocalizationComparer:
    options = ComparisonOptions()
    if args.threshold is not None:
        options.similarity_threshold = validate_threshold(args.threshold)
    return LocalizationComparer(SentenceTransformerEmbedder(args.model), options=options)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("reference", type=Path, help="Reference CSV (ContentId,Content)")
    parser.add_argument("target", type=Path, help="Target CSV (ContentId,Content)")
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity threshold in [0, 1] (defaults to the configured value)",
    )
    parser.add_argument("--output", type=Path, help="Write the result rows to a CSV file")
    parser.add_argument(
        "--json",
        dest="json_output",
        type=Path,
        help="Write the full report to a JSON file",
    )
    parser.add_argument("--model", default=None, help="sentence-transformers model name")


def _print_summary(lines: list[str]) -> None:
    for line in lines:
        print(f"- {line}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Localization Content Comparer CLI")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    align_parser = subparsers.add_parser(
        "align", help="Align target rows to reference rows, allowing gaps"
    )
    _add_common(align_parser)

    lbl_parser = subparsers.add_parser(
        "line-by-line", help="Compare rows position by position and suggest fixes"
    )
    _add_common(lbl_parser)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        comparer = _build_comparer(args)
        reference = read_records(args.reference)
        target = read_records(args.target)

        if args.command == "align":
            report = comparer.align(reference, target)
            if args.output:
                export_display_rows(args.output, report.display_rows)
            if args.json_output:
                _write_output(report.model_dump(mode="json"), args.json_output)
            _print_summary(report.summary + report.warnings)
        else:
            lbl_report = comparer.line_by_line(reference, target)
            if args.output:
                export_line_by_line(args.output, lbl_report.diagnostics)
            if args.json_output:
                _write_output(lbl_report.model_dump(mode="json"), args.json_output)
            stats = lbl_report.statistics
            _print_summary(
                [
                    f"{stats.good_matches} of {stats.total_reference} rows match in place "
                    f"({stats.match_percentage:.1f}%)",
                    f"{lbl_report.with_suggestion} rows have a suggested alternative",
                ]
                + lbl_report.warnings
            )
    except LccError as exc:
        _write_output({"error": exc.info.to_dict()}, None)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
