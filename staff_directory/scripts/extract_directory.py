#!/usr/bin/env python3
"""CLI entrypoint for the staff directory extractor."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from staff_directory.employee_extractor import (
    export,
    parser,
    registry,
    renderer,
    report,
    sources,
)
from staff_directory.employee_extractor.config import ExtractionConfig
from staff_directory.employee_extractor.lines import normalize_lines
from staff_directory.employee_extractor.session import ExtractionSession
from staff_directory.employee_extractor.stats import tally

DEFAULT_OUTPUT_DIR = Path("output")

logger = logging.getLogger("staff_directory.employee_extractor.cli")


class OutputPaths:
    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.records_path = output_dir / "employees.json"
        self.csv_path = output_dir / "employees.csv"
        self.report_path = output_dir / "report.json"
        self.summary_path = output_dir / "SUMMARY.md"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def resolve_output_dir(path: str | None) -> Path:
    if path:
        return Path(path).expanduser().resolve()
    return DEFAULT_OUTPUT_DIR.resolve()


def read_source(args: argparse.Namespace) -> sources.SourceText:
    try:
        return sources.read_source_lines(
            Path(args.source).expanduser(),
            min_pdf_chars=getattr(args, "min_pdf_chars", None),
            pdf_backends=parse_backend_list(getattr(args, "pdf_backends", None)),
        )
    except sources.SourceMissingError as exc:
        raise SystemExit(str(exc)) from exc


def build_config(args: argparse.Namespace) -> ExtractionConfig:
    return ExtractionConfig.from_env().with_overrides(
        name_window=args.name_window,
        designation_window=args.designation_window,
        department_window=args.department_window,
        email_window=args.email_window,
        email_domain=args.email_domain,
        default_designation=args.default_designation,
        default_department=args.default_department,
        default_district=args.default_district,
        stop_department_at_phone=True if args.stop_department_at_phone else None,
    )


def command_extract(args: argparse.Namespace) -> None:
    paths = OutputPaths(resolve_output_dir(args.output_dir))
    logger.info("Reading %s", args.source)
    source = read_source(args)
    config = build_config(args)
    result = ExtractionSession(config).run(source.lines)
    registry.save_records(paths.records_path, result.records)
    run_report = report.build_report(result, source.meta)
    report.save_report(paths.report_path, run_report)
    if args.csv:
        export.write_csv(paths.csv_path, result.records)
        logger.info("CSV written to %s", paths.csv_path)
    logger.info("Saved %d employees to %s", len(result.records), paths.records_path)
    for record in result.records[: args.sample]:
        logger.info("  %s %s | %s | %s", record.id, record.name, record.designation, record.district)


def command_preview(args: argparse.Namespace) -> None:
    source = read_source(args)
    config = ExtractionConfig.from_env()
    shown = 0
    for index, line in enumerate(source.lines, start=1):
        if shown >= args.limit:
            break
        if line.strip():
            print(f"{index}: {line.strip()}")
            shown += 1
    kept = normalize_lines(source.lines, config)
    boundaries = sum(1 for _ in parser.iter_boundaries(kept, config))
    print(f"\nTotal lines: {len(source.lines)}")
    print(f"Kept after normalisation: {len(kept)}")
    print(f"Record boundaries: {boundaries}")


def command_summary(args: argparse.Namespace) -> None:
    paths = OutputPaths(resolve_output_dir(args.output_dir))
    if not paths.records_path.exists():
        raise SystemExit("No extraction output found. Run 'extract' first.")
    records = registry.load_records(paths.records_path)
    diagnostics = report.load_report(paths.report_path).get("diagnostics")
    content = renderer.render_summary(
        tally(records), paths.summary_path, diagnostics=diagnostics, top=args.top
    )
    logger.info("Summary written to %s (%d characters)", paths.summary_path, len(content))


def command_export(args: argparse.Namespace) -> None:
    paths = OutputPaths(resolve_output_dir(args.output_dir))
    if not paths.records_path.exists():
        raise SystemExit("No extraction output found. Run 'extract' first.")
    target = Path(args.csv_path).expanduser() if args.csv_path else paths.csv_path
    count = export.write_csv(target, registry.load_records(paths.records_path))
    logger.info("Exported %d employees to %s", count, target)


def parse_backend_list(value: str | None) -> list[str] | None:
    if not value:
        return None
    parts = [entry.strip() for entry in value.split(",") if entry.strip()]
    return parts or None


def add_source_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("source", help="Directory document (.pdf, .txt, .docx, .html)")
    subparser.add_argument(
        "--pdf-backends",
        help="Comma-separated PDF extraction backend order (overrides DIRECTORY_PDF_BACKENDS)",
    )
    subparser.add_argument(
        "--min-pdf-chars",
        type=int,
        help="Minimum characters required from a PDF (overrides DIRECTORY_MIN_PDF_CHARS)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser_obj = argparse.ArgumentParser(description="Extract employee records from a staff directory")
    parser_obj.add_argument(
        "--output-dir", help="Directory for employees.json and reports (default: ./output)"
    )
    parser_obj.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser_obj.add_subparsers(dest="command")

    extract_parser = subparsers.add_parser("extract", help="Extract employee records")
    add_source_arguments(extract_parser)
    extract_parser.add_argument("--csv", action="store_true", help="Also write employees.csv")
    extract_parser.add_argument("--name-window", type=int, help="Lines searched for the name")
    extract_parser.add_argument(
        "--designation-window", type=int, help="Lines searched for the designation"
    )
    extract_parser.add_argument(
        "--department-window", type=int, help="Lines searched for department, district and phone"
    )
    extract_parser.add_argument("--email-window", type=int, help="Lines searched for the email")
    extract_parser.add_argument("--email-domain", help="Domain of synthesised email addresses")
    extract_parser.add_argument("--default-designation", help="Designation when none is found")
    extract_parser.add_argument("--default-department", help="Department when none is found")
    extract_parser.add_argument("--default-district", help="District when none is found")
    extract_parser.add_argument(
        "--stop-department-at-phone",
        action="store_true",
        help="Stop collecting department text at the first phone number",
    )
    extract_parser.add_argument(
        "--sample", type=int, default=3, help="Number of extracted records to log"
    )
    extract_parser.set_defaults(func=command_extract)

    preview_parser = subparsers.add_parser("preview", help="Print the first lines of a document")
    add_source_arguments(preview_parser)
    preview_parser.add_argument("--limit", type=int, default=100, help="Lines to print")
    preview_parser.set_defaults(func=command_preview)

    summary_parser = subparsers.add_parser("summary", help="Render Markdown statistics")
    summary_parser.add_argument("--top", type=int, default=20, help="Rows per table")
    summary_parser.set_defaults(func=command_summary)

    export_parser = subparsers.add_parser("export", help="Export employees.json as CSV")
    export_parser.add_argument("--csv-path", help="Target CSV file (default: <output-dir>/employees.csv)")
    export_parser.set_defaults(func=command_export)

    return parser_obj


def main(argv: list[str] | None = None) -> None:
    parser_obj = build_parser()
    args = parser_obj.parse_args(argv)
    if not getattr(args, "command", None):
        parser_obj.print_help()
        return
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
