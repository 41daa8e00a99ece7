"""Rendering utilities for the directory summary."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .report import now_iso
from .stats import DirectoryStatistics

DIAGNOSTIC_LABELS = [
    ("raw_lines", "Raw lines"),
    ("lines_scanned", "Lines scanned"),
    ("boundary_attempts", "Boundary attempts"),
    ("skipped_boundaries", "Boundaries without a name"),
    ("duplicates", "Duplicates discarded"),
    ("records", "Records"),
]


def render_summary(
    statistics: DirectoryStatistics,
    output_path: Path,
    *,
    diagnostics: Mapping[str, Any] | None = None,
    generated_at: str | None = None,
    top: int = 20,
) -> str:
    timestamp = generated_at or now_iso()
    lines = ["# Staff Directory Summary", "", f"_Last build: {timestamp}_", ""]
    lines.append(f"**Total employees:** {statistics.total}")
    lines.append("")
    lines.append(
        f"**Districts:** {statistics.district_count} | "
        f"**Departments:** {statistics.department_count}"
    )
    lines.append("")
    if diagnostics:
        lines.append("## Extraction")
        lines.append("")
        for key, label in DIAGNOSTIC_LABELS:
            if key in diagnostics:
                lines.append(f"- {label}: {diagnostics[key]}")
        lines.append("")
    lines.extend(format_table("By district", "District", statistics.by_district, top))
    lines.extend(format_table("By designation", "Designation", statistics.by_designation, top))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = "\n".join(lines)
    output_path.write_text(content, encoding="utf-8")
    return content


def format_table(
    title: str, column: str, counts: list[tuple[str, int]], limit: int | None = None
) -> list[str]:
    lines = [f"## {title}", ""]
    if not counts:
        lines.extend(["_No records._", ""])
        return lines
    lines.append(f"| {column} | Employees |")
    lines.append("| --- | ---: |")
    for index, (label, count) in enumerate(counts):
        if limit is not None and index >= limit:
            break
        lines.append(f"| {escape_cell(label)} | {count} |")
    lines.append("")
    return lines


def escape_cell(value: str) -> str:
    return value.replace("|", "\\|")
