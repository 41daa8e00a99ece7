"""Spreadsheet export of employee records."""
from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from .normalize import EmployeeRecord

CSV_COLUMNS = [
    ("Name", "name"),
    ("Designation", "designation"),
    ("Department", "department"),
    ("District", "district"),
    ("Phone", "phone"),
    ("Email", "email"),
]


def write_csv(path: Path, records: Iterable[EmployeeRecord]) -> int:
    """Write ``records`` as UTF-8 with BOM so spreadsheet tools detect the encoding."""
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8-sig", newline="") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        writer.writerow([header for header, _ in CSV_COLUMNS])
        for record in records:
            writer.writerow([getattr(record, attribute) for _, attribute in CSV_COLUMNS])
            count += 1
    return count
