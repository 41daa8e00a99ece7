"""Per-district and per-designation tallies over extracted records."""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .normalize import EmployeeRecord


@dataclass(frozen=True)
class DirectoryStatistics:
    total: int = 0
    by_district: list[tuple[str, int]] = field(default_factory=list)
    by_designation: list[tuple[str, int]] = field(default_factory=list)
    department_count: int = 0

    @property
    def district_count(self) -> int:
        return len(self.by_district)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "districts": self.district_count,
            "departments": self.department_count,
            "by_district": dict(self.by_district),
            "by_designation": dict(self.by_designation),
        }


def ordered_counts(counter: Counter[str]) -> list[tuple[str, int]]:
    return sorted(counter.items(), key=lambda entry: (-entry[1], entry[0]))


def tally(records: Iterable[EmployeeRecord]) -> DirectoryStatistics:
    districts: Counter[str] = Counter()
    designations: Counter[str] = Counter()
    departments: set[str] = set()
    total = 0
    for record in records:
        total += 1
        districts[record.district] += 1
        designations[record.designation] += 1
        departments.add(record.department)
    return DirectoryStatistics(
        total=total,
        by_district=ordered_counts(districts),
        by_designation=ordered_counts(designations),
        department_count=len(departments),
    )
