"""One extraction pass over a document's lines."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

from .config import ExtractionConfig
from .lines import normalize_lines
from .normalize import EmployeeRecord
from .parser import is_boundary, parse_record
from .registry import DirectoryRegistry
from .rules import DESIGNATION_RULES, DesignationRule
from .stats import DirectoryStatistics, tally

logger = logging.getLogger(__name__)


@dataclass
class ExtractionDiagnostics:
    raw_lines: int = 0
    lines_scanned: int = 0
    boundary_attempts: int = 0
    skipped_boundaries: int = 0
    duplicates: int = 0
    records: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ExtractionResult:
    records: list[EmployeeRecord] = field(default_factory=list)
    diagnostics: ExtractionDiagnostics = field(default_factory=ExtractionDiagnostics)
    statistics: DirectoryStatistics = field(default_factory=DirectoryStatistics)

    def to_list(self) -> list[dict[str, str]]:
        return [record.to_dict() for record in self.records]

    def report(self) -> dict[str, Any]:
        return {
            "diagnostics": self.diagnostics.to_dict(),
            "statistics": self.statistics.to_dict(),
        }


class ExtractionSession:
    """Owns the dedup state and output of a single document.

    A session is used once; extracting another document needs a new session
    so names are never deduplicated across documents.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        rules: tuple[DesignationRule, ...] = DESIGNATION_RULES,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.rules = rules
        self.registry = DirectoryRegistry(self.config)
        self.diagnostics = ExtractionDiagnostics()
        self._used = False

    def run(self, raw_lines: Iterable[str]) -> ExtractionResult:
        if self._used:
            raise RuntimeError("ExtractionSession.run() may only be called once")
        self._used = True
        raw = list(raw_lines)
        lines = normalize_lines(raw, self.config)
        self.diagnostics.raw_lines = len(raw)
        self.diagnostics.lines_scanned = len(lines)

        position = 0
        while position < len(lines):
            if not is_boundary(lines[position].text, self.config):
                position += 1
                continue
            self.diagnostics.boundary_attempts += 1
            draft = parse_record(lines, position, self.config, self.rules)
            if draft is None:
                self.diagnostics.skipped_boundaries += 1
                position += 1
                continue
            self.registry.add(draft)
            position = draft.name_end

        self.diagnostics.duplicates = self.registry.duplicates
        self.diagnostics.records = len(self.registry)
        records = list(self.registry.records)
        logger.info(
            "Extracted %d records from %d lines (%d boundaries, %d duplicates)",
            len(records),
            len(lines),
            self.diagnostics.boundary_attempts,
            self.diagnostics.duplicates,
        )
        return ExtractionResult(
            records=records,
            diagnostics=self.diagnostics,
            statistics=tally(records),
        )


def extract_employees(
    raw_lines: Iterable[str], config: ExtractionConfig | None = None
) -> ExtractionResult:
    return ExtractionSession(config).run(raw_lines)
