"""Deduplication, id assignment and persistence of employee records."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, cast

from .config import ExtractionConfig
from .normalize import (
    RECORD_FIELDS,
    EmployeeRecord,
    dedup_key,
    finalize_record,
    format_record_id,
)
from .parser import RecordDraft

logger = logging.getLogger(__name__)


class DirectoryRegistry:
    """Accepted records of one extraction run, keyed by normalised name."""

    def __init__(self, config: ExtractionConfig) -> None:
        self.config = config
        self.records: list[EmployeeRecord] = []
        self.duplicates = 0
        self._seen: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self.records)

    def find_duplicate(self, name: str) -> str | None:
        return self._seen.get(dedup_key(name))

    def add(self, draft: RecordDraft) -> EmployeeRecord | None:
        """Finalize and append ``draft`` unless its name was already accepted."""
        existing_id = self.find_duplicate(draft.name)
        if existing_id is not None:
            self.duplicates += 1
            logger.debug(
                "Skipping duplicate %r (serial %s), already stored as %s",
                draft.name,
                draft.serial,
                existing_id,
            )
            return None
        record_id = format_record_id(len(self.records) + 1, self.config)
        record = finalize_record(draft, record_id, self.config)
        self._seen[dedup_key(record.name)] = record_id
        self.records.append(record)
        return record


def save_records(path: Path, records: Iterable[EmployeeRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump([record.to_dict() for record in records], fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def load_records(path: Path) -> list[EmployeeRecord]:
    with path.open("r", encoding="utf-8") as fh:
        data = cast(list[Mapping[str, Any]], json.load(fh))
    return [record_from_mapping(entry) for entry in data]


def record_from_mapping(entry: Mapping[str, Any]) -> EmployeeRecord:
    values = {field: str(entry.get(field, "") or "") for field in RECORD_FIELDS}
    return EmployeeRecord(**values)
