"""Run report persistence."""
from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from .session import ExtractionResult


def now_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat()


def build_report(
    result: ExtractionResult,
    source_meta: Mapping[str, Any] | None = None,
    run_timestamp: str | None = None,
) -> dict[str, Any]:
    report: dict[str, Any] = {
        "timestamp": run_timestamp or now_iso(),
        "source": dict(source_meta or {}),
    }
    report.update(result.report())
    return report


def load_report(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        return cast(dict[str, Any], json.load(fh))


def save_report(path: Path, report: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2)
