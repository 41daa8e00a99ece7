"""Employee record extraction from staff directory text."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from . import config, export, lines, normalize, parser, registry, renderer, report, rules, session
from .config import ExtractionConfig, WindowBounds
from .normalize import EmployeeRecord
from .session import ExtractionResult, ExtractionSession, extract_employees
from .sources import SourceMissingError

__all__ = [
    "config",
    "export",
    "lines",
    "normalize",
    "parser",
    "registry",
    "renderer",
    "report",
    "rules",
    "session",
    "EmployeeRecord",
    "ExtractionConfig",
    "ExtractionResult",
    "ExtractionSession",
    "SourceMissingError",
    "WindowBounds",
    "extract_employees",
    "extract_from_file",
]


def extract_from_file(
    path: Path, config: ExtractionConfig | None = None, **source_options: Any
) -> tuple[ExtractionResult, dict[str, Any]]:
    """Convenience wrapper: read ``path`` and run one extraction session over it."""
    from .sources import read_source_lines

    source = read_source_lines(path, **source_options)
    return extract_employees(source.lines, config), source.meta
