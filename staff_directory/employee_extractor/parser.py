"""Windowed field scanning for directory records.

Every record attempt starts at a boundary line (a bare serial number) and
looks at a bounded number of lines after it. Each field type has its own
window; all windows also end at the next boundary line so one record never
reads into the next.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .config import ExtractionConfig
from .lines import (
    RawLine,
    clean_email,
    collapse_whitespace,
    is_digits_only,
    limit_length,
    strip_phone_numbers,
)
from .rules import (
    DEPARTMENT_MARKER_RE,
    DESIGNATION_RULES,
    EMAIL_COMPLETE_RE,
    EMAIL_CONTINUATION_RE,
    EMAIL_START_RE,
    NAME_LINE_RE,
    PHONE_RE,
    DesignationRule,
    classify_designation,
    find_district,
)

logger = logging.getLogger(__name__)


@dataclass
class RecordDraft:
    """A record still being filled in by the field scanners."""

    name: str
    serial: int
    boundary: int
    name_end: int
    source_index: int
    designation: str | None = None
    department: str | None = None
    district: str | None = None
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class NameScan:
    name: str
    end: int


@dataclass(frozen=True)
class DepartmentScan:
    department: str | None
    district: str | None
    phone: str | None


def parse_serial(text: str, config: ExtractionConfig) -> int | None:
    if not is_digits_only(text):
        return None
    # Compare digit counts first; int() refuses very long digit runs.
    digits = text.lstrip("0") or "0"
    if len(digits) > len(str(config.serial_max)):
        return None
    value = int(digits)
    if config.serial_min <= value <= config.serial_max:
        return value
    return None


def is_boundary(text: str, config: ExtractionConfig) -> bool:
    return parse_serial(text, config) is not None


def iter_boundaries(lines: Sequence[RawLine], config: ExtractionConfig) -> Iterator[int]:
    for line in lines:
        if is_boundary(line.text, config):
            yield line.position


def window_end(
    lines: Sequence[RawLine], boundary: int, bound: int, config: ExtractionConfig
) -> int:
    """Exclusive end of a window of ``bound`` lines after ``boundary``."""
    limit = min(len(lines), boundary + 1 + bound)
    for position in range(boundary + 1, limit):
        if is_boundary(lines[position].text, config):
            return position
    return limit


def is_name_line(text: str, config: ExtractionConfig) -> bool:
    return len(text) > config.min_name_length and NAME_LINE_RE.match(text) is not None


def ends_name(text: str) -> bool:
    """An office or district line closes a name that already has a line."""
    return DEPARTMENT_MARKER_RE.search(text) is not None or find_district(text) is not None


def scan_name_window(
    lines: Sequence[RawLine],
    boundary: int,
    config: ExtractionConfig,
    rules: tuple[DesignationRule, ...] = DESIGNATION_RULES,
) -> NameScan | None:
    end = window_end(lines, boundary, config.windows.name, config)
    accepted: list[str] = []
    position = boundary + 1
    while position < end:
        text = lines[position].text
        if classify_designation(text, rules) is not None:
            break
        if is_name_line(text, config):
            if accepted and ends_name(text):
                break
            accepted.append(text)
        elif accepted:
            break
        position += 1
    if not accepted:
        return None
    return NameScan(name=collapse_whitespace(" ".join(accepted)), end=position)


def scan_designation(
    lines: Sequence[RawLine],
    start: int,
    end: int,
    rules: tuple[DesignationRule, ...] = DESIGNATION_RULES,
) -> str | None:
    for position in range(start, end):
        label = classify_designation(lines[position].text, rules)
        if label is not None:
            return label
    return None


def scan_department(
    lines: Sequence[RawLine],
    start: int,
    end: int,
    config: ExtractionConfig,
    rules: tuple[DesignationRule, ...] = DESIGNATION_RULES,
) -> DepartmentScan:
    parts: list[str] = []
    district: str | None = None
    phone: str | None = None
    for position in range(start, end):
        text = lines[position].text
        if district is None:
            district = find_district(text)
        phone_match = PHONE_RE.search(text)
        if phone_match:
            if phone is None:
                phone = phone_match.group(0)
            if config.stop_department_at_phone:
                break
            continue
        if is_digits_only(text) or len(text) > config.max_department_line_length:
            continue
        if EMAIL_START_RE.search(text) or classify_designation(text, rules) is not None:
            continue
        parts.append(text)
    department = strip_phone_numbers(" ".join(parts))
    department = limit_length(department, config.max_department_length)
    return DepartmentScan(department=department or None, district=district, phone=phone)


def scan_email(lines: Sequence[RawLine], start: int, end: int) -> str | None:
    parts: list[str] = []
    for position in range(start, end):
        text = lines[position].text
        if not parts:
            if EMAIL_START_RE.search(text):
                parts.append(text)
        elif EMAIL_START_RE.search(text) or EMAIL_CONTINUATION_RE.match(text):
            parts.append(text)
        else:
            break
        if parts and EMAIL_COMPLETE_RE.search(clean_email("".join(parts))):
            break
    if not parts:
        return None
    email = clean_email("".join(parts))
    if "@" not in email:
        return None
    return email


def parse_record(
    lines: Sequence[RawLine],
    boundary: int,
    config: ExtractionConfig,
    rules: tuple[DesignationRule, ...] = DESIGNATION_RULES,
) -> RecordDraft | None:
    """Run the bounded field scans for the boundary at ``boundary``.

    Returns ``None`` when no name line follows the boundary inside the name
    window.
    """
    serial = parse_serial(lines[boundary].text, config)
    if serial is None:
        return None
    name_scan = scan_name_window(lines, boundary, config, rules)
    if name_scan is None:
        logger.debug("No name after serial %s at line %d", serial, lines[boundary].source_index)
        return None
    draft = RecordDraft(
        name=name_scan.name,
        serial=serial,
        boundary=boundary,
        name_end=name_scan.end,
        source_index=lines[boundary].source_index,
    )
    windows = config.windows
    designation_end = window_end(lines, boundary, windows.designation, config)
    draft.designation = scan_designation(lines, name_scan.end, designation_end, rules)

    department_end = window_end(lines, boundary, windows.department, config)
    department_scan = scan_department(lines, name_scan.end, department_end, config, rules)
    draft.department = department_scan.department
    draft.district = department_scan.district
    draft.phone = department_scan.phone

    email_end = window_end(lines, boundary, windows.email, config)
    draft.email = scan_email(lines, name_scan.end + config.email_start_offset, email_end)
    return draft
