"""Line normalisation and text clean-up ahead of record scanning."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .config import ExtractionConfig
from .rules import (
    DIGITS_ONLY_RE,
    EMAIL_AT_RE,
    EMAIL_DISALLOWED_RE,
    EMAIL_DOT_RE,
    EMAIL_LABEL_RE,
    EMAIL_TOKEN_RE,
    PAGE_MARKER_RE,
    PHONE_RE,
)


@dataclass(frozen=True)
class RawLine:
    """A kept line: its position after filtering, its source position and text."""

    position: int
    source_index: int
    text: str


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def is_digits_only(value: str) -> bool:
    return DIGITS_ONLY_RE.match(value) is not None


def normalize_lines(
    raw_lines: Iterable[str], config: ExtractionConfig | None = None
) -> list[RawLine]:
    config = config or ExtractionConfig()
    kept: list[RawLine] = []
    for source_index, raw_line in enumerate(raw_lines):
        text = raw_line.strip()
        if not text:
            continue
        if PAGE_MARKER_RE.search(text):
            continue
        # Short serial numbers survive so the boundary detector can judge them.
        if len(text) < config.min_line_length and not is_digits_only(text):
            continue
        kept.append(RawLine(position=len(kept), source_index=source_index, text=text))
    return kept


def strip_phone_numbers(value: str) -> str:
    return collapse_whitespace(PHONE_RE.sub(" ", value))


def sanitize_email(value: str) -> str:
    return EMAIL_DISALLOWED_RE.sub("", value.lower())


def clean_email(value: str) -> str:
    """Turn an accumulated email fragment into a bare lower-case address.

    ``Email: ram.kumar[at]rajasthan[dot]gov[dot]in`` becomes
    ``ram.kumar@rajasthan.gov.in``. When no address-shaped token is present
    the whole fragment is sanitised instead.
    """
    decoded = EMAIL_LABEL_RE.sub("", value)
    decoded = EMAIL_AT_RE.sub("@", decoded)
    decoded = EMAIL_DOT_RE.sub(".", decoded).lower()
    match = EMAIL_TOKEN_RE.search(decoded)
    if match:
        return sanitize_email(match.group(0))
    return sanitize_email(decoded)


def limit_length(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length].rstrip()
