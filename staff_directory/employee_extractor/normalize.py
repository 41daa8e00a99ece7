"""Normalization helpers."""
from __future__ import annotations

from dataclasses import asdict, dataclass

from .config import ExtractionConfig
from .lines import collapse_whitespace, sanitize_email
from .parser import RecordDraft

RECORD_FIELDS = ("id", "name", "designation", "department", "district", "phone", "email")


@dataclass(frozen=True)
class EmployeeRecord:
    id: str
    name: str
    designation: str
    department: str
    district: str
    phone: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def dedup_key(name: str) -> str:
    return "".join(name.lower().split())


def format_record_id(ordinal: int, config: ExtractionConfig) -> str:
    return f"{config.id_prefix}{ordinal:0{config.id_width}d}"


def synthesize_email(name: str, domain: str) -> str:
    local = ".".join(name.lower().split())
    return sanitize_email(f"{local}@{domain}")


def finalize_record(
    draft: RecordDraft, record_id: str, config: ExtractionConfig
) -> EmployeeRecord:
    name = collapse_whitespace(draft.name)
    department = collapse_whitespace(draft.department or "")
    email = draft.email or synthesize_email(name, config.email_domain)
    return EmployeeRecord(
        id=record_id,
        name=name,
        designation=draft.designation or config.default_designation,
        department=department or config.default_department,
        district=draft.district or config.default_district,
        phone=draft.phone or config.default_phone,
        email=email,
    )
