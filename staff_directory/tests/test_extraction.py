from __future__ import annotations

import json

import pytest

from staff_directory.employee_extractor import (
    ExtractionConfig,
    ExtractionSession,
    extract_employees,
)
from staff_directory.employee_extractor.normalize import RECORD_FIELDS, dedup_key

SAMPLE_DIRECTORY = [
    "GOVERNMENT OF RAJASTHAN",
    "Department of Information Technology & Communication",
    "Page 1",
    "1",
    "RAM KUMAR SHARMA",
    "Additional Director",
    "DoIT&C, Yojana Bhawan, Jaipur",
    "0141-2224455",
    "ram.sharma@rajasthan.gov.in",
    "2",
    "SUNITA",
    "MEENA",
    "Programmer",
    "District IT Cell, Kota",
    "9829012345",
    "sunita.meena[at]rajasthan[dot]gov[dot]in",
    "Page 2",
    "3",
    "RAM   KUMAR  SHARMA",
    "Director",
    "4",
    "Vacant",
    "5",
    "VIKAS JAIN",
    "LDC",
    "Collectorate Sawai Madhopur",
]


def test_single_record_fields() -> None:
    result = extract_employees(["1", "RAM KUMAR SHARMA", "PROGRAMMER", "JAIPUR OFFICE", "9812345678"])
    assert len(result.records) == 1
    record = result.records[0]
    assert record.id == "EMP0001"
    assert record.name == "RAM KUMAR SHARMA"
    assert record.designation == "Programmer"
    assert record.district == "JAIPUR"
    assert record.phone == "9812345678"
    assert record.department == "JAIPUR OFFICE"
    assert record.email == "ram.kumar.sharma@rajasthan.gov.in"


def test_duplicate_names_keep_first_occurrence() -> None:
    lines = [
        "1",
        "RAM KUMAR",
        "PROGRAMMER",
        "JAIPUR OFFICE",
        "5",
        "RAM   KUMAR",
        "CLERK",
        "KOTA",
    ]
    result = extract_employees(lines)
    assert [record.name for record in result.records] == ["RAM KUMAR"]
    assert result.records[0].designation == "Programmer"
    assert result.diagnostics.duplicates == 1
    assert result.diagnostics.boundary_attempts == 2


def test_boundary_without_name_produces_nothing() -> None:
    result = extract_employees(["7", "123", "456"])
    assert result.records == []
    assert result.diagnostics.boundary_attempts == 3
    assert result.diagnostics.skipped_boundaries == 3


def test_missing_fields_fall_back_to_defaults() -> None:
    result = extract_employees(["1", "RAM KUMAR", "Finance Section"])
    record = result.records[0]
    assert record.designation == "Staff Member"
    assert record.phone == "Contact Office"
    assert record.email == "ram.kumar@rajasthan.gov.in"
    assert record.district == "JAIPUR"
    assert record.department == "Finance Section"


def test_default_department_when_window_is_empty() -> None:
    config = ExtractionConfig(default_department="DoIT&C", default_district="AJMER")
    result = extract_employees(["1", "RAM KUMAR"], config)
    record = result.records[0]
    assert record.department == "DoIT&C"
    assert record.district == "AJMER"


@pytest.mark.parametrize("serial", ["0", "99999", "50000"])
def test_out_of_range_serial_never_starts_record(serial: str) -> None:
    result = extract_employees([serial, "RAM KUMAR", "PROGRAMMER"])
    assert result.records == []
    assert result.diagnostics.boundary_attempts == 0


def test_long_digit_run_is_not_a_boundary() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "9" * 5000, "2", "SITA DEVI"]
    result = extract_employees(lines)
    assert [record.name for record in result.records] == ["RAM KUMAR", "SITA DEVI"]
    assert result.diagnostics.boundary_attempts == 2


def test_name_window_is_respected() -> None:
    lines = ["1", "Room 12", "Block A", "RAM KUMAR", "PROGRAMMER"]
    narrow = ExtractionConfig().with_overrides(name_window=2)
    assert extract_employees(lines, narrow).records == []
    assert extract_employees(lines).records[0].name == "RAM KUMAR"


def test_name_lines_beyond_window_are_not_joined() -> None:
    lines = ["1", "RAM", "KUMAR", "SINGH", "RATHORE"]
    config = ExtractionConfig().with_overrides(name_window=2)
    assert extract_employees(lines, config).records[0].name == "RAM KUMAR"
    assert extract_employees(lines).records[0].name == "RAM KUMAR SINGH RATHORE"


def test_name_stops_at_office_line() -> None:
    result = extract_employees(["1", "RAM KUMAR", "JAIPUR OFFICE", "9812345678"])
    record = result.records[0]
    assert record.name == "RAM KUMAR"
    assert record.department == "JAIPUR OFFICE"


def test_windows_stop_at_next_boundary() -> None:
    lines = ["1", "RAM KUMAR", "2", "SITA DEVI", "Programmer", "9812345678"]
    result = extract_employees(lines)
    first, second = result.records
    assert first.designation == "Staff Member"
    assert first.phone == "Contact Office"
    assert second.designation == "Programmer"
    assert second.phone == "9812345678"


def test_sample_directory() -> None:
    result = extract_employees(SAMPLE_DIRECTORY)
    assert [record.id for record in result.records] == ["EMP0001", "EMP0002", "EMP0003"]
    first, second, third = result.records

    assert first.name == "RAM KUMAR SHARMA"
    assert first.designation == "Additional Director"
    assert first.department == "DoIT&C, Yojana Bhawan, Jaipur"
    assert first.district == "JAIPUR"
    assert first.phone == "0141-2224455"
    assert first.email == "ram.sharma@rajasthan.gov.in"

    assert second.name == "SUNITA MEENA"
    assert second.designation == "Programmer"
    assert second.district == "KOTA"
    assert second.phone == "9829012345"
    assert second.email == "sunita.meena@rajasthan.gov.in"

    assert third.name == "VIKAS JAIN"
    assert third.designation == "Clerk"
    assert third.district == "SAWAI MADHOPUR"
    assert third.email == "vikas.jain@rajasthan.gov.in"

    diagnostics = result.diagnostics
    assert diagnostics.raw_lines == len(SAMPLE_DIRECTORY)
    assert diagnostics.lines_scanned == len(SAMPLE_DIRECTORY) - 2
    assert diagnostics.boundary_attempts == 5
    assert diagnostics.skipped_boundaries == 1
    assert diagnostics.duplicates == 1
    assert diagnostics.records == 3


def test_email_split_across_lines() -> None:
    lines = [
        "1",
        "RAM KUMAR",
        "PROGRAMMER",
        "DoIT&C Jaipur",
        "ram.kumar@rajasth",
        "an.gov.in",
        "9812345678",
    ]
    record = extract_employees(lines).records[0]
    assert record.email == "ram.kumar@rajasthan.gov.in"
    assert record.department == "DoIT&C Jaipur"
    assert record.phone == "9812345678"


def test_email_directly_after_name_is_kept() -> None:
    lines = ["1", "RAM KUMAR", "rk.sharma@rajasthan.gov.in", "PROGRAMMER"]
    record = extract_employees(lines).records[0]
    assert record.email == "rk.sharma@rajasthan.gov.in"
    assert record.designation == "Programmer"
    assert record.department == "Department of Information Technology & Communication"


def test_labelled_email_is_cleaned() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "Email: RK.Sharma@Rajasthan.gov.in"]
    assert extract_employees(lines).records[0].email == "rk.sharma@rajasthan.gov.in"


def test_email_without_at_sign_is_replaced() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "rajasthan.gov.in"]
    assert extract_employees(lines).records[0].email == "ram.kumar@rajasthan.gov.in"


def test_department_truncation_and_long_lines() -> None:
    long_line = "X" * 200
    lines = ["1", "RAM KUMAR", "PROGRAMMER", long_line, "Network Operations Centre", "Jaipur"]
    config = ExtractionConfig(max_department_length=20)
    record = extract_employees(lines, config).records[0]
    assert "X" not in record.department
    assert len(record.department) <= 20
    assert record.department == "Network Operations C"


def test_stop_department_at_phone_is_optional() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "9812345678", "IT CELL KOTA"]
    default_record = extract_employees(lines).records[0]
    assert default_record.department == "IT CELL KOTA"
    assert default_record.district == "KOTA"

    config = ExtractionConfig(stop_department_at_phone=True)
    early_record = extract_employees(lines, config).records[0]
    assert early_record.phone == "9812345678"
    assert early_record.department == config.default_department
    assert early_record.district == config.default_district


def test_first_district_in_window_wins() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "Ajmer Road, Jaipur", "Kota"]
    assert extract_employees(lines).records[0].district == "AJMER"


def test_landline_with_prefix_is_kept_as_is() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER", "Ph: 0141-2345678 (O)"]
    record = extract_employees(lines).records[0]
    assert record.phone == "0141-2345678"
    assert record.department == "Department of Information Technology & Communication"


def test_invariants_hold_on_sample() -> None:
    result = extract_employees(SAMPLE_DIRECTORY + SAMPLE_DIRECTORY)
    keys = [dedup_key(record.name) for record in result.records]
    assert len(keys) == len(set(keys))
    for entry in result.to_list():
        assert list(entry) == list(RECORD_FIELDS)
        assert all(isinstance(value, str) and value for value in entry.values())


def test_extraction_is_deterministic() -> None:
    first = json.dumps(extract_employees(SAMPLE_DIRECTORY).to_list())
    second = json.dumps(extract_employees(SAMPLE_DIRECTORY).to_list())
    assert first == second


def test_sessions_are_isolated() -> None:
    lines = ["1", "RAM KUMAR", "PROGRAMMER"]
    assert len(ExtractionSession().run(lines).records) == 1
    assert len(ExtractionSession().run(lines).records) == 1


def test_session_runs_once() -> None:
    session = ExtractionSession()
    session.run(["1", "RAM KUMAR"])
    with pytest.raises(RuntimeError):
        session.run(["1", "RAM KUMAR"])


def test_id_width_is_configurable() -> None:
    config = ExtractionConfig(id_prefix="STAFF", id_width=6)
    result = extract_employees(["1", "RAM KUMAR", "2", "SITA DEVI"], config)
    assert [record.id for record in result.records] == ["STAFF000001", "STAFF000002"]


def test_statistics_follow_records() -> None:
    result = extract_employees(SAMPLE_DIRECTORY)
    statistics = result.statistics
    assert statistics.total == 3
    assert statistics.by_district == [("JAIPUR", 1), ("KOTA", 1), ("SAWAI MADHOPUR", 1)]
    assert statistics.by_designation == [
        ("Additional Director", 1),
        ("Clerk", 1),
        ("Programmer", 1),
    ]
    assert result.report()["diagnostics"]["duplicates"] == 1
