from __future__ import annotations

from staff_directory.employee_extractor.config import ExtractionConfig, WindowBounds


def test_defaults() -> None:
    config = ExtractionConfig()
    assert config.windows == WindowBounds(name=5, designation=10, department=20, email=25)
    assert config.default_designation == "Staff Member"
    assert config.default_phone == "Contact Office"
    assert config.serial_min == 1
    assert config.serial_max == 49999
    assert config.email_start_offset == 0


def test_from_env_reads_prefixed_values() -> None:
    config = ExtractionConfig.from_env(
        {
            "DIRECTORY_NAME_WINDOW": "3",
            "DIRECTORY_EMAIL_DOMAIN": "doitc.rajasthan.gov.in",
            "DIRECTORY_STOP_DEPARTMENT_AT_PHONE": "yes",
            "DIRECTORY_MAX_DEPARTMENT_LENGTH": "80",
        }
    )
    assert config.windows.name == 3
    assert config.windows.email == 25
    assert config.email_domain == "doitc.rajasthan.gov.in"
    assert config.stop_department_at_phone is True
    assert config.max_department_length == 80


def test_from_env_ignores_invalid_values() -> None:
    config = ExtractionConfig.from_env(
        {"DIRECTORY_SERIAL_MAX": "lots", "DIRECTORY_STOP_DEPARTMENT_AT_PHONE": "maybe"}
    )
    assert config == ExtractionConfig()


def test_with_overrides_skips_none() -> None:
    config = ExtractionConfig().with_overrides(
        name_window=None, department_window=15, default_district=None
    )
    assert config.windows.department == 15
    assert config.windows.name == 5
    assert config.default_district == "JAIPUR"
