"""Tunable bounds and defaults for the extraction pipeline."""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "DIRECTORY_"


@dataclass(frozen=True)
class WindowBounds:
    """Lookahead bounds, counted in normalised lines after the boundary line."""

    name: int = 5
    designation: int = 10
    department: int = 20
    email: int = 25


@dataclass(frozen=True)
class ExtractionConfig:
    windows: WindowBounds = field(default_factory=WindowBounds)
    email_start_offset: int = 0
    serial_min: int = 1
    serial_max: int = 49999
    min_line_length: int = 2
    min_name_length: int = 2
    max_department_line_length: int = 150
    max_department_length: int = 120
    default_designation: str = "Staff Member"
    default_department: str = "Department of Information Technology & Communication"
    default_district: str = "JAIPUR"
    default_phone: str = "Contact Office"
    email_domain: str = "rajasthan.gov.in"
    id_prefix: str = "EMP"
    id_width: int = 4
    stop_department_at_phone: bool = False

    def with_overrides(self, **overrides: Any) -> ExtractionConfig:
        """Return a copy with ``overrides`` applied, ignoring ``None`` values.

        Window bounds may be given as ``name_window``, ``designation_window``,
        ``department_window`` and ``email_window``.
        """
        window_values = {}
        for window_field in fields(WindowBounds):
            value = overrides.pop(f"{window_field.name}_window", None)
            if value is not None:
                window_values[window_field.name] = value
        values = {key: value for key, value in overrides.items() if value is not None}
        if window_values:
            values["windows"] = replace(self.windows, **window_values)
        return replace(self, **values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExtractionConfig:
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for window_field in fields(WindowBounds):
            key = f"{window_field.name}_window"
            value = _read_int(env, key)
            if value is not None:
                overrides[key] = value
        for config_field in fields(cls):
            if config_field.name == "windows":
                continue
            if config_field.type == "int":
                value = _read_int(env, config_field.name)
            elif config_field.type == "bool":
                value = _read_bool(env, config_field.name)
            else:
                value = env.get(_env_name(config_field.name)) or None
            if value is not None:
                overrides[config_field.name] = value
        return cls().with_overrides(**overrides)


def _env_name(name: str) -> str:
    return ENV_PREFIX + name.upper()


def _read_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(_env_name(name))
    if not raw:
        return None
    try:
        return max(int(raw), 0)
    except ValueError:
        logger.debug("Invalid %s value: %s", _env_name(name), raw)
        return None


def _read_bool(env: Mapping[str, str], name: str) -> bool | None:
    raw = env.get(_env_name(name))
    if not raw:
        return None
    lowered = raw.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    logger.debug("Invalid %s value: %s", _env_name(name), raw)
    return None
