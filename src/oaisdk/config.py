"""Configuration models and loading for oaisdk.

Settings are resolved with precedence CLI override > environment > config
file > defaults. The config file lives at ``~/.oaisdk/config.toml`` unless
``OAISDK_HOME`` or an explicit path says otherwise.
"""

from __future__ import annotations

import os
import stat
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oaisdk.batch.report import ReportThresholds
from oaisdk.http import DEFAULT_BASE_URL
from oaisdk.paths import default_config_path


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


DEFAULT_TIMEOUT_SECS = 60.0
DEFAULT_POLL_INTERVAL_SECS = 30.0
DEFAULT_MAX_WAIT_SECS = 86_400.0
EXPECTED_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR  # 0o600


class ReportSettings(BaseModel):
    """Threshold percentages for the batch report recommendations."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    warn_success_below: float = Field(default=90.0, ge=0.0, le=100.0)
    praise_success_at_or_above: float = Field(default=95.0, ge=0.0, le=100.0)
    warn_extraction_below: float = Field(default=80.0, ge=0.0, le=100.0)
    praise_extraction_at_or_above: float = Field(default=90.0, ge=0.0, le=100.0)

    def thresholds(self) -> ReportThresholds:
        return ReportThresholds(
            warn_success_below=self.warn_success_below,
            praise_success_at_or_above=self.praise_success_at_or_above,
            warn_extraction_below=self.warn_extraction_below,
            praise_extraction_at_or_above=self.praise_extraction_at_or_above,
        )


class Settings(BaseModel):
    """Resolved oaisdk settings."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    api_key: str | None = None
    organization: str | None = None
    project: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECS, gt=0)
    poll_interval_secs: float = Field(default=DEFAULT_POLL_INTERVAL_SECS, gt=0)
    max_wait_secs: float = Field(default=DEFAULT_MAX_WAIT_SECS, gt=0)
    report: ReportSettings = Field(default_factory=ReportSettings)
    log_level: LogLevel = LogLevel.INFO

    @field_validator("api_key", "organization", "project")
    @classmethod
    def _strip_optional(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped if stripped else None

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped:
            raise ValueError("base_url cannot be empty")
        return stripped


def load_settings(
    cli_overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
    *,
    create_if_missing: bool = False,
) -> Settings:
    env = env if env is not None else os.environ
    cli_overrides = cli_overrides or {}
    path = Path(config_path) if config_path else default_config_path()

    created_new = False
    if not path.exists() and create_if_missing:
        path.parent.mkdir(parents=True, exist_ok=True)
        created_new = True

    config_data: dict[str, Any] = {}
    if path.exists():
        _ensure_permissions(path)
        config_data = _read_toml(path)

    defaults = Settings()

    api_key = _first_value(
        _clean_str(cli_overrides.get("api_key")),
        _clean_str(env.get("OPENAI_API_KEY")),
        _clean_str(_get_config_value(config_data, "auth", "api_key")),
        defaults.api_key,
    )
    organization = _first_value(
        _clean_str(cli_overrides.get("organization")),
        _clean_str(env.get("OPENAI_ORGANIZATION")),
        _clean_str(_get_config_value(config_data, "auth", "organization")),
    )
    project = _first_value(
        _clean_str(cli_overrides.get("project")),
        _clean_str(env.get("OPENAI_PROJECT")),
        _clean_str(_get_config_value(config_data, "auth", "project")),
    )
    base_url = _first_value(
        _clean_str(cli_overrides.get("base_url")),
        _clean_str(env.get("OPENAI_BASE_URL")),
        _clean_str(_get_config_value(config_data, "api", "base_url")),
        defaults.base_url,
    )
    timeout = _first_value(
        cli_overrides.get("timeout"),
        _get_config_value(config_data, "api", "timeout"),
        defaults.timeout,
    )
    poll_interval_secs = _first_value(
        cli_overrides.get("poll_interval_secs"),
        _get_config_value(config_data, "batch", "poll_interval_secs"),
        defaults.poll_interval_secs,
    )
    max_wait_secs = _first_value(
        cli_overrides.get("max_wait_secs"),
        _get_config_value(config_data, "batch", "max_wait_secs"),
        defaults.max_wait_secs,
    )
    log_level = _first_value(
        _clean_str(cli_overrides.get("log_level")),
        _clean_str(_get_config_value(config_data, "logging", "log_level")),
        defaults.log_level,
    )

    log_level_enum = _coerce_enum(log_level, LogLevel, LogLevel.INFO)
    log_level_val = cast(LogLevel, log_level_enum or LogLevel.INFO)

    settings = Settings(
        api_key=api_key,
        organization=organization,
        project=project,
        base_url=base_url,
        timeout=timeout,
        poll_interval_secs=poll_interval_secs,
        max_wait_secs=max_wait_secs,
        report=_parse_report(config_data.get("report")),
        log_level=log_level_val,
    )

    if created_new:
        # Never persist secrets picked up from CLI flags or the environment.
        write_config(settings.model_copy(update={"api_key": None}), path)
    return settings


def write_config(settings: Settings, config_path: Path | str | None = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    sections: list[str] = []

    _append_section(
        sections,
        "auth",
        {"api_key": settings.api_key, "organization": settings.organization, "project": settings.project},
    )
    _append_section(sections, "api", {"base_url": settings.base_url, "timeout": settings.timeout})
    _append_section(
        sections,
        "batch",
        {"poll_interval_secs": settings.poll_interval_secs, "max_wait_secs": settings.max_wait_secs},
    )
    _append_section(sections, "report", settings.report.model_dump())
    _append_section(sections, "logging", {"log_level": settings.log_level.value})

    content = "\n\n".join(filter(None, sections)) + "\n"
    path.write_text(content, encoding="utf-8")
    path.chmod(EXPECTED_FILE_MODE)
    return path


def _parse_report(section: Any) -> ReportSettings:
    if not isinstance(section, dict):
        return ReportSettings()
    known = {key: value for key, value in section.items() if key in ReportSettings.model_fields}
    return ReportSettings(**known)


def _ensure_permissions(path: Path) -> None:
    current_mode = stat.S_IMODE(path.stat().st_mode)
    if current_mode != EXPECTED_FILE_MODE:
        path.chmod(EXPECTED_FILE_MODE)


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_config_value(config: Mapping[str, Any], section: str, key: str) -> Any:
    section_data = config.get(section)
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _coerce_enum(value: Any, enum_cls: type[Enum], default: Enum | None = None) -> Enum | None:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            return default
    return default


def _append_section(parts: list[str], name: str, values: Mapping[str, Any]) -> None:
    filtered = {k: v for k, v in values.items() if v is not None}
    if not filtered:
        return
    lines = [f"[{name}]"]
    for key, val in filtered.items():
        if isinstance(val, Enum):
            val = val.value
        if isinstance(val, str):
            escaped = val.replace("\\", "\\\\").replace('"', '\\"')
            lines.append(f'{key} = "{escaped}"')
        elif isinstance(val, bool):
            lines.append(f"{key} = {'true' if val else 'false'}")
        else:
            lines.append(f"{key} = {val}")
    parts.append("\n".join(lines))


__all__ = [
    "DEFAULT_MAX_WAIT_SECS",
    "DEFAULT_POLL_INTERVAL_SECS",
    "DEFAULT_TIMEOUT_SECS",
    "LogLevel",
    "ReportSettings",
    "Settings",
    "load_settings",
    "write_config",
]
