"""
Dynaconf-powered operator settings with Pydantic validation.

Operator settings cover the values the synthesis modules treat as injectable
rather than hard-coded, chiefly the credentials of the databases the
registry and Clair connect to. They are read from an optional YAML settings
file and `QUAYCONFIG_*` environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

ENVVAR_PREFIX = "QUAYCONFIG"


class ConfigError(RuntimeError):
    """Raised when operator settings are missing or invalid."""


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Case-insensitive dictionary lookup helper; nested keys come back lowercased."""
    value = raw.get(key) or raw.get(key.upper()) or raw.get(key.lower())
    if isinstance(value, dict):
        return {str(name).lower(): item for name, item in value.items()}
    return {}


class DatabaseCredentials(BaseModel):
    """Login for a managed PostgreSQL instance."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    database: str = Field(default="quay")
    port: int = Field(default=5432)

    @field_validator("user", "password", "database", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        # YAML and env vars turn a numeric password like 12345 into an int.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("user", "password", "database")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("database credentials must not be empty")
        return value


class OperatorSettings(BaseModel):
    """Validated operator settings consumed by the synthesis modules."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    postgres: DatabaseCredentials = Field(default_factory=DatabaseCredentials)
    clair_postgres: DatabaseCredentials = Field(
        default_factory=lambda: DatabaseCredentials(database="clair")
    )
    clair_log_level: str = Field(default="debug")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> OperatorSettings:
        clair_section = _section(raw, "clair_postgres")
        data: dict[str, Any] = {
            "postgres": _section(raw, "postgres"),
            "clair_postgres": {"database": "clair", **clair_section},
        }
        log_level = raw.get("clair_log_level") or raw.get("CLAIR_LOG_LEVEL")
        if log_level:
            data["clair_log_level"] = log_level
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError("Operator settings validation failed") from exc


def load_settings(
    settings_file: str | Path | None = None,
    *,
    settings: Dynaconf | None = None,
) -> OperatorSettings:
    """Load operator settings from an optional YAML file and the environment."""
    settings_files: list[str] = []
    if settings_file is not None:
        path = Path(settings_file)
        if not path.exists():
            raise ConfigError(f"Settings file {path} does not exist.")
        settings_files.append(str(path))

    settings = settings or Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=settings_files,
        environments=False,
    )
    return OperatorSettings.from_raw(settings.as_dict())


def base_config() -> dict[str, Any]:
    """Minimum config bundle with values the registry has no defaults for."""
    return {
        "FEATURE_MAILING": False,
        "REGISTRY_TITLE": "Quay",
        "REGISTRY_TITLE_SHORT": "Quay",
        "AUTHENTICATION_TYPE": "Database",
        "ENTERPRISE_LOGO_URL": "/static/img/quay-horizontal-color.svg",
        "DEFAULT_TAG_EXPIRATION": "2w",
        "ALLOW_PULLS_WITHOUT_STRICT_LOGGING": False,
        "TAG_EXPIRATION_OPTIONS": ["2w"],
        "TEAM_RESYNC_STALE_TIME": "60m",
        "FEATURE_DIRECT_LOGIN": True,
        "FEATURE_BUILD_SUPPORT": False,
    }


__all__ = [
    "ConfigError",
    "DatabaseCredentials",
    "OperatorSettings",
    "base_config",
    "load_settings",
]
