"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Values are read on
every call (no module-level caching) so tests can monkeypatch the
environment between cases.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "clinic_admin"
APP_VERSION = "0.4.0"
APP_DESCRIPTION = "Dental clinic administration backend"

DEFAULT_DB_PATH = "clinic_admin.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOCALE = "vi"
DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def get_db_path() -> str:
    raw = _raw_env("CLINIC_ADMIN_DB_PATH", DEFAULT_DB_PATH)
    if raw and raw != ":memory:" and not os.path.isabs(raw):
        data_dir = os.getenv("CLINIC_ADMIN_DATA_DIR")
        if data_dir:
            return os.path.join(data_dir, raw)
    return raw  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("CLINIC_ADMIN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def secret_key() -> str:
    return os.getenv("CLINIC_ADMIN_SECRET_KEY", "dev-secret-key")


def default_locale() -> str:
    return (_optional_env("CLINIC_ADMIN_DEFAULT_LOCALE") or DEFAULT_LOCALE).lower()


def timezone_name() -> str:
    """IANA zone used to compute "today" and day windows for daily views."""
    return _optional_env("CLINIC_ADMIN_TIMEZONE") or DEFAULT_TIMEZONE


def app_title() -> str | None:
    """Optional override for the page title shown in the layout."""
    return _optional_env("APP_TITLE")


def admin_bootstrap_enabled() -> bool:
    """Whether to create the bootstrap admin employee on startup.

    Environment Variable: CLINIC_ADMIN_BOOTSTRAP_ADMIN
    Default is False so production databases are never touched implicitly.
    """
    return env_bool("CLINIC_ADMIN_BOOTSTRAP_ADMIN", default=False)


def admin_bootstrap_email() -> str | None:
    return _optional_env("CLINIC_ADMIN_BOOTSTRAP_EMAIL")


def admin_bootstrap_password() -> str | None:
    return os.getenv("CLINIC_ADMIN_BOOTSTRAP_PASSWORD") or None


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "locale": default_locale(),
        "timezone": timezone_name(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "env_bool",
    "get_db_path",
    "log_level_name",
    "secret_key",
    "default_locale",
    "timezone_name",
    "app_title",
    "admin_bootstrap_enabled",
    "admin_bootstrap_email",
    "admin_bootstrap_password",
    "metadata",
    "summarize_runtime_config",
]
