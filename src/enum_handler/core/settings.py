"""Library-wide settings for enum-handler.

Defaults that individual ``define_enum`` calls may override (strictness,
scope generation) and knobs for the condition rewriter live here, read
from ``ENUM_HANDLER_*`` environment variables or a ``.env`` file.

Examples:
    >>> import os
    >>> os.environ["ENUM_HANDLER_STRICT_DEFAULT"] = "false"
    >>> clear_settings_cache()
    >>> get_settings().strict_default
    False

Tags:
    settings, configuration, pydantic, environment, enum-handler
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnumHandlerSettings(BaseSettings):
    """Settings shared by every enum-handled model.

    Fields
    ──────
    strict_default   : Validate assignments when ``define_enum`` gets no ``strict``
    qualify_columns  : Prefix bare enum columns with the table name when rewriting
    generate_scopes  : Create ``select()`` scopes for mapped classes
    log_level        : Structlog log level used by the CLI
    log_json         : JSON logs (None = auto-detect from tty)
    """

    model_config = SettingsConfigDict(
        env_prefix="ENUM_HANDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Definitions ──────────────────────────────────────────────
    strict_default: bool = True
    generate_scopes: bool = True

    # ── Query rewriting ──────────────────────────────────────────
    qualify_columns: bool = True

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None


_settings_cache: dict[str, EnumHandlerSettings] = {}


def get_settings(*, _force_reload: bool = False) -> EnumHandlerSettings:
    """Return the cached settings, loading them on first use."""
    if _force_reload or "default" not in _settings_cache:
        _settings_cache["default"] = EnumHandlerSettings()
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["EnumHandlerSettings", "get_settings", "clear_settings_cache"]
