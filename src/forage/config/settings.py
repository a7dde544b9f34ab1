# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Settings for the Forage library itself.

These are not feature settings. They control where Forage looks for
properties files and how it logs. All of them can be set with `FORAGE_`
environment variables, e.g. `FORAGE_CONFIG_DIR=/etc/forage`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ForageSettings(BaseSettings):
    """Library-level settings, read from `FORAGE_*` environment variables.

    Precedence follows pydantic-settings: init arguments, then environment,
    then the defaults below. Empty environment values are ignored.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        env_prefix="FORAGE_",
        extra="ignore",
        validate_default=True,
    )

    config_dir: Annotated[
        Path | None,
        Field(description="Directory searched for feature properties files after the working directory."),
    ] = None

    working_dir: Annotated[
        Path | None,
        Field(description="Directory searched first for properties files. Defaults to the current directory at lookup time."),
    ] = None

    application_properties: Annotated[
        Path | None,
        Field(
            description="Optional runtime-wide properties file consulted after system properties. Disabled when unset."
        ),
    ] = None

    log_level: Annotated[LogLevel, Field(description="Level for the `forage` logger.")] = "WARNING"

    rich_logging: Annotated[bool, Field(description="Use a rich handler for log output.")] = True

    discover_entry_points: Annotated[
        bool,
        Field(description="Load plugins from `forage.plugins.*` entry points on activation."),
    ] = True


_settings: ForageSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings() -> ForageSettings:
    """Get the global settings instance, creating it from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ForageSettings()
    return _settings


def reset_settings() -> None:
    """Drop the global settings so the next `get_settings()` re-reads the environment."""
    global _settings
    _settings = None


__all__ = ("ForageSettings", "LogLevel", "get_settings", "reset_settings")
