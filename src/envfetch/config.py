"""Configuration management using pydantic-settings.

Settings come from, in priority order:
1. Keyword arguments (used by the CLI and tests)
2. Environment variables prefixed ``ENVFETCH_`` (e.g. ``ENVFETCH_PRINT_FORMAT``)
3. The TOML config file, ``~/.config/envfetch/config.toml`` by default

The config file location can be moved with the ``ENVFETCH_CONFIG``
environment variable or, in tests, with :func:`configure`.

Usage:
    from envfetch.config import load_settings
    settings = load_settings()
    print(settings.print_format)
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from envfetch.lib.errors import FileError
from envfetch.lib.similarity import SIMILARITY_THRESHOLD

logger = logging.getLogger(__name__)

DEFAULT_PRINT_FORMAT = '{name} = "{value}"'

DEFAULT_CONFIG = f"""\
# envfetch configuration

# Format used by `envfetch print`. {{name}} and {{value}} are replaced
# by each variable's name and value.
print_format = '{DEFAULT_PRINT_FORMAT}'

# How close (0-1) a name must be to be suggested when `get` misses.
similarity_threshold = {SIMILARITY_THRESHOLD}

# Shell init file used for persistent variables (not used on Windows).
# rc_file = "~/.bashrc"
"""

# -- Config file location -----------------------------------------------------
# Overridable via configure().

_CONFIG_FILE: Path | None = None


def configure(*, config_file: Path | None = None) -> None:
    """Override the config file location."""
    global _CONFIG_FILE  # noqa: PLW0603
    _CONFIG_FILE = config_file


def get_config_file_path() -> Path:
    """Return the config file path (which may not exist)."""
    if _CONFIG_FILE is not None:
        return _CONFIG_FILE
    if env_path := os.environ.get("ENVFETCH_CONFIG"):
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "envfetch" / "config.toml"


class Settings(BaseSettings):
    """envfetch settings."""

    model_config = SettingsConfigDict(
        env_prefix="ENVFETCH_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=get_config_file_path()),
        )

    print_format: str | None = Field(
        default=None,
        description="Format for `print`; None uses the built-in default",
    )

    similarity_threshold: float = Field(
        default=SIMILARITY_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Minimum similarity for 'did you mean' suggestions",
    )

    rc_file: Path | None = Field(
        default=None,
        description="Shell init file for persistent variables (None = ~/.bashrc)",
    )

    @property
    def resolved_rc_file(self) -> Path | None:
        return self.rc_file.expanduser() if self.rc_file else None


def load_settings(**overrides: Any) -> Settings:
    """Build settings from all sources, with ``overrides`` taking priority."""
    return Settings(**overrides)


def init_config(path: Path | None = None, *, force: bool = False) -> Path:
    """Write the default config file.

    Raises:
        FileError: The file exists (and ``force`` is False) or can't be written.
    """
    path = path or get_config_file_path()
    if path.exists() and not force:
        raise FileError(f"config file already exists: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    except OSError as e:
        raise FileError(f"can't write {path}: {e}") from e
    logger.info("Wrote default config to %s", path)
    return path
