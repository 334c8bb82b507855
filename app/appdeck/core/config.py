"""appdeck configuration and settings.

This module provides the configuration model and I/O functions for
appdeck. Configuration is stored in ~/.config/appdeck/config.toml; every
setting has a default, so the file is optional.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from appdeck.core.paths import get_config_path
from appdeck.images.icons import (
    DEFAULT_ICON_MEMORY_BYTES,
    DEFAULT_ICON_MEMORY_ENTRIES,
    DEFAULT_ICON_SIZE,
)
from appdeck.images.wallpaper import DEFAULT_WALLPAPER_MEMORY_BYTES

DEFAULT_LOCALIZATIONS: list[str] = ["en", "English", "Base"]


class AppdeckConfig(BaseModel):
    """Configuration for appdeck.

    Attributes:
        roots: Application roots to scan. None uses the platform defaults.
        opener: Command used to launch bundles. None uses the platform opener.
        preferred_localizations: ``.lproj`` names consulted for display names.
        icon_size: Edge length icons are scaled to.
        icon_memory_entries: Icon memory tier entry bound.
        icon_memory_bytes: Icon memory tier byte bound.
        wallpaper: Optional wallpaper source image.
        wallpaper_memory_bytes: Wallpaper memory tier byte bound.
        workers: Worker threads used for icon loading.
    """

    model_config = ConfigDict(extra="forbid")

    roots: Annotated[
        list[Path] | None,
        Field(description="Application roots (None = platform defaults)"),
    ] = None
    opener: Annotated[
        str | None,
        Field(description="Launch command (None = platform opener)"),
    ] = None
    preferred_localizations: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_LOCALIZATIONS),
            description="Localizations consulted for display names",
        ),
    ]
    icon_size: Annotated[
        int,
        Field(ge=16, le=1024, description="Icon edge length in pixels (16-1024)"),
    ] = DEFAULT_ICON_SIZE
    icon_memory_entries: Annotated[
        int,
        Field(ge=1, description="Maximum icons kept in memory"),
    ] = DEFAULT_ICON_MEMORY_ENTRIES
    icon_memory_bytes: Annotated[
        int,
        Field(ge=1, description="Maximum bytes of icons kept in memory"),
    ] = DEFAULT_ICON_MEMORY_BYTES
    wallpaper: Annotated[
        Path | None,
        Field(description="Wallpaper source image"),
    ] = None
    wallpaper_memory_bytes: Annotated[
        int,
        Field(ge=1, description="Maximum bytes of wallpaper kept in memory"),
    ] = DEFAULT_WALLPAPER_MEMORY_BYTES
    workers: Annotated[
        int,
        Field(ge=1, le=16, description="Icon loading worker threads (1-16)"),
    ] = 4

    def scan_roots(self) -> tuple[Path, ...] | None:
        """Return configured roots with ``~`` expanded, or None."""
        if self.roots is None:
            return None
        return tuple(root.expanduser() for root in self.roots)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> AppdeckConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AppdeckConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return AppdeckConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> AppdeckConfig:
    """Load configuration, falling back to defaults when there is no file.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return get_default_config()


def save_config(config: AppdeckConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The AppdeckConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: AppdeckConfig) -> dict[str, object]:
    """Convert AppdeckConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.

    Args:
        config: The AppdeckConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(mode="json", exclude_none=True)


def get_default_config() -> AppdeckConfig:
    """Create a default AppdeckConfig.

    Returns:
        AppdeckConfig with default settings.
    """
    return AppdeckConfig()
