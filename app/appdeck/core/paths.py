"""XDG-compliant path management for appdeck.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and cache storage.

XDG defaults:
- Config: ~/.config/appdeck/
- Cache: ~/.cache/appdeck/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "appdeck"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/appdeck/ (or XDG_CONFIG_HOME/appdeck/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_cache_dir() -> Path:
    """Get the cache directory path.

    Cache data includes the inventory record and decoded images, all of
    which can be regenerated by rescanning.

    Returns:
        Path to ~/.cache/appdeck/ (or XDG_CACHE_HOME/appdeck/).
    """
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/appdeck/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_store_path() -> Path:
    """Get the key-value store file path.

    Returns:
        Path to ~/.cache/appdeck/store.json.
    """
    return get_cache_dir() / "store.json"


def get_icon_cache_dir() -> Path:
    """Get the icon cache directory path.

    Returns:
        Path to ~/.cache/appdeck/icons/.
    """
    return get_cache_dir() / "icons"


def get_wallpaper_cache_dir() -> Path:
    """Get the wallpaper cache directory path.

    Returns:
        Path to ~/.cache/appdeck/wallpaper/.
    """
    return get_cache_dir() / "wallpaper"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_cache_dir() -> Path:
    """Create the cache directory if it doesn't exist.

    Returns:
        Path to the cache directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_cache_dir(), "cache")


def ensure_dirs() -> None:
    """Create all required application directories."""
    ensure_config_dir()
    ensure_cache_dir()
