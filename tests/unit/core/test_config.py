"""Unit tests for configuration loading and saving."""

import tomllib
from pathlib import Path

import pytest
from appdeck.core.config import (
    AppdeckConfig,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    config_to_dict,
    get_default_config,
    load_config,
    load_config_or_default,
    save_config,
)
from appdeck.core.paths import get_config_path


class TestAppdeckConfig:
    """Tests for AppdeckConfig model."""

    def test_defaults(self) -> None:
        """Every setting has a default."""
        config = AppdeckConfig()
        assert config.roots is None
        assert config.opener is None
        assert config.preferred_localizations == ["en", "English", "Base"]
        assert config.icon_size == 128
        assert config.workers == 4
        assert config.scan_roots() is None

    def test_scan_roots_expands_home(self) -> None:
        """Configured roots have ~ expanded."""
        config = AppdeckConfig(roots=[Path("~/Apps"), Path("/opt/apps")])
        assert config.scan_roots() == (Path.home() / "Apps", Path("/opt/apps"))

    def test_unknown_keys_rejected(self) -> None:
        """Typos in the config are errors."""
        with pytest.raises(ValueError):
            AppdeckConfig(icon_sise=64)  # type: ignore[call-arg]

    @pytest.mark.parametrize("field", ["icon_size", "workers"])
    def test_bounds(self, field: str) -> None:
        """Numeric settings are range checked."""
        with pytest.raises(ValueError):
            AppdeckConfig(**{field: 0})


class TestLoadConfig:
    """Tests for load_config and load_config_or_default."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "config.toml")

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        """load_config_or_default tolerates a missing file."""
        assert load_config_or_default(tmp_path / "config.toml") == get_default_config()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Syntax errors raise ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("roots = [")
        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text("workers = 99\n")
        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config_or_default(path)

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values from the file override defaults."""
        path = tmp_path / "config.toml"
        path.write_text('roots = ["/opt/apps"]\nopener = "gio"\nicon_size = 64\n')
        config = load_config(path)
        assert config.roots == [Path("/opt/apps")]
        assert config.opener == "gio"
        assert config.icon_size == 64

    def test_unknown_key_is_rejected(self, tmp_path: Path) -> None:
        """Keys outside the schema are reported, not silently dropped."""
        path = tmp_path / "config.toml"
        path.write_text('cache_dir = "/tmp/x"\nworkers = 2\n')
        with pytest.raises(ConfigError, match="cache_dir"):
            load_config(path)

    def test_default_path(self) -> None:
        """Without a path the XDG config file is read."""
        path = get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("workers = 3\n")
        assert load_config().workers == 3


class TestSaveConfig:
    """Tests for save_config and config_to_dict."""

    def test_omits_unset_values(self) -> None:
        """TOML has no null, so None values are left out."""
        data = config_to_dict(AppdeckConfig())
        assert "roots" not in data
        assert "opener" not in data
        assert data["icon_size"] == 128

    def test_paths_are_strings(self) -> None:
        """Paths serialize as plain strings."""
        data = config_to_dict(AppdeckConfig(roots=[Path("/opt/apps")]))
        assert data["roots"] == ["/opt/apps"]

    def test_save_and_load(self, tmp_path: Path) -> None:
        """A saved config loads back identically."""
        config = AppdeckConfig(roots=[Path("/opt/apps")], opener="gio", workers=2)
        path = save_config(config, tmp_path / "nested" / "config.toml")

        with open(path, "rb") as f:
            assert tomllib.load(f)["opener"] == "gio"
        assert load_config(path) == config
        assert list(path.parent.glob("*.tmp")) == []
