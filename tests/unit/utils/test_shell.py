"""Unit tests for shell utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from appdeck.utils.shell import command_exists, default_opener, spawn_detached


class TestCommandExists:
    """Tests for command_exists function."""

    def test_existing_command(self) -> None:
        """Returns True for commands found in PATH."""
        with patch("appdeck.utils.shell.shutil.which", return_value="/usr/bin/open"):
            assert command_exists("open") is True

    def test_missing_command(self) -> None:
        """Returns False for commands not found in PATH."""
        with patch("appdeck.utils.shell.shutil.which", return_value=None):
            assert command_exists("nonexistent") is False


class TestDefaultOpener:
    """Tests for default_opener function."""

    def test_macos(self) -> None:
        """macOS uses open."""
        with patch("appdeck.utils.shell.sys.platform", "darwin"):
            assert default_opener() == "open"

    def test_linux(self) -> None:
        """Other platforms use xdg-open."""
        with patch("appdeck.utils.shell.sys.platform", "linux"):
            assert default_opener() == "xdg-open"


class TestSpawnDetached:
    """Tests for spawn_detached function."""

    def test_starts_new_session(self) -> None:
        """The child is detached from the caller."""
        process = MagicMock(pid=99)
        with patch("appdeck.utils.shell.subprocess.Popen", return_value=process) as mock_popen:
            assert spawn_detached(["open", "/Applications/Calc.app"]) == 99

        args, kwargs = mock_popen.call_args
        assert args == (["open", "/Applications/Calc.app"],)
        assert kwargs["start_new_session"] is True
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["stdout"] is subprocess.DEVNULL

    def test_missing_executable(self) -> None:
        """Missing executables raise FileNotFoundError."""
        with (
            patch(
                "appdeck.utils.shell.subprocess.Popen",
                side_effect=FileNotFoundError("nope"),
            ),
            pytest.raises(FileNotFoundError),
        ):
            spawn_detached(["nope"])
