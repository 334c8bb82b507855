"""Shell execution utilities.

Provides detached process spawning and command lookup.
"""

import shutil
import subprocess
import sys


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def default_opener() -> str:
    """Return the platform command that opens a path with its handler.

    Returns:
        "open" on macOS, "xdg-open" everywhere else.
    """
    if sys.platform == "darwin":
        return "open"
    return "xdg-open"


def spawn_detached(args: list[str]) -> int:
    """Start a command as an independent process and return immediately.

    The child gets its own session and no inherited stdio, so it outlives
    the caller and is never waited on.

    Args:
        args: Command and arguments to execute.

    Returns:
        PID of the started process.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If the process cannot be started.
    """
    process = subprocess.Popen(  # nosec: B603
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
        close_fds=True,
    )
    return process.pid
