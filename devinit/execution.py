"""Blocking command execution utilities."""

import logging
import shlex
import subprocess
from typing import Sequence, Tuple

_logging = logging.getLogger(__name__)

# Returned when the executable itself cannot be started.
NOT_FOUND_RETURNCODE = 127


def _display(command: str | Sequence[str]) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(command)


def run_command(
    command: str | Sequence[str],
    timeout: float | None = None,
    env: dict | None = None,
    cwd: str | None = None,
    capture: bool = True,
) -> Tuple[str, int]:
    """Run a command to completion and return its output and return code.

    A string is run through the shell; a sequence is executed directly.
    Never raises for a missing executable or a timeout, those are reported
    as non-zero return codes.
    """
    _logging.debug(f"Running command: {_display(command)}")
    try:
        result = subprocess.run(
            command,
            shell=isinstance(command, str),
            capture_output=capture,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        _logging.error(f"Command timed out after {timeout} seconds: {_display(command)}")
        return f"Command timed out after {timeout} seconds", 1
    except OSError as e:
        _logging.debug(f"Command could not start: {type(e).__name__}: {e}")
        return f"Error: {e}", NOT_FOUND_RETURNCODE

    output = (result.stdout or "").strip()
    stderr = (result.stderr or "").strip()
    if stderr:
        _logging.debug(f"stderr: {stderr}")
    if result.returncode != 0 and not output:
        output = stderr
    return output, result.returncode


def command_succeeds(command: str | Sequence[str], **kwargs) -> bool:
    """Return True when ``command`` exits 0."""
    _, returncode = run_command(command, **kwargs)
    return returncode == 0
