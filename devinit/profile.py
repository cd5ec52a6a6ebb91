"""Shell profile writes: zsh plugin list, PowerShell profile block, login shell.

Every write copies the previous file aside first. Nothing is rolled back
automatically; the backup exists for manual recovery.
"""

import logging
import os
import re
import shutil
from pathlib import Path

from devinit.execution import run_command
from devinit.log import log_success

_logging = logging.getLogger(__name__)

BLOCK_START = "# >>> devinit >>>"
BLOCK_END = "# <<< devinit <<<"

PLUGINS_PATTERN = re.compile(r"^plugins=\([^)]*\)", re.MULTILINE)


def backup_file(path: Path, suffix: str = ".backup") -> Path | None:
    """Copy ``path`` to ``path + suffix``, overwriting an older backup."""
    if not path.exists():
        return None
    backup = path.with_name(path.name + suffix)
    shutil.copy2(path, backup)
    _logging.debug(f"Backed up {path} to {backup}")
    return backup


def free_backup_path(path: Path, suffix: str = ".bak") -> Path:
    """Return ``path.bak``, or ``path.bak.N`` when earlier backups exist."""
    candidate = path.with_name(path.name + suffix)
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}{suffix}.{counter}")
        counter += 1
    return candidate


def move_aside(path: Path, suffix: str = ".bak") -> Path | None:
    """Rename an existing file or directory out of the way."""
    if not path.exists():
        return None
    destination = free_backup_path(path, suffix)
    shutil.move(str(path), str(destination))
    _logging.info(f"Backed up {path} to {destination}")
    return destination


def render_plugins_line(plugins: list[str]) -> str:
    return f"plugins=({' '.join(plugins)})"


def zsh_plugins_configured(rc_path: Path, plugins: list[str]) -> bool:
    try:
        content = rc_path.read_text(encoding="utf-8")
    except OSError:
        return False
    match = PLUGINS_PATTERN.search(content)
    return match is not None and match.group(0) == render_plugins_line(plugins)


def configure_zsh_plugins(rc_path: Path, plugins: list[str]) -> Path | None:
    """Set the Oh My Zsh ``plugins=(...)`` line, appending it when absent.

    Raises:
        FileNotFoundError: if the rc file does not exist yet
    """
    if not rc_path.exists():
        raise FileNotFoundError(f"{rc_path} not found")

    content = rc_path.read_text(encoding="utf-8")
    line = render_plugins_line(plugins)
    backup = backup_file(rc_path)

    if PLUGINS_PATTERN.search(content):
        content = PLUGINS_PATTERN.sub(line, content, count=1)
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        content += f"{line}\n"

    rc_path.write_text(content, encoding="utf-8")
    log_success(_logging, "Oh My Zsh plugins configured")
    return backup


def render_block(lines: list[str]) -> str:
    return "\n".join([BLOCK_START, *lines, BLOCK_END])


def managed_block_present(path: Path, lines: list[str]) -> bool:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return False
    return render_block(lines) in content


def write_managed_block(path: Path, lines: list[str]) -> Path | None:
    """Insert or replace the devinit-managed block in a profile file."""
    block = render_block(lines)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = path.read_text(encoding="utf-8") if path.exists() else ""
    backup = backup_file(path)

    start = content.find(BLOCK_START)
    end = content.find(BLOCK_END, start) if start != -1 else -1
    if start != -1 and end != -1:
        content = content[:start] + block + content[end + len(BLOCK_END):]
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        content += block + "\n"

    path.write_text(content, encoding="utf-8")
    return backup


def current_login_shell(user: str | None = None) -> str | None:
    """Login shell from the password database (Unix only)."""
    import pwd

    user = user or os.environ.get("USER")
    try:
        if user:
            return pwd.getpwnam(user).pw_shell
        return pwd.getpwuid(os.getuid()).pw_shell
    except KeyError:
        return None


def ensure_default_shell(shell: str = "zsh", runner=run_command) -> bool:
    """Make ``shell`` the login shell with chsh. Returns True when it is set.

    A no-op when the shell is not installed or already the default.
    """
    shell_path = shutil.which(shell)
    if not shell_path:
        _logging.debug(f"{shell} not installed, leaving login shell unchanged")
        return False

    if current_login_shell() == shell_path:
        _logging.info(f"{shell} is already your default shell")
        return True

    _logging.info(f"Setting {shell} as default shell (may require password)...")
    _, returncode = runner(["chsh", "-s", shell_path], capture=False)
    if returncode == 0:
        log_success(_logging, f"Default shell changed to {shell}")
        _logging.warning("Restart your terminal for the shell change to take effect")
        return True

    _logging.warning(
        f"Failed to change shell. You can manually run: chsh -s {shell_path}"
    )
    return False


__all__ = [
    "backup_file",
    "free_backup_path",
    "move_aside",
    "render_plugins_line",
    "zsh_plugins_configured",
    "configure_zsh_plugins",
    "render_block",
    "managed_block_present",
    "write_managed_block",
    "current_login_shell",
    "ensure_default_shell",
]
