"""File-based managers: git checkouts, fonts and shell profiles."""

import fnmatch
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Tuple

from devinit import profile
from devinit.errors import ManagerError

from ..models import InstallTarget, Manager, Platform
from .base import PackageManager

_logging = logging.getLogger(__name__)

FONT_REGISTRY_KEY = r"HKCU\Software\Microsoft\Windows NT\CurrentVersion\Fonts"


class GitCloneManager(PackageManager):
    """Tools distributed as a git repository cloned into a fixed directory.

    Metadata:
        url: repository to clone
        dest: destination directory (``~`` and ``$VAR`` expanded)
        markers: paths relative to dest that must exist for the tool to
            count as installed (default: dest itself)
        requires: executable that must be on PATH before cloning
        backup: paths moved to ``.bak`` before cloning
        detach: drop upstream history and re-initialise with an
            ``upstream`` remote, for starter templates
    """

    manager = Manager.GIT_CLONE

    def destination(self, target: InstallTarget) -> Path:
        dest = target.metadata.get("dest")
        if not dest:
            raise ManagerError(f"{target.name} has no clone destination")
        return Path(self.environment.expand(dest))

    def check_present(self, target: InstallTarget) -> bool:
        try:
            dest = self.destination(target)
        except ManagerError:
            return False
        if not dest.is_dir():
            return False
        markers = target.metadata.get("markers", [])
        return all((dest / marker).exists() for marker in markers)

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        url = target.metadata.get("url")
        if not url:
            raise ManagerError(f"{target.name} has no repository url")

        required = target.metadata.get("requires")
        if required and not self.which(required):
            return f"{required} is not installed", 1

        dest = self.destination(target)
        for entry in target.metadata.get("backup", []):
            profile.move_aside(Path(self.environment.expand(entry)))

        if dest.exists() and not any(dest.iterdir()):
            dest.rmdir()

        dest.parent.mkdir(parents=True, exist_ok=True)
        output, returncode = self.run(["git", "clone", url, str(dest)])
        if returncode != 0:
            return output, returncode

        if target.metadata.get("detach"):
            self._detach(dest, url)
        return output, 0

    def _detach(self, dest: Path, url: str) -> None:
        shutil.rmtree(dest / ".git", ignore_errors=True)
        for command in (
            ["git", "-C", str(dest), "init"],
            ["git", "-C", str(dest), "remote", "add", "upstream", url],
            ["git", "-C", str(dest), "add", "."],
            ["git", "-C", str(dest), "commit", "-m", "Initial setup from upstream starter"],
        ):
            output, returncode = self.run(command)
            if returncode != 0:
                _logging.debug(f"{' '.join(command)} failed: {output}")


class FontManager(PackageManager):
    """Font archives downloaded with curl and unpacked into the user font dir.

    Metadata:
        url: zip archive to download
        match: glob for the font files to extract and to test presence
    """

    manager = Manager.FONT

    def __init__(self, *args, platform: Platform, font_dir: Path, **kwargs):
        super().__init__(*args, **kwargs)
        self.platform = platform
        self.font_dir = font_dir

    def _pattern(self, target: InstallTarget) -> str:
        return target.metadata.get("match", f"{target.name}*.ttf")

    def check_present(self, target: InstallTarget) -> bool:
        if not self.font_dir.is_dir():
            return False
        return any(self.font_dir.glob(self._pattern(target)))

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        url = target.metadata.get("url")
        if not url:
            raise ManagerError(f"{target.name} has no download url")

        with tempfile.TemporaryDirectory() as workdir:
            archive = Path(workdir) / f"{target.name}.zip"
            output, returncode = self.run(["curl", "-fsSL", "-o", str(archive), url])
            if returncode != 0:
                return output, returncode
            try:
                installed = self.extract(archive, self._pattern(target))
            except zipfile.BadZipFile as e:
                return f"Invalid font archive: {e}", 1

        if not installed:
            return f"No files matching {self._pattern(target)} in archive", 1

        return self.register(installed)

    def extract(self, archive: Path, pattern: str) -> list[Path]:
        self.font_dir.mkdir(parents=True, exist_ok=True)
        installed = []
        with zipfile.ZipFile(archive) as bundle:
            for member in bundle.namelist():
                filename = Path(member).name
                if not filename or not fnmatch.fnmatch(filename, pattern):
                    continue
                destination = self.font_dir / filename
                with bundle.open(member) as src, open(destination, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                installed.append(destination)
        return installed

    def register(self, fonts: list[Path]) -> Tuple[str, int]:
        if self.platform == Platform.WINDOWS:
            for font in fonts:
                output, returncode = self.run(
                    [
                        "reg", "add", FONT_REGISTRY_KEY,
                        "/v", f"{font.stem} (TrueType)",
                        "/t", "REG_SZ",
                        "/d", str(font),
                        "/f",
                    ]
                )
                if returncode != 0:
                    return output, returncode
            return "", 0

        if self.platform in (Platform.LINUX, Platform.WSL) and self.which("fc-cache"):
            return self.run(["fc-cache", "-f", str(self.font_dir)])
        return "", 0


class ProfileManager(PackageManager):
    """Shell configuration files.

    Metadata:
        kind: ``zsh-plugins`` (sets the Oh My Zsh plugin list) or ``block``
            (keeps a managed block of lines in the file)
        path: file to edit
        plugins / lines: the desired content
    """

    manager = Manager.PROFILE

    def _path(self, target: InstallTarget) -> Path:
        return Path(self.environment.expand(target.metadata.get("path", "~/.zshrc")))

    def check_present(self, target: InstallTarget) -> bool:
        kind = target.metadata.get("kind", "zsh-plugins")
        path = self._path(target)
        if kind == "zsh-plugins":
            return profile.zsh_plugins_configured(path, target.metadata.get("plugins", []))
        return profile.managed_block_present(path, target.metadata.get("lines", []))

    def install(self, target: InstallTarget) -> Tuple[str, int]:
        kind = target.metadata.get("kind", "zsh-plugins")
        path = self._path(target)
        if kind == "zsh-plugins":
            profile.configure_zsh_plugins(path, target.metadata.get("plugins", []))
        elif kind == "block":
            profile.write_managed_block(path, target.metadata.get("lines", []))
        else:
            raise ManagerError(f"Unknown profile kind: {kind}")
        return f"Updated {path}", 0


__all__ = ["GitCloneManager", "FontManager", "ProfileManager"]
