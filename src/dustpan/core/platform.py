"""Platform identity and environment lookups for cleanup locations."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dustpan.core.errors import MissingEnvironmentError, UnsupportedPlatformError
from dustpan.settings import Settings


def current_system() -> str:
    """Return 'linux', 'darwin', 'windows', or the raw ``sys.platform``."""
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return sys.platform


@dataclass(frozen=True)
class PlatformEnv:
    """Snapshot of everything needed to locate cleanup targets.

    Resolved once per run and passed down explicitly, so tests can build
    one for any platform without touching the real environment.
    """

    system: str
    environ: Mapping[str, str] = field(default_factory=dict)
    temp_dir: Path | None = None
    browsers: tuple[str, ...] | None = None

    @classmethod
    def current(cls, settings: Settings | None = None) -> PlatformEnv:
        """Build the environment for this process, applying user settings."""
        settings = settings or Settings.instance()
        return cls(
            system=current_system(),
            environ=dict(os.environ),
            temp_dir=settings.temp_dir(),
            browsers=settings.browsers(),
        )

    def require(self, name: str) -> str:
        """Return an environment value or raise MissingEnvironmentError."""
        value = self.environ.get(name)
        if not value:
            raise MissingEnvironmentError(f"Environment variable {name} is not set")
        return value

    def home(self) -> Path:
        return Path(self.require("HOME"))

    def username(self) -> str:
        return self.require("USERNAME")

    def _local_appdata(self) -> Path:
        return Path(f"C:\\Users\\{self.username()}\\AppData\\Local")

    def temp_root(self) -> Path:
        """The shared system scratch directory."""
        if self.temp_dir is not None:
            return self.temp_dir
        if self.system == "windows":
            temp = self.environ.get("TEMP")
            return Path(temp) if temp else self._local_appdata() / "Temp"
        return Path("/tmp")

    def cache_root(self) -> Path:
        """The current user's application cache directory.

        Raises:
            UnsupportedPlatformError: On an operating system without a
                known cache convention.
            MissingEnvironmentError: If HOME (or USERNAME on Windows) is unset.
        """
        match self.system:
            case "linux":
                xdg = self.environ.get("XDG_CACHE_HOME")
                return Path(xdg) if xdg else self.home() / ".cache"
            case "darwin":
                return self.home() / "Library" / "Caches"
            case "windows":
                return self._local_appdata()
            case _:
                raise UnsupportedPlatformError(f"Unsupported operating system: {self.system}")
