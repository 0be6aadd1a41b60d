"""The fixed set of cleanup operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from dustpan.core.errors import UnsupportedPlatformError
from dustpan.core.executor import TOP_LEVEL_FILES, WHOLE_TREE, CleanPolicy, clean
from dustpan.core.platform import PlatformEnv
from dustpan.models.dir_stats import DirStats

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Browser:
    """A browser and where it keeps its cache, relative to the cache root."""

    key: str
    name: str
    cache_dirs: dict[str, str]

    def cache_dir(self, base: Path, system: str) -> Path | None:
        rel = self.cache_dirs.get(system)
        if rel is None:
            return None
        return base.joinpath(*rel.split("/"))


BROWSERS: tuple[Browser, ...] = (
    Browser(
        "chrome",
        "Google Chrome",
        {
            "linux": "google-chrome",
            "darwin": "Google/Chrome",
            "windows": "Google/Chrome/User Data/Default/Cache",
        },
    ),
    Browser(
        "firefox",
        "Firefox",
        {
            "linux": "mozilla/firefox",
            "darwin": "Firefox/Profiles",
            "windows": "Mozilla/Firefox/Profiles",
        },
    ),
    Browser("safari", "Safari", {"darwin": "com.apple.Safari"}),
    Browser("chromium", "Chromium", {"linux": "chromium"}),
    Browser("brave", "Brave", {"linux": "BraveSoftware/Brave-Browser"}),
    Browser("edge", "Microsoft Edge", {"linux": "microsoft-edge"}),
)


def browser_cache_roots(env: PlatformEnv) -> tuple[Path, ...]:
    """Cache directories of every known browser on this platform.

    Browsers without a location on the platform are left out.  If none
    remain the whole lookup fails.
    """
    browsers = [b for b in BROWSERS if env.browsers is None or b.key in env.browsers]
    if not any(env.system in b.cache_dirs for b in browsers):
        raise UnsupportedPlatformError(f"No known browser cache location on {env.system}")

    base = env.cache_root()
    roots = []
    for browser in browsers:
        path = browser.cache_dir(base, env.system)
        if path is None:
            log.debug("%s has no cache location on %s", browser.name, env.system)
            continue
        roots.append(path)
    return tuple(roots)


class Operation(Enum):
    """A cleanup task the user can select."""

    DELETE_TEMP_FILES = (0, "temp", "Temporary files")
    DELETE_APP_CACHE = (1, "cache", "Application cache")
    CLEAR_BROWSER_CACHE = (2, "browser", "Browser cache")

    def __init__(self, index: int, key: str, label: str) -> None:
        self.index = index
        self.key = key
        self.label = label

    @classmethod
    def from_selection(cls, index: int) -> Operation:
        """Map a menu selection index to its operation.

        Raises:
            ValueError: If no operation has this index.
        """
        for operation in cls:
            if operation.index == index:
                return operation
        raise ValueError(f"No cleanup operation with index {index!r}")

    @classmethod
    def from_key(cls, key: str) -> Operation:
        """Map a short key such as 'temp' to its operation."""
        for operation in cls:
            if operation.key == key:
                return operation
        raise ValueError(f"No cleanup operation named {key!r}")

    @property
    def policy(self) -> CleanPolicy:
        match self:
            case Operation.DELETE_TEMP_FILES:
                return TOP_LEVEL_FILES
            case _:
                return WHOLE_TREE

    def resolve_roots(self, env: PlatformEnv) -> tuple[Path, ...]:
        """Directories this operation empties, in processing order."""
        match self:
            case Operation.DELETE_TEMP_FILES:
                return (env.temp_root(),)
            case Operation.DELETE_APP_CACHE:
                return (env.cache_root(),)
            case Operation.CLEAR_BROWSER_CACHE:
                return browser_cache_roots(env)

    def execute(
        self,
        env: PlatformEnv,
        *,
        dry_run: bool = False,
        roots: Sequence[Path] | None = None,
    ) -> DirStats:
        """Run the cleanup and return what was reclaimed.

        Args:
            env: Platform environment used to resolve the roots.
            dry_run: If True, measure what would be removed instead.
            roots: Already resolved roots, to avoid resolving twice.

        Raises:
            CleanupError: If the roots cannot be resolved.
            OSError: On a filesystem failure other than a skipped
                permission error.
        """
        if roots is None:
            roots = self.resolve_roots(env)
        log.info("%s: cleaning %s", self.label, ", ".join(str(r) for r in roots))
        return clean(roots, self.policy, dry_run=dry_run)
