"""Removal of root directory contents with per-entry permission tolerance."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from dustpan.core.stats import is_countable, measure
from dustpan.models.dir_stats import DirStats

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleanPolicy:
    """How the contents of a root directory are removed.

    With ``recursive=False`` only top-level files are removed and
    subdirectories are left alone.  With ``recursive=True`` subdirectories
    are removed wholesale as well.
    """

    recursive: bool = True


TOP_LEVEL_FILES = CleanPolicy(recursive=False)
WHOLE_TREE = CleanPolicy(recursive=True)


def clean(
    root_paths: Iterable[Path | str],
    policy: CleanPolicy = WHOLE_TREE,
    *,
    dry_run: bool = False,
) -> DirStats:
    """Remove the contents of each root and return what was reclaimed.

    Roots are processed in order.  A root that does not exist contributes
    nothing.  The roots themselves are never removed.

    Args:
        root_paths: Directories whose contents should be removed.
        policy: Whether subdirectories are removed too.
        dry_run: If True, report what would be removed without deleting.

    Returns:
        Combined stats for every removed file.  Removed directories add
        nothing of their own.

    Raises:
        OSError: Any filesystem failure other than a permission error on an
            individual entry.  The operation stops at the first one.
    """
    total = DirStats()
    for root in root_paths:
        root = Path(root)
        if not root.is_dir():
            log.info("Directory does not exist, skipping: %s", root)
            continue
        reclaimed = clean_root(root, policy, dry_run=dry_run)
        log.info(
            "%s %d files (%d bytes) in %s",
            "Would remove" if dry_run else "Removed",
            reclaimed.file_count,
            reclaimed.total_size,
            root,
        )
        total += reclaimed
    return total


def clean_root(root: Path, policy: CleanPolicy = WHOLE_TREE, *, dry_run: bool = False) -> DirStats:
    """Remove the immediate contents of a single existing directory."""
    with os.scandir(root) as it:
        entries = list(it)

    reclaimed = DirStats()
    for entry in entries:
        reclaimed += _clean_entry(entry, policy, dry_run)
    return reclaimed


def _clean_entry(entry: os.DirEntry, policy: CleanPolicy, dry_run: bool) -> DirStats:
    path = Path(entry.path)
    try:
        if entry.is_dir(follow_symlinks=False):
            if not policy.recursive:
                return DirStats()
            return _remove_tree(path, dry_run)

        st = entry.stat(follow_symlinks=False)
        if not is_countable(st.st_mode):
            log.debug("Skipping special file: %s", path)
            return DirStats()
        if not dry_run:
            path.unlink()
        return DirStats.single_file(st.st_size)
    except PermissionError:
        log.debug("Permission denied, skipping: %s", path)
    except FileNotFoundError:
        log.debug("Vanished before removal: %s", path)
    return DirStats()


def _remove_tree(path: Path, dry_run: bool) -> DirStats:
    """Measure a directory, remove it, and return what was actually freed.

    Permission errors inside the tree leave the affected entries (and their
    parent directories) in place; only the part that is really gone counts.
    """
    before = measure(path)
    if dry_run:
        return before

    denied: list[str] = []

    def _on_error(func: Callable, failed_path: str, exc: BaseException) -> None:
        if isinstance(exc, PermissionError):
            log.debug("Permission denied, skipping: %s", failed_path)
            denied.append(failed_path)
            return
        if isinstance(exc, FileNotFoundError):
            return
        # Parents of skipped entries cannot be emptied
        if denied and isinstance(exc, OSError) and exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
            return
        raise exc

    _rmtree(path, _on_error)

    if not denied or not os.path.lexists(path):
        return before
    try:
        remaining = measure(path)
    except PermissionError:
        log.debug("Cannot re-measure partially removed directory: %s", path)
        return DirStats()
    return before - remaining


def _rmtree(path: Path, on_error: Callable[[Callable, str, BaseException], None]) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=on_error)
    else:
        shutil.rmtree(path, onerror=lambda func, p, exc_info: on_error(func, p, exc_info[1]))
