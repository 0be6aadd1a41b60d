"""Read-only directory size and file-count aggregation."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from dustpan.models.dir_stats import DirStats

log = logging.getLogger(__name__)


def is_countable(mode: int) -> bool:
    """Whether an entry with this ``st_mode`` counts as a file.

    Regular files and symlinks count; sockets, FIFOs and devices do not.
    """
    return stat.S_ISREG(mode) or stat.S_ISLNK(mode)


def measure(path: Path | str) -> DirStats:
    """Calculate total size and file count of a directory tree.

    Never deletes anything.  Symlinks are counted by their own size and
    never followed, so link cycles cannot recurse.  Entries below *path*
    that raise ``PermissionError`` (or vanish mid-walk) are skipped; any
    other ``OSError`` propagates, as does failure to list *path* itself.
    """
    total = DirStats()
    with os.scandir(path) as it:
        for entry in it:
            total += _measure_dir_entry(entry)
    return total


def _measure_dir_entry(entry: os.DirEntry) -> DirStats:
    try:
        if entry.is_dir(follow_symlinks=False):
            return measure(entry.path)
        st = entry.stat(follow_symlinks=False)
    except PermissionError:
        log.debug("Permission denied, skipping: %s", entry.path)
        return DirStats()
    except FileNotFoundError:
        log.debug("Vanished during scan: %s", entry.path)
        return DirStats()

    if is_countable(st.st_mode):
        return DirStats.single_file(st.st_size)
    return DirStats()
