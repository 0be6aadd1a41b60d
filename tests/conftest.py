"""Shared test fixtures."""

from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from dustpan.core.platform import PlatformEnv
from dustpan.settings import Settings


@pytest.fixture
def make_file():
    """Return a helper that creates a file (and its parents) of a given size."""

    def _make(path: Path, size: int) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * size)
        return path

    return _make


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Redirect settings to a temp directory."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "dustpan" / "settings.json"


@pytest.fixture
def linux_env(tmp_path):
    """A Linux environment whose home, cache and temp dirs live under tmp_path."""
    home = tmp_path / "home"
    (home / ".cache").mkdir(parents=True)
    temp = tmp_path / "scratch"
    temp.mkdir()
    return PlatformEnv(system="linux", environ={"HOME": str(home)}, temp_dir=temp)


@pytest.fixture
def locked_names(monkeypatch):
    """Make os.unlink fail with EACCES for any file whose name is added to the returned set."""
    locked: set[str] = set()
    real_unlink = os.unlink

    def fake_unlink(path, *args, **kwargs):
        name = os.path.basename(os.fsdecode(path))
        if name in locked:
            raise PermissionError(errno.EACCES, "Permission denied", os.fsdecode(path))
        return real_unlink(path, *args, **kwargs)

    monkeypatch.setattr(os, "unlink", fake_unlink)
    return locked


def _scandir_target(path) -> str:
    # shutil.rmtree lists directories through file descriptors
    if isinstance(path, int):
        return os.readlink(f"/proc/self/fd/{path}")
    return os.fsdecode(path)


@pytest.fixture
def deny_listing(monkeypatch):
    """Make os.scandir raise for directories whose name is added to the returned dict.

    Covers both path and file-descriptor calls, so it also reaches
    ``shutil.rmtree`` on Linux.
    """
    failures: dict[str, OSError] = {}
    real_scandir = os.scandir

    def fake_scandir(path="."):
        target = _scandir_target(path)
        err = failures.get(os.path.basename(target))
        if err is not None:
            raise type(err)(err.errno, err.strerror, target)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    return failures
