"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from dustpan.cli import main
from dustpan.core.platform import PlatformEnv


@pytest.fixture
def workspace(tmp_path, monkeypatch, isolate_settings, make_file):
    """Point HOME/XDG_CACHE_HOME and the temp_dir setting at tmp_path and fill them."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERNAME", "tester")
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))

    temp = tmp_path / "scratch"
    make_file(temp / "stale.txt", 10)
    make_file(temp / "session" / "inner.txt", 20)

    isolate_settings.parent.mkdir(parents=True)
    isolate_settings.write_text(json.dumps({"temp_dir": str(temp)}))

    cache = PlatformEnv.current().cache_root()
    make_file(cache / "some_app" / "data.bin", 2048)
    return temp, cache


@pytest.fixture
def runner():
    return CliRunner()


class TestClean:
    def test_clean_by_key(self, runner, workspace):
        temp, _ = workspace
        result = runner.invoke(main, ["clean", "temp", "--yes"])

        assert result.exit_code == 0, result.output
        assert "removed 1 file" in result.output
        assert not (temp / "stale.txt").exists()
        assert (temp / "session" / "inner.txt").exists()

    def test_clean_by_index_json(self, runner, workspace):
        result = runner.invoke(main, ["clean", "0", "1", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "cleaned"
        by_key = {r["operation"]: r for r in data["results"]}
        assert by_key["temp"]["files_removed"] == 1
        assert by_key["temp"]["freed_bytes"] == 10
        assert by_key["cache"]["freed_bytes"] == 2048
        assert by_key["cache"]["error"] is None

    def test_dry_run_deletes_nothing(self, runner, workspace):
        temp, cache = workspace
        result = runner.invoke(main, ["clean", "--all", "--dry-run"])

        assert "would remove" in result.output
        assert "no files were deleted" in result.output
        assert (temp / "stale.txt").exists()
        assert (cache / "some_app" / "data.bin").exists()

    def test_unknown_operation(self, runner, workspace):
        result = runner.invoke(main, ["clean", "downloads"])
        assert result.exit_code == 2
        assert "not a cleanup operation" in result.output

    def test_interactive_selection(self, runner, workspace):
        temp, cache = workspace
        result = runner.invoke(main, ["clean"], input="0\ny\n")

        assert result.exit_code == 0, result.output
        assert "[1] Application cache" in result.output
        assert not (temp / "stale.txt").exists()
        assert (cache / "some_app" / "data.bin").exists()

    def test_interactive_nothing_selected(self, runner, workspace):
        temp, _ = workspace
        result = runner.invoke(main, ["clean"], input="\n")

        assert result.exit_code == 0
        assert "Nothing selected." in result.output
        assert (temp / "stale.txt").exists()

    def test_confirmation_declined(self, runner, workspace):
        temp, _ = workspace
        result = runner.invoke(main, ["clean", "temp"], input="n\n")

        assert "Aborted." in result.output
        assert (temp / "stale.txt").exists()

    def test_failed_operation_sets_exit_code(self, runner, workspace, monkeypatch):
        temp, _ = workspace
        for name in ("HOME", "XDG_CACHE_HOME", "USERNAME"):
            monkeypatch.delenv(name, raising=False)

        result = runner.invoke(main, ["clean", "temp", "cache", "--yes"])

        assert result.exit_code == 1
        assert "is not set" in result.output
        assert not (temp / "stale.txt").exists()


class TestList:
    def test_json(self, runner, workspace):
        temp, _ = workspace
        result = runner.invoke(main, ["list", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [e["key"] for e in data] == ["temp", "cache", "browser"]
        assert data[0]["roots"] == [str(temp)]

    def test_text(self, runner, workspace):
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "Temporary files" in result.output
        assert "Browser cache" in result.output


class TestConfig:
    def test_set_then_show(self, runner, isolate_settings):
        result = runner.invoke(main, ["config", "set", "browsers", '["firefox"]'])
        assert result.exit_code == 0, result.output
        assert json.loads(isolate_settings.read_text()) == {"browsers": ["firefox"]}

        result = runner.invoke(main, ["config", "show"])
        assert '"firefox"' in result.output

    def test_plain_string_value(self, runner, isolate_settings):
        runner.invoke(main, ["config", "set", "temp_dir", "/var/tmp"])
        assert json.loads(isolate_settings.read_text()) == {"temp_dir": "/var/tmp"}

    def test_rejects_value_of_wrong_type(self, runner, isolate_settings):
        result = runner.invoke(main, ["config", "set", "temp_dir", "2024"])

        assert result.exit_code == 2
        assert "expected a non-empty path string" in result.output
        assert not isolate_settings.exists()

    def test_malformed_file_falls_back_to_defaults(self, runner, isolate_settings, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text(json.dumps({"temp_dir": 2024}))

        result = runner.invoke(main, ["list", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data[0]["roots"] == ["/tmp"]
