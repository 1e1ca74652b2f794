"""Tests for `meshsync watch`."""

from __future__ import annotations

import json

import pytest

typer = pytest.importorskip("typer")

from typer.testing import CliRunner  # noqa: E402

from meshsync.cli import create_app  # noqa: E402
from meshsync.cli.watch_cmd import run_watch  # noqa: E402
from meshsync.settings import ViewerSettings  # noqa: E402
from tests.builders import dual_stack  # noqa: E402

runner_cli = CliRunner()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def snapshot_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "netjson.json"
    path.write_text(json.dumps(dual_stack()))
    return path


class TestWatchCommand:
    def test_single_tick(self, app, snapshot_file):
        result = runner_cli.invoke(app, ["watch", str(snapshot_file), "--count", "1", "--interval", "10"])
        assert result.exit_code == 0, result.output
        assert "synced 192.168.0.1 nodes +3 ~0 -0, edges +2 ~0 -0" in result.output

    def test_repeated_ticks_report_no_changes(self, app, snapshot_file):
        result = runner_cli.invoke(app, ["watch", str(snapshot_file), "--count", "2", "--interval", "10"])
        assert result.exit_code == 0, result.output
        assert "nodes +0 ~0 -0, edges +0 ~0 -0" in result.output

    def test_quiet_hides_unchanged_passes(self, app, snapshot_file):
        result = runner_cli.invoke(app, ["watch", str(snapshot_file), "--count", "2", "--interval", "10", "--quiet"])
        assert result.exit_code == 0, result.output
        assert result.output.count("synced") == 1

    def test_ipv6(self, app, snapshot_file):
        result = runner_cli.invoke(app, ["watch", str(snapshot_file), "--count", "1", "--ipv6"])
        assert "synced fd00::1" in result.output

    def test_missing_file_reports_fetch_error(self, app, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner_cli.invoke(app, ["watch", str(tmp_path / "absent.json"), "--count", "1"])
        assert result.exit_code == 0, result.output
        assert "fetch failed: Reading" in result.output

    def test_url_from_pyproject(self, app, snapshot_file, tmp_path):
        (tmp_path / "pyproject.toml").write_text(f'[tool.meshsync]\nurl = "{snapshot_file.as_posix()}"\n')
        result = runner_cli.invoke(app, ["watch", "--count", "1"])
        assert result.exit_code == 0, result.output
        assert "synced 192.168.0.1" in result.output

    def test_no_source(self, app, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner_cli.invoke(app, ["watch"])
        assert result.exit_code == 1
        assert "No snapshot source given" in result.output

    def test_invalid_interval(self, app, snapshot_file):
        result = runner_cli.invoke(app, ["watch", str(snapshot_file), "--interval", "0"])
        assert result.exit_code == 1
        assert "poll_interval_ms must be positive" in result.output


class TestRunWatch:
    @pytest.mark.asyncio
    async def test_returns_tick_count(self, snapshot_file, capsys):
        ticks = await run_watch(str(snapshot_file), ViewerSettings(poll_interval_ms=5), count=3)
        assert ticks == 3
        assert capsys.readouterr().out.count("synced") == 3
