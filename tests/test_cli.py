"""Tests for CLI interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from drdisk.cli import app, build_session
from drdisk.errors import CapacityLookupError, InvalidScanRootError

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real config file out of the tests."""
    monkeypatch.setenv("DRDISK_CONFIG", str(tmp_path / "no-config.json"))


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "drdisk version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "drdisk version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--total-disk-color" in result.stdout
        assert "--once" in result.stdout


class TestOnce:
    def test_scans_and_exits(self, sample_tree):
        result = runner.invoke(app, [str(sample_tree), "--once"])
        assert result.exit_code == 0
        assert "Summary for:" in result.stdout
        assert "project/" in result.stdout
        assert "big.bin" in result.stdout

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing"), "--once"])
        assert result.exit_code == 1
        assert "Provided path is not a directory" in result.stdout

    def test_file_path(self, tmp_path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        result = runner.invoke(app, [str(f), "--once"])
        assert result.exit_code == 1
        assert "Provided path is not a directory" in result.stdout

    def test_total_disk_color(self, sample_tree):
        with patch("drdisk.cli.get_disk_capacity", return_value=10**12) as capacity:
            result = runner.invoke(app, [str(sample_tree), "--once", "--total-disk-color"])
        assert result.exit_code == 0
        capacity.assert_called_once_with(sample_tree.resolve())
        assert "0.00" in result.stdout

    def test_capacity_lookup_failure(self, sample_tree):
        with patch("drdisk.cli.get_disk_capacity", side_effect=CapacityLookupError(sample_tree)):
            result = runner.invoke(app, [str(sample_tree), "--once", "--total-disk-color"])
        assert result.exit_code == 1
        assert "Could not determine disk space" in result.stdout

    def test_config_enables_total_disk_color(self, sample_tree, tmp_path):
        config = tmp_path / "config.json"
        config.write_text('{"total_disk_color": true}')
        with patch("drdisk.cli.get_disk_capacity", return_value=10**12) as capacity:
            result = runner.invoke(app, [str(sample_tree), "--once", "--config", str(config)])
        assert result.exit_code == 0
        capacity.assert_called_once()


class TestInteractive:
    def test_runs_shell(self, sample_tree):
        with patch("drdisk.cli.run_shell") as run_shell:
            result = runner.invoke(app, [str(sample_tree)])
        assert result.exit_code == 0
        session = run_shell.call_args.args[0]
        assert session.path == sample_tree.resolve()
        assert session.capacity is None


class TestBuildSession:
    def test_canonicalizes_path(self, sample_tree, monkeypatch):
        monkeypatch.chdir(sample_tree)
        session = build_session(Path("project/.."), total_disk_color=False)
        assert session.path == sample_tree.resolve()

    def test_missing_path(self, tmp_path):
        with pytest.raises(InvalidScanRootError):
            build_session(tmp_path / "missing", total_disk_color=False)
