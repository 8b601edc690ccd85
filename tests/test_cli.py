"""Tests for CLI commands."""

from typer.testing import CliRunner

from fleetwatch import __version__
from fleetwatch.cli.app import app

runner = CliRunner()


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert f"fleetwatch version {__version__}" in result.stdout


def test_help_command():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "Fleetwatch" in result.stdout
    assert "run" in result.stdout
    assert "balance" in result.stdout
    assert "missing" in result.stdout


def test_run_help():
    result = runner.invoke(app, ["run", "--help"])

    assert result.exit_code == 0
    assert "--config" in result.stdout
