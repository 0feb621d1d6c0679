"""
Tests for the diagnostic CLI
"""

import pytest
from click.testing import CliRunner

from call_diagnostic.cli.diagnostic_cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv('DATABASE_URL', f"sqlite:///{tmp_path / 'diagnostic.db'}")
    return CliRunner()


def test_init_db(runner):
    result = runner.invoke(cli, ['init-db'])
    assert result.exit_code == 0
    assert "Database initialized" in result.output


def test_list_empty(runner):
    result = runner.invoke(cli, ['list'])
    assert result.exit_code == 0
    assert "No diagnostics found" in result.output


def test_status_not_connected(runner):
    result = runner.invoke(cli, ['status', 'zoom'])
    assert result.exit_code == 0
    assert "Zoom Phone: not connected" in result.output


def test_analyze_without_connection(runner):
    result = runner.invoke(cli, ['analyze', '--provider', 'RingCentral', '--json'])
    assert result.exit_code == 1


def test_show_missing(runner):
    result = runner.invoke(cli, ['show', 'missing-id'])
    assert result.exit_code == 1


def test_analyze_rejects_unknown_provider(runner):
    result = runner.invoke(cli, ['analyze', '--provider', 'Nextiva'])
    assert result.exit_code == 2
