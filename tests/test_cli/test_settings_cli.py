"""Tests for `ntrcheck settings`."""

import json

import pytest
from typer.testing import CliRunner

from ntrcheck.cli.main import app
from ntrcheck.config import config

runner = CliRunner()


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(config.settings_store, "path", str(path))
    return path


def test_set_show_clear(settings_path):
    result = runner.invoke(app, ["settings", "set-key", "sk-abcdefghijkl"])
    assert result.exit_code == 0
    assert "API Key saved successfully!" in result.output
    assert json.loads(settings_path.read_text()) == {"openai_api_key": "sk-abcdefghijkl"}

    result = runner.invoke(app, ["settings", "show"])
    assert "sk-...ijkl" in result.output
    assert "sk-abcdefghijkl" not in result.output

    result = runner.invoke(app, ["settings", "clear"])
    assert "API key removed." in result.output
    assert "not set" in runner.invoke(app, ["settings", "show"]).output


def test_blank_key_rejected(settings_path):
    result = runner.invoke(app, ["settings", "set-key", "  "])
    assert result.exit_code == 1
    assert "Please enter a key." in result.output
    assert not settings_path.exists()
