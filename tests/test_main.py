"""Momentary CLI — tests for the one-shot entry point.

Tests cover:
    - Value result printed as JSON, exit 0
    - Error result printed as JSON, exit 1
    - Invalid options reported with exit 2
"""

import json

import pytest

from momentary import main as cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def test_divide_with_precision(capsys):
    assert cli.main(["divide", "22", "7", "--precision", "2"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["value"] == 3.14
    assert out["operation"] == "divide"


def test_division_by_zero_exit_code(capsys):
    assert cli.main(["divide", "10", "0"]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["error"] == "Division by zero"


def test_unknown_operation_exit_code(capsys):
    assert cli.main(["modulo", "10", "3"]) == 1
    assert json.loads(capsys.readouterr().out)["error"] == "Unknown operation: modulo"


def test_invalid_lifetime(capsys):
    assert cli.main(["add", "1", "2", "--max-lifetime-ms", "0"]) == 2
    out = json.loads(capsys.readouterr().out)
    assert out["error"]["code"] == "INVALID_OPTIONS"
