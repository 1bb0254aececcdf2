from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from rich.console import Console
from typer.testing import CliRunner

import qmims
from qmims.cli import helpers, ui
from qmims.cli.commands import config_cmd, edit, generate, templates


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def wide_consoles(monkeypatch):
    """Use wide consoles so long paths do not wrap assertions across lines."""
    out = Console(width=200, color_system=None)
    err = Console(width=200, color_system=None, stderr=True)
    monkeypatch.setattr(ui, "console", out)
    monkeypatch.setattr(ui, "err_console", err)
    for module in (config_cmd, templates, qmims):
        monkeypatch.setattr(module, "console", out)


@pytest.fixture
def q_available(monkeypatch):
    check = MagicMock(return_value=True)
    monkeypatch.setattr(helpers, "check_q_cli", check)
    return check


@pytest.fixture
def fake_worker(monkeypatch, q_available):
    """Replace the worker run in both generate and edit; returns the mock."""
    worker = MagicMock()
    monkeypatch.setattr(generate, "run_worker", worker)
    monkeypatch.setattr(edit, "run_worker", worker)
    return worker
