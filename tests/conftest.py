from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from qmims.cli.ui import Reporter


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temp dir so tests never touch the user's config."""
    directory = tmp_path / "qmims-config"
    monkeypatch.setenv("QMIMS_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture()
def string_console() -> Console:
    """Console writing to an in-memory buffer; read it with ``.file.getvalue()``."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture()
def reporter() -> Reporter:
    return Reporter(
        verbose=True,
        out=Console(file=io.StringIO(), width=200, color_system=None),
        err=Console(file=io.StringIO(), width=200, color_system=None),
    )
