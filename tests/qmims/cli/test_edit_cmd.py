"""Integration tests for 'qmims edit'."""

from __future__ import annotations

from unittest.mock import MagicMock

from qmims import app
from qmims.cli import helpers
from qmims.worker import WorkerFailedError

INSTRUCTED = """# Demo

<!-- qmims: Rewrite the intro -->
<!-- qmims-target-start -->
Old intro.
<!-- qmims-target-end -->
"""


def test_edit_runs_worker_with_instructions(runner, project_dir, fake_worker):
    readme = project_dir / "README.md"
    readme.write_text(INSTRUCTED, encoding="utf-8")

    result = runner.invoke(app, ["edit", str(readme)])

    assert result.exit_code == 0, result.output
    assert "Found 1 instruction:" in result.output
    prompt = fake_worker.call_args.args[0]
    assert "1. Rewrite the intro (line 3)" in prompt
    assert "   > Old intro." in prompt
    assert fake_worker.call_args.kwargs["cwd"] == readme.resolve().parent
    assert "Successfully edited README.md" in result.output


def test_edit_without_instructions_warns(runner, project_dir, fake_worker):
    readme = project_dir / "README.md"
    readme.write_text("# Plain\n", encoding="utf-8")

    result = runner.invoke(app, ["edit", str(readme)])

    assert result.exit_code == 0
    assert "Warning:" in result.output
    assert "No embedded instructions found" in result.output
    fake_worker.assert_not_called()


def test_edit_falls_back_to_readme_in_directory(runner, project_dir, fake_worker):
    lower = project_dir / "readme.md"
    lower.write_text(INSTRUCTED, encoding="utf-8")

    result = runner.invoke(app, ["edit", str(project_dir / "README.md")])

    assert result.exit_code == 0, result.output
    assert str(lower.resolve()) in fake_worker.call_args.args[0]


def test_edit_accepts_a_directory(runner, project_dir, fake_worker):
    (project_dir / "README.md").write_text(INSTRUCTED, encoding="utf-8")

    result = runner.invoke(app, ["edit", str(project_dir)])

    assert result.exit_code == 0, result.output
    fake_worker.assert_called_once()


def test_edit_missing_file(runner, project_dir, fake_worker):
    result = runner.invoke(app, ["edit", str(project_dir / "GUIDE.md")])

    assert result.exit_code == 1
    assert "not found" in result.output
    fake_worker.assert_not_called()


def test_edit_worker_failure(runner, project_dir, fake_worker):
    readme = project_dir / "README.md"
    readme.write_text(INSTRUCTED, encoding="utf-8")
    fake_worker.side_effect = WorkerFailedError(3)

    result = runner.invoke(app, ["edit", str(readme), "--yes"])

    assert result.exit_code == 1
    assert "Amazon Q process exited with code 3" in result.output
    assert fake_worker.call_args.kwargs["auto_approve"] is True


def test_edit_dry_run(runner, project_dir, monkeypatch):
    check = MagicMock(return_value=True)
    monkeypatch.setattr(helpers, "check_q_cli", check)
    readme = project_dir / "README.md"
    readme.write_text(INSTRUCTED, encoding="utf-8")

    result = runner.invoke(app, ["edit", str(readme), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "DRY RUN MODE" in result.output
    check.assert_not_called()
    assert readme.read_text(encoding="utf-8") == INSTRUCTED
