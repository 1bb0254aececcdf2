"""Integration tests for 'qmims generate'."""

from __future__ import annotations

from unittest.mock import MagicMock

from qmims import app
from qmims.cli import helpers
from qmims.core.config import save_config_data
from qmims.core.constants import DEFAULT_README_CONTENT
from qmims.worker import WorkerFailedError


class TestAutoMode:
    def test_writes_skeleton_and_runs_worker(self, runner, project_dir, fake_worker):
        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 0, result.output
        readme = project_dir / "README.md"
        assert readme.read_text(encoding="utf-8") == DEFAULT_README_CONTENT
        fake_worker.assert_called_once()
        prompt = fake_worker.call_args.args[0]
        assert "generate a comprehensive README.md" in prompt
        assert str(readme.resolve()) in prompt
        assert fake_worker.call_args.kwargs["cwd"] == project_dir.resolve()
        assert fake_worker.call_args.kwargs["auto_approve"] is False
        assert "Thank you for using qmims!" in result.output

    def test_custom_output_name(self, runner, project_dir, fake_worker):
        result = runner.invoke(app, ["generate", str(project_dir), "-o", "DOCS.md"])

        assert result.exit_code == 0, result.output
        assert (project_dir / "DOCS.md").read_text(encoding="utf-8") == DEFAULT_README_CONTENT
        assert not (project_dir / "README.md").exists()

    def test_output_in_subdirectory(self, runner, project_dir, fake_worker):
        result = runner.invoke(app, ["generate", str(project_dir), "-o", "docs/README.md"])

        assert result.exit_code == 0, result.output
        assert (project_dir / "docs" / "README.md").read_text(encoding="utf-8") == DEFAULT_README_CONTENT

    def test_existing_file_declined(self, runner, project_dir, fake_worker):
        readme = project_dir / "README.md"
        readme.write_text("keep me", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir)], input="n\n")

        assert result.exit_code == 0
        assert "Generation cancelled" in result.output
        assert readme.read_text(encoding="utf-8") == "keep me"
        fake_worker.assert_not_called()

    def test_existing_file_overwritten_with_yes(self, runner, project_dir, fake_worker):
        (project_dir / "README.md").write_text("old", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir), "--yes"])

        assert result.exit_code == 0, result.output
        assert "Overwriting automatically" in result.output
        assert fake_worker.call_args.kwargs["auto_approve"] is True

    def test_auto_approve_from_config(self, runner, project_dir, fake_worker):
        save_config_data({"q": {"autoApproveEdits": True}})

        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert fake_worker.call_args.kwargs["auto_approve"] is True

    def test_auto_approve_no_in_config_still_asks(self, runner, project_dir, fake_worker):
        save_config_data({"q": {"autoApproveEdits": "no"}})
        readme = project_dir / "README.md"
        readme.write_text("precious\n", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir)], input="n\n")

        assert result.exit_code == 0, result.output
        assert "Overwriting automatically" not in result.output
        assert "Generation cancelled" in result.output
        assert readme.read_text(encoding="utf-8") == "precious\n"
        fake_worker.assert_not_called()


class TestTemplateMode:
    def test_writes_named_template(self, runner, project_dir, fake_worker):
        result = runner.invoke(app, ["generate", str(project_dir), "--mode", "template:library"])

        assert result.exit_code == 0, result.output
        content = (project_dir / "README.md").read_text(encoding="utf-8")
        assert content.startswith("# Library Name")
        assert "fill in the content" in fake_worker.call_args.args[0]

    def test_default_template_from_config(self, runner, project_dir, fake_worker):
        save_config_data({"defaults": {"mode": "template", "templateName": "minimal"}})

        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert "Generating README using template: minimal" in result.output

    def test_unknown_template_fails(self, runner, project_dir, fake_worker):
        result = runner.invoke(app, ["generate", str(project_dir), "-m", "template:nope"])

        assert result.exit_code == 1
        assert "Template 'nope' does not exist" in result.output
        fake_worker.assert_not_called()


class TestInstructMode:
    def test_missing_instructions_is_an_error(self, runner, project_dir, fake_worker):
        (project_dir / "README.md").write_text("# Plain\n", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir), "-m", "instruct", "-f"])

        assert result.exit_code == 1
        assert "No embedded instructions found" in result.output
        fake_worker.assert_not_called()

    def test_instructions_from_separate_file(self, runner, project_dir, fake_worker):
        notes = project_dir / "notes.md"
        notes.write_text("<!-- qmims: Describe the CLI -->\n", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir), "-m", f"instruct:{notes}"])

        assert result.exit_code == 0, result.output
        assert "Found 1 instruction:" in result.output
        assert "1. Describe the CLI" in result.output
        assert (project_dir / "README.md").read_text(encoding="utf-8") == DEFAULT_README_CONTENT
        assert "1. Describe the CLI (line 1)" in fake_worker.call_args.args[0]

    def test_instructions_in_output_file_are_kept(self, runner, project_dir, fake_worker):
        readme = project_dir / "README.md"
        readme.write_text("# Demo\n<!-- qmims: Add usage -->\n", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir), "-m", "instruct", "--force"])

        assert result.exit_code == 0, result.output
        assert "Add usage" in readme.read_text(encoding="utf-8")

    def test_missing_instruction_file(self, runner, project_dir, fake_worker, tmp_path):
        result = runner.invoke(
            app, ["generate", str(project_dir), "-m", f"instruct:{tmp_path / 'gone.md'}"]
        )

        assert result.exit_code == 1
        assert "not found" in result.output


class TestErrors:
    def test_invalid_mode(self, runner, project_dir, q_available):
        result = runner.invoke(app, ["generate", str(project_dir), "-m", "magic"])

        assert result.exit_code == 1
        assert "Invalid mode 'magic'" in result.output

    def test_missing_project_directory(self, runner, tmp_path):
        result = runner.invoke(app, ["generate", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_worker_failure_exits_non_zero(self, runner, project_dir, fake_worker):
        fake_worker.side_effect = WorkerFailedError(2)

        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 1
        assert "Amazon Q process exited with code 2" in result.output
        assert "Thank you" not in result.output

    def test_q_cli_missing(self, runner, project_dir, monkeypatch):
        monkeypatch.setattr(helpers, "check_q_cli", MagicMock(return_value=False))

        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 1
        assert "q login" in result.output
        assert not (project_dir / "README.md").exists()

    def test_invalid_config_file(self, runner, project_dir, config_dir, q_available):
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("defaults: [\n", encoding="utf-8")

        result = runner.invoke(app, ["generate", str(project_dir)])

        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestDryRunAndListing:
    def test_dry_run_changes_nothing(self, runner, project_dir, monkeypatch):
        check = MagicMock(return_value=False)
        monkeypatch.setattr(helpers, "check_q_cli", check)

        result = runner.invoke(app, ["generate", str(project_dir), "--dry-run", "-m", "template:basic"])

        assert result.exit_code == 0, result.output
        assert "DRY RUN MODE" in result.output
        assert "Template: basic (built-in)" in result.output
        assert not (project_dir / "README.md").exists()
        check.assert_not_called()

    def test_list_available_templates(self, runner, project_dir, config_dir, tmp_path):
        custom = tmp_path / "team.md"
        custom.write_text("# Team\n", encoding="utf-8")
        save_config_data({"customTemplates": {"team": str(custom)}})

        result = runner.invoke(
            app, ["generate", str(project_dir), "-m", "template", "--list-available-templates"]
        )

        assert result.exit_code == 0, result.output
        assert "- basic" in result.output
        assert "- service" in result.output
        assert "- team" in result.output


class TestAutoCommit:
    def test_commit_after_success(self, runner, project_dir, fake_worker, monkeypatch):
        save_config_data({"git": {"autoCommit": {"enabled": True}}})
        commit = MagicMock(return_value=True)
        monkeypatch.setattr(helpers, "auto_commit", commit)

        result = runner.invoke(app, ["generate", str(project_dir), "-m", "template:basic"])

        assert result.exit_code == 0, result.output
        commit.assert_called_once()
        assert commit.call_args.args[2] == "template:basic"
        assert "Committed README.md to git." in result.output

    def test_no_commit_when_disabled(self, runner, project_dir, fake_worker, monkeypatch):
        commit = MagicMock(return_value=True)
        monkeypatch.setattr(helpers, "auto_commit", commit)

        runner.invoke(app, ["generate", str(project_dir)])

        commit.assert_not_called()


def test_version(runner):
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "qmims 0.1.0" in result.output
