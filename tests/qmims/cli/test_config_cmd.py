"""Integration tests for 'qmims config'."""

from __future__ import annotations

from qmims import app
from qmims.core.config import load_config, load_config_data, save_config_data


class TestConfigGetSet:
    def test_get_default_value(self, runner):
        result = runner.invoke(app, ["config", "get", "defaults.mode"])

        assert result.exit_code == 0, result.output
        assert "defaults.mode = auto" in result.output

    def test_get_unknown_key(self, runner):
        result = runner.invoke(app, ["config", "get", "defaults.nope"])

        assert result.exit_code == 1
        assert "Configuration key 'defaults.nope' not found" in result.output

    def test_set_coerces_booleans(self, runner):
        result = runner.invoke(app, ["config", "set", "q.autoApproveEdits", "true"])

        assert result.exit_code == 0, result.output
        assert load_config().q.auto_approve_edits is True

    def test_set_no_disables_auto_approve(self, runner):
        result = runner.invoke(app, ["config", "set", "q.autoApproveEdits", "no"])

        assert result.exit_code == 0, result.output
        assert load_config().q.auto_approve_edits is False

    def test_set_rejects_non_boolean_flag(self, runner):
        result = runner.invoke(app, ["config", "set", "q.autoApproveEdits", "maybe"])

        assert result.exit_code == 1
        assert "Invalid q.autoApproveEdits 'maybe'" in result.output
        assert load_config_data() == {}

    def test_set_rejects_invalid_mode(self, runner):
        result = runner.invoke(app, ["config", "set", "defaults.mode", "magic"])

        assert result.exit_code == 1
        assert "Invalid defaults.mode" in result.output
        assert load_config_data() == {}

    def test_delete_restores_default(self, runner):
        save_config_data({"defaults": {"mode": "instruct"}})

        result = runner.invoke(app, ["config", "delete", "defaults.mode"])

        assert result.exit_code == 0, result.output
        assert load_config().defaults.mode == "auto"

    def test_delete_unknown_key(self, runner):
        result = runner.invoke(app, ["config", "delete", "user.name"])

        assert result.exit_code == 1


def test_list_shows_flattened_keys(runner, config_dir):
    save_config_data({"user": {"name": "Ada"}})

    result = runner.invoke(app, ["config", "list"])

    assert result.exit_code == 0, result.output
    assert "user.name" in result.output
    assert "Ada" in result.output
    assert "git.autoCommit.messageFormat" in result.output


def test_setup_wizard_writes_config(runner):
    answers = "\n".join(["Ada", "ada@example.com", "template", "service", "DOCS.md", "y", "n"]) + "\n"

    result = runner.invoke(app, ["config", "setup"], input=answers)

    assert result.exit_code == 0, result.output
    config = load_config()
    assert config.user.name == "Ada"
    assert config.user.email == "ada@example.com"
    assert config.defaults.mode == "template"
    assert config.defaults.template_name == "service"
    assert config.defaults.output_file_name == "DOCS.md"
    assert config.q.auto_approve_edits is True
    assert config.auto_commit.enabled is False


def test_setup_wizard_reprompts_invalid_mode(runner):
    answers = "\n".join(["", "", "magic", "auto", "", "n", "n"]) + "\n"

    result = runner.invoke(app, ["config", "setup"], input=answers)

    assert result.exit_code == 0, result.output
    assert "Invalid mode 'magic'" in result.output
    assert load_config().defaults.mode == "auto"
