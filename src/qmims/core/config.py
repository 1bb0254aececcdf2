"""Persisted user configuration for qmims.

The configuration lives in ``config.yaml`` under the per-user config directory
(``platformdirs.user_config_dir("qmims")``), overridable with the
``QMIMS_CONFIG_DIR`` environment variable. Keys use camelCase so the file stays
readable by other qmims implementations::

    defaults:
      mode: auto
      outputFileName: README.md
    q:
      autoApproveEdits: false
    git:
      autoCommit:
        enabled: false
        messageFormat: "docs: Update {fileName} via qmims ({mode})"
    customTemplates:
      mytemplate: /home/me/templates/mytemplate.md

Commands load the file once and hand a ``QmimsConfig`` value to the components
they construct; nothing below the command layer reads configuration on its own.
"""

from __future__ import annotations

import copy
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from qmims.core.constants import (
    APP_NAME,
    CONFIG_DIR_ENV,
    CONFIG_FILE_NAME,
    DEFAULT_COMMIT_MESSAGE_FORMAT,
    DEFAULT_README_NAME,
    Q_EXECUTABLE,
)

logger = logging.getLogger(__name__)

VALID_MODES = ("auto", "template", "instruct")


class ConfigError(RuntimeError):
    """Raised when the configuration file or a config key is invalid."""


@dataclass
class UserSettings:
    name: str | None = None
    email: str | None = None


@dataclass
class DefaultSettings:
    mode: str = "auto"
    template_name: str | None = None
    output_file_name: str = DEFAULT_README_NAME


@dataclass
class QSettings:
    auto_approve_edits: bool = False
    executable: str = Q_EXECUTABLE


@dataclass
class AutoCommitSettings:
    enabled: bool = False
    message_format: str = DEFAULT_COMMIT_MESSAGE_FORMAT


@dataclass
class QmimsConfig:
    """Typed view over the configuration file.

    Attributes:
        user: Author details offered to the setup wizard.
        defaults: Default generation mode, template and output file name.
        q: Worker settings.
        auto_commit: Git auto-commit settings.
        custom_templates: Template name to absolute file path.
    """

    user: UserSettings = field(default_factory=UserSettings)
    defaults: DefaultSettings = field(default_factory=DefaultSettings)
    q: QSettings = field(default_factory=QSettings)
    auto_commit: AutoCommitSettings = field(default_factory=AutoCommitSettings)
    custom_templates: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QmimsConfig":
        merged = _deep_merge(default_config_data(), data or {})
        user = _section(merged, "user")
        defaults = _section(merged, "defaults")
        q = _section(merged, "q")
        auto_commit = _section(_section(merged, "git"), "autoCommit")
        custom = merged.get("customTemplates") or {}

        mode = str(defaults.get("mode") or "auto")
        if mode not in VALID_MODES:
            raise ConfigError(
                f"Invalid defaults.mode '{mode}'. Must be one of: {', '.join(VALID_MODES)}"
            )
        if not isinstance(custom, dict):
            raise ConfigError("Invalid customTemplates: expected a mapping of name to path")

        return cls(
            user=UserSettings(name=user.get("name"), email=user.get("email")),
            defaults=DefaultSettings(
                mode=mode,
                template_name=defaults.get("templateName"),
                output_file_name=str(defaults.get("outputFileName") or DEFAULT_README_NAME),
            ),
            q=QSettings(
                auto_approve_edits=_parse_bool(q.get("autoApproveEdits", False), "q.autoApproveEdits"),
                executable=str(q.get("executable") or Q_EXECUTABLE),
            ),
            auto_commit=AutoCommitSettings(
                enabled=_parse_bool(auto_commit.get("enabled", False), "git.autoCommit.enabled"),
                message_format=str(auto_commit.get("messageFormat") or DEFAULT_COMMIT_MESSAGE_FORMAT),
            ),
            custom_templates={str(k): str(v) for k, v in custom.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        user = {k: v for k, v in (("name", self.user.name), ("email", self.user.email)) if v}
        defaults: dict[str, Any] = {
            "mode": self.defaults.mode,
            "outputFileName": self.defaults.output_file_name,
        }
        if self.defaults.template_name:
            defaults["templateName"] = self.defaults.template_name
        return {
            "user": user,
            "defaults": defaults,
            "q": {
                "autoApproveEdits": self.q.auto_approve_edits,
                "executable": self.q.executable,
            },
            "git": {
                "autoCommit": {
                    "enabled": self.auto_commit.enabled,
                    "messageFormat": self.auto_commit.message_format,
                }
            },
            "customTemplates": dict(self.custom_templates),
        }


def default_config_data() -> dict[str, Any]:
    return {
        "user": {},
        "defaults": {"mode": "auto", "outputFileName": DEFAULT_README_NAME},
        "q": {"autoApproveEdits": False, "executable": Q_EXECUTABLE},
        "git": {
            "autoCommit": {
                "enabled": False,
                "messageFormat": DEFAULT_COMMIT_MESSAGE_FORMAT,
            }
        },
        "customTemplates": {},
    }


_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def _parse_bool(value: Any, key: str) -> bool:
    """Read a boolean setting, accepting true/false, yes/no, on/off and 1/0.

    Raises:
        ConfigError: For any other value.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"Invalid {key} '{value}': expected true or false")


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid config section '{key}': expected a mapping")
    return value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config_dir() -> Path:
    """Return the directory holding ``config.yaml``.

    Resolution order:
    1. ``QMIMS_CONFIG_DIR`` environment variable
    2. ``platformdirs.user_config_dir("qmims")``
    """
    if env_dir := os.environ.get(CONFIG_DIR_ENV):
        return Path(env_dir)

    from platformdirs import user_config_dir

    return Path(user_config_dir(APP_NAME))


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def _yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.default_flow_style = False
    return yaml


def load_config_data(path: Path | None = None) -> dict[str, Any]:
    """Load the raw configuration mapping (without defaults applied).

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_file = path or get_config_path()
    if not config_file.exists():
        logger.debug("Config file not found: %s", config_file)
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = _yaml().load(f) or {}
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {config_file}: expected a mapping at top level")
    return data


def save_config_data(data: dict[str, Any], path: Path | None = None) -> Path:
    """Write the raw configuration mapping and return the file path."""
    config_file = path or get_config_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w", encoding="utf-8") as f:
        _yaml().dump(data, f)
    logger.debug("Saved config to %s", config_file)
    return config_file


def load_config(path: Path | None = None) -> QmimsConfig:
    """Load the typed configuration, applying defaults for missing keys."""
    return QmimsConfig.from_dict(load_config_data(path))


def save_config(config: QmimsConfig, path: Path | None = None) -> Path:
    return save_config_data(config.to_dict(), path)


def resolved_config_data(path: Path | None = None) -> dict[str, Any]:
    """Return the configuration mapping with defaults filled in."""
    return _deep_merge(default_config_data(), load_config_data(path))


def _split_key(key: str) -> list[str]:
    parts = [part for part in key.split(".") if part]
    if not parts:
        raise ConfigError("Configuration key must not be empty")
    return parts


def get_value(data: dict[str, Any], key: str) -> Any:
    """Return the value at dotted ``key``.

    Raises:
        ConfigError: If the key does not exist.
    """
    node: Any = data
    for part in _split_key(key):
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Configuration key '{key}' not found")
        node = node[part]
    return node


def set_value(data: dict[str, Any], key: str, value: Any) -> None:
    """Set dotted ``key`` to ``value``, creating intermediate mappings."""
    parts = _split_key(key)
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if child is None:
            child = {}
            node[part] = child
        elif not isinstance(child, dict):
            raise ConfigError(f"Cannot set '{key}': '{part}' is not a section")
        node = child
    node[parts[-1]] = value


def delete_value(data: dict[str, Any], key: str) -> None:
    """Remove dotted ``key``.

    Raises:
        ConfigError: If the key does not exist.
    """
    parts = _split_key(key)
    node: Any = data
    for part in parts[:-1]:
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Configuration key '{key}' not found")
        node = node[part]
    if not isinstance(node, dict) or parts[-1] not in node:
        raise ConfigError(f"Configuration key '{key}' not found")
    del node[parts[-1]]


def coerce_value(text: str) -> Any:
    """Convert a command-line string into a bool, number, or string."""
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if text.strip():
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return text
        if math.isfinite(number):
            return number
    return text


__all__ = [
    "ConfigError",
    "QmimsConfig",
    "UserSettings",
    "DefaultSettings",
    "QSettings",
    "AutoCommitSettings",
    "VALID_MODES",
    "default_config_data",
    "get_config_dir",
    "get_config_path",
    "load_config",
    "save_config",
    "load_config_data",
    "save_config_data",
    "resolved_config_data",
    "get_value",
    "set_value",
    "delete_value",
    "coerce_value",
]
