"""Shared constants for qmims."""

from __future__ import annotations

APP_NAME = "qmims"

DEFAULT_README_NAME = "README.md"
DEFAULT_README_CONTENT = "# Project README\n\n<!-- Generated by qmims -->\n"

CONFIG_DIR_ENV = "QMIMS_CONFIG_DIR"
CONFIG_FILE_NAME = "config.yaml"

Q_EXECUTABLE = "q"
Q_CHAT_ARGS = ("chat", "--no-interactive", "--trust-all-tools")
Q_INSTALL_URL = "https://docs.aws.amazon.com/amazonq/latest/qdeveloper-ug/command-line-installing.html"

DEFAULT_COMMIT_MESSAGE_FORMAT = "docs: Update {fileName} via qmims ({mode})"

__all__ = [
    "APP_NAME",
    "DEFAULT_README_NAME",
    "DEFAULT_README_CONTENT",
    "CONFIG_DIR_ENV",
    "CONFIG_FILE_NAME",
    "Q_EXECUTABLE",
    "Q_CHAT_ARGS",
    "Q_INSTALL_URL",
    "DEFAULT_COMMIT_MESSAGE_FORMAT",
]
