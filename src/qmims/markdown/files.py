"""Markdown file helpers used by the command layer."""

from __future__ import annotations

import logging
from pathlib import Path

from qmims.core.constants import DEFAULT_README_CONTENT, DEFAULT_README_NAME

logger = logging.getLogger(__name__)


def read_markdown_file(path: Path) -> str:
    """Read a markdown file as UTF-8. Errors propagate to the caller."""
    return Path(path).read_text(encoding="utf-8")


def write_markdown_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path``, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.debug("Wrote %d characters to %s", len(content), target)


def find_readme_file(directory: Path) -> Path | None:
    """Return the README.md in ``directory`` matched case-insensitively.

    Returns None when the directory is missing or holds no README.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None

    for entry in sorted(directory.iterdir()):
        if entry.is_file() and entry.name.lower() == DEFAULT_README_NAME.lower():
            return entry
    return None


def create_readme_file(directory: Path, name: str = DEFAULT_README_NAME) -> Path:
    """Write the skeleton README to ``directory/name`` and return its path."""
    readme_path = Path(directory) / name
    write_markdown_file(readme_path, DEFAULT_README_CONTENT)
    return readme_path
