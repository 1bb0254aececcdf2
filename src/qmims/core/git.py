"""Optional git auto-commit of generated READMEs."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class _GitCommandResult:
    returncode: int
    stdout: str
    stderr: str


def _run_git(repo_dir: Path, args: list[str], timeout: int = 30) -> _GitCommandResult:
    """Run a git command and normalize failures into a result."""
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(repo_dir),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
        return _GitCommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    except FileNotFoundError:
        return _GitCommandResult(
            returncode=127,
            stdout="",
            stderr="git executable not found on PATH",
        )
    except subprocess.TimeoutExpired:
        return _GitCommandResult(
            returncode=124,
            stdout="",
            stderr=f"git command timed out: git {' '.join(args)}",
        )


def format_commit_message(message_format: str, file_name: str, mode: str) -> str:
    return message_format.replace("{fileName}", file_name).replace("{mode}", mode)


def is_git_repository(directory: Path) -> bool:
    result = _run_git(directory, ["rev-parse", "--is-inside-work-tree"])
    return result.returncode == 0 and result.stdout.strip() == "true"


def auto_commit(
    repo_dir: Path,
    file_path: Path,
    mode: str,
    message_format: str,
) -> bool:
    """Stage and commit ``file_path``.

    Returns:
        True when a commit was created. Any git failure (not a repository,
        nothing to commit, git missing) returns False.
    """
    if not is_git_repository(repo_dir):
        logger.info("Skipping auto-commit: %s is not a git repository", repo_dir)
        return False

    try:
        relative = file_path.resolve().relative_to(repo_dir.resolve())
    except ValueError:
        relative = file_path

    add = _run_git(repo_dir, ["add", "--", str(relative)])
    if add.returncode != 0:
        logger.warning("git add failed: %s", add.stderr.strip())
        return False

    message = format_commit_message(message_format, file_path.name, mode)
    commit = _run_git(repo_dir, ["commit", "-m", message, "--", str(relative)])
    if commit.returncode != 0:
        logger.warning("git commit failed: %s", (commit.stderr or commit.stdout).strip())
        return False

    logger.info("Committed %s: %s", relative, message)
    return True


__all__ = ["auto_commit", "format_commit_message", "is_git_repository"]
