"""Amazon Q Developer CLI availability checks."""

from __future__ import annotations

import logging
import subprocess

from qmims.core.constants import Q_EXECUTABLE, Q_INSTALL_URL

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 30


def _probe(executable: str, *args: str) -> bool:
    try:
        result = subprocess.run(
            [executable, *args],
            capture_output=True,
            text=True,
            check=False,
            timeout=PROBE_TIMEOUT_SECONDS,
        )
    except FileNotFoundError:
        logger.debug("%s not found on PATH", executable)
        return False
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("%s %s failed: %s", executable, " ".join(args), e)
        return False

    if result.returncode != 0:
        logger.debug(
            "%s %s exited with %d: %s",
            executable,
            " ".join(args),
            result.returncode,
            (result.stderr or result.stdout).strip(),
        )
        return False
    return True


def check_q_cli(executable: str = Q_EXECUTABLE) -> bool:
    """Return True when the Amazon Q CLI is installed and logged in.

    Runs ``q --version`` to confirm the executable exists, then ``q whoami``
    to confirm the user is authenticated.
    """
    logger.debug("Checking if Amazon Q CLI is installed...")
    if not _probe(executable, "--version"):
        logger.info("Amazon Q CLI (%s) is not installed", executable)
        return False

    if not _probe(executable, "whoami"):
        logger.info("Amazon Q CLI is installed but the user is not authenticated")
        return False

    logger.debug("Amazon Q CLI is installed and authenticated")
    return True


def get_install_instructions() -> str:
    """Rich-markup help shown when the Amazon Q CLI is unavailable."""
    return f"""
[red]Error:[/red] Amazon Q Developer CLI ('q' command) not found or not authenticated.
[yellow]qmims[/yellow] requires the Amazon Q Developer CLI to function.

Please ensure it is installed and you are logged in:
1. Installation instructions: [blue]{Q_INSTALL_URL}[/blue]
2. After installation, run: [green]q login[/green]

Once set up, try running [yellow]qmims[/yellow] again.
"""


__all__ = ["check_q_cli", "get_install_instructions"]
