"""Helpers shared by qmims commands."""

from __future__ import annotations

import signal
from pathlib import Path

import typer
from rich.markup import escape

from qmims.cli.ui import Reporter
from qmims.core.config import ConfigError, QmimsConfig, load_config
from qmims.core.git import auto_commit
from qmims.markdown.scanner import Instruction
from qmims.prompts import summarize_instruction
from qmims.worker import (
    WorkerEvents,
    WorkerOptions,
    WorkerSession,
    check_q_cli,
    get_install_instructions,
)


def load_config_or_exit(reporter: Reporter) -> QmimsConfig:
    try:
        return load_config()
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)


def require_q_cli_or_exit(config: QmimsConfig, reporter: Reporter) -> None:
    if not check_q_cli(config.q.executable):
        reporter.err.print(get_install_instructions())
        raise typer.Exit(1)


def report_instructions(instructions: list[Instruction], reporter: Reporter) -> None:
    count = len(instructions)
    reporter.info(f"Found {count} instruction{'' if count == 1 else 's'}:")
    for index, instruction in enumerate(instructions, start=1):
        reporter.line(f"  {index}. {escape(summarize_instruction(instruction.instruction))}")


def run_worker(
    prompt: str,
    *,
    cwd: Path,
    config: QmimsConfig,
    reporter: Reporter,
    auto_approve: bool,
    activity: str,
    interrupted_message: str,
) -> None:
    """Run one worker session for ``prompt`` and block until it finishes.

    A SIGINT handler is installed immediately before the blocking call. The
    first Ctrl+C kills the worker and exits with status 0; the previous handler
    is restored afterwards.

    Raises:
        WorkerError: The worker failed or no prompt was provided.
    """

    def on_exit(code: int) -> None:
        if code != 0:
            reporter.error(f"Amazon Q process exited with code {code}")

    session = WorkerSession(
        WorkerOptions(
            cwd=cwd,
            verbose=reporter.verbose,
            auto_approve=auto_approve,
            executable=config.q.executable,
        ),
        WorkerEvents(
            on_output=reporter.debug,
            on_error=lambda error: reporter.error(str(error)),
            on_exit=on_exit,
        ),
        console=reporter.out,
    )

    reporter.debug("Starting Amazon Q session")
    session.start()
    session.send_message(prompt)

    reporter.info(f"[yellow]\nAmazon Q is {activity}. This may take a few minutes.[/yellow]")
    reporter.info("[yellow]Press Ctrl+C to cancel at any time.[/yellow]")

    previous_handler = signal.getsignal(signal.SIGINT)

    def handle_interrupt(signum, frame):
        signal.signal(signal.SIGINT, previous_handler)
        reporter.warn(interrupted_message)
        session.terminate()
        raise typer.Exit(0)

    signal.signal(signal.SIGINT, handle_interrupt)
    try:
        session.stop()
    finally:
        session.terminate()
        signal.signal(signal.SIGINT, previous_handler)


def maybe_auto_commit(
    config: QmimsConfig,
    project_path: Path,
    file_path: Path,
    mode: str,
    reporter: Reporter,
) -> None:
    if not config.auto_commit.enabled:
        return
    if auto_commit(project_path, file_path, mode, config.auto_commit.message_format):
        reporter.success(f"Committed {file_path.name} to git.")
    else:
        reporter.warn(f"Could not auto-commit {file_path.name}; please review and commit manually.")
