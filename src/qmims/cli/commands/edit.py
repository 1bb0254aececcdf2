"""``qmims edit`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from qmims.cli.helpers import (
    load_config_or_exit,
    maybe_auto_commit,
    report_instructions,
    require_q_cli_or_exit,
    run_worker,
)
from qmims.cli.ui import Reporter, setup_logging
from qmims.core.constants import DEFAULT_README_NAME
from qmims.markdown import find_readme_file, parse_instructions, read_markdown_file
from qmims.prompts import build_edit_prompt
from qmims.worker import WorkerError


def resolve_edit_target(file: str) -> Path | None:
    """Return the file to edit, falling back to a README beside it."""
    candidate = Path(file).resolve()
    if candidate.is_file():
        return candidate
    directory = candidate if candidate.is_dir() else candidate.parent
    return find_readme_file(directory)


def edit(
    file: str = typer.Argument(DEFAULT_README_NAME, help="Path to the markdown file to edit"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Automatically approve all permission requests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without making changes"),
    verbose: bool = typer.Option(False, "--verbose", help="Show verbose output"),
) -> None:
    """Edit a markdown file by processing its embedded qmims instructions."""
    setup_logging(verbose)
    reporter = Reporter(verbose=verbose)
    config = load_config_or_exit(reporter)
    auto_approve = yes or config.q.auto_approve_edits

    file_path = resolve_edit_target(file)
    if file_path is None:
        reporter.error(f"File '{file}' not found and no README found in its directory")
        raise typer.Exit(1)
    if file_path.name != Path(file).name:
        reporter.debug(f"Using discovered README: {file_path}")

    if dry_run:
        reporter.info("[cyan]\n--- DRY RUN MODE - No changes will be made ---[/cyan]")
        reporter.info(f"File: [bold]{file_path}[/bold]")
        reporter.info("- Would scan the file for embedded qmims instructions")
        reporter.info("- Would start Amazon Q chat session")
        reporter.info(f"- Would ask Amazon Q to apply the instructions to {file_path.name}")
        reporter.info("[cyan]\n--- End of dry run ---[/cyan]")
        return

    require_q_cli_or_exit(config, reporter)

    try:
        content = read_markdown_file(file_path)
    except OSError as e:
        reporter.error(f"Failed to read '{file_path}': {e}")
        raise typer.Exit(1)

    instructions = parse_instructions(content)
    if not instructions:
        reporter.warn(
            f"No embedded instructions found in '{file_path.name}'. "
            "Add instructions using <!-- qmims: ... --> syntax."
        )
        return

    reporter.info(f"[cyan]Editing {file_path.name}...[/cyan]")
    report_instructions(instructions, reporter)

    try:
        run_worker(
            build_edit_prompt(file_path, instructions, content),
            cwd=file_path.parent,
            config=config,
            reporter=reporter,
            auto_approve=auto_approve,
            activity="editing your file",
            interrupted_message="Edit interrupted by user",
        )
    except WorkerError as e:
        reporter.error(f"Error editing file: {e}")
        raise typer.Exit(1)

    reporter.success(f"\nSuccessfully edited {file_path.name}")
    maybe_auto_commit(config, file_path.parent, file_path, "edit", reporter)
