"""``qmims generate`` command.

Generates a README for a project in one of three modes:

    auto                 Amazon Q analyzes the project and writes a README
    template[:name]      A template is written first and Amazon Q fills it in
    instruct[:file]      Embedded <!-- qmims: ... --> instructions drive the edit
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from qmims.cli.helpers import (
    load_config_or_exit,
    maybe_auto_commit,
    report_instructions,
    require_q_cli_or_exit,
    run_worker,
)
from qmims.cli.ui import Reporter, setup_logging
from qmims.core.config import QmimsConfig
from qmims.core.modes import (
    AutoMode,
    GenerationMode,
    InvalidModeError,
    TemplateMode,
    parse_mode,
)
from qmims.markdown import (
    create_readme_file,
    parse_instructions,
    read_markdown_file,
    write_markdown_file,
)
from qmims.prompts import build_auto_prompt, build_instruct_prompt, build_template_prompt
from qmims.template import TemplateError, get_template, get_template_content, list_templates
from qmims.worker import WorkerError

DEFAULT_TEMPLATE_NAME = "basic"


class GenerationError(RuntimeError):
    """Raised when a generation mode cannot run (missing file, no instructions)."""


def show_template_listing(config: QmimsConfig, reporter: Reporter) -> None:
    templates = list_templates(config)

    reporter.info("[bold]\nAvailable Templates:[/bold]")
    reporter.info("[cyan]\nBuilt-in Templates:[/cyan]")
    for template in templates:
        if template.is_built_in:
            reporter.info(f"  - {template.name}")

    reporter.info("[cyan]\nCustom Templates:[/cyan]")
    custom = [t for t in templates if not t.is_built_in]
    if not custom:
        reporter.info("  No custom templates found")
    for template in custom:
        reporter.info(f"  - {template.name}")

    reporter.info("\nUse: qmims generate --mode template:TEMPLATE_NAME")


def _show_dry_run(
    project_path: Path,
    output_path: Path,
    mode: GenerationMode,
    file_exists: bool,
    force: bool,
    config: QmimsConfig,
    reporter: Reporter,
) -> None:
    reporter.info("[cyan]\n--- DRY RUN MODE - No changes will be made ---[/cyan]")
    reporter.info(f"Project directory: [bold]{project_path}[/bold]")
    reporter.info(f"Output file: [bold]{output_path}[/bold]")
    reporter.info(f"Mode: [bold]{mode.label}[/bold]")
    reporter.info(f"File exists: [bold]{'Yes' if file_exists else 'No'}[/bold]")

    if isinstance(mode, TemplateMode) and mode.name:
        template = get_template(mode.name, config)
        if template is None:
            reporter.error(f"Template '{mode.name}' not found")
        else:
            kind = "built-in" if template.is_built_in else "custom"
            reporter.info(f"Template: [bold]{template.name}[/bold] ({kind})")

    reporter.info("[cyan]\nActions that would be taken:[/cyan]")
    if file_exists and not force:
        reporter.info("- Would prompt to overwrite existing file")
    reporter.info(f"- Would {'overwrite' if file_exists else 'create'} file: [bold]{output_path}[/bold]")
    reporter.info("- Would start Amazon Q chat session")

    if isinstance(mode, AutoMode):
        reporter.info("- Would ask Amazon Q to analyze project and generate README")
    elif isinstance(mode, TemplateMode):
        reporter.info(f"- Would use {mode.name or 'default'} template to structure README")
        reporter.info("- Would ask Amazon Q to fill in template sections")
    elif mode.file:
        reporter.info(f"- Would process instructions in {mode.file}")
    else:
        reporter.info("- Would create README with default instruction")

    reporter.info("[cyan]\n--- End of dry run ---[/cyan]")


def generate_auto(
    project_path: Path,
    output_path: Path,
    config: QmimsConfig,
    reporter: Reporter,
    auto_approve: bool,
) -> None:
    reporter.info("[cyan]Generating README in auto mode...[/cyan]")
    create_readme_file(output_path.parent, output_path.name)

    run_worker(
        build_auto_prompt(output_path),
        cwd=project_path,
        config=config,
        reporter=reporter,
        auto_approve=auto_approve,
        activity="generating your README",
        interrupted_message="Generation interrupted by user",
    )
    reporter.success(f"\nSuccessfully generated {output_path.name}")


def generate_template(
    project_path: Path,
    output_path: Path,
    template_name: str | None,
    config: QmimsConfig,
    reporter: Reporter,
    auto_approve: bool,
) -> None:
    name = template_name or config.defaults.template_name or DEFAULT_TEMPLATE_NAME
    reporter.info(f"[cyan]Generating README using template: {name}...[/cyan]")

    content = get_template_content(name, config)
    reporter.debug(f"Loaded template '{name}' ({len(content)} characters)")
    write_markdown_file(output_path, content)

    run_worker(
        build_template_prompt(output_path),
        cwd=project_path,
        config=config,
        reporter=reporter,
        auto_approve=auto_approve,
        activity="filling in your template",
        interrupted_message="Generation interrupted by user",
    )
    reporter.success("\nTemplate filling completed successfully.")


def generate_instruct(
    project_path: Path,
    output_path: Path,
    instruct_file: str | None,
    config: QmimsConfig,
    reporter: Reporter,
    auto_approve: bool,
) -> None:
    if instruct_file:
        instruct_path = Path(instruct_file).resolve()
        if not instruct_path.exists():
            raise GenerationError(f"Instruction file '{instruct_file}' not found")
    else:
        instruct_path = output_path

    reporter.info(f"[cyan]Generating README using instructions from: {instruct_path.name}...[/cyan]")

    content = read_markdown_file(instruct_path)
    instructions = parse_instructions(content)
    if not instructions:
        raise GenerationError(
            f"No embedded instructions found in '{instruct_path.name}'. "
            "Add instructions using <!-- qmims: ... --> syntax."
        )
    report_instructions(instructions, reporter)

    if instruct_path != output_path or not output_path.exists():
        create_readme_file(output_path.parent, output_path.name)

    run_worker(
        build_instruct_prompt(instructions, content, output_path),
        cwd=project_path,
        config=config,
        reporter=reporter,
        auto_approve=auto_approve,
        activity="processing your instructions",
        interrupted_message="Processing interrupted by user",
    )
    reporter.success("\nInstruction processing completed successfully.")


def generate(
    path: str = typer.Argument(".", help="Path to the project directory"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file name (defaults to config defaults.outputFileName)"
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Generation mode: auto, template[:name], or instruct[:file]"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Force overwrite if file exists"),
    list_available_templates: bool = typer.Option(
        False, "--list-available-templates", help="List available templates"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Automatically approve all permission requests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without making changes"),
    verbose: bool = typer.Option(False, "--verbose", help="Show verbose output"),
) -> None:
    """Generate a README.md file for a project."""
    setup_logging(verbose)
    reporter = Reporter(verbose=verbose)
    config = load_config_or_exit(reporter)
    auto_approve = yes or config.q.auto_approve_edits

    project_path = Path(path).resolve()
    if not project_path.is_dir():
        reporter.error(f"Project directory '{project_path}' does not exist")
        raise typer.Exit(1)

    try:
        generation_mode = parse_mode(mode or config.defaults.mode)
    except InvalidModeError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    if list_available_templates:
        if not isinstance(generation_mode, TemplateMode):
            reporter.warn("--list-available-templates is only relevant with --mode template")
        show_template_listing(config, reporter)
        return

    if not dry_run:
        require_q_cli_or_exit(config, reporter)

    output_name = output or config.defaults.output_file_name
    output_path = project_path / output_name
    file_exists = output_path.exists()

    if file_exists and not force and not dry_run:
        if auto_approve:
            reporter.info(f"File '{output_name}' already exists. Overwriting automatically due to --yes flag.")
        elif not typer.confirm(f"File '{output_name}' already exists. Overwrite?", default=False):
            reporter.warn("Generation cancelled")
            return

    if dry_run:
        _show_dry_run(project_path, output_path, generation_mode, file_exists, force, config, reporter)
        return

    try:
        if isinstance(generation_mode, AutoMode):
            generate_auto(project_path, output_path, config, reporter, auto_approve)
        elif isinstance(generation_mode, TemplateMode):
            generate_template(project_path, output_path, generation_mode.name, config, reporter, auto_approve)
        else:
            generate_instruct(project_path, output_path, generation_mode.file, config, reporter, auto_approve)
    except (WorkerError, TemplateError, GenerationError, OSError) as e:
        reporter.error(f"Error generating README: {e}")
        raise typer.Exit(1)

    maybe_auto_commit(config, project_path, output_path, generation_mode.label, reporter)
    reporter.success("\nThank you for using qmims!")
