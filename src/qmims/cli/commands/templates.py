"""``qmims templates`` commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qmims.cli.helpers import load_config_or_exit
from qmims.cli.ui import Reporter, console
from qmims.core.config import save_config
from qmims.template import (
    TemplateError,
    add_template,
    get_template,
    get_template_content,
    list_templates,
    remove_template,
)

app = typer.Typer(
    name="templates",
    help="Manage README templates.",
    no_args_is_help=True,
)


@app.command("list")
def list_cmd() -> None:
    """List built-in and custom templates."""
    config = load_config_or_exit(Reporter())

    table = Table(title="README Templates", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Path")
    for template in list_templates(config):
        kind = "built-in" if template.is_built_in else "custom"
        table.add_row(template.name, kind, escape(str(template.path)))

    console.print(table)


@app.command("add")
def add_cmd(
    name: str = typer.Argument(..., help="Template name"),
    source: Path = typer.Argument(..., help="Markdown file to register"),
) -> None:
    """Register a markdown file as a custom template."""
    reporter = Reporter()
    config = load_config_or_exit(reporter)
    try:
        template = add_template(name, source, config)
    except TemplateError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    save_config(config)
    reporter.success(f"Added template '{escape(template.name)}' ({escape(str(template.path))})")


@app.command("remove")
def remove_cmd(name: str = typer.Argument(..., help="Custom template to remove")) -> None:
    """Unregister a custom template."""
    reporter = Reporter()
    config = load_config_or_exit(reporter)
    try:
        remove_template(name, config)
    except TemplateError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    save_config(config)
    reporter.success(f"Removed template '{escape(name)}'")


@app.command("show")
def show_cmd(name: str = typer.Argument(..., help="Template to display")) -> None:
    """Print a template's markdown."""
    reporter = Reporter()
    config = load_config_or_exit(reporter)
    try:
        content = get_template_content(name, config)
    except TemplateError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    template = get_template(name, config)
    kind = "built-in" if template is not None and template.is_built_in else "custom"
    console.print(Panel(escape(content), title=f"{name} ({kind})", border_style="cyan"))
