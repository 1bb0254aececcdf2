"""``qmims config`` commands."""

from __future__ import annotations

from typing import Any

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qmims.cli.ui import Reporter, console
from qmims.core.config import (
    ConfigError,
    QmimsConfig,
    VALID_MODES,
    coerce_value,
    delete_value,
    get_config_path,
    get_value,
    load_config,
    load_config_data,
    resolved_config_data,
    save_config,
    save_config_data,
    set_value,
)

app = typer.Typer(
    name="config",
    help="Manage qmims configuration.",
    no_args_is_help=True,
)


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            rows.extend(_flatten(value, f"{dotted}."))
        else:
            rows.append((dotted, value))
    return rows


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None or value == {}:
        return "[dim](not set)[/dim]"
    return escape(str(value))


@app.command("list")
def list_cmd() -> None:
    """Show the current configuration."""
    reporter = Reporter()
    try:
        data = resolved_config_data()
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    table = Table(title="qmims Configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in _flatten(data):
        table.add_row(key, _format_value(value))

    console.print(table)
    console.print(f"[dim]Config file: {get_config_path()}[/dim]")


@app.command("get")
def get_cmd(key: str = typer.Argument(..., help="Dotted key, e.g. defaults.mode")) -> None:
    """Print one configuration value."""
    reporter = Reporter()
    try:
        value = get_value(resolved_config_data(), key)
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    if isinstance(value, dict):
        for sub_key, sub_value in _flatten(value, f"{key}."):
            reporter.line(f"{sub_key} = {_format_value(sub_value)}")
        return
    reporter.line(f"{escape(key)} = {_format_value(value)}")


@app.command("set")
def set_cmd(
    key: str = typer.Argument(..., help="Dotted key, e.g. q.autoApproveEdits"),
    value: str = typer.Argument(..., help="New value; true/false and numbers are converted"),
) -> None:
    """Set a configuration value."""
    reporter = Reporter()
    try:
        data = load_config_data()
        set_value(data, key, coerce_value(value))
        QmimsConfig.from_dict(data)
        save_config_data(data)
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    reporter.success(f"Set {escape(key)} = {escape(value)}")


@app.command("delete")
def delete_cmd(key: str = typer.Argument(..., help="Dotted key to remove")) -> None:
    """Remove a configuration value so its default applies again."""
    reporter = Reporter()
    try:
        data = load_config_data()
        delete_value(data, key)
        save_config_data(data)
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    reporter.success(f"Deleted {escape(key)}")


@app.command("setup")
def setup_cmd() -> None:
    """Interactively write a configuration file."""
    reporter = Reporter()
    try:
        config = load_config()
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            "Answer a few questions to configure qmims.\nPress Enter to keep the current value.",
            title="qmims setup",
            border_style="cyan",
        )
    )

    config.user.name = typer.prompt("Your name", default=config.user.name or "", show_default=bool(config.user.name)) or None
    config.user.email = typer.prompt("Your email", default=config.user.email or "", show_default=bool(config.user.email)) or None

    mode = typer.prompt(f"Default mode ({', '.join(VALID_MODES)})", default=config.defaults.mode)
    while mode not in VALID_MODES:
        reporter.error(f"Invalid mode '{mode}'. Must be one of: {', '.join(VALID_MODES)}")
        mode = typer.prompt(f"Default mode ({', '.join(VALID_MODES)})", default=config.defaults.mode)
    config.defaults.mode = mode

    if mode == "template":
        config.defaults.template_name = typer.prompt(
            "Default template", default=config.defaults.template_name or "basic"
        )
    config.defaults.output_file_name = typer.prompt(
        "Default output file name", default=config.defaults.output_file_name
    )

    config.q.auto_approve_edits = typer.confirm(
        "Automatically approve Amazon Q edits?", default=config.q.auto_approve_edits
    )
    config.auto_commit.enabled = typer.confirm(
        "Commit generated files to git automatically?", default=config.auto_commit.enabled
    )

    path = save_config(config)
    reporter.success(f"Configuration saved to {path}")
