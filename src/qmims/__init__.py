"""qmims - README authoring with Amazon Q.

Commands:
    qmims generate [PATH]    Generate a README (auto, template or instruct mode)
    qmims edit [FILE]        Apply embedded <!-- qmims: ... --> instructions
    qmims config ...         Inspect and change the configuration
    qmims templates ...      Manage README templates
"""

from __future__ import annotations

from typing import Optional

import typer

from qmims.cli.commands import config_cmd, templates
from qmims.cli.commands.edit import edit
from qmims.cli.commands.generate import generate
from qmims.cli.ui import console

__version__ = "0.1.0"

app = typer.Typer(
    name="qmims",
    help="Generate and edit README files with Amazon Q.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"qmims {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Generate and edit README files with Amazon Q."""


app.command("generate")(generate)
app.command("edit")(edit)
app.add_typer(config_cmd.app, name="config")
app.add_typer(templates.app, name="templates")


def main():
    app()


if __name__ == "__main__":
    main()
