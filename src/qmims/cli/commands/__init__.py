"""CLI command modules for qmims.

``generate`` and ``edit`` are plain command functions registered on the root
app; ``config`` and ``templates`` are Typer sub-apps.
"""

from . import config_cmd, edit, generate, templates

__all__ = ["config_cmd", "edit", "generate", "templates"]
