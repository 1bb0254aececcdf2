"""README template discovery.

Built-in templates ship inside the package (``qmims/template/builtin``). Custom
templates are registered by name in the configuration and point at files
anywhere on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from qmims.core.config import QmimsConfig

BUILTIN_DIR = Path(__file__).parent / "builtin"
BUILTIN_TEMPLATE_NAMES = ("basic", "detailed", "minimal", "library", "service")


class TemplateError(RuntimeError):
    """Raised for unknown, duplicate, or protected templates."""


@dataclass(frozen=True)
class Template:
    name: str
    path: Path
    is_built_in: bool


def builtin_templates() -> list[Template]:
    return [
        Template(name=name, path=BUILTIN_DIR / f"{name}.md", is_built_in=True)
        for name in BUILTIN_TEMPLATE_NAMES
    ]


def custom_templates(config: QmimsConfig) -> list[Template]:
    return [
        Template(name=name, path=Path(path), is_built_in=False)
        for name, path in sorted(config.custom_templates.items())
    ]


def list_templates(config: QmimsConfig) -> list[Template]:
    """Return built-in templates followed by custom ones."""
    return [*builtin_templates(), *custom_templates(config)]


def get_template(name: str, config: QmimsConfig) -> Template | None:
    for template in list_templates(config):
        if template.name == name:
            return template
    return None


def get_template_content(name: str, config: QmimsConfig) -> str:
    """Read a template's markdown.

    Raises:
        TemplateError: If the template is unknown or unreadable.
    """
    template = get_template(name, config)
    if template is None:
        raise TemplateError(f"Template '{name}' does not exist")
    try:
        return template.path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateError(f"Failed to read template '{name}': {e}") from e


def add_template(name: str, source_path: Path, config: QmimsConfig) -> Template:
    """Register ``source_path`` as custom template ``name`` in ``config``.

    The caller is responsible for saving the configuration.
    """
    if get_template(name, config) is not None:
        raise TemplateError(f"Template with name '{name}' already exists")
    source = Path(source_path).expanduser().resolve()
    if not source.is_file():
        raise TemplateError(f"Template source file '{source}' does not exist")

    config.custom_templates[name] = str(source)
    return Template(name=name, path=source, is_built_in=False)


def remove_template(name: str, config: QmimsConfig) -> None:
    """Unregister custom template ``name`` from ``config``."""
    template = get_template(name, config)
    if template is None:
        raise TemplateError(f"Template '{name}' does not exist")
    if template.is_built_in:
        raise TemplateError(f"Cannot remove built-in template '{name}'")
    del config.custom_templates[name]


__all__ = [
    "Template",
    "TemplateError",
    "BUILTIN_TEMPLATE_NAMES",
    "builtin_templates",
    "custom_templates",
    "list_templates",
    "get_template",
    "get_template_content",
    "add_template",
    "remove_template",
]
