"""Template discovery helpers."""

from .manager import (
    Template,
    TemplateError,
    add_template,
    get_template,
    get_template_content,
    list_templates,
    remove_template,
)

__all__ = [
    "Template",
    "TemplateError",
    "add_template",
    "get_template",
    "get_template_content",
    "list_templates",
    "remove_template",
]
