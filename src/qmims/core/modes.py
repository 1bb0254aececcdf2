"""Generation mode parsing.

``--mode`` accepts ``auto``, ``template[:name]`` or ``instruct[:file]``. The
string is resolved once, at the command boundary, into one of the mode
dataclasses below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from qmims.core.config import VALID_MODES


class InvalidModeError(ValueError):
    """Raised when a ``--mode`` string names an unknown mode."""


@dataclass(frozen=True)
class AutoMode:
    kind = "auto"

    @property
    def label(self) -> str:
        return self.kind


@dataclass(frozen=True)
class TemplateMode:
    name: str | None = None
    kind = "template"

    @property
    def label(self) -> str:
        return f"{self.kind}:{self.name}" if self.name else self.kind


@dataclass(frozen=True)
class InstructMode:
    file: str | None = None
    kind = "instruct"

    @property
    def label(self) -> str:
        return f"{self.kind}:{self.file}" if self.file else self.kind


GenerationMode = Union[AutoMode, TemplateMode, InstructMode]


def parse_mode(text: str) -> GenerationMode:
    """Parse a ``mode[:value]`` string.

    Only the first ``:`` separates the value, so Windows paths such as
    ``instruct:C:\\docs\\notes.md`` survive intact.

    Raises:
        InvalidModeError: If the mode part is not auto, template or instruct.
    """
    kind, _, value = text.strip().partition(":")
    kind = kind.strip().lower()
    value = value.strip() or None

    if kind not in VALID_MODES:
        raise InvalidModeError(
            f"Invalid mode '{kind}'. Must be 'auto', 'template', or 'instruct'"
        )
    if kind == "template":
        return TemplateMode(name=value)
    if kind == "instruct":
        return InstructMode(file=value)
    return AutoMode()


__all__ = [
    "AutoMode",
    "TemplateMode",
    "InstructMode",
    "GenerationMode",
    "InvalidModeError",
    "parse_mode",
]
