"""Embedded instruction scanner.

Finds ``<!-- qmims: ... -->`` directives in markdown and records, for each one,
the explicit target block that immediately follows it (if any)::

    <!-- qmims: Summarize this content -->
    <!-- qmims-target-start -->
    This is the content to summarize.
    <!-- qmims-target-end -->

Association between a directive and a target block is positional only: the
first non-blank line after the directive must be the start marker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

INSTRUCTION_PATTERN = re.compile(r"^\s*<!--\s*qmims:\s*(.*?)\s*-->\s*$")
TARGET_START_PATTERN = re.compile(r"^\s*<!--\s*qmims-target-start\s*-->\s*$")
TARGET_END_PATTERN = re.compile(r"^\s*<!--\s*qmims-target-end\s*-->\s*$")


@dataclass(frozen=True)
class Instruction:
    """An authoring directive found in a markdown document.

    Attributes:
        instruction: Directive text with surrounding whitespace removed.
        line_number: 1-based line of the directive comment.
        target_start: 1-based line of the target start marker, if a target
            block follows the directive.
        target_end: 1-based line of the last content line inside the target
            block (the end marker sits on ``target_end + 1``).
    """

    instruction: str
    line_number: int
    target_start: int | None = None
    target_end: int | None = None

    @property
    def has_target(self) -> bool:
        return self.target_start is not None and self.target_end is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "instruction": self.instruction,
            "lineNumber": self.line_number,
        }
        if self.has_target:
            data["targetStart"] = self.target_start
            data["targetEnd"] = self.target_end
        return data


def split_lines(content: str) -> list[str]:
    """Split on ``\\n`` keeping a trailing ``\\r`` out of each line."""
    return [line.rstrip("\r") for line in content.split("\n")]


def is_blank(line: str) -> bool:
    return not line.strip()


def is_target_start(line: str) -> bool:
    return TARGET_START_PATTERN.match(line) is not None


def is_target_end(line: str) -> bool:
    return TARGET_END_PATTERN.match(line) is not None


def _find_target_block(lines: list[str], after: int) -> tuple[int, int] | None:
    """Locate the target block following the directive at index ``after``.

    Returns 1-based ``(target_start, target_end)`` or None.
    """
    index = after + 1
    while index < len(lines) and is_blank(lines[index]):
        index += 1

    if index >= len(lines) or not is_target_start(lines[index]):
        return None

    start_index = index
    index += 1
    while index < len(lines):
        if is_target_end(lines[index]):
            # target_end is the last enclosed line; an empty block encloses none
            if index - start_index < 2:
                return None
            return start_index + 1, index
        index += 1

    return None


def parse_instructions(content: str | None) -> list[Instruction]:
    """Scan markdown for embedded instructions in document order.

    Args:
        content: Raw markdown text. ``None`` and ``""`` are accepted.

    Returns:
        Instructions in the order their comments appear. Never raises on
        malformed markup; unmatched target markers simply produce no target.
    """
    if not content:
        return []

    lines = split_lines(content)
    instructions: list[Instruction] = []

    for index, line in enumerate(lines):
        match = INSTRUCTION_PATTERN.match(line)
        if match is None or not match.group(1):
            continue

        target = _find_target_block(lines, index)
        if target is None:
            instructions.append(Instruction(instruction=match.group(1), line_number=index + 1))
        else:
            instructions.append(
                Instruction(
                    instruction=match.group(1),
                    line_number=index + 1,
                    target_start=target[0],
                    target_end=target[1],
                )
            )

    return instructions


__all__ = [
    "Instruction",
    "INSTRUCTION_PATTERN",
    "TARGET_START_PATTERN",
    "TARGET_END_PATTERN",
    "parse_instructions",
    "split_lines",
    "is_blank",
    "is_target_start",
    "is_target_end",
]
