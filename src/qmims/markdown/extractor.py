"""Resolve the text an embedded instruction applies to."""

from __future__ import annotations

from qmims.markdown.scanner import (
    Instruction,
    is_blank,
    is_target_end,
    is_target_start,
    split_lines,
)


def _bounds_valid(instruction: Instruction, line_count: int) -> bool:
    if not instruction.has_target:
        return False
    start = instruction.target_start
    end = instruction.target_end
    return 1 <= start < end <= line_count


def _extract_between_markers(lines: list[str]) -> str | None:
    """Return the lines between the first start marker and the next end marker."""
    start_index: int | None = None
    for index, line in enumerate(lines):
        if start_index is None:
            if is_target_end(line):
                return None
            if is_target_start(line):
                start_index = index
        elif is_target_end(line):
            return "\n".join(lines[start_index + 1 : index])
    return None


def _extract_paragraph(lines: list[str], instruction_line: int) -> str | None:
    """Return the first paragraph after the 1-based ``instruction_line``."""
    index = instruction_line
    while index < len(lines) and is_blank(lines[index]):
        index += 1

    paragraph: list[str] = []
    while index < len(lines) and not is_blank(lines[index]):
        paragraph.append(lines[index])
        index += 1

    if not paragraph:
        return None
    return "\n".join(paragraph)


def extract_target_content(
    content: str | None,
    instruction: Instruction | None = None,
) -> str | None:
    """Extract the content governed by an instruction.

    With an instruction carrying valid target bounds, the enclosed lines are
    returned verbatim. Without an instruction, the document is scanned for the
    first ``qmims-target-start``/``qmims-target-end`` pair. With an instruction
    lacking usable bounds (absent, or out of range for ``content``), the first
    paragraph after the instruction comment is returned.

    Args:
        content: Markdown text, usually the same text the instruction was
            scanned from.
        instruction: Optional instruction to resolve.

    Returns:
        The extracted text joined with ``\\n``, or None when nothing can be
        extracted. Never raises.
    """
    if not content:
        return None

    lines = split_lines(content)

    if instruction is None:
        return _extract_between_markers(lines)

    if _bounds_valid(instruction, len(lines)):
        # target_start is the marker line; content runs through target_end
        return "\n".join(lines[instruction.target_start : instruction.target_end])

    return _extract_paragraph(lines, instruction.line_number)


__all__ = ["extract_target_content"]
