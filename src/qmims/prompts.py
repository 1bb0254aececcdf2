"""Prompt text handed to the Amazon Q worker."""

from __future__ import annotations

from pathlib import Path

from qmims.markdown.extractor import extract_target_content
from qmims.markdown.scanner import (
    INSTRUCTION_PATTERN,
    Instruction,
    is_target_end,
    is_target_start,
)

AUTO_PROMPT = (
    "Please analyze this project and generate a comprehensive README.md file. "
    "Include sections for project overview, installation, usage, and any other "
    "relevant information based on the project structure and code."
)

TEMPLATE_PROMPT = (
    "I've created a README.md file with a template structure. Please analyze this "
    "project and fill in the content for each section in the template. The template "
    "includes comments with instructions for each section."
)


def summarize_instruction(text: str, limit: int = 100) -> str:
    """Shorten ``text`` to ``limit`` characters, marking the cut with ``...``."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def _is_markup(line: str) -> bool:
    return is_target_start(line) or is_target_end(line) or INSTRUCTION_PATTERN.match(line) is not None


def format_instructions(instructions: list[Instruction], content: str) -> list[str]:
    """Render instructions as numbered lines, quoting the text each targets.

    qmims marker and directive lines are left out of the quoted text.
    """
    lines: list[str] = []
    for index, instruction in enumerate(instructions, start=1):
        lines.append(f"{index}. {instruction.instruction} (line {instruction.line_number})")
        target = extract_target_content(content, instruction)
        quoted = [line for line in (target or "").split("\n") if not _is_markup(line)]
        if any(line.strip() for line in quoted):
            lines.append("   Applies to:")
            lines.extend(f"   > {line}" for line in quoted)
    return lines


def build_auto_prompt(output_path: Path) -> str:
    return f"{AUTO_PROMPT} Write the result to {output_path} using the fs_write tool."


def build_template_prompt(output_path: Path) -> str:
    return f"{TEMPLATE_PROMPT} The file is {output_path}; update it in place using the fs_write tool."


def build_instruct_prompt(
    instructions: list[Instruction],
    content: str,
    output_path: Path,
) -> str:
    """Build a prompt listing every instruction and the text it targets.

    Args:
        instructions: Instructions scanned from ``content``.
        content: The markdown the instructions were scanned from.
        output_path: File the worker should write.
    """
    parts = [
        f"I have a README.md file at {output_path} that I'd like you to edit "
        "based on the following instructions:",
        "",
        *format_instructions(instructions, content),
        "",
    ]
    parts.append(
        f"Apply every instruction and write the complete updated file to {output_path} "
        "using the fs_write tool."
    )
    return "\n".join(parts)


def build_edit_prompt(
    file_path: Path,
    instructions: list[Instruction] | None = None,
    content: str = "",
) -> str:
    """Ask the worker to apply the embedded instructions of ``file_path``.

    When ``instructions`` are given they are listed after the request so the
    worker does not have to rediscover them.
    """
    prompt = (
        f"I need you to generate a new README.md file for {file_path}. First, read the "
        "existing file. Then, find any embedded instructions in HTML comments that start "
        "with <!-- qmims: -->. Create a completely new version of the README that "
        f"includes all the requested changes and write it to {file_path} using the "
        "fs_write tool. You MUST use fs_write to save the complete file content."
    )
    if not instructions:
        return prompt
    listing = "\n".join(format_instructions(instructions, content))
    return f"{prompt}\n\nThe file contains these instructions:\n{listing}"


__all__ = [
    "AUTO_PROMPT",
    "TEMPLATE_PROMPT",
    "summarize_instruction",
    "format_instructions",
    "build_auto_prompt",
    "build_template_prompt",
    "build_instruct_prompt",
    "build_edit_prompt",
]
