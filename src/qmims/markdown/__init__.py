"""Markdown instruction scanning, extraction and file helpers."""

from qmims.markdown.extractor import extract_target_content
from qmims.markdown.files import (
    create_readme_file,
    find_readme_file,
    read_markdown_file,
    write_markdown_file,
)
from qmims.markdown.scanner import Instruction, parse_instructions

__all__ = [
    "Instruction",
    "parse_instructions",
    "extract_target_content",
    "read_markdown_file",
    "write_markdown_file",
    "find_readme_file",
    "create_readme_file",
]
