"""Format heading trees into outline and Markdown outputs."""

from __future__ import annotations

from typing import Iterable

from heading_tree.config import NATIVE_HEADING_LEVELS
from heading_tree.schemas import Block, Document, Heading


def render_outline(document: Document) -> str:
    """Render the heading tree as an indented outline, one heading per line."""
    return "Sections:\n" + _create_sections_tree(document.sections)


def count_headings(sections: Iterable[Heading]) -> int:
    """Count total headings in the tree."""
    total = 0
    for section in sections:
        total += 1
        total += count_headings(section.children)
    return total


def render_markdown(document: Document) -> str:
    """Render the document as Markdown.

    Markdown has six heading levels. Deeper headings are written with six
    ``#`` and a ``{level=N}`` attribute so the exact level is not lost.
    """
    blocks: list[str] = []
    for section in document.sections:
        blocks.extend(_render_section(section))
    return "\n\n".join(block for block in blocks if block).strip()


def _render_section(section: Heading) -> list[str]:
    blocks: list[str] = []
    heading_prefix = "#" * min(section.level, NATIVE_HEADING_LEVELS)
    suffix = f" {{level={section.level}}}" if section.level > NATIVE_HEADING_LEVELS else ""
    blocks.append(f"{heading_prefix} {section.title}{suffix}".rstrip())
    for item in section.body:
        if isinstance(item, Heading):
            blocks.extend(_render_section(item))
        else:
            blocks.append(_render_block(item))
    return blocks


def _render_block(block: Block) -> str:
    if block.type == "bulletList" or block.type == "taskList":
        return "\n".join(f"- {item}" for item in _items(block))
    if block.type == "orderedList":
        return "\n".join(f"{number}. {item}" for number, item in enumerate(_items(block), start=1))
    if block.type == "codeBlock":
        return f"```\n{block.text}\n```"
    if block.type == "blockquote":
        return "\n".join(f"> {line}" for line in block.text.splitlines())
    if block.type == "horizontalRule":
        return "---"
    return block.text.strip()


def _items(block: Block) -> list[str]:
    return block.content if isinstance(block.content, list) else [block.content]


def _create_sections_tree(sections: list[Heading], indent: int = 0) -> str:
    lines: list[str] = []
    for section in sections:
        title = section.title or "Untitled"
        lines.append(" " * (indent * 4) + f"H{section.level} {title}")
        if section.children:
            lines.append(_create_sections_tree(section.children, indent + 1))
    return "\n".join(lines)
