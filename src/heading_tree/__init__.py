"""heading_tree: keep a ten-level heading hierarchy valid under editing."""

from heading_tree.builder import build_document, build_from_flat_sequence
from heading_tree.exceptions import (
    DescriptionError,
    HeadingTreeError,
    NodeNotFoundError,
    ParseError,
    RepairError,
)
from heading_tree.html_codec import (
    document_from_html,
    document_to_html,
    fragment_to_html,
    parse_html_fragment,
)
from heading_tree.level_change import change_level
from heading_tree.merge import delete_heading, merge_backward, merge_forward
from heading_tree.move import DropTarget, move_heading
from heading_tree.output_formatter import count_headings, render_markdown, render_outline
from heading_tree.paste import adjust_levels, insert_fragment
from heading_tree.placer import InsertionPoint, Placement, splice, stack_attach
from heading_tree.repair import repair
from heading_tree.schemas import Block, Document, DocumentDescription, EditResult, Heading, Token
from heading_tree.validator import Violation, ViolationKind, is_valid, validate

__all__ = [
    "Block",
    "DescriptionError",
    "Document",
    "DocumentDescription",
    "DropTarget",
    "EditResult",
    "Heading",
    "HeadingTreeError",
    "InsertionPoint",
    "NodeNotFoundError",
    "ParseError",
    "Placement",
    "RepairError",
    "Token",
    "Violation",
    "ViolationKind",
    "adjust_levels",
    "build_document",
    "build_from_flat_sequence",
    "change_level",
    "count_headings",
    "delete_heading",
    "document_from_html",
    "document_to_html",
    "fragment_to_html",
    "insert_fragment",
    "is_valid",
    "merge_backward",
    "merge_forward",
    "move_heading",
    "parse_html_fragment",
    "render_markdown",
    "render_outline",
    "repair",
    "splice",
    "stack_attach",
    "validate",
]
