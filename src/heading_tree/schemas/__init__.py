"""Shared schemas for heading_tree."""

from heading_tree.schemas.description import (
    BlockDescription,
    DocumentDescription,
    HeadingDescription,
    SectionDescription,
)
from heading_tree.schemas.tree import Block, Document, EditResult, Heading, Node, Token

__all__ = [
    "Block",
    "BlockDescription",
    "Document",
    "DocumentDescription",
    "EditResult",
    "Heading",
    "HeadingDescription",
    "Node",
    "SectionDescription",
    "Token",
]
