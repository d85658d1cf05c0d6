"""Heading tree models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class Block(BaseModel):
    """A non-heading content unit (paragraph, list, table, ...)."""

    kind: Literal["block"] = "block"
    id: str
    type: str = "paragraph"
    content: str | list[str] = ""
    attrs: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return "\n".join(self.content)

    @property
    def accepts_text(self) -> bool:
        """True if title text can be merged into this block."""
        return self.type == "paragraph" and isinstance(self.content, str)


class Heading(BaseModel):
    """A titled container node.

    ``level`` is deliberately unconstrained here: candidate trees produced in the
    middle of an edit may hold out-of-range levels, and the validator reports them.
    """

    kind: Literal["heading"] = "heading"
    id: str
    level: int
    title: str = ""
    body: list[Node] = Field(default_factory=list)

    @property
    def children(self) -> list[Heading]:
        """Direct child headings, in body order."""
        return [item for item in self.body if isinstance(item, Heading)]


Node = Annotated[Union[Block, Heading], Field(discriminator="kind")]

Heading.model_rebuild()


class Document(BaseModel):
    """An ordered sequence of sections."""

    sections: list[Heading] = Field(default_factory=list)


@dataclass
class Token:
    """One entry of a flat ``(level, node)`` sequence.

    Attributes:
        level: Heading level to place the node at; 0 for non-heading content.
        node: The heading (with whatever body it already carries) or block.
        anchor: Container a re-placed tail item came from. When that container
            is still open, the placer closes everything above it first.
    """

    level: int
    node: Heading | Block
    anchor: Heading | None = field(default=None, repr=False, compare=False)

    @classmethod
    def of(cls, node: Heading | Block, anchor: Heading | None = None) -> Token:
        # A heading always places as a heading; out-of-range levels are clamped by the placer.
        level = max(node.level, 1) if isinstance(node, Heading) else 0
        return cls(level=level, node=node, anchor=anchor)

    @property
    def is_heading(self) -> bool:
        return isinstance(self.node, Heading) and self.level > 0


@dataclass
class EditResult:
    """Outcome of an operator: the committed tree and the id the caret tracks."""

    document: Document
    focus_id: str | None
    changed: bool = True
