"""STACK-ATTACH placement of flat ``(level, node)`` sequences.

The placer walks a token sequence while keeping the stack of headings that are
open at the current position. For a heading of level ``l`` every open frame
whose level is ``>= l`` is closed; the heading then becomes the last child of
the remaining top frame (or a new root section for level 1) and is pushed.
Non-heading content always lands in the top frame.

A region may start in the middle of a body. ``splice`` cuts the items that
follow the insertion point out of every open container and re-places them
after the new tokens, so document order is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from heading_tree.exceptions import NodeNotFoundError
from heading_tree.ids import IdFactory, new_id
from heading_tree.schemas import Block, Document, Heading, Token
from heading_tree.tree import clamp_level, locate

logger = logging.getLogger(__name__)


@dataclass
class InsertionPoint:
    """A caret position between two items of a body.

    Attributes:
        container_id: Heading whose body holds the position; None for the root.
        index: Item index inside that body; None for the end of the body.
    """

    container_id: str | None = None
    index: int | None = None


@dataclass
class Placement:
    """Where the placer attached one token."""

    node_id: str
    level: int
    parent_id: str | None


@dataclass
class _Frame:
    node: Heading
    index: int

    @property
    def level(self) -> int:
        return self.node.level


class Region:
    """An open insertion region: the root cursor and the frames open at it."""

    def __init__(
        self,
        document: Document,
        frames: list[_Frame],
        root_index: int,
        id_factory: IdFactory = new_id,
    ) -> None:
        self.document = document
        self.frames = frames
        self.root_index = root_index
        self.id_factory = id_factory

    def place(self, token: Token) -> Placement:
        if token.anchor is not None and self._is_open(token.anchor):
            while self.frames[-1].node is not token.anchor:
                self.frames.pop()

        if not token.is_heading:
            frame = self._content_frame()
            self._attach(frame, token.node)
            return Placement(node_id=token.node.id, level=0, parent_id=frame.node.id)

        node = token.node
        level = clamp_level(token.level)
        while self.frames and self.frames[-1].level >= level:
            self.frames.pop()

        if level > 1 and not self.frames:
            logger.debug(
                "Heading has no open section, coercing to level 1",
                extra={"node_id": node.id, "level": level},
            )
            level = 1

        node.level = level
        if level == 1:
            self.frames.clear()
            self.document.sections.insert(self.root_index, node)
            self.root_index += 1
            parent_id = None
        else:
            frame = self.frames[-1]
            self._attach(frame, node)
            parent_id = frame.node.id

        self.frames.append(_Frame(node=node, index=len(node.body)))
        return Placement(node_id=node.id, level=level, parent_id=parent_id)

    def place_all(self, tokens: Iterable[Token]) -> list[Placement]:
        return [self.place(token) for token in tokens]

    def _attach(self, frame: _Frame, node: Heading | Block) -> None:
        frame.node.body.insert(frame.index, node)
        frame.index += 1

    def _is_open(self, heading: Heading) -> bool:
        return any(frame.node is heading for frame in self.frames)

    def _content_frame(self) -> _Frame:
        if self.frames:
            return self.frames[-1]
        if self.root_index > 0:
            section = self.document.sections[self.root_index - 1]
            frame = _Frame(node=section, index=len(section.body))
        else:
            section = Heading(id=self.id_factory(), level=1)
            logger.debug("Synthesized section for leading content", extra={"node_id": section.id})
            self.document.sections.insert(self.root_index, section)
            self.root_index += 1
            frame = _Frame(node=section, index=0)
        self.frames.append(frame)
        return frame


def stack_attach(
    tokens: Iterable[Token],
    stack: Sequence[Heading] = (),
    *,
    document: Document | None = None,
    id_factory: IdFactory = new_id,
) -> list[Placement]:
    """Attach every token below its STACK-ATTACH parent.

    ``stack`` is the ambient ancestor path (shallowest first); its headings
    receive new children at the end of their bodies. Level-1 tokens are appended
    to ``document``. Both are mutated in place.
    """
    document = document if document is not None else Document()
    frames = [_Frame(node=heading, index=len(heading.body)) for heading in stack]
    region = Region(document, frames, len(document.sections), id_factory)
    return region.place_all(tokens)


def resolve_point(document: Document, point: InsertionPoint) -> tuple[list[Heading], int]:
    """Turn an InsertionPoint into the open heading path and a body index."""
    if point.container_id is None:
        path: list[Heading] = []
        items: list = document.sections
    else:
        location = locate(document, point.container_id)
        if not isinstance(location.node, Heading):
            raise NodeNotFoundError(f"Node {point.container_id!r} is not a heading")
        path = [*location.path, location.node]
        items = location.node.body

    index = len(items) if point.index is None else max(0, min(point.index, len(items)))
    return path, index


def splice(
    document: Document,
    point: InsertionPoint,
    tokens: Iterable[Token],
    *,
    split_tail: bool = False,
    id_factory: IdFactory = new_id,
) -> list[Placement]:
    """Place ``tokens`` at ``point``, re-placing the content that followed it."""
    path, index = resolve_point(document, point)
    return splice_at(document, path, index, tokens, split_tail=split_tail, id_factory=id_factory)


def splice_at(
    document: Document,
    path: list[Heading],
    index: int,
    tokens: Iterable[Token],
    *,
    split_tail: bool = False,
    id_factory: IdFactory = new_id,
) -> list[Placement]:
    """Place ``tokens`` at ``index`` of the body of ``path[-1]`` (root if empty).

    Items following the insertion point in every open container are cut and
    placed after ``tokens``. Tail items of shallower containers go back into
    their container while it is still open. The same holds for the innermost
    container unless ``split_tail`` is set, in which case its tail follows the
    last placed heading, like text after a caret that a new heading splits off.
    """
    if not path:
        region = Region(document, [], index, id_factory)
        return region.place_all(tokens)

    frames: list[_Frame] = []
    for depth, heading in enumerate(path):
        if depth == len(path) - 1:
            cut = index
        else:
            cut = _index_of(heading.body, path[depth + 1]) + 1
        frames.append(_Frame(node=heading, index=cut))

    tail: list[Token] = []
    for depth in reversed(range(len(path))):
        heading = path[depth]
        cut = frames[depth].index
        rest = heading.body[cut:]
        del heading.body[cut:]
        innermost = depth == len(path) - 1
        anchor = None if innermost and split_tail else heading
        tail.extend(Token.of(item, anchor=anchor) for item in rest)

    root_index = _index_of(document.sections, path[0]) + 1
    region = Region(document, frames, root_index, id_factory)
    placements = region.place_all(tokens)
    region.place_all(tail)
    return placements


def _index_of(items: list, node: Heading | Block) -> int:
    for index, item in enumerate(items):
        if item is node:
            return index
    raise NodeNotFoundError(f"Node {node.id!r} is not in the expected body")
