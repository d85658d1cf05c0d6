"""Paste and programmatic insertion of fragments."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import InsertionPoint, resolve_point, splice_at
from heading_tree.repair import repair_in_place
from heading_tree.schemas import Document, EditResult, Heading, Token
from heading_tree.tree import clamp_level, iter_nodes, node_ids, shift_levels

logger = logging.getLogger(__name__)


def adjust_levels(fragment: Sequence[Token], context: Sequence[Heading] = ()) -> list[Token]:
    """Shift fragment heading levels so the fragment fits under ``context``.

    ``context`` is the ancestor stack at the target position, shallowest first
    (empty for the document root). The shallowest fragment heading is moved to
    one level below the innermost context heading and every other heading,
    nested ones included, moves by the same amount, clamped to 1..10.

    Content before the first heading never influences the shift, and a
    fragment without headings is returned unchanged. A fragment whose
    shallowest heading is a level-1 section is never shifted: it is inserted as
    new root sections regardless of the caret depth.

    The input tokens are not modified; the result holds copies, and anchors
    that name a fragment heading are pointed at that heading's copy.
    """
    tokens = _copy_tokens(fragment)
    levels = [token.level for token in tokens if token.is_heading]
    if not levels:
        return tokens

    baseline = min(levels)
    if baseline == 1:
        return tokens

    floor = context[-1].level if context else 0
    shift = floor + 1 - baseline
    if not shift:
        return tokens

    for token in tokens:
        heading = token.node
        if not token.is_heading or not isinstance(heading, Heading):
            continue
        token.level = clamp_level(token.level + shift)
        heading.level = token.level
        for child in heading.children:
            shift_levels(child, shift)
    return tokens


def insert_fragment(
    document: Document,
    fragment: Iterable[Token],
    point: InsertionPoint | None = None,
    *,
    id_factory: IdFactory = new_id,
) -> EditResult:
    """Insert a clipboard or programmatic fragment at ``point``.

    Content after the caret in the innermost container follows the inserted
    content, the way a pasted heading splits the text it lands in. Fragment
    nodes whose ids already exist in the document get fresh ids.
    """
    fragment = list(fragment)
    if not fragment:
        return EditResult(document=document, focus_id=None, changed=False)

    working = document.model_copy(deep=True)
    path, index = resolve_point(working, point or InsertionPoint())
    tokens = adjust_levels(fragment, path)
    _refresh_ids(tokens, node_ids(working.sections), id_factory)

    placements = splice_at(working, path, index, tokens, split_tail=True, id_factory=id_factory)
    repair_in_place(working, id_factory=id_factory)

    logger.debug(
        "Inserted fragment",
        extra={
            "container_id": path[-1].id if path else None,
            "index": index,
            "tokens": len(tokens),
        },
    )
    return EditResult(document=working, focus_id=placements[-1].node_id)


def _copy_tokens(fragment: Sequence[Token]) -> list[Token]:
    copies: dict[int, Heading] = {}
    tokens = []
    for token in fragment:
        node = token.node.model_copy(deep=True)
        for original, copy in zip(iter_nodes([token.node]), iter_nodes([node])):
            if isinstance(copy, Heading):
                copies[id(original)] = copy
        tokens.append(Token(level=token.level, node=node))

    for token, original in zip(tokens, fragment):
        if original.anchor is not None:
            token.anchor = copies.get(id(original.anchor), original.anchor)
    return tokens


def _refresh_ids(tokens: list[Token], taken: set[str], id_factory: IdFactory) -> None:
    for node in iter_nodes(token.node for token in tokens):
        if node.id in taken:
            node.id = id_factory()
        taken.add(node.id)
