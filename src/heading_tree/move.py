"""Move a heading subtree to a new position (outline/TOC reordering)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from heading_tree.exceptions import NodeNotFoundError
from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import splice_at
from heading_tree.repair import repair_in_place
from heading_tree.schemas import Document, EditResult, Heading, Token
from heading_tree.tree import body_of, clamp_level, contains, locate

logger = logging.getLogger(__name__)

DropPlacement = Literal["before", "after", "inside"]


@dataclass
class DropTarget:
    """Where a dragged heading is dropped.

    Attributes:
        target_id: Heading the drop is relative to.
        placement: ``before``/``after`` the target, or ``inside`` at the end
            of its body.
        level: Requested level for the moved heading. When omitted the level
            is re-derived from the drop context. ``after`` with a level deeper
            than the target's nests inside the target.
    """

    target_id: str
    placement: DropPlacement = "after"
    level: int | None = None


def move_heading(
    document: Document,
    heading_id: str,
    target: DropTarget,
    *,
    id_factory: IdFactory = new_id,
) -> EditResult:
    """Detach a heading subtree and re-insert it at ``target``.

    The moved heading keeps its id and body. Dropping a heading on itself or
    into its own subtree, an unknown placement or a non-integer level leaves
    the document untouched.

    Raises:
        NodeNotFoundError: If either id does not name a heading.
    """
    if not _is_acceptable(target):
        logger.debug("Ignoring invalid drop target", extra={"node_id": heading_id, "target": repr(target)})
        return EditResult(document=document, focus_id=heading_id, changed=False)

    working = document.model_copy(deep=True)
    source_location = locate(working, heading_id)
    source = source_location.node
    if not isinstance(source, Heading):
        raise NodeNotFoundError(f"Node {heading_id!r} is not a heading")
    if not isinstance(locate(working, target.target_id).node, Heading):
        raise NodeNotFoundError(f"Node {target.target_id!r} is not a heading")
    if contains(source, target.target_id):
        logger.debug(
            "Ignoring drop into own subtree",
            extra={"node_id": heading_id, "target_id": target.target_id},
        )
        return EditResult(document=document, focus_id=heading_id, changed=False)

    del body_of(working, source_location.container)[source_location.index]

    target_location = locate(working, target.target_id)
    anchor = target_location.node
    if not isinstance(anchor, Heading):
        raise NodeNotFoundError(f"Node {target.target_id!r} is not a heading")
    placement = target.placement
    if placement == "after" and target.level is not None and target.level > anchor.level:
        placement = "inside"

    if placement == "inside":
        path = [*target_location.path, anchor]
        index = len(anchor.body)
    else:
        path = list(target_location.path)
        index = target_location.index + (1 if placement == "after" else 0)

    # Only the moved heading is re-levelled; repair extracts children that no
    # longer sit deeper than it.
    if target.level is not None:
        source.level = clamp_level(target.level)
    elif source.level > 1:
        source.level = clamp_level((path[-1].level if path else 0) + 1)
    level = source.level
    tokens = [Token.of(source)]

    # Close the ancestors the moved heading cannot live in, dropping next to the
    # child that holds the target instead of splitting it.
    while path and path[-1].level >= level:
        child = path.pop()
        siblings = body_of(working, path[-1] if path else None)
        position = next(i for i, item in enumerate(siblings) if item is child)
        index = position + (0 if placement == "before" else 1)

    splice_at(working, path, index, tokens, id_factory=id_factory)
    repair_in_place(working, id_factory=id_factory)

    logger.debug(
        "Moved heading",
        extra={
            "node_id": heading_id,
            "target_id": target.target_id,
            "placement": placement,
            "level": level,
        },
    )
    return EditResult(document=working, focus_id=heading_id)


def _is_acceptable(target: DropTarget) -> bool:
    if target.placement not in ("before", "after", "inside"):
        return False
    if target.level is None:
        return True
    return isinstance(target.level, int) and not isinstance(target.level, bool)
