"""Change the level of one heading."""

from __future__ import annotations

import logging
from typing import Any

from heading_tree.config import MAX_LEVEL, MIN_LEVEL
from heading_tree.exceptions import NodeNotFoundError
from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import splice_at
from heading_tree.repair import repair_in_place
from heading_tree.schemas import Block, Document, EditResult, Heading, Token
from heading_tree.tree import Location, body_of, locate

logger = logging.getLogger(__name__)


def change_level(
    document: Document,
    heading_id: str,
    new_level: Any,
    *,
    id_factory: IdFactory = new_id,
) -> EditResult:
    """Set a heading's level and repair whatever the change broke.

    Levels above 10 are clamped to 10. Levels below 1 turn the heading into a
    paragraph that keeps the heading's id and title text; its former body
    follows the paragraph and is re-placed against the container. A
    non-integer ``new_level`` leaves the document untouched.

    Raises:
        NodeNotFoundError: If ``heading_id`` does not name a heading.
    """
    if isinstance(new_level, bool) or not isinstance(new_level, int):
        logger.debug("Ignoring non-integer level", extra={"node_id": heading_id, "level": repr(new_level)})
        return EditResult(document=document, focus_id=heading_id, changed=False)

    working = document.model_copy(deep=True)
    location = locate(working, heading_id)
    heading = location.node
    if not isinstance(heading, Heading):
        raise NodeNotFoundError(f"Node {heading_id!r} is not a heading")

    if new_level < MIN_LEVEL:
        _convert_to_block(working, location, heading, id_factory)
    else:
        level = min(new_level, MAX_LEVEL)
        if level == heading.level:
            return EditResult(document=document, focus_id=heading_id, changed=False)
        heading.level = level

    repair_in_place(working, id_factory=id_factory)
    return EditResult(document=working, focus_id=heading_id)


def _convert_to_block(
    document: Document, location: Location, heading: Heading, id_factory: IdFactory
) -> None:
    del body_of(document, location.container)[location.index]

    block = Block(id=heading.id, type="paragraph", content=heading.title)
    tokens = [Token.of(block), *(Token.of(item) for item in heading.body)]
    logger.debug(
        "Converting heading to paragraph",
        extra={"node_id": heading.id, "released_items": len(heading.body)},
    )
    splice_at(document, location.path, location.index, tokens, id_factory=id_factory)
