"""Text-merge at heading boundaries (Backspace/Delete) and heading deletion."""

from __future__ import annotations

import logging

from heading_tree.exceptions import NodeNotFoundError
from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import splice_at
from heading_tree.repair import repair_in_place
from heading_tree.schemas import Block, Document, EditResult, Heading, Token
from heading_tree.tree import body_of, iter_nodes, locate

logger = logging.getLogger(__name__)


def merge_backward(
    document: Document, heading_id: str, *, id_factory: IdFactory = new_id
) -> EditResult:
    """Join a heading into the content before it (Backspace at title start).

    The title text is appended to the preceding paragraph, or to the preceding
    heading's title when the heading directly follows a title. When the
    preceding block cannot take text (a list, a table, ...) the title becomes a
    paragraph that keeps the heading's id. The heading's former body is then
    re-placed right after the merge point.

    The first node of the document has nothing to merge into; the document is
    returned unchanged.

    Raises:
        NodeNotFoundError: If ``heading_id`` does not name a heading.
    """
    working = document.model_copy(deep=True)
    location = locate(working, heading_id)
    heading = location.node
    if not isinstance(heading, Heading):
        raise NodeNotFoundError(f"Node {heading_id!r} is not a heading")

    previous = _previous_node(working, heading)
    if previous is None:
        logger.debug("Nothing to merge into", extra={"node_id": heading_id})
        return EditResult(document=document, focus_id=heading_id, changed=False)

    del body_of(working, location.container)[location.index]
    tokens = [Token.of(item) for item in heading.body]

    if isinstance(previous, Heading):
        previous.title += heading.title
        path = [*locate(working, previous.id).path, previous]
        index = 0
        focus_id = previous.id
    else:
        previous_location = locate(working, previous.id)
        path = previous_location.path
        index = previous_location.index + 1
        if previous.accepts_text:
            previous.content = previous.text + heading.title
            focus_id = previous.id
        else:
            tokens.insert(0, Token.of(Block(id=heading.id, content=heading.title)))
            focus_id = heading.id

    logger.debug(
        "Merged heading backward",
        extra={"node_id": heading_id, "into_id": previous.id, "released_items": len(tokens)},
    )
    splice_at(working, path, index, tokens, id_factory=id_factory)
    repair_in_place(working, id_factory=id_factory)
    return EditResult(document=working, focus_id=focus_id)


def merge_forward(
    document: Document, node_id: str, *, id_factory: IdFactory = new_id
) -> EditResult:
    """Join the heading that follows ``node_id`` into it (Delete at node end).

    Only a following heading is this engine's business; when the next node is
    plain content, or there is none, the document is returned unchanged.
    """
    order = list(iter_nodes(document.sections))
    position = next((i for i, node in enumerate(order) if node.id == node_id), None)
    if position is None:
        raise NodeNotFoundError(f"No node with id {node_id!r}")
    if position + 1 >= len(order) or not isinstance(order[position + 1], Heading):
        return EditResult(document=document, focus_id=node_id, changed=False)
    return merge_backward(document, order[position + 1].id, id_factory=id_factory)


def delete_heading(
    document: Document, heading_id: str, *, id_factory: IdFactory = new_id
) -> EditResult:
    """Remove a heading together with its whole subtree.

    The focus moves to the node that preceded the heading, if any.
    """
    working = document.model_copy(deep=True)
    location = locate(working, heading_id)
    heading = location.node
    if not isinstance(heading, Heading):
        raise NodeNotFoundError(f"Node {heading_id!r} is not a heading")

    previous = _previous_node(working, heading)
    del body_of(working, location.container)[location.index]
    repair_in_place(working, id_factory=id_factory)
    return EditResult(document=working, focus_id=previous.id if previous else None)


def _previous_node(document: Document, node: Heading | Block) -> Heading | Block | None:
    previous = None
    for candidate in iter_nodes(document.sections):
        if candidate is node:
            return previous
        previous = candidate
    return None
