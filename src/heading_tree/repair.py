"""Auto-fix of HN-10 violations by extraction.

A heading that may not stay where it is gets spliced out of its container
together with every item that follows it there, and the run is re-placed with
STACK-ATTACH right after the container, against the ancestors above it. Nothing
is dropped and document order is kept; content only ever moves forward out of
a container, never backward.
"""

from __future__ import annotations

import logging
from typing import Sequence

from heading_tree.config import HN10_REPAIR_PASS_LIMIT, MAX_LEVEL, MIN_LEVEL
from heading_tree.exceptions import NodeNotFoundError, RepairError
from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import splice_at
from heading_tree.schemas import Document, Heading, Token
from heading_tree.tree import Location, clamp_level, locate
from heading_tree.validator import Violation, validate

logger = logging.getLogger(__name__)


def repair(document: Document, violations: Sequence[Violation] | None = None) -> Document:
    """Return a valid copy of ``document`` holding exactly the same nodes.

    ``violations`` defaults to ``validate(document)``.
    """
    repaired = document.model_copy(deep=True)
    repair_in_place(repaired, violations)
    return repaired


def repair_in_place(
    document: Document,
    violations: Sequence[Violation] | None = None,
    *,
    pass_limit: int = HN10_REPAIR_PASS_LIMIT,
    id_factory: IdFactory = new_id,
) -> int:
    """Repair ``document`` in place until it validates; return the passes used.

    Raises:
        RepairError: If the tree is still invalid after ``pass_limit`` passes.
    """
    pending = list(validate(document) if violations is None else violations)
    passes = 0
    while pending:
        if passes >= pass_limit:
            raise RepairError(
                f"Document still has {len(pending)} violation(s) after {passes} repair passes"
            )
        passes += 1
        seen: set[str] = set()
        for violation in pending:
            if violation.node_id in seen:
                continue
            seen.add(violation.node_id)
            _fix(document, violation.node_id, id_factory)
        pending = validate(document)
    return passes


def _fix(document: Document, node_id: str, id_factory: IdFactory) -> None:
    try:
        location = locate(document, node_id)
    except NodeNotFoundError:
        return
    heading = location.node
    if not isinstance(heading, Heading):
        return

    if not MIN_LEVEL <= heading.level <= MAX_LEVEL:
        logger.debug("Clamping out-of-range level", extra={"node_id": node_id, "level": heading.level})
        heading.level = clamp_level(heading.level)

    container = location.container
    if container is None:
        if heading.level > MIN_LEVEL:
            logger.debug("Promoting root heading to section", extra={"node_id": node_id, "level": heading.level})
            heading.level = MIN_LEVEL
        return

    if heading.level <= max(container.level, MIN_LEVEL):
        _extract(document, location, container, id_factory)


def _extract(
    document: Document, location: Location, container: Heading, id_factory: IdFactory
) -> None:
    run = container.body[location.index :]
    del container.body[location.index :]

    parent_path = location.path[:-1]
    siblings = parent_path[-1].body if parent_path else document.sections
    index = next(i for i, item in enumerate(siblings) if item is container) + 1

    logger.debug(
        "Extracting heading out of its container",
        extra={
            "node_id": location.node.id,
            "container_id": container.id,
            "moved_items": len(run),
        },
    )
    splice_at(document, parent_path, index, [Token.of(item) for item in run], id_factory=id_factory)
