"""Tree model helpers: lookup, paths, walking and level arithmetic."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from heading_tree.config import MAX_LEVEL, MIN_LEVEL
from heading_tree.exceptions import NodeNotFoundError
from heading_tree.schemas import Block, Document, Heading


@dataclass
class Location:
    """Where a node sits in a document.

    Attributes:
        node: The located node.
        path: Ancestor headings, shallowest first (empty for a root section).
        index: Position of ``node`` inside its container's body.
    """

    node: Heading | Block
    path: list[Heading]
    index: int

    @property
    def container(self) -> Heading | None:
        return self.path[-1] if self.path else None


def clamp_level(level: int) -> int:
    """Clamp a heading level into the HN-10 range."""
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def body_of(document: Document, container: Heading | None) -> list:
    """Return the mutable item list of ``container`` (the root when None)."""
    if container is None:
        return document.sections
    return container.body


def iter_nodes(items: Iterable[Heading | Block]) -> Iterator[Heading | Block]:
    """Yield every node under ``items`` in document order."""
    for item in items:
        yield item
        if isinstance(item, Heading):
            yield from iter_nodes(item.body)


def iter_headings(document: Document) -> Iterator[Heading]:
    for node in iter_nodes(document.sections):
        if isinstance(node, Heading):
            yield node


def walk(document: Document) -> Iterator[Location]:
    """Yield a Location for every node in document order."""

    def _walk(items: Sequence[Heading | Block], path: list[Heading]) -> Iterator[Location]:
        for index, item in enumerate(items):
            yield Location(node=item, path=path, index=index)
            if isinstance(item, Heading):
                yield from _walk(item.body, [*path, item])

    yield from _walk(document.sections, [])


def locate(document: Document, node_id: str) -> Location:
    """Find a node by id.

    Raises:
        NodeNotFoundError: If no node carries ``node_id``.
    """
    for location in walk(document):
        if location.node.id == node_id:
            return location
    raise NodeNotFoundError(f"No node with id {node_id!r}")


def find_heading(document: Document, heading_id: str) -> Heading:
    node = locate(document, heading_id).node
    if not isinstance(node, Heading):
        raise NodeNotFoundError(f"Node {heading_id!r} is not a heading")
    return node


def node_ids(items: Iterable[Heading | Block]) -> set[str]:
    return {node.id for node in iter_nodes(items)}


def contains(heading: Heading, node_id: str) -> bool:
    """True if ``node_id`` is ``heading`` itself or anywhere in its subtree."""
    return heading.id == node_id or node_id in node_ids(heading.body)


def shift_levels(heading: Heading, delta: int) -> None:
    """Shift ``heading`` and every heading nested in it by ``delta``, clamped."""
    if not delta:
        return
    heading.level = clamp_level(heading.level + delta)
    for child in heading.children:
        shift_levels(child, delta)


def content_fingerprint(document: Document) -> Counter:
    """Multiset of every node's identity and payload, ignoring structure.

    Two documents with the same fingerprint hold the same headings (by id and
    title) and the same blocks (by id, type and content), wherever they sit.
    """
    fingerprint: Counter = Counter()
    for node in iter_nodes(document.sections):
        if isinstance(node, Heading):
            fingerprint[("heading", node.id, node.title)] += 1
        else:
            fingerprint[("block", node.id, node.type, node.text)] += 1
    return fingerprint
