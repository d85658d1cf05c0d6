"""Build documents from flat token sequences or authoring descriptions."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from pydantic import ValidationError

from heading_tree.exceptions import DescriptionError
from heading_tree.ids import IdFactory, new_id
from heading_tree.placer import stack_attach
from heading_tree.repair import repair_in_place
from heading_tree.schemas import (
    Block,
    BlockDescription,
    Document,
    DocumentDescription,
    Heading,
    HeadingDescription,
    Token,
)

logger = logging.getLogger(__name__)


def build_from_flat_sequence(
    tokens: Iterable[Token], *, id_factory: IdFactory = new_id
) -> Document:
    """Build a document by STACK-ATTACH placement of ``tokens`` in order.

    Nodes are attached as given (not copied); a heading token's existing body is
    kept and later tokens nest after it.
    """
    document = Document()
    stack_attach(tokens, document=document, id_factory=id_factory)
    repair_in_place(document, id_factory=id_factory)
    return document


def build_document(
    description: DocumentDescription | dict[str, Any], *, id_factory: IdFactory = new_id
) -> Document:
    """Build a document from an authoring-tool description.

    Raises:
        DescriptionError: If ``description`` does not match the expected shape.
    """
    if not isinstance(description, DocumentDescription):
        try:
            description = DocumentDescription.model_validate(description)
        except ValidationError as exc:
            raise DescriptionError(f"Invalid document description: {exc}") from exc

    tokens = list(_flatten(description, id_factory))
    logger.debug(
        "Building document from description",
        extra={"document_name": description.document_name, "tokens": len(tokens)},
    )
    return build_from_flat_sequence(tokens, id_factory=id_factory)


def _flatten(description: DocumentDescription, id_factory: IdFactory) -> Iterator[Token]:
    for section in description.sections:
        heading = Heading(id=id_factory(), level=1, title=section.title)
        yield Token(level=1, node=heading)
        yield from _flatten_contents(section.contents, heading, id_factory)


def _flatten_contents(
    contents: list[HeadingDescription | BlockDescription],
    parent: Heading,
    id_factory: IdFactory,
) -> Iterator[Token]:
    # Entries are anchored to their described parent so that content following a
    # nested heading stays in the parent instead of sliding into that heading.
    for item in contents:
        if isinstance(item, HeadingDescription):
            heading = Heading(id=id_factory(), level=item.level, title=item.title)
            yield Token(level=item.level, node=heading, anchor=parent)
            yield from _flatten_contents(item.contents, heading, id_factory)
        else:
            yield Token(level=0, node=_block_from(item, id_factory), anchor=parent)


def _block_from(item: BlockDescription, id_factory: IdFactory) -> Block:
    content = item.content
    if isinstance(content, list):
        content = [_item_text(entry) for entry in content]
    return Block(id=id_factory(), type=item.type, content=content, attrs=item.attrs)


def _item_text(entry: Any) -> str:
    # List items are either plain strings or {"content": "..."} objects.
    if isinstance(entry, dict):
        return str(entry.get("content") or entry.get("text") or "")
    return str(entry)
