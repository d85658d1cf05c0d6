"""Test setup for heading_tree."""

from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from heading_tree.schemas import Block, Document, Heading  # noqa: E402


def heading(node_id: str, level: int, *body: Heading | Block, title: str | None = None) -> Heading:
    """Shorthand for a heading whose title defaults to its id."""
    return Heading(id=node_id, level=level, title=node_id if title is None else title, body=list(body))


def para(node_id: str, text: str | None = None) -> Block:
    """Shorthand for a paragraph whose text defaults to its id."""
    return Block(id=node_id, content=node_id if text is None else text)


def shape(document: Document) -> list:
    """Structure as nested ``(id, level, [children...])`` tuples; blocks as ids."""

    def _shape(node: Heading | Block):
        if isinstance(node, Heading):
            return (node.id, node.level, [_shape(item) for item in node.body])
        return node.id

    return [_shape(section) for section in document.sections]


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic id generator: n1, n2, ..."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def simple_document() -> Document:
    """S(1) > [p1, A(2) > [p2, B(3) > [p3]], C(2)] ; T(1) > [p4]."""
    return Document(
        sections=[
            heading(
                "S",
                1,
                para("p1"),
                heading("A", 2, para("p2"), heading("B", 3, para("p3"))),
                heading("C", 2),
            ),
            heading("T", 1, para("p4")),
        ]
    )
