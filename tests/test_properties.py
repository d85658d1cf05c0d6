"""Invariant closure and content preservation across every operator."""

from __future__ import annotations

import itertools

import pytest
from conftest import heading, para, shape

from heading_tree.builder import build_from_flat_sequence
from heading_tree.html_codec import fragment_to_html, parse_html_fragment
from heading_tree.level_change import change_level
from heading_tree.move import DropTarget, move_heading
from heading_tree.paste import insert_fragment
from heading_tree.placer import InsertionPoint
from heading_tree.repair import repair
from heading_tree.schemas import Document, Token
from heading_tree.tree import content_fingerprint, find_heading, iter_headings, node_ids, walk
from heading_tree.validator import is_valid


def _document() -> Document:
    return Document(
        sections=[
            heading(
                "S",
                1,
                para("p1"),
                heading("A", 3, para("pa"), heading("B", 6, heading("C", 9, para("pc"))), heading("D", 4)),
                heading("E", 2, para("pe")),
            ),
            heading("T", 1, heading("F", 5), para("pt")),
        ]
    )


HEADING_IDS = [h.id for h in iter_headings(_document())]
POINTS = [InsertionPoint(None, 0), InsertionPoint(None, 1), InsertionPoint(None)] + [
    InsertionPoint(heading_id, index) for heading_id in HEADING_IDS for index in (0, 1, None)
]


def _order(document: Document) -> list[str]:
    return [location.node.id for location in walk(document)]


class TestLevelChangeProperties:
    """Every level change on every heading commits a valid tree."""

    @pytest.mark.parametrize("heading_id", HEADING_IDS)
    @pytest.mark.parametrize("level", range(-1, 13))
    def test_valid_and_content_preserving(self, heading_id: str, level: int) -> None:
        """Nodes, titles and document order survive any level change."""
        document = _document()

        result = change_level(document, heading_id, level)

        assert is_valid(result.document)
        existing = node_ids(document.sections)
        assert [node_id for node_id in _order(result.document) if node_id in existing] == _order(document)
        if level >= 1:
            assert content_fingerprint(result.document) == content_fingerprint(document)


class TestMoveProperties:
    """Every move commits a valid tree holding the same nodes."""

    @pytest.mark.parametrize(
        ("heading_id", "target_id"),
        [pair for pair in itertools.permutations(HEADING_IDS, 2)],
    )
    @pytest.mark.parametrize("placement", ["before", "after", "inside"])
    def test_valid_and_content_preserving(self, heading_id: str, target_id: str, placement: str) -> None:
        """The moved subtree and everything else survive intact."""
        document = _document()

        result = move_heading(document, heading_id, DropTarget(target_id, placement))

        assert is_valid(result.document)
        assert content_fingerprint(result.document) == content_fingerprint(document)

    @pytest.mark.parametrize("level", [1, 2, 5, 10])
    def test_explicit_levels_stay_valid(self, level: int) -> None:
        """Explicit drop levels never break the hierarchy."""
        document = _document()

        for target_id in ["S", "D", "F"]:
            result = move_heading(document, "B", DropTarget(target_id, "after", level=level))
            assert is_valid(result.document)
            assert content_fingerprint(result.document) == content_fingerprint(document)


class TestPasteProperties:
    """Pasting anywhere commits a valid tree that keeps existing content."""

    @pytest.mark.parametrize("point", POINTS)
    @pytest.mark.parametrize("levels", [(1,), (2, 2), (3, 5), (1, 4, 2), (9, 10, 8)])
    def test_valid_and_content_preserving(self, point: InsertionPoint, levels: tuple[int, ...]) -> None:
        """Existing nodes stay, in their original relative order."""
        document = _document()
        fragment = [Token.of(heading(f"f{i}", level, para(f"fp{i}"))) for i, level in enumerate(levels)]

        result = insert_fragment(document, fragment, point)

        assert is_valid(result.document)
        assert content_fingerprint(document) <= content_fingerprint(result.document)
        existing = node_ids(document.sections)
        assert [node_id for node_id in _order(result.document) if node_id in existing] == _order(document)

    @pytest.mark.parametrize("point", POINTS)
    def test_anchored_fragment_keeps_its_nesting(self, point: InsertionPoint) -> None:
        """Parsed nested markup lands in order, with content after a child heading kept in its parent."""
        copied = fragment_to_html([heading("X", 3, heading("Y", 5, para("y1")), para("x1"))])
        document = _document()

        result = insert_fragment(document, parse_html_fragment(copied), point)

        assert is_valid(result.document)
        existing = node_ids(document.sections)
        assert [node_id for node_id in _order(result.document) if node_id in existing] == _order(document)
        assert [node_id for node_id in _order(result.document) if node_id in {"X", "Y", "y1", "x1"}] == [
            "X",
            "Y",
            "y1",
            "x1",
        ]
        x = find_heading(result.document, "X")
        if find_heading(result.document, "Y").level > x.level:
            assert [item.id for item in x.body[:2]] == ["Y", "x1"]

    def test_section_paste_lands_at_root(self) -> None:
        """A fragment led by H1 always produces root sections."""
        result = insert_fragment(_document(), [Token.of(heading("N", 1))], InsertionPoint("C", 1))

        assert "N" in [section.id for section in result.document.sections]


class TestRepairProperties:
    """Repair is idempotent and keeps content on arbitrary candidate trees."""

    @pytest.mark.parametrize(
        "levels",
        [
            (1, 1, 1, 1),
            (5, 4, 3, 2),
            (0, 11, -3, 2),
            (2, 10, 10, 1),
            (3, 3, 12, 0),
        ],
    )
    def test_idempotent_and_content_preserving(self, levels: tuple[int, ...]) -> None:
        """One repair reaches a fixed point."""
        a, b, c, d = levels
        document = Document(
            sections=[
                heading(
                    "S",
                    1,
                    heading("A", a, para("pa"), heading("B", b, heading("C", c, para("pc")))),
                    heading("D", d, para("pd")),
                )
            ]
        )

        once = repair(document)

        assert is_valid(once)
        assert repair(once) == once
        assert content_fingerprint(once) == content_fingerprint(document)
        assert _order(once) == _order(document)


class TestStackAttachExample:
    """The worked example of the placement rule."""

    def test_d_nests_under_b(self) -> None:
        """[(1,A),(3,B),(5,C),(4,D)] puts D under B, after C."""
        document = build_from_flat_sequence(
            [Token.of(heading(name, level)) for level, name in [(1, "A"), (3, "B"), (5, "C"), (4, "D")]]
        )

        assert shape(document) == [("A", 1, [("B", 3, [("C", 5, []), ("D", 4, [])])])]
