"""Tests for building documents from tokens and authoring descriptions."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import para, shape

from heading_tree.builder import build_document, build_from_flat_sequence
from heading_tree.exceptions import DescriptionError
from heading_tree.schemas import DocumentDescription, Heading, Token
from heading_tree.validator import is_valid


def _description(*contents: dict[str, Any]) -> dict[str, Any]:
    return {
        "documentName": "Handbook",
        "sections": [{"title": "Intro", "contents": list(contents)}],
    }


class TestBuildFromFlatSequence:
    """Tests for build_from_flat_sequence."""

    def test_is_deterministic(self) -> None:
        """The same tokens always give the same tree."""

        def tokens() -> list[Token]:
            return [
                Token(level=level, node=Heading(id=name, level=level, title=name))
                for level, name in [(1, "A"), (3, "B"), (5, "C"), (4, "D")]
            ]

        first = build_from_flat_sequence(tokens())
        second = build_from_flat_sequence(tokens())

        assert first == second
        assert shape(first) == [("A", 1, [("B", 3, [("C", 5, []), ("D", 4, [])])])]

    def test_result_is_valid(self, id_factory) -> None:
        """Arbitrary level sequences still build a valid tree."""
        levels = [4, 1, 9, 2, 2, 12, 0, 7, 1, 3]
        tokens = [Token(level=level, node=Heading(id=f"h{i}", level=1)) for i, level in enumerate(levels)]

        document = build_from_flat_sequence(tokens, id_factory=id_factory)

        assert is_valid(document)

    def test_leading_blocks_get_section(self, id_factory) -> None:
        """Content before the first heading is kept in an untitled section."""
        document = build_from_flat_sequence([Token.of(para("p"))], id_factory=id_factory)

        assert shape(document) == [("n1", 1, ["p"])]


class TestBuildDocument:
    """Tests for build_document."""

    def test_builds_nested_description(self, id_factory) -> None:
        """Content after a nested heading stays in the described parent."""
        description = _description(
            {"type": "paragraph", "content": "Hello"},
            {
                "type": "heading",
                "level": 3,
                "title": "Details",
                "contents": [{"type": "paragraph", "content": "Deep"}],
            },
            {"type": "paragraph", "content": "After"},
        )

        document = build_document(description, id_factory=id_factory)

        assert shape(document) == [("n1", 1, ["n2", ("n3", 3, ["n4"]), "n5"])]
        assert document.sections[0].title == "Intro"
        assert document.sections[0].body[1].title == "Details"

    def test_list_items_become_strings(self, id_factory) -> None:
        """List entries may be plain strings or objects with content."""
        description = _description(
            {"type": "orderedList", "content": [{"content": "one"}, "two"]},
        )

        document = build_document(description, id_factory=id_factory)

        block = document.sections[0].body[0]
        assert block.type == "orderedList"
        assert block.content == ["one", "two"]

    def test_shallow_nested_heading_is_placed_validly(self) -> None:
        """A described child no deeper than its parent is re-placed, not rejected."""
        description = _description(
            {
                "type": "heading",
                "level": 4,
                "title": "Outer",
                "contents": [{"type": "heading", "level": 2, "title": "Inner"}],
            },
        )

        document = build_document(description)

        assert is_valid(document)
        assert [child.title for child in document.sections[0].children] == ["Outer", "Inner"]

    def test_accepts_model_instance(self) -> None:
        """A validated description model is accepted as is."""
        description = DocumentDescription.model_validate(_description())

        document = build_document(description)

        assert [section.title for section in document.sections] == ["Intro"]

    @pytest.mark.parametrize(
        "description",
        [
            {"sections": [{"title": "Intro"}]},
            {"documentName": "Handbook", "sections": []},
            _description({"type": "heading", "level": 1, "title": "Nested section"}),
            _description({"type": "heading", "level": 11, "title": "Too deep"}),
            {"documentName": "Handbook", "sections": [{"title": ""}]},
        ],
    )
    def test_invalid_description_raises(self, description: dict[str, Any]) -> None:
        """Malformed descriptions are rejected with DescriptionError."""
        with pytest.raises(DescriptionError, match="Invalid document description"):
            build_document(description)
