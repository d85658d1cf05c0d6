"""Authoring-tool document description models.

The description is the nested shape authoring tools and fixtures use to
describe a whole document::

    {
        "documentName": "Handbook",
        "sections": [
            {
                "title": "Intro",
                "contents": [
                    {"type": "paragraph", "content": "Hello"},
                    {"type": "heading", "level": 3, "title": "Details", "contents": []},
                ],
            }
        ],
    }
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class BlockDescription(BaseModel):
    """Any non-heading content entry (paragraph, orderedList, ...)."""

    model_config = ConfigDict(extra="allow")

    type: str
    content: str | list[Any] = ""
    attrs: dict[str, Any] = Field(default_factory=dict)


class HeadingDescription(BaseModel):
    """A nested heading entry."""

    type: Literal["heading"] = "heading"
    level: int = Field(..., ge=2, le=10)
    title: str
    contents: list[ContentDescription] = Field(default_factory=list)


def _content_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return "heading" if kind == "heading" else "block"


ContentDescription = Annotated[
    Union[
        Annotated[HeadingDescription, Tag("heading")],
        Annotated[BlockDescription, Tag("block")],
    ],
    Discriminator(_content_tag),
]

HeadingDescription.model_rebuild()


class SectionDescription(BaseModel):
    """A top-level section (always level 1)."""

    title: str = Field(..., min_length=1)
    contents: list[ContentDescription] = Field(default_factory=list)


class DocumentDescription(BaseModel):
    """A whole document as described by an authoring tool."""

    model_config = ConfigDict(populate_by_name=True)

    document_name: str = Field(..., alias="documentName", min_length=1)
    sections: list[SectionDescription] = Field(..., min_length=1)
