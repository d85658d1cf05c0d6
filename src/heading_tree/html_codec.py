"""HTML serialization and clipboard fragment parsing.

Headings are written as::

    <div class="heading" data-id="..." level="8">
      <h6 class="title" data-level="8">Title</h6>
      <div class="contents">...</div>
    </div>

Only ``h1``-``h6`` exist in markup, so the exact level always travels in
``data-level``; levels 7-10 depend on it to round-trip. When reading, the
level comes from ``data-level``, then ``aria-level`` on ``role="heading"``
elements, then the tag name.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from heading_tree.config import MIN_LEVEL, NATIVE_HEADING_LEVELS
from heading_tree.exceptions import ParseError
from heading_tree.ids import IdFactory, new_id
from heading_tree.schemas import Block, Document, Heading, Token

try:
    from bs4 import BeautifulSoup
    from bs4.element import Comment, NavigableString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise ParseError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_HEADING_RE = re.compile(r"^h[1-6]$")
_WHITESPACE_RE = re.compile(r"\s+")

_LIST_TAGS = {"ul": "bulletList", "ol": "orderedList"}
_BLOCK_TAGS = {"p", "ul", "ol", "pre", "blockquote", "table", "hr", "img", "figure"}
_UNWANTED_TAGS = ["script", "style", "noscript", "link", "meta", "template"]


# === Serialization ===


def document_to_html(document: Document) -> str:
    """Serialize a whole document."""
    return fragment_to_html(document.sections)


def fragment_to_html(nodes: Iterable[Heading | Block]) -> str:
    """Serialize headings and blocks, keeping exact heading levels."""
    soup = BeautifulSoup("", "lxml")
    return "".join(str(_node_tag(soup, node)) for node in nodes)


def _node_tag(soup: BeautifulSoup, node: Heading | Block) -> Tag:
    if isinstance(node, Heading):
        return _heading_tag(soup, node)
    return _block_tag(soup, node)


def _heading_tag(soup: BeautifulSoup, heading: Heading) -> Tag:
    wrapper = soup.new_tag(
        "div", attrs={"class": "heading", "data-id": heading.id, "level": str(heading.level)}
    )
    name = f"h{max(MIN_LEVEL, min(heading.level, NATIVE_HEADING_LEVELS))}"
    wrapper.append(_text_tag(soup, name, heading.title, {"class": "title", "data-level": str(heading.level)}))
    contents = soup.new_tag("div", attrs={"class": "contents"})
    for item in heading.body:
        contents.append(_node_tag(soup, item))
    wrapper.append(contents)
    return wrapper


def _block_tag(soup: BeautifulSoup, block: Block) -> Tag:
    attrs = {"data-id": block.id}
    items = block.content if isinstance(block.content, list) else [block.content]

    if block.type in ("bulletList", "orderedList", "taskList"):
        if block.type == "taskList":
            attrs["data-type"] = block.type
        tag = soup.new_tag("ol" if block.type == "orderedList" else "ul", attrs=attrs)
        for item in items:
            tag.append(_text_tag(soup, "li", item))
        return tag
    if block.type == "codeBlock":
        tag = soup.new_tag("pre", attrs=attrs)
        tag.append(_text_tag(soup, "code", block.text))
        return tag
    if block.type == "blockquote":
        return _text_tag(soup, "blockquote", block.text, attrs)
    if block.type == "table":
        tag = soup.new_tag("table", attrs=attrs)
        for row in items:
            tr = soup.new_tag("tr")
            tr.append(_text_tag(soup, "td", row))
            tag.append(tr)
        return tag
    if block.type == "paragraph":
        return _text_tag(soup, "p", block.text, attrs)
    attrs["data-type"] = block.type
    return _text_tag(soup, "div", block.text, attrs)


def _text_tag(soup: BeautifulSoup, name: str, text: str, attrs: dict[str, str] | None = None) -> Tag:
    tag = soup.new_tag(name, attrs=attrs or {})
    if text:
        tag.string = text
    return tag


# === Parsing ===


def parse_html_fragment(html: str, *, id_factory: IdFactory = new_id) -> list[Token]:
    """Turn clipboard or stored HTML into a flat ``(level, node)`` sequence.

    Wrapper elements are flattened. Headings produced by ``document_to_html``
    keep their ids, and their contents stay anchored to them. Empty blocks at
    both ends of the fragment are dropped.
    """
    if not isinstance(html, str):
        raise ParseError(f"Expected an HTML string, got {type(html).__name__}")

    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_UNWANTED_TAGS):
        tag.decompose()
    root = soup.body or soup

    tokens = list(_tokens_from_children(root, anchor=None, id_factory=id_factory))
    return _trim_empty(tokens)


def document_from_html(html: str, *, id_factory: IdFactory = new_id) -> Document:
    """Parse stored HTML back into a valid document."""
    from heading_tree.builder import build_from_flat_sequence

    return build_from_flat_sequence(parse_html_fragment(html, id_factory=id_factory), id_factory=id_factory)


def _tokens_from_children(
    container: Tag, *, anchor: Heading | None, id_factory: IdFactory
) -> Iterator[Token]:
    for child in container.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            text = _normalize_text(str(child))
            if text:
                yield Token(level=0, node=Block(id=id_factory(), content=text), anchor=anchor)
            continue
        if not isinstance(child, Tag):
            continue
        yield from _tokens_from_tag(child, anchor=anchor, id_factory=id_factory)


def _tokens_from_tag(tag: Tag, *, anchor: Heading | None, id_factory: IdFactory) -> Iterator[Token]:
    if "heading" in tag.get("class", []):
        title = tag.find(_is_heading_tag, recursive=False)
        if title is not None:
            token = _heading_token(title, fallback_id=tag.get("data-id"), id_factory=id_factory)
            token.anchor = anchor
            yield token
            contents = tag.find("div", class_="contents", recursive=False)
            if contents is not None and isinstance(token.node, Heading):
                yield from _tokens_from_children(contents, anchor=token.node, id_factory=id_factory)
            return

    if _is_heading_tag(tag):
        token = _heading_token(tag, fallback_id=None, id_factory=id_factory)
        token.anchor = anchor
        yield token
        return

    if tag.name in _BLOCK_TAGS:
        yield Token(level=0, node=_block_from_tag(tag, id_factory), anchor=anchor)
        return

    if tag.find(_is_block_or_heading) is None:
        # Inline-only wrapper (a bare <span>, <b>, <a>): one paragraph.
        text = _normalize_text(tag.get_text(" ", strip=True))
        if text:
            yield Token(level=0, node=Block(id=id_factory(), content=text), anchor=anchor)
        return

    # Layout wrappers (<div>, <section>, Google Docs' outer <b>, ...).
    yield from _tokens_from_children(tag, anchor=anchor, id_factory=id_factory)


def _heading_token(tag: Tag, *, fallback_id: str | None, id_factory: IdFactory) -> Token:
    level = _heading_level(tag)
    node_id = tag.get("data-id") or fallback_id or id_factory()
    title = _normalize_text(tag.get_text(" ", strip=True))
    if level < MIN_LEVEL:
        return Token(level=0, node=Block(id=node_id, content=title))
    return Token(level=level, node=Heading(id=node_id, level=level, title=title))


def _heading_level(tag: Tag) -> int:
    for attr in ("data-level", "aria-level", "level"):
        value = tag.get(attr)
        if value is not None and str(value).strip().lstrip("-").isdigit():
            return int(value)
    match = _HEADING_RE.match(tag.name or "")
    if match:
        return int(tag.name[1])
    return MIN_LEVEL


def _block_from_tag(tag: Tag, id_factory: IdFactory) -> Block:
    node_id = tag.get("data-id") or id_factory()
    if tag.name in _LIST_TAGS:
        block_type = tag.get("data-type") or _LIST_TAGS[tag.name]
        items = [_normalize_text(li.get_text(" ", strip=True)) for li in tag.find_all("li")]
        return Block(id=node_id, type=block_type, content=items)
    if tag.name == "pre":
        return Block(id=node_id, type="codeBlock", content=tag.get_text())
    if tag.name == "blockquote":
        return Block(id=node_id, type="blockquote", content=_normalize_text(tag.get_text(" ", strip=True)))
    if tag.name == "table":
        rows = [
            " | ".join(_normalize_text(cell.get_text(" ", strip=True)) for cell in row.find_all(["td", "th"]))
            for row in tag.find_all("tr")
        ]
        return Block(id=node_id, type="table", content=rows)
    if tag.name == "hr":
        return Block(id=node_id, type="horizontalRule")
    if tag.name in ("img", "figure"):
        image = tag if tag.name == "img" else tag.find("img")
        attrs = {"src": image.get("src", ""), "alt": image.get("alt", "")} if image else {}
        return Block(id=node_id, type="image", attrs=attrs)
    return Block(id=node_id, content=_normalize_text(tag.get_text(" ", strip=True)))


def _is_heading_tag(tag: Tag) -> bool:
    if not isinstance(tag, Tag):
        return False
    if _HEADING_RE.match(tag.name or ""):
        return True
    return tag.get("role") == "heading" and tag.get("aria-level") is not None


def _is_block_or_heading(tag: Tag) -> bool:
    return isinstance(tag, Tag) and (tag.name in _BLOCK_TAGS or _is_heading_tag(tag))


def _trim_empty(tokens: list[Token]) -> list[Token]:
    start, end = 0, len(tokens)
    while start < end and _is_empty(tokens[start]):
        start += 1
    while end > start and _is_empty(tokens[end - 1]):
        end -= 1
    return tokens[start:end]


def _is_empty(token: Token) -> bool:
    node = token.node
    return isinstance(node, Block) and node.type == "paragraph" and not node.text.strip()


def _normalize_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
