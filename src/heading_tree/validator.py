"""HN-10 invariant validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from heading_tree.config import MAX_LEVEL, MIN_LEVEL
from heading_tree.schemas import Document, Heading


class ViolationKind(str, Enum):
    """Which HN-10 rule a heading breaks."""

    nested_section = "NESTED_SECTION"  # level 1 below the root
    orphan_at_root = "ORPHAN_AT_ROOT"  # level > 1 directly at the root
    invalid_nesting = "INVALID_NESTING"  # level <= container level
    invalid_level = "INVALID_LEVEL"  # outside 1..10


@dataclass(frozen=True)
class Violation:
    """One rule breach, reported against the offending heading."""

    kind: ViolationKind
    node_id: str
    level: int
    container_id: str | None = None
    container_level: int | None = None
    title: str = ""

    @property
    def message(self) -> str:
        title = self.title[:25] or "Untitled"
        if self.kind is ViolationKind.nested_section:
            return f'[{self.kind.value}] H1 "{title}" inside H{self.container_level} (must be at root)'
        if self.kind is ViolationKind.orphan_at_root:
            return f'[{self.kind.value}] H{self.level} "{title}" at root (must be nested)'
        if self.kind is ViolationKind.invalid_nesting:
            return (
                f'[{self.kind.value}] H{self.level} "{title}" inside H{self.container_level} '
                "(child must be > parent)"
            )
        return f'[{self.kind.value}] H{self.level} "{title}" (must be {MIN_LEVEL}-{MAX_LEVEL})'


def validate(document: Document) -> list[Violation]:
    """Report every HN-10 violation in document order.

    Sibling levels are never checked: siblings may be equal, decreasing or
    non-sequential.
    """
    violations: list[Violation] = []

    def _check(heading: Heading, container: Heading | None) -> None:
        level = heading.level
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            violations.append(_violation(ViolationKind.invalid_level, heading, container))

        if container is None:
            if level > MIN_LEVEL:
                violations.append(_violation(ViolationKind.orphan_at_root, heading, container))
        elif level <= MIN_LEVEL:
            violations.append(_violation(ViolationKind.nested_section, heading, container))
        elif level <= container.level:
            violations.append(_violation(ViolationKind.invalid_nesting, heading, container))

        for child in heading.children:
            _check(child, heading)

    for section in document.sections:
        _check(section, None)
    return violations


def is_valid(document: Document) -> bool:
    return not validate(document)


def _violation(kind: ViolationKind, heading: Heading, container: Heading | None) -> Violation:
    return Violation(
        kind=kind,
        node_id=heading.id,
        level=heading.level,
        container_id=container.id if container else None,
        container_level=container.level if container else None,
        title=heading.title,
    )
