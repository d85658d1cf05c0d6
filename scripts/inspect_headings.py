"""Inspect the heading structure of stored or clipboard HTML."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from pathlib import Path

from heading_tree import (
    build_from_flat_sequence,
    parse_html_fragment,
    render_markdown,
    render_outline,
)
from heading_tree.schemas import Token


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Show heading levels and the repaired outline of an HTML file.")
    parser.add_argument("file", help="Local HTML file path")
    parser.add_argument("--markdown", action="store_true", help="Also print the Markdown rendering")
    parser.add_argument("--verbose", action="store_true", help="Log every repair step")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    tokens = parse_html_fragment(load_html(args.file))
    levels = collect_levels(tokens)

    print("Levels:")
    for level, count in sorted(levels.items()):
        print(f"H{level}: {count}")

    document = build_from_flat_sequence(tokens)
    print()
    print(render_outline(document))

    if args.markdown:
        print()
        print(render_markdown(document))


def load_html(file_path: str) -> str:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"HTML file not found: {path}")
    return path.read_text(encoding="utf-8")


def collect_levels(tokens: list[Token]) -> Counter:
    """Count heading tokens per level, as found in the markup."""
    levels = Counter()
    for token in tokens:
        if token.is_heading:
            levels[token.level] += 1
    return levels


if __name__ == "__main__":
    main()
