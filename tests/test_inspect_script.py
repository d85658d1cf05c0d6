"""Tests for the inspect_headings script."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPTS = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPTS) not in sys.path:
    sys.path.insert(0, str(SCRIPTS))

from inspect_headings import collect_levels, load_html, main  # noqa: E402

from heading_tree.html_codec import parse_html_fragment  # noqa: E402


class TestCollectLevels:
    """Tests for collect_levels."""

    def test_counts_headings_per_level(self) -> None:
        """Only heading tokens are counted."""
        tokens = parse_html_fragment('<h2>A</h2><p>x</p><h2>B</h2><h6 data-level="9">C</h6>')

        assert collect_levels(tokens) == {2: 2, 9: 1}


class TestLoadHtml:
    """Tests for load_html."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing path is reported."""
        with pytest.raises(FileNotFoundError, match="HTML file not found"):
            load_html(str(tmp_path / "missing.html"))


class TestMain:
    """Tests for the command-line entry point."""

    def test_prints_levels_and_outline(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Levels are listed before the repaired outline."""
        path = tmp_path / "doc.html"
        path.write_text("<h3>Intro</h3><p>x</p><h5>Deep</h5>", encoding="utf-8")

        main([str(path), "--markdown"])

        output = capsys.readouterr().out
        assert "Levels:\nH3: 1\nH5: 1" in output
        assert "Sections:\nH1 Intro\n    H5 Deep" in output
        assert "##### Deep" in output
