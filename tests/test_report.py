"""Tests for mdstruct.report."""

from __future__ import annotations

from pathlib import Path

from mdstruct.checklist import ChecklistSummary, extract_checklist_items
from mdstruct.document import parse, parse_file
from mdstruct.report import _preview, _section_label, render_checklist, render_report
from mdstruct.sections import build_sections

FIXTURES = Path(__file__).parent / "fixtures"


class TestRenderChecklist:
    def test_tree_and_summary(self) -> None:
        items = extract_checklist_items(
            "- [ ] Task 1 (AC: 1)\n  - [x] Subtask 1.1\n- [x] Task 2 (AC: 2, 3)\n"
        )
        assert render_checklist(items) == (
            "- [ ] Task 1 (AC: 1)\n"
            "  - [x] Subtask 1.1\n"
            "- [x] Task 2 (AC: 2, 3)\n"
            "\n"
            "Completed: 2/3 (66.7%)\n"
        )

    def test_empty(self) -> None:
        assert render_checklist([]) == "No checklist items.\n\nCompleted: 0/0 (0.0%)\n"

    def test_explicit_summary_is_used(self) -> None:
        out = render_checklist([], ChecklistSummary(total=4, completed=1, pending=3, percentage=25.0))
        assert out.endswith("Completed: 1/4 (25.0%)\n")

    def test_four_space_nesting(self) -> None:
        text = (FIXTURES / "with_checklist_4space.md").read_text()
        out = render_checklist(extract_checklist_items(text, indent_unit=4))
        assert "    - [x] Grandchild\n" in out


class TestRenderReport:
    def test_minimal(self) -> None:
        out = render_report(parse("# A\n\nB"))
        assert out.startswith("# A\n\n## Sections (2)\n\n")
        assert "- heading h1 (lines 1-1): A\n" in out
        assert "- paragraph (lines 3-3): B\n" in out
        assert "## Variables\n\nNone.\n" in out
        assert out.endswith("No checklist items.\n\nCompleted: 0/0 (0.0%)\n")

    def test_untitled(self) -> None:
        out = render_report(parse(""))
        assert out.startswith("# Untitled document\n")
        assert "No sections.\n" in out

    def test_source_line(self) -> None:
        assert "Source: `story.md`" in render_report(parse("text"), source="story.md")

    def test_story(self) -> None:
        out = render_report(parse_file(FIXTURES / "story.md"))
        assert out.startswith("# Story TEA-TEST-001: Example Story\n")
        assert "## Sections (11)" in out
        assert "- code (bash) (lines 24-27): # not a heading\n" in out
        assert "- `{{parser_type}}`\n" in out
        assert "- [x] Create project structure (AC: 1)\n" in out
        assert "Completed: 3/7 (42.9%)\n" in out

    def test_frontmatter_listed(self) -> None:
        out = render_report(parse_file(FIXTURES / "with_frontmatter.md"))
        assert "## Frontmatter\n" in out
        assert "- **author:** John Doe\n" in out

    def test_frontmatter_keys_of_mixed_types(self) -> None:
        out = render_report(parse("---\n1: one\nname: x\n---\n# T\n"))
        assert "- **1:** one\n- **name:** x\n" in out

    def test_no_frontmatter_section_without_frontmatter(self) -> None:
        assert "## Frontmatter" not in render_report(parse("# A"))


class TestFilters:
    def test_preview_first_line(self) -> None:
        assert _preview("first\nsecond") == "first"

    def test_preview_truncates(self) -> None:
        out = _preview("x" * 100, width=10)
        assert out == "xxxxxxx..."

    def test_preview_empty(self) -> None:
        assert _preview("   ") == ""

    def test_section_label(self) -> None:
        heading, code, para = build_sections("## H\n```py\nx\n```\ntext")
        assert _section_label(heading) == "heading h2"
        assert _section_label(code) == "code (py)"
        assert _section_label(para) == "paragraph"
