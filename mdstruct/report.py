"""Jinja2 rendering of human-readable document and checklist reports."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader

from mdstruct.checklist import ChecklistItem, ChecklistSummary, flatten
from mdstruct.document import Document
from mdstruct.lines import split_lines
from mdstruct.sections import CODE, HEADING, Section

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

PREVIEW_CHARS = 60


def _preview(text: str, width: int = PREVIEW_CHARS) -> str:
    """Jinja2 filter: first line of *text*, cut to *width* chars."""
    first = split_lines(text.strip())[0] if text.strip() else ""
    if len(first) > width:
        return first[:width - 3].rstrip() + "..."
    return first


def _section_label(section: Section) -> str:
    """Jinja2 filter: kind plus level or language where relevant."""
    if section.kind == HEADING:
        return f"heading h{section.level}"
    if section.kind == CODE and section.language:
        return f"code ({section.language})"
    return section.kind


def _sorted_items(mapping: dict[Any, Any] | None) -> list[tuple[Any, Any]]:
    """Mapping items sorted on str(key); YAML keys can mix ints and strings."""
    if not mapping:
        return []
    return sorted(mapping.items(), key=lambda kv: str(kv[0]))


def _get_env() -> Environment:
    """Create a Jinja2 environment loading from mdstruct/templates/."""
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["preview"] = _preview
    env.filters["section_label"] = _section_label
    return env


def render_checklist(
    items: Iterable[ChecklistItem],
    summary: ChecklistSummary | None = None,
) -> str:
    """Render a checklist tree as indented ``- [x]`` lines plus a summary line."""
    items = list(items)
    template = _get_env().get_template("checklist.md")
    return template.render(
        items=flatten(items),
        summary=summary or ChecklistSummary.from_items(items),
    )


def render_report(document: Document, source: str | None = None) -> str:
    """Render the full Markdown report for *document*.

    *source* is shown as the origin of the document (usually a file path).
    """
    template = _get_env().get_template("report.md")
    return template.render(
        title=document.title,
        source=source,
        frontmatter=_sorted_items(document.frontmatter),
        sections=document.sections,
        variables=sorted(document.variables),
        items=document.checklist_items,
        summary=document.checklist_summary(),
    )
