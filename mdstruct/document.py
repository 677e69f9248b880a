"""Document assembly: one parse call in, one immutable Document out.

A single pass over the body lines feeds the section builder and the
checklist builder together; variables come from one extra scan of the
body text. The parser is total over string input: malformed Markdown
degrades gracefully and never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mdstruct.checklist import (
    DEFAULT_INDENT_UNIT,
    ChecklistBuilder,
    ChecklistItem,
    ChecklistSummary,
    check_indent_unit,
    flatten,
)
from mdstruct.errors import EmptyInputError, FrontmatterError
from mdstruct.frontmatter import split_frontmatter
from mdstruct.lines import split_lines
from mdstruct.sections import HEADING, SECTION_KINDS, Section, SectionBuilder
from mdstruct.variables import scan_variables

log = logging.getLogger(__name__)

# Edge kinds
FOLLOWS = "follows"
CONTAINS = "contains"


@dataclass(frozen=True)
class ParserOptions:
    """Knobs for :func:`parse`.

    ``indent_unit`` is the number of columns per checklist nesting level,
    or ``"auto"`` to infer it from the first indented checklist item.
    """

    indent_unit: int | str = DEFAULT_INDENT_UNIT
    require_non_empty: bool = False
    frontmatter: bool = True
    generate_ids: bool = True

    def __post_init__(self) -> None:
        check_indent_unit(self.indent_unit)


@dataclass(frozen=True)
class Edge:
    """Relationship between two sections, by index into ``Document.sections``."""

    source_idx: int
    target_idx: int
    kind: str = FOLLOWS

    def to_dict(self) -> dict[str, Any]:
        return {"source_idx": self.source_idx, "target_idx": self.target_idx, "kind": self.kind}


@dataclass(frozen=True)
class Document:
    """Parsed Markdown document.

    ``checklist`` holds the root checklist items; nested items hang off
    their parents' ``children``. The completion summary is always derived
    from the tree, never stored.
    """

    title: str | None = None
    sections: tuple[Section, ...] = ()
    variables: frozenset[str] = frozenset()
    checklist: tuple[ChecklistItem, ...] = ()
    frontmatter: dict[str, Any] | None = field(default=None, hash=False)

    def checklist_summary(self) -> ChecklistSummary:
        return ChecklistSummary.from_items(self.checklist)

    @property
    def checklist_items(self) -> list[ChecklistItem]:
        """Every checklist item at every depth, in source order."""
        return flatten(self.checklist)

    def get_section(self, idx: int) -> Section | None:
        if 0 <= idx < len(self.sections):
            return self.sections[idx]
        return None

    def get_section_by_id(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def sections_by_kind(self, kind: str) -> list[Section]:
        if kind not in SECTION_KINDS:
            raise ValueError(f"Unknown section kind '{kind}'. Known: {', '.join(SECTION_KINDS)}")
        return [s for s in self.sections if s.kind == kind]

    def edges(self, kind: str | None = None) -> list[Edge]:
        """Section relationships.

        ``follows``: each section to the next one.
        ``contains``: a heading to every later section up to the next
        heading of the same or a higher level.
        """
        edges: list[Edge] = []
        if kind in (None, FOLLOWS):
            edges.extend(Edge(i, i + 1, FOLLOWS) for i in range(len(self.sections) - 1))
        if kind in (None, CONTAINS):
            open_headings: list[Section] = []
            for idx, section in enumerate(self.sections):
                if section.kind == HEADING:
                    level = section.level or 1
                    while open_headings and (open_headings[-1].level or 1) >= level:
                        open_headings.pop()
                edges.extend(Edge(h.order_idx, idx, CONTAINS) for h in open_headings)
                if section.kind == HEADING:
                    open_headings.append(section)
        return edges

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "frontmatter": self.frontmatter,
            "variables": sorted(self.variables),
            "sections": [s.to_dict() for s in self.sections],
            "checklist": [item.to_dict() for item in self.checklist],
            "checklist_summary": self.checklist_summary().to_dict(),
        }


def parse(text: str, options: ParserOptions | None = None) -> Document:
    """Parse Markdown *text* into a :class:`Document`.

    Empty input gives an empty document unless ``options.require_non_empty``
    is set.

    Raises
    ------
    TypeError
        *text* is not a string.
    EmptyInputError
        *text* is empty or whitespace-only and non-empty input was required.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse() expects str, got {type(text).__name__}")
    options = options or ParserOptions()
    if options.require_non_empty and not text.strip():
        raise EmptyInputError("Input is empty")

    body, frontmatter, offset = text, None, 0
    if options.frontmatter:
        try:
            body, frontmatter, offset = split_frontmatter(text)
        except FrontmatterError as exc:
            log.warning("Ignoring frontmatter, parsing it as body: %s", exc)

    sections = SectionBuilder(line_offset=offset, generate_ids=options.generate_ids)
    checklist = ChecklistBuilder(options.indent_unit)
    for lineno, raw in enumerate(split_lines(body), start=offset + 1):
        line = sections.feed(raw)
        if line is not None:
            checklist.add(line, lineno)

    doc = Document(
        title=sections.title,
        sections=tuple(sections.finish()),
        variables=scan_variables(body),
        checklist=tuple(checklist.build()),
        frontmatter=frontmatter,
    )
    log.debug(
        "Parsed %d sections, %d checklist items, %d variables",
        len(doc.sections), len(doc.checklist_items), len(doc.variables),
    )
    return doc


def parse_file(path: str | Path, options: ParserOptions | None = None) -> Document:
    """Read a UTF-8 Markdown file and parse it."""
    text = Path(path).read_text(encoding="utf-8")
    return parse(text, options)

