"""Structured Markdown parsing: sections, checklists and template variables.

Usage::

    from mdstruct import parse, extract_checklist_items, ChecklistSummary

    doc = parse("# Title\\n\\n- [ ] Task 1 (AC: 1)\\n  - [x] Subtask 1.1\\n")
    print(doc.title, len(doc.sections), sorted(doc.variables))
    print(doc.checklist_summary().percentage)

    items = extract_checklist_items(text)
    print(ChecklistSummary.from_items(items).completed)
"""

from mdstruct.checklist import (
    ChecklistItem,
    ChecklistSummary,
    extract_checklist_items,
    iter_items,
)
from mdstruct.document import Document, Edge, ParserOptions, parse, parse_file
from mdstruct.errors import EmptyInputError, FrontmatterError, ParseError
from mdstruct.frontmatter import parse_frontmatter, strip_frontmatter
from mdstruct.lines import Line, classify
from mdstruct.sections import Section
from mdstruct.variables import (
    count_variables,
    extract_unique_variables,
    extract_variables,
    has_variables,
    scan_variables,
)

__all__ = [
    "ChecklistItem",
    "ChecklistSummary",
    "Document",
    "Edge",
    "EmptyInputError",
    "FrontmatterError",
    "Line",
    "ParseError",
    "ParserOptions",
    "Section",
    "classify",
    "count_variables",
    "extract_checklist_items",
    "extract_unique_variables",
    "extract_variables",
    "has_variables",
    "iter_items",
    "parse",
    "parse_file",
    "parse_frontmatter",
    "scan_variables",
    "strip_frontmatter",
]
