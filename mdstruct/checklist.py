"""Checklist extraction: ``- [ ]`` / ``- [x]`` items as a nesting tree.

Depth comes from indentation divided by the indent unit (2 spaces by
default). Tree construction uses an explicit stack holding the current
ancestor at each depth, so degenerate deeply-nested input never recurses.
An item with no parent at ``depth - 1`` on the stack is healed to depth 0.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from mdstruct.lines import Line, split_lines
from mdstruct.sections import SectionBuilder

log = logging.getLogger(__name__)

DEFAULT_INDENT_UNIT = 2
AUTO_INDENT = "auto"

# Trailing "(AC: 1, 2)" / "(ac: N/A)" annotation on an item's text
AC_RE = re.compile(r'\(\s*AC\s*:\s*([^()]*?)\s*\)$', re.IGNORECASE)


@dataclass(frozen=True)
class ChecklistItem:
    """A checklist entry and the items nested under it."""

    text: str
    completed: bool
    depth: int = 0
    acceptance_criteria: str | None = None
    children: tuple[ChecklistItem, ...] = ()
    line: int | None = None

    @property
    def ac_refs(self) -> list[str]:
        """Acceptance-criteria references split on commas: ``"2, 3"`` -> ``["2", "3"]``."""
        if not self.acceptance_criteria:
            return []
        return [p.strip() for p in self.acceptance_criteria.split(",") if p.strip()]

    def to_dict(self) -> dict[str, Any]:
        built: dict[int, dict[str, Any]] = {}
        for item in reversed(flatten([self])):
            built[id(item)] = {
                "text": item.text,
                "completed": item.completed,
                "depth": item.depth,
                "acceptance_criteria": item.acceptance_criteria,
                "line": item.line,
                "children": [built[id(c)] for c in item.children],
            }
        return built[id(self)]


def iter_items(items: Iterable[ChecklistItem]) -> Iterator[ChecklistItem]:
    """Yield every item and descendant, depth-first pre-order."""
    stack = list(items)[::-1]
    while stack:
        item = stack.pop()
        yield item
        stack.extend(reversed(item.children))


def flatten(items: Iterable[ChecklistItem]) -> list[ChecklistItem]:
    return list(iter_items(items))


def split_acceptance_criteria(text: str) -> tuple[str, str | None]:
    """Strip a trailing ``(AC: ...)`` annotation.

    Returns ``(text_without_annotation, value)``; value is None when the
    text carries no annotation.
    """
    text = text.strip()
    m = AC_RE.search(text)
    if not m:
        return text, None
    return text[:m.start()].rstrip(), m.group(1)


@dataclass(frozen=True)
class ChecklistSummary:
    """Completion counts over a checklist tree, every depth included."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    percentage: float = 0.0

    @classmethod
    def from_items(cls, items: Iterable[ChecklistItem]) -> ChecklistSummary:
        total = 0
        completed = 0
        for item in iter_items(items):
            total += 1
            if item.completed:
                completed += 1
        percentage = 100.0 * completed / total if total else 0.0
        return cls(
            total=total,
            completed=completed,
            pending=total - completed,
            percentage=percentage,
        )

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total

    @property
    def is_empty(self) -> bool:
        """True when there is nothing done yet (or nothing to do)."""
        return self.total == 0 or self.completed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "percentage": self.percentage,
        }


class _Node:
    """Mutable build-time twin of :class:`ChecklistItem`."""

    __slots__ = ("text", "completed", "depth", "acceptance_criteria", "line", "children")

    def __init__(
        self,
        text: str,
        completed: bool,
        acceptance_criteria: str | None,
        line: int | None,
    ) -> None:
        self.text = text
        self.completed = completed
        self.depth = 0
        self.acceptance_criteria = acceptance_criteria
        self.line = line
        self.children: list[_Node] = []


def check_indent_unit(indent_unit: int | str) -> int | None:
    if indent_unit == AUTO_INDENT:
        return None
    if isinstance(indent_unit, bool) or not isinstance(indent_unit, int) or indent_unit < 1:
        raise ValueError(f"indent_unit must be a positive int or 'auto', got {indent_unit!r}")
    return indent_unit


class ChecklistBuilder:
    """Build a checklist tree from classified lines.

    Parameters
    ----------
    indent_unit:
        Columns of indentation per nesting level, or ``"auto"`` to take the
        first non-zero indent seen on a checklist item as the unit.
    """

    def __init__(self, indent_unit: int | str = DEFAULT_INDENT_UNIT) -> None:
        self._unit = check_indent_unit(indent_unit)
        self._roots: list[_Node] = []
        self._stack: list[_Node] = []  # _stack[d] is the current ancestor at depth d
        self._nodes: list[_Node] = []

    def add(self, line: Line, lineno: int | None = None) -> None:
        """Add *line* if it is a checklist item; other lines are ignored."""
        if not line.is_checklist:
            return

        text, ac = split_acceptance_criteria(line.text)
        node = _Node(text, bool(line.checked), ac, lineno)

        depth = line.indent // self._resolve_unit(line.indent)
        if 0 < depth <= len(self._stack):
            parent = self._stack[depth - 1]
            del self._stack[depth:]
            parent.children.append(node)
        else:
            if depth > 0:
                log.debug(
                    "Checklist item at line %s has no parent at depth %d; attaching at depth 0",
                    lineno, depth - 1,
                )
                depth = 0
            self._stack.clear()
            self._roots.append(node)

        node.depth = depth
        self._stack.append(node)
        self._nodes.append(node)

    def build(self) -> list[ChecklistItem]:
        """Freeze the tree. Children are always added after their parent,
        so walking the nodes backwards freezes every child first."""
        frozen: dict[int, ChecklistItem] = {}
        for node in reversed(self._nodes):
            frozen[id(node)] = ChecklistItem(
                text=node.text,
                completed=node.completed,
                depth=node.depth,
                acceptance_criteria=node.acceptance_criteria,
                children=tuple(frozen[id(c)] for c in node.children),
                line=node.line,
            )
        return [frozen[id(n)] for n in self._roots]

    def _resolve_unit(self, indent: int) -> int:
        if self._unit is not None:
            return self._unit
        if indent > 0:
            self._unit = indent
            log.debug("Inferred checklist indent unit: %d", indent)
            return indent
        return DEFAULT_INDENT_UNIT


def extract_checklist_items(
    text: str,
    indent_unit: int | str = DEFAULT_INDENT_UNIT,
) -> list[ChecklistItem]:
    """Extract the checklist tree from Markdown text.

    Usable without full document parsing. Fenced code is skipped, so
    checkbox lines inside code blocks do not count.

    Example::

        >>> items = extract_checklist_items("- [ ] Task 1 (AC: 1)\\n  - [x] Subtask 1.1")
        >>> items[0].acceptance_criteria, items[0].children[0].completed
        ('1', True)
    """
    sections = SectionBuilder(generate_ids=False)
    checklist = ChecklistBuilder(indent_unit)
    for lineno, raw in enumerate(split_lines(text), start=1):
        line = sections.feed(raw)
        if line is not None:
            checklist.add(line, lineno)
    return checklist.build()
