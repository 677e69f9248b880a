"""Line classification for Markdown input.

Every input line gets exactly one kind. Classification is pure and
stateless; whether a line is code content or a fence delimiter depends on
fence state, which the section builder tracks (see :mod:`mdstruct.sections`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Line kinds
HEADING = "heading"
LIST_ITEM = "list_item"
FENCE = "fence"
BLOCKQUOTE = "blockquote"
HR = "hr"
BLANK = "blank"
TEXT = "text"

LINE_KINDS = (HEADING, LIST_ITEM, FENCE, BLOCKQUOTE, HR, BLANK, TEXT)

# Tabs in leading whitespace count as this many columns
TAB_WIDTH = 4

# -- Patterns ---------------------------------------------------------------

# Line endings recognised when splitting input
LINE_BREAK_RE = re.compile(r'\r\n|\r|\n')

# One line with its ending, or a final unterminated line
LINE_RE = re.compile(r'[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+')

# "## Heading text" -- 1-6 hashes, then whitespace, then the (possibly empty) text
HEADING_RE = re.compile(r'^(#{1,6})[ \t](.*)$')

# "  - item", "* item", "+ item"
LIST_ITEM_RE = re.compile(r'^([ \t]*)([-*+])[ \t]+(.*)$')

# Leading checkbox inside a list item's text: "[ ] task", "[x] task", "[X] task"
CHECKBOX_RE = re.compile(r'^\[([ xX])\][ \t]+(\S.*)$')

# "```", "~~~~", "```rust" -- a run of 3+ backticks or tildes and an optional info string
FENCE_RE = re.compile(r'^[ \t]*(`{3,}|~{3,})[ \t]*(.*?)[ \t]*$')

# "---", "***", "_ _ _" -- 3+ of one character, optional whitespace in between
HR_RE = re.compile(r'^[ \t]*([-*_])(?:[ \t]*\1){2,}[ \t]*$')

# "> quoted" or ">quoted"
BLOCKQUOTE_RE = re.compile(r'^> ?(.*)$')


@dataclass(frozen=True)
class Line:
    """One classified input line.

    Only the fields relevant to ``kind`` are populated:

    - heading: ``level``, ``text``
    - list_item: ``indent``, ``marker``, ``text``, ``checked`` (None for a
      plain item, True/False when a ``[ ]``/``[x]`` marker is present)
    - fence: ``fence`` (the delimiter run), ``language``
    - blockquote, text, hr: ``text``
    """

    kind: str
    raw: str
    text: str = ""
    level: int | None = None
    indent: int = 0
    marker: str | None = None
    checked: bool | None = None
    fence: str | None = None
    language: str | None = None

    @property
    def is_checklist(self) -> bool:
        return self.kind == LIST_ITEM and self.checked is not None


def split_lines(text: str, keepends: bool = False) -> list[str]:
    """Split *text* on ``\\r\\n``, ``\\r`` and ``\\n`` only.

    Unlike ``str.splitlines`` this leaves form feeds, ``\\x85`` and the
    Unicode line/paragraph separators inside the line they appear in.
    """
    if keepends:
        return LINE_RE.findall(text)
    lines = LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def indent_width(prefix: str) -> int:
    """Width of a leading-whitespace prefix, tabs expanded."""
    return len(prefix.expandtabs(TAB_WIDTH))


def _classify_fence(line: str) -> Line | None:
    m = FENCE_RE.match(line)
    if not m:
        return None
    run, info = m.group(1), m.group(2)
    # Backtick fences cannot carry backticks in the info string ("```x```" is inline code)
    if run[0] == "`" and "`" in info:
        return None
    language = info.split()[0] if info else None
    return Line(FENCE, line, text=info, fence=run, language=language)


def _classify_list_item(line: str) -> Line | None:
    m = LIST_ITEM_RE.match(line)
    if not m:
        return None
    prefix, marker, rest = m.groups()
    rest = rest.strip()
    checked = None
    box = CHECKBOX_RE.match(rest)
    if box:
        checked = box.group(1) in "xX"
        rest = box.group(2).strip()
    return Line(
        LIST_ITEM, line,
        text=rest,
        indent=indent_width(prefix),
        marker=marker,
        checked=checked,
    )


def classify(line: str) -> Line:
    """Classify a single line (no trailing newline).

    Precedence: blank, fence, heading, list item, hr, blockquote, text.
    """
    if not line.strip():
        return Line(BLANK, line)

    fence = _classify_fence(line)
    if fence is not None:
        return fence

    m = HEADING_RE.match(line)
    if m:
        return Line(HEADING, line, text=m.group(2).strip(), level=len(m.group(1)))

    item = _classify_list_item(line)
    if item is not None:
        return item

    if HR_RE.match(line):
        return Line(HR, line, text=line.strip())

    m = BLOCKQUOTE_RE.match(line)
    if m:
        return Line(BLOCKQUOTE, line, text=m.group(1))

    return Line(TEXT, line, text=line.strip())


def closes_fence(line: str, opener: Line) -> bool:
    """Check if *line* closes the fence opened by *opener*.

    The closing run must use the same character, be at least as long as
    the opening run, and carry no info string.
    """
    candidate = _classify_fence(line)
    if candidate is None or candidate.text or not opener.fence:
        return False
    run = candidate.fence or ""
    return run[0] == opener.fence[0] and len(run) >= len(opener.fence)
