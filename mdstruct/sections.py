"""Section building: fold classified lines into typed sections.

The builder is an explicit state machine over
``none | paragraph | list | code | blockquote``. Transitions depend only on
the next line's classification and whether a fence is open. Headings and
horizontal rules are emitted as soon as they are seen; blank lines close
whatever is accumulating (except inside a fence, where they are code).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from mdstruct.lines import (
    BLANK,
    BLOCKQUOTE as BLOCKQUOTE_LINE,
    FENCE,
    HEADING as HEADING_LINE,
    HR as HR_LINE,
    LIST_ITEM,
    Line,
    classify,
    closes_fence,
    split_lines,
)
from mdstruct.variables import ordered_variables

log = logging.getLogger(__name__)

# Section kinds
HEADING = "heading"
PARAGRAPH = "paragraph"
LIST = "list"
CODE = "code"
BLOCKQUOTE = "blockquote"
HR = "hr"

SECTION_KINDS = (HEADING, PARAGRAPH, LIST, CODE, BLOCKQUOTE, HR)

# Builder states; the accumulating ones share names with the kinds they produce
_NONE = "none"
_ACCUMULATING = (PARAGRAPH, LIST, CODE, BLOCKQUOTE)


@dataclass(frozen=True)
class Section:
    """A contiguous, typed block of the document.

    ``start_line``/``end_line`` are 1-based and inclusive, counted in the
    source file (frontmatter lines included).
    """

    kind: str
    text: str
    start_line: int
    end_line: int
    order_idx: int = 0
    level: int | None = None
    language: str | None = None
    items: tuple[str, ...] = ()
    id: str = ""
    variables: tuple[str, ...] = ()

    @property
    def raw_range(self) -> tuple[int, int]:
        return self.start_line, self.end_line

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "order_idx": self.order_idx,
            "level": self.level,
            "language": self.language,
            "text": self.text,
            "items": list(self.items),
            "variables": list(self.variables),
            "start_line": self.start_line,
            "end_line": self.end_line,
        }


class SectionBuilder:
    """Stateful fold from raw lines to :class:`Section` records.

    Feed lines one at a time with :meth:`feed`, then call :meth:`finish`.

    Parameters
    ----------
    line_offset:
        Number of input lines consumed before the first fed line (e.g. a
        stripped frontmatter block), so reported line numbers match the file.
    generate_ids:
        Give each section a uuid4 ``id``. When False, ids are empty strings.
    """

    def __init__(self, line_offset: int = 0, generate_ids: bool = True) -> None:
        self._offset = line_offset
        self._generate_ids = generate_ids
        self._sections: list[Section] = []
        self._state = _NONE
        self._buffer: list[str] = []
        self._start = 0
        self._end = 0
        self._lineno = 0
        self._fence: Line | None = None
        self.title: str | None = None

    @property
    def inside_fence(self) -> bool:
        return self._state == CODE

    def feed(self, raw: str) -> Line | None:
        """Consume one raw line.

        Returns the classification used for the line, or None when the line
        was taken verbatim as fenced code content.
        """
        self._lineno += 1

        if self._state == CODE:
            if self._fence is not None and closes_fence(raw, self._fence):
                self._end = self._lineno
                self._flush()
                return classify(raw)
            self._buffer.append(raw)
            self._end = self._lineno
            return None

        line = classify(raw)
        kind = line.kind

        if kind == BLANK:
            self._flush()
        elif kind == FENCE:
            self._flush()
            self._begin(CODE)
            self._fence = line
        elif kind == HEADING_LINE:
            self._flush()
            self._emit(HEADING, line.text, self._lineno, self._lineno, level=line.level)
            if self.title is None and line.level == 1 and line.text:
                self.title = line.text
        elif kind == HR_LINE:
            self._flush()
            self._emit(HR, line.text, self._lineno, self._lineno)
        elif kind == LIST_ITEM:
            self._accumulate(LIST, raw)
        elif kind == BLOCKQUOTE_LINE:
            self._accumulate(BLOCKQUOTE, line.text)
        else:
            self._accumulate(PARAGRAPH, line.text)
        return line

    def finish(self) -> list[Section]:
        """Close any open section and return all sections in source order.

        An unterminated fence is not an error: its section holds every line
        up to the end of input.
        """
        if self._state == CODE:
            log.debug(
                "Unterminated code fence opened at line %d",
                self._offset + self._start,
            )
        self._flush()
        return list(self._sections)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _begin(self, state: str) -> None:
        self._state = state
        self._buffer = []
        self._start = self._end = self._lineno

    def _accumulate(self, state: str, value: str) -> None:
        if self._state != state:
            self._flush()
            self._begin(state)
        self._buffer.append(value)
        self._end = self._lineno

    def _flush(self) -> None:
        state = self._state
        if state not in _ACCUMULATING:
            return

        text = "\n".join(self._buffer)
        if state == CODE:
            language = self._fence.language if self._fence else None
            self._emit(CODE, text, self._start, self._end, language=language)
        elif state == LIST:
            self._emit(LIST, text, self._start, self._end, items=tuple(self._buffer))
        else:
            self._emit(state, text, self._start, self._end)

        self._state = _NONE
        self._buffer = []
        self._fence = None

    def _emit(self, kind: str, text: str, start: int, end: int, **fields: Any) -> None:
        self._sections.append(Section(
            kind=kind,
            text=text,
            start_line=self._offset + start,
            end_line=self._offset + end,
            order_idx=len(self._sections),
            id=str(uuid.uuid4()) if self._generate_ids else "",
            variables=ordered_variables(text),
            **fields,
        ))


def build_sections(
    text: str,
    line_offset: int = 0,
    generate_ids: bool = True,
) -> list[Section]:
    """Split *text* into sections without building the rest of the document."""
    builder = SectionBuilder(line_offset=line_offset, generate_ids=generate_ids)
    for raw in split_lines(text):
        builder.feed(raw)
    return builder.finish()
