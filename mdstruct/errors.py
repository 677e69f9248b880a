"""Error types for mdstruct.

The parser degrades gracefully on malformed Markdown, so these only cover
caller-level preconditions and the frontmatter adapter.
"""

from __future__ import annotations


class ParseError(Exception):
    """Base class for parse failures."""


class EmptyInputError(ParseError):
    """Raised when non-empty input was required but none was given."""


class FrontmatterError(ParseError):
    """Raised when a frontmatter block holds invalid YAML or a non-mapping."""
