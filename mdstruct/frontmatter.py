"""YAML frontmatter pre-pass.

Frontmatter is a leading block delimited by ``---`` lines::

    ---
    title: My Document
    tags:
      - markdown
    ---

    # Document Content

It is stripped before the body reaches the parser and its key/value pairs
are attached to the resulting document.
"""

from __future__ import annotations

from typing import Any

import yaml

from mdstruct.errors import FrontmatterError
from mdstruct.lines import split_lines

DELIMITER = "---"


def _load(block: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Frontmatter must be a YAML mapping, got {type(data).__name__}"
        )
    return data


def split_frontmatter(text: str) -> tuple[str, dict[str, Any] | None, int]:
    """Split *text* into ``(body, frontmatter, consumed_lines)``.

    ``consumed_lines`` counts every line removed ahead of the body (leading
    blanks, both delimiters, the YAML and blank lines after the closing
    delimiter). Without a complete block the text comes back unchanged with
    ``None`` and 0.

    Raises
    ------
    FrontmatterError
        The block is not valid YAML or not a mapping.
    """
    lines = split_lines(text, keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != DELIMITER:
        return text, None, 0

    for end in range(start + 1, len(lines)):
        if lines[end].strip() != DELIMITER:
            continue
        data = _load("".join(lines[start + 1:end]))
        body_start = end + 1
        while body_start < len(lines) and not lines[body_start].strip():
            body_start += 1
        return "".join(lines[body_start:]), data, body_start

    # No closing delimiter: treat as regular content
    return text, None, 0


def strip_frontmatter(text: str) -> tuple[str, dict[str, Any] | None]:
    """Return ``(body, frontmatter)``; frontmatter is None when absent."""
    body, data, _ = split_frontmatter(text)
    return body, data


def parse_frontmatter(text: str) -> dict[str, Any] | None:
    """Parse the frontmatter of *text* without keeping the body."""
    _, data, _ = split_frontmatter(text)
    return data
