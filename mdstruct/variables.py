"""Template variable scanning: ``{{identifier}}`` placeholders."""

from __future__ import annotations

import re

# "{{name}}" or "{{ name }}" -- letters, digits and underscore, no inner whitespace
VARIABLE_RE = re.compile(r'\{\{[ \t]*(\w+)[ \t]*\}\}')


def extract_variables(text: str) -> list[str]:
    """Every placeholder occurrence in source order, duplicates kept."""
    return VARIABLE_RE.findall(text)


def extract_unique_variables(text: str) -> list[str]:
    """Distinct placeholder names, sorted."""
    return sorted(set(VARIABLE_RE.findall(text)))


def ordered_variables(text: str) -> tuple[str, ...]:
    """Distinct placeholder names in first-seen order."""
    return tuple(dict.fromkeys(VARIABLE_RE.findall(text)))


def scan_variables(text: str) -> frozenset[str]:
    """Set of distinct placeholder names referenced in *text*.

    Malformed placeholders (``{{}}``, ``{{a b}}``, ``{name}``, unbalanced
    braces) never match and are skipped silently.
    """
    return frozenset(VARIABLE_RE.findall(text))


def has_variables(text: str) -> bool:
    return VARIABLE_RE.search(text) is not None


def count_variables(text: str) -> int:
    """Number of placeholder occurrences, duplicates included."""
    return sum(1 for _ in VARIABLE_RE.finditer(text))
