"""Tests for mdstruct.variables."""

from __future__ import annotations

import pytest

from mdstruct.variables import (
    count_variables,
    extract_unique_variables,
    extract_variables,
    has_variables,
    ordered_variables,
    scan_variables,
)


class TestExtractVariables:
    def test_single(self) -> None:
        assert extract_variables("Hello {{name}}!") == ["name"]

    def test_keeps_duplicates_in_order(self) -> None:
        assert extract_variables("{{a}} {{b}} {{a}} {{c}} {{a}}") == ["a", "b", "a", "c", "a"]

    def test_underscores_and_digits(self) -> None:
        assert extract_variables("Order {{order_id}} for {{user_2}}") == ["order_id", "user_2"]

    def test_inner_whitespace_trimmed(self) -> None:
        assert extract_variables("{{ name }} and {{\tother\t}}") == ["name", "other"]

    def test_multiline(self) -> None:
        assert extract_variables("Line 1: {{a}}\nLine 2: {{b}}\nLine 3: {{c}}") == ["a", "b", "c"]

    def test_inside_code_block(self) -> None:
        assert extract_variables("```\nconst x = {{value}};\n```") == ["value"]

    @pytest.mark.parametrize("text", [
        "{ {name} }",
        "{name}",
        "{{}}",
        "{{ }}",
        "{{first name}}",
        "{{name}",
        "{{unclosed",
        "{{na-me}}",
        "{{\nname\n}}",
    ])
    def test_malformed_skipped(self, text: str) -> None:
        assert extract_variables(text) == []


class TestUniqueAndOrdered:
    def test_unique_sorted(self) -> None:
        assert extract_unique_variables("{{b}} {{a}} {{b}} {{c}} {{a}}") == ["a", "b", "c"]

    def test_ordered_first_seen(self) -> None:
        assert ordered_variables("{{b}} {{a}} {{b}}") == ("b", "a")


class TestScanVariables:
    def test_set_semantics(self) -> None:
        assert scan_variables("{{name}} {{ name }} {{name}}") == frozenset({"name"})

    def test_empty(self) -> None:
        assert scan_variables("") == frozenset()

    def test_no_whitespace_in_names(self) -> None:
        names = scan_variables("{{ a }} {{b }} {{ c}} {{d e}}")
        assert names == {"a", "b", "c"}
        assert all(not any(ch.isspace() for ch in n) for n in names)


class TestPredicates:
    def test_has_variables(self) -> None:
        assert has_variables("Hello {{name}}!")
        assert not has_variables("Hello world!")

    def test_count_variables(self) -> None:
        assert count_variables("Hello {{name}}!") == 1
        assert count_variables("{{x}} and {{x}}") == 2
        assert count_variables("No vars here") == 0
