"""Tests for the string literal helpers."""

import pytest

from splurge_cypress_to_playwright.syntax.tree import named_args, parse_source, walk
from splurge_cypress_to_playwright.transformers.strings import (
    collapse,
    escape_regex,
    is_string_like,
    js_quote,
    literal_string,
    regex_literal,
    string_content,
    todo,
)


def _arg(expression: str):
    tree = parse_source(f"f({expression});\n")
    call = next(node for node in walk(tree.root) if node.type == "call_expression")
    return named_args(call)[0]


class TestStringContent:
    @pytest.mark.parametrize(
        "literal, expected",
        [
            ("'single'", "single"),
            ('"double"', "double"),
            ("`template`", "template"),
            ("''", ""),
            ("`a ${b} c`", "a ${b} c"),
        ],
    )
    def test_unwraps_every_quote_style(self, literal, expected):
        assert string_content(_arg(literal)) == expected

    def test_non_string_is_none(self):
        assert string_content(_arg("42")) is None
        assert string_content(None) is None
        assert not is_string_like(_arg("name"))

    def test_literal_string_rejects_substitutions(self):
        assert literal_string(_arg("`a ${b}`")) is None
        assert literal_string(_arg("`plain`")) == "plain"
        assert literal_string(None) is None


class TestQuotingAndPatterns:
    def test_js_quote_escapes(self):
        assert js_quote("it's") == "'it\\'s'"
        assert js_quote("a\\b") == "'a\\\\b'"
        assert js_quote("line\nbreak") == "'line\\nbreak'"

    def test_escape_regex(self):
        assert escape_regex("/cart?id=1") == "\\/cart\\?id=1"
        assert escape_regex("a.b(c)") == "a\\.b\\(c\\)"

    def test_regex_literal_from_string(self):
        assert regex_literal(_arg("'/cart'")) == "/\\/cart/"

    def test_regex_literal_keeps_regex(self):
        assert regex_literal(_arg("/^Welcome/i")) == "/^Welcome/i"

    def test_regex_literal_wraps_expressions(self):
        assert regex_literal(_arg("name")) == "new RegExp(name)"


class TestTodo:
    def test_todo_is_single_line(self):
        assert todo("Migrate cy.x(\n  a,\n  b)") == "// TODO: Migrate cy.x( a, b)"

    def test_collapse(self):
        assert collapse("  a \n\t b  ") == "a b"
