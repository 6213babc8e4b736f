"""Assertions on page properties.

``cy.url()``, ``cy.title()``, ``cy.location(part)`` and ``cy.hash()``
do not yield elements, so a following ``should`` cannot become a
locator matcher. These chains are recognized as a whole, before the
generic interpreter runs:

* url: ``include``/``contain`` become ``toHaveURL(/escaped/)``;
  ``eq``/``equal``/``match`` become ``toHaveURL(value)``
* title: ``eq``/``equal``/``match`` become ``toHaveTitle(value)``;
  ``include``/``contain`` become ``toHaveTitle(/escaped/)``
* location part or hash: ``expect(new URL(page.url()).part)`` with
  ``toBe``, ``toContain`` or ``toMatch``

Any other keyword falls back to the value assertion table, and failing
that to a TODO naming the original call. A chain with anything besides
``should``/``and`` after the accessor is left to the generic
interpreter.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import re
from dataclasses import dataclass

from tree_sitter import Node

from .chain import ChainLink
from .mappings import lookup_value_assertion, split_negation
from .strings import escape_regex, literal_string, regex_literal, todo

ASSERTION_METHODS = ("should", "and")
_PROPERTY_NAME = re.compile(r"[A-Za-z]+")

_EQUALITY = ("eq", "equal")
_CONTAINMENT = ("include", "contain")


@dataclass(frozen=True)
class PageAccessor:
    """The page property a chain asserts on."""

    kind: str
    expression: str
    call: str


def _accessor(chain: list[ChainLink]) -> tuple[PageAccessor, list[ChainLink]] | None:
    head, rest = chain[0], chain[1:]
    call = f"cy.{head.method}({head.args_text()})"
    if head.method == "url" and not head.args:
        return PageAccessor("url", "page.url()", call), rest
    if head.method == "title" and not head.args:
        return PageAccessor("title", "await page.title()", call), rest
    if head.method == "hash" and not head.args:
        return PageAccessor("location", "new URL(page.url()).hash", call), rest
    if head.method != "location":
        return None

    part = literal_string(head.args[0]) if head.args else None
    if head.args and part is None:
        return None
    if part is None and rest and rest[0].method == "its" and rest[0].args:
        part = literal_string(rest[0].args[0])
        call = f"{call}.its({rest[0].args_text()})"
        rest = rest[1:]
    if part is None or not _PROPERTY_NAME.fullmatch(part):
        return None
    return PageAccessor("location", f"new URL(page.url()).{part}", call), rest


def _pattern(operand: Node) -> str:
    content = literal_string(operand)
    if content is not None:
        return f"/{escape_regex(content)}/"
    return regex_literal(operand)


def _assert(accessor: PageAccessor, link: ChainLink) -> str:
    raw_keyword = literal_string(link.args[0]) or ""
    keyword, negated = split_negation(raw_keyword)
    negation = ".not" if negated else ""
    operands = link.args[1:]
    operand = link.arg_text(1)

    if operands:
        if accessor.kind == "url":
            if keyword in _CONTAINMENT:
                return f"await expect(page){negation}.toHaveURL({_pattern(operands[0])})"
            if keyword in _EQUALITY + ("match",):
                return f"await expect(page){negation}.toHaveURL({operand})"
        elif accessor.kind == "title":
            if keyword in _EQUALITY + ("match",):
                return f"await expect(page){negation}.toHaveTitle({operand})"
            if keyword in _CONTAINMENT:
                return f"await expect(page){negation}.toHaveTitle({_pattern(operands[0])})"
        else:
            if keyword in _EQUALITY:
                return f"expect({accessor.expression}){negation}.toBe({operand})"
            if keyword in _CONTAINMENT:
                return f"expect({accessor.expression}){negation}.toContain({operand})"
            if keyword == "match":
                return f"expect({accessor.expression}){negation}.toMatch({operand})"

    entry = lookup_value_assertion(keyword)
    if entry is not None:
        args = link.args_text(1) or ", ".join(entry.default_args)
        return f"expect({accessor.expression}){negation}.{entry.target_method}({args})"
    return todo(f"Migrate {accessor.call}.{link.method}({link.args_text()}) - unsupported page assertion")


def interpret_special_chain(chain: list[ChainLink], indent: str = "") -> str | None:
    """Playwright text for a page-property assertion chain, or ``None`` to decline."""
    if not chain:
        return None
    found = _accessor(chain)
    if found is None:
        return None
    accessor, assertions = found
    if not assertions:
        return None
    for link in assertions:
        if link.method not in ASSERTION_METHODS or not link.args or literal_string(link.args[0]) is None:
            return None
    return f";\n{indent}".join(_assert(accessor, link) for link in assertions)
