"""Declarative Cypress to Playwright lookup tables.

``ASSERTION_MAP`` translates chai/jQuery assertion keywords used with
``should``/``and`` on an element into Playwright locator matchers.
``VALUE_ASSERTION_MAP`` does the same for plain values produced by
``its``/``invoke``/``wrap``. ``ACTION_MAP`` renames element commands
that have a one to one Playwright counterpart.

Keywords are matched exactly, after a leading ``not.`` has been
stripped.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from dataclasses import dataclass
from enum import Enum


class ArgTransform(Enum):
    """How assertion operands are rewritten before being passed on."""

    NONE = "none"
    # 'active' -> /active/
    REGEX_FROM_STRING_LITERAL = "regexFromStringLiteral"
    # 'id' -> 'data-id'
    DATA_ATTRIBUTE = "dataAttribute"


@dataclass(frozen=True)
class MappingEntry:
    source_keyword: str
    target_method: str
    arg_transform: ArgTransform = ArgTransform.NONE
    default_args: tuple[str, ...] = ()


def _table(*entries: MappingEntry) -> dict[str, MappingEntry]:
    return {entry.source_keyword: entry for entry in entries}


ASSERTION_MAP: dict[str, MappingEntry] = _table(
    # Visibility and presence
    MappingEntry("be.visible", "toBeVisible"),
    MappingEntry("be.hidden", "toBeHidden"),
    MappingEntry("be.invisible", "toBeHidden"),
    MappingEntry("exist", "toBeAttached"),
    MappingEntry("be.exist", "toBeAttached"),
    # Text content
    MappingEntry("have.text", "toHaveText"),
    MappingEntry("contain", "toContainText"),
    MappingEntry("contain.text", "toContainText"),
    MappingEntry("include", "toContainText"),
    MappingEntry("include.text", "toContainText"),
    MappingEntry("eq", "toHaveText"),
    MappingEntry("equal", "toHaveText"),
    MappingEntry("match", "toHaveText"),
    # Form state
    MappingEntry("have.value", "toHaveValue"),
    MappingEntry("be.disabled", "toBeDisabled"),
    MappingEntry("be.enabled", "toBeEnabled"),
    MappingEntry("be.checked", "toBeChecked"),
    MappingEntry("be.selected", "toBeChecked"),
    MappingEntry("be.focused", "toBeFocused"),
    MappingEntry("have.focus", "toBeFocused"),
    MappingEntry("be.empty", "toBeEmpty"),
    MappingEntry("be.readonly", "toHaveAttribute", default_args=("'readonly'",)),
    # Attributes, classes and styles
    MappingEntry("have.class", "toHaveClass", ArgTransform.REGEX_FROM_STRING_LITERAL),
    MappingEntry("have.attr", "toHaveAttribute"),
    MappingEntry("have.id", "toHaveId"),
    MappingEntry("have.prop", "toHaveJSProperty"),
    MappingEntry("have.css", "toHaveCSS"),
    MappingEntry("have.data", "toHaveAttribute", ArgTransform.DATA_ATTRIBUTE),
    # Cardinality
    MappingEntry("have.length", "toHaveCount"),
)

VALUE_ASSERTION_MAP: dict[str, MappingEntry] = _table(
    MappingEntry("eq", "toBe"),
    MappingEntry("equal", "toBe"),
    MappingEntry("deep.equal", "toEqual"),
    MappingEntry("eql", "toEqual"),
    MappingEntry("deep.eq", "toEqual"),
    MappingEntry("include", "toContain"),
    MappingEntry("contain", "toContain"),
    MappingEntry("match", "toMatch"),
    MappingEntry("have.length", "toHaveLength"),
    MappingEntry("have.property", "toHaveProperty"),
    MappingEntry("be.empty", "toHaveLength", default_args=("0",)),
    MappingEntry("be.true", "toBe", default_args=("true",)),
    MappingEntry("be.false", "toBe", default_args=("false",)),
    MappingEntry("be.null", "toBeNull"),
    MappingEntry("be.undefined", "toBeUndefined"),
    MappingEntry("exist", "toBeDefined"),
    MappingEntry("be.ok", "toBeTruthy"),
    MappingEntry("be.gt", "toBeGreaterThan"),
    MappingEntry("be.greaterThan", "toBeGreaterThan"),
    MappingEntry("be.gte", "toBeGreaterThanOrEqual"),
    MappingEntry("be.at.least", "toBeGreaterThanOrEqual"),
    MappingEntry("be.lt", "toBeLessThan"),
    MappingEntry("be.lessThan", "toBeLessThan"),
    MappingEntry("be.lte", "toBeLessThanOrEqual"),
    MappingEntry("be.at.most", "toBeLessThanOrEqual"),
)

ACTION_MAP: dict[str, str] = {
    "type": "fill",
    "clear": "clear",
    "check": "check",
    "uncheck": "uncheck",
    "click": "click",
    "dblclick": "dblclick",
    "focus": "focus",
    "blur": "blur",
    "select": "selectOption",
    "scrollIntoView": "scrollIntoViewIfNeeded",
}

NEGATION_PREFIX = "not."


def split_negation(keyword: str) -> tuple[str, bool]:
    """Strip a leading ``not.`` and report whether it was there."""
    if keyword.startswith(NEGATION_PREFIX):
        return keyword[len(NEGATION_PREFIX) :], True
    return keyword, False


def lookup_assertion(keyword: str) -> MappingEntry | None:
    return ASSERTION_MAP.get(keyword)


def lookup_value_assertion(keyword: str) -> MappingEntry | None:
    return VALUE_ASSERTION_MAP.get(keyword)
