"""Tests for the assertion and action lookup tables."""

import pytest

from splurge_cypress_to_playwright.transformers.mappings import (
    ACTION_MAP,
    ASSERTION_MAP,
    VALUE_ASSERTION_MAP,
    ArgTransform,
    MappingEntry,
    lookup_assertion,
    lookup_value_assertion,
    split_negation,
)


@pytest.mark.parametrize(
    "keyword, expected",
    [
        ("not.be.visible", ("be.visible", True)),
        ("be.visible", ("be.visible", False)),
        ("not.have.class", ("have.class", True)),
        ("nothing", ("nothing", False)),
    ],
)
def test_split_negation(keyword, expected):
    assert split_negation(keyword) == expected


def test_lookup_assertion():
    entry = lookup_assertion("have.class")

    assert entry is not None
    assert entry.target_method == "toHaveClass"
    assert entry.arg_transform == ArgTransform.REGEX_FROM_STRING_LITERAL


def test_lookup_is_exact():
    assert lookup_assertion("be.Visible") is None
    assert lookup_assertion("not.be.visible") is None
    assert lookup_value_assertion("be.truthy") is None


def test_value_table_defaults():
    assert lookup_value_assertion("be.true") == MappingEntry("be.true", "toBe", default_args=("true",))
    assert lookup_value_assertion("be.empty").default_args == ("0",)


def test_tables_are_keyed_by_source_keyword():
    for table in (ASSERTION_MAP, VALUE_ASSERTION_MAP):
        for keyword, entry in table.items():
            assert entry.source_keyword == keyword
            assert entry.target_method.startswith("to")
            assert not keyword.startswith("not.")


def test_data_attribute_transform():
    assert ASSERTION_MAP["have.data"].arg_transform == ArgTransform.DATA_ATTRIBUTE
    assert ASSERTION_MAP["have.data"].target_method == "toHaveAttribute"


@pytest.mark.parametrize(
    "command, method",
    [("type", "fill"), ("select", "selectOption"), ("scrollIntoView", "scrollIntoViewIfNeeded"), ("click", "click")],
)
def test_action_map(command, method):
    assert ACTION_MAP[command] == method
