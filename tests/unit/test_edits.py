"""Tests for deferred range edits."""

import pytest

from splurge_cypress_to_playwright.exceptions import TransformationError
from splurge_cypress_to_playwright.syntax.edits import Edit, EditAccumulator
from splurge_cypress_to_playwright.syntax.tree import parse_source, walk


class TestEdit:
    def test_overlapping_ranges(self):
        assert Edit(0, 5, "").overlaps(Edit(4, 8, ""))
        assert not Edit(0, 5, "").overlaps(Edit(5, 8, ""))

    def test_insertions_never_overlap_each_other(self):
        assert not Edit(3, 3, "a").overlaps(Edit(3, 3, "b"))

    def test_insertion_inside_range_overlaps(self):
        assert Edit(2, 2, "x").overlaps(Edit(0, 5, ""))

    def test_contains(self):
        assert Edit(0, 10, "").contains(2, 4)
        assert not Edit(0, 10, "").contains(8, 12)
        assert not Edit(3, 3, "").contains(3, 3)


class TestEditAccumulator:
    def test_commit_applies_edits_in_source_order(self):
        source = b"abcdef"
        edits = EditAccumulator()
        assert edits.add_range(4, 6, "XY")
        assert edits.add_range(0, 1, "Z")

        assert edits.commit(source) == "ZbcdXY"
        assert len(edits) == 2

    def test_overlapping_edit_is_refused(self):
        edits = EditAccumulator()
        assert edits.add_range(0, 4, "a")

        assert not edits.add_range(2, 6, "b")
        assert len(edits) == 1

    def test_insertions_at_same_offset_keep_queue_order(self):
        edits = EditAccumulator()
        edits.add_range(1, 1, "first ")
        edits.add_range(1, 1, "second ")

        assert edits.commit(b"ab") == "afirst second b"

    def test_invalid_range_raises(self):
        with pytest.raises(TransformationError):
            EditAccumulator().add_range(5, 2, "x")

    def test_node_helpers_and_covers(self):
        tree = parse_source("cy.get('#a').click();\n")
        outer = next(node for node in walk(tree.root) if node.type == "call_expression")
        inner = next(node for node in walk(outer) if node.type == "call_expression" and node is not outer)
        edits = EditAccumulator()

        assert edits.replace(outer, "await page.locator('#a').click()")
        assert edits.covers(inner)
        assert not edits.replace(inner, "never")
        assert edits.commit(tree.source) == "await page.locator('#a').click();\n"

    def test_insert_before_node(self):
        tree = parse_source("run();\n")
        call = next(node for node in walk(tree.root) if node.type == "call_expression")
        edits = EditAccumulator()

        edits.insert_before(call, "await ")

        assert edits.commit(tree.source) == "await run();\n"

    def test_commit_handles_multibyte_text(self):
        tree = parse_source("const s = 'é'; f();\n")
        call = next(node for node in walk(tree.root) if node.type == "call_expression")
        edits = EditAccumulator()
        edits.replace(call, "g()")

        assert edits.commit(tree.source) == "const s = 'é'; g();\n"
