"""Tests for Mocha block recognition and rewriting."""

import pytest

from splurge_cypress_to_playwright.syntax.edits import EditAccumulator
from splurge_cypress_to_playwright.syntax.tree import named_args, parse_source, walk
from splurge_cypress_to_playwright.transformers.test_blocks import (
    TEST_BLOCK_MAP,
    BlockKind,
    classify_test_block,
    find_test_blocks,
    has_block_shape,
    looks_like_test_block,
    rewrite_test_block,
)


def _first_call(code: str):
    tree = parse_source(code)
    return next(node for node in walk(tree.root) if node.type == "call_expression")


def _rewrite(code: str) -> str:
    tree = parse_source(code)
    edits = EditAccumulator()
    for match in find_test_blocks(tree.root):
        rewrite_test_block(match, edits)
    return edits.commit(tree.source)


class TestClassification:
    @pytest.mark.parametrize(
        "code, name, kind",
        [
            ("describe('group', () => {});", "describe", BlockKind.GROUP),
            ("context('group', function () {});", "context", BlockKind.GROUP),
            ("it('case', () => {});", "it", BlockKind.CASE),
            ("specify('case', async () => {});", "specify", BlockKind.CASE),
            ("beforeEach(() => {});", "beforeEach", BlockKind.HOOK),
            ("after('named hook', function () {});", "after", BlockKind.HOOK),
            ("it.only('focused', () => {});", "it", BlockKind.CASE),
            ("describe.skip('skipped', () => {});", "describe", BlockKind.GROUP),
        ],
    )
    def test_valid_blocks(self, code, name, kind):
        match = classify_test_block(_first_call(code))

        assert match is not None
        assert match.name == name
        assert match.mapping.kind == kind

    @pytest.mark.parametrize(
        "code",
        [
            "describe(model);",
            "it('no callback');",
            "it(name, () => {});",
            "it('a', () => {}, 5000);",
            "describe('a', handler);",
            "user.describe('a', () => {});",
            "beforeEach.skip(() => {});",
            "it.each('a', () => {});",
            "test('a', () => {});",
        ],
    )
    def test_rejected_shapes(self, code):
        assert not looks_like_test_block(_first_call(code))

    def test_template_title_is_accepted(self):
        assert looks_like_test_block(_first_call("it(`case ${n}`, () => {});"))

    def test_case_requires_title(self):
        call = _first_call("it(() => {});")

        assert not has_block_shape(BlockKind.CASE, named_args(call))
        assert has_block_shape(BlockKind.HOOK, named_args(call))

    def test_mapping_table(self):
        assert TEST_BLOCK_MAP["before"].target == "test.beforeAll"
        assert TEST_BLOCK_MAP["afterEach"].passes_page
        assert not TEST_BLOCK_MAP["after"].passes_page
        assert not TEST_BLOCK_MAP["describe"].is_async


class TestRewrite:
    def test_case_with_arrow(self):
        assert _rewrite("it('works', () => {});") == "test('works', async ({ page }) => {});"

    def test_case_with_single_parameter_arrow(self):
        assert _rewrite("it('works', done => {});") == "test('works', async ({ page }) => {});"

    def test_already_async_arrow(self):
        assert _rewrite("it('works', async () => {});") == "test('works', async ({ page }) => {});"

    def test_function_expression_callback(self):
        assert _rewrite("it('works', function () {});") == "test('works', async function ({ page }) {});"

    def test_group_only_renamed(self):
        assert _rewrite("describe('suite', function () {});") == "test.describe('suite', function () {});"

    def test_before_all_hook_gets_no_page(self):
        assert _rewrite("before(() => {});") == "test.beforeAll(async () => {});"

    def test_before_each_hook_gets_page(self):
        assert _rewrite("beforeEach(() => {});") == "test.beforeEach(async ({ page }) => {});"

    def test_modifier_is_kept(self):
        assert _rewrite("it.only('focus', () => {});") == "test.only('focus', async ({ page }) => {});"

    def test_nested_blocks(self):
        code = "describe('a', () => {\n  it('b', () => {});\n});"
        expected = "test.describe('a', () => {\n  test('b', async ({ page }) => {});\n});"

        assert _rewrite(code) == expected

    def test_rename_refused_when_range_is_taken(self):
        tree = parse_source("it('a', () => {});")
        match = find_test_blocks(tree.root)[0]
        edits = EditAccumulator()
        edits.replace(match.call, "replaced()")

        assert not rewrite_test_block(match, edits)
        assert len(edits) == 1
