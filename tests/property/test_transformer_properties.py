"""Property-based tests for whole-file transformation."""

from hypothesis import given

from splurge_cypress_to_playwright.context import MigrationConfig
from splurge_cypress_to_playwright.syntax.tree import parse_source
from splurge_cypress_to_playwright.transformers.cypress_transformer import CypressToPlaywrightTransformer
from tests.hypothesis_config import TRANSFORM_SETTINGS
from tests.property.strategies import cypress_specs, identifiers


def _code_lines(code: str) -> list[str]:
    return [line.strip() for line in code.splitlines() if not line.strip().startswith("//")]


class TestTransformerProperties:
    """Invariants that hold for any generated spec."""

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs())
    def test_output_has_no_cypress_commands_left(self, spec: str) -> None:
        outcome = CypressToPlaywrightTransformer().transform(spec)

        assert outcome.code is not None
        assert not any(line.startswith("cy.") for line in _code_lines(outcome.code))
        assert "TODO" not in outcome.code

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs())
    def test_output_parses_cleanly(self, spec: str) -> None:
        code = CypressToPlaywrightTransformer().transform_code(spec)

        assert not parse_source(code).has_errors

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs())
    def test_second_pass_changes_nothing(self, spec: str) -> None:
        transformer = CypressToPlaywrightTransformer()
        first = transformer.transform_code(spec)

        assert transformer.transform(first).code is None

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs())
    def test_every_case_becomes_async_test(self, spec: str) -> None:
        code = CypressToPlaywrightTransformer().transform_code(spec)

        assert code.count("async ({ page }) =>") == spec.count("\n  it('") + spec.count("\n  beforeEach(")
        assert code.startswith("import { test, expect } from '@playwright/test';\n\ntest.describe(")

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs())
    def test_local_cy_binding_blocks_every_rewrite(self, spec: str) -> None:
        shadowed = "const cy = makeDriver();\n" + spec

        outcome = CypressToPlaywrightTransformer().transform(shadowed)

        assert outcome.code is None
        assert CypressToPlaywrightTransformer().transform_code(shadowed) == shadowed

    @TRANSFORM_SETTINGS
    @given(spec=cypress_specs(), name=identifiers)
    def test_parameter_named_cy_is_left_alone(self, spec: str, name: str) -> None:
        helper = f"function {name}(cy) {{\n  return cy.get('.x');\n}}\n"

        code = CypressToPlaywrightTransformer(MigrationConfig(add_playwright_import=False)).transform_code(
            helper + spec
        )

        assert code.startswith(helper)
