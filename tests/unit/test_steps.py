"""Tests for the parse, transform and write steps."""

from splurge_cypress_to_playwright.context import MigrationConfig, PipelineContext
from splurge_cypress_to_playwright.events import EventBus, TransformationCompletedEvent
from splurge_cypress_to_playwright.steps import ParseSourceStep, TransformCypressStep, WriteOutputStep
from splurge_cypress_to_playwright.syntax.tree import SourceTree, parse_source


def _context(tmp_path, name="home.cy.ts", **config):
    source = tmp_path / name
    source.write_text("cy.visit('/');\n", encoding="utf-8")
    target = tmp_path / "out" / name.replace(".cy.", ".spec.")
    return PipelineContext.create(str(source), str(target), MigrationConfig(**config), run_id="run")


class TestParseSourceStep:
    def test_clean_source(self, tmp_path):
        result = ParseSourceStep("parse", EventBus()).run(_context(tmp_path), "cy.visit('/');\n")

        assert result.is_success()
        assert isinstance(result.data, SourceTree)
        assert result.metadata == {"grammar": "typescript"}

    def test_tsx_grammar_from_extension(self, tmp_path):
        result = ParseSourceStep("parse", EventBus()).run(_context(tmp_path, "card.cy.tsx"), "cy.mount(<Card />);\n")

        assert result.is_success()
        assert result.data.grammar == "tsx"

    def test_syntax_errors_give_warning(self, tmp_path):
        context = _context(tmp_path)

        result = ParseSourceStep("parse", EventBus()).run(context, "cy.visit('/');\nlet x = ;\n")

        assert result.is_warning()
        assert result.data.has_errors
        assert result.warnings[0].startswith(f"Syntax errors in {context.source_file}")
        assert result.metadata["parse_error"]["source_file"] == context.source_file


class TestTransformCypressStep:
    def test_rewrites_and_publishes_statistics(self, tmp_path):
        bus = EventBus()
        events = []
        bus.subscribe(TransformationCompletedEvent, events.append)
        context = _context(tmp_path, add_playwright_import=False)

        result = TransformCypressStep("transform", bus).run(context, parse_source("cy.visit('/');\n"))

        assert result.is_success()
        assert result.data == "await page.goto('/');\n"
        assert result.metadata["changed"]
        assert len(events) == 1
        assert events[0].statistics["chains_rewritten"] == 1
        assert events[0].transformation_type == "cypress_to_playwright"

    def test_no_cypress_is_skipped(self, tmp_path):
        result = TransformCypressStep("transform", EventBus()).run(_context(tmp_path), parse_source("run();\n"))

        assert result.is_skipped()
        assert result.metadata["changed"] is False
        assert "No Cypress usage" in result.reason


class TestWriteOutputStep:
    def test_dry_run_returns_code(self, tmp_path):
        context = _context(tmp_path, dry_run=True)

        result = WriteOutputStep("write", EventBus()).run(context, "await page.goto('/');\n")

        assert result.is_success()
        assert result.metadata["generated_code"] == "await page.goto('/');\n"
        assert not context.get_target_path().exists()

    def test_writes_file_and_creates_directory(self, tmp_path):
        context = _context(tmp_path)

        result = WriteOutputStep("write", EventBus()).run(context, "await page.goto('/');\n")

        assert result.is_success()
        assert result.data == context.target_file
        assert context.get_target_path().read_text(encoding="utf-8") == "await page.goto('/');\n"
