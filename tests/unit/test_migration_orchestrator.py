"""Tests for MigrationOrchestrator."""

from pathlib import Path

import pytest

from splurge_cypress_to_playwright.context import MigrationConfig
from splurge_cypress_to_playwright.events import EventBus, PipelineCompletedEvent
from splurge_cypress_to_playwright.helpers.path_utils import PathValidationError
from splurge_cypress_to_playwright.migration_orchestrator import MigrationOrchestrator

SPEC = "it('opens', () => {\n  cy.visit('/');\n});\n"
MIGRATED = "test('opens', async ({ page }) => {\n  await page.goto('/');\n});\n"


@pytest.fixture
def orchestrator():
    return MigrationOrchestrator()


class TestTargetPath:
    def test_beside_source_by_default(self, orchestrator):
        target = orchestrator.target_path_for("specs/login.cy.ts", MigrationConfig(rename_cy_to_spec=True))

        assert target == Path("specs/login.spec.ts")

    def test_target_root_keeps_layout(self, orchestrator, tmp_path):
        root = tmp_path / "cypress"
        config = MigrationConfig(root_directory=str(root), target_root=str(tmp_path / "tests"))

        target = orchestrator.target_path_for(root / "auth" / "login.cy.ts", config)

        assert target == tmp_path / "tests" / "auth" / "login.cy.ts"

    def test_target_root_without_root_directory_is_flat(self, orchestrator, tmp_path):
        config = MigrationConfig(target_root=str(tmp_path / "tests"), target_suffix="_pw", target_extension="js")

        target = orchestrator.target_path_for(tmp_path / "deep" / "login.cy.ts", config)

        assert target == tmp_path / "tests" / "login.cy_pw.js"


class TestMigrateFile:
    def test_dry_run_returns_generated_code(self, orchestrator, tmp_path):
        spec = tmp_path / "home.cy.ts"
        spec.write_text(SPEC, encoding="utf-8")

        result = orchestrator.migrate_file(str(spec), MigrationConfig(dry_run=True, add_playwright_import=False))

        assert result.is_success()
        assert result.data == str(spec)
        assert result.metadata["changed"]
        assert result.metadata["generated_code"] == MIGRATED
        assert spec.read_text(encoding="utf-8") == SPEC

    def test_file_without_cypress_is_skipped(self, orchestrator, tmp_path):
        spec = tmp_path / "plain.cy.ts"
        spec.write_text("export const x = 1;\n", encoding="utf-8")

        result = orchestrator.migrate_file(str(spec))

        assert result.is_skipped()
        assert result.metadata["changed"] is False
        assert not (tmp_path / "plain.cy.ts.backup").exists()

    def test_missing_file_fails_with_suggestions(self, orchestrator, tmp_path):
        result = orchestrator.migrate_file(str(tmp_path / "missing.cy.ts"))

        assert result.is_error()
        assert result.metadata["suggestions"]

    def test_invalid_path(self, orchestrator):
        result = orchestrator.migrate_file("bad|name.cy.ts")

        assert result.is_error()
        assert isinstance(result.error, PathValidationError)

    def test_oversized_file(self, orchestrator, tmp_path):
        spec = tmp_path / "big.cy.ts"
        spec.write_text("cy.visit('/');\n" + "// padding\n" * 120_000, encoding="utf-8")

        result = orchestrator.migrate_file(str(spec), MigrationConfig(max_file_size_mb=1))

        assert result.is_error()
        assert "MB limit" in str(result.error)

    def test_syntax_errors_become_warnings(self, orchestrator, tmp_path):
        spec = tmp_path / "broken.cy.ts"
        spec.write_text("cy.visit('/');\nlet x = ;\n", encoding="utf-8")

        result = orchestrator.migrate_file(str(spec), MigrationConfig(dry_run=True))

        assert result.is_warning()
        assert "Syntax errors" in result.warnings[0]

    def test_publishes_pipeline_events(self, tmp_path):
        bus = EventBus()
        completed = []
        bus.subscribe(PipelineCompletedEvent, completed.append)
        spec = tmp_path / "home.cy.ts"
        spec.write_text(SPEC, encoding="utf-8")

        MigrationOrchestrator(bus).migrate_file(str(spec), MigrationConfig(dry_run=True))

        assert len(completed) == 1
        assert completed[0].final_result.is_success()


class TestFindSpecFiles:
    def test_patterns_and_recursion(self, orchestrator, tmp_path):
        (tmp_path / "nested").mkdir()
        for name in ("a.cy.ts", "b.cy.js", "c.ts", "nested/d.cy.ts"):
            (tmp_path / name).write_text("", encoding="utf-8")

        recursive = orchestrator.find_spec_files(tmp_path, MigrationConfig())
        flat = orchestrator.find_spec_files(tmp_path, MigrationConfig(recurse_directories=False))

        assert [path.name for path in recursive] == ["a.cy.ts", "b.cy.js", "d.cy.ts"]
        assert [path.name for path in flat] == ["a.cy.ts", "b.cy.js"]
