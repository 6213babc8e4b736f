"""Tests for backups made by the output job."""

from pathlib import Path

from splurge_cypress_to_playwright.context import MigrationConfig, PipelineContext
from splurge_cypress_to_playwright.events import EventBus
from splurge_cypress_to_playwright.jobs import OutputJob
from splurge_cypress_to_playwright.jobs.output_job import BACKUP_SUFFIX, backup_path_for


def test_backup_beside_source():
    assert backup_path_for("specs/login.cy.ts") == Path("specs/login.cy.ts.backup")


def test_backup_root_keeps_layout(tmp_path):
    source = tmp_path / "cypress" / "e2e" / "auth" / "login.cy.ts"

    backup = backup_path_for(str(source), str(tmp_path / "bak"), str(tmp_path / "cypress"))

    assert backup == tmp_path / "bak" / "e2e" / "auth" / ("login.cy.ts" + BACKUP_SUFFIX)


def test_backup_root_outside_root_directory_is_flat(tmp_path):
    source = tmp_path / "elsewhere" / "login.cy.ts"

    backup = backup_path_for(str(source), str(tmp_path / "bak"), str(tmp_path / "cypress"))

    assert backup == tmp_path / "bak" / "login.cy.ts.backup"


class TestOutputJob:
    def _context(self, tmp_path, **config):
        source = tmp_path / "login.cy.ts"
        source.write_text("cy.visit('/login');\n", encoding="utf-8")
        target = tmp_path / "login.spec.ts"
        return PipelineContext.create(str(source), str(target), MigrationConfig(**config))

    def test_writes_target_and_backup(self, tmp_path):
        context = self._context(tmp_path)

        result = OutputJob(EventBus()).execute(context, "await page.goto('/login');\n")

        assert result.is_success()
        assert (tmp_path / "login.spec.ts").read_text(encoding="utf-8") == "await page.goto('/login');\n"
        assert (tmp_path / "login.cy.ts.backup").read_text(encoding="utf-8") == "cy.visit('/login');\n"

    def test_existing_backup_is_kept(self, tmp_path):
        context = self._context(tmp_path)
        (tmp_path / "login.cy.ts.backup").write_text("first backup", encoding="utf-8")

        OutputJob(EventBus()).execute(context, "await page.goto('/login');\n")

        assert (tmp_path / "login.cy.ts.backup").read_text(encoding="utf-8") == "first backup"

    def test_backup_disabled(self, tmp_path):
        context = self._context(tmp_path, backup_originals=False)

        OutputJob(EventBus()).execute(context, "x")

        assert not (tmp_path / "login.cy.ts.backup").exists()

    def test_dry_run_writes_nothing(self, tmp_path):
        context = self._context(tmp_path, dry_run=True)

        result = OutputJob(EventBus()).execute(context, "await page.goto('/login');\n")

        assert result.metadata["generated_code"] == "await page.goto('/login');\n"
        assert not (tmp_path / "login.spec.ts").exists()
        assert not (tmp_path / "login.cy.ts.backup").exists()

    def test_backup_under_backup_root(self, tmp_path):
        context = self._context(tmp_path, backup_root=str(tmp_path / "bak"), root_directory=str(tmp_path))

        OutputJob(EventBus()).execute(context, "x")

        assert (tmp_path / "bak" / "login.cy.ts.backup").exists()
