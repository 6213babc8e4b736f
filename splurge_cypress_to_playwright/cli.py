"""Command-line interface for the Cypress to Playwright migration tool.

This module defines the ``splurge-cypress-to-playwright`` typer
application. The commands only translate options into a
``MigrationConfig``; the work is done by :func:`main.migrate` so the same
logic is available from Python code.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from typing import cast

import typer

from . import main as main_module
from .cli_helpers import (
    build_config,
    collect_source_files,
    create_event_bus,
    render_dry_run,
    set_quiet_mode,
    setup_logging,
    setup_logging_with_level,
)
from .context import ContextManager, MigrationConfig

app = typer.Typer(
    name="splurge-cypress-to-playwright",
    help="Migrate Cypress end-to-end specs to Playwright Test",
    add_completion=False,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

logger = logging.getLogger(__name__)


def _load_base_config(config_file: str | None) -> MigrationConfig:
    if config_file is None:
        return MigrationConfig()
    config_result = ContextManager.load_config_from_file(config_file)
    if not config_result.is_success():
        typer.echo(f"Error loading configuration file: {config_result.error}")
        raise typer.Exit(code=1)
    logger.info(f"Loaded configuration from: {config_file}")
    return cast(MigrationConfig, config_result.data)


@app.command("migrate")
def migrate(
    source_files: list[str] = typer.Argument(..., help="Cypress spec files or directories"),
    root_directory: str | None = typer.Option(None, "--dir", "-d", help="Root directory to search for specs"),
    file_patterns: list[str] | None = typer.Option(
        None, "--file", "-f", help="Glob patterns for spec files (repeatable, default *.cy.ts, *.cy.js, ...)"
    ),
    recurse: bool = typer.Option(True, "--recurse/--no-recurse", "-r", help="Recurse into subdirectories"),
    target_root: str | None = typer.Option(None, "--target-root", "-t", help="Directory for generated files"),
    skip_backup: bool = typer.Option(False, "--skip-backup", help="Do not back up original specs"),
    backup_root: str | None = typer.Option(None, "--backup-root", help="Directory for backups of original specs"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print results instead of writing files"),
    diff: bool = typer.Option(False, "--diff", help="With --dry-run, show unified diffs"),
    list_files: bool = typer.Option(False, "--list", help="With --dry-run, list target files only"),
    posix: bool = typer.Option(False, "--posix", help="Display paths with forward slashes"),
    suffix: str = typer.Option("", "--suffix", help="Suffix appended to the target filename stem"),
    ext: str | None = typer.Option(None, "--ext", help="Override the target file extension (e.g. 'ts')"),
    rename_spec: bool = typer.Option(False, "--rename-spec", help="Rename login.cy.ts to login.spec.ts"),
    language: str = typer.Option("auto", "--language", help="Grammar: auto, typescript, tsx or javascript"),
    no_import: bool = typer.Option(False, "--no-import", help="Do not add the @playwright/test import"),
    fail_fast: bool = typer.Option(False, "--fail-fast", help="Stop on the first failing file"),
    continue_on_error: bool = typer.Option(
        False, "--continue-on-error", help="Keep going when individual files fail"
    ),
    config_file: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    info: bool = typer.Option(False, "--info", help="Enable info logging output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report per-step progress"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging output"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Migrate Cypress specs to Playwright Test.

    Examples:
        # Preview the conversion of one spec
        splurge-cypress-to-playwright migrate --dry-run cypress/e2e/login.cy.ts

        # Convert a whole suite into a separate directory
        splurge-cypress-to-playwright migrate -d cypress/e2e -t tests/e2e --rename-spec
    """
    if info and debug:
        typer.echo("Error: --info and --debug cannot be used together.")
        raise typer.Exit(code=2)
    if fail_fast and continue_on_error:
        typer.echo("Error: --fail-fast and --continue-on-error cannot be used together.")
        raise typer.Exit(code=2)
    if (diff or list_files) and not dry_run:
        typer.echo("Error: --diff and --list require --dry-run.")
        raise typer.Exit(code=2)

    base_config = _load_base_config(config_file)

    overrides: dict[str, object] = {
        "recurse_directories": recurse,
        "backup_originals": base_config.backup_originals and not skip_backup,
        "dry_run": dry_run or base_config.dry_run,
        "fail_fast": fail_fast or base_config.fail_fast,
        "continue_on_error": continue_on_error or base_config.continue_on_error,
        "add_playwright_import": base_config.add_playwright_import and not no_import,
        "rename_cy_to_spec": rename_spec or base_config.rename_cy_to_spec,
        "verbose": verbose or base_config.verbose,
    }
    if file_patterns:
        overrides["file_patterns"] = file_patterns
    if root_directory is not None:
        overrides["root_directory"] = root_directory
    if target_root is not None:
        overrides["target_root"] = target_root
    if backup_root is not None:
        overrides["backup_root"] = backup_root
    if suffix:
        overrides["target_suffix"] = suffix
    if ext is not None:
        overrides["target_extension"] = ext.lstrip(".")
    if language != "auto":
        overrides["language"] = language
    if log_level is not None:
        overrides["log_level"] = log_level.upper()

    try:
        config = build_config(base_config, overrides)
    except ValueError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=2) from e

    if debug or info:
        setup_logging(debug)
    else:
        setup_logging_with_level(config.log_level)
        set_quiet_mode(log_level is None and not config.verbose)

    valid_files = collect_source_files(
        source_files, config.root_directory, config.file_patterns, config.recurse_directories
    )
    if not valid_files:
        typer.echo("No Cypress spec files found.")
        raise typer.Exit(code=1)
    logger.info(f"Found {len(valid_files)} spec files to process")

    result = main_module.migrate(valid_files, config=config, event_bus=create_event_bus())

    if result.is_error():
        typer.echo(f"Migration failed: {result.error}")
        raise typer.Exit(code=1)

    metadata = result.metadata or {}
    for warning in result.warnings or []:
        logger.warning(warning)
    written = result.data or []
    logger.info(f"Migrated {len(written)} files, {len(metadata.get('unchanged', []))} unchanged")

    if config.dry_run:
        blocks = render_dry_run(
            metadata.get("generated_code", {}),
            metadata.get("sources", {}),
            list_files=list_files,
            show_diff=diff,
            posix=posix,
        )
        for block in blocks:
            typer.echo(block)

    if metadata.get("failed_files"):
        raise typer.Exit(code=1)


@app.command("version")
def version() -> None:
    """Show the version of splurge-cypress-to-playwright."""
    from . import __version__

    typer.echo(f"splurge-cypress-to-playwright {__version__}")


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
