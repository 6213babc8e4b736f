"""Programmatic API for splurge_cypress_to_playwright.

``migrate`` is the entry point used by the CLI and by tests. It runs
``MigrationOrchestrator.migrate_file`` for each source and returns a
``Result`` holding the written target paths.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .context import MigrationConfig
from .events import EventBus
from .migration_orchestrator import MigrationOrchestrator
from .result import Result

logger = logging.getLogger(__name__)


def migrate(
    source_files: Iterable[str] | str, config: MigrationConfig | None = None, event_bus: EventBus | None = None
) -> Result[list[str]]:
    """Migrate one or more Cypress spec files.

    Files without Cypress usage are left alone and listed in
    ``metadata["unchanged"]``. In dry-run mode ``metadata["generated_code"]``
    maps each target path to its generated source and
    ``metadata["sources"]`` maps it back to the spec it came from.

    Processing stops at the first failing file and returns that failure,
    unless ``config.continue_on_error`` is set; then the remaining files
    are still migrated and the result is a warning listing
    ``metadata["failed_files"]``.
    """
    files = [source_files] if isinstance(source_files, str) else list(source_files)
    config = config or MigrationConfig()

    orchestrator = MigrationOrchestrator(event_bus, verbose=config.verbose)
    written: list[str] = []
    unchanged: list[str] = []
    failed: list[str] = []
    generated: dict[str, str] = {}
    sources: dict[str, str] = {}
    warnings: list[str] = []

    for src in files:
        result = orchestrator.migrate_file(src, config)

        if result.is_skipped():
            unchanged.append(src)
            continue
        if result.is_error():
            if not config.continue_on_error:
                return Result.failure(
                    result.error or RuntimeError(f"Failed to migrate {src}"), {"failed_files": [src]}
                )
            logger.error(f"Failed to migrate {src}: {result.error}")
            failed.append(src)
            continue

        target = str(result.data) if result.data is not None else src
        written.append(target)
        sources[target] = src
        warnings.extend(result.warnings or [])
        if "generated_code" in (result.metadata or {}):
            generated[target] = result.metadata["generated_code"]

    metadata: dict[str, object] = {"unchanged": unchanged, "sources": sources}
    if generated:
        metadata["generated_code"] = generated
    if failed:
        metadata["failed_files"] = failed
        warnings.append(f"Failed to migrate {len(failed)} files")
    if warnings:
        return Result.warning(written, warnings, metadata)
    return Result.success(written, metadata)
