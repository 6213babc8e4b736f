"""Main migration orchestrator that coordinates all jobs.

For each spec file the orchestrator validates the path, works out the
target filename, reads the source and runs the collector and output
jobs as one pipeline. Directory migration expands the configured file
patterns and keeps only files that really use Cypress.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from pathlib import Path
from typing import Any

from .context import MigrationConfig, PipelineContext
from .detectors import CypressFileDetector
from .events import EventBus, LoggingSubscriber
from .helpers.path_utils import (
    PathValidationError,
    playwright_target_name,
    suggest_path_fixes,
    validate_source_path,
    validate_target_path,
)
from .jobs import CollectorJob, OutputJob
from .pipeline import Pipeline
from .result import Result


class MigrationOrchestrator:
    """Main orchestrator for Cypress to Playwright migration.

    Args:
        event_bus: Optional shared bus; a private one is created otherwise.
        verbose: Log step progress at INFO instead of DEBUG.
    """

    def __init__(self, event_bus: EventBus | None = None, verbose: bool = False) -> None:
        self.event_bus = event_bus or EventBus()
        self.logger_subscriber = LoggingSubscriber(self.event_bus, verbose=verbose)
        self._logger = logging.getLogger(__name__)
        self._detector = CypressFileDetector()

        self.collector_job = CollectorJob(self.event_bus)
        self.output_job = OutputJob(self.event_bus)

        self._logger.debug("Migration orchestrator initialized")

    def target_path_for(self, source_file: str | Path, config: MigrationConfig) -> Path:
        """Output path for ``source_file`` under ``config``.

        The name comes from :func:`playwright_target_name`. The directory
        is ``target_root`` when set (keeping the layout below
        ``root_directory``), otherwise the source file's own directory.

        Raises:
            PathValidationError: If the resulting path is invalid.
        """
        source_path = Path(source_file)
        name = playwright_target_name(
            source_path.name, config.target_suffix, config.target_extension, config.rename_cy_to_spec
        )
        if not config.target_root:
            return validate_target_path(source_path.with_name(name))

        relative_parent = Path()
        if config.root_directory:
            try:
                relative_parent = source_path.resolve().parent.relative_to(Path(config.root_directory).resolve())
            except ValueError:
                relative_parent = Path()
        return validate_target_path(Path(config.target_root) / relative_parent / name)

    def migrate_file(self, source_file: str, config: MigrationConfig | None = None) -> Result[str]:
        """Migrate a single Cypress spec.

        Returns:
            Success (or warning) holding the target path; in dry-run mode
            ``metadata["generated_code"]`` carries the new source. A file
            without Cypress usage gives a skipped result with
            ``metadata["changed"] = False``. IO and validation problems
            give a failure.
        """
        config = config or MigrationConfig()
        self._logger.info(f"Starting migration of {source_file}")

        try:
            validated_source = validate_source_path(source_file)
            target_file = self.target_path_for(validated_source, config)
        except PathValidationError as e:
            return Result.failure(e, {"source_file": source_file})

        try:
            size_mb = validated_source.stat().st_size / (1024 * 1024)
            if size_mb > config.max_file_size_mb:
                return Result.failure(
                    ValueError(f"{source_file} is {size_mb:.1f} MB, above the {config.max_file_size_mb} MB limit"),
                    {"source_file": source_file},
                )
            source_code = validated_source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            suggestions = suggest_path_fixes(e, source_file)
            self._logger.error(f"Cannot read {source_file}: {e}")
            for suggestion in suggestions:
                self._logger.info(f"  suggestion: {suggestion}")
            return Result.failure(e, {"source_file": source_file, "suggestions": suggestions})

        context = PipelineContext.create(source_file=str(validated_source), target_file=str(target_file), config=config)
        result = self._create_migration_pipeline().execute(context, source_code)

        if result.is_skipped():
            self._logger.info(f"No changes for {source_file}")
            return Result.skipped(
                result.reason or f"No Cypress usage in {source_file}",
                {"changed": False, "source_file": source_file},
            )
        if result.is_error():
            self._logger.error(f"Migration failed for {source_file}: {result.error}")
            return result

        self._logger.info(f"Migration completed for {source_file}")
        metadata = {**(result.metadata or {}), "changed": True, "source_file": source_file}
        if result.is_warning():
            return Result.warning(result.data, result.warnings or [], metadata)
        return Result.success(result.data, metadata)

    def find_spec_files(self, source_dir: str | Path, config: MigrationConfig) -> list[Path]:
        """Files under ``source_dir`` matching ``config.file_patterns``."""
        root = Path(source_dir)
        matches: set[Path] = set()
        for pattern in config.file_patterns:
            found = root.rglob(pattern) if config.recurse_directories else root.glob(pattern)
            matches.update(path for path in found if path.is_file())
        return sorted(matches)

    def migrate_directory(self, source_dir: str, config: MigrationConfig | None = None) -> Result[list[str]]:
        """Migrate every Cypress spec found under ``source_dir``.

        Returns:
            Success with the written targets, a warning listing failed
            files in ``metadata["failed_files"]``, or a failure when
            ``fail_fast`` is set and a file fails.
        """
        config = config or MigrationConfig()
        try:
            source_path = validate_source_path(source_dir)
        except PathValidationError as e:
            return Result.failure(e)

        if not source_path.is_dir():
            error = NotADirectoryError(f"Path is not a directory: {source_dir}")
            return Result.failure(error, {"suggestions": suggest_path_fixes(error, source_dir)})

        if config.root_directory is None:
            config = config.with_override(root_directory=str(source_path))

        candidates = self.find_spec_files(source_path, config)
        spec_files = []
        for candidate in candidates:
            try:
                if self._detector.is_cypress_file(candidate):
                    spec_files.append(candidate)
            except (OSError, UnicodeDecodeError):
                self._logger.debug(f"Skipping unreadable file: {candidate}")

        if not spec_files:
            self._logger.warning(f"No Cypress spec files found in {source_dir}")
            return Result.success([])
        self._logger.info(f"Found {len(spec_files)} Cypress spec files to migrate")

        written: list[str] = []
        failed: list[str] = []
        for spec_file in spec_files:
            result = self.migrate_file(str(spec_file), config)
            if result.is_error():
                failed.append(str(spec_file))
                if config.fail_fast:
                    return Result.failure(
                        result.error or RuntimeError(f"Failed to migrate {spec_file}"),
                        {"failed_files": failed, "migrated_files": written},
                    )
            elif not result.is_skipped() and result.data is not None:
                written.append(str(result.data))

        self._logger.info(f"Directory migration completed: {len(written)} written, {len(failed)} failed")
        if failed:
            return Result.warning(written, [f"Failed to migrate {len(failed)} files"], {"failed_files": failed})
        return Result.success(written)

    def _create_migration_pipeline(self) -> Pipeline[str, str]:
        jobs: list[Any] = [self.collector_job, self.output_job]
        return Pipeline("migration", jobs, self.event_bus)
