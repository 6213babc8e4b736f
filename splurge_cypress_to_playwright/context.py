"""Run configuration and per-file pipeline context.

``MigrationConfig`` holds every option that influences discovery,
rewriting and output of Cypress spec files. ``PipelineContext`` binds
one source file to its target path, the active configuration and a run
id. ``ContextManager`` loads configurations from YAML files.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config_validation import validate_migration_config_object
from .exceptions import ConfigurationError
from .result import Result

DEFAULT_FILE_PATTERNS = ["*.cy.ts", "*.cy.js", "*.cy.tsx", "*.cy.jsx"]


@dataclass(frozen=True)
class MigrationConfig:
    """Options controlling a migration run.

    Instances are immutable; use ``with_override`` to derive variants.
    """

    # Output settings
    target_root: str | None = None
    root_directory: str | None = None
    file_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_PATTERNS))
    recurse_directories: bool = True
    backup_originals: bool = True
    backup_root: str | None = None
    # Appended to the target filename stem
    target_suffix: str = ""
    # Replaces the final extension of target files; None keeps it
    target_extension: str | None = None
    rename_cy_to_spec: bool = False
    """Rename ``login.cy.ts`` to ``login.spec.ts`` when writing output"""

    # Parsing
    language: str = "auto"
    """Grammar used for parsing: auto, typescript, tsx or javascript"""

    # Transform selection
    transform_test_blocks: bool = True
    """Rewrite describe/it/hooks into test.describe/test/test.beforeEach"""
    transform_commands: bool = True
    """Rewrite cy.* command chains"""
    add_playwright_import: bool = True
    """Prefix the output with the @playwright/test import when missing"""
    remove_cypress_reference: bool = True
    """Drop ``/// <reference types="cypress" />`` directives"""

    # Logging and reporting
    log_level: str = "INFO"
    verbose: bool = False

    # Limits
    max_file_size_mb: int = 10

    # Behavior
    dry_run: bool = False
    fail_fast: bool = False
    continue_on_error: bool = False

    def with_override(self, **kwargs: Any) -> "MigrationConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **kwargs)

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If any field is out of range or inconsistent.
        """
        try:
            validate_migration_config_object(self)
        except Exception as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "MigrationConfig":
        """Build and validate a config, ignoring unknown keys.

        Raises:
            ValueError: If the resulting configuration is invalid.
        """
        filtered = {k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__}
        config = cls(**filtered)
        config.validate()
        return config

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class PipelineContext:
    """Immutable per-file context threaded through steps and jobs.

    Bundles the source and target paths, the active
    :class:`MigrationConfig`, a ``run_id`` for log correlation and a
    free-form metadata mapping.
    """

    source_file: str
    target_file: str
    config: MigrationConfig
    run_id: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # In-memory callers (tests, dry-run previews) may use paths that do not exist.
        if not Path(self.source_file).exists():
            logging.getLogger(__name__).warning(
                "PipelineContext created with non-existent source_file: %s", self.source_file
            )

    @classmethod
    def create(
        cls,
        source_file: str,
        target_file: str | None = None,
        config: MigrationConfig | None = None,
        run_id: str | None = None,
    ) -> "PipelineContext":
        """Construct a context, filling in defaults.

        Args:
            source_file: Path to the Cypress spec file.
            target_file: Output path; defaults to ``source_file``.
            config: Active configuration; defaults to ``MigrationConfig()``.
            run_id: Correlation id; a UUID4 is generated when omitted.

        Returns:
            A new ``PipelineContext``.
        """
        return cls(
            source_file=source_file,
            target_file=target_file or str(Path(source_file)),
            config=config or MigrationConfig(),
            run_id=run_id or str(uuid.uuid4()),
            metadata={},
        )

    def with_metadata(self, key: str, value: Any) -> "PipelineContext":
        """Return a copy with ``key`` set in the metadata."""
        return dataclasses.replace(self, metadata={**self.metadata, key: value})

    def with_config(self, **config_overrides: Any) -> "PipelineContext":
        """Return a copy whose configuration has the given overrides."""
        return dataclasses.replace(self, config=self.config.with_override(**config_overrides))

    def get_source_path(self) -> Path:
        return Path(self.source_file)

    def get_target_path(self) -> Path:
        return Path(self.target_file)

    def is_dry_run(self) -> bool:
        return self.config.dry_run

    def grammar_name(self) -> str:
        """Resolve the tree-sitter grammar for the source file.

        ``.tsx`` and ``.jsx`` files need the JSX-aware ``tsx`` grammar;
        everything else parses with ``typescript``, which accepts plain
        JavaScript test code too.
        """
        if self.config.language != "auto":
            return self.config.language
        if self.get_source_path().suffix.lower() in (".tsx", ".jsx"):
            return "tsx"
        return "typescript"

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_file": self.source_file,
            "target_file": self.target_file,
            "config": self.config.to_dict(),
            "run_id": self.run_id,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        return f"PipelineContext(source={self.source_file}, target={self.target_file}, run_id={self.run_id[:8]}...)"


class ContextManager:
    """Loading helpers for ``MigrationConfig``."""

    @staticmethod
    def load_config_from_file(config_file: str) -> Result[MigrationConfig]:
        """Load a ``MigrationConfig`` from a YAML file.

        Top-level keys that are not config fields are ignored.

        Args:
            config_file: Path to the YAML document.

        Returns:
            ``Result`` holding the config, or the reason it could not be built.
        """
        try:
            import yaml  # type: ignore[import-untyped]

            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            if not isinstance(config_data, dict):
                return Result.failure(
                    ConfigurationError("Configuration file must contain a mapping"), {"config_file": config_file}
                )

            return Result.success(MigrationConfig.from_dict(config_data))

        except FileNotFoundError:
            return Result.failure(
                FileNotFoundError(f"Configuration file not found: {config_file}"), {"config_file": config_file}
            )
        except Exception as e:
            return Result.failure(ValueError(f"Error loading configuration: {e}"), {"config_file": config_file})
