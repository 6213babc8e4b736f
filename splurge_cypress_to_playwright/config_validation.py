"""Configuration validation using pydantic schemas.

``ValidatedMigrationConfig`` mirrors :class:`~.context.MigrationConfig`
with bounds and per-field checks; ``MigrationConfig.validate`` routes
through ``validate_migration_config_object``.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

VALID_LANGUAGES = ("auto", "typescript", "tsx", "javascript")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ValidatedMigrationConfig(BaseModel):
    """Validated version of MigrationConfig with runtime validation."""

    model_config = ConfigDict(validate_assignment=True)

    # Output settings
    target_root: str | None = Field(default=None, description="Root directory for output files")
    root_directory: str | None = Field(default=None, description="Root directory for source files")
    file_patterns: list[str] = Field(
        default_factory=lambda: ["*.cy.ts", "*.cy.js", "*.cy.tsx", "*.cy.jsx"],
        description="Glob patterns selecting Cypress spec files",
    )
    recurse_directories: bool = Field(default=True, description="Whether to recurse into subdirectories")
    backup_originals: bool = Field(default=True, description="Whether to backup original files")
    backup_root: str | None = Field(default=None, description="Root directory for backups")
    target_suffix: str = Field(default="", description="Suffix to append to target filenames")
    target_extension: str | None = Field(default=None, description="Extension for target files")
    rename_cy_to_spec: bool = Field(default=False, description="Rename .cy. infix to .spec.")

    language: str = Field(default="auto", description="Grammar used to parse spec files")

    transform_test_blocks: bool = Field(default=True, description="Whether to rewrite describe/it/hooks")
    transform_commands: bool = Field(default=True, description="Whether to rewrite cy command chains")
    add_playwright_import: bool = Field(default=True, description="Whether to add the @playwright/test import")
    remove_cypress_reference: bool = Field(default=True, description="Whether to drop cypress reference directives")

    log_level: str = Field(default="INFO", description="Default logging level")
    verbose: bool = Field(default=False, description="Verbose reporting")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Maximum file size in MB")
    dry_run: bool = Field(default=False, description="Whether to perform a dry run")
    fail_fast: bool = Field(default=False, description="Whether to fail on first error")
    continue_on_error: bool = Field(default=False, description="Whether to continue on individual file errors")

    @field_validator("file_patterns")
    @classmethod
    def validate_file_patterns(cls, v):
        if not v:
            raise ValueError(
                "At least one file pattern must be specified. Use glob patterns like '*.cy.ts' or '*.cy.js'."
            )
        for i, pattern in enumerate(v):
            if not isinstance(pattern, str):
                raise ValueError(f"File pattern at index {i} must be a string, got {type(pattern).__name__}")
            if not pattern.strip():
                raise ValueError(f"File pattern at index {i} cannot be empty or whitespace-only.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        if not isinstance(v, str):
            raise ValueError("log_level must be a string (DEBUG, INFO, WARNING, ERROR)")
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}, got '{v}'.")
        return upper_v

    @field_validator("language")
    @classmethod
    def validate_language(cls, v):
        if v not in VALID_LANGUAGES:
            raise ValueError(f"language must be one of: {', '.join(VALID_LANGUAGES)}, got '{v}'.")
        return v

    @field_validator("target_extension")
    @classmethod
    def validate_target_extension(cls, v):
        if v is None:
            return v
        stripped = v.lstrip(".")
        if not stripped or not stripped.replace("_", "").isalnum():
            raise ValueError(f"target_extension must look like '.ts' or 'js', got '{v}'.")
        return v

    @model_validator(mode="after")
    def validate_cross_field_compatibility(self) -> ValidatedMigrationConfig:
        """Reject option combinations that cannot both be honoured."""
        if self.backup_root and not self.backup_originals:
            raise ValueError(
                "Configuration conflicts detected: backup_root specified but backup_originals is disabled - "
                "Enable backup_originals or remove backup_root"
            )
        if self.fail_fast and self.continue_on_error:
            raise ValueError(
                "Configuration conflicts detected: fail_fast and continue_on_error are mutually exclusive"
            )
        return self


def validate_migration_config(config_dict: dict[str, Any]) -> ValidatedMigrationConfig:
    """Validate a migration configuration dictionary.

    Raises:
        ValidationError: If configuration is invalid
    """
    try:
        return ValidatedMigrationConfig(**config_dict)
    except PydanticValidationError as e:
        from .exceptions import ValidationError

        raise ValidationError(f"Invalid migration configuration: {e}", validation_type="configuration") from e


def validate_migration_config_object(config) -> ValidatedMigrationConfig:
    """Validate an existing MigrationConfig dataclass instance."""
    return validate_migration_config(dataclasses.asdict(config))
