"""Exception hierarchy for the Cypress to Playwright migrator.

Every exception derives from ``MigrationError`` and carries a
``details`` mapping with structured context (source file, position,
failing Cypress command) so callers can report problems without
parsing messages.

Note that unsupported Cypress commands are not errors: the engine
emits TODO markers for them. These exceptions cover IO, parsing,
configuration and internal invariants.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from typing import Any


class MigrationError(Exception):
    """Base exception for migration failures.

    Args:
        message: Human-readable error message.
        details: Optional mapping with structured diagnostic data.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParseError(MigrationError):
    """Raised when a spec file cannot be read or parsed.

    Args:
        message: Description of the failure.
        source_file: Path of the file being parsed.
        line: Optional 1-based line of the first problem.
        column: Optional 0-based column of the first problem.
    """

    def __init__(self, message: str, source_file: str, line: int | None = None, column: int | None = None):
        details: dict[str, Any] = {"source_file": source_file}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        super().__init__(message, details)


class TransformationError(MigrationError):
    """Raised when rewriting a file breaks an internal invariant.

    Args:
        message: Description of the failure.
        command: Optional Cypress command being rewritten.
        node_type: Optional syntax node kind involved.
    """

    def __init__(self, message: str, command: str | None = None, node_type: str | None = None):
        details: dict[str, Any] = {}
        if command:
            details["command"] = command
        if node_type:
            details["node_type"] = node_type
        super().__init__(message, details)


class ValidationError(MigrationError):
    """Raised when input paths or values fail validation.

    Args:
        message: Description of the validation failure.
        validation_type: Kind of validation performed.
        field: Optional name of the offending field.
    """

    def __init__(self, message: str, validation_type: str, field: str | None = None):
        details: dict[str, Any] = {"validation_type": validation_type}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(MigrationError):
    """Raised when a configuration file or option set is unusable.

    Args:
        message: Description of the configuration problem.
        config_key: Optional configuration key at fault.
    """

    def __init__(self, message: str, config_key: str | None = None):
        details: dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
