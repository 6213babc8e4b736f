"""Path validation and naming for migrated spec files.

Cypress specs are conventionally named ``*.cy.ts``/``*.cy.js``;
Playwright picks up ``*.spec.ts`` by default. ``playwright_target_name``
derives the output filename from the configured suffix, extension and
``.cy`` to ``.spec`` rename.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import platform
import re
from pathlib import Path

from ..exceptions import ValidationError

INVALID_NAME_CHARS = '<>:"|?*'
WINDOWS_MAX_PATH = 260

_CY_MARKER = re.compile(r"\.cy(?=\.[^.]+$)")


class PathValidationError(ValidationError):
    """Raised when a source or target path is unusable."""

    def __init__(self, message: str, path: str, validation_type: str = "path"):
        self.path = path
        self.validation_type = validation_type
        super().__init__(message, validation_type, field=path)


def _check_name(path: Path, label: str) -> None:
    if not str(path).strip():
        raise PathValidationError(f"{label} path cannot be empty", str(path), "empty_path")
    if any(char in path.name for char in INVALID_NAME_CHARS):
        raise PathValidationError(
            f"{label} path contains invalid characters: {INVALID_NAME_CHARS}", str(path), "invalid_chars"
        )


def validate_source_path(source_path: str | Path) -> Path:
    """Check that a spec path is well formed.

    Existence is not checked here; reading the file reports that.

    Raises:
        PathValidationError: If the path is empty, too long on Windows or
            contains characters that are invalid in file names.
    """
    try:
        path = Path(source_path)
        _check_name(path, "Source")
        if platform.system() == "Windows" and len(str(path)) > WINDOWS_MAX_PATH:
            raise PathValidationError(
                f"Path length exceeds Windows limit of {WINDOWS_MAX_PATH} characters: {len(str(path))}",
                str(path),
                "path_length",
            )
        return path
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid path format: {e}", str(source_path), "path_format") from e


def validate_target_path(target_path: str | Path) -> Path:
    """Check an output path without touching the filesystem.

    Raises:
        PathValidationError: If the path is empty or has invalid characters.
    """
    try:
        path = Path(target_path)
        _check_name(path, "Target")
        return path
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid target path: {e}", str(target_path), "target_format") from e


def ensure_parent_dir(target_path: str | Path) -> None:
    """Create the parent directory of ``target_path`` if needed."""
    parent = Path(target_path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathValidationError(f"Cannot create parent directory: {e}", str(parent), "parent_creation") from e


def normalize_path_for_display(path: str | Path, force_posix: bool = False) -> str:
    """Render ``path`` with forward slashes unless on Windows without ``force_posix``."""
    if force_posix or platform.system() != "Windows":
        return Path(path).as_posix()
    return str(Path(path))


def playwright_target_name(
    source_name: str, suffix: str = "", extension: str | None = None, rename_cy_to_spec: bool = False
) -> str:
    """Output filename for a Cypress spec.

    Examples:
        ``login.cy.ts`` with ``rename_cy_to_spec`` gives ``login.spec.ts``;
        with ``suffix="_pw"`` and ``extension="js"`` it gives
        ``login.spec_pw.js``.
    """
    name = _CY_MARKER.sub(".spec", source_name) if rename_cy_to_spec else source_name
    path = Path(name)
    stem, current_ext = path.stem, path.suffix
    if extension:
        current_ext = "." + extension.lstrip(".")
    return f"{stem}{suffix}{current_ext}"


def suggest_path_fixes(error: Exception, path: str) -> list[str]:
    """Hints shown to the user when a file operation fails."""
    path_obj = Path(path)
    suggestions = []

    if isinstance(error, FileNotFoundError):
        if not path_obj.parent.exists():
            suggestions.append(f"Create the parent directory: {path_obj.parent}")
        suggestions.append(f"Check the spec file exists: {path}")
    elif isinstance(error, PermissionError):
        suggestions.append(f"Check write permissions for: {path_obj.parent}")
        if platform.system() == "Windows":
            suggestions.append("Check if the file is open in another program")
    elif isinstance(error, UnicodeDecodeError):
        suggestions.append("Save the spec file as UTF-8")
    elif isinstance(error, OSError) and "name too long" in str(error):
        suggestions.append(f"Move the files to a directory with a shorter path than {path_obj.parent}")
    elif isinstance(error, OSError | ValueError):
        suggestions.append(f"Check the path for invalid characters: {path}")

    suggestions.append(f"Verify the path exists and is accessible: {path}")
    return suggestions
