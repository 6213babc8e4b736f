"""CLI helper functions for the Cypress to Playwright migration tool.

Kept apart from :mod:`cli` so they can be tested without invoking typer.
"""

import difflib
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .context import MigrationConfig
from .events import EventBus
from .helpers.path_utils import normalize_path_for_display

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(debug_mode: bool = False) -> None:
    """Configure root logging at DEBUG or INFO."""
    setup_logging_with_level("DEBUG" if debug_mode else "INFO")


def setup_logging_with_level(log_level: str) -> None:
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=True)


def set_quiet_mode(quiet: bool = False) -> None:
    """Raise the root level to WARNING when ``quiet``."""
    if quiet:
        logging.getLogger().setLevel(logging.WARNING)


def create_event_bus() -> EventBus:
    return EventBus()


def build_config(base_config: MigrationConfig, overrides: dict[str, Any]) -> MigrationConfig:
    """Apply CLI overrides to ``base_config`` and validate the result.

    Raises:
        ValueError: If the combined configuration is invalid.
    """
    config = base_config.with_override(**overrides)
    config.validate()
    return config


def _expand_directory(directory: Path, patterns: list[str], recurse: bool) -> Iterator[Path]:
    for pattern in patterns:
        found = directory.rglob(pattern) if recurse else directory.glob(pattern)
        yield from (path for path in found if path.is_file())


def collect_source_files(
    source_files: list[str],
    root_directory: str | None,
    file_patterns: list[str],
    recurse: bool = True,
) -> list[str]:
    """Resolve CLI sources into a de-duplicated, ordered list of spec files.

    Explicit files are kept as given. Directories, and ``root_directory``
    when set, are expanded with ``file_patterns``. Anything else is
    treated as a glob, relative to the current directory unless absolute.
    """
    collected: list[Path] = []
    for source in source_files:
        path = Path(source)
        if path.is_file():
            collected.append(path)
        elif path.is_dir():
            collected.extend(sorted(_expand_directory(path, file_patterns, recurse)))
        else:
            # Path.glob only accepts relative patterns
            anchor = Path(path.anchor) if path.is_absolute() else Path()
            pattern = str(path.relative_to(anchor)) if path.is_absolute() else source
            collected.extend(sorted(match for match in anchor.glob(pattern) if match.is_file()))

    if root_directory and Path(root_directory).is_dir():
        collected.extend(sorted(_expand_directory(Path(root_directory), file_patterns, recurse)))

    seen: set[str] = set()
    unique: list[str] = []
    for path in collected:
        key = str(path)
        if key not in seen:
            seen.add(key)
            unique.append(key)
    return unique


def render_dry_run(
    generated: dict[str, str],
    sources: dict[str, str],
    list_files: bool = False,
    show_diff: bool = False,
    posix: bool = False,
) -> list[str]:
    """Text blocks to print for a dry run.

    Args:
        generated: Target path to generated Playwright code.
        sources: Target path to the spec it was generated from.
        list_files: Print only ``== FILES: <path> ==`` headers.
        show_diff: Print unified diffs against the original spec.
        posix: Display paths with forward slashes.
    """
    blocks: list[str] = []
    for target, code in generated.items():
        display = normalize_path_for_display(target, force_posix=posix)
        if list_files:
            blocks.append(f"== FILES: {display} ==")
            continue
        if not show_diff:
            blocks.append(f"== PLAYWRIGHT: {display} ==")
            blocks.append(code)
            continue

        source = sources.get(target, target)
        try:
            original = Path(source).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            original = ""
        source_display = normalize_path_for_display(source, force_posix=posix)
        diff_lines = list(
            difflib.unified_diff(
                original.splitlines(keepends=True),
                code.splitlines(keepends=True),
                fromfile=f"cypress:{source_display}",
                tofile=f"playwright:{display}",
            )
        )
        blocks.append(f"== DIFF: {display} ==")
        blocks.append("".join(diff_lines) if diff_lines else "<no differences detected>")
    return blocks
