"""Output job: back up the original spec and write the Playwright file.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import shutil
from pathlib import Path
from typing import Any

from ..context import PipelineContext
from ..events import EventBus
from ..pipeline import Job, Task
from ..result import Result
from ..steps import WriteOutputStep

BACKUP_SUFFIX = ".backup"


def backup_path_for(source_file: str, backup_root: str | None = None, root_directory: str | None = None) -> Path:
    """Where the backup of ``source_file`` goes.

    Without ``backup_root`` the backup sits beside the source. With it,
    the path relative to ``root_directory`` is preserved under
    ``backup_root`` when the source lies inside that directory.
    """
    source_path = Path(source_file)
    backup_name = source_path.name + BACKUP_SUFFIX
    if not backup_root:
        return source_path.with_name(backup_name)

    relative_parent = Path()
    if root_directory:
        try:
            relative_parent = source_path.resolve().parent.relative_to(Path(root_directory).resolve())
        except ValueError:
            relative_parent = Path()
    return Path(backup_root) / relative_parent / backup_name


class OutputJob(Job[str, str]):
    """Write generated Playwright specs, creating backups when configured."""

    def __init__(self, event_bus: EventBus):
        super().__init__("output", [Task("output", [WriteOutputStep("write_output", event_bus)], event_bus)], event_bus)
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def execute(self, context: PipelineContext, initial_input: Any = None) -> Result[str]:
        """Back up the source (unless dry-run) and write ``initial_input``."""
        self._logger.info(f"Starting output job for {context.target_file}")

        config = context.config
        if config.backup_originals and not config.dry_run:
            self._create_backup(context.source_file, config.backup_root, config.root_directory)
        else:
            self._logger.debug(f"Skipping backup: dry_run={config.dry_run}, backup={config.backup_originals}")

        result = super().execute(context, initial_input)

        if result.is_error():
            self._logger.error(f"Output job failed for {context.target_file}: {result.error}")
        elif config.dry_run:
            self._logger.info(f"Dry-run: would write output to {context.target_file}")
        else:
            self._logger.info(f"Wrote {context.target_file}")
        return result

    def _create_backup(self, source_file: str, backup_root: str | None, root_directory: str | None) -> None:
        backup_path = backup_path_for(source_file, backup_root, root_directory)
        if backup_path.exists():
            self._logger.info(f"Backup already exists, skipping: {backup_path}")
            return
        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_file, backup_path)
            self._logger.info(f"Created backup: {backup_path}")
        except OSError as e:
            self._logger.warning(f"Failed to create backup for {source_file}: {e}")
