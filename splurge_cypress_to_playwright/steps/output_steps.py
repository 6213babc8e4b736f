"""Output steps used by the migration pipeline.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from ..context import PipelineContext
from ..helpers.path_utils import ensure_parent_dir, validate_target_path
from ..pipeline import Step
from ..result import Result


class WriteOutputStep(Step[str, str]):
    """Write Playwright code to ``context.target_file``.

    In dry-run mode nothing is written; the code travels back in the
    result metadata under ``generated_code`` so the CLI can print it.
    """

    def execute(self, context: PipelineContext, code: str) -> Result[str]:
        if context.config.dry_run:
            return Result.success(
                str(context.target_file),
                metadata={"dry_run": True, "target_file": context.target_file, "generated_code": code},
            )

        target_path = validate_target_path(context.target_file)
        ensure_parent_dir(target_path)
        try:
            target_path.write_text(code, encoding="utf-8")
        except OSError as e:
            return Result.failure(e, {"target_file": context.target_file})
        return Result.success(str(target_path), metadata={"target_file": str(target_path)})
