"""Collector job: parse a Cypress spec and rewrite it.

The job runs one task with two steps:

- parse the source with tree-sitter
- rewrite test blocks and ``cy`` chains into Playwright Test code

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from typing import Any

from ..context import PipelineContext
from ..events import EventBus
from ..pipeline import Job, Task
from ..result import Result
from ..steps import ParseSourceStep, TransformCypressStep


class CollectorJob(Job[str, str]):
    """Turn spec source text into Playwright source text.

    The result is skipped (not failed) when the file has no Cypress
    usage to migrate.
    """

    def __init__(self, event_bus: EventBus):
        super().__init__("collector", [self._create_parsing_task(event_bus)], event_bus)
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def _create_parsing_task(self, event_bus: EventBus) -> Task[str, str]:
        steps: list[Any] = [
            ParseSourceStep("parse_source", event_bus),
            TransformCypressStep("transform_cypress", event_bus),
        ]
        return Task("parsing", steps, event_bus)

    def execute(self, context: PipelineContext, initial_input: Any = None) -> Result[str]:
        """Run the job on the source text passed as ``initial_input``.

        Returns:
            A :class:`Result` holding the rewritten code, a skipped result
            when nothing changed, or a failure.
        """
        self._logger.info(f"Starting collection job for {context.source_file}")
        if not isinstance(initial_input, str):
            return Result.failure(TypeError(f"Collector job expects source text, got {type(initial_input).__name__}"))

        result = super().execute(context, initial_input)

        if result.is_error():
            self._logger.error(f"Collection job failed for {context.source_file}: {result.error}")
        elif result.is_skipped():
            self._logger.info(f"Nothing to migrate in {context.source_file}")
        else:
            self._logger.info(f"Collection job completed for {context.source_file}")
        return result
