"""Parsing and transformation steps for the migration pipeline.

``ParseSourceStep`` turns spec text into a tree-sitter ``SourceTree``;
``TransformCypressStep`` rewrites that tree into Playwright source.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import time

from ..context import PipelineContext
from ..events import TransformationCompletedEvent
from ..exceptions import ParseError
from ..pipeline import Step
from ..result import Result
from ..syntax.tree import SourceTree, parse_source
from ..transformers.cypress_transformer import CypressToPlaywrightTransformer


class ParseSourceStep(Step[str, SourceTree]):
    """Parse spec source with the grammar chosen for the file.

    tree-sitter recovers from syntax errors, so a damaged file still
    parses; the result is then a warning naming the first error position.
    """

    def execute(self, context: PipelineContext, source_code: str) -> Result[SourceTree]:
        """Parse ``source_code``.

        Args:
            context: Supplies the grammar via ``context.grammar_name()``.
            source_code: Raw spec text.

        Returns:
            A success or warning :class:`Result` holding the parsed tree.
        """
        grammar = context.grammar_name()
        tree = parse_source(source_code, grammar)
        if not tree.has_errors:
            return Result.success(tree, {"grammar": grammar})

        error_node = tree.first_error()
        line = error_node.start_point[0] + 1 if error_node is not None else None
        column = error_node.start_point[1] if error_node is not None else None
        location = f" at line {line}" if line is not None else ""
        issue = ParseError(f"Syntax errors in {context.source_file}{location}", context.source_file, line, column)
        return Result.warning(tree, [issue.message], {"grammar": grammar, "parse_error": issue.details})


class TransformCypressStep(Step[SourceTree, str]):
    """Rewrite Cypress commands and test blocks into Playwright Test code.

    A file with nothing to migrate yields a skipped result, which ends the
    pipeline without writing anything.
    """

    def execute(self, context: PipelineContext, tree: SourceTree) -> Result[str]:
        transformer = CypressToPlaywrightTransformer(context.config, tree.grammar)
        outcome = transformer.transform_tree(tree)

        self.event_bus.publish(
            TransformationCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                transformation_type="cypress_to_playwright",
                statistics=outcome.stats.to_dict(),
            )
        )

        if outcome.code is None:
            return Result.skipped(
                f"No Cypress usage to migrate in {context.source_file}", {"changed": False}
            )
        return Result.success(outcome.code, {"changed": True, "statistics": outcome.stats.to_dict()})
