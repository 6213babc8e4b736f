"""Per-file Cypress to Playwright transformation.

``CypressToPlaywrightTransformer`` runs the full sequence for one
source text:

1. parse and gate: files without a genuine ``cy`` reference are left
   untouched
2. rename Mocha test blocks and make their callbacks async
3. rewrite each outermost ``cy`` command chain
4. drop ``/// <reference types="cypress" />`` directives
5. commit all queued edits in one pass
6. prefix the ``@playwright/test`` import when it is missing

Every rewrite is recorded against the original parse; nothing is
re-parsed between steps.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import re
from dataclasses import dataclass, field as dataclass_field

from tree_sitter import Node

from ..context import MigrationConfig
from ..detectors.cypress_detector import file_uses_cypress
from ..syntax.edits import EditAccumulator
from ..syntax.tree import SourceTree, field, is_kind, line_indent, newline_style, parse_source, same_node, walk
from .chain import decompose, is_cy_command, is_outermost
from .interpreter import ChainInterpreter
from .scope import ScopeResolver
from .test_blocks import find_test_blocks, rewrite_test_block

logger = logging.getLogger(__name__)

PLAYWRIGHT_IMPORT = "import { test, expect } from '@playwright/test';"
BLOCK_INDENT = "  "

_EXISTING_IMPORT = re.compile(r"import\s*\{[^}]*\btest\b[^}]*\}\s*from\s*['\"]@playwright/test['\"]")
_REFERENCE_DIRECTIVE = re.compile(r"^///\s*<reference\s+types\s*=\s*['\"]cypress['\"]\s*/>$")


@dataclass
class TransformStats:
    """Counters for one transformed file."""

    chains_rewritten: int = 0
    test_blocks_rewritten: int = 0
    todo_markers: int = 0
    references_removed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "chains_rewritten": self.chains_rewritten,
            "test_blocks_rewritten": self.test_blocks_rewritten,
            "todo_markers": self.todo_markers,
            "references_removed": self.references_removed,
        }


@dataclass
class TransformOutcome:
    """Result of transforming one source text.

    Attributes:
        code: Rewritten text, or ``None`` when the file is unchanged.
        stats: What was rewritten.
        has_syntax_errors: The parse contained ERROR or missing nodes.
    """

    code: str | None
    stats: TransformStats = dataclass_field(default_factory=TransformStats)
    has_syntax_errors: bool = False

    @property
    def changed(self) -> bool:
        return self.code is not None


def expression_safe(text: str) -> str:
    """Fold statements or line comments into something legal inside an expression.

    The folded text is always flagged with a TODO so it is counted and
    cannot pass unnoticed.
    """
    parts = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("//"):
            stripped = stripped[2:].strip()
        if stripped:
            parts.append(stripped)
    body = " ".join(parts).replace("*/", "* /")
    if "TODO" not in body:
        body = f"TODO: Move these statements out of the expression: {body}"
    return f"/* {body} */ undefined"


def arrow_block(text: str, indent: str) -> str:
    """Wrap statements replacing an arrow function's expression body in a block."""
    last_line = text.rsplit("\n", 1)[-1].strip()
    terminator = "" if last_line.startswith("//") else ";"
    return f"{{\n{indent}{BLOCK_INDENT}{text}{terminator}\n{indent}}}"


def with_newlines(text: str, newline: str) -> str:
    """Convert generated line breaks to ``newline``."""
    if newline == "\n":
        return text
    return text.replace("\r\n", "\n").replace("\n", newline)


def has_playwright_import(code: str) -> bool:
    return _EXISTING_IMPORT.search(code) is not None


class CypressToPlaywrightTransformer:
    """Rewrites Cypress spec source into Playwright Test source.

    Args:
        config: Controls which rewrites run; defaults to ``MigrationConfig()``.
        grammar: tree-sitter grammar used to parse the input.
    """

    def __init__(self, config: MigrationConfig | None = None, grammar: str = "typescript") -> None:
        self.config = config or MigrationConfig()
        self.grammar = grammar
        self.interpreter = ChainInterpreter()

    def transform(self, code: str) -> TransformOutcome:
        """Transform ``code``; ``outcome.code`` is ``None`` when nothing qualified."""
        return self.transform_tree(parse_source(code, self.grammar))

    def transform_tree(self, tree: SourceTree) -> TransformOutcome:
        """Transform an already parsed file."""
        if tree.has_errors:
            logger.debug("Source contains syntax errors; continuing with error-tolerant tree")

        resolver = ScopeResolver()
        if not file_uses_cypress(tree, resolver):
            logger.debug("No Cypress global usage found; leaving source unchanged")
            return TransformOutcome(code=None, has_syntax_errors=tree.has_errors)

        edits = EditAccumulator()
        stats = TransformStats()

        if self.config.transform_test_blocks:
            for match in find_test_blocks(tree.root):
                if rewrite_test_block(match, edits):
                    stats.test_blocks_rewritten += 1

        if self.config.transform_commands:
            self._rewrite_chains(tree, resolver, edits, stats)

        if self.config.remove_cypress_reference:
            stats.references_removed = self._remove_reference_directives(tree, edits)

        if not edits:
            return TransformOutcome(code=None, stats=stats, has_syntax_errors=tree.has_errors)

        new_code = edits.commit(tree.source)
        if self.config.add_playwright_import and not has_playwright_import(new_code):
            body = new_code.lstrip("\r\n") if stats.references_removed else new_code
            newline = newline_style(tree.source)
            new_code = f"{PLAYWRIGHT_IMPORT}{newline}{newline}{body}"

        logger.debug(
            f"Rewrote {stats.chains_rewritten} chains and {stats.test_blocks_rewritten} test blocks"
            f" ({stats.todo_markers} TODO markers)"
        )
        return TransformOutcome(code=new_code, stats=stats, has_syntax_errors=tree.has_errors)

    def transform_code(self, code: str) -> str:
        """Return the transformed text, or ``code`` itself when nothing changed."""
        outcome = self.transform(code)
        return outcome.code if outcome.code is not None else code

    def _rewrite_chains(
        self, tree: SourceTree, resolver: ScopeResolver, edits: EditAccumulator, stats: TransformStats
    ) -> None:
        # Pre-order walk: an outer chain is always queued before anything nested in it.
        processed: set[tuple[int, int]] = set()
        newline = newline_style(tree.source)
        for node in walk(tree.root):
            if node.type != "call_expression":
                continue
            key = (node.start_byte, node.end_byte)
            if key in processed or edits.covers(node):
                continue
            if not is_cy_command(node, resolver) or not is_outermost(node, resolver):
                continue

            chain = decompose(node, resolver)
            if not chain:
                continue
            indent = line_indent(tree.source, node)
            arrow_body = self._is_arrow_body(node)
            replacement = self.interpreter.interpret(chain, indent + BLOCK_INDENT if arrow_body else indent)
            if not replacement:
                continue
            if "\n" in replacement or replacement.startswith("//"):
                if arrow_body:
                    replacement = arrow_block(replacement, indent)
                elif not self._in_statement_position(node):
                    replacement = expression_safe(replacement)
            replacement = with_newlines(replacement, newline)

            processed.add(key)
            processed.update((link.node.start_byte, link.node.end_byte) for link in chain if link.node is not None)
            if edits.replace(node, replacement):
                stats.chains_rewritten += 1
                stats.todo_markers += replacement.count("TODO")

    @staticmethod
    def _in_statement_position(node: Node) -> bool:
        parent = node.parent
        return parent is not None and parent.type == "expression_statement"

    @staticmethod
    def _is_arrow_body(node: Node) -> bool:
        parent = node.parent
        return is_kind(parent, "arrow_function") and same_node(field(parent, "body"), node)

    @staticmethod
    def _remove_reference_directives(tree: SourceTree, edits: EditAccumulator) -> int:
        removed = 0
        for node in tree.root.children:
            if node.type != "comment" or not _REFERENCE_DIRECTIVE.match(tree.text(node).strip()):
                continue
            end = node.end_byte
            if tree.source[end : end + 2] == b"\r\n":
                end += 2
            elif tree.source[end : end + 1] == b"\n":
                end += 1
            if edits.add_range(node.start_byte, end, ""):
                removed += 1
        return removed
