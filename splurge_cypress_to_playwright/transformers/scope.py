"""Decide whether a ``cy`` identifier is the Cypress global.

A spec file may reuse the name ``cy`` for its own purposes: a local
mock object, a parameter, an imported helper. Only occurrences that
refer to the ambient Cypress global may be rewritten.

Resolution runs in two stages:

1. Binding lookup. Walk outwards through the enclosing scopes and look
   for a declaration of the same name: variables (including
   destructuring), functions, classes, parameters, catch and loop
   bindings, and imports. A local binding means the identifier is not
   the global. An import counts only when its module specifier
   mentions ``cypress``.
2. Positional fallback. When no binding is found, scan the enclosing
   blocks for any ``const/let/var cy = ...`` or ``function cy`` that
   starts before the usage. This is knowingly approximate: it orders
   by source position, not control flow, and it also sees
   declarations inside unrelated nested functions. It errs towards
   leaving code alone.

When neither stage objects, the identifier is treated as the global.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from ..syntax.tree import FUNCTION_EXPRESSION_KINDS, ancestors, field, node_text, walk
from .strings import string_content

logger = logging.getLogger(__name__)

ENTRY_POINT = "cy"
FRAMEWORK_PACKAGE = "cypress"

_FUNCTION_SCOPES = FUNCTION_EXPRESSION_KINDS + (
    "function_declaration",
    "generator_function_declaration",
    "generator_function",
    "method_definition",
)
_BLOCK_SCOPES = ("program", "statement_block", "class_static_block", "switch_body")
_DECLARATION_KINDS = ("lexical_declaration", "variable_declaration")
_NAMED_DECLARATION_KINDS = (
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "enum_declaration",
)


@dataclass(frozen=True)
class Definition:
    """Where a name is bound.

    Attributes:
        kind: ``"local"`` or ``"import"``.
        node: The declaring node.
        source: Module specifier for imports, empty otherwise.
    """

    kind: str
    node: Node
    source: str = ""


def pattern_binds(pattern: Node | None, name: str) -> bool:
    """True when a binding pattern (identifier or destructuring) introduces ``name``."""
    if pattern is None:
        return False
    kind = pattern.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return node_text(pattern) == name
    if kind == "pair_pattern":
        return pattern_binds(field(pattern, "value"), name)
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_binds(field(pattern, "left"), name)
    if kind in ("required_parameter", "optional_parameter"):
        return pattern_binds(field(pattern, "pattern"), name)
    if kind in ("object_pattern", "array_pattern", "rest_pattern", "formal_parameters"):
        return any(pattern_binds(child, name) for child in pattern.named_children)
    return False


def _declaration_binds(statement: Node, name: str) -> bool:
    if statement.type == "export_statement":
        declaration = field(statement, "declaration")
        return declaration is not None and _declaration_binds(declaration, name)
    if statement.type in _DECLARATION_KINDS:
        return any(
            pattern_binds(field(declarator, "name"), name)
            for declarator in statement.named_children
            if declarator.type == "variable_declarator"
        )
    if statement.type in _NAMED_DECLARATION_KINDS:
        return node_text(field(statement, "name")) == name
    return False


def _import_binds(statement: Node, name: str) -> bool:
    clause = next((child for child in statement.named_children if child.type == "import_clause"), None)
    if clause is None:
        return False
    for child in clause.named_children:
        if child.type == "identifier" and node_text(child) == name:
            return True
        if child.type == "namespace_import":
            if any(node_text(part) == name for part in child.named_children if part.type == "identifier"):
                return True
        if child.type == "named_imports":
            for specifier in child.named_children:
                if specifier.type != "import_specifier":
                    continue
                local = field(specifier, "alias") or field(specifier, "name")
                if node_text(local) == name:
                    return True
    return False


def _block_definition(block: Node, name: str) -> Definition | None:
    for statement in block.named_children:
        if statement.type == "import_statement" and _import_binds(statement, name):
            return Definition("import", statement, string_content(field(statement, "source")) or "")
        if _declaration_binds(statement, name):
            return Definition("local", statement)
    return None


def _function_definition(function: Node, name: str) -> Definition | None:
    parameters = field(function, "parameters") or field(function, "parameter")
    if pattern_binds(parameters, name):
        return Definition("local", parameters)  # type: ignore[arg-type]
    # A named function expression binds its own name inside its body
    if function.type in ("function_expression", "function", "generator_function"):
        if node_text(field(function, "name")) == name:
            return Definition("local", function)
    return None


def _loop_definition(loop: Node, name: str) -> Definition | None:
    if loop.type == "for_statement":
        initializer = field(loop, "initializer")
        if initializer is not None and _declaration_binds(initializer, name):
            return Definition("local", initializer)
    elif loop.type == "for_in_statement":
        # Only declaring heads (for const x of ...) bind; a bare identifier assigns.
        if field(loop, "kind") is not None and pattern_binds(field(loop, "left"), name):
            return Definition("local", loop)
    return None


class ScopeResolver:
    """Answers "is this ``cy`` the Cypress global?" for one parsed file.

    Answers are memoized per identifier node for the lifetime of the
    resolver, which should match one file transform.
    """

    def __init__(self, entry_point: str = ENTRY_POINT, package: str = FRAMEWORK_PACKAGE) -> None:
        self.entry_point = entry_point
        self.package = package
        self._cache: dict[tuple[int, int], bool] = {}

    def find_definition(self, identifier: Node) -> Definition | None:
        """Nearest binding of the identifier's name, or ``None`` if unbound."""
        name = node_text(identifier)
        for scope in ancestors(identifier):
            definition: Definition | None = None
            if scope.type in _BLOCK_SCOPES:
                definition = _block_definition(scope, name)
            elif scope.type in _FUNCTION_SCOPES:
                definition = _function_definition(scope, name)
            elif scope.type in ("for_statement", "for_in_statement"):
                definition = _loop_definition(scope, name)
            elif scope.type == "catch_clause":
                if pattern_binds(field(scope, "parameter"), name):
                    definition = Definition("local", scope)
            if definition is not None:
                return definition
        return None

    def shadowed_by_earlier_declaration(self, identifier: Node) -> bool:
        """Positional fallback: any same-named declaration earlier in an enclosing block."""
        name = node_text(identifier)
        usage_start = identifier.start_byte
        for scope in ancestors(identifier):
            if scope.type not in ("statement_block", "program"):
                continue
            for candidate in walk(scope):
                if candidate.start_byte >= usage_start:
                    continue
                if candidate.type == "variable_declarator":
                    declared = field(candidate, "name")
                    if declared is not None and declared.type == "identifier" and node_text(declared) == name:
                        return True
                elif candidate.type == "function_declaration" and node_text(field(candidate, "name")) == name:
                    return True
        return False

    def is_entry_point_global(self, identifier: Node) -> bool:
        """True when ``identifier`` is an unshadowed reference to the Cypress global."""
        if identifier.type != "identifier" or node_text(identifier) != self.entry_point:
            return False
        key = (identifier.start_byte, identifier.end_byte)
        if key in self._cache:
            return self._cache[key]

        definition = self.find_definition(identifier)
        if definition is not None:
            verdict = definition.kind == "import" and self.package in definition.source
            logger.debug(
                f"'{self.entry_point}' at byte {identifier.start_byte} resolves to {definition.kind} binding"
                f" ({'framework' if verdict else 'shadowed'})"
            )
        else:
            verdict = not self.shadowed_by_earlier_declaration(identifier)

        self._cache[key] = verdict
        return verdict
