"""Whole-file Cypress usage detection.

``file_uses_cypress`` is the gate in front of every rewrite: a file is
only touched when at least one ``cy.<member>`` expression refers to the
real Cypress global. Files that define their own ``cy`` (a mock, a
currency code) or never mention it are left exactly as they are.
"""

from __future__ import annotations

from pathlib import Path

from tree_sitter import Node

from ..syntax.tree import SourceTree, field, find_all, is_kind, node_text, parse_source
from ..transformers.scope import ENTRY_POINT, ScopeResolver


def entry_point_receivers(root: Node, entry_point: str = ENTRY_POINT) -> list[Node]:
    """Identifiers named ``entry_point`` used as the object of a member access."""
    receivers = []
    for member in find_all(root, lambda node: is_kind(node, "member_expression")):
        obj = field(member, "object")
        if is_kind(obj, "identifier") and node_text(obj) == entry_point:
            receivers.append(obj)
    return receivers


def file_uses_cypress(tree: SourceTree, resolver: ScopeResolver | None = None) -> bool:
    """True when at least one ``cy.<member>`` refers to the Cypress global."""
    resolver = resolver or ScopeResolver()
    return any(resolver.is_entry_point_global(receiver) for receiver in entry_point_receivers(tree.root))


class CypressFileDetector:
    """Decides whether files on disk are Cypress specs worth migrating."""

    def is_cypress_source(self, source_code: str, grammar: str = "typescript") -> bool:
        # Cheap pre-check before paying for a parse
        if ENTRY_POINT not in source_code:
            return False
        return file_uses_cypress(parse_source(source_code, grammar))

    def is_cypress_file(self, file_path: str | Path) -> bool:
        """Check a file on disk.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnicodeDecodeError: If the file is not UTF-8.
        """
        path = Path(file_path)
        source_code = path.read_text(encoding="utf-8")
        grammar = "tsx" if path.suffix.lower() in (".tsx", ".jsx") else "typescript"
        return self.is_cypress_source(source_code, grammar)
