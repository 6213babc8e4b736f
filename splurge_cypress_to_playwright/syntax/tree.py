"""Parsing and node helpers over tree-sitter.

Spec files are parsed with the TypeScript (or TSX) grammar from
``tree-sitter-language-pack``. Everything downstream works on
``tree_sitter.Node`` objects through the small helper surface defined
here: kind tests, field access, argument lists, pre-order walks,
ancestor walks and text extraction.

Node ranges are byte offsets into the UTF-8 encoded source.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from functools import lru_cache

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

SUPPORTED_GRAMMARS = ("typescript", "tsx", "javascript")

# Node kinds for callable expressions across grammar versions
FUNCTION_EXPRESSION_KINDS = ("arrow_function", "function_expression", "function")
STRING_KINDS = ("string", "template_string")


@lru_cache(maxsize=None)
def _parser_for(grammar: str) -> Parser:
    return get_parser(grammar)  # type: ignore[arg-type]


@dataclass(frozen=True)
class SourceTree:
    """One parsed source file.

    Attributes:
        source: The UTF-8 bytes that were parsed.
        tree: The tree-sitter tree.
        grammar: Name of the grammar used.
    """

    source: bytes
    tree: Tree
    grammar: str

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.tree.root_node.has_error

    def text(self, node: Node | None) -> str:
        """Return the source text covered by ``node`` ('' for ``None``)."""
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def first_error(self) -> Node | None:
        """Locate the first ERROR or missing node, if the parse had any."""
        for node in walk(self.root):
            if node.type == "ERROR" or node.is_missing:
                return node
        return None


def parse_source(code: str, grammar: str = "typescript") -> SourceTree:
    """Parse ``code`` with the named grammar.

    Raises:
        ValueError: If ``grammar`` is not one of ``SUPPORTED_GRAMMARS``.
    """
    if grammar not in SUPPORTED_GRAMMARS:
        raise ValueError(f"Unsupported grammar '{grammar}', expected one of {', '.join(SUPPORTED_GRAMMARS)}")
    source = code.encode("utf-8")
    return SourceTree(source=source, tree=_parser_for(grammar).parse(source), grammar=grammar)


def node_text(node: Node | None) -> str:
    """Text of a node taken from the node itself."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def is_kind(node: Node | None, *kinds: str) -> bool:
    return node is not None and node.type in kinds


def field(node: Node | None, name: str) -> Node | None:
    if node is None:
        return None
    return node.child_by_field_name(name)


def named_args(call: Node) -> list[Node]:
    """Argument expressions of a call, without punctuation or comments.

    Tagged templates (``tag`...```) have no argument list and yield [].
    """
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_all(node: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    return [candidate for candidate in walk(node) if predicate(candidate)]


def ancestors(node: Node) -> Iterator[Node]:
    """Yield the parents of ``node`` from nearest to the root."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def same_node(a: Node | None, b: Node | None) -> bool:
    """Identity check that does not depend on ``Node.__eq__`` semantics."""
    if a is None or b is None:
        return False
    return a.start_byte == b.start_byte and a.end_byte == b.end_byte and a.type == b.type


def line_indent(source: bytes, node: Node) -> str:
    """Leading whitespace of the line on which ``node`` starts."""
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    indent = bytearray()
    for byte in source[line_start : node.start_byte]:
        if byte in (0x20, 0x09):
            indent.append(byte)
        else:
            break
    return indent.decode("utf-8")


def newline_style(source: bytes) -> str:
    """``"\\r\\n"`` when the first line break in ``source`` is CRLF, else ``"\\n"``."""
    index = source.find(b"\n")
    return "\r\n" if index > 0 and source[index - 1 : index] == b"\r" else "\n"
