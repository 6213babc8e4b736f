"""String literal helpers.

``string_content`` reads the value of a JavaScript string or template
literal regardless of its quoting; ``js_quote`` goes the other way and
renders a Python string as a single-quoted JavaScript literal.
"""

import re

from tree_sitter import Node

from ..syntax.tree import STRING_KINDS, is_kind, node_text


def is_string_like(node: Node | None) -> bool:
    return is_kind(node, *STRING_KINDS)


def string_content(node: Node | None) -> str | None:
    """Return the literal content of a string-like node, else ``None``.

    Single, double and backtick quoting are all unwrapped. Escape
    sequences are left as written; template substitutions are kept
    verbatim (``${...}``).
    """
    if node is None or node.type not in STRING_KINDS:
        return None
    fragments = [child for child in node.named_children if child.type == "string_fragment"]
    if len(fragments) == 1 and len(node.named_children) == 1:
        return node_text(fragments[0])
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def js_quote(value: str) -> str:
    """Render ``value`` as a single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def literal_string(node: Node | None) -> str | None:
    """Content of a string literal without substitutions, else ``None``."""
    if node is None:
        return None
    if node.type == "template_string" and any(child.type == "template_substitution" for child in node.children):
        return None
    return string_content(node)


_REGEX_SPECIALS = re.compile(r"([\\^$.|?*+()\[\]{}/])")


def escape_regex(text: str) -> str:
    return _REGEX_SPECIALS.sub(r"\\\1", text)


def regex_literal(node: Node) -> str:
    """Pattern equivalent of a string operand: ``'a/b'`` becomes ``/a\\/b/``."""
    if node.type == "regex":
        return node_text(node)
    content = literal_string(node)
    if content is not None:
        return f"/{escape_regex(content)}/"
    return f"new RegExp({node_text(node)})"


TODO_PREFIX = "// TODO: "


def collapse(text: str) -> str:
    return " ".join(text.split())


def todo(message: str) -> str:
    """Single-line TODO marker; embedded newlines are collapsed."""
    return TODO_PREFIX + collapse(message)
