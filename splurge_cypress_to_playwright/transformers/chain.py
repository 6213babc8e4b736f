"""Linearize ``cy.a(...).b(...).c(...)`` into an ordered list of links.

The syntax tree nests a command chain inside out: the outermost call
is the last command written. ``decompose`` walks from that outer call
inwards and prepends each level, so the links come back in the order
the commands appear in the source.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field

from tree_sitter import Node

from ..syntax.tree import field, is_kind, named_args, node_text, same_node
from .scope import ENTRY_POINT, ScopeResolver


@dataclass(frozen=True)
class ChainLink:
    """One ``.method(args)`` in a command chain.

    Attributes:
        method: Command name, e.g. ``get`` or ``should``.
        args: Argument expression nodes, punctuation and comments excluded.
        node: The call expression this link came from.
    """

    method: str
    args: list[Node] = dataclass_field(default_factory=list)
    node: Node | None = None

    def arg_text(self, index: int) -> str:
        return node_text(self.args[index]) if index < len(self.args) else ""

    def args_text(self, start: int = 0) -> str:
        return ", ".join(node_text(arg) for arg in self.args[start:])


def _member_callee(call: Node) -> Node | None:
    callee = field(call, "function")
    return callee if is_kind(callee, "member_expression") else None


def _is_entry_point(node: Node | None, resolver: ScopeResolver | None) -> bool:
    if not is_kind(node, "identifier") or node_text(node) != ENTRY_POINT:
        return False
    return resolver is None or resolver.is_entry_point_global(node)


def is_cy_command(call: Node, resolver: ScopeResolver | None = None) -> bool:
    """True when ``call`` is ``cy.x(...)`` or a call chained onto one."""
    current: Node | None = call
    while current is not None and current.type == "call_expression":
        callee = _member_callee(current)
        if callee is None:
            return False
        receiver = field(callee, "object")
        if _is_entry_point(receiver, resolver):
            return True
        current = receiver
    return False


def is_outermost(call: Node, resolver: ScopeResolver | None = None) -> bool:
    """False when ``call`` is the receiver of a further chained command."""
    member = call.parent
    if not is_kind(member, "member_expression") or not same_node(field(member, "object"), call):
        return True
    outer = member.parent
    if not is_kind(outer, "call_expression") or not same_node(field(outer, "function"), member):
        return True
    return not is_cy_command(outer, resolver)


def decompose(outermost_call: Node, resolver: ScopeResolver | None = None) -> list[ChainLink]:
    """Ordered links of the chain ending at ``outermost_call``.

    Returns an empty list when the chain is not rooted at the Cypress
    global, for example when a receiver is a variable or a call on
    something other than ``cy``.
    """
    links: list[ChainLink] = []
    current: Node = outermost_call
    while current.type == "call_expression":
        callee = _member_callee(current)
        if callee is None:
            return []
        links.insert(0, ChainLink(node_text(field(callee, "property")), named_args(current), current))
        receiver = field(callee, "object")
        if receiver is None:
            return []
        if _is_entry_point(receiver, resolver):
            return links
        if receiver.type != "call_expression":
            return []
        current = receiver
    return []
