"""Interpret a decomposed Cypress chain as Playwright code.

The interpreter folds a ``ChainState`` over the ordered ``ChainLink``
list. Each command name maps to a handler in ``HANDLERS``; a handler
receives the state so far and returns the next state. The state tracks
what the chain currently refers to (nothing yet, an element locator, a
plain value, an HTTP response, the window or the document) and the
statements emitted so far, in source order.

Commands are grouped as follows:

* locator builders (``get``, ``find``, ``first``, ``contains`` ...) compose
  the current locator expression
* assertions (``should``/``and``) emit ``expect(...)`` statements
* actions (``click``, ``type`` ...) emit awaited locator calls
* page and side-channel commands (``visit``, ``wait``, ``request``,
  cookies ...) emit page-level statements or produce values
* commands without a faithful equivalent (``then``, ``within``,
  ``intercept``, ``as`` ...) emit ``// TODO`` markers

Nothing is dropped silently. A command with no handler becomes a TODO
and interpretation continues with the next link.
"""

from __future__ import annotations

import logging
import re
import textwrap
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce

from tree_sitter import Node

from ..syntax.tree import node_text
from .chain import ChainLink
from .mappings import (
    ACTION_MAP,
    ArgTransform,
    MappingEntry,
    lookup_assertion,
    lookup_value_assertion,
    split_negation,
)
from .special_chains import interpret_special_chain
from .strings import collapse, js_quote, literal_string, regex_literal, todo
from .test_blocks import is_callback

logger = logging.getLogger(__name__)

STATEMENT_SEPARATOR = ";\n"

_KEY_TOKEN = re.compile(r"(\{[^{}]+\})")

SPECIAL_KEYS = {
    "enter": "Enter",
    "esc": "Escape",
    "backspace": "Backspace",
    "del": "Delete",
    "tab": "Tab",
    "insert": "Insert",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    "uparrow": "ArrowUp",
    "downarrow": "ArrowDown",
    "leftarrow": "ArrowLeft",
    "rightarrow": "ArrowRight",
    "movetostart": "Home",
    "movetoend": "End",
    "selectall": "ControlOrMeta+a",
}

# Zero- or one-argument jQuery getters with a direct locator method
INVOKE_GETTERS = {
    ("text", 0): "textContent",
    ("val", 0): "inputValue",
    ("html", 0): "innerHTML",
    ("attr", 1): "getAttribute",
}

RESPONSE_PROPERTIES = {
    "status": "{0}.status()",
    "statusText": "{0}.statusText()",
    "headers": "{0}.headers()",
    "body": "await {0}.json()",
}

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


class Subject(Enum):
    """What the chain refers to at a given point."""

    NONE = "none"
    LOCATOR = "locator"
    VALUE = "value"
    RESPONSE = "response"
    WINDOW = "window"
    DOCUMENT = "document"


_VALUE_SUBJECTS = (Subject.VALUE, Subject.RESPONSE)
_BROWSER_SUBJECTS = (Subject.WINDOW, Subject.DOCUMENT)


@dataclass(frozen=True)
class ChainState:
    """Immutable interpretation state for one chain.

    Attributes:
        subject: Kind of thing ``expression`` denotes.
        expression: Current locator or value expression.
        statements: Statements emitted so far, in source order.
        halted: Set when the rest of the chain cannot be interpreted.
    """

    subject: Subject = Subject.NONE
    expression: str = ""
    statements: tuple[str, ...] = ()
    halted: bool = False

    def with_locator(self, expression: str) -> ChainState:
        return replace(self, subject=Subject.LOCATOR, expression=expression)

    def with_value(self, expression: str, subject: Subject = Subject.VALUE) -> ChainState:
        return replace(self, subject=subject, expression=expression)

    def emit(self, statement: str) -> ChainState:
        return replace(self, statements=self.statements + (statement,))

    def halt(self, statement: str) -> ChainState:
        return replace(self, statements=self.statements + (statement,), halted=True)

    def halt_only(self, statement: str) -> ChainState:
        return replace(self, statements=(statement,), halted=True)

    def describe_subject(self) -> str:
        return self.expression if self.subject != Subject.NONE else "cy"


@dataclass(frozen=True)
class InterpretEnv:
    """Per-chain settings handlers may consult."""

    indent: str = ""


Handler = Callable[[ChainState, ChainLink, InterpretEnv], ChainState]


# Text helpers


def todo_with_callback(message: str, callback: Node | None, env: InterpretEnv) -> str:
    """TODO marker followed by the original callback, commented out line by line."""
    lines = [todo(message)]
    if callback is not None:
        source_lines = node_text(callback).splitlines() or [""]
        body = [source_lines[0]] + textwrap.dedent("\n".join(source_lines[1:])).splitlines()
        lines.append("Original callback:")
        lines.extend(f"  {line}".rstrip() for line in body)
    return f"\n{env.indent}//   ".join(lines)


def number_value(node: Node | None) -> int | None:
    if node is None:
        return None
    text = node_text(node).replace(" ", "")
    if node.type in ("number", "unary_expression") and re.fullmatch(r"[-+]?\d+", text):
        return int(text)
    return None


def prefixed_selector(prefix: str, node: Node | None, default: str = "*") -> str:
    """Selector literal ``prefix + selector``, e.g. ``'+ .item'``."""
    if node is None:
        return js_quote(f"{prefix}{default}")
    content = literal_string(node)
    if content is not None:
        return js_quote(f"{prefix}{content}")
    return f"`{prefix}${{{node_text(node)}}}`"


def member_access(expression: str, path: Node) -> str:
    """``expression`` followed by the property path named by ``path``."""
    base = f"({expression})" if " " in expression else expression
    content = literal_string(path)
    if content is None:
        return f"{base}[{node_text(path)}]"
    parts = []
    for part in content.split("."):
        parts.append(f"[{part}]" if part.isdigit() else f".{part}")
    return base + "".join(parts)


def assertion_args(entry: MappingEntry, operands: list[Node]) -> str:
    if not operands:
        return ", ".join(entry.default_args)
    texts = [node_text(operand) for operand in operands]
    if entry.arg_transform == ArgTransform.REGEX_FROM_STRING_LITERAL:
        texts[0] = regex_literal(operands[0])
    elif entry.arg_transform == ArgTransform.DATA_ATTRIBUTE:
        name = literal_string(operands[0])
        texts[0] = js_quote(f"data-{name}") if name is not None else f"`data-${{{texts[0]}}}`"
    return ", ".join(texts)


def _element_required(state: ChainState, link: ChainLink) -> ChainState | None:
    """Halt when ``link`` needs an element but the chain holds something else."""
    if state.subject == Subject.LOCATOR:
        return None
    if state.subject == Subject.NONE:
        return state.halt(todo(f"Migrate cy.{link.method}({link.args_text()}) - command needs an element subject"))
    return state.halt(
        todo(
            f"Migrate .{link.method}({link.args_text()}) after {state.expression} - "
            "a value cannot be queried like an element, compose this step manually"
        )
    )


# Locator builders


def _h_get(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    selector = literal_string(link.args[0]) if link.args else None
    if selector is not None and selector.startswith("@"):
        return state.halt_only(todo(f"Migrate cy.get({link.arg_text(0)}) - use the const variable directly"))
    if not link.args:
        return state.halt(todo("Migrate cy.get() without a selector"))
    return state.with_locator(f"page.locator({link.arg_text(0)})")


def _h_contains(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if state.subject not in (Subject.NONE, Subject.LOCATOR):
        return _element_required(state, link) or state
    base = state.expression if state.subject == Subject.LOCATOR else "page"
    args = link.args
    if len(args) >= 2 and args[1].type != "object":
        scoped = "page" if state.subject == Subject.NONE else state.expression
        return state.with_locator(f"{scoped}.locator({link.arg_text(0)}).filter({{ hasText: {link.arg_text(1)} }})")
    if not args:
        return state.halt(todo("Migrate .contains() without content"))
    return state.with_locator(f"{base}.getByText({link.arg_text(0)})")


def _locator_step(render: Callable[[ChainState, ChainLink], str]) -> Handler:
    def handler(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
        blocked = _element_required(state, link)
        if blocked is not None:
            return blocked
        return state.with_locator(render(state, link))

    return handler


def _parent(state: ChainState, link: ChainLink) -> str:
    parent = f"{state.expression}.locator('..')"
    if link.args:
        return f"{parent}.and(page.locator({link.arg_text(0)}))"
    return parent


def _ancestors(state: ChainState, link: ChainLink) -> str:
    if not link.args:
        return f"{state.expression}.locator('xpath=ancestor::*')"
    return f"page.locator({link.arg_text(0)}).filter({{ has: {state.expression} }})"


def _h_focused(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_locator("page.locator(':focus')")


def _h_root(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_locator("page.locator(':root')")


def _h_shadow(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    # Playwright locators pierce open shadow roots already
    return _element_required(state, link) or state


# Assertions


def _h_should(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit(todo(f"Migrate .{link.method}() without an assertion"))

    first = link.args[0]
    if is_callback(first):
        return state.emit(
            todo_with_callback(
                f"Migrate {state.describe_subject()}.{link.method}(callback) - "
                "rewrite the callback body as expect() assertions",
                first,
                env,
            )
        )

    raw_keyword = literal_string(first)
    if raw_keyword is None:
        return state.emit(
            todo(f"Migrate .{link.method}({link.args_text()}) - assertion keyword is not a literal")
        )
    keyword, negated = split_negation(raw_keyword)
    negation = ".not" if negated else ""
    operands = link.args[1:]

    if state.subject in _VALUE_SUBJECTS:
        entry = lookup_value_assertion(keyword)
        if entry is None:
            return state.emit(f"expect({state.expression})./* TODO: migrate '{raw_keyword}' */ toBeTruthy()")
        args = assertion_args(entry, operands)
        return state.emit(f"expect({state.expression}){negation}.{entry.target_method}({args})")

    if state.subject == Subject.LOCATOR:
        entry = lookup_assertion(keyword)
        if entry is None:
            return state.emit(f"await expect({state.expression})./* TODO: migrate '{raw_keyword}' */ toPass()")
        return state.emit(
            f"await expect({state.expression}){negation}.{entry.target_method}({assertion_args(entry, operands)})"
        )

    return state.emit(
        todo(f"Migrate {state.describe_subject()}.{link.method}({link.args_text()}) - nothing to assert on")
    )


# Actions


def _action(target: str) -> Handler:
    def handler(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
        blocked = _element_required(state, link)
        if blocked is not None:
            return blocked
        return state.emit(f"await {state.expression}.{target}({link.args_text()})")

    return handler


def _typed_segments(content: str) -> list[tuple[str, str]] | None:
    """Split ``'abc{enter}'`` into [('text', 'abc'), ('key', 'Enter')].

    Returns ``None`` when the string has no special keys or has a key
    that is not known.
    """
    tokens = [token for token in _KEY_TOKEN.split(content) if token]
    if not any(_KEY_TOKEN.fullmatch(token) for token in tokens):
        return None
    segments = []
    for token in tokens:
        if _KEY_TOKEN.fullmatch(token):
            key = SPECIAL_KEYS.get(token[1:-1].lower())
            if key is None:
                return None
            segments.append(("key", key))
        else:
            segments.append(("text", token))
    return segments


def _h_type(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    blocked = _element_required(state, link)
    if blocked is not None:
        return blocked
    content = literal_string(link.args[0]) if link.args else None
    segments = _typed_segments(content) if content is not None else None
    if segments is None:
        return state.emit(f"await {state.expression}.fill({link.args_text()})")
    for index, (kind, value) in enumerate(segments):
        if kind == "key":
            state = state.emit(f"await {state.expression}.press({js_quote(value)})")
        else:
            method = "fill" if index == 0 else "pressSequentially"
            state = state.emit(f"await {state.expression}.{method}({js_quote(value)})")
    return state


def _h_trigger(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    blocked = _element_required(state, link)
    if blocked is not None:
        return blocked
    event = literal_string(link.args[0]) if link.args else None
    loc = state.expression
    if event in ("mouseover", "mouseenter"):
        return state.emit(f"await {loc}.hover()")
    if event in ("focus", "blur"):
        return state.emit(f"await {loc}.{event}()")
    if not link.args:
        return state.emit(todo(f"Migrate {loc}.trigger() without an event name"))
    return state.emit(f"await {loc}.dispatchEvent({link.arg_text(0)})")


def _h_rightclick(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return _element_required(state, link) or state.emit(f"await {state.expression}.click({{ button: 'right' }})")


def _h_submit(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return _element_required(state, link) or state.emit(
        f"await {state.expression}.evaluate((form) => form.submit())"
    )


# Values


def _h_invoke(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit(todo(f"Migrate {state.describe_subject()}.invoke() without a method name"))
    method = literal_string(link.args[0])
    rest = link.args_text(1)
    call = f"{method}({rest})" if method is not None else f"[{link.arg_text(0)}]({rest})"
    accessor = f".{call}" if method is not None else call

    if state.subject == Subject.LOCATOR:
        getter = INVOKE_GETTERS.get((method or "", len(link.args) - 1))
        if getter is not None:
            return state.with_value(f"await {state.expression}.{getter}({rest})")
        return state.with_value(f"await {state.expression}.evaluate((el) => el{accessor})")
    if state.subject in _BROWSER_SUBJECTS:
        return state.with_value(f"await page.evaluate(() => {state.expression}{accessor})")
    if state.subject in _VALUE_SUBJECTS:
        base = f"({state.expression})" if " " in state.expression else state.expression
        return state.with_value(f"{base}{accessor}")
    return _element_required(state, link) or state


def _h_its(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit(todo(f"Migrate {state.describe_subject()}.its() without a property"))
    path = link.args[0]
    prop = literal_string(path)

    if state.subject == Subject.LOCATOR:
        if prop == "length":
            return state.with_value(f"await {state.expression}.count()")
        return state.with_value(f"await {state.expression}.evaluate((el) => {member_access('el', path)})")
    if state.subject in _BROWSER_SUBJECTS:
        return state.with_value(f"await page.evaluate(() => {member_access(state.expression, path)})")
    if state.subject == Subject.RESPONSE and prop in RESPONSE_PROPERTIES:
        base = f"({state.expression})"
        return state.with_value(RESPONSE_PROPERTIES[prop].format(base))
    if state.subject in _VALUE_SUBJECTS:
        return state.with_value(member_access(state.expression, path))
    return _element_required(state, link) or state


def _h_wrap(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit(todo("Migrate cy.wrap() without a value"))
    return state.with_value(link.arg_text(0))


# Page level


def _h_visit(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit(f"await page.goto({link.args_text()})")


def _h_reload(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit("await page.reload()")


def _h_go(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    arg = link.args[0] if link.args else None
    direction = literal_string(arg)
    steps = number_value(arg)
    if direction == "back" or steps == -1:
        return state.emit("await page.goBack()")
    if direction == "forward" or steps == 1:
        return state.emit("await page.goForward()")
    verify = f" // TODO: Verify - was cy.go({link.args_text()})"
    if steps is not None and steps > 0:
        return state.emit("await page.goForward();" + verify)
    return state.emit("await page.goBack();" + verify)


def _h_wait(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit(todo("Migrate cy.wait() without a duration"))
    arg = link.args[0]
    alias = literal_string(arg)
    if (alias is not None and alias.startswith("@")) or arg.type == "array":
        return state.emit(
            todo(f"Migrate cy.wait({link.arg_text(0)}) - use page.waitForResponse() or similar")
        )
    return state.emit(f"await page.waitForTimeout({link.arg_text(0)})")


def _h_url(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("page.url()")


def _h_title(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("await page.title()")


def _h_location(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if link.args:
        return state.with_value(member_access("new URL(page.url())", link.args[0]))
    return state.with_value("new URL(page.url())")


def _h_hash(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("new URL(page.url()).hash")


def _h_window(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("window", Subject.WINDOW)


def _h_document(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("document", Subject.DOCUMENT)


_SCROLL_POSITIONS = {
    "top": ("0", "0"),
    "bottom": ("0", "{el}.scrollHeight"),
}


def _h_scroll_to(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    on_element = state.subject == Subject.LOCATOR
    target = "el" if on_element else "window"
    height_source = "el" if on_element else "document.body"

    position = literal_string(link.args[0]) if link.args else None
    coordinates: tuple[str, str] | None = None
    if position in _SCROLL_POSITIONS:
        x, y = _SCROLL_POSITIONS[position]
        coordinates = (x, y.format(el=height_source))
    elif len(link.args) >= 2 and all(literal_string(arg) is None for arg in link.args[:2]):
        coordinates = (link.arg_text(0), link.arg_text(1))

    if coordinates is None:
        return state.emit(
            todo(
                f"Migrate {state.describe_subject()}.scrollTo({link.args_text()}) - "
                "use page.mouse.wheel() or locator.scrollIntoViewIfNeeded()"
            )
        )
    scroll = f"{target}.scrollTo({coordinates[0]}, {coordinates[1]})"
    if on_element:
        return state.emit(f"await {state.expression}.evaluate((el) => {scroll})")
    return state.emit(f"await page.evaluate(() => {scroll})")


def _h_viewport(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if len(link.args) >= 2 and literal_string(link.args[0]) is None:
        return state.emit(
            f"await page.setViewportSize({{ width: {link.arg_text(0)}, height: {link.arg_text(1)} }})"
        )
    return state.emit(
        todo(
            f"Migrate cy.viewport({link.args_text()}) - use a device profile in playwright.config "
            "or page.setViewportSize()"
        )
    )


def _h_log(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit(f"console.log({link.args_text()})")


def _h_clock(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if link.args:
        return state.emit(f"await page.clock.install({{ time: {link.arg_text(0)} }})")
    return state.emit("await page.clock.install()")


def _h_tick(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit(f"await page.clock.runFor({link.args_text()})")


# Side channels


def _h_get_cookies(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.with_value("await page.context().cookies()")


def _h_get_cookie(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    name = link.arg_text(0)
    return state.with_value(
        f"await page.context().cookies().then(cookies => cookies.find(c => c.name === {name}))"
    )


def _h_set_cookie(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if len(link.args) < 2:
        return state.emit(todo(f"Migrate cy.setCookie({link.args_text()}) - name and value are required"))
    return state.emit(
        f"await page.context().addCookies([{{ name: {link.arg_text(0)}, value: {link.arg_text(1)}, "
        "url: page.url() }])"
    )


def _h_clear_cookies(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit("await page.context().clearCookies()")


def _h_clear_cookie(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if not link.args:
        return state.emit("await page.context().clearCookies()")
    return state.emit(f"await page.context().clearCookies({{ name: {link.arg_text(0)} }})")


def _h_clear_local_storage(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    if link.args and literal_string(link.args[0]) is not None:
        return state.emit(
            f"await page.evaluate((key) => localStorage.removeItem(key), {link.arg_text(0)})"
        )
    return state.emit("await page.evaluate(() => localStorage.clear())")


def _h_screenshot(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    target = state.expression if state.subject == Subject.LOCATOR else "page"
    options = ""
    if link.args and link.args[0].type != "object":
        name = literal_string(link.args[0])
        path = js_quote(f"{name}.png") if name is not None else f"`${{{link.arg_text(0)}}}.png`"
        options = f"{{ path: {path} }}"
    return state.emit(f"await {target}.screenshot({options})")


def _h_request(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    args = link.args
    if not args:
        return state.emit(todo("Migrate cy.request() without arguments"))
    if len(args) == 1:
        if args[0].type == "object":
            return state.with_value(
                f"await page.request.fetch(/* TODO: migrate cy.request options object */ {collapse(link.arg_text(0))})",
                Subject.RESPONSE,
            )
        return state.with_value(f"await page.request.get({link.arg_text(0)})", Subject.RESPONSE)

    method = literal_string(args[0])
    if method is not None and method.upper() in HTTP_METHODS:
        call = f"await page.request.{method.lower()}({link.arg_text(1)}"
        if len(args) >= 3:
            call += f", {{ data: {link.arg_text(2)} }}"
        return state.with_value(call + ")", Subject.RESPONSE)
    if method is None and args[0].type not in ("template_string",):
        # cy.request(method, url[, body]) with a computed method
        data = f", data: {link.arg_text(2)}" if len(args) >= 3 else ""
        return state.with_value(
            f"await page.request.fetch({link.arg_text(1)}, {{ method: {link.arg_text(0)}{data} }})", Subject.RESPONSE
        )
    # cy.request(url, body) posts the body
    return state.with_value(
        f"await page.request.post({link.arg_text(0)}, {{ data: {link.arg_text(1)} }})", Subject.RESPONSE
    )


def _environment_todo(hint: str, first_arg_only: bool = True) -> Handler:
    def handler(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
        shown = link.arg_text(0) if first_arg_only else link.args_text()
        return state.emit(todo(f"Migrate cy.{link.method}({shown}) - {hint}"))

    return handler


def _h_pause(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit("await page.pause(); // Opens Playwright Inspector for debugging")


def _h_debug(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit("await page.pause(); // cy.debug() equivalent - opens Playwright Inspector")


# Manual migration


def _h_intercept(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.halt(todo(f"Migrate cy.{link.method} - use page.route() in Playwright"))


def _h_as(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    return state.emit(
        todo(
            f"Migrate {state.describe_subject()}.as({link.args_text()}) - "
            "Playwright uses const variables instead of aliases"
        )
    )


_CALLBACK_HINTS = {
    "then": "read element state with locator methods (textContent(), getAttribute(), evaluate()) and await it",
    "within": "scope the inner commands to this locator by chaining them onto it",
    "each": "iterate with for (const item of await locator.all()) { ... }",
    "spread": "destructure the awaited values instead",
}


def _h_callback(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    callback = next((arg for arg in link.args if is_callback(arg)), None)
    hint = _CALLBACK_HINTS.get(link.method, "needs manual conversion")
    shown = "(callback)" if callback is not None else f"({link.args_text()})"
    return state.halt(
        todo_with_callback(f"Migrate {state.describe_subject()}.{link.method}{shown} - {hint}", callback, env)
    )


def _h_unknown(state: ChainState, link: ChainLink, env: InterpretEnv) -> ChainState:
    logger.debug(f"No handler for Cypress command '{link.method}'")
    return state.emit(todo(f"Migrate .{link.method}({link.args_text()}) - no automatic Playwright equivalent"))


HANDLERS: dict[str, Handler] = {
    # Locators
    "get": _h_get,
    "contains": _h_contains,
    "first": _locator_step(lambda s, link: f"{s.expression}.first()"),
    "last": _locator_step(lambda s, link: f"{s.expression}.last()"),
    "eq": _locator_step(lambda s, link: f"{s.expression}.nth({link.arg_text(0)})"),
    "find": _locator_step(lambda s, link: f"{s.expression}.locator({link.arg_text(0)})"),
    "parent": _locator_step(_parent),
    "parents": _locator_step(_ancestors),
    "closest": _locator_step(lambda s, link: f"{_ancestors(s, link)}.last()"),
    "children": _locator_step(
        lambda s, link: f"{s.expression}.locator({prefixed_selector('> ', link.args[0] if link.args else None)})"
    ),
    "siblings": _locator_step(
        lambda s, link: f"{s.expression}.locator({prefixed_selector('~ ', link.args[0] if link.args else None)})"
    ),
    "next": _locator_step(
        lambda s, link: f"{s.expression}.locator({prefixed_selector('+ ', link.args[0] if link.args else None)})"
    ),
    "nextAll": _locator_step(
        lambda s, link: f"{s.expression}.locator({prefixed_selector('~ ', link.args[0] if link.args else None)})"
    ),
    "prev": _locator_step(lambda s, link: f"{s.expression}.locator('xpath=preceding-sibling::*[1]')"),
    "prevAll": _locator_step(lambda s, link: f"{s.expression}.locator('xpath=preceding-sibling::*')"),
    "filter": _locator_step(lambda s, link: f"{s.expression}.and(page.locator({link.arg_text(0)}))"),
    "not": _locator_step(lambda s, link: f"{s.expression}.filter({{ hasNot: page.locator({link.arg_text(0)}) }})"),
    "focused": _h_focused,
    "root": _h_root,
    "shadow": _h_shadow,
    # Assertions
    "should": _h_should,
    "and": _h_should,
    # Actions
    **{source: _action(target) for source, target in ACTION_MAP.items() if source != "type"},
    "type": _h_type,
    "hover": _action("hover"),
    "rightclick": _h_rightclick,
    "submit": _h_submit,
    "trigger": _h_trigger,
    # Values
    "invoke": _h_invoke,
    "its": _h_its,
    "wrap": _h_wrap,
    # Page level
    "visit": _h_visit,
    "reload": _h_reload,
    "go": _h_go,
    "wait": _h_wait,
    "url": _h_url,
    "title": _h_title,
    "location": _h_location,
    "hash": _h_hash,
    "window": _h_window,
    "document": _h_document,
    "scrollTo": _h_scroll_to,
    "viewport": _h_viewport,
    "log": _h_log,
    "clock": _h_clock,
    "tick": _h_tick,
    # Side channels
    "getCookies": _h_get_cookies,
    "getCookie": _h_get_cookie,
    "setCookie": _h_set_cookie,
    "clearCookies": _h_clear_cookies,
    "clearCookie": _h_clear_cookie,
    "clearLocalStorage": _h_clear_local_storage,
    "screenshot": _h_screenshot,
    "request": _h_request,
    "task": _environment_todo("Playwright uses fixtures or global setup"),
    "exec": _environment_todo("run shell commands from a fixture or global setup with child_process"),
    "readFile": _environment_todo("use fs.readFileSync in Playwright"),
    "writeFile": _environment_todo("use fs.writeFileSync in Playwright"),
    "fixture": _environment_todo("use import or fs.readFileSync in Playwright"),
    "pause": _h_pause,
    "debug": _h_debug,
    # Manual
    "intercept": _h_intercept,
    "route": _h_intercept,
    "server": _h_intercept,
    "as": _h_as,
    "then": _h_callback,
    "within": _h_callback,
    "each": _h_callback,
    "spread": _h_callback,
}


class ChainInterpreter:
    """Turns ``ChainLink`` lists into Playwright source text.

    Args:
        handlers: Optional replacement dispatch table, mainly for tests.
    """

    def __init__(self, handlers: dict[str, Handler] | None = None) -> None:
        self.handlers = handlers if handlers is not None else HANDLERS

    def _step(self, env: InterpretEnv) -> Callable[[ChainState, ChainLink], ChainState]:
        def step(state: ChainState, link: ChainLink) -> ChainState:
            if state.halted:
                return state
            return self.handlers.get(link.method, _h_unknown)(state, link, env)

        return step

    def run(self, chain: list[ChainLink], indent: str = "") -> ChainState:
        """Fold the chain into its final state."""
        return reduce(self._step(InterpretEnv(indent=indent)), chain, ChainState())

    def interpret(self, chain: list[ChainLink], indent: str = "") -> str:
        """Playwright text for ``chain``, or '' when there is nothing to emit.

        Page-property assertions (url, title, location, hash) are tried
        first; everything else goes through the handler table.
        Multiple statements are joined with ``;`` and a newline at
        ``indent``. A chain that only builds a locator or value returns
        that expression.
        """
        if not chain:
            return ""
        special = interpret_special_chain(chain, indent)
        if special is not None:
            return special

        state = self.run(chain, indent)
        if state.statements:
            return (STATEMENT_SEPARATOR + indent).join(state.statements)
        if state.subject in _BROWSER_SUBJECTS:
            return todo(
                f"Migrate cy.{state.expression}() - use page.evaluate(() => {state.expression}...) "
                "to reach the browser context"
            )
        return state.expression
