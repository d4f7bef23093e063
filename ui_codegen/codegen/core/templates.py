"""
Template engine for code generation.

Templates use a small directive language:

    {{ path.to.value }}                       interpolation
    {{#if expr}} ... {{#else}} ... {{/if}}    conditionals (``a == b``, ``a != b`` or ``a``)
    {{#each path}} ... {{/each}}              iteration, binds ``item`` and ``index``
    {{helperName arg1 "literal" 2}}           helper calls

Sources are tokenized, parsed into a small AST and rendered by structural
recursion. Missing values render as empty strings; unknown helpers and
unrecognized markers are emitted unchanged.
"""

import json
import re
from collections import ChainMap
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ...logging_config import get_logger
from .store import TemplateNotFoundError, TemplateStore

logger = get_logger(__name__)


# Tokens


class TokenKind(Enum):
    TEXT = "text"
    VARIABLE = "variable"
    IF_OPEN = "if_open"
    IF_ELSE = "if_else"
    IF_CLOSE = "if_close"
    EACH_OPEN = "each_open"
    EACH_CLOSE = "each_close"
    HELPER = "helper"


BLOCK_KINDS = {
    TokenKind.IF_OPEN,
    TokenKind.IF_ELSE,
    TokenKind.IF_CLOSE,
    TokenKind.EACH_OPEN,
    TokenKind.EACH_CLOSE,
}


@dataclass
class Token:
    kind: TokenKind
    value: str
    raw: str
    args: Tuple[str, ...] = ()


_MARKER_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_PATH_RE = re.compile(r"[A-Za-z_$][\w$]*(?:\.[\w$]+)*")
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_ARG_PATTERN = r'"(?:[^"\\]|\\.)*"|[^\s"]+'
_ARG_RE = re.compile(_ARG_PATTERN)
_ARGS_RE = re.compile(rf"\s*(?:(?:{_ARG_PATTERN})\s*)+")
_IF_RE = re.compile(r"#if\s+(.+)", re.DOTALL)
_EACH_RE = re.compile(r"#each\s+(\S+)")


def _classify(body: str, raw: str) -> Token:
    """Turn the inside of one ``{{ ... }}`` marker into a token."""
    body = body.strip()

    if body == "#else":
        return Token(TokenKind.IF_ELSE, body, raw)
    if body == "/if":
        return Token(TokenKind.IF_CLOSE, body, raw)
    if body == "/each":
        return Token(TokenKind.EACH_CLOSE, body, raw)

    match = _IF_RE.fullmatch(body)
    if match:
        return Token(TokenKind.IF_OPEN, match.group(1).strip(), raw)

    match = _EACH_RE.fullmatch(body)
    if match:
        return Token(TokenKind.EACH_OPEN, match.group(1), raw)

    if _PATH_RE.fullmatch(body):
        return Token(TokenKind.VARIABLE, body, raw)

    if _ARGS_RE.fullmatch(body):
        parts = _ARG_RE.findall(body)
        if len(parts) > 1 and _IDENT_RE.fullmatch(parts[0]):
            return Token(TokenKind.HELPER, parts[0], raw, tuple(parts[1:]))

    # Not a directive (e.g. a JSX object literal): keep the text as written
    return Token(TokenKind.TEXT, raw, raw)


def tokenize(source: str) -> List[Token]:
    """Split a template source into tokens, trimming standalone block lines."""
    tokens: List[Token] = []
    position = 0

    for match in _MARKER_RE.finditer(source):
        if match.start() > position:
            text = source[position : match.start()]
            tokens.append(Token(TokenKind.TEXT, text, text))
        tokens.append(_classify(match.group(1), match.group(0)))
        position = match.end()

    if position < len(source):
        text = source[position:]
        tokens.append(Token(TokenKind.TEXT, text, text))

    _trim_standalone_lines(tokens)
    return [token for token in tokens if token.kind is not TokenKind.TEXT or token.value]


def _trim_standalone_lines(tokens: List[Token]) -> None:
    """Remove the whole line of block tags that sit alone on their line."""
    standalone = []

    for index, token in enumerate(tokens):
        if token.kind not in BLOCK_KINDS:
            continue

        if index == 0:
            starts_line = True
        else:
            previous = tokens[index - 1]
            head = previous.value.rpartition("\n")
            starts_line = (
                previous.kind is TokenKind.TEXT
                and not head[2].strip(" \t")
                and (bool(head[1]) or index == 1)
            )

        if index == len(tokens) - 1:
            ends_line = True
        else:
            following = tokens[index + 1]
            tail = following.value.partition("\n")
            ends_line = (
                following.kind is TokenKind.TEXT
                and not tail[0].strip(" \t\r")
                and (bool(tail[1]) or index + 1 == len(tokens) - 1)
            )

        if starts_line and ends_line:
            standalone.append(index)

    for index in standalone:
        if index > 0:
            previous = tokens[index - 1]
            previous.value = previous.value[: previous.value.rfind("\n") + 1]
        if index < len(tokens) - 1:
            following = tokens[index + 1]
            newline = following.value.find("\n")
            following.value = following.value[newline + 1 :] if newline >= 0 else ""


# AST


@dataclass(frozen=True)
class Node:
    """Base class for template AST nodes."""

    pass


@dataclass(frozen=True)
class Text(Node):
    text: str


@dataclass(frozen=True)
class Interpolation(Node):
    path: str


@dataclass(frozen=True)
class Condition:
    left: str
    operator: Optional[str] = None
    right: Optional[str] = None


@dataclass(frozen=True)
class Conditional(Node):
    condition: Condition
    then_branch: Tuple[Node, ...]
    else_branch: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Loop(Node):
    source: str
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class HelperCall(Node):
    name: str
    args: Tuple[str, ...]
    raw: str


_OPERAND_PATTERN = r'"(?:[^"\\]|\\.)*"|[^\s"=!]+'
_COMPARISON_RE = re.compile(
    rf"\s*({_OPERAND_PATTERN})\s*(==|!=)\s*({_OPERAND_PATTERN})\s*"
)


def parse_condition(expression: str) -> Condition:
    """Parse the expression of an ``{{#if}}`` tag."""
    match = _COMPARISON_RE.fullmatch(expression)
    if match:
        return Condition(match.group(1), match.group(2), match.group(3))
    if not _ARGS_RE.fullmatch(expression) or len(_ARG_RE.findall(expression)) != 1:
        logger.warning("Unsupported condition %r, treating it as false", expression)
        return Condition("false")
    return Condition(expression.strip())


class _Parser:
    """Recursive-descent parser from tokens to AST nodes."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> Tuple[Node, ...]:
        return tuple(self._parse_block(frozenset()))

    def _peek(self, kind: TokenKind) -> bool:
        return self.pos < len(self.tokens) and self.tokens[self.pos].kind is kind

    def _parse_block(self, closers: frozenset) -> List[Node]:
        nodes: List[Node] = []
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            if token.kind in closers:
                return nodes
            self.pos += 1

            if token.kind is TokenKind.TEXT:
                nodes.append(Text(token.value))
            elif token.kind is TokenKind.VARIABLE:
                nodes.append(Interpolation(token.value))
            elif token.kind is TokenKind.HELPER:
                nodes.append(HelperCall(token.value, token.args, token.raw))
            elif token.kind is TokenKind.IF_OPEN:
                nodes.extend(self._parse_conditional(token, closers))
            elif token.kind is TokenKind.EACH_OPEN:
                nodes.extend(self._parse_loop(token, closers))
            else:
                logger.warning("Unmatched %s tag, emitting it as text", token.raw)
                nodes.append(Text(token.raw))
        return nodes

    def _parse_conditional(self, opener: Token, closers: frozenset) -> List[Node]:
        then_branch = self._parse_block(closers | {TokenKind.IF_ELSE, TokenKind.IF_CLOSE})
        else_token = None
        else_branch: List[Node] = []

        if self._peek(TokenKind.IF_ELSE):
            else_token = self.tokens[self.pos]
            self.pos += 1
            else_branch = self._parse_block(closers | {TokenKind.IF_CLOSE})

        if self._peek(TokenKind.IF_CLOSE):
            self.pos += 1
            return [
                Conditional(
                    parse_condition(opener.value), tuple(then_branch), tuple(else_branch)
                )
            ]

        logger.warning("Unclosed %s tag, emitting it as text", opener.raw)
        fallback: List[Node] = [Text(opener.raw), *then_branch]
        if else_token is not None:
            fallback.append(Text(else_token.raw))
            fallback.extend(else_branch)
        return fallback

    def _parse_loop(self, opener: Token, closers: frozenset) -> List[Node]:
        body = self._parse_block(closers | {TokenKind.EACH_CLOSE})
        if self._peek(TokenKind.EACH_CLOSE):
            self.pos += 1
            return [Loop(opener.value, tuple(body))]

        logger.warning("Unclosed %s tag, emitting it as text", opener.raw)
        return [Text(opener.raw), *body]


@lru_cache(maxsize=256)
def compile_template(source: str) -> Tuple[Node, ...]:
    """Parse a template source into AST nodes. Results are cached per source."""
    return _Parser(tokenize(source)).parse()


# Value resolution

_MISSING = object()
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}


def _lookup(path: str, context: Mapping[str, Any]) -> Any:
    current: Any = context
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def resolve_path(path: str, context: Mapping[str, Any], default: Any = None) -> Any:
    """Resolve a dot-separated path against nested mappings."""
    value = _lookup(path, context)
    if value is _MISSING:
        logger.debug("Unresolved template path: %s", path)
        return default
    return value


def resolve_value(token: str, context: Mapping[str, Any]) -> Any:
    """
    Resolve a condition operand or helper argument.

    Double-quoted text is a string, numeric text a number, ``true``,
    ``false``, ``null`` and ``undefined`` their values; anything else
    is looked up as a context path.
    """
    token = token.strip()
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return re.sub(r"\\(.)", r"\1", token[1:-1])
    if _NUMBER_RE.fullmatch(token):
        return float(token) if "." in token else int(token)
    if token in _KEYWORDS:
        return _KEYWORDS[token]
    return resolve_path(token, context)


def _json_ready(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(item) for item in value]
    return value


def stringify(value: Any) -> str:
    """Convert a resolved value to template output using JavaScript spelling."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(_json_ready(value), default=str)
    return str(value)


def _evaluate(condition: Condition, context: Mapping[str, Any]) -> bool:
    left = resolve_value(condition.left, context)
    if condition.operator is None:
        return bool(left)
    right = resolve_value(condition.right, context)
    if condition.operator == "==":
        return left == right
    return left != right


# Rendering


class _Renderer:
    def __init__(self, helpers: Mapping[str, Any], label: str):
        self.helpers = helpers
        self.label = label

    def render(self, nodes: Sequence[Node], context: Mapping[str, Any]) -> str:
        return "".join(self._render_node(node, context) for node in nodes)

    def _render_node(self, node: Node, context: Mapping[str, Any]) -> str:
        if isinstance(node, Text):
            return node.text
        if isinstance(node, Interpolation):
            return stringify(resolve_path(node.path, context))
        if isinstance(node, Conditional):
            branch = node.then_branch if _evaluate(node.condition, context) else node.else_branch
            return self.render(branch, context)
        if isinstance(node, Loop):
            return self._render_loop(node, context)
        if isinstance(node, HelperCall):
            return self._render_helper(node, context)
        raise TypeError(f"Unknown template node: {node!r}")

    def _render_loop(self, node: Loop, context: Mapping[str, Any]) -> str:
        items = resolve_path(node.source, context)
        if not isinstance(items, (list, tuple)):
            if items is not None:
                logger.debug(
                    "Loop source '%s' in %s is not a sequence", node.source, self.label
                )
            return ""
        return "".join(
            self.render(node.body, ChainMap({"item": item, "index": index}, context))
            for index, item in enumerate(items)
        )

    def _render_helper(self, node: HelperCall, context: Mapping[str, Any]) -> str:
        helper = self.helpers.get(node.name)
        if helper is None:
            logger.debug("Unknown helper '%s' in %s left as written", node.name, self.label)
            return node.raw

        args = [resolve_value(arg, context) for arg in node.args]
        try:
            return stringify(helper(*args))
        except Exception:
            logger.warning(
                "Helper '%s' failed while rendering %s", node.name, self.label, exc_info=True
            )
            return ""


class TemplateEngine:
    """Renders stored templates for one generator."""

    def __init__(self, store: TemplateStore, generator: Optional[str] = None):
        """
        Initialize template engine.

        Args:
            store: Template and helper registry
            generator: Generator whose templates and helpers are used; when
                None, template names must be qualified as ``generator.kind``
        """
        self.store = store
        self.generator = generator

    def render(self, template_name: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a registered template.

        Raises:
            TemplateNotFoundError: If the name is not registered
        """
        generator, kind = self._split_name(template_name)
        source = self.store.get_template(generator, kind)
        return self._render(source, context, f"{generator}.{kind}", generator)

    def render_string(
        self, template_string: str, context: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Render a template given as a string."""
        return self._render(template_string, context, "<string>", self.generator)

    def template_exists(self, template_name: str) -> bool:
        try:
            generator, kind = self._split_name(template_name)
        except TemplateNotFoundError:
            return False
        return self.store.has_template(generator, kind)

    def _split_name(self, template_name: str) -> Tuple[str, str]:
        if self.generator is not None:
            return self.generator, template_name
        generator, dot, kind = template_name.partition(".")
        if not dot:
            raise TemplateNotFoundError("", template_name)
        return generator, kind

    def _render(
        self,
        source: str,
        context: Optional[Mapping[str, Any]],
        label: str,
        generator: Optional[str],
    ) -> str:
        nodes = compile_template(source)
        renderer = _Renderer(self.store.helpers_for(generator), label)
        return renderer.render(nodes, context or {})


def create_template_engine(
    store: Optional[TemplateStore] = None, generator: Optional[str] = None
) -> TemplateEngine:
    """Create a template engine, with an empty store if none is given."""
    return TemplateEngine(store if store is not None else TemplateStore(), generator)
