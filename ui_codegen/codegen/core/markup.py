"""
Framework-neutral markup rendering.

A ``MarkupRenderer`` turns a schema subtree into the structural fragment
inserted verbatim into component templates. Subclasses decide how
attributes, bindings, events and text are spelled for their framework.
"""

import html
import json
import re
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from .schema import NodeRecord, SchemaArena

logger = get_logger(__name__)

# Props that describe behaviour rather than markup attributes
META_KEYS = frozenset({"state", "effects", "propDefs", "imports", "functions", "componentName"})

CLASS_KEYS = ("className", "class")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "source", "track", "wbr",
})

_EVENT_RE = re.compile(r"on([A-Z][A-Za-z]*)")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
BIND_KEY = "$bind"


def binding_expression(value: Any) -> Optional[str]:
    """Return the expression of a ``{"$bind": "expr"}`` value, else None."""
    if isinstance(value, Mapping) and isinstance(value.get(BIND_KEY), str):
        return value[BIND_KEY]
    return None


def is_identifier(value: str) -> bool:
    return bool(_IDENTIFIER_RE.fullmatch(value))


class MarkupRenderer(ABC):
    """Renders arena subtrees to framework-native markup."""

    # Empty non-void elements render as <tag /> instead of <tag></tag>
    self_closing = False
    # Closing sequence for void elements
    void_close = ">"

    def __init__(self, indent_size: int = 2, css_modules: bool = False):
        self.indent_unit = " " * indent_size
        self.css_modules = css_modules

    def render(
        self,
        arena: SchemaArena,
        root_id: str,
        class_names: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Render the subtree rooted at ``root_id``."""
        lines = self._render_node(arena, root_id, 0, class_names or {})
        return "\n".join(lines)

    def _render_node(
        self,
        arena: SchemaArena,
        node_id: str,
        depth: int,
        class_names: Mapping[str, str],
    ) -> List[str]:
        node = arena.node(node_id)
        tag = self.tag_name(node)
        attributes = self.attributes(node, class_names.get(node_id))
        opening = f"<{tag}" + "".join(f" {attribute}" for attribute in attributes)
        padding = self.indent_unit * depth
        children = arena.children_of(node_id)

        if children:
            if node.content is not None:
                logger.debug("Node '%s' has children and content; children win", node.id)
            lines = [f"{padding}{opening}>"]
            for child_id in children:
                lines.extend(self._render_node(arena, child_id, depth + 1, class_names))
            lines.append(f"{padding}</{tag}>")
            return lines

        if node.content is not None:
            return [f"{padding}{opening}>{self.content(node.content)}</{tag}>"]

        if tag.lower() in VOID_ELEMENTS:
            return [f"{padding}{opening}{self.void_close}"]

        if self.self_closing:
            return [f"{padding}{opening} />"]
        return [f"{padding}{opening}></{tag}>"]

    # Element and attribute spelling

    def tag_name(self, node: NodeRecord) -> str:
        return node.type

    def attributes(self, node: NodeRecord, style_class: Optional[str]) -> List[str]:
        result = []
        class_attribute = self.class_attribute(style_class, self._static_classes(node))
        if class_attribute:
            result.append(class_attribute)

        for name, value in node.props.items():
            if name in META_KEYS or name in CLASS_KEYS:
                continue
            attribute = self.attribute(name, value)
            if attribute:
                result.append(attribute)

        content_expression = binding_expression(node.content)
        if content_expression is not None:
            extra = self.content_binding_attribute(content_expression)
            if extra:
                result.append(extra)
        return result

    def attribute(self, name: str, value: Any) -> Optional[str]:
        event = _EVENT_RE.fullmatch(name)
        if event and isinstance(value, str):
            return self.event(event.group(1), value)

        expression = binding_expression(value)
        if expression is not None:
            return self.binding(name, expression)

        if value is True:
            return self.attribute_name(name)
        if value is False or value is None:
            return None
        if isinstance(value, (int, float)):
            return self.number_attribute(name, value)
        if isinstance(value, (list, tuple, Mapping)):
            return self.binding(name, json.dumps(value, ensure_ascii=False))
        return self.static_attribute(name, str(value))

    def _static_classes(self, node: NodeRecord) -> List[str]:
        classes = []
        for key in CLASS_KEYS:
            value = node.props.get(key)
            if isinstance(value, str) and value.strip():
                classes.extend(value.split())
        return classes

    def attribute_name(self, name: str) -> str:
        return name

    def static_attribute(self, name: str, value: str) -> str:
        return f'{self.attribute_name(name)}="{html.escape(value, quote=True)}"'

    def number_attribute(self, name: str, value: Any) -> str:
        return self.static_attribute(name, json.dumps(value))

    def class_attribute(self, style_class: Optional[str], static_classes: List[str]) -> Optional[str]:
        classes = ([style_class] if style_class else []) + static_classes
        if not classes:
            return None
        return self.static_attribute("class", " ".join(classes))

    def content(self, value: Any) -> str:
        expression = binding_expression(value)
        if expression is not None:
            return self.text_binding(expression)
        return self.text(str(value))

    def content_binding_attribute(self, expression: str) -> Optional[str]:
        """Extra attribute carrying a content binding, for targets without text bindings."""
        return None

    @abstractmethod
    def binding(self, name: str, expression: str) -> str:
        """Attribute bound to an expression."""
        pass

    @abstractmethod
    def event(self, event: str, handler: str) -> str:
        """Event listener attribute; ``event`` is the name after ``on``, e.g. ``MouseEnter``."""
        pass

    @abstractmethod
    def text(self, value: str) -> str:
        """Escaped literal text content."""
        pass

    @abstractmethod
    def text_binding(self, expression: str) -> str:
        """Text content bound to an expression."""
        pass


def escape_expression(expression: str) -> str:
    """Escape an expression for a double-quoted attribute; single quotes stay readable."""
    return html.escape(expression, quote=False).replace('"', "&quot;")


def escape_markup_text(value: str, escape_braces: bool = True) -> str:
    """HTML-escape text; braces become entities for mustache-style templates."""
    escaped = html.escape(value, quote=False)
    if escape_braces:
        escaped = escaped.replace("{", "&#123;").replace("}", "&#125;")
    return escaped
