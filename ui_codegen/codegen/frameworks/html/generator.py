"""
Plain HTML code generator implementation.

Generates markup with ``data-bind-*`` and ``data-on-*`` attributes and an
inline module script that evaluates them against script state.
"""

from typing import Any, Dict, List, Mapping, Optional

from ...core.generator import CodeGenerator, Framework, GenerateOptions
from ...core.markup import MarkupRenderer, escape_expression, escape_markup_text
from ...core.naming import to_kebab_case
from ...core.schema import NodeRecord
from .templates import HELPERS, TEMPLATES

BINDING_PREFIX = "data-bind-"
EVENT_PREFIX = "data-on-"


class HtmlMarkupRenderer(MarkupRenderer):
    """Renders schema trees as plain HTML."""

    def tag_name(self, node: NodeRecord) -> str:
        # Custom elements need a hyphenated name
        if node.is_custom_component:
            kebab = to_kebab_case(node.type)
            return kebab if "-" in kebab else f"x-{kebab}"
        return node.type

    def binding(self, name: str, expression: str) -> str:
        return f'{BINDING_PREFIX}{name.lower()}="{escape_expression(expression)}"'

    def event(self, event: str, handler: str) -> str:
        return f'{EVENT_PREFIX}{event.lower()}="{escape_expression(handler)}"'

    def text(self, value: str) -> str:
        return escape_markup_text(value, escape_braces=False)

    def text_binding(self, expression: str) -> str:
        # Filled in by the script through data-bind-text
        return ""

    def content_binding_attribute(self, expression: str) -> Optional[str]:
        return self.binding("text", expression)


class HtmlGenerator(CodeGenerator):
    """Code generator for plain HTML and JavaScript."""

    @property
    def framework(self) -> Framework:
        return Framework.HTML

    @property
    def templates(self) -> Mapping[str, str]:
        return TEMPLATES

    @property
    def helpers(self):
        return HELPERS

    def create_renderer(self, options: GenerateOptions) -> MarkupRenderer:
        return HtmlMarkupRenderer(self.config.indent_size)

    def filenames(self, name: str, options: GenerateOptions, page: bool = False) -> Dict[str, str]:
        return {
            "main": f"{name}.html",
            "styles": f"{name}.css",
            "index": "index.html",
        }

    def build_context(
        self, context: Dict[str, Any], options: GenerateOptions, page: bool
    ) -> Dict[str, Any]:
        markup = context["markup"]
        scope_names: List[str] = []
        for entry in context["state"]:
            scope_names.extend([entry["name"], entry["setter"]])
        scope_names.extend(entry["name"] for entry in context["functions"])
        scope_names.extend(entry["name"] for entry in context["imports"])

        has_script = bool(
            context["hasState"]
            or context["hasEffect"]
            or context["hasFunctions"]
            or context["hasImports"]
            or BINDING_PREFIX in markup
            or EVENT_PREFIX in markup
        )
        context.update(
            scopeNames=scope_names,
            hasScript=has_script,
            # Styles are linked as a plain stylesheet even when modules are requested
            isModule=False,
        )
        return context
