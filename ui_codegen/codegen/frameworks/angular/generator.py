"""
Angular code generator implementation.

Generates standalone components. Angular output is always TypeScript;
CSS modules have no Angular counterpart, so styles are plain component
stylesheets.
"""

from typing import Any, Dict, Mapping

from ....logging_config import get_logger
from ...core.generator import CodeGenerator, Framework, GenerateOptions
from ...core.markup import MarkupRenderer, escape_expression, escape_markup_text, is_identifier
from ...core.naming import to_kebab_case
from ...core.schema import NodeRecord
from .templates import HELPERS, TEMPLATES

logger = get_logger(__name__)


class AngularMarkupRenderer(MarkupRenderer):
    """Renders schema trees as Angular template markup."""

    def __init__(self, indent_size: int = 2, selector_prefix: str = "app"):
        super().__init__(indent_size)
        self.selector_prefix = selector_prefix

    def tag_name(self, node: NodeRecord) -> str:
        if node.is_custom_component:
            return f"{self.selector_prefix}-{to_kebab_case(node.type)}"
        return node.type

    def number_attribute(self, name: str, value: Any) -> str:
        return self.binding(name, str(value))

    def binding(self, name: str, expression: str) -> str:
        return f'[{name}]="{escape_expression(expression)}"'

    def event(self, event: str, handler: str) -> str:
        if is_identifier(handler):
            handler = f"{handler}($event)"
        return f'({event.lower()})="{escape_expression(handler)}"'

    def text(self, value: str) -> str:
        return escape_markup_text(value)

    def text_binding(self, expression: str) -> str:
        return f"{{{{ {expression} }}}}"


class AngularGenerator(CodeGenerator):
    """Code generator for Angular standalone components."""

    @property
    def framework(self) -> Framework:
        return Framework.ANGULAR

    @property
    def templates(self) -> Mapping[str, str]:
        return TEMPLATES

    @property
    def helpers(self):
        return HELPERS

    @property
    def selector_prefix(self) -> str:
        return str(self.config.custom.get("selector_prefix", "app"))

    def create_renderer(self, options: GenerateOptions) -> MarkupRenderer:
        if options.is_module:
            logger.debug("CSS modules are not supported for Angular; using component styles")
        return AngularMarkupRenderer(self.config.indent_size, self.selector_prefix)

    def filenames(self, name: str, options: GenerateOptions, page: bool = False) -> Dict[str, str]:
        base = f"{to_kebab_case(name)}.component"
        return {
            "main": f"{base}.ts",
            "styles": f"{base}.css",
            "index": "index.ts",
        }

    def build_context(
        self, context: Dict[str, Any], options: GenerateOptions, page: bool
    ) -> Dict[str, Any]:
        name = context["componentName"]
        imports = [self._component_import(entry) for entry in context["imports"]]
        effects = context["effects"]
        has_init = bool(effects) or bool(page and context.get("pageTitle"))
        has_destroy = any(effect["hasCleanup"] for effect in effects)

        core_imports = ["Component"]
        lifecycle = []
        if context["hasProps"]:
            core_imports.append("Input")
        if has_init:
            core_imports.append("OnInit")
            lifecycle.append("OnInit")
        if has_destroy:
            core_imports.append("OnDestroy")
            lifecycle.append("OnDestroy")

        context.update(
            className=f"{name}Component",
            selector=f"{self.selector_prefix}-{to_kebab_case(name)}",
            imports=imports,
            hasImports=bool(imports),
            standaloneImports=["CommonModule"] + [entry["name"] for entry in imports if entry["component"]],
            coreImports=core_imports,
            lifecycle=lifecycle,
            hasInit=has_init,
            hasDestroy=has_destroy,
            props=[dict(prop, declaration=self._input_declaration(prop)) for prop in context["props"]],
            # Angular output is TypeScript regardless of the option
            typescript=True,
        )
        return context

    @staticmethod
    def _component_import(entry: Mapping[str, Any]) -> Dict[str, Any]:
        """Point implicit ``./Name`` imports at Angular's component file layout."""
        if entry["source"] != f"./{entry['name']}":
            return dict(entry, component=False)
        kebab = to_kebab_case(entry["name"])
        return dict(
            entry,
            name=f"{entry['name']}Component",
            source=f"./{kebab}.component",
            component=True,
        )

    @staticmethod
    def _input_declaration(prop: Mapping[str, Any]) -> str:
        if prop["hasDefault"]:
            return f"{prop['name']}: {prop['type']} = {prop['default']}"
        marker = "?" if prop["optional"] else "!"
        return f"{prop['name']}{marker}: {prop['type']}"
