"""
Vue code generator implementation.

Generates single-file components with ``<script setup>``; state becomes
refs and effects become lifecycle hooks or watchers.
"""

from typing import Any, Dict, List, Mapping, Optional

from ...core.generator import CodeGenerator, Framework, GenerateOptions
from ...core.markup import MarkupRenderer, escape_expression, escape_markup_text, is_identifier
from ..common import script_extension, style_filename
from .templates import TEMPLATES

# Runtime prop constructors for inferred type hints
VUE_PROP_TYPES = {
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "unknown[]": "Array",
    "Record<string, unknown>": "Object",
}


class VueMarkupRenderer(MarkupRenderer):
    """Renders schema trees as Vue template markup."""

    self_closing = True
    void_close = " />"

    def number_attribute(self, name: str, value: Any) -> str:
        return self.binding(name, str(value))

    def class_attribute(self, style_class: Optional[str], static_classes: List[str]) -> Optional[str]:
        if not (self.css_modules and style_class):
            return super().class_attribute(style_class, static_classes)

        if is_identifier(style_class):
            module_class = f"$style.{style_class}"
        else:
            module_class = f"$style['{style_class}']"
        if not static_classes:
            return self.binding("class", module_class)
        extra = " ".join(static_classes)
        return self.binding("class", f"[{module_class}, '{extra}']")

    def binding(self, name: str, expression: str) -> str:
        return f':{name}="{escape_expression(expression)}"'

    def event(self, event: str, handler: str) -> str:
        return f'@{event.lower()}="{escape_expression(handler)}"'

    def text(self, value: str) -> str:
        return escape_markup_text(value)

    def text_binding(self, expression: str) -> str:
        return f"{{{{ {expression} }}}}"


class VueGenerator(CodeGenerator):
    """Code generator for Vue 3 single-file components."""

    @property
    def framework(self) -> Framework:
        return Framework.VUE

    @property
    def templates(self) -> Mapping[str, str]:
        return TEMPLATES

    def create_renderer(self, options: GenerateOptions) -> MarkupRenderer:
        return VueMarkupRenderer(self.config.indent_size, css_modules=options.is_module)

    def filenames(self, name: str, options: GenerateOptions, page: bool = False) -> Dict[str, str]:
        return {
            "main": f"{name}.vue",
            "styles": style_filename(name, options.is_module),
            "index": f"index.{script_extension(options.typescript)}",
        }

    def build_context(
        self, context: Dict[str, Any], options: GenerateOptions, page: bool
    ) -> Dict[str, Any]:
        effects = context["effects"]
        vue_imports = []
        if context["hasState"]:
            vue_imports.append("ref")
        if any(not effect["deps"] for effect in effects):
            vue_imports.append("onMounted")
        if any(not effect["deps"] and effect["hasCleanup"] for effect in effects):
            vue_imports.append("onUnmounted")
        if any(effect["deps"] for effect in effects):
            vue_imports.append("watch")

        context.update(
            vueImports=vue_imports,
            hasVueImports=bool(vue_imports),
            props=[dict(prop, runtime=self._runtime_prop(prop)) for prop in context["props"]],
        )
        return context

    @staticmethod
    def _runtime_prop(prop: Mapping[str, Any]) -> str:
        """Runtime ``defineProps`` declaration for one prop."""
        parts = [f"type: {VUE_PROP_TYPES.get(prop['type'], 'null')}"]
        if prop["hasDefault"]:
            default = prop["default"]
            # Object and array defaults must come from a factory
            if isinstance(prop["rawDefault"], (list, dict)):
                default = f"() => ({default})"
            parts.append(f"default: {default}")
        elif not prop["optional"]:
            parts.append("required: true")
        return "{ " + ", ".join(parts) + " }"
