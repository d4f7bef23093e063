"""
React code generator implementation.

Generates function components (JSX or TSX) with hooks for state and
effects, a stylesheet and a barrel index.
"""

from typing import Any, Dict, List, Mapping, Optional

from ...core.generator import CodeGenerator, Framework, GenerateOptions
from ...core.markup import MarkupRenderer, escape_markup_text, is_identifier
from ..common import script_extension, style_filename
from .templates import HELPERS, TEMPLATES

# HTML attribute names that JSX spells differently
JSX_ATTRIBUTE_NAMES = {
    "class": "className",
    "for": "htmlFor",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "colspan": "colSpan",
    "rowspan": "rowSpan",
    "contenteditable": "contentEditable",
    "crossorigin": "crossOrigin",
    "srcset": "srcSet",
}


class ReactMarkupRenderer(MarkupRenderer):
    """Renders schema trees as JSX."""

    self_closing = True
    void_close = " />"

    def attribute_name(self, name: str) -> str:
        return JSX_ATTRIBUTE_NAMES.get(name, name)

    def number_attribute(self, name: str, value: Any) -> str:
        return self.binding(name, self._number(value))

    @staticmethod
    def _number(value: Any) -> str:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def class_attribute(self, style_class: Optional[str], static_classes: List[str]) -> Optional[str]:
        if not (self.css_modules and style_class):
            return super().class_attribute(style_class, static_classes)

        module_class = self.module_class(style_class)
        if not static_classes:
            return f"className={{{module_class}}}"
        extra = " ".join(static_classes)
        return f"className={{`${{{module_class}}} {extra}`}}"

    @staticmethod
    def module_class(class_name: str) -> str:
        if is_identifier(class_name):
            return f"styles.{class_name}"
        return f"styles['{class_name}']"

    def binding(self, name: str, expression: str) -> str:
        return f"{self.attribute_name(name)}={{{expression}}}"

    def event(self, event: str, handler: str) -> str:
        return f"on{event}={{{handler}}}"

    def text(self, value: str) -> str:
        return escape_markup_text(value)

    def text_binding(self, expression: str) -> str:
        return f"{{{expression}}}"


class ReactGenerator(CodeGenerator):
    """Code generator for React function components."""

    @property
    def framework(self) -> Framework:
        return Framework.REACT

    @property
    def templates(self) -> Mapping[str, str]:
        return TEMPLATES

    @property
    def helpers(self):
        return HELPERS

    def create_renderer(self, options: GenerateOptions) -> MarkupRenderer:
        return ReactMarkupRenderer(self.config.indent_size, css_modules=options.is_module)

    def filenames(self, name: str, options: GenerateOptions, page: bool = False) -> Dict[str, str]:
        extension = "tsx" if options.typescript else "jsx"
        return {
            "main": f"{name}.{extension}",
            "styles": style_filename(name, options.is_module),
            "index": f"index.{script_extension(options.typescript)}",
        }

    def build_context(
        self, context: Dict[str, Any], options: GenerateOptions, page: bool
    ) -> Dict[str, Any]:
        hooks = []
        if context["hasState"]:
            hooks.append("useState")
        if context["hasEffect"] or (page and context.get("pageTitle")):
            hooks.append("useEffect")

        signature = ""
        if context["hasProps"]:
            signature = "{ " + ", ".join(context["propBindings"]) + " }"
            if options.typescript:
                signature += f": {context['componentName']}Props"

        # A blank line separates a hook or function block from whatever precedes it
        effects = [
            dict(effect, gap=context["hasState"] or index > 0)
            for index, effect in enumerate(context["effects"])
        ]
        functions = [
            dict(function, gap=context["hasState"] or context["hasEffect"] or index > 0)
            for index, function in enumerate(context["functions"])
        ]

        context.update(
            effects=effects,
            functions=functions,
            hasBody=bool(context["hasState"] or effects or functions),
            hooks=hooks,
            hasHooks=bool(hooks),
            propsSignature=signature,
            jsxContent=context["markup"],
        )
        return context
