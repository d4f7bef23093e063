"""
Schema analysis.

Walks a component schema depth-first and derives the render context used
by the templates: state, effect, prop, import, function and style
descriptors plus the framework-native markup fragment. Analysis is pure:
the same schema always produces the same context.
"""

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ...logging_config import get_logger
from .config import GeneratorConfig
from .markup import MarkupRenderer
from .naming import (
    NamingCase,
    component_name,
    create_js_sanitizer,
    css_class_name,
    is_identifier,
    setter_name,
    to_kebab_case,
)
from .schema import NodeRecord, SchemaArena, SchemaInput, wrap_siblings

logger = get_logger(__name__)

# CSS properties that take bare numbers
UNITLESS_PROPERTIES = frozenset({
    "animation-iteration-count", "column-count", "flex", "flex-grow",
    "flex-shrink", "font-weight", "line-height", "opacity", "order",
    "orphans", "widows", "z-index", "zoom",
})


def js_literal(value: Any) -> str:
    """JavaScript source text for a JSON-compatible value."""
    return json.dumps(value, ensure_ascii=False)


def infer_type(value: Any) -> str:
    """TypeScript type hint for an initial or default value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "unknown[]"
    if isinstance(value, Mapping):
        return "Record<string, unknown>"
    return "unknown"


def css_value(property_name: str, value: Any, unit: str = "px") -> str:
    """Format a style value; numbers gain a unit unless the property is unitless."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if value == 0 or property_name in UNITLESS_PROPERTIES:
            return js_literal(value)
        return f"{js_literal(value)}{unit}"
    return str(value)


def _as_entries(value: Any, key_name: str, value_name: str) -> List[Dict[str, Any]]:
    """Normalize ``{name: x}`` mappings and lists of dicts into a list of dicts."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [{key_name: name, value_name: item} for name, item in value.items()]
    if isinstance(value, (list, tuple)):
        return [entry for entry in value if isinstance(entry, Mapping)]
    logger.warning("Ignoring malformed %s declaration: %r", key_name, value)
    return []


def _import_weight(name: str, value: Any) -> float:
    if isinstance(value, bool):
        value = None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Import '%s' has a non-numeric weight %r; using 1.0", name, value)
        return 1.0


class SchemaAnalyzer:
    """Derives a render context from a component schema."""

    def __init__(self, renderer: MarkupRenderer, config: Optional[GeneratorConfig] = None):
        self.renderer = renderer
        self.config = config or GeneratorConfig()

    def analyze(self, schema: SchemaInput) -> Dict[str, Any]:
        """
        Analyze a single component schema.

        Args:
            schema: Schema tree as dict, ComponentSchema or single-root arena

        Returns:
            Render context mapping
        """
        arena = SchemaArena.from_tree(schema)
        root_id = arena.roots[0]
        return self._analyze_arena(arena, root_id, [root_id])

    def analyze_page(self, schemas: Sequence[SchemaInput]) -> Dict[str, Any]:
        """Analyze sibling section schemas wrapped in a synthetic page container."""
        arena = wrap_siblings(list(schemas))
        root_id = arena.roots[0]
        return self._analyze_arena(arena, root_id, list(arena.children_of(root_id)))

    def _analyze_arena(
        self, arena: SchemaArena, root_id: str, sections: List[str]
    ) -> Dict[str, Any]:
        nodes = list(arena.walk(root_id))
        root = arena.node(root_id)
        sanitizer = create_js_sanitizer()

        class_names = self._class_names(nodes)
        styles = self._style_descriptors(nodes, class_names)
        state = self._state_descriptors(nodes, sanitizer)
        effects = self._effect_descriptors(nodes)
        props = self._prop_descriptors(nodes, sanitizer)
        functions = self._function_descriptors(nodes, sanitizer)
        imports = self._import_descriptors(arena, nodes, sections)

        markup = self.renderer.render(arena, root_id, class_names)

        name_source = root.props.get("componentName")
        name = (
            component_name(str(name_source), self.config.default_component_name)
            if name_source
            else self.config.default_component_name
        )

        logger.debug(
            "Analyzed %d nodes: %d state, %d effects, %d props, %d imports, %d styles",
            len(nodes), len(state), len(effects), len(props), len(imports), len(styles),
        )

        return {
            "componentName": name,
            "hasState": bool(state),
            "hasEffect": bool(effects),
            "hasProps": bool(props),
            "hasImports": bool(imports),
            "hasFunctions": bool(functions),
            "hasStyles": bool(styles),
            "state": state,
            "effects": effects,
            "props": props,
            "propBindings": [
                f"{prop['name']} = {prop['default']}" if prop["hasDefault"] else prop["name"]
                for prop in props
            ],
            "imports": imports,
            "functions": functions,
            "styles": styles,
            "markup": markup,
            "custom": dict(self.config.custom),
        }

    # Styles

    def _class_names(self, nodes: Iterable[NodeRecord]) -> Dict[str, str]:
        names: Dict[str, str] = {}
        taken = set()
        for node in nodes:
            if not node.style:
                continue
            base = css_class_name(node.type, node.id, self.config.class_prefix)
            candidate, counter = base, 2
            while candidate in taken:
                candidate = f"{base}-{counter}"
                counter += 1
            taken.add(candidate)
            names[node.id] = candidate
        return names

    def _style_descriptors(
        self, nodes: Iterable[NodeRecord], class_names: Mapping[str, str]
    ) -> List[Dict[str, Any]]:
        descriptors = []
        for node in nodes:
            if node.id not in class_names:
                continue
            declarations = []
            for prop, value in node.style.items():
                if value is None or value == "":
                    continue
                css_property = prop if prop.startswith("--") else to_kebab_case(prop)
                declarations.append({
                    "property": css_property,
                    "value": css_value(css_property, value, self.config.css_unit),
                })
            if not declarations:
                continue
            class_name = class_names[node.id]
            descriptors.append({
                "nodeId": node.id,
                "className": class_name,
                "selector": f".{class_name}",
                "declarations": declarations,
            })
        return descriptors

    # Behaviour descriptors

    @staticmethod
    def _first_wins(kind: str, seen: set, name: str) -> bool:
        if name in seen:
            logger.debug("Duplicate %s '%s' ignored", kind, name)
            return False
        seen.add(name)
        return True

    def _state_descriptors(self, nodes, sanitizer) -> List[Dict[str, Any]]:
        descriptors, seen = [], set()
        for node in nodes:
            for entry in _as_entries(node.props.get("state"), "name", "initial"):
                if not entry.get("name"):
                    continue
                name = sanitizer.sanitize_name(str(entry["name"]), NamingCase.CAMEL_CASE)
                if not self._first_wins("state", seen, name):
                    continue
                initial = entry.get("initial")
                descriptors.append({
                    "name": name,
                    "setter": setter_name(name),
                    "initialValue": js_literal(initial),
                    "type": entry.get("type") or infer_type(initial),
                })
        return descriptors

    def _effect_descriptors(self, nodes) -> List[Dict[str, Any]]:
        descriptors = []
        for node in nodes:
            raw = node.props.get("effects") or []
            if isinstance(raw, (str, Mapping)):
                raw = [raw]
            for entry in raw:
                if isinstance(entry, str):
                    entry = {"body": entry}
                if not isinstance(entry, Mapping):
                    logger.warning("Ignoring malformed effect on node '%s'", node.id)
                    continue
                deps = [str(dep) for dep in entry.get("deps") or []]
                cleanup = entry.get("cleanup") or None
                descriptors.append({
                    "body": str(entry.get("body") or ""),
                    "cleanup": cleanup,
                    "hasCleanup": cleanup is not None,
                    "deps": deps,
                    "depsList": ", ".join(deps),
                })
        return descriptors

    def _prop_descriptors(self, nodes, sanitizer) -> List[Dict[str, Any]]:
        descriptors, seen = [], set()
        for node in nodes:
            for entry in _as_entries(node.props.get("propDefs"), "name", "type"):
                if not entry.get("name"):
                    continue
                name = sanitizer.sanitize_name(str(entry["name"]), NamingCase.CAMEL_CASE)
                if not self._first_wins("prop", seen, name):
                    continue
                has_default = "default" in entry
                default = entry.get("default")
                descriptors.append({
                    "name": name,
                    "type": entry.get("type") or (infer_type(default) if has_default else "unknown"),
                    "optional": bool(entry.get("optional")) or has_default,
                    "hasDefault": has_default,
                    "default": js_literal(default) if has_default else None,
                    "rawDefault": default,
                })
        return descriptors

    def _function_descriptors(self, nodes, sanitizer) -> List[Dict[str, Any]]:
        descriptors, seen = [], set()
        for node in nodes:
            for entry in _as_entries(node.props.get("functions"), "name", "body"):
                if not entry.get("name"):
                    continue
                name = sanitizer.sanitize_name(str(entry["name"]), NamingCase.CAMEL_CASE)
                if not self._first_wins("function", seen, name):
                    continue
                params = [str(param) for param in entry.get("params") or []]
                descriptors.append({
                    "name": name,
                    "params": params,
                    "paramList": ", ".join(params),
                    "body": str(entry.get("body") or ""),
                })
        return descriptors

    def _import_descriptors(
        self, arena: SchemaArena, nodes: List[NodeRecord], sections: List[str]
    ) -> List[Dict[str, Any]]:
        descriptors: List[Dict[str, Any]] = []
        seen: set = set()

        for node in nodes:
            for entry in _as_entries(node.props.get("imports"), "name", "source"):
                if not entry.get("name") or not entry.get("source"):
                    continue
                # Declared bindings are referenced as written by effect and function bodies
                name = str(entry["name"])
                if not is_identifier(name):
                    logger.warning("Ignoring import with invalid binding name: %r", name)
                    continue
                if not self._first_wins("import", seen, name):
                    continue
                descriptors.append({
                    "name": name,
                    "source": str(entry["source"]),
                    "weight": _import_weight(name, entry.get("weight", 1.0)),
                })

        usage = self._section_usage(arena, sections)
        for node in nodes:
            if not node.is_custom_component:
                continue
            name = component_name(node.type)
            if name in seen:
                continue
            seen.add(name)
            descriptors.append({
                "name": name,
                "source": f"./{name}",
                "weight": round(usage.get(node.type, 0) / max(len(sections), 1), 4),
            })

        for descriptor in descriptors:
            descriptor["kebabName"] = to_kebab_case(descriptor["name"])
        return descriptors

    @staticmethod
    def _section_usage(arena: SchemaArena, sections: List[str]) -> Dict[str, int]:
        """Count, per custom component type, the sections that use it."""
        usage: Dict[str, int] = {}
        for section in sections:
            types = {node.type for node in arena.walk(section) if node.is_custom_component}
            for node_type in types:
                usage[node_type] = usage.get(node_type, 0) + 1
        return usage
