"""
Post-processing passes for generated code.

Three independent passes, each idempotent and best-effort: a fragment the
optimizer cannot confidently transform is left exactly as it was.

* unused-import removal for ES modules
* deduplication of CSS rules and repeated static JSX blocks
* rewriting of component imports into eager and lazy groups by usage weight
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ...logging_config import get_logger
from .config import GeneratorConfig
from .generator import Framework, GeneratedCode
from .naming import to_pascal_case

logger = get_logger(__name__)

EAGER_THRESHOLD = 0.8


@dataclass(frozen=True)
class ImportDescriptor:
    """A component import with its usage weight in [0, 1]."""

    name: str
    source: str
    weight: float = 1.0

    def __post_init__(self):
        if not 0.0 <= self.weight <= 1.0:
            raise ValueError(f"Import weight for '{self.name}' must be within [0, 1]: {self.weight}")

    def is_eager(self, threshold: float = EAGER_THRESHOLD) -> bool:
        return self.weight > threshold


# ES import statements

_IMPORT_RE = re.compile(
    r"^(?P<indent>[ \t]*)import\s+(?P<clause>[^'\";]+?)\s+from\s+"
    r"(?P<quote>['\"])(?P<source>[^'\"]+)(?P=quote)(?P<semi>;?)[ \t]*(?:\n|$)",
    re.MULTILINE,
)
_IDENTIFIER = r"[A-Za-z_$][\w$]*"
_IDENTIFIER_RE = re.compile(_IDENTIFIER)
_DEFAULT_RE = re.compile(rf"({_IDENTIFIER})")
_NAMESPACE_RE = re.compile(rf"\*\s+as\s+({_IDENTIFIER})")
_NAMED_ITEM_RE = re.compile(rf"(?:(type)\s+)?({_IDENTIFIER})(?:\s+as\s+({_IDENTIFIER}))?")
_KEBAB_TAG_RE = re.compile(r"</?([a-z][a-z0-9]*(?:-[a-z0-9]+)+)")


@dataclass
class _ImportStatement:
    start: int
    end: int
    indent: str
    quote: str
    source: str
    semicolon: bool
    type_only: bool
    default: Optional[str]
    namespace: Optional[str]
    # (imported name, local name, type-only)
    named: List[Tuple[str, str, bool]]
    braces: bool

    def locals(self) -> List[str]:
        names = [name for name in (self.default, self.namespace) if name]
        names.extend(local for _, local, _ in self.named)
        return names


def _parse_clause(clause: str):
    """Split an import clause into default, namespace and named bindings, or None."""
    clause = " ".join(clause.split())
    type_only = False
    if clause.startswith("type "):
        type_only, clause = True, clause[5:]

    default = namespace = None
    named: List[Tuple[str, str, bool]] = []
    braces = False

    head, brace, rest = clause.partition("{")
    head = head.strip().rstrip(",").strip()
    if brace:
        body, closing, tail = rest.partition("}")
        if not closing or tail.strip():
            return None
        braces = True
        for item in filter(None, (part.strip() for part in body.split(","))):
            match = _NAMED_ITEM_RE.fullmatch(item)
            if not match:
                return None
            named.append((match.group(2), match.group(3) or match.group(2), bool(match.group(1))))

    for part in filter(None, (part.strip() for part in head.split(","))):
        namespace_match = _NAMESPACE_RE.fullmatch(part)
        if namespace_match and namespace is None:
            namespace = namespace_match.group(1)
        elif _DEFAULT_RE.fullmatch(part) and default is None:
            default = part
        else:
            return None

    if not (default or namespace or braces):
        return None
    return type_only, default, namespace, named, braces


def parse_imports(code: str) -> List[_ImportStatement]:
    """Parse ``import … from '…'`` statements; unparseable ones are skipped."""
    statements = []
    for match in _IMPORT_RE.finditer(code):
        parsed = _parse_clause(match.group("clause"))
        if parsed is None:
            logger.debug("Leaving unrecognized import unchanged: %s", match.group(0).strip())
            continue
        type_only, default, namespace, named, braces = parsed
        statements.append(
            _ImportStatement(
                start=match.start(),
                end=match.end(),
                indent=match.group("indent"),
                quote=match.group("quote"),
                source=match.group("source"),
                semicolon=bool(match.group("semi")),
                type_only=type_only,
                default=default,
                namespace=namespace,
                named=named,
                braces=braces,
            )
        )
    return statements


def referenced_names(code: str) -> Set[str]:
    """Identifiers used in code; kebab-case tags also count as their PascalCase names."""
    names = set(_IDENTIFIER_RE.findall(code))
    for tag in _KEBAB_TAG_RE.findall(code):
        names.add(to_pascal_case(tag))
        # Prefixed selectors such as app-user-card
        names.add(to_pascal_case(tag.split("-", 1)[1]))
    return names


def _format_import(statement: _ImportStatement, default, namespace, named) -> str:
    parts = []
    if default:
        parts.append(default)
    if namespace:
        parts.append(f"* as {namespace}")
    if named:
        items = []
        for imported, local, type_only in named:
            item = imported if imported == local else f"{imported} as {local}"
            items.append(f"type {item}" if type_only else item)
        parts.append("{ " + ", ".join(items) + " }")
    prefix = "type " if statement.type_only else ""
    semicolon = ";" if statement.semicolon else ""
    q = statement.quote
    return f"{statement.indent}import {prefix}{', '.join(parts)} from {q}{statement.source}{q}{semicolon}\n"


# CSS

_RULE_RE = re.compile(r"\s*([^{}]+?)\s*\{([^{}]*)\}\s*")


@dataclass
class _Rule:
    selector: str
    declarations: List[Tuple[str, str]]

    def properties(self) -> Set[str]:
        return {prop for prop, _ in self.declarations}


def _split_declarations(block: str) -> Optional[List[Tuple[str, str]]]:
    """Split a declaration block on semicolons outside quotes and parentheses."""
    parts, current, depth, quote = [], [], 0, None
    for char in block:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in "'\"":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == ";" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if quote or depth:
        return None
    parts.append("".join(current))

    declarations = []
    for part in parts:
        if not part.strip():
            continue
        prop, colon, value = part.partition(":")
        if not colon or not prop.strip() or not value.strip():
            return None
        declarations.append((prop.strip(), " ".join(value.split())))
    return declarations


def parse_stylesheet(css: str) -> Optional[List[_Rule]]:
    """Parse flat rule lists; None for anything with comments, at-rules or nesting."""
    if "/*" in css or "@" in css:
        return None
    rules, position = [], 0
    for match in _RULE_RE.finditer(css):
        if match.start() != position:
            return None
        declarations = _split_declarations(match.group(2))
        if declarations is None:
            return None
        selector = ", ".join(" ".join(part.split()) for part in match.group(1).split(","))
        rules.append(_Rule(selector, declarations))
        position = match.end()
    if css[position:].strip():
        return None
    return rules


def serialize_stylesheet(rules: Sequence[_Rule], indent: str = "  ") -> str:
    blocks = []
    for rule in rules:
        lines = [f"{rule.selector} {{"]
        lines.extend(f"{indent}{prop}: {value};" for prop, value in rule.declarations)
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n" if blocks else ""


def _dedupe_declarations(declarations: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """Drop exact duplicates, keeping the last occurrence so the cascade is unchanged."""
    seen: Set[Tuple[str, str]] = set()
    kept = []
    for declaration in reversed(declarations):
        if declaration in seen:
            continue
        seen.add(declaration)
        kept.append(declaration)
    return list(reversed(kept))


def _can_hoist(rules: Sequence[_Rule], target: int, source: int, properties: Set[str]) -> bool:
    """Moving ``rules[source]`` up to ``target`` must not jump over a rule touching its properties."""
    return all(not (rules[index].properties() & properties) for index in range(target + 1, source))


# JSX fragments

_OPEN_TAG_RE = re.compile(r"^(?P<indent>[ \t]*)<(?P<tag>[A-Za-z][\w.-]*)(?=[\s>])")
_STYLE_EXPRESSION_RE = re.compile(r"\{styles(?:\.[A-Za-z_$][\w$]*|\['[^'\]]*'\])\}")
_SHARED_BLOCK_RE = re.compile(r"\bSharedBlock(\d+)\b")
_COMPONENT_START_RE = re.compile(r"^export default ", re.MULTILINE)


class CodeOptimizer:
    """Applies the optimization passes to generated artifacts."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    # Import optimization

    def remove_unused_imports(self, code: str, preserve: Optional[Iterable[str]] = None) -> str:
        """
        Drop import bindings that the rest of the code never references.

        Statements whose bindings are all unused are removed; partially used
        named imports keep only the used names. Side-effect imports and
        statements that cannot be parsed are kept as written.
        """
        preserve = set(self.config.preserve_imports if preserve is None else preserve)
        statements = parse_imports(code)
        if not statements:
            return code

        body = code
        for statement in reversed(statements):
            body = body[: statement.start] + "\n" + body[statement.end :]
        used = referenced_names(body) | preserve

        result = code
        removed = []
        for statement in reversed(statements):
            if all(name in used for name in statement.locals()):
                continue

            default = statement.default if statement.default in used else None
            namespace = statement.namespace if statement.namespace in used else None
            named = [item for item in statement.named if item[1] in used]
            removed.extend(name for name in statement.locals() if name not in used)

            replacement = (
                _format_import(statement, default, namespace, named)
                if default or namespace or named
                else ""
            )
            result = result[: statement.start] + replacement + result[statement.end :]

        if removed:
            logger.debug("Removed unused imports: %s", ", ".join(sorted(removed)))
        return result

    # Deduplication

    def deduplicate_styles(self, css: str) -> str:
        """
        Merge duplicate declarations and rules in a flat stylesheet.

        Exact duplicate declarations are dropped, rules with the same selector
        are merged and rules with identical declaration blocks are grouped
        under one selector list, only where the move cannot change the
        cascade. Runs to a fixpoint.
        """
        rules = parse_stylesheet(css)
        if rules is None:
            logger.debug("Stylesheet not in a flat form, leaving it unchanged")
            return css

        changed = False
        while True:
            step = self._merge_styles_once(rules)
            if not step:
                break
            changed = True

        return serialize_stylesheet(rules, " " * self.config.indent_size) if changed else css

    def _merge_styles_once(self, rules: List[_Rule]) -> bool:
        for rule in rules:
            deduped = _dedupe_declarations(rule.declarations)
            if deduped != rule.declarations:
                rule.declarations = deduped
                return True

        for first in range(len(rules)):
            for second in range(first + 1, len(rules)):
                earlier, later = rules[first], rules[second]
                if not _can_hoist(rules, first, second, later.properties()):
                    continue
                if earlier.selector == later.selector:
                    earlier.declarations = _dedupe_declarations(
                        earlier.declarations + later.declarations
                    )
                    del rules[second]
                    return True
                if earlier.declarations and earlier.declarations == later.declarations:
                    earlier.selector = f"{earlier.selector}, {later.selector}"
                    del rules[second]
                    return True
        return False

    def deduplicate_fragments(self, code: str, min_lines: Optional[int] = None) -> str:
        """
        Factor repeated static JSX blocks into shared components.

        A block is an element spanning at least ``min_lines`` lines whose only
        expressions are CSS-module class lookups. Each repeated block becomes
        ``const SharedBlockN = () => (...)`` declared before the default
        export, iterated until no repeats remain.
        """
        min_lines = self.config.dedupe_min_lines if min_lines is None else min_lines
        if not _COMPONENT_START_RE.search(code):
            return code

        while True:
            factored = self._factor_once(code, max(int(min_lines), 2))
            if factored is None:
                return code
            code = factored

    def _factor_once(self, code: str, min_lines: int) -> Optional[str]:
        lines = code.split("\n")
        groups: Dict[Tuple[str, ...], List[Tuple[int, int, str]]] = {}

        for start, end, indent in self._static_blocks(lines, min_lines):
            key = tuple(line[len(indent) :] for line in lines[start : end + 1])
            groups.setdefault(key, []).append((start, end, indent))

        repeated = [(key, spans) for key, spans in groups.items() if len(spans) > 1]
        if not repeated:
            return None

        # Longest block first, then earliest occurrence
        key, spans = max(repeated, key=lambda entry: (len(entry[0]), -entry[1][0][0]))
        taken = [int(number) for number in _SHARED_BLOCK_RE.findall(code)]
        name = f"SharedBlock{max(taken, default=0) + 1}"

        for start, end, indent in sorted(spans, reverse=True):
            lines[start : end + 1] = [f"{indent}<{name} />"]

        text = "\n".join(lines)
        unit = " " * self.config.indent_size
        declaration = "\n".join(
            [f"const {name} = () => ("]
            + [f"{unit}{line}" if line.strip() else line for line in key]
            + [");", "", ""]
        )
        insert_at = _COMPONENT_START_RE.search(text).start()
        logger.debug("Factored %d copies of a %d-line block into %s", len(spans), len(key), name)
        return text[:insert_at] + declaration + text[insert_at:]

    @staticmethod
    def _static_blocks(lines: List[str], min_lines: int):
        """Yield (start, end, indent) for multi-line elements free of dynamic expressions."""
        for start, line in enumerate(lines):
            match = _OPEN_TAG_RE.match(line)
            if not match or line.rstrip().endswith("/>"):
                continue
            indent, tag = match.group("indent"), match.group("tag")
            if f"</{tag}>" in line:
                continue

            closing = f"{indent}</{tag}>"
            end = None
            for index in range(start + 1, len(lines)):
                candidate = lines[index]
                if candidate.rstrip() == closing:
                    end = index
                    break
                if candidate.strip() and not candidate.startswith(indent + " "):
                    break
            if end is None or end - start + 1 < min_lines:
                continue

            block = "\n".join(lines[start : end + 1])
            if re.search(r"[{}]", _STYLE_EXPRESSION_RE.sub("", block)):
                continue
            yield start, end, indent

    # Import strategy

    def build_import_block(
        self,
        descriptors: Iterable[ImportDescriptor],
        framework: Framework,
        indent: str = "",
    ) -> str:
        """
        Emit eager imports and lazy wrappers ordered by descending weight.

        The lazy-loading primitive, when one is needed, is imported once at
        the top of the block.
        """
        threshold = self.config.eager_threshold
        ordered = sorted(descriptors, key=lambda descriptor: -descriptor.weight)
        lines = []

        if any(not descriptor.is_eager(threshold) for descriptor in ordered):
            primitive = _LAZY_PRIMITIVES.get(framework)
            if primitive:
                lines.append(primitive)

        for descriptor in ordered:
            if descriptor.is_eager(threshold):
                lines.append(_eager_import(descriptor, framework))
            else:
                lines.append(_lazy_import(descriptor, framework))
        return "".join(f"{indent}{line}\n" for line in lines)

    def rewrite_import_strategy(
        self, code: str, weights: Mapping[str, ImportDescriptor], framework: Framework
    ) -> str:
        """
        Rewrite component imports found in code into eager and lazy groups.

        ``weights`` maps binding names to descriptors. Only plain component
        imports of those names, earlier output of this pass and the lazy
        primitive import are rewritten; everything else stays in place.
        """
        found: Dict[str, ImportDescriptor] = {}
        spans: List[Tuple[int, int, str]] = []

        for statement in parse_imports(code):
            name = _component_binding(statement, framework)
            if name in weights and statement.source == weights[name].source:
                found.setdefault(name, weights[name])
                spans.append((statement.start, statement.end, statement.indent))

        primitive = _LAZY_PRIMITIVES.get(framework)
        for match in _LAZY_LINE_RE.finditer(code):
            name = match.group("name")
            source = match.group("source") or match.group("source2") or match.group("source3")
            if name in weights and source == weights[name].source:
                found.setdefault(name, weights[name])
                spans.append((match.start(), match.end(), match.group("indent")))
        if primitive:
            pattern = re.compile(rf"^(?P<indent>[ \t]*){re.escape(primitive)}[ \t]*(?:\n|$)", re.MULTILINE)
            spans.extend((m.start(), m.end(), m.group("indent")) for m in pattern.finditer(code))

        if not found:
            return code

        spans.sort()
        first_start, _, indent = spans[0]
        block = self.build_import_block(found.values(), framework, indent)

        result = code
        for start, end, _ in reversed(spans):
            result = result[:start] + result[end:]
        return result[:first_start] + block + result[first_start:]

    # Artifacts

    def optimize(
        self,
        generated: GeneratedCode,
        imports: Optional[Iterable[ImportDescriptor]] = None,
        lazy_imports: bool = False,
    ) -> GeneratedCode:
        """
        Apply the passes that fit each artifact's file type.

        Filenames are unchanged; only contents are rewritten.
        """
        contents = {}
        warnings = []
        weights = {descriptor.name: descriptor for descriptor in imports or ()}

        for kind, artifact in generated.files.items():
            extension = artifact.filename.rsplit(".", 1)[-1].lower()
            content = artifact.content

            if kind == "styles" and extension == "css":
                content = self.deduplicate_styles(content)
            elif kind == "main":
                content = self.remove_unused_imports(content)
                if lazy_imports and weights:
                    if generated.framework is Framework.ANGULAR:
                        warnings.append(
                            "Lazy imports are not applied to Angular standalone imports"
                        )
                    else:
                        content = self.rewrite_import_strategy(content, weights, generated.framework)
                if extension in ("jsx", "tsx"):
                    content = self.deduplicate_fragments(content)
            contents[kind] = content

        optimized = generated.replace_contents(contents)
        optimized.warnings.extend(w for w in warnings if w not in optimized.warnings)
        optimized.metadata["optimized"] = True
        return optimized


_LAZY_PRIMITIVES = {
    Framework.REACT: "import { lazy } from 'react';",
    Framework.VUE: "import { defineAsyncComponent } from 'vue';",
}

_LAZY_LINE_RE = re.compile(
    rf"^(?P<indent>[ \t]*)const (?P<name>{_IDENTIFIER}) = "
    r"(?:lazy\(\(\) => import\('(?P<source>[^']+)'\)\)"
    r"|defineAsyncComponent\(\(\) => import\('(?P<source2>[^']+)'\)\)"
    r"|\(\) => import\('(?P<source3>[^']+)'\)\.then\(\(module\) => module\.[\w$]+\));"
    r"[ \t]*(?:\n|$)",
    re.MULTILINE,
)


def _eager_import(descriptor: ImportDescriptor, framework: Framework) -> str:
    if framework is Framework.ANGULAR:
        return f"import {{ {descriptor.name} }} from '{descriptor.source}';"
    return f"import {descriptor.name} from '{descriptor.source}';"


def _lazy_import(descriptor: ImportDescriptor, framework: Framework) -> str:
    loader = f"() => import('{descriptor.source}')"
    if framework is Framework.REACT:
        return f"const {descriptor.name} = lazy({loader});"
    if framework is Framework.VUE:
        return f"const {descriptor.name} = defineAsyncComponent({loader});"
    member = descriptor.name if framework is Framework.ANGULAR else "default"
    return f"const {descriptor.name} = {loader}.then((module) => module.{member});"


def _component_binding(statement: _ImportStatement, framework: Framework) -> Optional[str]:
    """The single binding of a plain component import, else None."""
    if statement.type_only or statement.namespace:
        return None
    if framework is Framework.ANGULAR:
        if statement.default is None and len(statement.named) == 1:
            imported, local, type_only = statement.named[0]
            return local if imported == local and not type_only else None
        return None
    if statement.default and not statement.braces:
        return statement.default
    return None
