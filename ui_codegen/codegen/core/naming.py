"""
Naming utilities for generated UI code.

Handles identifier sanitization, case conversions and keyword conflicts
for component names, CSS class names, state setters and file names.
"""

import re
from typing import Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_card
    CAMEL_CASE = "camel"  # userCard
    PASCAL_CASE = "pascal"  # UserCard
    KEBAB_CASE = "kebab"  # user-card


_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def split_words(name: str) -> list[str]:
    """Split an identifier in any case style into lowercase words."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", str(name))
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return [part.lower() for part in re.split(r"[^a-zA-Z0-9]+", name) if part]


def to_snake_case(name: str) -> str:
    return "_".join(split_words(name))


def to_kebab_case(name: str) -> str:
    return "-".join(split_words(name))


def to_pascal_case(name: str) -> str:
    return "".join(word.capitalize() for word in split_words(name))


def to_camel_case(name: str) -> str:
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


_CONVERTERS = {
    NamingCase.SNAKE_CASE: to_snake_case,
    NamingCase.CAMEL_CASE: to_camel_case,
    NamingCase.PASCAL_CASE: to_pascal_case,
    NamingCase.KEBAB_CASE: to_kebab_case,
}


JS_RESERVED_WORDS = {
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "let",
    "new", "null", "return", "super", "switch", "this", "throw", "true",
    "try", "typeof", "var", "void", "while", "with", "yield", "await",
    "implements", "interface", "package", "private", "protected", "public",
    "static",
}

# Globals that generated components must not shadow
JS_BUILTIN_NAMES = {
    "array", "boolean", "date", "document", "error", "fragment", "json",
    "map", "math", "number", "object", "promise", "react", "set", "string",
    "symbol", "window",
}


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(self, reserved_words: Set[str] = None, builtin_names: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_names: Set of global names that must not be shadowed
        """
        self.reserved_words = reserved_words or set()
        self.builtin_names = builtin_names or set()
        self._used_names: Set[str] = set()

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.CAMEL_CASE,
        suffix_on_conflict: str = "_",
        unique: bool = False,
        fallback: str = "value",
    ) -> str:
        """
        Sanitize a name for safe use in generated code.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved word conflicts
            unique: Track the name and suffix a counter on repeats
            fallback: Name used when nothing usable is left after cleanup

        Returns:
            Sanitized name safe for use
        """
        converted = _CONVERTERS[target_case](name) or fallback

        if converted[0].isdigit():
            joiner = "-" if target_case == NamingCase.KEBAB_CASE else "_"
            converted = f"{fallback}{joiner}{converted}"

        if converted.lower() in self.reserved_words or converted.lower() in self.builtin_names:
            converted = f"{converted}{suffix_on_conflict}"

        if unique:
            converted = self._make_unique(converted)
            self._used_names.add(converted)

        return converted

    def _make_unique(self, name: str) -> str:
        candidate = name
        counter = 2
        while candidate in self._used_names:
            candidate = f"{name}{counter}"
            counter += 1
        return candidate


def create_js_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for JavaScript/TypeScript output."""
    return NameSanitizer(JS_RESERVED_WORDS, JS_BUILTIN_NAMES)


def is_identifier(name: str) -> bool:
    """True when a name can be used as a JavaScript binding as written."""
    return bool(_JS_IDENTIFIER.match(name)) and name not in JS_RESERVED_WORDS


def component_name(name: str, default: str = "GeneratedComponent") -> str:
    """PascalCase component identifier, never empty and never starting with a digit."""
    converted = to_pascal_case(name)
    if not converted:
        return default
    if converted[0].isdigit():
        return f"Component{converted}"
    return converted


def setter_name(state_name: str) -> str:
    """React-style setter for a state variable: ``count`` -> ``setCount``."""
    return f"set{state_name[:1].upper()}{state_name[1:]}"


def css_class_name(node_type: str, node_id: str, prefix: Optional[str] = None) -> str:
    """Stable CSS class name derived from a node's type and id."""
    parts = [prefix] if prefix else []
    parts.extend([to_kebab_case(node_type) or "node", to_kebab_case(node_id) or "x"])
    return "-".join(parts)
