"""
Built-in template helpers.

Helpers receive already-resolved arguments and return text. They must be
pure; failures are caught and logged by the template engine.
"""

import json
from typing import Any, Callable, Dict, Mapping, Sequence

from .naming import to_camel_case, to_kebab_case, to_pascal_case, to_snake_case


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def join(items: Sequence[Any], separator: str = ", ") -> str:
    """Join a sequence with a separator; a missing sequence joins to nothing."""
    if items is None:
        return ""
    if isinstance(items, str):
        return items
    return _text(separator).join(_text(item) for item in items)


def indent(value: Any, spaces: int = 2) -> str:
    """Indent all non-blank lines in a string."""
    padding = " " * int(spaces)
    lines = _text(value).split("\n")
    return "\n".join(padding + line if line.strip() else line for line in lines)


def comment(value: Any, style: str = "//") -> str:
    """Add comment markers to each line."""
    lines = _text(value).split("\n")
    return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)


def to_json(value: Any) -> str:
    """JSON/JavaScript literal for a value."""
    if isinstance(value, Mapping):
        value = dict(value)
    return json.dumps(value, ensure_ascii=False)


def quote(value: Any, mark: str = "'") -> str:
    """Wrap text in quotes, escaping backslashes and the quote mark."""
    escaped = _text(value).replace("\\", "\\\\").replace(mark, f"\\{mark}")
    return f"{mark}{escaped}{mark}"


def default(value: Any, fallback: Any = "") -> Any:
    """Return ``fallback`` when the value is missing or empty."""
    return fallback if value in (None, "") else value


DEFAULT_HELPERS: Dict[str, Callable[..., Any]] = {
    "join": join,
    "indent": indent,
    "comment": comment,
    "json": to_json,
    "quote": quote,
    "default": default,
    "pascalCase": lambda value: to_pascal_case(_text(value)),
    "camelCase": lambda value: to_camel_case(_text(value)),
    "kebabCase": lambda value: to_kebab_case(_text(value)),
    "snakeCase": lambda value: to_snake_case(_text(value)),
    "upper": lambda value: _text(value).upper(),
    "lower": lambda value: _text(value).lower(),
}
