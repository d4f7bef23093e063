from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from ui_codegen.codegen import GeneratorDispatcher, create_registry
from ui_codegen.codegen.core.helpers import DEFAULT_HELPERS
from ui_codegen.codegen.core.store import TemplateStore
from ui_codegen.codegen.core.templates import TemplateEngine


@pytest.fixture
def simple_schema() -> dict[str, Any]:
    """A div wrapping a span with literal text."""
    return {
        "id": "1",
        "type": "div",
        "children": [{"id": "2", "type": "span", "content": "Hi"}],
    }


@pytest.fixture
def counter_schema() -> dict[str, Any]:
    """A button with state, a click handler and bound content."""
    return {
        "id": "counter",
        "type": "button",
        "props": {
            "state": {"count": 0},
            "functions": {"increment": "setCount(count + 1);"},
            "onClick": "increment",
        },
        "content": {"$bind": "count"},
    }


@pytest.fixture
def page_sections() -> list[dict[str, Any]]:
    """Two sections; Hero is used by both, Footer by one."""
    return [
        {"id": "a", "type": "section", "children": [{"id": "a1", "type": "Hero"}]},
        {
            "id": "b",
            "type": "section",
            "children": [{"id": "b1", "type": "Footer"}, {"id": "b2", "type": "Hero"}],
        },
    ]


@pytest.fixture
def dispatcher() -> GeneratorDispatcher:
    return GeneratorDispatcher(create_registry())


@pytest.fixture
def engine() -> TemplateEngine:
    """Engine over a store holding only the shared helpers."""
    store = TemplateStore()
    store.register_helpers(DEFAULT_HELPERS)
    return TemplateEngine(store)


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a JSON document under tmp_path and return its path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
