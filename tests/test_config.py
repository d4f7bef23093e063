"""Tests for generator configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ui_codegen.codegen import GeneratorDispatcher, create_registry
from ui_codegen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)


def test_framework_defaults() -> None:
    assert load_config("react").preserve_imports == ["React"]
    assert load_config("angular").custom["selector_prefix"] == "app"
    assert load_config("html").custom["lang"] == "en"
    assert load_config().indent_size == 2


def test_unknown_keys_land_in_custom() -> None:
    config = load_config("vue", custom_config={"theme": "dark", "indent_size": 4})

    assert config.indent_size == 4
    assert config.custom["theme"] == "dark"


def test_custom_overrides_merge_with_defaults() -> None:
    config = load_config("angular", custom_config={"custom": {"extra": True}})

    assert config.custom == {"selector_prefix": "app", "extra": True}


def test_defaults_are_not_shared_between_calls() -> None:
    first = load_config("angular")
    first.custom["selector_prefix"] = "changed"

    assert load_config("angular").custom["selector_prefix"] == "app"


def test_config_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "codegen.json"
    path.write_text(json.dumps({"indent_size": 4, "class_prefix": "ui"}), encoding="utf-8")

    config = load_config("react", config_file=path)

    assert config.indent_size == 4
    assert config.class_prefix == "ui"


@pytest.mark.parametrize(
    "name, content",
    [("codegen.yaml", "indent_size: 4"), ("codegen.json", "{not json"), ("codegen.json", "[1, 2]")],
)
def test_bad_config_files_raise(tmp_path: Path, name: str, content: str) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config("react", config_file=path)


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config("react", config_file=tmp_path / "missing.json")


def test_validate_config_reports_warnings() -> None:
    manager = ConfigManager()
    config = GeneratorConfig(indent_size=12, eager_threshold=1.5, custom={"selector_prefix": "App1"})

    warnings = manager.validate_config(config, "angular")

    assert len(warnings) == 3
    assert manager.validate_config(GeneratorConfig(), "react") == []


def test_save_config_round_trips(tmp_path: Path) -> None:
    manager = ConfigManager()
    path = tmp_path / "saved.json"
    manager.save_config(GeneratorConfig(indent_size=4), path)

    assert manager.get_config(config_file=path).indent_size == 4


def test_indent_size_shapes_markup(simple_schema: dict) -> None:
    dispatcher = GeneratorDispatcher(create_registry(config={"indent_size": 4}))

    content = dispatcher.generate(simple_schema).main.content

    assert "\n        <span>Hi</span>\n" in content


def test_class_prefix_shapes_class_names() -> None:
    dispatcher = GeneratorDispatcher(create_registry(config={"class_prefix": "ui"}))
    schema = {"id": "box", "type": "div", "style": {"color": "red"}}

    generated = dispatcher.generate(schema)

    assert generated.styles.content.startswith(".ui-div-box {")
    assert 'className="ui-div-box"' in generated.main.content


def test_config_warnings_are_attached_to_output(simple_schema: dict) -> None:
    dispatcher = GeneratorDispatcher(create_registry(config={"dedupe_min_lines": 1}))

    warnings = dispatcher.generate(simple_schema).warnings

    assert any("dedupe_min_lines" in warning for warning in warnings)
