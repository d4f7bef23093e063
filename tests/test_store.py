"""Template store registration tests."""

from __future__ import annotations

import pytest

from ui_codegen.codegen.core.store import (
    ARTIFACT_KINDS,
    TemplateConfigurationError,
    TemplateNotFoundError,
    TemplateStore,
    TemplateStoreFrozenError,
)


def _templates() -> dict[str, str]:
    return {kind: f"<{kind}>" for kind in ARTIFACT_KINDS}


def test_register_templates_requires_every_artifact_kind() -> None:
    store = TemplateStore()
    templates = _templates()
    del templates["index"]

    with pytest.raises(TemplateConfigurationError, match="index"):
        store.register_templates("react", templates)


def test_register_templates_rejects_unexpected_kinds() -> None:
    store = TemplateStore()
    with pytest.raises(TemplateConfigurationError, match="extra"):
        store.register_templates("react", {**_templates(), "extra": ""})


def test_templates_are_keyed_by_generator_and_kind() -> None:
    store = TemplateStore()
    store.register_templates("react", _templates())

    assert store.get_template("react", "page") == "<page>"
    assert store.has_template("react", "styles")
    assert store.generators() == ("react",)
    with pytest.raises(TemplateNotFoundError):
        store.get_template("vue", "page")


def test_frozen_store_rejects_registration() -> None:
    store = TemplateStore()
    store.register_templates("react", _templates())
    store.freeze()
    store.freeze()

    assert store.frozen
    with pytest.raises(TemplateStoreFrozenError):
        store.register_template("react", "component", "")
    with pytest.raises(TemplateStoreFrozenError):
        store.register_helper("upper", str.upper)
    assert store.get_template("react", "component") == "<component>"


def test_helper_registration_is_validated() -> None:
    store = TemplateStore()
    with pytest.raises(TemplateConfigurationError):
        store.register_helper("not-an-identifier", str.upper)
    with pytest.raises(TemplateConfigurationError):
        store.register_helper("value", "not callable")


def test_helpers_for_returns_read_only_view() -> None:
    store = TemplateStore()
    store.register_helper("upper", str.upper)
    helpers = store.helpers_for("react")

    assert helpers["upper"]("a") == "A"
    with pytest.raises(TypeError):
        helpers["lower"] = str.lower  # type: ignore[index]
