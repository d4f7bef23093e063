"""Registry behaviour tests."""

from __future__ import annotations

import pytest

from ui_codegen.codegen import (
    Framework,
    GeneratorDispatcher,
    GeneratorRegistry,
    RegistryError,
    UnknownFrameworkError,
    create_registry,
)
from ui_codegen.codegen.core.store import TemplateStoreFrozenError
from ui_codegen.codegen.frameworks.vue import VueGenerator


def test_create_registry_registers_every_framework_in_order() -> None:
    registry = create_registry()

    assert registry.list_frameworks() == ["react", "vue", "angular", "html"]
    assert registry.active is None


def test_aliases_resolve_to_frameworks() -> None:
    registry = create_registry()

    assert registry.is_supported("jsx")
    assert registry.is_supported(Framework.ANGULAR)
    assert not registry.is_supported("svelte")
    assert registry.get_generator("vuejs").framework is Framework.VUE


def test_active_generator_can_be_set_once() -> None:
    registry = create_registry(active="vue")

    registry.set_active("vue")
    with pytest.raises(RegistryError, match="already set"):
        registry.set_active("react")
    assert registry.active is Framework.VUE


def test_active_generator_must_be_registered() -> None:
    registry = create_registry(frameworks=["react"])

    with pytest.raises(RegistryError):
        registry.set_active("vue")


def test_resolving_unregistered_framework_fails() -> None:
    registry = create_registry(frameworks=["react"])

    with pytest.raises(RegistryError, match="Available: react"):
        registry.resolve("angular")
    with pytest.raises(UnknownFrameworkError):
        registry.resolve("svelte")


def test_duplicate_registration_is_skipped() -> None:
    registry = create_registry(frameworks=["vue"])
    original = registry.get_generator("vue")

    registry.register(VueGenerator())

    assert registry.get_generator("vue") is original


def test_registration_closes_after_first_dispatch(simple_schema: dict) -> None:
    registry = create_registry(frameworks=["react"])
    GeneratorDispatcher(registry).generate(simple_schema)

    with pytest.raises(TemplateStoreFrozenError):
        registry.register(VueGenerator())


def test_non_generators_are_rejected() -> None:
    with pytest.raises(RegistryError):
        GeneratorRegistry().register(object())  # type: ignore[arg-type]


def test_framework_info() -> None:
    info = create_registry(active="angular").get_framework_info("angular")

    assert info["name"] == "angular"
    assert info["class"] == "AngularGenerator"
    assert info["main_file"] == "example.component.ts"
    assert info["active"] is True


def test_invalid_config_type_is_rejected() -> None:
    with pytest.raises(RegistryError):
        create_registry(config=42)  # type: ignore[arg-type]
