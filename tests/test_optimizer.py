"""Optimizer pass tests."""

from __future__ import annotations

import pytest

from ui_codegen.codegen import GeneratorDispatcher
from ui_codegen.codegen.core.config import GeneratorConfig
from ui_codegen.codegen.core.generator import Framework
from ui_codegen.codegen.core.optimizer import CodeOptimizer, ImportDescriptor, parse_stylesheet
from ui_codegen.codegen.dispatcher import import_descriptors


@pytest.fixture
def optimizer() -> CodeOptimizer:
    return CodeOptimizer(GeneratorConfig())


# Unused imports


def test_unused_named_import_is_dropped(optimizer: CodeOptimizer) -> None:
    code = "import { A, B } from './mod';\n\nconsole.log(A);\n"

    assert optimizer.remove_unused_imports(code) == "import { A } from './mod';\n\nconsole.log(A);\n"


def test_fully_unused_import_is_removed(optimizer: CodeOptimizer) -> None:
    code = "import Foo from './Foo';\nconst x = 1;\n"

    assert optimizer.remove_unused_imports(code) == "const x = 1;\n"


def test_side_effect_and_preserved_imports_are_kept(optimizer: CodeOptimizer) -> None:
    code = "import React from 'react';\nimport './Card.css';\nexport default 1;\n"

    assert optimizer.remove_unused_imports(code) == code


def test_components_used_as_kebab_tags_count_as_referenced(optimizer: CodeOptimizer) -> None:
    code = "import UserCard from './UserCard';\nconst template = `<user-card></user-card>`;\n"

    assert optimizer.remove_unused_imports(code) == code


def test_aliased_and_default_bindings(optimizer: CodeOptimizer) -> None:
    code = "import Main, { helper as h, other } from './lib';\nMain(h);\n"

    assert optimizer.remove_unused_imports(code) == "import Main, { helper as h } from './lib';\nMain(h);\n"


# Import strategy


def test_import_block_orders_eager_before_lazy(optimizer: CodeOptimizer) -> None:
    block = optimizer.build_import_block(
        [ImportDescriptor("Y", "./Y", 0.5), ImportDescriptor("X", "./X", 0.9)], Framework.REACT
    )

    assert block == (
        "import { lazy } from 'react';\n"
        "import X from './X';\n"
        "const Y = lazy(() => import('./Y'));\n"
    )


def test_import_block_without_lazy_entries_has_no_primitive(optimizer: CodeOptimizer) -> None:
    block = optimizer.build_import_block([ImportDescriptor("X", "./X", 0.81)], Framework.VUE)

    assert block == "import X from './X';\n"


def test_threshold_weight_is_lazy(optimizer: CodeOptimizer) -> None:
    block = optimizer.build_import_block([ImportDescriptor("X", "./X", 0.8)], Framework.VUE)

    assert block == (
        "import { defineAsyncComponent } from 'vue';\n"
        "const X = defineAsyncComponent(() => import('./X'));\n"
    )


def test_html_lazy_imports_use_dynamic_import(optimizer: CodeOptimizer) -> None:
    block = optimizer.build_import_block([ImportDescriptor("X", "./X", 0.1)], Framework.HTML)

    assert block == "const X = () => import('./X').then((module) => module.default);\n"


def test_rewrite_import_strategy_is_stable(optimizer: CodeOptimizer) -> None:
    code = (
        "import X from './X';\n"
        "import Y from './Y';\n"
        "\n"
        "export default function Page() {\n"
        "  return <div><X /><Y /></div>;\n"
        "}\n"
    )
    weights = {"X": ImportDescriptor("X", "./X", 0.9), "Y": ImportDescriptor("Y", "./Y", 0.5)}

    once = optimizer.rewrite_import_strategy(code, weights, Framework.REACT)

    assert once.startswith(
        "import { lazy } from 'react';\nimport X from './X';\nconst Y = lazy(() => import('./Y'));\n\n"
    )
    assert optimizer.rewrite_import_strategy(once, weights, Framework.REACT) == once


def test_import_descriptor_validates_weight() -> None:
    with pytest.raises(ValueError):
        ImportDescriptor("X", "./X", 1.5)


# Styles


def test_duplicate_declarations_and_rules_are_merged(optimizer: CodeOptimizer) -> None:
    css = ".a {\n  color: red;\n  color: red;\n}\n\n.b {\n  color: red;\n}\n"

    merged = optimizer.deduplicate_styles(css)

    assert merged == ".a, .b {\n  color: red;\n}\n"
    assert optimizer.deduplicate_styles(merged) == merged


def test_same_selector_rules_are_combined(optimizer: CodeOptimizer) -> None:
    css = ".a {\n  color: red;\n}\n\n.a {\n  margin: 0;\n}\n"

    assert optimizer.deduplicate_styles(css) == ".a {\n  color: red;\n  margin: 0;\n}\n"


def test_rules_do_not_move_across_conflicting_rules(optimizer: CodeOptimizer) -> None:
    css = ".a {\n  color: red;\n}\n\n.b {\n  color: blue;\n}\n\n.c {\n  color: red;\n}\n"

    assert optimizer.deduplicate_styles(css) == css


def test_unparseable_stylesheets_are_left_alone(optimizer: CodeOptimizer) -> None:
    css = "@media (max-width: 600px) {\n  .a { color: red; }\n}\n"

    assert parse_stylesheet(css) is None
    assert optimizer.deduplicate_styles(css) == css


# Fragments

REPEATED_JSX = """\
export default function List() {
  return (
    <div>
      <section className={styles.card}>
        <h2>Title</h2>
        <p>Body</p>
      </section>
      <section className={styles.card}>
        <h2>Title</h2>
        <p>Body</p>
      </section>
    </div>
  );
}
"""


def test_repeated_static_blocks_are_factored(optimizer: CodeOptimizer) -> None:
    result = optimizer.deduplicate_fragments(REPEATED_JSX)

    assert result.count("<SharedBlock1 />") == 2
    assert result.startswith(
        "const SharedBlock1 = () => (\n"
        "  <section className={styles.card}>\n"
        "    <h2>Title</h2>\n"
        "    <p>Body</p>\n"
        "  </section>\n"
        ");\n\n"
        "export default function List() {"
    )
    assert optimizer.deduplicate_fragments(result) == result


def test_blocks_with_dynamic_expressions_are_not_factored(optimizer: CodeOptimizer) -> None:
    code = REPEATED_JSX.replace("<p>Body</p>", "<p>{body}</p>")

    assert optimizer.deduplicate_fragments(code) == code


# Whole artifacts


def test_optimize_is_idempotent(dispatcher: GeneratorDispatcher, page_sections: list[dict]) -> None:
    generated = dispatcher.generate_page(
        page_sections, {"framework": "react", "optimize": True, "lazyImports": True}
    )
    descriptors = import_descriptors({"imports": generated.metadata["imports"]})
    optimizer = CodeOptimizer(GeneratorConfig())

    again = optimizer.optimize(generated, descriptors, lazy_imports=True)

    assert {kind: f.content for kind, f in again.files.items()} == {
        kind: f.content for kind, f in generated.files.items()
    }


@pytest.mark.parametrize("framework", ["react", "vue", "angular", "html"])
def test_optimize_twice_equals_once(
    dispatcher: GeneratorDispatcher, framework: str
) -> None:
    schema = {
        "id": "root",
        "type": "div",
        "style": {"color": "red"},
        "props": {"state": {"count": 0}},
        "children": [
            {"id": "a", "type": "p", "style": {"color": "red"}, "content": "x"},
            {"id": "b", "type": "Chart"},
        ],
    }
    once = dispatcher.generate(schema, {"framework": framework, "optimize": True})
    optimizer = CodeOptimizer(dispatcher.registry.get_generator(framework).config)

    twice = optimizer.optimize(once)

    assert [f.content for f in twice.files.values()] == [f.content for f in once.files.values()]


def test_angular_lazy_request_adds_warning(dispatcher: GeneratorDispatcher, page_sections: list[dict]) -> None:
    generated = dispatcher.generate_page(
        page_sections, {"framework": "angular", "optimize": True, "lazyImports": True}
    )

    assert "Lazy imports are not applied to Angular standalone imports" in generated.warnings
    assert "import { HeroComponent } from './hero.component';" in generated.main.content