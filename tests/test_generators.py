"""Framework generator output tests."""

from __future__ import annotations

import pytest

from ui_codegen.codegen import GeneratorDispatcher, create_registry
from ui_codegen.codegen.frameworks.angular.templates import template_literal
from ui_codegen.codegen.frameworks.common import doc_comment


@pytest.fixture
def card_schema() -> dict:
    return {
        "id": "root",
        "type": "div",
        "style": {"padding": 8},
        "props": {
            "componentName": "UserCard",
            "propDefs": [{"name": "name", "type": "string"}],
            "state": {"open": False},
            "functions": {"toggle": "setOpen(!open);"},
            "onClick": "toggle",
        },
        "children": [
            {"id": "label", "type": "span", "content": {"$bind": "name"}},
            {"id": "avatar", "type": "Avatar"},
        ],
    }


# React


def test_react_component_with_state(dispatcher: GeneratorDispatcher, counter_schema: dict) -> None:
    content = dispatcher.generate(counter_schema, {"framework": "react", "typescript": True}).main.content

    assert content.startswith("import { useState } from 'react';\n")
    assert "const [count, setCount] = useState<number>(0);" in content
    assert "  const increment = () => {\n    setCount(count + 1);\n  };" in content
    assert "<button onClick={increment}>{count}</button>" in content


def test_react_typescript_props(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    generated = dispatcher.generate(card_schema, {"framework": "react", "typescript": True})
    content = generated.main.content

    assert "export interface UserCardProps {\n  name: string;\n}" in content
    assert "export default function UserCard({ name }: UserCardProps) {" in content
    assert "import Avatar from './Avatar';" in content
    assert "import './UserCard.css';" in content
    assert "export type { UserCardProps } from './UserCard';" in generated.index.content


def test_react_css_modules(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    generated = dispatcher.generate(card_schema, {"framework": "react", "isModule": True})

    assert "import styles from './UserCard.module.css';" in generated.main.content
    assert "className={styles['div-root']}" in generated.main.content
    assert generated.styles.filename == "UserCard.module.css"


def test_react_description_becomes_doc_comment(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    content = dispatcher.generate(simple_schema, {"description": "Greets the user."}).main.content

    assert "/**\n * Greets the user.\n */\nexport default function" in content


def test_react_comments_can_be_disabled(simple_schema: dict) -> None:
    dispatcher = GeneratorDispatcher(create_registry(config={"add_comments": False}))

    content = dispatcher.generate(simple_schema, {"description": "Greets the user."}).main.content

    assert "Greets" not in content


def test_react_effect_with_cleanup(dispatcher: GeneratorDispatcher) -> None:
    schema = {
        "id": "1",
        "type": "div",
        "props": {
            "effects": [
                {"body": "const id = setInterval(tick, 1000);", "cleanup": "clearInterval(id);", "deps": ["tick"]}
            ]
        },
    }

    content = dispatcher.generate(schema).main.content

    assert "import { useEffect } from 'react';" in content
    assert "    return () => {\n      clearInterval(id);\n    };" in content
    assert "  }, [tick]);" in content


def test_react_index_exports_default_and_named(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    index = dispatcher.generate(simple_schema).index.content

    assert index == (
        "export { default } from './GeneratedComponent';\n"
        "export { default as GeneratedComponent } from './GeneratedComponent';\n"
    )


# Vue


def test_vue_single_file_component(dispatcher: GeneratorDispatcher, counter_schema: dict) -> None:
    content = dispatcher.generate(counter_schema, {"framework": "vue"}).main.content

    assert content.startswith("<template>\n  <button @click=\"increment\">{{ count }}</button>\n</template>")
    assert "<script setup>" in content
    assert "import { ref } from 'vue';" in content
    assert "const count = ref(0);" in content
    assert "const setCount = (value) => {\n  count.value = value;\n};" in content


def test_vue_props_and_styles(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    card_schema["props"]["propDefs"].append({"name": "tags", "default": []})

    content = dispatcher.generate(card_schema, {"framework": "vue", "typescript": True}).main.content

    assert '<script setup lang="ts">' in content
    assert "  name: { type: String, required: true }," in content
    assert "  tags: { type: Array, default: () => ([]) }," in content
    assert '<style scoped src="./UserCard.css"></style>' in content


def test_vue_css_modules_bind_style_object(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    content = dispatcher.generate(card_schema, {"framework": "vue", "isModule": True}).main.content

    assert ":class=\"$style['div-root']\"" in content
    assert '<style module src="./UserCard.module.css"></style>' in content


def test_vue_effects_use_watch_or_lifecycle(dispatcher: GeneratorDispatcher) -> None:
    schema = {
        "id": "1",
        "type": "div",
        "props": {
            "effects": [
                {"body": "console.log(count.value);", "deps": ["count"]},
                {"body": "start();", "cleanup": "stop();"},
            ]
        },
    }

    content = dispatcher.generate(schema, {"framework": "vue"}).main.content

    assert "import { onMounted, onUnmounted, watch } from 'vue';" in content
    assert "watch([count], (_value, _previous, onCleanup) => {" in content
    assert "onMounted(() => {\n  start();\n});" in content
    assert "onUnmounted(() => {\n  stop();\n});" in content


# Angular


def test_angular_standalone_component(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    generated = dispatcher.generate(card_schema, {"framework": "angular"})
    content = generated.main.content

    assert generated.main.filename == "user-card.component.ts"
    assert "import { Component, Input } from '@angular/core';" in content
    assert "import { AvatarComponent } from './avatar.component';" in content
    assert "selector: 'app-user-card'," in content
    assert "imports: [CommonModule, AvatarComponent]," in content
    assert "styleUrls: ['./user-card.component.css']," in content
    assert "export class UserCardComponent {" in content
    assert "  @Input() name!: string;" in content
    assert "  open: boolean = false;" in content
    assert '(click)="toggle($event)"' in content
    assert "<app-avatar></app-avatar>" in content
    assert "  setOpen(value: boolean): void {\n    this.open = value;\n  }" in content
    assert generated.index.content == "export { UserCardComponent } from './user-card.component';\n"


def test_angular_lifecycle_from_effects(dispatcher: GeneratorDispatcher) -> None:
    schema = {
        "id": "1",
        "type": "div",
        "props": {"effects": [{"body": "this.start();", "cleanup": "this.stop();"}]},
    }

    content = dispatcher.generate(schema, {"framework": "angular"}).main.content

    assert "import { Component, OnInit, OnDestroy } from '@angular/core';" in content
    assert "implements OnInit, OnDestroy {" in content
    assert "  ngOnInit(): void {\n    this.start();\n  }" in content
    assert "  ngOnDestroy(): void {\n    this.stop();\n  }" in content


def test_angular_selector_prefix_from_config(simple_schema: dict) -> None:
    registry = create_registry(config={"custom": {"selector_prefix": "acme"}})

    content = GeneratorDispatcher(registry).generate(simple_schema, {"framework": "angular"}).main.content

    assert "selector: 'acme-generated-component'," in content


def test_template_literal_escapes_backticks() -> None:
    assert template_literal("a`b${c}", 2) == "  a\\`b\\${c}"


# Plain HTML


def test_html_fragment_with_script(dispatcher: GeneratorDispatcher, counter_schema: dict) -> None:
    content = dispatcher.generate(counter_schema, {"framework": "html"}).main.content

    assert '<button data-on-click="increment" data-bind-text="count"></button>' in content
    assert '<script type="module">' in content
    assert "  let count = 0;" in content
    assert "  const scope = () => ({ count, setCount, increment });" in content


def test_html_custom_elements_are_hyphenated(dispatcher: GeneratorDispatcher, card_schema: dict) -> None:
    content = dispatcher.generate(card_schema, {"framework": "html"}).main.content

    assert "<x-avatar></x-avatar>" in content
    assert '<link rel="stylesheet" href="./UserCard.css">' in content


def test_html_static_markup_has_no_script(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    content = dispatcher.generate(simple_schema, {"framework": "html"}).main.content

    assert "<script" not in content


def test_html_page_is_a_full_document(dispatcher: GeneratorDispatcher, page_sections: list[dict]) -> None:
    generated = dispatcher.generate_page(
        page_sections, {"framework": "html", "pageTitle": "Home & Away", "description": "Landing"}
    )
    content = generated.main.content

    assert content.startswith('<!DOCTYPE html>\n<html lang="en">')
    assert "<title>Home &amp; Away</title>" in content
    assert '<meta name="description" content="Landing">' in content
    assert "<x-hero></x-hero>" in content
    assert 'href="./Page.html"' in generated.index.content


def test_doc_comment_helper() -> None:
    assert doc_comment("") == ""
    assert doc_comment("a\nb", 2) == "  /**\n   * a\n   * b\n   */"


def test_react_body_without_state_has_no_leading_blank_line(dispatcher: GeneratorDispatcher) -> None:
    schema = {
        "id": "1",
        "type": "div",
        "props": {"effects": ["start();"], "functions": {"stop": "halt();"}},
    }

    content = dispatcher.generate(schema).main.content

    assert "export default function GeneratedComponent() {\n  useEffect(() => {\n" in content
    assert "  }, []);\n\n  const stop = () => {\n" in content
    assert "  };\n\n  return (\n" in content


def test_react_markup_only_body_starts_with_return(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    content = dispatcher.generate(simple_schema).main.content

    assert "export default function GeneratedComponent() {\n  return (\n" in content


def test_angular_library_imports_stay_out_of_component_imports(dispatcher: GeneratorDispatcher) -> None:
    schema = {
        "id": "1",
        "type": "div",
        "props": {"imports": [{"name": "dayjs", "source": "dayjs"}], "effects": ["dayjs();"]},
        "children": [{"id": "c", "type": "Chart"}],
    }

    content = dispatcher.generate(schema, {"framework": "angular"}).main.content

    assert "import dayjs from 'dayjs';" in content
    assert "import { ChartComponent } from './chart.component';" in content
    assert "imports: [CommonModule, ChartComponent]," in content


def test_html_component_imports_get_a_script(dispatcher: GeneratorDispatcher) -> None:
    schema = {"id": "r", "type": "div", "children": [{"id": "c", "type": "UserCard"}]}

    content = dispatcher.generate(schema, {"framework": "html"}).main.content

    assert "<user-card></user-card>" in content
    assert '<script type="module">' in content
    assert "  import UserCard from './UserCard';" in content
