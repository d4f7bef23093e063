"""Bundle assembly tests."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

from ui_codegen.codegen import BundleAssembler, BundleError, GeneratorDispatcher


def test_bundle_lists_component_files_and_scaffold(
    dispatcher: GeneratorDispatcher, simple_schema: dict
) -> None:
    assembler = BundleAssembler(name="demo")
    added = assembler.add(dispatcher.generate(simple_schema))

    assert added == [
        "src/components/GeneratedComponent/GeneratedComponent.jsx",
        "src/components/GeneratedComponent/index.js",
    ]
    assert sorted(assembler.files()) == [
        "README.md",
        "package.json",
        "src/components/GeneratedComponent/GeneratedComponent.jsx",
        "src/components/GeneratedComponent/index.js",
    ]


def test_package_json_lists_framework_dependencies(
    dispatcher: GeneratorDispatcher, simple_schema: dict, page_sections: list[dict]
) -> None:
    assembler = BundleAssembler(name="demo", description='Say "hi"')
    assembler.add(dispatcher.generate(simple_schema, {"framework": "react"}))
    assembler.add(dispatcher.generate_page(page_sections, {"framework": "vue"}))

    package = json.loads(assembler.files()["package.json"])

    assert package["name"] == "demo"
    assert package["description"] == 'Say "hi"'
    assert set(package["dependencies"]) == {"react", "react-dom", "vue"}


def test_pages_go_under_pages_directory(dispatcher: GeneratorDispatcher, page_sections: list[dict]) -> None:
    assembler = BundleAssembler()
    added = assembler.add(dispatcher.generate_page(page_sections, {"pageName": "Landing"}))

    assert "src/pages/Landing/Landing.jsx" in added


def test_html_bundle_has_no_install_section(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    assembler = BundleAssembler()
    assembler.add(dispatcher.generate(simple_schema, {"framework": "html"}))
    files = assembler.files()

    assert json.loads(files["package.json"])["dependencies"] == {}
    assert "npm install" not in files["README.md"]
    assert "`src/components/GeneratedComponent/GeneratedComponent.html` (html main)" in files["README.md"]


def test_conflicting_paths_are_rejected(dispatcher: GeneratorDispatcher, simple_schema: dict) -> None:
    assembler = BundleAssembler()
    assembler.add(dispatcher.generate(simple_schema))
    assembler.add(dispatcher.generate(simple_schema))

    other = dict(simple_schema, children=[{"id": "2", "type": "span", "content": "Bye"}])
    with pytest.raises(BundleError, match="GeneratedComponent.jsx"):
        assembler.add(dispatcher.generate(other))


def test_empty_bundle_cannot_be_written(tmp_path: Path) -> None:
    with pytest.raises(BundleError):
        BundleAssembler().write(tmp_path)


def test_write_creates_directory_tree(
    dispatcher: GeneratorDispatcher, simple_schema: dict, tmp_path: Path
) -> None:
    assembler = BundleAssembler()
    assembler.add(dispatcher.generate(simple_schema))

    written = assembler.write(tmp_path / "out")

    assert len(written) == 4
    component = tmp_path / "out" / "src" / "components" / "GeneratedComponent" / "GeneratedComponent.jsx"
    assert "<span>Hi</span>" in component.read_text(encoding="utf-8")


def test_write_zip_roots_entries_at_bundle_name(
    dispatcher: GeneratorDispatcher, simple_schema: dict, tmp_path: Path
) -> None:
    assembler = BundleAssembler(name="demo")
    assembler.add(dispatcher.generate(simple_schema, {"framework": "vue"}))

    archive = assembler.write_zip(tmp_path / "demo.zip")

    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
        assert "demo/package.json" in names
        assert "demo/src/components/GeneratedComponent/GeneratedComponent.vue" in names
        assert '"vue"' in zf.read("demo/package.json").decode("utf-8")
