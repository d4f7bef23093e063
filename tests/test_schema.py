"""Schema parsing and arena structural-copy tests."""

from __future__ import annotations

import pytest

from ui_codegen.codegen.core.schema import ComponentSchema, SchemaArena, SchemaError, wrap_siblings


@pytest.fixture
def tree() -> dict:
    return {
        "id": "root",
        "type": "div",
        "children": [
            {"id": "a", "type": "span", "children": [{"id": "b", "type": "b", "content": "x"}]},
            {"id": "c", "type": "p"},
        ],
    }


def test_from_dict_round_trips(tree: dict) -> None:
    assert ComponentSchema.from_dict(tree).to_dict() == tree


@pytest.mark.parametrize(
    "node, message",
    [
        ({"type": "div"}, "id"),
        ({"id": "1"}, "type"),
        ({"id": "1", "type": "div", "props": "x"}, "props"),
        ({"id": "1", "type": "div", "children": "x"}, "children"),
    ],
)
def test_from_dict_rejects_malformed_nodes(node: dict, message: str) -> None:
    with pytest.raises(SchemaError, match=message):
        ComponentSchema.from_dict(node)


def test_arena_indexes_parents_and_children(tree: dict) -> None:
    arena = SchemaArena.from_tree(tree)

    assert arena.roots == ("root",)
    assert arena.children_of("root") == ("a", "c")
    assert arena.parent_of("b") == "a"
    assert [node.id for node in arena.walk()] == ["root", "a", "b", "c"]
    assert arena.to_tree("root") == ComponentSchema.from_dict(tree)


def test_arena_rejects_duplicate_ids() -> None:
    with pytest.raises(SchemaError, match="Duplicate"):
        SchemaArena.from_tree(
            {"id": "1", "type": "div", "children": [{"id": "1", "type": "span"}]}
        )


def test_copy_subtree_leaves_original_untouched(tree: dict) -> None:
    arena = SchemaArena.from_tree(tree)
    copy = arena.copy_subtree("a")

    assert copy.roots == ("a-copy",)
    assert copy.children_of("a-copy") == ("b-copy",)
    assert copy.parent_of("a-copy") is None
    assert copy.node("b-copy").content == "x"
    assert len(arena) == 4
    assert "a-copy" not in arena


def test_duplicate_places_copy_after_original(tree: dict) -> None:
    arena = SchemaArena.from_tree(tree)
    duplicated = arena.duplicate("a", id_factory=lambda original: f"{original}2")

    assert duplicated.children_of("root") == ("a", "a2", "c")
    assert duplicated.parent_of("b2") == "a2"
    assert arena.children_of("root") == ("a", "c")


def test_with_subtree_rejects_id_collisions(tree: dict) -> None:
    arena = SchemaArena.from_tree(tree)
    with pytest.raises(SchemaError):
        arena.with_subtree(SchemaArena.from_tree({"id": "c", "type": "p"}), "root")


def test_node_props_are_read_only(tree: dict) -> None:
    arena = SchemaArena.from_tree({"id": "1", "type": "div", "props": {"title": "x"}})
    with pytest.raises(TypeError):
        arena.node("1").props["title"] = "y"  # type: ignore[index]


def test_wrap_siblings_adds_page_root() -> None:
    arena = wrap_siblings([{"id": "s1", "type": "header"}, {"id": "s2", "type": "footer"}])

    assert arena.roots == ("page-root",)
    assert arena.node("page-root").type == "main"
    assert arena.children_of("page-root") == ("s1", "s2")
    assert arena.parent_of("s2") == "page-root"
