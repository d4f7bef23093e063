"""
Component schema representation for code generation.

Schema trees arrive from the editor as nested dictionaries. They are parsed
into ``ComponentSchema`` nodes and then stored in a ``SchemaArena``: a flat
``id -> NodeRecord`` table with explicit parent and child indexes. Arena
operations never mutate shared nodes; structural copies return new arenas.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class SchemaError(ValueError):
    """Raised for malformed component schemas."""

    pass


@dataclass(frozen=True)
class ComponentSchema:
    """A node of the declarative component tree."""

    id: str
    type: str
    props: Mapping[str, Any] = field(default_factory=dict)
    style: Mapping[str, Any] = field(default_factory=dict)
    children: Tuple["ComponentSchema", ...] = ()
    content: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComponentSchema":
        """
        Build a schema tree from its dictionary form.

        Args:
            data: Mapping with ``id``, ``type`` and optional ``props``,
                ``style``, ``children`` and ``content`` keys

        Returns:
            Root ComponentSchema

        Raises:
            SchemaError: If a node is missing required keys or has bad shapes
        """
        if isinstance(data, ComponentSchema):
            return data
        if not isinstance(data, Mapping):
            raise SchemaError(f"Schema node must be an object, got {type(data).__name__}")

        node_id = data.get("id")
        node_type = data.get("type")
        if node_id is None or node_id == "":
            raise SchemaError(f"Schema node is missing an 'id': {dict(data)!r}")
        if not isinstance(node_type, str) or not node_type:
            raise SchemaError(f"Schema node '{node_id}' is missing a 'type'")

        props = data.get("props") or {}
        style = data.get("style") or {}
        if not isinstance(props, Mapping):
            raise SchemaError(f"'props' of node '{node_id}' must be an object")
        if not isinstance(style, Mapping):
            raise SchemaError(f"'style' of node '{node_id}' must be an object")

        raw_children = data.get("children") or []
        if not isinstance(raw_children, (list, tuple)):
            raise SchemaError(f"'children' of node '{node_id}' must be a list")

        return cls(
            id=str(node_id),
            type=node_type,
            props=dict(props),
            style=dict(style),
            children=tuple(cls.from_dict(child) for child in raw_children),
            content=data.get("content"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the dictionary form accepted by ``from_dict``."""
        result: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.props:
            result["props"] = dict(self.props)
        if self.style:
            result["style"] = dict(self.style)
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        if self.content is not None:
            result["content"] = self.content
        return result


@dataclass(frozen=True)
class NodeRecord:
    """Arena entry: a node's own data without its structure."""

    id: str
    type: str
    props: Mapping[str, Any]
    style: Mapping[str, Any]
    content: Optional[Any] = None

    @property
    def is_custom_component(self) -> bool:
        """Custom components are referenced by PascalCase type names."""
        return self.type[:1].isupper()


SchemaInput = Union[ComponentSchema, Mapping[str, Any], "SchemaArena"]


class SchemaArena:
    """Indexed storage of one or more schema trees."""

    def __init__(
        self,
        nodes: Mapping[str, NodeRecord],
        children: Mapping[str, Tuple[str, ...]],
        parents: Mapping[str, Optional[str]],
        roots: Tuple[str, ...],
    ):
        self._nodes = MappingProxyType(dict(nodes))
        self._children = MappingProxyType(dict(children))
        self._parents = MappingProxyType(dict(parents))
        self._roots = tuple(roots)

    # Construction

    @classmethod
    def from_trees(cls, trees: List[Union[ComponentSchema, Mapping[str, Any]]]) -> "SchemaArena":
        """
        Build an arena holding each tree as a separate root.

        Raises:
            SchemaError: On malformed nodes or duplicate ids
        """
        nodes: Dict[str, NodeRecord] = {}
        children: Dict[str, Tuple[str, ...]] = {}
        parents: Dict[str, Optional[str]] = {}
        roots: List[str] = []

        def add(node: ComponentSchema, parent_id: Optional[str]) -> None:
            if node.id in nodes:
                raise SchemaError(f"Duplicate node id: {node.id}")
            nodes[node.id] = NodeRecord(
                id=node.id,
                type=node.type,
                props=MappingProxyType(dict(node.props)),
                style=MappingProxyType(dict(node.style)),
                content=node.content,
            )
            parents[node.id] = parent_id
            children[node.id] = tuple(child.id for child in node.children)
            for child in node.children:
                add(child, node.id)

        for tree in trees:
            root = ComponentSchema.from_dict(tree)
            add(root, None)
            roots.append(root.id)

        return cls(nodes, children, parents, tuple(roots))

    @classmethod
    def from_tree(cls, tree: SchemaInput) -> "SchemaArena":
        """Build an arena from a single tree (or return an existing arena)."""
        if isinstance(tree, SchemaArena):
            return tree
        return cls.from_trees([tree])

    # Queries

    @property
    def roots(self) -> Tuple[str, ...]:
        return self._roots

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def node(self, node_id: str) -> NodeRecord:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise SchemaError(f"Unknown node id: {node_id}") from None

    def children_of(self, node_id: str) -> Tuple[str, ...]:
        return self._children.get(node_id, ())

    def parent_of(self, node_id: str) -> Optional[str]:
        return self._parents.get(node_id)

    def walk(self, node_id: Optional[str] = None) -> Iterator[NodeRecord]:
        """Depth-first pre-order traversal from one node, or over all roots."""
        start = [node_id] if node_id is not None else list(self._roots)
        stack = list(reversed(start))
        while stack:
            current = stack.pop()
            yield self.node(current)
            stack.extend(reversed(self.children_of(current)))

    def to_tree(self, node_id: str) -> ComponentSchema:
        """Rebuild the nested ComponentSchema rooted at ``node_id``."""
        record = self.node(node_id)
        return ComponentSchema(
            id=record.id,
            type=record.type,
            props=dict(record.props),
            style=dict(record.style),
            children=tuple(self.to_tree(child) for child in self.children_of(node_id)),
            content=record.content,
        )

    # Pure structural copies

    def copy_subtree(
        self, node_id: str, id_factory: Optional[Callable[[str], str]] = None
    ) -> "SchemaArena":
        """
        Copy the subtree rooted at ``node_id`` into a new single-root arena.

        Args:
            node_id: Root of the subtree to copy
            id_factory: Maps each original id to the id used in the copy;
                defaults to appending ``-copy``

        Returns:
            New arena; this arena is left untouched
        """
        make_id = id_factory or (lambda original: f"{original}-copy")
        id_map = {record.id: make_id(record.id) for record in self.walk(node_id)}

        if len(set(id_map.values())) != len(id_map):
            raise SchemaError("id_factory produced duplicate ids")

        nodes = {}
        children = {}
        parents = {}
        for original, new_id in id_map.items():
            record = self._nodes[original]
            nodes[new_id] = NodeRecord(
                id=new_id,
                type=record.type,
                props=record.props,
                style=record.style,
                content=record.content,
            )
            children[new_id] = tuple(id_map[c] for c in self.children_of(original))
            parent = self._parents.get(original)
            parents[new_id] = id_map[parent] if original != node_id and parent else None

        return SchemaArena(nodes, children, parents, (id_map[node_id],))

    def with_subtree(
        self, subtree: "SchemaArena", parent_id: Optional[str], position: Optional[int] = None
    ) -> "SchemaArena":
        """
        Return a new arena with every root of ``subtree`` attached under ``parent_id``.

        ``parent_id=None`` adds the subtree roots as new top-level roots.

        Raises:
            SchemaError: If ids collide or the parent does not exist
        """
        clash = set(subtree._nodes) & set(self._nodes)
        if clash:
            raise SchemaError(f"Subtree ids already present: {sorted(clash)}")
        if parent_id is not None and parent_id not in self._nodes:
            raise SchemaError(f"Unknown parent id: {parent_id}")

        nodes = {**self._nodes, **subtree._nodes}
        children = {**self._children, **subtree._children}
        parents = {**self._parents, **subtree._parents}
        roots = list(self._roots)

        if parent_id is None:
            insert_at = len(roots) if position is None else position
            roots[insert_at:insert_at] = subtree.roots
        else:
            siblings = list(children[parent_id])
            insert_at = len(siblings) if position is None else position
            siblings[insert_at:insert_at] = subtree.roots
            children[parent_id] = tuple(siblings)
            for root in subtree.roots:
                parents[root] = parent_id

        return SchemaArena(nodes, children, parents, tuple(roots))

    def duplicate(self, node_id: str, id_factory: Optional[Callable[[str], str]] = None) -> "SchemaArena":
        """Return a new arena where a copy of ``node_id`` follows it among its siblings."""
        copy = self.copy_subtree(node_id, id_factory)
        parent = self.parent_of(node_id)
        siblings = self.children_of(parent) if parent is not None else self._roots
        return self.with_subtree(copy, parent, siblings.index(node_id) + 1)


def wrap_siblings(
    schemas: List[SchemaInput], root_id: str = "page-root", root_type: str = "main"
) -> SchemaArena:
    """
    Combine sibling schemas under a synthetic container node.

    Used for page generation, where a page is an ordered list of sections.
    """
    arena = SchemaArena(
        {root_id: NodeRecord(root_id, root_type, MappingProxyType({}), MappingProxyType({}))},
        {root_id: ()},
        {root_id: None},
        (root_id,),
    )
    for schema in schemas:
        section = SchemaArena.from_tree(schema)
        if len(section.roots) != 1:
            raise SchemaError("Each page section must hold exactly one root")
        arena = arena.with_subtree(section, root_id)
    logger.debug("Wrapped %d sections under '%s'", len(schemas), root_id)
    return arena
