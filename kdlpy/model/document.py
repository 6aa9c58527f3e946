"""Document and node containers."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Self, overload

from kdlpy.model.value import IntoValue, KdlValue, to_value

if TYPE_CHECKING:
    from kdlpy.model.marshal import KdlMarshaller


class KdlKeyValue(NamedTuple):
    """A child node used as a `name value` pair."""

    key: str
    value: KdlValue


@dataclass(slots=True, eq=False, repr=False)
class KdlNode:
    """A KDL node.

    `properties` is last-write-wins: re-adding a key replaces its value but
    keeps the key's original position. `children` is `None` unless the node
    has a children block, which may be empty.
    """

    name: str
    arguments: list[KdlValue] = field(default_factory=list)
    properties: dict[str, KdlValue] = field(default_factory=dict)
    children: KdlDocument | None = None
    type_annotation: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KdlNode):
            return NotImplemented
        return nodes_equal([self], [other])

    def __repr__(self) -> str:
        children = "None" if self.children is None else f"<{len(self.children)} nodes>"
        return (
            f"KdlNode(name={self.name!r}, arguments={self.arguments!r}, properties={self.properties!r}, "
            f"children={children}, type_annotation={self.type_annotation!r})"
        )

    @classmethod
    def kv(cls, name: str, value: IntoValue) -> KdlNode:
        """A node with a single argument."""
        return cls(name).add_argument(value)

    def add_argument(self, value: IntoValue, type_annotation: str | None = None) -> Self:
        self.arguments.append(to_value(value, type_annotation))
        return self

    def add_property(self, key: str, value: IntoValue, type_annotation: str | None = None) -> Self:
        self.properties[key] = to_value(value, type_annotation)
        return self

    def ensure_children(self) -> KdlDocument:
        if self.children is None:
            self.children = KdlDocument()
        return self.children

    def add_child(self, child: KdlNode) -> Self:
        self.ensure_children().nodes.append(child)
        return self

    def add_children(self, *children: KdlNode) -> Self:
        self.ensure_children().nodes.extend(children)
        return self

    def add_children_from(self, build: Callable[[KdlDocument], object]) -> Self:
        """Call `build` with a scratch document and adopt the nodes it adds."""
        scratch = KdlDocument()
        build(scratch)
        return self.add_children(*scratch.nodes)

    def add_kv(self, name: str, value: IntoValue) -> Self:
        return self.add_child(KdlNode.kv(name, value))

    def new_child(self, name: str) -> KdlNode:
        child = KdlNode(name)
        self.add_child(child)
        return child

    def marshal_children(self, *items: KdlMarshaller) -> Self:
        return self.add_children(*(item.to_kdl_node() for item in items))

    def get_child(self, name: str) -> KdlNode | None:
        if self.children is None:
            return None
        return self.children.get(name)

    def get_children(self, name: str) -> list[KdlNode]:
        if self.children is None:
            return []
        return self.children.get_all(name)

    def get_kvs(self) -> list[KdlKeyValue]:
        """Children with exactly one argument, as key/value pairs."""
        if self.children is None:
            return []
        return [KdlKeyValue(child.name, child.arguments[0]) for child in self.children if len(child.arguments) == 1]


@dataclass(slots=True, eq=False, repr=False)
class KdlDocument:
    nodes: list[KdlNode] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KdlDocument):
            return NotImplemented
        return nodes_equal(self.nodes, other.nodes)

    def __repr__(self) -> str:
        return f"KdlDocument(nodes=[{', '.join(repr(node) for node in self.nodes)}])"

    def __iter__(self) -> Iterator[KdlNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @overload
    def __getitem__(self, index: int) -> KdlNode: ...

    @overload
    def __getitem__(self, index: slice) -> list[KdlNode]: ...

    def __getitem__(self, index: int | slice) -> KdlNode | list[KdlNode]:
        return self.nodes[index]

    def add_node(self, node: KdlNode) -> Self:
        self.nodes.append(node)
        return self

    def new_node(self, name: str) -> KdlNode:
        node = KdlNode(name)
        self.nodes.append(node)
        return node

    def marshal_nodes(self, *items: KdlMarshaller) -> Self:
        self.nodes.extend(item.to_kdl_node() for item in items)
        return self

    def get(self, name: str) -> KdlNode | None:
        """First node called `name`."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def get_all(self, name: str) -> list[KdlNode]:
        return [node for node in self.nodes if node.name == name]


def nodes_equal(left: list[KdlNode], right: list[KdlNode]) -> bool:
    """Structural equality of two node lists, walked with an explicit stack.

    Compares names, type annotations, arguments, properties and whether a
    children block is present, level by level.
    """
    stack = [(left, right)]
    while stack:
        left_nodes, right_nodes = stack.pop()
        if len(left_nodes) != len(right_nodes):
            return False
        for a, b in zip(left_nodes, right_nodes):
            if a is b:
                continue
            if (
                a.name != b.name
                or a.type_annotation != b.type_annotation
                or a.arguments != b.arguments
                or a.properties != b.properties
                or (a.children is None) != (b.children is None)
            ):
                return False
            if a.children is not None and b.children is not None:
                stack.append((a.children.nodes, b.children.nodes))
    return True


__all__ = ["KdlDocument", "KdlKeyValue", "KdlNode", "nodes_equal"]
