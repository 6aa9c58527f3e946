import math

import pytest

from kdlpy.diagnostics import KdlNotFoundError, KdlValueError
from kdlpy.model import (
    KdlBoolean,
    KdlDocument,
    KdlFloat,
    KdlInteger,
    KdlKeyValue,
    KdlNode,
    KdlNull,
    KdlString,
    as_bool,
    as_float,
    as_int,
    as_int64,
    as_null,
    as_string,
    cast_all,
    get,
    get_kv,
    is_value,
    marshal_all,
    set_entry,
    to_value,
    unmarshal_all,
)


def test_to_value_wraps_python_scalars() -> None:
    assert to_value("s") == KdlString("s")
    assert to_value(3) == KdlInteger(3)
    assert to_value(2.5) == KdlFloat(2.5)
    assert to_value(True) == KdlBoolean(True)
    assert to_value(None) == KdlNull()
    assert to_value(1, "u8") == KdlInteger(1, "u8")


def test_to_value_checks_bool_before_int() -> None:
    assert isinstance(to_value(False), KdlBoolean)


def test_to_value_replaces_annotation_on_existing_values() -> None:
    value = KdlString("x", "old")
    assert to_value(value) is value
    assert to_value(value, "new") == KdlString("x", "new")


def test_to_value_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        to_value([1, 2])  # type: ignore[arg-type]


def test_is_value() -> None:
    assert is_value(KdlNull())
    assert not is_value(None)


def test_raw_is_ignored_by_equality_and_hash() -> None:
    assert KdlInteger(16, raw="0x10") == KdlInteger(16)
    assert hash(KdlInteger(16, raw="0x10")) == hash(KdlInteger(16))


def test_type_annotation_participates_in_equality() -> None:
    assert KdlInteger(1, "u8") != KdlInteger(1)


def test_nan_equals_nan() -> None:
    assert KdlFloat(math.nan) == KdlFloat(float("nan"))
    assert KdlFloat(math.nan) != KdlFloat(1.0)
    assert hash(KdlFloat(math.nan)) == hash(KdlFloat(math.nan))


def test_values_of_different_kinds_are_not_equal() -> None:
    assert KdlInteger(1) != KdlFloat(1.0)
    assert KdlBoolean(True) != KdlInteger(1)


def test_python_value() -> None:
    assert KdlString("a").python_value == "a"
    assert KdlNull().python_value is None


def test_node_builders() -> None:
    node = KdlNode("server").add_argument("main").add_property("port", 8080).add_property("port", 8081)
    node.add_kv("host", "localhost")
    node.new_child("empty")
    assert node.arguments == [KdlString("main")]
    assert node.properties == {"port": KdlInteger(8081)}
    assert node.children is not None
    assert [child.name for child in node.children] == ["host", "empty"]
    assert node.get_kvs() == [KdlKeyValue("host", KdlString("localhost"))]


def test_property_overwrite_keeps_original_position() -> None:
    node = KdlNode("n").add_property("a", 1).add_property("b", 2).add_property("a", 3)
    assert list(node.properties) == ["a", "b"]


def _chain(depth: int, leaf: str = "leaf") -> KdlDocument:
    root = KdlNode("level")
    node = root
    for _ in range(depth - 1):
        node = node.new_child("level")
    node.name = leaf
    return KdlDocument([root])


def test_node_equality_is_structural() -> None:
    assert KdlNode("a", [KdlInteger(1)]) == KdlNode("a", [KdlInteger(1, raw="0x1")])
    assert KdlNode("a") != KdlNode("a", type_annotation="t")
    assert KdlNode("a") != KdlNode("a").add_children()
    assert KdlNode("a").add_child(KdlNode("b")) != KdlNode("a").add_child(KdlNode("c"))
    assert KdlDocument([KdlNode("a")]) != KdlDocument([KdlNode("a"), KdlNode("a")])
    assert KdlNode("a") != "a"


def test_deep_documents_compare_without_recursion() -> None:
    assert _chain(10_000) == _chain(10_000)
    assert _chain(10_000) != _chain(10_000, leaf="other")
    assert _chain(10_000) != _chain(9_999)


def test_repr_summarizes_children() -> None:
    document = _chain(10_000)
    text = repr(document)
    assert text.startswith("KdlDocument(nodes=[KdlNode(name='level'")
    assert "children=<1 nodes>" in text
    assert repr(KdlNode("n", [KdlInteger(10**5000)])).startswith("KdlNode(name='n', arguments=[KdlInteger(1000")


def test_add_children_from_builder() -> None:
    node = KdlNode("parent").add_children_from(lambda doc: doc.new_node("one").add_argument(1))
    assert node.get_child("one") == KdlNode("one", [KdlInteger(1)])
    assert node.get_child("missing") is None
    assert KdlNode("leaf").get_children("x") == []


def test_document_lookup() -> None:
    document = KdlDocument().add_node(KdlNode("a")).add_node(KdlNode("b")).add_node(KdlNode("a", [KdlInteger(2)]))
    assert len(document) == 3
    assert document.get("a") == KdlNode("a")
    assert len(document.get_all("a")) == 2
    assert document.get("z") is None
    assert document[1:] == [KdlNode("b"), KdlNode("a", [KdlInteger(2)])]


def test_get_argument_and_property() -> None:
    node = KdlNode("n").add_argument("x").add_property("count", 3)
    assert get(node, 0, as_string) == "x"
    assert get(node, "count", as_int) == 3


def test_get_missing_entry_raises_lookup_error() -> None:
    node = KdlNode("n")
    with pytest.raises(KdlNotFoundError):
        get(node, 0, as_string)
    with pytest.raises(LookupError):
        get(node, "missing", as_string)


def test_get_with_wrong_type_raises_value_error() -> None:
    node = KdlNode("n").add_argument("x")
    with pytest.raises(KdlValueError) as exc_info:
        get(node, 0, as_int)
    assert exc_info.value.code == "VALUE_TYPE_MISMATCH"
    assert "Expected integer, got string" in str(exc_info.value)


def test_set_entry_pads_with_null() -> None:
    node = KdlNode("n")
    set_entry(node, 2, "x")
    set_entry(node, "k", True)
    assert node.arguments == [KdlNull(), KdlNull(), KdlString("x")]
    assert node.properties == {"k": KdlBoolean(True)}
    with pytest.raises(IndexError):
        set_entry(node, -1, 1)


def test_get_kv_and_cast_all() -> None:
    node = KdlNode("config").add_kv("name", "demo")
    node.add_child(KdlNode("bare"))
    assert get_kv(node, "name", as_string) == "demo"
    with pytest.raises(KdlNotFoundError):
        get_kv(node, "missing", as_string)
    with pytest.raises(KdlNotFoundError):
        get_kv(node, "bare", as_string)
    assert cast_all([KdlInteger(1), KdlInteger(2)], as_int) == [1, 2]


def test_scalar_casts() -> None:
    assert as_float(KdlFloat(1.5)) == 1.5
    assert as_bool(KdlBoolean(False)) is False
    assert as_null(KdlNull()) is None
    with pytest.raises(KdlValueError):
        as_float(KdlInteger(1))


def test_as_int64_checks_range() -> None:
    assert as_int64(KdlInteger(2**63 - 1)) == 2**63 - 1
    with pytest.raises(KdlValueError) as exc_info:
        as_int64(KdlInteger(2**63))
    assert exc_info.value.code == "VALUE_NUMBER_OVERFLOW"


class Server:
    def __init__(self, name: str, port: int) -> None:
        self.name = name
        self.port = port

    def to_kdl_node(self) -> KdlNode:
        return KdlNode("server").add_argument(self.name).add_property("port", self.port)

    @classmethod
    def from_kdl_node(cls, node: KdlNode) -> "Server":
        return cls(get(node, 0, as_string), get(node, "port", as_int))


def test_marshal_and_unmarshal() -> None:
    servers = [Server("a", 1), Server("b", 2)]
    document = KdlDocument().marshal_nodes(*servers)
    assert marshal_all(servers) == document.nodes
    restored = unmarshal_all(document, Server)
    assert [(server.name, server.port) for server in restored] == [("a", 1), ("b", 2)]


def test_unmarshal_propagates_first_failure() -> None:
    document = KdlDocument([KdlNode("server").add_argument("a")])
    with pytest.raises(KdlNotFoundError):
        unmarshal_all(document, Server)
