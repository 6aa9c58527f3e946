"""Typed accessors for node entries.

Lookups raise `KdlNotFoundError` (a `LookupError`) when the key is missing
and `KdlValueError` when the value has the wrong type:

    port = get(node, "port", as_int)
    first = get(node, 0, as_string)
    hosts = cast_all(node.arguments, as_string)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from kdlpy.diagnostics.codes import LOOKUP_NOT_FOUND, VALUE_NUMBER_OVERFLOW, VALUE_TYPE_MISMATCH
from kdlpy.diagnostics.errors import KdlNotFoundError, KdlValueError
from kdlpy.model.document import KdlNode
from kdlpy.model.value import (
    IntoValue,
    KdlBoolean,
    KdlFloat,
    KdlInteger,
    KdlNull,
    KdlString,
    KdlValue,
    to_value,
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

type Cast[R] = Callable[[KdlValue], R]


def get[R](node: KdlNode, key: int | str, cast: Cast[R]) -> R:
    """Argument at index `key` (int) or property `key` (str), passed through `cast`."""
    if isinstance(key, str):
        if key not in node.properties:
            raise KdlNotFoundError(LOOKUP_NOT_FOUND, f"Property {key!r} not found on node {node.name!r}")
        return cast(node.properties[key])
    if key < 0 or key >= len(node.arguments):
        raise KdlNotFoundError(LOOKUP_NOT_FOUND, f"Argument at index {key} not found on node {node.name!r}")
    return cast(node.arguments[key])


def set_entry(node: KdlNode, key: int | str, value: IntoValue) -> None:
    """Set an argument (int key) or property (str key).

    Setting an argument past the end pads the gap with `#null`.
    """
    converted = to_value(value)
    if isinstance(key, str):
        node.properties[key] = converted
        return
    if key < 0:
        raise IndexError(f"Invalid argument index {key}")
    while len(node.arguments) <= key:
        node.arguments.append(KdlNull())
    node.arguments[key] = converted


def get_kv[R](node: KdlNode, name: str, cast: Cast[R]) -> R:
    """First argument of the first child called `name`."""
    child = node.get_child(name)
    if child is None:
        raise KdlNotFoundError(LOOKUP_NOT_FOUND, f"Child {name!r} not found on node {node.name!r}")
    if not child.arguments:
        raise KdlNotFoundError(LOOKUP_NOT_FOUND, f"Child {name!r} has no arguments")
    return cast(child.arguments[0])


def cast_all[R](values: Iterable[KdlValue], cast: Cast[R]) -> list[R]:
    return [cast(value) for value in values]


def as_string(value: KdlValue) -> str:
    if isinstance(value, KdlString):
        return value.value
    raise _mismatch(value, "string")


def as_int(value: KdlValue) -> int:
    if isinstance(value, KdlInteger):
        return value.value
    raise _mismatch(value, "integer")


def as_int64(value: KdlValue) -> int:
    result = as_int(value)
    if not INT64_MIN <= result <= INT64_MAX:
        raise KdlValueError(VALUE_NUMBER_OVERFLOW, f"Integer {result} does not fit in 64 bits")
    return result


def as_float(value: KdlValue) -> float:
    if isinstance(value, KdlFloat):
        return value.value
    raise _mismatch(value, "float")


def as_bool(value: KdlValue) -> bool:
    if isinstance(value, KdlBoolean):
        return value.value
    raise _mismatch(value, "boolean")


def as_null(value: KdlValue) -> None:
    if isinstance(value, KdlNull):
        return None
    raise _mismatch(value, "null")


def _mismatch(value: KdlValue, expected: str) -> KdlValueError:
    return KdlValueError(VALUE_TYPE_MISMATCH, f"Expected {expected}, got {value.kind}")


__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "as_bool",
    "as_float",
    "as_int",
    "as_int64",
    "as_null",
    "as_string",
    "cast_all",
    "get",
    "get_kv",
    "set_entry",
]
