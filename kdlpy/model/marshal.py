"""Conversion protocols between Python objects and nodes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, Self, runtime_checkable

from kdlpy.model.document import KdlNode


@runtime_checkable
class KdlMarshaller(Protocol):
    def to_kdl_node(self) -> KdlNode: ...


@runtime_checkable
class KdlUnmarshaller(Protocol):
    @classmethod
    def from_kdl_node(cls, node: KdlNode) -> Self: ...


def marshal_all(items: Iterable[KdlMarshaller]) -> list[KdlNode]:
    return [item.to_kdl_node() for item in items]


def unmarshal_all[T: KdlUnmarshaller](nodes: Iterable[KdlNode], cls: type[T]) -> list[T]:
    """Build one `cls` per node; the first failure propagates."""
    return [cls.from_kdl_node(node) for node in nodes]


__all__ = ["KdlMarshaller", "KdlUnmarshaller", "marshal_all", "unmarshal_all"]
