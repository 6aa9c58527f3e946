"""KDL value types.

Every value carries an optional type annotation and a `raw` formatting hint:
the literal text it was parsed from. `raw` is ignored by equality and
hashing, so a parsed `0x10` equals a programmatic `KdlInteger(16)`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import math
from typing import ClassVar, Final, Self

from kdlpy.model.literal import format_integer


@dataclass(frozen=True, slots=True)
class KdlString:
    kind: ClassVar[str] = "string"

    value: str
    type_annotation: str | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    def with_type(self, type_annotation: str | None) -> Self:
        return replace(self, type_annotation=type_annotation)

    @property
    def python_value(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True, repr=False)
class KdlInteger:
    kind: ClassVar[str] = "integer"

    value: int
    type_annotation: str | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    def with_type(self, type_annotation: str | None) -> Self:
        return replace(self, type_annotation=type_annotation)

    @property
    def python_value(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"KdlInteger({format_integer(self.value)}, type_annotation={self.type_annotation!r})"


@dataclass(frozen=True, slots=True, eq=False)
class KdlFloat:
    kind: ClassVar[str] = "float"

    value: float
    type_annotation: str | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    def with_type(self, type_annotation: str | None) -> Self:
        return replace(self, type_annotation=type_annotation)

    @property
    def python_value(self) -> float:
        return self.value

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.value)

    # NaN compares equal to NaN so documents holding #nan round-trip.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KdlFloat):
            return NotImplemented
        if self.type_annotation != other.type_annotation:
            return False
        if self.is_nan or other.is_nan:
            return self.is_nan and other.is_nan
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(("float", "nan" if self.is_nan else self.value, self.type_annotation))


@dataclass(frozen=True, slots=True)
class KdlBoolean:
    kind: ClassVar[str] = "boolean"

    value: bool
    type_annotation: str | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    def with_type(self, type_annotation: str | None) -> Self:
        return replace(self, type_annotation=type_annotation)

    @property
    def python_value(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class KdlNull:
    kind: ClassVar[str] = "null"

    type_annotation: str | None = None
    raw: str | None = field(default=None, compare=False, repr=False)

    def with_type(self, type_annotation: str | None) -> Self:
        return replace(self, type_annotation=type_annotation)

    @property
    def python_value(self) -> None:
        return None


type KdlValue = KdlString | KdlInteger | KdlFloat | KdlBoolean | KdlNull

VALUE_TYPES: Final[tuple[type, ...]] = (KdlString, KdlInteger, KdlFloat, KdlBoolean, KdlNull)

type IntoValue = KdlValue | str | int | float | bool | None


def is_value(obj: object) -> bool:
    return isinstance(obj, VALUE_TYPES)


def to_value(obj: IntoValue, type_annotation: str | None = None) -> KdlValue:
    """Wrap a Python scalar as a KDL value.

    Existing values pass through; `type_annotation`, when given, replaces
    theirs. Raises `TypeError` for anything else.
    """
    value: KdlValue
    if isinstance(obj, VALUE_TYPES):
        value = obj  # type: ignore[assignment]
        return value.with_type(type_annotation) if type_annotation is not None else value
    if obj is None:
        value = KdlNull()
    # bool first: bool is a subclass of int.
    elif isinstance(obj, bool):
        value = KdlBoolean(obj)
    elif isinstance(obj, int):
        value = KdlInteger(obj)
    elif isinstance(obj, float):
        value = KdlFloat(obj)
    elif isinstance(obj, str):
        value = KdlString(obj)
    else:
        raise TypeError(f"Cannot convert {type(obj).__name__} to a KDL value")
    return value.with_type(type_annotation) if type_annotation is not None else value


__all__ = [
    "VALUE_TYPES",
    "IntoValue",
    "KdlBoolean",
    "KdlFloat",
    "KdlInteger",
    "KdlNull",
    "KdlString",
    "KdlValue",
    "is_value",
    "to_value",
]
