"""Emitter modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum

from kdlpy.version import KdlVersion


class IdentifierMode(StrEnum):
    """How node names, property keys and type annotations are written."""

    PREFER_BARE = "prefer_bare"
    QUOTE_ALL = "quote_all"


class EscapeMode(StrEnum):
    DEFAULT = "default"
    ASCII = "ascii"  # also escape every non-ASCII character


@dataclass(frozen=True, slots=True)
class EmitterOptions:
    """Output formatting.

    `preserve_literals` reuses the literal text values were parsed from
    (number radix and precision, raw and multi-line strings) instead of the
    canonical spelling.
    """

    indent: str = "    "
    version: KdlVersion = KdlVersion.V2
    identifier_mode: IdentifierMode = IdentifierMode.PREFER_BARE
    escape_mode: EscapeMode = EscapeMode.DEFAULT
    sort_properties: bool = True
    preserve_literals: bool = True
    capital_e: bool = True

    def __post_init__(self):
        if self.version == KdlVersion.AUTO:
            raise ValueError("EmitterOptions.version must be V1 or V2")
        if self.indent.strip(" \t"):
            raise ValueError("indent must contain only spaces and tabs")

    @staticmethod
    def for_version(version: KdlVersion) -> "EmitterOptions":
        return EmitterOptions(version=version)


__all__ = ["EmitterOptions", "EscapeMode", "IdentifierMode"]
