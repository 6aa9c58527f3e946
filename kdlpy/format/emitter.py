"""Deterministic KDL emitter."""

from __future__ import annotations

from collections.abc import Iterator
import logging
import math
import os
from os import PathLike
from pathlib import Path
import shutil
import tempfile
from typing import IO

from kdlpy.diagnostics.codes import VALUE_UNREPRESENTABLE
from kdlpy.diagnostics.errors import KdlValueError
from kdlpy.format.options import EmitterOptions, EscapeMode, IdentifierMode
from kdlpy.model.document import KdlDocument, KdlNode
from kdlpy.model.literal import format_integer
from kdlpy.model.value import KdlBoolean, KdlFloat, KdlInteger, KdlNull, KdlString, KdlValue
from kdlpy.stream.adapter import StreamWriter
from kdlpy.syntax.chars import is_bare_identifier, is_disallowed, is_newline
from kdlpy.version import KdlVersion

logger = logging.getLogger(__name__)

WRITE_CHUNK_SIZE = 8192
NEW_FILE_MODE = 0o644

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


class KdlEmitter:
    """Renders documents as KDL text.

    Identical documents always produce identical text. Nodes are written
    one per line, children indented by `options.indent`, and properties in
    sorted key order unless `sort_properties` is off.
    """

    def __init__(self, options: EmitterOptions | None = None) -> None:
        self._options = options or EmitterOptions()

    @property
    def options(self) -> EmitterOptions:
        return self._options

    def emit(self, document: KdlDocument) -> str:
        return "".join(self.emit_lines(document))

    def emit_lines(self, document: KdlDocument) -> Iterator[str]:
        """Yield the document line by line, newline included."""
        indent = self._options.indent
        stack: list[tuple[Iterator[KdlNode], int]] = [(iter(document.nodes), 0)]
        while stack:
            nodes, depth = stack[-1]
            node = next(nodes, None)
            if node is None:
                stack.pop()
                if stack:
                    yield f"{indent * (depth - 1)}}}\n"
                continue

            line = indent * depth + self.format_node_header(node)
            if node.children is None:
                yield line + "\n"
            elif not node.children.nodes:
                yield line + " {}\n"
            else:
                yield line + " {\n"
                stack.append((iter(node.children.nodes), depth + 1))

    def emit_to(self, document: KdlDocument, writer: StreamWriter) -> int:
        """Write the document through `writer`; returns the byte count.

        The whole document is formatted before the first write, so a value
        that cannot be written leaves the stream untouched.
        """
        text = self.emit(document)
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as error:
            raise KdlValueError(VALUE_UNREPRESENTABLE, f"Output is not encodable as UTF-8: {error.reason}") from error
        start = writer.bytes_written
        # Chunks split on characters so text writers never see half a code point.
        for offset in range(0, len(text), WRITE_CHUNK_SIZE):
            writer.write_all(text[offset : offset + WRITE_CHUNK_SIZE])
        written = writer.bytes_written - start
        logger.debug("emitted %d top-level nodes (%d bytes)", len(document), written)
        return written

    def format_node_header(self, node: KdlNode) -> str:
        """The node's line without children: `(type)name args props`."""
        parts = [self._format_type(node.type_annotation) + self.format_identifier(node.name)]
        parts.extend(self.format_value(argument) for argument in node.arguments)
        keys = sorted(node.properties) if self._options.sort_properties else list(node.properties)
        parts.extend(f"{self.format_identifier(key)}={self.format_value(node.properties[key])}" for key in keys)
        return " ".join(parts)

    def format_value(self, value: KdlValue) -> str:
        return self._format_type(value.type_annotation) + self._format_bare_value(value)

    def format_identifier(self, text: str) -> str:
        """A node name, property key or type name: bare when allowed, quoted otherwise."""
        options = self._options
        if options.identifier_mode == IdentifierMode.PREFER_BARE and is_bare_identifier(text, options.version):
            if options.escape_mode != EscapeMode.ASCII or text.isascii():
                return text
        return self.quote(text)

    def quote(self, text: str) -> str:
        ascii_only = self._options.escape_mode == EscapeMode.ASCII
        parts = ['"']
        for ch in text:
            escaped = _ESCAPES.get(ch)
            if escaped is not None:
                parts.append(escaped)
            elif 0xD800 <= ord(ch) <= 0xDFFF:
                raise KdlValueError(VALUE_UNREPRESENTABLE, f"Lone surrogate U+{ord(ch):04X} cannot be written")
            elif is_disallowed(ch) or is_newline(ch) or (ascii_only and ord(ch) > 0x7E):
                parts.append(f"\\u{{{ord(ch):x}}}")
            else:
                parts.append(ch)
        parts.append('"')
        return "".join(parts)

    def _format_type(self, type_annotation: str | None) -> str:
        if type_annotation is None:
            return ""
        return f"({self.format_identifier(type_annotation)})"

    def _format_bare_value(self, value: KdlValue) -> str:
        v2 = self._options.version == KdlVersion.V2
        if self._options.preserve_literals and value.raw is not None:
            if isinstance(value, (KdlInteger, KdlFloat)) and not value.raw.startswith("#"):
                return value.raw
            if v2:
                return value.raw

        match value:
            case KdlString():
                return self.quote(value.value)
            case KdlBoolean():
                text = "true" if value.value else "false"
                return f"#{text}" if v2 else text
            case KdlNull():
                return "#null" if v2 else "null"
            case KdlInteger():
                return format_integer(value.value)
            case KdlFloat():
                return self._format_float(value.value)
        raise TypeError(f"Not a KDL value: {value!r}")

    def _format_float(self, number: float) -> str:
        if math.isnan(number) or math.isinf(number):
            if self._options.version == KdlVersion.V1:
                raise KdlValueError(VALUE_UNREPRESENTABLE, f"{number} cannot be written in KDL 1")
            if math.isnan(number):
                return "#nan"
            return "#inf" if number > 0 else "#-inf"
        return format_float(number, capital_e=self._options.capital_e)


def format_float(number: float, *, capital_e: bool = True) -> str:
    """Shortest round-tripping spelling, always with a decimal point or exponent."""
    text = repr(number)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    if "." not in mantissa:
        mantissa += ".0"
    sign = "-" if exponent.startswith("-") else "+"
    digits = exponent.lstrip("+-").lstrip("0") or "0"
    return f"{mantissa}{'E' if capital_e else 'e'}{sign}{digits}"


def serialize(document: KdlDocument, options: EmitterOptions | None = None) -> str:
    return KdlEmitter(options).emit(document)


def emit(document: KdlDocument, writer: StreamWriter, options: EmitterOptions | None = None) -> int:
    """Serialize through a stream writer. Short writes raise `StreamError`."""
    return KdlEmitter(options).emit_to(document, writer)


def write_file(
    document: KdlDocument,
    file: str | PathLike[str] | IO[bytes] | IO[str],
    options: EmitterOptions | None = None,
) -> int:
    """Serialize to a path or an open file object.

    A path is written through a temporary file in the same directory and
    renamed into place, so a failed write keeps the previous contents.
    """
    if not isinstance(file, (str, PathLike)):
        return emit(document, StreamWriter.from_file(file), options)

    path = Path(file)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            written = emit(document, StreamWriter.from_file(handle), options)
        if path.exists():
            shutil.copymode(path, temp_name)
        else:
            os.chmod(temp_name, NEW_FILE_MODE)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return written


__all__ = ["WRITE_CHUNK_SIZE", "KdlEmitter", "emit", "format_float", "serialize", "write_file"]
