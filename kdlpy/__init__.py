"""KDL document parsing and serialization."""

from kdlpy.diagnostics import (
    KdlError,
    KdlNotFoundError,
    KdlValueError,
    LexError,
    NestingDepthError,
    ParseError,
    StreamError,
)
from kdlpy.format import (
    EmitterOptions,
    EscapeMode,
    FormatRunResult,
    IdentifierMode,
    KdlEmitter,
    emit,
    print_document,
    run_format,
    serialize,
    write_file,
)
from kdlpy.lexer import Token, TokenKind, tokenize
from kdlpy.log import configure_logging
from kdlpy.model import (
    KdlBoolean,
    KdlDocument,
    KdlFloat,
    KdlInteger,
    KdlKeyValue,
    KdlMarshaller,
    KdlNode,
    KdlNull,
    KdlString,
    KdlUnmarshaller,
    KdlValue,
    to_value,
    unmarshal_all,
)
from kdlpy.parser import ParserOptions, parse, parse_file, parse_stream
from kdlpy.stream import StreamReader, StreamWriter
from kdlpy.version import KdlVersion

__all__ = [
    "EmitterOptions",
    "EscapeMode",
    "FormatRunResult",
    "IdentifierMode",
    "KdlBoolean",
    "KdlDocument",
    "KdlEmitter",
    "KdlError",
    "KdlFloat",
    "KdlInteger",
    "KdlKeyValue",
    "KdlMarshaller",
    "KdlNode",
    "KdlNotFoundError",
    "KdlNull",
    "KdlString",
    "KdlUnmarshaller",
    "KdlValue",
    "KdlValueError",
    "KdlVersion",
    "LexError",
    "NestingDepthError",
    "ParseError",
    "ParserOptions",
    "StreamError",
    "StreamReader",
    "StreamWriter",
    "Token",
    "TokenKind",
    "configure_logging",
    "emit",
    "parse",
    "parse_file",
    "parse_stream",
    "print_document",
    "run_format",
    "serialize",
    "to_value",
    "tokenize",
    "unmarshal_all",
    "write_file",
]
