"""High-level parse entrypoints for KDL source."""

from __future__ import annotations

import logging
from os import PathLike
from typing import BinaryIO, TextIO

from kdlpy.diagnostics.errors import KdlError
from kdlpy.lexer import BufferedLexer, Lexer
from kdlpy.model.document import KdlDocument
from kdlpy.parser.grammar import parse_document
from kdlpy.parser.options import ParserOptions
from kdlpy.parser.parser import Parser
from kdlpy.parser.token_source import TokenSource
from kdlpy.stream.adapter import StreamReader, decode_source
from kdlpy.version import KdlVersion

logger = logging.getLogger(__name__)


def _resolve_options(
    options: ParserOptions | None,
    version: KdlVersion | None,
) -> ParserOptions:
    if version is not None and options is not None:
        raise ValueError("Pass either options or version, not both")

    if options is not None:
        return options

    if version is not None:
        return ParserOptions.for_version(KdlVersion(version))

    return ParserOptions()


def parse(
    text: str | bytes,
    options: ParserOptions | None = None,
    *,
    version: KdlVersion | None = None,
) -> KdlDocument:
    """Parse a KDL document.

    Raises `LexError`, `ParseError` (or `NestingDepthError`) or
    `KdlValueError` on the first problem; no partial document is returned.
    """
    resolved_options = _resolve_options(options=options, version=version)
    source = decode_source(text) if isinstance(text, bytes) else text

    if resolved_options.version != KdlVersion.AUTO:
        return _parse_with(source, resolved_options)

    try:
        return _parse_with(source, resolved_options.with_version(KdlVersion.V2))
    except KdlError as v2_error:
        logger.debug("KDL 2 parse failed (%s); retrying as KDL 1", v2_error)
        try:
            return _parse_with(source, resolved_options.with_version(KdlVersion.V1))
        except KdlError:
            raise v2_error from None


def _parse_with(text: str, options: ParserOptions) -> KdlDocument:
    lexer = Lexer(text, version=options.version)
    buffered = BufferedLexer(lexer)
    source = TokenSource(buffered)
    parser = Parser(source, options=options)
    document = parse_document(parser)
    logger.debug("parsed %d top-level nodes as KDL %s", len(document), options.version)
    return document


def parse_stream(
    reader: StreamReader,
    options: ParserOptions | None = None,
    *,
    version: KdlVersion | None = None,
) -> KdlDocument:
    """Drain `reader` and parse the result.

    Read failures surface as `StreamError`.
    """
    return parse(reader.read_text(), options=options, version=version)


def parse_file(
    file: str | PathLike[str] | BinaryIO | TextIO,
    options: ParserOptions | None = None,
    *,
    version: KdlVersion | None = None,
) -> KdlDocument:
    """Parse a path or an open file object."""
    if isinstance(file, (str, PathLike)):
        with open(file, "rb") as handle:
            return parse_stream(StreamReader.from_file(handle), options=options, version=version)
    return parse_stream(StreamReader.from_file(file), options=options, version=version)
