"""Parser infrastructure (token source + grammar + entrypoints)."""

from kdlpy.parser.grammar import parse_document, parse_entry, parse_value
from kdlpy.parser.kdl import parse, parse_file, parse_stream
from kdlpy.parser.options import DEFAULT_MAX_DEPTH, ParserOptions
from kdlpy.parser.parser import Parser, ParserProgress
from kdlpy.parser.token_source import TokenSource

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Parser",
    "ParserOptions",
    "ParserProgress",
    "TokenSource",
    "parse",
    "parse_document",
    "parse_entry",
    "parse_file",
    "parse_stream",
    "parse_value",
]
