import io
import logging

from kdlpy.diagnostics import (
    Diagnostic,
    KdlValueError,
    LexError,
    ParseError,
    StreamError,
    format_diagnostic,
)
from kdlpy.diagnostics.codes import IO_SHORT_WRITE, LEXER_UNTERMINATED_STRING, PARSER_UNCLOSED_BLOCK, VALUE_TYPE_MISMATCH
from kdlpy.log import LOGGER_NAME, configure_logging
from kdlpy.text import LineIndex, TextRange


def test_line_index_positions() -> None:
    index = LineIndex("ab\r\ncd\ref\ngh")
    assert index.line_count == 4
    assert str(index.position(0)) == "1:1"
    assert str(index.position(4)) == "2:1"
    assert str(index.position(8)) == "3:2"
    assert str(index.position(10)) == "4:1"


def test_error_messages_are_component_prefixed() -> None:
    error = LexError(LEXER_UNTERMINATED_STRING, expected='a closing `"`', range=TextRange(2, 5))
    assert str(error) == '[Lexer] Unterminated string literal. Expected: a closing `"`'
    error.locate(LineIndex("a\nbcdef"))
    assert str(error) == '[Lexer] Unterminated string literal at 2:1. Expected: a closing `"`'


def test_locate_keeps_first_position() -> None:
    error = ParseError(PARSER_UNCLOSED_BLOCK, "Unclosed", context="node 'a'", range=TextRange(0, 1))
    error.locate(LineIndex("x"))
    error.locate(LineIndex("\n\nx"))
    assert str(error) == "[Parser] Unclosed at 1:1 (in node 'a')"


def test_errors_subclass_builtin_exceptions() -> None:
    assert isinstance(KdlValueError(VALUE_TYPE_MISMATCH), ValueError)
    assert isinstance(StreamError(IO_SHORT_WRITE), OSError)


def test_error_to_diagnostic() -> None:
    error = ParseError(PARSER_UNCLOSED_BLOCK, range=TextRange(3, 4))
    diagnostic = error.diagnostic()
    assert diagnostic.code == "PARSER_UNCLOSED_BLOCK"
    assert diagnostic.range.as_tuple() == (3, 4)
    assert diagnostic.severity == "error"
    assert format_diagnostic(diagnostic).startswith("ERROR PARSER_UNCLOSED_BLOCK range=(3, 4)")


def test_format_diagnostic_includes_hint() -> None:
    warning = Diagnostic(code="X", message="m", range=TextRange(0, 2), severity="warning", hint="try y")
    assert format_diagnostic(warning) == "WARNING X range=(0, 2) message=m hint=try y"


def test_configure_logging_replaces_its_handler() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    first = io.StringIO()
    second = io.StringIO()
    try:
        configure_logging(logging.DEBUG, first)
        configure_logging(logging.DEBUG, second)
        logging.getLogger("kdlpy.test").debug("hello")
        assert first.getvalue() == ""
        assert "kdlpy.test - DEBUG - hello" in second.getvalue()
    finally:
        logger.setLevel(logging.NOTSET)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)


def test_line_index_byte_offsets() -> None:
    index = LineIndex("å€\nb")
    position = index.position(3)
    assert (position.line, position.column, position.offset, position.byte_offset) == (2, 1, 3, 6)
