"""Parser core."""

from __future__ import annotations

from dataclasses import dataclass

from kdlpy.diagnostics.codes import PARSER_EXPECTED_TOKEN, DiagnosticSpec
from kdlpy.diagnostics.errors import ParseError
from kdlpy.lexer import Token, TokenKind
from kdlpy.parser.options import ParserOptions
from kdlpy.parser.token_source import TokenSource
from kdlpy.text import LineIndex, TextRange, TextSize


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside loops."""

    _position: TextSize | None = None
    _kind: TokenKind | None = None

    def has_progressed(self, parser: Parser) -> bool:
        has_progressed = (
            self._position is None or self._position < parser.position or self._kind != parser.current
        )
        self._position = parser.position
        self._kind = parser.current
        return has_progressed

    def assert_progressing(self, parser: Parser) -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Token-level parser state shared by the grammar routines."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def current(self) -> TokenKind:
        return self._source.current

    @property
    def current_token(self) -> Token:
        return self._source.current_token

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def position(self) -> TextSize:
        return self._source.position

    @property
    def has_preceding_line_break(self) -> bool:
        return self._source.has_preceding_line_break

    @property
    def has_preceding_trivia(self) -> bool:
        return self._source.has_preceding_trivia

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def nth(self, n: int) -> TokenKind:
        return self._source.nth(n)

    def has_nth_preceding_line_break(self, n: int) -> bool:
        return self._source.has_nth_preceding_line_break(n)

    def has_nth_preceding_trivia(self, n: int) -> bool:
        return self._source.has_nth_preceding_trivia(n)

    def bump(self) -> Token:
        """Consume the current token and return it."""
        token = self._source.current_token
        self._source.bump()
        return token

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, *, context: str | None = None) -> Token:
        if self.current == kind:
            return self.bump()
        raise self.error(
            PARSER_EXPECTED_TOKEN,
            f"Expected {kind.name}, found {self.current.name}",
            context=context,
        )

    def error(
        self,
        spec: DiagnosticSpec,
        message: str | None = None,
        *,
        context: str | None = None,
        range: TextRange | None = None,
        error_type: type[ParseError] = ParseError,
    ) -> ParseError:
        """Build a located error at the current token; the caller raises it."""
        error_range = range if range is not None else self.current_range
        error = error_type(spec, message, context=context, range=error_range)
        return error.locate(LineIndex(self._source.text))
