"""Lexer."""

from __future__ import annotations

from collections.abc import Iterator

from kdlpy.diagnostics.codes import (
    LEXER_BARE_KEYWORD,
    LEXER_DISALLOWED_CODE_POINT,
    LEXER_INVALID_IDENTIFIER,
    LEXER_INVALID_LINE_CONTINUATION,
    LEXER_INVALID_MULTILINE_STRING,
    LEXER_NEWLINE_IN_STRING,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNKNOWN_KEYWORD,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from kdlpy.diagnostics.errors import KdlError, LexError
from kdlpy.lexer.tokens import Token, TokenFlags, TokenKind
from kdlpy.model.literal import (
    NumberKind,
    dedent_multiline,
    parse_number_literal,
    resolve_escapes,
    resolve_whitespace_escapes,
)
from kdlpy.syntax.chars import (
    BOM,
    RESERVED_BARE_WORDS,
    V1_KEYWORDS,
    V2_KEYWORDS,
    find_disallowed,
    is_bare_identifier,
    is_disallowed,
    is_identifier_char,
    is_newline,
    is_unicode_space,
    looks_like_number,
)
from kdlpy.text import LineIndex, TextRange, TextSize, Utf8Offsets, slice_text_range
from kdlpy.version import KdlVersion

_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "=": TokenKind.EQUAL,
    ";": TokenKind.SEMICOLON,
}


class Lexer:
    """Lexer that emits trivia and non-trivia tokens on demand.

    The first malformed token raises; there is no recovery.
    """

    def __init__(self, source: str, *, version: KdlVersion = KdlVersion.V2) -> None:
        if version == KdlVersion.AUTO:
            raise ValueError("Lexer needs a concrete KDL version, not AUTO")
        self._source = source
        self._version = version
        self._byte_offsets = Utf8Offsets(source)
        self._position = 0
        self._current_start = 0
        self._current_flags = TokenFlags.NONE
        self._after_newline = False

    @property
    def source(self) -> str:
        return self._source

    @property
    def version(self) -> KdlVersion:
        return self._version

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def current_range(self) -> TextRange:
        return TextRange(self._current_start, self._position)

    def next_token(self) -> Token:
        """Lex one token. Returns EOF tokens forever once the input is exhausted."""
        self._current_start = self._position
        self._current_flags = TokenFlags.NONE

        if self.is_eof:
            if self._after_newline:
                self._current_flags |= TokenFlags.PRECEDING_LINE_BREAK
            eof_range = TextRange.empty(TextSize(self._position))
            return Token(TokenKind.EOF, eof_range, self._current_flags, span=self._byte_offsets.span(eof_range))

        try:
            kind, value = self._lex_token()
            self._check_code_points(kind)
        except KdlError as error:
            error.locate(LineIndex(self._source))
            raise

        if self._after_newline:
            self._current_flags |= TokenFlags.PRECEDING_LINE_BREAK
        if kind == TokenKind.NEWLINE:
            self._after_newline = True
        elif not kind.is_trivia:
            self._after_newline = False

        token_range = self.current_range
        return Token(kind, token_range, self._current_flags, value, self._byte_offsets.span(token_range))

    def tokens(self) -> Iterator[Token]:
        """Lazily yield tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    def lex(self) -> list[Token]:
        return list(self.tokens())

    def _lex_token(self) -> tuple[TokenKind, object]:
        ch = self._current_char()

        if ch == BOM and self._position == 0:
            self._advance(1)
            return TokenKind.WHITESPACE, None

        if self._consume_newline():
            return TokenKind.NEWLINE, None

        if is_unicode_space(ch):
            self._consume_whitespaces()
            return TokenKind.WHITESPACE, None

        if ch == "/":
            return self._lex_slash()

        if ch == "\\":
            return self._lex_line_continuation()

        if ch == '"':
            return self._lex_string()

        if ch == "#" and self._version == KdlVersion.V2:
            return self._lex_hash()

        if ch == "r" and self._version == KdlVersion.V1 and self._raw_hashes(self._position + 1) is not None:
            self._advance(1)
            return self._lex_raw_string()

        kind = _PUNCTUATION.get(ch)
        if kind is not None:
            self._advance(1)
            return kind, None

        if is_identifier_char(ch, self._version):
            return self._lex_bare_word()

        self._advance(1)
        if is_disallowed(ch):
            raise self._error(LEXER_DISALLOWED_CODE_POINT, f"Disallowed code point U+{ord(ch):04X}")
        raise self._error(LEXER_UNEXPECTED_CHARACTER, f"Unexpected character {ch!r}")

    def _lex_slash(self) -> tuple[TokenKind, object]:
        follow = self._peek_char()
        if follow == "/":
            self._consume_line_comment()
            return TokenKind.COMMENT, None
        if follow == "*":
            self._consume_block_comment()
            return TokenKind.COMMENT, None
        if follow == "-":
            self._advance(2)
            return TokenKind.SLASHDASH, None
        self._advance(1)
        raise self._error(LEXER_UNEXPECTED_CHARACTER, "Unexpected '/'", expected="`//`, `/*` or `/-`")

    def _lex_line_continuation(self) -> tuple[TokenKind, object]:
        self._advance(1)
        while not self.is_eof:
            if is_unicode_space(self._current_char()):
                self._advance(1)
            elif self._source.startswith("/*", self._position):
                self._consume_block_comment()
            else:
                break

        if self._source.startswith("//", self._position):
            self._consume_line_comment()

        if self.is_eof or self._consume_newline():
            return TokenKind.ESCLINE, None
        raise self._error(LEXER_INVALID_LINE_CONTINUATION, expected="a newline after `\\`")

    def _lex_string(self) -> tuple[TokenKind, object]:
        if self._version == KdlVersion.V2 and self._source.startswith('"""', self._position):
            return self._lex_multiline_string()

        self._advance(1)
        body_start = self._position
        while True:
            if self.is_eof:
                raise self._error(LEXER_UNTERMINATED_STRING, expected='a closing `"`')
            ch = self._current_char()
            if ch == '"':
                break
            if ch == "\\":
                self._current_flags |= TokenFlags.HAS_ESCAPE
                self._advance(1)
                self._skip_escaped_char()
                continue
            if is_newline(ch) and self._version == KdlVersion.V2:
                raise self._error(LEXER_NEWLINE_IN_STRING, expected='a closing `"`')
            self._advance(1)

        body = self._source[body_start : self._position]
        self._advance(1)
        self._current_flags |= TokenFlags.WAS_QUOTED
        return TokenKind.STRING, resolve_escapes(body, offset=body_start, version=self._version)

    def _skip_escaped_char(self) -> None:
        if self.is_eof:
            return
        ch = self._current_char()
        if self._version == KdlVersion.V2 and (is_unicode_space(ch) or is_newline(ch)):
            while not self.is_eof and (is_unicode_space(self._current_char()) or is_newline(self._current_char())):
                self._advance(1)
            return
        self._advance(1)

    def _lex_multiline_string(self) -> tuple[TokenKind, object]:
        self._advance(3)
        self._expect_multiline_opening()
        body_start = self._position
        while True:
            if self.is_eof:
                raise self._error(LEXER_UNTERMINATED_STRING, expected='closing `"""`')
            if self._source.startswith('"""', self._position):
                break
            if self._current_char() == "\\":
                self._current_flags |= TokenFlags.HAS_ESCAPE
                self._advance(2)
                continue
            self._advance(1)

        body = self._source[body_start : self._position]
        self._advance(3)
        self._current_flags |= TokenFlags.WAS_QUOTED | TokenFlags.MULTILINE
        dedented = dedent_multiline(resolve_whitespace_escapes(body), offset=body_start)
        return TokenKind.STRING, resolve_escapes(dedented, offset=body_start, version=self._version)

    def _expect_multiline_opening(self) -> None:
        if not self._consume_newline():
            raise self._error(
                LEXER_INVALID_MULTILINE_STRING,
                "Multi-line string must start with a newline after the opening quotes",
                expected="a newline",
            )

    def _lex_hash(self) -> tuple[TokenKind, object]:
        if self._raw_hashes(self._position) is not None:
            return self._lex_raw_string()

        self._advance(1)
        name_start = self._position
        while not self.is_eof and is_identifier_char(self._current_char(), self._version):
            self._advance(1)
        name = self._source[name_start : self._position]
        if name not in V2_KEYWORDS:
            raise self._error(
                LEXER_UNKNOWN_KEYWORD,
                f"Unknown keyword '#{name}'",
                expected="#true, #false, #null, #inf, #-inf or #nan",
            )
        return TokenKind.KEYWORD, V2_KEYWORDS[name]

    def _raw_hashes(self, start: int) -> int | None:
        """Number of `#` before a raw string's opening quote at `start`, if any."""
        index = start
        while index < len(self._source) and self._source[index] == "#":
            index += 1
        if index < len(self._source) and self._source[index] == '"':
            return index - start
        return None

    def _lex_raw_string(self) -> tuple[TokenKind, object]:
        hashes = self._raw_hashes(self._position) or 0
        self._advance(hashes)

        multiline = self._version == KdlVersion.V2 and self._source.startswith('"""', self._position)
        if multiline:
            self._advance(3)
            self._expect_multiline_opening()
            closing = '"""' + "#" * hashes
        else:
            self._advance(1)
            closing = '"' + "#" * hashes

        body_start = self._position
        body_end = self._source.find(closing, body_start)
        if body_end == -1:
            self._position = len(self._source)
            raise self._error(LEXER_UNTERMINATED_STRING, expected=f"closing `{closing}`")
        body = self._source[body_start:body_end]

        if not multiline and self._version == KdlVersion.V2:
            for index, ch in enumerate(body):
                if is_newline(ch):
                    self._position = body_start + index
                    raise self._error(LEXER_NEWLINE_IN_STRING, expected=f"closing `{closing}`")

        self._position = body_end + len(closing)
        self._current_flags |= TokenFlags.WAS_QUOTED
        if multiline:
            self._current_flags |= TokenFlags.MULTILINE
            return TokenKind.RAW_STRING, dedent_multiline(body, offset=body_start)
        return TokenKind.RAW_STRING, body

    def _lex_bare_word(self) -> tuple[TokenKind, object]:
        while not self.is_eof and is_identifier_char(self._current_char(), self._version):
            self._advance(1)
        text = self._source[self._current_start : self._position]

        if looks_like_number(text):
            literal = parse_number_literal(text, range=self.current_range)
            kind = TokenKind.INTEGER if literal.kind == NumberKind.INTEGER else TokenKind.FLOAT
            return kind, literal

        if self._version == KdlVersion.V1:
            if text in V1_KEYWORDS:
                return TokenKind.KEYWORD, V1_KEYWORDS[text]
        elif text in RESERVED_BARE_WORDS:
            raise self._error(
                LEXER_BARE_KEYWORD,
                f"'{text}' is a reserved keyword",
                expected=f"#{text} or a quoted string",
            )

        if not is_bare_identifier(text, self._version):
            raise self._error(LEXER_INVALID_IDENTIFIER, f"Invalid bare identifier {text!r}", expected="a quoted string")
        return TokenKind.IDENTIFIER, text

    def _check_code_points(self, kind: TokenKind) -> None:
        start = self._current_start
        if start == 0 and kind == TokenKind.WHITESPACE and self._source.startswith(BOM):
            start = 1
        offset = find_disallowed(self._source, start, self._position)
        if offset is not None:
            self._current_start = offset
            self._position = offset + 1
            raise self._error(LEXER_DISALLOWED_CODE_POINT, f"Disallowed code point U+{ord(self._source[offset]):04X}")

    def _consume_line_comment(self) -> None:
        self._advance(2)
        while not self.is_eof and not is_newline(self._current_char()):
            self._advance(1)

    def _consume_block_comment(self) -> None:
        depth = 0
        while True:
            if self.is_eof:
                raise self._error(LEXER_UNTERMINATED_COMMENT, expected="`*/`")
            if self._source.startswith("/*", self._position):
                depth += 1
                self._advance(2)
            elif self._source.startswith("*/", self._position):
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return
            else:
                self._advance(1)

    def _consume_whitespaces(self) -> None:
        while not self.is_eof and is_unicode_space(self._current_char()):
            self._advance(1)

    def _consume_newline(self) -> bool:
        if self._source.startswith("\r\n", self._position):
            self._advance(2)
            return True
        if not self.is_eof and is_newline(self._current_char()):
            self._advance(1)
            return True
        return False

    def _error(self, spec: DiagnosticSpec, message: str | None = None, *, expected: str | None = None) -> LexError:
        return LexError(spec, message, expected=expected, range=self.current_range)

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def tokenize(source: str | bytes, *, version: KdlVersion = KdlVersion.V2) -> Iterator[Token]:
    """Lazily tokenize `source`. The returned iterator is single-use."""
    if isinstance(source, bytes):
        from kdlpy.stream.adapter import decode_source

        source = decode_source(source)
    yield from Lexer(source, version=version).tokens()


def token_text(
    source: str,
    token: Token,
    null_char_on_eof: bool = False,
) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return "\0" if null_char_on_eof else ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        span = (tok.span.offset, tok.span.end)
        print(f"{i:03d} {tok.kind.name:<18} range={tok.range.as_tuple()} bytes={span} flags={tok.flags} text={text!r}")
