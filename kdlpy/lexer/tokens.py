"""Lexer tokens."""

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Final

from kdlpy.text import ByteSpan, TextRange, TextSize


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12
    ESCLINE = 13  # backslash line continuation, counts as whitespace

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    STRING = 21  # quoted or multi-line string
    RAW_STRING = 22
    INTEGER = 23
    FLOAT = 24
    KEYWORD = 25  # #true, #false, #null, #inf, #-inf, #nan

    # -------------------------
    # Punctuation
    # -------------------------
    LPAREN = 40  # (
    RPAREN = 41  # )
    LBRACE = 42  # {
    RBRACE = 43  # }
    EQUAL = 44  # =
    SEMICOLON = 45  # ;
    SLASHDASH = 46  # /-

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
            TokenKind.ESCLINE,
        )

    @property
    def is_string(self) -> bool:
        return self in (TokenKind.IDENTIFIER, TokenKind.STRING, TokenKind.RAW_STRING)

    @property
    def is_value(self) -> bool:
        return self.is_string or self in (TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.KEYWORD)


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    WAS_QUOTED = 1 << 1
    HAS_ESCAPE = 1 << 2
    MULTILINE = 1 << 3


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia).

    `range` indexes the decoded text; `span` is the same token as a UTF-8
    byte offset + length into the encoded input. `value` holds the decoded
    literal for strings, numbers and keywords.
    """

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE
    value: object = field(default=None, compare=False)
    span: ByteSpan = field(default=ByteSpan(0, 0), compare=False)

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)


EOF_TOKEN: Final[Token] = Token(TokenKind.EOF, TextRange.empty(TextSize.from_int(0)))
