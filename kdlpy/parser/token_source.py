"""Token source that hides trivia from the parser."""

from kdlpy.lexer import EOF_TOKEN, BufferedLexer, Token, TokenKind
from kdlpy.text import TextRange, TextSize


class TokenSource:
    """Bridge between lexer and parser that strips trivia.

    Grammar decisions that depend on whitespace (entry separation, newline
    terminators) use `has_preceding_trivia` and `has_preceding_line_break`.
    """

    def __init__(self, lexer: BufferedLexer) -> None:
        self._lexer = lexer
        self._current: Token = EOF_TOKEN
        self._preceding_line_break = False
        self._current_has_preceding_trivia = False
        self._next_non_trivia_token()

    @property
    def current(self) -> TokenKind:
        return self._current.kind

    @property
    def current_token(self) -> Token:
        return self._current

    @property
    def current_range(self) -> TextRange:
        return self._current.range

    @property
    def text(self) -> str:
        return self._lexer.source

    @property
    def position(self) -> TextSize:
        return self._current.range.start

    @property
    def has_preceding_line_break(self) -> bool:
        return self._preceding_line_break

    @property
    def has_preceding_trivia(self) -> bool:
        return self._current_has_preceding_trivia

    def bump(self) -> None:
        if self._current.kind != TokenKind.EOF:
            self._next_non_trivia_token()

    def nth(self, n: int) -> TokenKind:
        return self.nth_token(n).kind

    def nth_token(self, n: int) -> Token:
        if n == 0:
            return self._current
        return self._lexer.nth_non_trivia(n)

    def has_nth_preceding_line_break(self, n: int) -> bool:
        if n == 0:
            return self._preceding_line_break
        return self._lexer.nth_non_trivia(n).has_preceding_line_break()

    def has_nth_preceding_trivia(self, n: int) -> bool:
        if n == 0:
            return self.has_preceding_trivia
        next_range = self.nth_token(n).range
        prev_range = self.nth_token(n - 1).range
        return next_range.start > prev_range.end

    def _next_non_trivia_token(self) -> None:
        self._preceding_line_break = False
        saw_trivia = False

        while True:
            token = self._lexer.next_token()
            if token.kind.is_trivia:
                saw_trivia = True
                if token.kind == TokenKind.NEWLINE:
                    self._preceding_line_break = True
                continue

            self._current = token
            self._current_has_preceding_trivia = saw_trivia
            break
