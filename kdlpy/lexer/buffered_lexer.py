"""Buffered lexer lookahead support."""

from collections import deque

from kdlpy.lexer.lexer import Lexer
from kdlpy.lexer.tokens import Token, TokenKind


class BufferedLexer:
    """Lexer wrapper for lookahead.

    Tokens lexed while looking ahead are queued and handed out again by
    `next_token`, so the underlying lexer still runs exactly once over the
    input.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._inner = lexer
        self._lookahead: deque[Token] = deque()

    @property
    def inner(self) -> Lexer:
        return self._inner

    @property
    def source(self) -> str:
        return self._inner.source

    def next_token(self) -> Token:
        if self._lookahead:
            return self._lookahead.popleft()
        return self._inner.next_token()

    def nth_non_trivia(self, n: int) -> Token:
        """The n-th upcoming non-trivia token (1-based). Saturates at EOF."""
        if n <= 0:
            raise ValueError("n must be >= 1")

        remaining = n
        for token in self._lookahead:
            if not token.kind.is_trivia:
                remaining -= 1
                if remaining == 0 or token.kind == TokenKind.EOF:
                    return token

        while True:
            token = self._inner.next_token()
            self._lookahead.append(token)
            if token.kind.is_trivia:
                continue
            remaining -= 1
            if remaining == 0 or token.kind == TokenKind.EOF:
                return token
