"""Lexer."""

from kdlpy.lexer.buffered_lexer import BufferedLexer
from kdlpy.lexer.lexer import Lexer, dump_tokens, token_text, tokenize
from kdlpy.lexer.tokens import EOF_TOKEN, Token, TokenFlags, TokenKind

__all__ = [
    "EOF_TOKEN",
    "BufferedLexer",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "token_text",
    "tokenize",
]
