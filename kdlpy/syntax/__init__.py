"""Character classes and identifier rules shared by the lexer and emitter."""

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

__all__ = [
    "BOM",
    "RESERVED_BARE_WORDS",
    "V1_KEYWORDS",
    "V2_KEYWORDS",
    "find_disallowed",
    "is_bare_identifier",
    "is_disallowed",
    "is_identifier_char",
    "is_newline",
    "is_unicode_space",
    "looks_like_number",
]
