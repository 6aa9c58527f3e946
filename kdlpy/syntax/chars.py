"""Character classes of the KDL grammar."""

from __future__ import annotations

import re
from typing import Final

from kdlpy.version import KdlVersion

BOM: Final[str] = "\ufeff"

# CRLF is matched before these single-character newlines.
NEWLINE_CHARS: Final[frozenset[str]] = frozenset(
    {"\r", "\n", "\x85", "\x0b", "\x0c", "\u2028", "\u2029"}
)

UNICODE_SPACE_CHARS: Final[frozenset[str]] = frozenset(
    {
        "\t",
        " ",
        "\u00a0",
        "\u1680",
        *(chr(cp) for cp in range(0x2000, 0x200B)),
        "\u202f",
        "\u205f",
        "\u3000",
    }
)

_NON_IDENTIFIER_V2: Final[frozenset[str]] = frozenset('\\/(){};[]"#=')
_NON_IDENTIFIER_V1: Final[frozenset[str]] = frozenset('\\/(){}<>;[]=,"')

_DISALLOWED_RE: Final[re.Pattern[str]] = re.compile(
    "[\x00-\x08\x0e-\x1f\x7f\ud800-\udfff\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]"
)

V2_KEYWORDS: Final[dict[str, bool | float | None]] = {
    "true": True,
    "false": False,
    "null": None,
    "inf": float("inf"),
    "-inf": float("-inf"),
    "nan": float("nan"),
}
V1_KEYWORDS: Final[dict[str, bool | None]] = {"true": True, "false": False, "null": None}

RESERVED_BARE_WORDS: Final[frozenset[str]] = frozenset(V2_KEYWORDS)

SIGNS: Final[str] = "+-"
DIGITS: Final[str] = "0123456789"


def is_newline(ch: str) -> bool:
    return ch in NEWLINE_CHARS


def is_unicode_space(ch: str) -> bool:
    return ch in UNICODE_SPACE_CHARS


def is_disallowed(ch: str) -> bool:
    return _DISALLOWED_RE.match(ch) is not None


def find_disallowed(text: str, start: int = 0, end: int | None = None) -> int | None:
    """Offset of the first disallowed code point in `text[start:end]`."""
    match = _DISALLOWED_RE.search(text, start, len(text) if end is None else end)
    return match.start() if match is not None else None


def is_identifier_char(ch: str, version: KdlVersion = KdlVersion.V2) -> bool:
    if ch in UNICODE_SPACE_CHARS or ch in NEWLINE_CHARS or is_disallowed(ch):
        return False
    if version == KdlVersion.V1:
        return ch not in _NON_IDENTIFIER_V1
    return ch not in _NON_IDENTIFIER_V2


def looks_like_number(text: str) -> bool:
    """True when a bare word must be read as a number literal."""
    if not text:
        return False
    if text[0] in DIGITS:
        return True
    return len(text) > 1 and text[0] in SIGNS and text[1] in DIGITS


def is_bare_identifier(text: str, version: KdlVersion = KdlVersion.V2) -> bool:
    """Whether `text` may be written without quotes in the given version."""
    if not text or not all(is_identifier_char(ch, version) for ch in text):
        return False
    if looks_like_number(text):
        return False
    if version == KdlVersion.V1:
        return text not in V1_KEYWORDS
    if text in RESERVED_BARE_WORDS:
        return False
    rest = text[1:] if text[0] in SIGNS else text
    if rest.startswith("."):
        rest = rest[1:]
        # `.5` and `-.5` would read as malformed numbers.
        return not rest or rest[0] not in DIGITS
    return True
