"""Literal decoding: number literals, string escapes and multi-line dedent."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import math
import re

from kdlpy.diagnostics.codes import (
    LEXER_INVALID_ESCAPE,
    LEXER_INVALID_MULTILINE_STRING,
    VALUE_MALFORMED_NUMBER,
    VALUE_NUMBER_OVERFLOW,
)
from kdlpy.diagnostics.errors import KdlValueError, LexError
from kdlpy.syntax.chars import is_newline, is_unicode_space
from kdlpy.text import TextRange
from kdlpy.version import KdlVersion

# A `_` separator must always be followed (eventually) by a digit.
_DIGITS = r"[0-9](?:_*[0-9])*"
_DECIMAL_RE = re.compile(
    rf"(?P<sign>[+-]?)(?P<int>{_DIGITS})(?:\.(?P<frac>{_DIGITS}))?(?:[eE](?P<exp>[+-]?{_DIGITS}))?"
)
_RADIX_RE = {
    16: re.compile(r"(?P<sign>[+-]?)0x(?P<int>[0-9a-fA-F](?:_*[0-9a-fA-F])*)"),
    8: re.compile(r"(?P<sign>[+-]?)0o(?P<int>[0-7](?:_*[0-7])*)"),
    2: re.compile(r"(?P<sign>[+-]?)0b(?P<int>[01](?:_*[01])*)"),
}
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}

# Stays under the interpreter's int/str digit limit (never below 640).
DECIMAL_CHUNK_DIGITS = 600

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "b": "\b",
    "f": "\f",
}


class NumberKind(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    kind: NumberKind
    value: int | float
    radix: int = 10


def parse_number_literal(text: str, *, range: TextRange | None = None) -> NumberLiteral:
    """Decode a KDL number literal.

    Raises `KdlValueError` for malformed digit groups and for floats that
    overflow to infinity. Integers are arbitrary precision.
    """
    unsigned = text[1:] if text[:1] in ("+", "-") else text
    radix = _RADIX_PREFIXES.get(unsigned[:2])
    if radix is not None:
        match = _RADIX_RE[radix].fullmatch(text)
        if match is None:
            raise _malformed(text, range)
        magnitude = int(match.group("int").replace("_", ""), radix)
        return NumberLiteral(
            NumberKind.INTEGER,
            -magnitude if match.group("sign") == "-" else magnitude,
            radix,
        )

    match = _DECIMAL_RE.fullmatch(text)
    if match is None:
        raise _malformed(text, range)

    cleaned = text.replace("_", "")
    if match.group("frac") is None and match.group("exp") is None:
        try:
            magnitude = decimal_to_int(match.group("int").replace("_", ""))
        except ValueError as error:
            raise KdlValueError(
                VALUE_NUMBER_OVERFLOW,
                f"Integer literal with {len(cleaned)} characters cannot be converted: {error}",
                range=range,
            ) from error
        return NumberLiteral(NumberKind.INTEGER, -magnitude if match.group("sign") == "-" else magnitude)

    value = float(cleaned)
    if math.isinf(value):
        raise KdlValueError(
            VALUE_NUMBER_OVERFLOW,
            f"Float literal {text!r} is too large for a 64-bit float",
            range=range,
        )
    return NumberLiteral(NumberKind.FLOAT, value)


def _malformed(text: str, range: TextRange | None) -> KdlValueError:
    return KdlValueError(VALUE_MALFORMED_NUMBER, f"Malformed number literal {text!r}", range=range)


def decimal_to_int(digits: str) -> int:
    """`int(digits)` for unsigned decimal digits of any length."""
    if len(digits) <= DECIMAL_CHUNK_DIGITS:
        return int(digits)
    value = 0
    for start in range(0, len(digits), DECIMAL_CHUNK_DIGITS):
        chunk = digits[start : start + DECIMAL_CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def format_integer(number: int) -> str:
    """`str(number)` for integers of any size."""
    magnitude = abs(number)
    if magnitude < 10**DECIMAL_CHUNK_DIGITS:
        return str(number)
    base = 10**DECIMAL_CHUNK_DIGITS
    chunks: list[str] = []
    while magnitude >= base:
        magnitude, low = divmod(magnitude, base)
        chunks.append(str(low).zfill(DECIMAL_CHUNK_DIGITS))
    chunks.append(str(magnitude))
    sign = "-" if number < 0 else ""
    return sign + "".join(reversed(chunks))


def resolve_escapes(body: str, *, offset: int = 0, version: KdlVersion = KdlVersion.V2) -> str:
    """Process backslash escapes in a quoted string body.

    `offset` is the position of `body` in the source, used for error ranges.
    """
    if "\\" not in body:
        return body

    parts: list[str] = []
    index = 0
    length = len(body)
    while index < length:
        ch = body[index]
        if ch != "\\":
            parts.append(ch)
            index += 1
            continue

        escape_start = index
        index += 1
        if index >= length:
            raise _invalid_escape("\\", offset + escape_start, offset + index)
        ch = body[index]

        if ch in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[ch])
            index += 1
        elif ch == "/" and version == KdlVersion.V1:
            parts.append("/")
            index += 1
        elif ch == "s" and version != KdlVersion.V1:
            parts.append(" ")
            index += 1
        elif ch == "u":
            decoded, index = _unicode_escape(body, index + 1, offset, escape_start)
            parts.append(decoded)
        elif version != KdlVersion.V1 and (is_unicode_space(ch) or is_newline(ch)):
            while index < length and (is_unicode_space(body[index]) or is_newline(body[index])):
                index += 1
        else:
            raise _invalid_escape(body[escape_start : index + 1], offset + escape_start, offset + index + 1)

    return "".join(parts)


def resolve_whitespace_escapes(body: str) -> str:
    """Remove `\\` + whitespace runs, leaving every other escape in place.

    Multi-line strings apply this before dedenting and the rest of the
    escapes after it.
    """
    if "\\" not in body:
        return body

    parts: list[str] = []
    index = 0
    length = len(body)
    while index < length:
        ch = body[index]
        if ch != "\\" or index + 1 >= length:
            parts.append(ch)
            index += 1
            continue
        follow = body[index + 1]
        if is_unicode_space(follow) or is_newline(follow):
            index += 1
            while index < length and (is_unicode_space(body[index]) or is_newline(body[index])):
                index += 1
            continue
        parts.append(body[index : index + 2])
        index += 2
    return "".join(parts)


def _unicode_escape(body: str, index: int, offset: int, escape_start: int) -> tuple[str, int]:
    if index >= len(body) or body[index] != "{":
        raise _invalid_escape(body[escape_start : index + 1], offset + escape_start, offset + index)
    close = body.find("}", index + 1)
    digits = body[index + 1 : close] if close != -1 else ""
    if close == -1 or not 1 <= len(digits) <= 6 or any(c not in "0123456789abcdefABCDEF" for c in digits):
        end = close + 1 if close != -1 else len(body)
        raise _invalid_escape(body[escape_start:end], offset + escape_start, offset + end)
    code_point = int(digits, 16)
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        raise _invalid_escape(body[escape_start : close + 1], offset + escape_start, offset + close + 1)
    return chr(code_point), close + 1


def _invalid_escape(text: str, start: int, end: int) -> LexError:
    return LexError(
        LEXER_INVALID_ESCAPE,
        f"Invalid escape sequence {text!r}",
        expected="one of \\n \\r \\t \\\\ \\\" \\b \\f \\s \\u{...} or an escaped newline",
        range=TextRange(start, end),
    )


def split_lines(text: str) -> list[str]:
    """Split on every KDL newline (CRLF counts once)."""
    lines: list[str] = []
    start = 0
    index = 0
    length = len(text)
    while index < length:
        ch = text[index]
        if ch == "\r" and index + 1 < length and text[index + 1] == "\n":
            lines.append(text[start:index])
            index += 2
            start = index
            continue
        if is_newline(ch):
            lines.append(text[start:index])
            start = index + 1
        index += 1
    lines.append(text[start:])
    return lines


def dedent_multiline(body: str, *, offset: int = 0) -> str:
    """Dedent the body of a multi-line string.

    `body` is everything between the newline after the opening quotes and the
    closing quotes. Its last line holds the indentation that every other line
    must start with; whitespace-only lines become empty. Lines are joined
    with LF.
    """
    lines = split_lines(body)
    prefix = lines.pop()
    if any(not is_unicode_space(ch) for ch in prefix):
        raise LexError(
            LEXER_INVALID_MULTILINE_STRING,
            "The closing quotes of a multi-line string must be on their own line",
            range=TextRange(offset, offset + len(body)),
        )

    dedented: list[str] = []
    for line in lines:
        if all(is_unicode_space(ch) for ch in line):
            dedented.append("")
            continue
        if not line.startswith(prefix):
            raise LexError(
                LEXER_INVALID_MULTILINE_STRING,
                f"Multi-line string line {line!r} is not indented by the closing line's whitespace",
                range=TextRange(offset, offset + len(body)),
            )
        dedented.append(line[len(prefix) :])
    return "\n".join(dedented)


__all__ = [
    "NumberKind",
    "NumberLiteral",
    "decimal_to_int",
    "dedent_multiline",
    "format_integer",
    "parse_number_literal",
    "resolve_escapes",
    "resolve_whitespace_escapes",
    "split_lines",
]
