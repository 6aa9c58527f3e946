from bisect import bisect_right
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class TextSize:
    """Opaque measure of text length / index into text."""

    value: int

    def __post_init__(self):
        if self.value < 0:
            raise ValueError("TextSize cannot be negative")

    @staticmethod
    def of(text: str) -> "TextSize":
        """Create a TextSize from a string's length."""
        return TextSize(len(text))

    @staticmethod
    def from_int(value: int) -> "TextSize":
        return TextSize(value)

    def to_int(self) -> int:
        return self.value

    def __add__(self, other: "TextSize") -> "TextSize":
        return TextSize(self.value + other.value)

    def __repr__(self) -> str:
        return f"TextSize({self.value})"


ZERO: Final[TextSize] = TextSize(0)
"""Constant representing a TextSize of zero."""


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """
    Half-open range [start, end) in text, represented by character offsets.

    Invariant:
    - 0 <= start <= end
    """

    _start: int
    _end: int

    def __post_init__(self):
        if self._start < 0 or self._end < 0:
            raise ValueError("TextRange positions cannot be negative")
        if self._start > self._end:
            raise ValueError("TextRange invariant violated: start > end")

    @staticmethod
    def new(start: TextSize, end: TextSize) -> "TextRange":
        return TextRange(start.value, end.value)

    @staticmethod
    def at(offset: TextSize, length: TextSize) -> "TextRange":
        """Create a TextRange at offset with given length."""
        return TextRange(offset.value, offset.value + length.value)

    @staticmethod
    def empty(offset: TextSize) -> "TextRange":
        return TextRange(offset.value, offset.value)

    @staticmethod
    def _from_offsets(start: int, end: int) -> "TextRange":
        return TextRange(start, end)

    @property
    def start(self) -> TextSize:
        return TextSize(self._start)

    @property
    def end(self) -> TextSize:
        return TextSize(self._end)

    def len(self) -> TextSize:
        """Get the length of the range as a TextSize."""
        return TextSize(self._end - self._start)

    def is_empty(self) -> bool:
        return self._start == self._end

    def as_tuple(self) -> tuple[int, int]:
        """Get the range as a tuple of (start, end) integers."""
        return (self._start, self._end)

    def cover(self, other: "TextRange") -> "TextRange":
        """Get the minimal range that covers both this range and another range."""
        start = min(self._start, other._start)
        end = max(self._end, other._end)
        return TextRange._from_offsets(start, end)

    def __repr__(self) -> str:
        return f"TextRange({self._start}, {self._end})"


def slice_text_range(source: str, range: TextRange) -> str:
    """Get the substring of the source text covered by the given TextRange.

    Coord system matches python string indices so we can just do this.
    """
    return source[range.start.value : range.end.value]


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """1-based line/column of a character offset, plus its UTF-8 byte offset."""

    line: int
    column: int
    offset: int
    byte_offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class LineIndex:
    """Maps character offsets to line/column pairs.

    Only CRLF, CR and LF start a new line here; the rarer KDL newline
    characters are counted as columns, which is good enough for messages.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        index = 0
        length = len(text)
        while index < length:
            ch = text[index]
            if ch == "\r" and index + 1 < length and text[index + 1] == "\n":
                index += 2
                starts.append(index)
                continue
            index += 1
            if ch == "\n" or ch == "\r":
                starts.append(index)
        self._line_starts = starts

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position(self, offset: int | TextSize) -> SourcePosition:
        raw = offset.value if isinstance(offset, TextSize) else offset
        line = bisect_right(self._line_starts, raw) - 1
        return SourcePosition(
            line=line + 1,
            column=raw - self._line_starts[line] + 1,
            offset=raw,
            byte_offset=utf8_length(self._text[:raw]),
        )


def utf8_length(text: str) -> int:
    """Encoded size of `text` in bytes."""
    if text.isascii():
        return len(text)
    return len(text.encode("utf-8", "surrogatepass"))


@dataclass(frozen=True, slots=True)
class ByteSpan:
    """A token's location in the UTF-8 encoded input: byte offset + length."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def __repr__(self) -> str:
        return f"ByteSpan({self.offset}, {self.length})"


class Utf8Offsets:
    """Converts character offsets to UTF-8 byte offsets.

    Lookups are incremental from the previous one, so a lexer asking for
    increasing offsets pays for each character once.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._ascii = text.isascii()
        self._char_offset = 0
        self._byte_offset = 0

    def byte_offset(self, offset: int) -> int:
        if self._ascii:
            return offset
        if offset < self._char_offset:
            self._char_offset = 0
            self._byte_offset = 0
        self._byte_offset += utf8_length(self._text[self._char_offset : offset])
        self._char_offset = offset
        return self._byte_offset

    def span(self, range: TextRange) -> ByteSpan:
        start = self.byte_offset(range.start.value)
        return ByteSpan(start, self.byte_offset(range.end.value) - start)
