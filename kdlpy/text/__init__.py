"""Text offsets and ranges."""

from kdlpy.text.text import (
    ZERO,
    ByteSpan,
    LineIndex,
    SourcePosition,
    TextRange,
    TextSize,
    Utf8Offsets,
    slice_text_range,
    utf8_length,
)

__all__ = [
    "ZERO",
    "ByteSpan",
    "LineIndex",
    "SourcePosition",
    "TextRange",
    "TextSize",
    "Utf8Offsets",
    "slice_text_range",
    "utf8_length",
]
