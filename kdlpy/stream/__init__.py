"""Byte stream adapter."""

from kdlpy.stream.adapter import (
    DEFAULT_CHUNK_SIZE,
    ReadFunc,
    StreamReader,
    StreamWriter,
    WriteFunc,
    decode_source,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ReadFunc",
    "StreamReader",
    "StreamWriter",
    "WriteFunc",
    "decode_source",
]
