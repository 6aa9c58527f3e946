"""Stream adapter: the read/write capability pair the core talks to.

A read capability fills a caller-provided buffer and returns how many bytes
it wrote (0 means end of stream). A write capability takes a chunk of bytes
and returns how many it accepted; anything short of the full chunk aborts
serialization with `StreamError`. Neither side retries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
import codecs
import io
import logging
from typing import IO, Final

from kdlpy.diagnostics.codes import IO_READ_FAILED, IO_SHORT_WRITE, IO_WRITE_FAILED, VALUE_INVALID_UTF8
from kdlpy.diagnostics.errors import KdlValueError, StreamError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: Final[int] = 8192

type ReadFunc = Callable[[memoryview], int | None]
type WriteFunc = Callable[[bytes], int | None]


def decode_source(data: bytes | bytearray | memoryview) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as error:
        raise _invalid_utf8(error, 0) from error


def _invalid_utf8(error: UnicodeDecodeError, offset: int) -> KdlValueError:
    return KdlValueError(
        VALUE_INVALID_UTF8,
        f"Input is not valid UTF-8 ({error.reason} at byte {offset + error.start})",
    )


class StreamReader:
    """Pulls bytes through a `readinto`-style callable."""

    def __init__(self, read: ReadFunc, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._read = read
        self._chunk_size = chunk_size

    @classmethod
    def from_bytes(cls, data: bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> StreamReader:
        return cls.from_file(io.BytesIO(data), chunk_size=chunk_size)

    @classmethod
    def from_file(cls, file: IO[bytes] | IO[str], *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> StreamReader:
        """Adapt a binary file (via `readinto` or `read`) or a text file."""
        if isinstance(file, io.TextIOBase):
            return cls(_TextReadAdapter(file), chunk_size=chunk_size)
        readinto = getattr(file, "readinto", None)
        if readinto is not None:
            return cls(readinto, chunk_size=chunk_size)
        return cls(_ByteReadAdapter(file), chunk_size=chunk_size)  # type: ignore[arg-type]

    def chunks(self) -> Iterator[bytes]:
        """Yield chunks until the read capability reports end of stream."""
        buffer = bytearray(self._chunk_size)
        with memoryview(buffer) as view:
            while True:
                try:
                    count = self._read(view)
                except OSError as error:
                    raise StreamError(IO_READ_FAILED, f"Stream read failed: {error}") from error
                if count is None:
                    raise StreamError(IO_READ_FAILED, "Stream read returned no byte count")
                if count < 0 or count > len(view):
                    raise StreamError(IO_READ_FAILED, f"Stream read returned invalid byte count {count}")
                if count == 0:
                    return
                yield bytes(view[:count])

    def read_bytes(self) -> bytes:
        return b"".join(self.chunks())

    def read_text(self) -> str:
        """Drain the stream, decoding UTF-8 incrementally."""
        decoder = codecs.getincrementaldecoder("utf-8")()
        parts: list[str] = []
        consumed = 0
        try:
            for chunk in self.chunks():
                consumed += len(chunk)
                parts.append(decoder.decode(chunk))
            parts.append(decoder.decode(b"", final=True))
        except UnicodeDecodeError as error:
            # Offsets are relative to the decoder's buffered input.
            raise _invalid_utf8(error, consumed - len(error.object)) from error
        logger.debug("read %d bytes from stream", consumed)
        return "".join(parts)


class _ByteReadAdapter:
    """`readinto` over a file object that only has `read(n)`."""

    def __init__(self, file: IO[bytes]) -> None:
        self._file = file

    def __call__(self, buffer: memoryview) -> int:
        data = self._file.read(len(buffer))
        if not data:
            return 0
        buffer[: len(data)] = data
        return len(data)


class _TextReadAdapter:
    """`readinto` over a text file, re-encoding as UTF-8."""

    def __init__(self, file: IO[str]) -> None:
        self._file = file
        self._pending = b""

    def __call__(self, buffer: memoryview) -> int:
        if not self._pending:
            text = self._file.read(len(buffer))
            if not text:
                return 0
            self._pending = text.encode("utf-8")
        count = min(len(buffer), len(self._pending))
        buffer[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count


class StreamWriter:
    """Pushes bytes through a `write`-style callable."""

    def __init__(self, write: WriteFunc) -> None:
        self._write = write
        self._bytes_written = 0

    @classmethod
    def from_file(cls, file: IO[bytes] | IO[str]) -> StreamWriter:
        if isinstance(file, io.TextIOBase):
            return cls(_TextWriteAdapter(file))
        return cls(file.write)  # type: ignore[arg-type]

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    def write_all(self, data: bytes | str) -> None:
        """Write `data` in one call; a short or failed write raises `StreamError`."""
        payload = data.encode("utf-8") if isinstance(data, str) else data
        if not payload:
            return
        try:
            written = self._write(payload)
        except OSError as error:
            raise StreamError(IO_WRITE_FAILED, f"Stream write failed: {error}") from error
        if written is None:
            raise StreamError(IO_WRITE_FAILED, "Stream write returned no byte count")
        if written != len(payload):
            raise StreamError(IO_SHORT_WRITE, f"Short write: {written} of {len(payload)} bytes accepted")
        self._bytes_written += written


class _TextWriteAdapter:
    """Byte-counting `write` over a text file."""

    def __init__(self, file: IO[str]) -> None:
        self._file = file

    def __call__(self, data: bytes) -> int:
        text = data.decode("utf-8")
        written = self._file.write(text)
        if written == len(text):
            return len(data)
        return len(text[:written].encode("utf-8"))


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ReadFunc",
    "StreamReader",
    "StreamWriter",
    "WriteFunc",
    "decode_source",
]
