"""Exception taxonomy.

Every failure raised by kdlpy is a `KdlError` carrying the `DiagnosticSpec`
that describes it. Messages follow the format

    [Component] message at line:col

The value and stream errors also subclass the matching builtin exceptions
(`ValueError`, `OSError`) so callers can catch them without importing kdlpy.
"""

from __future__ import annotations

from typing import ClassVar, Self

from kdlpy.diagnostics.codes import DiagnosticSpec
from kdlpy.diagnostics.diagnostic import Diagnostic
from kdlpy.text import ZERO, LineIndex, SourcePosition, TextRange


class KdlError(Exception):
    component: ClassVar[str] = "KDL"

    def __init__(
        self,
        spec: DiagnosticSpec,
        message: str | None = None,
        *,
        range: TextRange | None = None,
        position: SourcePosition | None = None,
    ) -> None:
        self.spec = spec
        self.message = message if message is not None else spec.message
        self.range = range
        self.position = position
        super().__init__(self._format())

    @property
    def code(self) -> str:
        return self.spec.code

    def _format(self) -> str:
        location = f" at {self.position}" if self.position is not None else ""
        return f"[{self.component}] {self.message}{location}"

    def locate(self, index: LineIndex) -> Self:
        """Fill in the line/column from the error range, once."""
        if self.position is None and self.range is not None:
            self.position = index.position(self.range.start)
            self.args = (self._format(),)
        return self

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(
            code=self.spec.code,
            message=self.message,
            range=self.range if self.range is not None else TextRange.empty(ZERO),
            severity=self.spec.severity,
            hint=self.spec.hint,
            category=self.spec.category,
        )


class LexError(KdlError):
    """Malformed token."""

    component = "Lexer"

    def __init__(
        self,
        spec: DiagnosticSpec,
        message: str | None = None,
        *,
        expected: str | None = None,
        range: TextRange | None = None,
        position: SourcePosition | None = None,
    ) -> None:
        self.expected = expected
        super().__init__(spec, message, range=range, position=position)

    def _format(self) -> str:
        text = super()._format()
        if self.expected is not None:
            text += f". Expected: {self.expected}"
        return text


class ParseError(KdlError):
    """Malformed document structure."""

    component = "Parser"

    def __init__(
        self,
        spec: DiagnosticSpec,
        message: str | None = None,
        *,
        context: str | None = None,
        range: TextRange | None = None,
        position: SourcePosition | None = None,
    ) -> None:
        self.context = context
        super().__init__(spec, message, range=range, position=position)

    def _format(self) -> str:
        text = super()._format()
        if self.context is not None:
            text += f" (in {self.context})"
        return text


class NestingDepthError(ParseError):
    """Children blocks nest deeper than `ParserOptions.max_depth`."""


class KdlValueError(KdlError, ValueError):
    """Numeric, encoding or type conversion failure."""

    component = "Value"


class StreamError(KdlError, OSError):
    """Stream read/write failure, including short writes."""

    component = "Stream"


class KdlNotFoundError(KdlError, LookupError):
    component = "Lookup"


__all__ = [
    "KdlError",
    "KdlNotFoundError",
    "KdlValueError",
    "LexError",
    "NestingDepthError",
    "ParseError",
    "StreamError",
]
