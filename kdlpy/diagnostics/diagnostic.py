"""Diagnostics core types."""

from dataclasses import dataclass

from kdlpy.diagnostics.codes import Severity
from kdlpy.text import TextRange


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer, parser, emitter or stream adapter."""

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
