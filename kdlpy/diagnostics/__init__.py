"""Diagnostics and errors."""

from kdlpy.diagnostics.codes import DiagnosticSpec, Severity
from kdlpy.diagnostics.diagnostic import Diagnostic
from kdlpy.diagnostics.errors import (
    KdlError,
    KdlNotFoundError,
    KdlValueError,
    LexError,
    NestingDepthError,
    ParseError,
    StreamError,
)
from kdlpy.diagnostics.report import format_diagnostic

__all__ = [
    "Diagnostic",
    "DiagnosticSpec",
    "KdlError",
    "KdlNotFoundError",
    "KdlValueError",
    "LexError",
    "NestingDepthError",
    "ParseError",
    "Severity",
    "StreamError",
    "format_diagnostic",
]
