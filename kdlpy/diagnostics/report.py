"""Diagnostics helpers."""

from __future__ import annotations

from kdlpy.diagnostics.diagnostic import Diagnostic


def format_diagnostic(diagnostic: Diagnostic) -> str:
    start, end = diagnostic.range.as_tuple()
    text = f"{diagnostic.severity.upper()} {diagnostic.code} range=({start}, {end}) message={diagnostic.message}"
    if diagnostic.hint:
        text += f" hint={diagnostic.hint}"
    return text
