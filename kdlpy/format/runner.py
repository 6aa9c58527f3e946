"""Format runner: parse once, emit canonical text."""

from __future__ import annotations

from dataclasses import dataclass

from kdlpy.format.emitter import serialize
from kdlpy.format.options import EmitterOptions
from kdlpy.model.document import KdlDocument
from kdlpy.parser import ParserOptions, parse
from kdlpy.version import KdlVersion


@dataclass(frozen=True, slots=True)
class FormatRunResult:
    """Result of formatting one source text."""

    source_text: str
    document: KdlDocument
    formatted_text: str
    changed: bool


def run_format(
    text: str,
    options: ParserOptions | None = None,
    *,
    version: KdlVersion | None = None,
    emitter_options: EmitterOptions | None = None,
    document: KdlDocument | None = None,
) -> FormatRunResult:
    """Format `text`, or an already parsed `document` of it."""
    resolved_document = _resolve_document(text, options=options, version=version, document=document)
    formatted_text = serialize(resolved_document, emitter_options)
    return FormatRunResult(
        source_text=text,
        document=resolved_document,
        formatted_text=formatted_text,
        changed=formatted_text != text,
    )


def _resolve_document(
    text: str,
    *,
    options: ParserOptions | None,
    version: KdlVersion | None,
    document: KdlDocument | None,
) -> KdlDocument:
    if document is not None:
        if options is not None or version is not None:
            raise ValueError("Pass either document or options/version, not both")
        return document
    return parse(text, options=options, version=version)


__all__ = ["FormatRunResult", "run_format"]
