from kdlpy.format.emitter import KdlEmitter, emit, format_float, serialize, write_file
from kdlpy.format.options import EmitterOptions, EscapeMode, IdentifierMode
from kdlpy.format.runner import FormatRunResult, run_format
from kdlpy.format.sexpr import SexprPrinter, print_document

__all__ = [
    "EmitterOptions",
    "EscapeMode",
    "FormatRunResult",
    "IdentifierMode",
    "KdlEmitter",
    "SexprPrinter",
    "emit",
    "format_float",
    "print_document",
    "run_format",
    "serialize",
    "write_file",
]
