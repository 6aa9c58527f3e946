"""`kdlpy` command line: parse a file and print it back out."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from kdlpy.diagnostics import KdlError, format_diagnostic
from kdlpy.format import EmitterOptions, print_document, run_format, write_file
from kdlpy.log import configure_logging
from kdlpy.parser import parse_file
from kdlpy.version import KdlVersion

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kdlpy", description="Parse a KDL document and print it canonically")
    parser.add_argument("file", type=Path, help="KDL file to read")
    parser.add_argument("-d", "--debug", action="store_true", help="Log parser events to stderr")
    parser.add_argument(
        "-s",
        "--sexpr",
        action="store_true",
        help="Print the document as an s-expression instead of KDL",
    )
    parser.add_argument(
        "--kdl-version",
        choices=[version.value for version in KdlVersion],
        default=KdlVersion.AUTO.value,
        help="Input grammar (default: auto)",
    )
    parser.add_argument(
        "--output-version",
        choices=[KdlVersion.V1.value, KdlVersion.V2.value],
        default=KdlVersion.V2.value,
        help="Output grammar (default: 2)",
    )
    parser.add_argument("--indent", type=int, default=4, help="Spaces per indentation level (default: 4)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 when the file is not canonically formatted",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        configure_logging(logging.DEBUG, sys.stderr)
    if args.indent < 0:
        print("kdlpy: --indent must not be negative", file=sys.stderr)
        return 2

    emitter_options = EmitterOptions(indent=" " * args.indent, version=KdlVersion(args.output_version))
    try:
        document = parse_file(args.file, version=KdlVersion(args.kdl_version))
        if args.sexpr:
            print(print_document(document))
            return 0
        if args.check:
            source = args.file.read_text(encoding="utf-8")
            result = run_format(source, document=document, emitter_options=emitter_options)
            if result.changed:
                print(f"{args.file}: not formatted", file=sys.stderr)
                return 1
            return 0
        sys.stdout.flush()
        stdout = getattr(sys.stdout, "buffer", sys.stdout)
        written = write_file(document, stdout, emitter_options)
        stdout.flush()
    except KdlError as error:
        print(f"{args.file}: {error}", file=sys.stderr)
        print(f"{args.file}: {format_diagnostic(error.diagnostic())}", file=sys.stderr)
        return 1
    except OSError as error:
        print(f"kdlpy: {error}", file=sys.stderr)
        return 1

    logger.debug("formatted %s (%d bytes)", args.file, written)
    return 0


__all__ = ["build_parser", "main"]
