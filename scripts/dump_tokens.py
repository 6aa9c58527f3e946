#!/usr/bin/env python
import argparse
from pathlib import Path

from kdlpy.lexer import Token, TokenKind, token_text, tokenize
from kdlpy.version import KdlVersion


def format_token(idx: int, token: Token, source: str) -> str:
    base = (
        f"[{idx}] {token.kind.name} "
        f"text={token_text(source, token)!r} "
        f"range={token.range.as_tuple()} "
        f"flags={token.flags!s}"
    )
    if token.kind in (TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.KEYWORD) or token.kind.is_string:
        return base + f" value={token.value!r}"
    return base


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the token stream of a KDL file")
    parser.add_argument("input", type=Path, help="KDL file to tokenize")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write tokens here instead of stdout")
    parser.add_argument("--kdl-version", choices=["1", "2"], default="2", help="Grammar version (default: 2)")
    parser.add_argument("--skip-trivia", action="store_true", help="Omit whitespace, newline and comment tokens")
    args = parser.parse_args()

    text = args.input.read_text(encoding="utf-8")
    tokens = [
        token
        for token in tokenize(text, version=KdlVersion(args.kdl_version))
        if not (args.skip_trivia and token.kind.is_trivia)
    ]
    lines = [format_token(idx, token, text) for idx, token in enumerate(tokens)]

    if args.output is None:
        print("\n".join(lines))
        return

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

    print(f"Wrote {len(tokens)} tokens to {args.output}")


if __name__ == "__main__":
    main()
