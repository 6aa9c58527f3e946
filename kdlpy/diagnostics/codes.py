"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Unexpected character",
    category="lexer",
)

LEXER_DISALLOWED_CODE_POINT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_DISALLOWED_CODE_POINT",
    message="Code point is not allowed in KDL documents",
    hint="Control characters, surrogates, direction overrides and non-leading BOMs must be escaped.",
    category="lexer",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal",
    hint="Close the string with a double quote.",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated block comment",
    hint="Every `/*` needs a matching `*/`, including nested ones.",
    category="lexer",
)

LEXER_INVALID_ESCAPE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_ESCAPE",
    message="Invalid escape sequence",
    category="lexer",
)

LEXER_NEWLINE_IN_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_NEWLINE_IN_STRING",
    message="Single-line string contains a literal newline",
    hint='Use a multi-line `"""` string or escape the newline.',
    category="lexer",
)

LEXER_INVALID_MULTILINE_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_MULTILINE_STRING",
    message="Malformed multi-line string",
    hint="Start the body on a new line and indent every line at least as far as the closing line.",
    category="lexer",
)

LEXER_BARE_KEYWORD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_BARE_KEYWORD",
    message="Reserved keyword used as a bare identifier",
    hint="Use `#true`, `#false`, `#null`, `#inf`, `#-inf` or `#nan`, or quote the identifier.",
    category="lexer",
)

LEXER_UNKNOWN_KEYWORD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNKNOWN_KEYWORD",
    message="Unknown keyword",
    category="lexer",
)

LEXER_INVALID_IDENTIFIER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_IDENTIFIER",
    message="Invalid bare identifier",
    hint="Identifiers that look like numbers must be quoted.",
    category="lexer",
)

LEXER_INVALID_LINE_CONTINUATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_LINE_CONTINUATION",
    message="Line continuation must be followed by a newline",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    category="parser",
)

PARSER_EXPECTED_NODE_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_NODE_NAME",
    message="Expected a node name",
    category="parser",
)

PARSER_EXPECTED_VALUE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_VALUE",
    message="Expected a value",
    category="parser",
)

PARSER_MISSING_WHITESPACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_WHITESPACE",
    message="Node entries must be separated by whitespace",
    category="parser",
)

PARSER_EXPECTED_TERMINATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TERMINATOR",
    message="Expected a newline, `;` or end of input after node",
    category="parser",
)

PARSER_DUPLICATE_CHILDREN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DUPLICATE_CHILDREN",
    message="Node already has a children block",
    hint="Slashdash (`/-`) the extra children block or merge the blocks.",
    category="parser",
)

PARSER_UNCLOSED_BLOCK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_BLOCK",
    message="Children block is missing its closing brace",
    category="parser",
)

PARSER_NESTING_TOO_DEEP: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NESTING_TOO_DEEP",
    message="Children blocks nested deeper than the configured limit",
    hint="Raise ParserOptions.max_depth or pass max_depth=None.",
    category="parser",
)

VALUE_MALFORMED_NUMBER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALUE_MALFORMED_NUMBER",
    message="Malformed number literal",
    hint="Digit separators (`_`) must be followed by a digit.",
    category="value",
)

VALUE_NUMBER_OVERFLOW: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALUE_NUMBER_OVERFLOW",
    message="Number out of range",
    category="value",
)

VALUE_INVALID_UTF8: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALUE_INVALID_UTF8",
    message="Input is not valid UTF-8",
    category="value",
)

VALUE_TYPE_MISMATCH: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALUE_TYPE_MISMATCH",
    message="Value has the wrong type",
    category="value",
)

VALUE_UNREPRESENTABLE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALUE_UNREPRESENTABLE",
    message="Value cannot be written in the requested KDL version",
    category="value",
)

IO_READ_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="IO_READ_FAILED",
    message="Stream read failed",
    category="io",
)

IO_WRITE_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="IO_WRITE_FAILED",
    message="Stream write failed",
    category="io",
)

IO_SHORT_WRITE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="IO_SHORT_WRITE",
    message="Stream accepted fewer bytes than requested",
    hint="Retry policy belongs to the caller; wrap the writer if partial writes are expected.",
    category="io",
)

LOOKUP_NOT_FOUND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LOOKUP_NOT_FOUND",
    message="Not found",
    category="lookup",
)
