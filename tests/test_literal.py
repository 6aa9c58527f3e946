import math

import pytest

from kdlpy.diagnostics import KdlValueError, LexError
from kdlpy.model import literal as literal_module
from kdlpy.model.literal import (
    NumberKind,
    NumberLiteral,
    decimal_to_int,
    dedent_multiline,
    format_integer,
    parse_number_literal,
    resolve_escapes,
    resolve_whitespace_escapes,
    split_lines,
)
from kdlpy.text import TextRange
from kdlpy.version import KdlVersion


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0", NumberLiteral(NumberKind.INTEGER, 0)),
        ("-17", NumberLiteral(NumberKind.INTEGER, -17)),
        ("+3", NumberLiteral(NumberKind.INTEGER, 3)),
        ("1_000_000", NumberLiteral(NumberKind.INTEGER, 1_000_000)),
        ("0xdead_BEEF", NumberLiteral(NumberKind.INTEGER, 0xDEADBEEF, 16)),
        ("-0o777", NumberLiteral(NumberKind.INTEGER, -0o777, 8)),
        ("0b1010", NumberLiteral(NumberKind.INTEGER, 10, 2)),
        ("1.5", NumberLiteral(NumberKind.FLOAT, 1.5)),
        ("1e3", NumberLiteral(NumberKind.FLOAT, 1000.0)),
        ("-2.5E-2", NumberLiteral(NumberKind.FLOAT, -0.025)),
        ("1_0.0_1", NumberLiteral(NumberKind.FLOAT, 10.01)),
    ],
)
def test_parse_number_literal(text: str, expected: NumberLiteral) -> None:
    assert parse_number_literal(text) == expected


def test_integers_are_arbitrary_precision() -> None:
    literal = parse_number_literal("123456789012345678901234567890")
    assert literal.value == 123456789012345678901234567890


@pytest.mark.parametrize("text", ["1_", "1__", "1_2_", "1._5", "1.", "0x", "0xg", "0b12", "1e", "1.0e+", "01abc"])
def test_malformed_numbers_raise_value_error(text: str) -> None:
    with pytest.raises(KdlValueError) as exc_info:
        parse_number_literal(text)
    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.code == "VALUE_MALFORMED_NUMBER"


def test_float_overflow_is_reported() -> None:
    with pytest.raises(KdlValueError) as exc_info:
        parse_number_literal("1e400")
    assert exc_info.value.code == "VALUE_NUMBER_OVERFLOW"


def test_tiny_float_underflows_to_zero() -> None:
    literal = parse_number_literal("1e-400")
    assert literal.kind == NumberKind.FLOAT
    assert literal.value == 0.0
    assert not math.isinf(literal.value)


def test_resolve_escapes() -> None:
    assert resolve_escapes(r"a\nb\tc\\d\"e\bf\fg") == 'a\nb\tc\\d"e\bf\fg'
    assert resolve_escapes(r"\u{41}\u{10FFFF}") == "A\U0010ffff"


def test_slash_escape_is_v1_only() -> None:
    assert resolve_escapes(r"a\/b", version=KdlVersion.V1) == "a/b"
    with pytest.raises(LexError):
        resolve_escapes(r"a\/b")


def test_space_escape_is_v2_only() -> None:
    assert resolve_escapes(r"a\sb") == "a b"
    with pytest.raises(LexError):
        resolve_escapes(r"a\sb", version=KdlVersion.V1)


@pytest.mark.parametrize("body", [r"\u41", r"\u{}", r"\u{1234567}", r"\u{D800}", r"\u{110000}", r"\x", "\\"])
def test_invalid_escapes(body: str) -> None:
    with pytest.raises(LexError):
        resolve_escapes(body)


def test_invalid_escape_range_uses_offset() -> None:
    with pytest.raises(LexError) as exc_info:
        resolve_escapes(r"ab\q", offset=10)
    assert exc_info.value.range is not None
    assert exc_info.value.range.as_tuple() == (12, 14)


def test_split_lines_handles_every_newline() -> None:
    assert split_lines("a\r\nb\rc\nd e\x85f") == ["a", "b", "c", "d e", "f"]


def test_dedent_multiline() -> None:
    assert dedent_multiline("  a\n    b\n  ") == "a\n  b"
    assert dedent_multiline("a\n") == "a"


def test_dedent_multiline_rejects_text_on_closing_line() -> None:
    with pytest.raises(LexError):
        dedent_multiline("  a\n  b")


def test_resolve_whitespace_escapes_leaves_other_escapes() -> None:
    assert resolve_whitespace_escapes("a \\\n   b\\\\ c\\n") == "a b\\\\ c\\n"
    assert resolve_whitespace_escapes("no escapes") == "no escapes"


def test_decimal_integers_beyond_the_str_digit_limit() -> None:
    literal = parse_number_literal("1" * 5000)
    assert literal.kind == NumberKind.INTEGER
    assert literal.value == (10**5000 - 1) // 9
    assert parse_number_literal("-" + "1_1" * 2000).value == -((10**4000 - 1) // 9)


def test_decimal_to_int_keeps_zeros_across_chunks() -> None:
    assert decimal_to_int("0" * 700 + "5") == 5
    assert decimal_to_int("1" + "0" * 1500) == 10**1500


@pytest.mark.parametrize(
    ("number", "expected"),
    [
        (0, "0"),
        (-42, "-42"),
        (10**5000, "1" + "0" * 5000),
        (-((10**5000 - 1) // 9), "-" + "1" * 5000),
        (10**1200 + 7, "1" + "0" * 1199 + "7"),
    ],
    ids=["zero", "negative", "power_of_ten", "negative_repunit", "inner_zeros"],
)
def test_format_integer(number: int, expected: str) -> None:
    assert format_integer(number) == expected


def test_integer_conversion_failure_is_a_kdl_value_error(monkeypatch) -> None:
    def refuse(digits: str) -> int:
        raise ValueError("Exceeds the limit for integer string conversion")

    monkeypatch.setattr(literal_module, "decimal_to_int", refuse)
    with pytest.raises(KdlValueError) as exc_info:
        parse_number_literal("12345", range=TextRange(5, 10))
    assert exc_info.value.code == "VALUE_NUMBER_OVERFLOW"
    assert exc_info.value.range == TextRange(5, 10)
