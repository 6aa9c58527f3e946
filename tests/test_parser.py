import math

import pytest

from kdlpy.diagnostics import KdlValueError, NestingDepthError, ParseError
from kdlpy.model import KdlBoolean, KdlDocument, KdlFloat, KdlInteger, KdlNode, KdlNull, KdlString
from kdlpy.model import literal as literal_module
from kdlpy.parser import ParserOptions, parse, parse_file, parse_stream
from kdlpy.stream import StreamReader
from kdlpy.version import KdlVersion
from tests._debug import debug_dump_document
from tests._shared_cases import INVALID_CASES, VALID_CASES, InvalidKdlCase, KdlCase, case_id, case_source


def _parse(name: str, **kwargs) -> KdlDocument:
    source = case_source(name)
    document = parse(source, **kwargs)
    debug_dump_document(name, document, source)
    return document


def _depth(document: KdlDocument) -> int:
    depth = 0
    nodes = document.nodes
    while nodes:
        depth += 1
        children = nodes[0].children
        nodes = children.nodes if children is not None else []
    return depth


@pytest.mark.parametrize("case", VALID_CASES, ids=case_id)
def test_valid_cases_parse(case: KdlCase) -> None:
    document = parse(case.source, version=case.version)
    debug_dump_document(case.name, document, case.source)
    assert isinstance(document, KdlDocument)


@pytest.mark.parametrize("case", INVALID_CASES, ids=case_id)
def test_invalid_cases_raise(case: InvalidKdlCase) -> None:
    with pytest.raises(case.error):
        parse(case.source, version=case.version)


def test_arguments_and_properties() -> None:
    node = _parse("arguments_and_properties")[0]
    assert node.name == "node"
    assert node.arguments == [KdlInteger(1), KdlFloat(2.5), KdlString("three"), KdlBoolean(True), KdlNull()]
    assert node.properties == {"key": KdlString("value")}
    assert node.children is None


def test_duplicate_property_keys_last_write_wins() -> None:
    node = _parse("duplicate_property_last_wins")[0]
    assert len(node.properties) == 1
    assert node.properties["a"] == KdlInteger(2)


def test_nested_children() -> None:
    document = _parse("nested_children")
    parent = document[0]
    assert parent.children is not None
    assert [child.name for child in parent.children] == ["child", "child"]
    second = parent.children[1]
    assert second.arguments == [KdlInteger(2)]
    assert second.children is not None
    assert second.children[0].name == "grandchild"
    assert second.children[0].children is None


def test_semicolons_terminate_nodes() -> None:
    assert [node.name for node in _parse("semicolon_terminators")] == ["a", "b", "c"]


def test_semicolon_after_children_block() -> None:
    document = parse("a { b; c }; d")
    assert [node.name for node in document] == ["a", "d"]
    assert [node.name for node in document[0].children or []] == ["b", "c"]


def test_slashdash_discards_nodes_entries_and_children() -> None:
    document = _parse("slashdash_forms")
    assert len(document) == 1
    node = document[0]
    assert node.arguments == [KdlInteger(2)]
    assert node.properties == {}
    assert node.children is not None
    assert [child.name for child in node.children] == ["kept"]


def test_slashdash_children_alone_leaves_no_children() -> None:
    node = parse("node /-{ a }")[0]
    assert node.children is None


def test_slashdash_on_nested_node() -> None:
    document = parse("a {\n    /-b {\n        c\n    }\n    d\n}\n")
    assert [child.name for child in document[0].children or []] == ["d"]


def test_slashdash_before_nothing_is_an_error() -> None:
    with pytest.raises(ParseError):
        parse("node /-")


def test_type_annotations() -> None:
    node = _parse("type_annotations")[0]
    assert node.type_annotation == "t"
    assert node.arguments == [KdlInteger(1, "u8")]
    assert node.properties["key"] == KdlString("2020-01-01", "date")


def test_type_annotation_allows_inner_whitespace_in_v2_only() -> None:
    assert parse("( t )node")[0].type_annotation == "t"
    with pytest.raises(ParseError):
        parse("( t )node", version=KdlVersion.V1)


def test_line_continuation_joins_entries() -> None:
    assert _parse("line_continuation")[0].arguments == [KdlInteger(1), KdlInteger(2)]


def test_number_forms() -> None:
    node = _parse("number_forms")[0]
    values = node.arguments
    assert values[:4] == [KdlInteger(31), KdlInteger(15), KdlInteger(5), KdlInteger(1000)]
    assert values[4] == KdlFloat(1.5e10)
    assert values[5] == KdlFloat(-2.0e-3)
    assert values[6] == KdlFloat(math.inf)
    assert values[7] == KdlFloat(-math.inf)
    assert isinstance(values[8], KdlFloat) and values[8].is_nan


def test_raw_literal_text_is_kept_as_formatting_hint() -> None:
    node = _parse("number_forms")[0]
    assert node.arguments[0].raw == "0x1F"
    assert node.arguments[0] == KdlInteger(31)


def test_empty_children_block_is_present() -> None:
    node = _parse("empty_children_block")[0]
    assert node.children is not None
    assert len(node.children) == 0


def test_children_block_without_whitespace() -> None:
    node = parse("node{ a }")[0]
    assert node.children is not None
    assert node.children[0].name == "a"


def test_bare_identifier_values_are_strings() -> None:
    node = _parse("bare_identifier_values")[0]
    assert node.arguments == [KdlString("foo")]
    assert node.properties == {"bar": KdlString("baz")}


def test_whitespace_around_equals_in_v2() -> None:
    assert _parse("whitespace_around_equals")[0].properties == {"key": KdlInteger(1)}


def test_property_value_must_be_on_the_same_line() -> None:
    with pytest.raises(ParseError):
        parse("node key=\n1")


def test_crlf_and_bom() -> None:
    assert [node.name for node in _parse("crlf_newlines")] == ["a", "b"]
    assert [node.name for node in _parse("leading_bom")] == ["node"]


def test_empty_document() -> None:
    assert parse("") == KdlDocument()
    assert parse("  // only a comment\n\n") == KdlDocument()


def test_bytes_input_is_decoded_as_utf8() -> None:
    document = parse('nöde "å"'.encode("utf-8"))
    assert document[0].name == "nöde"
    assert document[0].arguments == [KdlString("å")]


def test_v1_keywords_and_escapes() -> None:
    node = parse(case_source("v1_bare_keywords"), version=KdlVersion.V1)[0]
    assert node.arguments == [KdlBoolean(True), KdlBoolean(False), KdlNull()]
    node = parse(case_source("v1_slash_escape"), version=KdlVersion.V1)[0]
    assert node.arguments == [KdlString("a/b")]


def test_v1_reads_hash_keywords_as_identifiers() -> None:
    with pytest.raises(ParseError, match="Bare identifier"):
        parse("node #true", version=KdlVersion.V1)


def test_auto_version_falls_back_to_v1() -> None:
    document = parse("node true", version=KdlVersion.AUTO)
    assert document[0].arguments == [KdlBoolean(True)]


def test_auto_version_prefers_v2() -> None:
    document = parse("node #true", version=KdlVersion.AUTO)
    assert document[0].arguments == [KdlBoolean(True)]


def test_auto_version_reports_the_v2_error() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("node {", version=KdlVersion.AUTO)
    assert exc_info.value.code == "PARSER_UNCLOSED_BLOCK"


def test_options_and_version_are_exclusive() -> None:
    with pytest.raises(ValueError, match="Pass either options or version, not both"):
        parse("a", ParserOptions(), version=KdlVersion.V2)


def test_trailing_underscore_number_is_a_value_error() -> None:
    with pytest.raises(ValueError) as exc_info:
        parse("node 1_2_")
    assert isinstance(exc_info.value, KdlValueError)
    assert exc_info.value.position is not None
    assert str(exc_info.value).endswith("at 1:6")


def test_decimal_literal_beyond_the_str_digit_limit() -> None:
    for version in (KdlVersion.V2, KdlVersion.AUTO):
        node = parse("node " + "1" * 5000, version=version)[0]
        assert node.arguments == [KdlInteger((10**5000 - 1) // 9)]


def test_integer_conversion_failure_is_located(monkeypatch) -> None:
    def refuse(digits: str) -> int:
        raise ValueError("Exceeds the limit for integer string conversion")

    monkeypatch.setattr(literal_module, "decimal_to_int", refuse)
    for version in (KdlVersion.V2, KdlVersion.AUTO):
        with pytest.raises(KdlValueError) as exc_info:
            parse("a\nnode 12345", version=version)
        assert exc_info.value.code == "VALUE_NUMBER_OVERFLOW"
        assert str(exc_info.value).startswith("[Value] ")
        assert "at 2:6" in str(exc_info.value)


def test_multiline_whitespace_escape_value() -> None:
    node = _parse("multiline_whitespace_escape")[0]
    assert node.arguments == [KdlString("foo bar")]


def test_parse_error_message_format() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("a {\n    b\n")
    message = str(exc_info.value)
    assert message.startswith("[Parser] ")
    assert "at 1:3" in message
    assert "(in node 'a')" in message


def test_stray_closing_brace_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("a\n}")
    assert exc_info.value.position is not None
    assert (exc_info.value.position.line, exc_info.value.position.column) == (2, 1)


def test_ten_thousand_levels_hit_the_depth_limit() -> None:
    source = "a {" * 10_000 + "}" * 10_000
    with pytest.raises(NestingDepthError) as exc_info:
        parse(source)
    assert isinstance(exc_info.value, ParseError)
    assert exc_info.value.code == "PARSER_NESTING_TOO_DEEP"


def test_ten_thousand_levels_parse_without_a_limit() -> None:
    source = "a {" * 10_000 + "}" * 10_000
    document = parse(source, ParserOptions(max_depth=None))
    assert _depth(document) == 10_000


def test_depth_limit_is_inclusive() -> None:
    source = "a {" * 3 + "}" * 3
    assert _depth(parse(source, ParserOptions(max_depth=3))) == 3
    with pytest.raises(NestingDepthError):
        parse(source, ParserOptions(max_depth=2))


def test_parser_options_validate_max_depth() -> None:
    with pytest.raises(ValueError):
        ParserOptions(max_depth=0)


def test_parse_stream_reads_in_chunks() -> None:
    source = case_source("nested_children").encode("utf-8")
    document = parse_stream(StreamReader.from_bytes(source, chunk_size=3))
    assert document == parse(source)


def test_parse_file_from_path(tmp_path) -> None:
    path = tmp_path / "doc.kdl"
    path.write_text('title "Jåhkåmåhkke"\n', encoding="utf-8")
    document = parse_file(path)
    assert document == KdlDocument([KdlNode("title", [KdlString("Jåhkåmåhkke")])])
