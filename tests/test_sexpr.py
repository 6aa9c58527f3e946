from kdlpy.format import print_document
from kdlpy.parser import ParserOptions, parse


def test_print_document_structure() -> None:
    document = parse('(t)node "x" (u8)1 k=#null {\n    child 2.5 #true\n}\nlast')
    assert print_document(document) == "\n".join(
        [
            "(document",
            '  (node "node"',
            '    (type "t")',
            '    (argument (string "x"))',
            "    (argument (integer 1",
            '      (type "u8")))',
            '    (property "k" (null))',
            '    (node "child"',
            "      (argument (float 2.500000))",
            "      (argument (boolean true))))",
            '  (node "last"))',
        ]
    )


def test_print_empty_document() -> None:
    assert print_document(parse("")) == "(document)"


def test_print_document_quotes_names() -> None:
    assert print_document(parse('"a \\"b\\"" "c\\\\"')) == '(document\n  (node "a \\"b\\""\n    (argument (string "c\\\\"))))'


def test_print_deep_document() -> None:
    depth = 2_000
    text = print_document(parse("a {" * depth + "}" * depth, ParserOptions(max_depth=None)))
    assert text.count("(node ") == depth
    assert text.endswith(")" * (depth + 1))


def test_print_integer_beyond_the_str_digit_limit() -> None:
    document = parse("node 0x" + "f" * 4000)
    text = print_document(document)
    assert text.startswith('(document\n  (node "node"\n    (argument (integer ')
    assert text.endswith("5))))")
