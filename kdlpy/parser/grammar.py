"""KDL grammar routines that build the document model.

    document := node*
    node     := '/-'? type? string entry* children* terminator
    entry    := '/-'? (string '=' value | value)
    value    := type? (string | number | keyword)
    children := '/-'? '{' node* '}'

Children blocks are tracked on an explicit stack, so nesting depth costs
heap memory rather than Python recursion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from kdlpy.diagnostics.codes import (
    PARSER_DUPLICATE_CHILDREN,
    PARSER_EXPECTED_NODE_NAME,
    PARSER_EXPECTED_TOKEN,
    PARSER_EXPECTED_TERMINATOR,
    PARSER_EXPECTED_VALUE,
    PARSER_MISSING_WHITESPACE,
    PARSER_NESTING_TOO_DEEP,
    PARSER_UNCLOSED_BLOCK,
    PARSER_UNEXPECTED_TOKEN,
)
from kdlpy.diagnostics.errors import NestingDepthError
from kdlpy.lexer import Token, TokenKind
from kdlpy.model.document import KdlDocument, KdlNode
from kdlpy.model.literal import NumberLiteral
from kdlpy.model.value import KdlBoolean, KdlFloat, KdlInteger, KdlNull, KdlString, KdlValue
from kdlpy.parser.parser import Parser, ParserProgress
from kdlpy.text import TextRange, slice_text_range
from kdlpy.version import KdlVersion

logger = logging.getLogger(__name__)

NODE_END: frozenset[TokenKind] = frozenset({TokenKind.SEMICOLON, TokenKind.EOF, TokenKind.RBRACE})


@dataclass(slots=True)
class _OpenNode:
    """A node whose entries or children are still being parsed."""

    node: KdlNode
    discarded: bool
    seen_children: bool = False
    has_children: bool = False


@dataclass(slots=True)
class _Block:
    """A children block (or the document root) being filled."""

    owner: _OpenNode | None
    discarded: bool
    open_range: TextRange
    nodes: list[KdlNode] = field(default_factory=list)


def parse_document(parser: Parser) -> KdlDocument:
    document = KdlDocument()
    root = _Block(owner=None, discarded=False, open_range=parser.current_range, nodes=document.nodes)
    blocks: list[_Block] = [root]
    pending: _OpenNode | None = None
    max_depth = parser.options.max_depth

    while True:
        if pending is not None:
            opened = parse_node_tail(parser, pending)
            if opened is None:
                _finish_node(pending, blocks[-1])
                pending = None
                continue
            if max_depth is not None and len(blocks) > max_depth:
                raise parser.error(
                    PARSER_NESTING_TOO_DEEP,
                    f"Children blocks nested deeper than {max_depth} levels",
                    context=f"node {pending.node.name!r}",
                    range=opened.open_range,
                    error_type=NestingDepthError,
                )
            blocks.append(opened)
            pending = None
            continue

        if parser.at(TokenKind.EOF):
            if len(blocks) > 1:
                owner = blocks[-1].owner
                raise parser.error(
                    PARSER_UNCLOSED_BLOCK,
                    context=f"node {owner.node.name!r}" if owner is not None else None,
                    range=blocks[-1].open_range,
                )
            return document

        if parser.at(TokenKind.RBRACE):
            if len(blocks) == 1:
                raise parser.error(PARSER_UNEXPECTED_TOKEN, "Unexpected '}' outside of a children block")
            block = blocks.pop()
            parser.bump()
            owner = block.owner
            assert owner is not None
            if not block.discarded:
                owner.node.children = KdlDocument(block.nodes)
            pending = owner
            continue

        pending = parse_node_head(parser)


def parse_node_head(parser: Parser) -> _OpenNode:
    """Parse `'/-'? type? name` and open the node."""
    discarded = parser.eat(TokenKind.SLASHDASH)

    type_annotation = parse_type_annotation(parser)
    if type_annotation is not None:
        _check_after_type(parser)

    if not parser.current.is_string:
        raise parser.error(
            PARSER_EXPECTED_NODE_NAME,
            f"Expected a node name, found {parser.current.name}",
        )
    name = parser.bump()
    logger.debug("start node %r at %s", name.value, name.range.as_tuple())
    node = KdlNode(name=str(name.value), type_annotation=type_annotation)
    return _OpenNode(node=node, discarded=discarded)


def parse_node_tail(parser: Parser, pending: _OpenNode) -> _Block | None:
    """Parse entries and children blocks until the node ends.

    Returns the block to descend into when a `{` opens, or `None` once the
    node is terminated. A closing `}` is left for the caller.
    """
    progress = ParserProgress()
    while True:
        progress.assert_progressing(parser)

        if parser.eat(TokenKind.SEMICOLON):
            return None
        if parser.at(TokenKind.EOF) or parser.at(TokenKind.RBRACE) or parser.has_preceding_line_break:
            return None

        if not parser.has_preceding_trivia and not parser.at(TokenKind.LBRACE):
            raise parser.error(
                PARSER_MISSING_WHITESPACE,
                f"Expected whitespace before {parser.current.name}",
                context=f"node {pending.node.name!r}",
            )

        slashdash = parser.eat(TokenKind.SLASHDASH)

        if parser.at(TokenKind.LBRACE):
            if not slashdash and pending.has_children:
                raise parser.error(PARSER_DUPLICATE_CHILDREN, context=f"node {pending.node.name!r}")
            open_range = parser.bump().range
            pending.seen_children = True
            pending.has_children = pending.has_children or not slashdash
            return _Block(owner=pending, discarded=slashdash, open_range=open_range)

        if parser.at(TokenKind.EQUAL):
            raise parser.error(PARSER_UNEXPECTED_TOKEN, "Property keys must be strings or identifiers")
        if pending.seen_children:
            raise parser.error(
                PARSER_EXPECTED_TERMINATOR,
                "Arguments and properties must come before children blocks",
                context=f"node {pending.node.name!r}",
            )
        if slashdash and parser.at_set(NODE_END):
            raise parser.error(PARSER_EXPECTED_VALUE, "Slashdash must be followed by an entry or children block")

        key, value = parse_entry(parser)
        if slashdash:
            continue
        if key is None:
            pending.node.arguments.append(value)
        else:
            pending.node.properties[key] = value


def parse_entry(parser: Parser) -> tuple[str | None, KdlValue]:
    """Parse a property (`key=value`) or an argument. Returns `(key, value)`."""
    if not _at_property(parser):
        return None, parse_value(parser)

    key = parser.bump()
    parser.bump()
    if parser.has_preceding_line_break or (_is_v1(parser) and parser.has_preceding_trivia):
        raise parser.error(PARSER_EXPECTED_VALUE, context=f"property {key.value!r}")
    return str(key.value), parse_value(parser, context=f"property {key.value!r}")


def _at_property(parser: Parser) -> bool:
    if not parser.current.is_string or parser.nth(1) != TokenKind.EQUAL:
        return False
    if parser.has_nth_preceding_line_break(1):
        return False
    return not (_is_v1(parser) and parser.has_nth_preceding_trivia(1))


def parse_value(parser: Parser, *, context: str | None = None) -> KdlValue:
    type_annotation = parse_type_annotation(parser)
    if type_annotation is not None:
        _check_after_type(parser)

    token = parser.current_token
    if not token.kind.is_value:
        raise parser.error(PARSER_EXPECTED_VALUE, f"Expected a value, found {token.kind.name}", context=context)
    if token.kind == TokenKind.IDENTIFIER and _is_v1(parser):
        raise parser.error(
            PARSER_EXPECTED_VALUE,
            f"Bare identifier {token.value!r} is not a value in KDL 1",
            context=context,
        )
    parser.bump()
    return _value_from_token(parser, token, type_annotation)


def parse_type_annotation(parser: Parser) -> str | None:
    """Parse `'(' string ')'` when present."""
    if not parser.at(TokenKind.LPAREN):
        return None
    parser.bump()

    if not parser.current.is_string or _bad_inner_spacing(parser):
        raise parser.error(PARSER_EXPECTED_TOKEN, "Expected a type name", context="type annotation")
    name = parser.bump()
    if _bad_inner_spacing(parser):
        raise parser.error(PARSER_EXPECTED_TOKEN, "Expected ')'", context="type annotation")
    parser.expect(TokenKind.RPAREN, context="type annotation")
    return str(name.value)


def _bad_inner_spacing(parser: Parser) -> bool:
    if parser.has_preceding_line_break:
        return True
    return _is_v1(parser) and parser.has_preceding_trivia


def _check_after_type(parser: Parser) -> None:
    if _bad_inner_spacing(parser):
        raise parser.error(PARSER_UNEXPECTED_TOKEN, "Type annotation must directly precede its value or node name")


def _value_from_token(parser: Parser, token: Token, type_annotation: str | None) -> KdlValue:
    raw = slice_text_range(parser.source.text, token.range)
    match token.kind:
        case TokenKind.INTEGER:
            assert isinstance(token.value, NumberLiteral)
            return KdlInteger(int(token.value.value), type_annotation, raw=raw)
        case TokenKind.FLOAT:
            assert isinstance(token.value, NumberLiteral)
            return KdlFloat(float(token.value.value), type_annotation, raw=raw)
        case TokenKind.KEYWORD:
            keyword_raw = raw if not _is_v1(parser) else None
            if token.value is None:
                return KdlNull(type_annotation, raw=keyword_raw)
            if isinstance(token.value, bool):
                return KdlBoolean(token.value, type_annotation, raw=keyword_raw)
            return KdlFloat(float(token.value), type_annotation, raw=keyword_raw)  # type: ignore[arg-type]
        case _:
            # KDL 1 string syntax (`r"..."`, `\/`) is not valid KDL 2, so only keep v2 spellings.
            return KdlString(str(token.value), type_annotation, raw=raw if not _is_v1(parser) else None)


def _finish_node(pending: _OpenNode, block: _Block) -> None:
    node = pending.node
    logger.debug(
        "end node %r: %d arguments, %d properties, children=%s%s",
        node.name,
        len(node.arguments),
        len(node.properties),
        "none" if node.children is None else len(node.children),
        " (discarded)" if pending.discarded else "",
    )
    if not pending.discarded:
        block.nodes.append(node)


def _is_v1(parser: Parser) -> bool:
    return parser.options.version == KdlVersion.V1
