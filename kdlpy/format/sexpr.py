"""S-expression dump of a document, for debugging and test fixtures.

    (document
      (node "name"
        (type "t")
        (argument (string "x"))
        (property "k" (integer 1))
        (node "child")))
"""

from __future__ import annotations

from collections.abc import Iterator

from kdlpy.model.document import KdlDocument, KdlNode
from kdlpy.model.literal import format_integer
from kdlpy.model.value import KdlBoolean, KdlFloat, KdlNull, KdlValue


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class SexprPrinter:
    def __init__(self, indent: str = "  ") -> None:
        self._indent = indent

    def print_document(self, document: KdlDocument) -> str:
        lines = ["(document"]
        stack: list[tuple[Iterator[KdlNode], int]] = [(iter(document.nodes), 1)]
        while stack:
            nodes, depth = stack[-1]
            node = next(nodes, None)
            if node is None:
                # closes the parent node, or the document itself
                stack.pop()
                lines[-1] += ")"
                continue

            pad = self._indent * depth
            inner = self._indent * (depth + 1)
            lines.append(f"{pad}(node {_quote(node.name)}")
            if node.type_annotation is not None:
                lines.append(f"{inner}(type {_quote(node.type_annotation)})")
            for argument in node.arguments:
                lines.extend(self._value_lines(f"{inner}(argument ", argument, inner))
            for key, value in node.properties.items():
                lines.extend(self._value_lines(f"{inner}(property {_quote(key)} ", value, inner))

            if node.children:
                stack.append((iter(node.children.nodes), depth + 1))
            else:
                lines[-1] += ")"
        return "\n".join(lines)

    def _value_lines(self, prefix: str, value: KdlValue, pad: str) -> list[str]:
        head = f"({value.kind}" if isinstance(value, KdlNull) else f"({value.kind} {_render(value)}"
        if value.type_annotation is None:
            return [f"{prefix}{head}))"]
        return [f"{prefix}{head}", f"{pad}{self._indent}(type {_quote(value.type_annotation)})))"]


def _render(value: KdlValue) -> str:
    match value:
        case KdlBoolean():
            return "true" if value.value else "false"
        case KdlFloat():
            return f"{value.value:f}"
        case KdlNull():
            return ""
    if isinstance(value.value, str):
        return _quote(value.value)
    return format_integer(value.value)


def print_document(document: KdlDocument) -> str:
    return SexprPrinter().print_document(document)


__all__ = ["SexprPrinter", "print_document"]
