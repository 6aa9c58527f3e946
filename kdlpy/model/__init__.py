"""Document model: values, nodes, accessors and literal decoding."""

from kdlpy.model.access import (
    as_bool,
    as_float,
    as_int,
    as_int64,
    as_null,
    as_string,
    cast_all,
    get,
    get_kv,
    set_entry,
)
from kdlpy.model.document import KdlDocument, KdlKeyValue, KdlNode
from kdlpy.model.literal import NumberKind, NumberLiteral, parse_number_literal
from kdlpy.model.marshal import KdlMarshaller, KdlUnmarshaller, marshal_all, unmarshal_all
from kdlpy.model.value import (
    VALUE_TYPES,
    IntoValue,
    KdlBoolean,
    KdlFloat,
    KdlInteger,
    KdlNull,
    KdlString,
    KdlValue,
    is_value,
    to_value,
)

__all__ = [
    "VALUE_TYPES",
    "IntoValue",
    "KdlBoolean",
    "KdlDocument",
    "KdlFloat",
    "KdlInteger",
    "KdlKeyValue",
    "KdlMarshaller",
    "KdlNode",
    "KdlNull",
    "KdlString",
    "KdlUnmarshaller",
    "KdlValue",
    "NumberKind",
    "NumberLiteral",
    "as_bool",
    "as_float",
    "as_int",
    "as_int64",
    "as_null",
    "as_string",
    "cast_all",
    "get",
    "get_kv",
    "is_value",
    "marshal_all",
    "parse_number_literal",
    "set_entry",
    "to_value",
    "unmarshal_all",
]
