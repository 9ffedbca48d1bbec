"""Validation schema nodes.

A closed tagged union describing one node of a validator tree. Adapters
(see ``routedoc.schema.adapters``) map a concrete validation library into
these models once; the translator only ever sees this representation.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Check(BaseModel):
    """A single constraint attached to a string or number node."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: str  # min / max / length / format / regex / int / multipleOf / email ...
    value: Any = None
    inclusive: bool = True


class Node(BaseModel):
    """Base for every schema node. Nodes are read-only."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def optional(self) -> "OptionalNode":
        return OptionalNode(inner=self)

    def nullable(self) -> "NullableNode":
        return NullableNode(inner=self)

    def with_default(self, default: Any) -> "DefaultNode":
        """Wrap in a default node; ``default`` may be a value or a zero-argument factory."""
        return DefaultNode(inner=self, default=default)


class StringNode(Node):
    type: Literal["string"] = "string"
    checks: list[Check] = []


class NumberNode(Node):
    type: Literal["number"] = "number"
    checks: list[Check] = []


class IntegerNode(Node):
    type: Literal["integer"] = "integer"
    checks: list[Check] = []


class BooleanNode(Node):
    type: Literal["boolean"] = "boolean"


class LiteralNode(Node):
    type: Literal["literal"] = "literal"
    values: list[Any] = []


class EnumNode(Node):
    type: Literal["enum"] = "enum"
    values: list[str] = []


class ArrayNode(Node):
    type: Literal["array"] = "array"
    element: "SchemaNode | None" = None
    min_length: int | None = None
    max_length: int | None = None
    exact_length: int | None = None


class ObjectNode(Node):
    type: Literal["object"] = "object"
    shape: dict[str, "SchemaNode"] = {}


class OptionalNode(Node):
    type: Literal["optional"] = "optional"
    inner: "SchemaNode"


class NullableNode(Node):
    type: Literal["nullable"] = "nullable"
    inner: "SchemaNode"


class DefaultNode(Node):
    type: Literal["default"] = "default"
    inner: "SchemaNode"
    default: Any = None

    def resolve_default(self) -> Any:
        if callable(self.default):
            return self.default()
        return self.default


class UnionNode(Node):
    type: Literal["union"] = "union"
    options: list["SchemaNode"] = []


class IntersectionNode(Node):
    type: Literal["intersection"] = "intersection"
    left: "SchemaNode"
    right: "SchemaNode"


class RecordNode(Node):
    type: Literal["record"] = "record"
    value_type: "SchemaNode | None" = None


class TupleNode(Node):
    type: Literal["tuple"] = "tuple"
    items: list["SchemaNode"] = []
    rest: "SchemaNode | None" = None


class PipeNode(Node):
    type: Literal["pipe"] = "pipe"
    input: "SchemaNode"
    output: "SchemaNode"


class TransformNode(Node):
    type: Literal["transform"] = "transform"
    input: "SchemaNode"


class AnyNode(Node):
    type: Literal["any"] = "any"


class UnknownNode(Node):
    type: Literal["unknown"] = "unknown"


class VoidNode(Node):
    type: Literal["void"] = "void"


class NullNode(Node):
    type: Literal["null"] = "null"


class UndefinedNode(Node):
    type: Literal["undefined"] = "undefined"


class DateNode(Node):
    type: Literal["date"] = "date"


class BigIntNode(Node):
    type: Literal["bigint"] = "bigint"


class SetNode(Node):
    type: Literal["set"] = "set"
    value_type: "SchemaNode"


class MapNode(Node):
    type: Literal["map"] = "map"
    key_type: "SchemaNode | None" = None
    value_type: "SchemaNode"


SchemaNode = Annotated[
    Union[
        StringNode,
        NumberNode,
        IntegerNode,
        BooleanNode,
        LiteralNode,
        EnumNode,
        ArrayNode,
        ObjectNode,
        OptionalNode,
        NullableNode,
        DefaultNode,
        UnionNode,
        IntersectionNode,
        RecordNode,
        TupleNode,
        PipeNode,
        TransformNode,
        AnyNode,
        UnknownNode,
        VoidNode,
        NullNode,
        UndefinedNode,
        DateNode,
        BigIntNode,
        SetNode,
        MapNode,
    ],
    Field(discriminator="type"),
]

# Tags whose field is not required inside an object shape.
NOT_REQUIRED_TAGS = frozenset({"optional", "default"})

for _model in (
    ArrayNode,
    ObjectNode,
    OptionalNode,
    NullableNode,
    DefaultNode,
    UnionNode,
    IntersectionNode,
    RecordNode,
    TupleNode,
    PipeNode,
    TransformNode,
    SetNode,
    MapNode,
):
    _model.model_rebuild()


def is_required(node: Any) -> bool:
    """Return whether a shape field holding ``node`` is required."""
    return getattr(node, "type", None) not in NOT_REQUIRED_TAGS
