"""Map pydantic models and type hints into schema nodes.

This is the single boundary between a concrete validation library and the
translator. Constraints found in field metadata (``annotated_types`` markers
or pydantic's own metadata) are flattened into ordered ``Check`` lists.
"""

import datetime
import enum
import types
import uuid
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import AnyUrl, BaseModel, EmailStr
from pydantic.fields import FieldInfo

from routedoc.diagnostics import DEFAULT_SINK, DiagnosticSink
from routedoc.schema.nodes import (
    AnyNode,
    ArrayNode,
    BooleanNode,
    Check,
    DateNode,
    DefaultNode,
    EnumNode,
    IntegerNode,
    LiteralNode,
    Node,
    NullableNode,
    NullNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    RecordNode,
    SetNode,
    StringNode,
    TupleNode,
    UnionNode,
    UnknownNode,
)

def node_from_model(model: type[BaseModel], sink: DiagnosticSink | None = None) -> ObjectNode:
    """Build an object node from a pydantic model class.

    Field aliases become property names. A field defaulting to ``None`` is
    optional; any other default is carried as a default node. A model that
    refers back to itself is documented as a plain object at the point of
    recursion.
    """
    return _from_model(model, sink or DEFAULT_SINK, frozenset())


def node_from_annotation(tp: Any, metadata: Sequence[Any] = (), sink: DiagnosticSink | None = None) -> Node:
    """Build a schema node from a type hint plus optional constraint metadata."""
    return _from_annotation(tp, metadata, sink or DEFAULT_SINK, frozenset())


def _from_model(model: type[BaseModel], sink: DiagnosticSink, walking: frozenset) -> ObjectNode:
    if model in walking:
        sink.emit("debug", f"Recursive reference to {model.__name__}, documenting as object")
        return ObjectNode()
    walking = walking | {model}

    shape: dict[str, Node] = {}
    for name, field in model.model_fields.items():
        node = _from_annotation(field.annotation, field.metadata, sink, walking)
        if not field.is_required():
            node = _wrap_default(node, field)
        shape[field.alias or name] = node
    return ObjectNode(shape=shape)


def _from_annotation(tp: Any, metadata: Sequence[Any], sink: DiagnosticSink, walking: frozenset) -> Node:
    def walk(arg: Any, meta: Sequence[Any] = ()) -> Node:
        return _from_annotation(arg, meta, sink, walking)

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        return walk(args[0], [*metadata, *_expand_metadata(tp.__metadata__)])

    if tp is Any:
        return AnyNode()
    if tp is None or tp is type(None):
        return NullNode()

    if origin is Literal:
        return LiteralNode(values=list(args))

    if origin is Union or origin is types.UnionType:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1:
            inner = walk(non_none[0], metadata)
        else:
            inner = UnionNode(options=[walk(a) for a in non_none])
        if len(non_none) < len(args):
            return NullableNode(inner=inner)
        return inner

    if origin in (list, Sequence) or tp in (list, Sequence):
        element = walk(args[0]) if args else None
        return ArrayNode(element=element, **_length_bounds(metadata))

    if origin in (set, frozenset) or tp in (set, frozenset):
        return SetNode(value_type=walk(args[0]) if args else AnyNode())

    if origin is tuple or tp is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return ArrayNode(element=walk(args[0]), **_length_bounds(metadata))
        if not args:
            return ArrayNode(**_length_bounds(metadata))
        return TupleNode(items=[walk(a) for a in args])

    if origin in (dict, Mapping) or tp in (dict, Mapping):
        return RecordNode(value_type=walk(args[1]) if len(args) == 2 else None)

    if not isinstance(tp, type):
        sink.emit("debug", f"Unsupported annotation {tp!r}, documenting as unknown")
        return UnknownNode()

    if issubclass(tp, BaseModel):
        return _from_model(tp, sink, walking)
    if issubclass(tp, enum.Enum):
        return _enum_node(tp)
    # bool before int: bool is a subclass of int
    if issubclass(tp, bool):
        return BooleanNode()
    if issubclass(tp, int):
        return IntegerNode(checks=_numeric_checks(metadata))
    if issubclass(tp, (float, Decimal)):
        return NumberNode(checks=_numeric_checks(metadata))
    if issubclass(tp, datetime.datetime):
        return DateNode()
    if issubclass(tp, datetime.date):
        return StringNode(checks=[Check(kind="date"), *_string_checks(metadata)])
    if issubclass(tp, datetime.time):
        return StringNode(checks=[Check(kind="time"), *_string_checks(metadata)])
    if issubclass(tp, uuid.UUID):
        return StringNode(checks=[Check(kind="uuid")])
    if issubclass(tp, AnyUrl):
        return StringNode(checks=[Check(kind="url"), *_string_checks(metadata)])
    if issubclass(tp, EmailStr):
        return StringNode(checks=[Check(kind="email"), *_string_checks(metadata)])
    if issubclass(tp, (str, bytes)):
        return StringNode(checks=_string_checks(metadata))

    sink.emit("debug", f"Unsupported type {tp.__name__}, documenting as unknown")
    return UnknownNode()


def _wrap_default(node: Node, field) -> Node:
    if field.default_factory is not None:
        return DefaultNode(inner=node, default=field.default_factory)
    if field.default is None:
        return OptionalNode(inner=node)
    return DefaultNode(inner=node, default=field.default)


def _expand_metadata(items: Sequence[Any]) -> list[Any]:
    # Field(...) inside Annotated keeps its constraints in its own metadata
    expanded = []
    for item in items:
        if isinstance(item, FieldInfo):
            expanded.extend(item.metadata)
        else:
            expanded.append(item)
    return expanded


def _enum_node(tp: type[enum.Enum]) -> Node:
    values = [member.value for member in tp]
    if all(isinstance(v, str) for v in values):
        return EnumNode(values=values)
    return UnionNode(options=[LiteralNode(values=[v]) for v in values])


def _string_checks(metadata: Sequence[Any]) -> list[Check]:
    checks = []
    for item in metadata:
        if getattr(item, "min_length", None) is not None:
            checks.append(Check(kind="min", value=item.min_length))
        if getattr(item, "max_length", None) is not None:
            checks.append(Check(kind="max", value=item.max_length))
        if getattr(item, "pattern", None) is not None:
            checks.append(Check(kind="regex", value=item.pattern))
    return checks


def _numeric_checks(metadata: Sequence[Any]) -> list[Check]:
    checks = []
    for item in metadata:
        if getattr(item, "ge", None) is not None:
            checks.append(Check(kind="min", value=item.ge))
        if getattr(item, "gt", None) is not None:
            checks.append(Check(kind="min", value=item.gt, inclusive=False))
        if getattr(item, "le", None) is not None:
            checks.append(Check(kind="max", value=item.le))
        if getattr(item, "lt", None) is not None:
            checks.append(Check(kind="max", value=item.lt, inclusive=False))
        if getattr(item, "multiple_of", None) is not None:
            checks.append(Check(kind="multipleOf", value=item.multiple_of))
    return checks


def _length_bounds(metadata: Sequence[Any]) -> dict[str, int]:
    bounds = {}
    for item in metadata:
        if getattr(item, "min_length", None) is not None:
            bounds["min_length"] = item.min_length
        if getattr(item, "max_length", None) is not None:
            bounds["max_length"] = item.max_length
    return bounds
