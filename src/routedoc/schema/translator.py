"""Translate schema nodes into OpenAPI Schema Objects.

``translate`` is total: any value it does not recognize degrades to a
permissive ``{"type": "object", "example": {}}`` schema instead of raising,
so a broken validator never stops a route from being registered.
"""

import re
from typing import Any, Callable

from routedoc.diagnostics import DEFAULT_SINK, DiagnosticSink
from routedoc.errors import UnrecognizedSchemaNode
from routedoc.schema.nodes import is_required

JSON_MEDIA_TYPE = "application/json"

# Bounds zod-style validators use to mean "no bound".
SAFE_INTEGER_MAX = 9007199254740991
SAFE_INTEGER_MIN = -9007199254740991

# format kind -> (OpenAPI format, canned example)
STRING_FORMATS = {
    "email": ("email", "user@example.com"),
    "url": ("uri", "https://example.com"),
    "uuid": ("uuid", "123e4567-e89b-12d3-a456-426614174000"),
    "datetime": ("date-time", "2023-12-25T10:30:00Z"),
    "date": ("date", "2023-12-25"),
    "time": ("time", "10:30:00"),
}

INTEGER_FORMATS = ("int", "safeint")

DATE_EXAMPLE = "2023-12-25T10:30:00Z"
INT64_MAX = 9223372036854775807


def translate(node: Any, sink: DiagnosticSink | None = None) -> dict[str, Any]:
    """Translate one schema node (recursively) into an OpenAPI Schema Object."""
    sink = sink or DEFAULT_SINK
    try:
        handler = _handler_for(node)
    except UnrecognizedSchemaNode as e:
        sink.emit("debug", f"{e}, using generic object")
        return _fallback()
    try:
        return handler(node, sink)
    except Exception as e:
        sink.emit("warning", f"Failed to translate {node.type} node: {e}")
        return _fallback()


def response_content(node: Any, sink: DiagnosticSink | None = None) -> dict[str, Any]:
    """Wrap a translated schema as response content for ``EndpointDocs.responses``."""
    return {JSON_MEDIA_TYPE: {"schema": translate(node, sink)}}


def _handler_for(node: Any) -> Callable[..., dict[str, Any]]:
    handler = _HANDLERS.get(getattr(node, "type", None))
    if handler is None:
        raise UnrecognizedSchemaNode(f"Unrecognized schema node {node!r}")
    return handler


def _fallback() -> dict[str, Any]:
    return {"type": "object", "example": {}}


def _placeholder(example: str) -> dict[str, Any]:
    return {"type": "string", "example": example}


def _string(node, sink) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string", "example": "string"}
    for check in node.checks:
        kind = check.kind
        if kind == "format":
            kind = check.value
        if kind in STRING_FORMATS:
            schema["format"], schema["example"] = STRING_FORMATS[kind]
        elif kind == "min" and _is_number(check.value):
            schema["minLength"] = check.value
        elif kind == "max" and _is_number(check.value):
            schema["maxLength"] = check.value
        elif kind == "length" and _is_number(check.value):
            schema["minLength"] = schema["maxLength"] = check.value
        elif kind == "regex":
            pattern = check.value.pattern if isinstance(check.value, re.Pattern) else check.value
            if isinstance(pattern, str):
                schema["pattern"] = pattern
    return schema


def _number(node, sink) -> dict[str, Any]:
    return _numeric({"type": "number", "example": 123.45}, node.checks)


def _integer(node, sink) -> dict[str, Any]:
    return _numeric({"type": "integer", "example": 123}, node.checks)


def _numeric(schema: dict[str, Any], checks) -> dict[str, Any]:
    for check in checks:
        kind = check.kind
        if kind == "int" or (kind == "format" and check.value in INTEGER_FORMATS):
            schema["type"] = "integer"
            schema["example"] = 123
        elif kind == "min" and _is_number(check.value):
            if check.value > SAFE_INTEGER_MIN:
                schema["minimum"] = check.value
                if not check.inclusive:
                    schema["exclusiveMinimum"] = True
        elif kind == "max" and _is_number(check.value):
            if check.value < SAFE_INTEGER_MAX:
                schema["maximum"] = check.value
                if not check.inclusive:
                    schema["exclusiveMaximum"] = True
        elif kind == "multipleOf" and _is_number(check.value):
            schema["multipleOf"] = check.value
    return schema


def _boolean(node, sink) -> dict[str, Any]:
    return {"type": "boolean", "example": True}


def _literal(node, sink) -> dict[str, Any]:
    value = node.values[0] if node.values else None
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return {"type": "boolean", "enum": [value], "example": value}
    if isinstance(value, str):
        return {"type": "string", "enum": [value], "example": value}
    if _is_number(value):
        return {"type": "number", "enum": [value], "example": value}
    return {"const": value, "example": value}


def _enum(node, sink) -> dict[str, Any]:
    values = list(node.values)
    return {"type": "string", "enum": values, "example": values[0] if values else "option"}


def _array(node, sink) -> dict[str, Any]:
    items = translate(node.element, sink) if node.element is not None else _placeholder("item")
    schema: dict[str, Any] = {"type": "array", "items": items, "example": [items.get("example")]}
    if node.exact_length is not None:
        schema["minItems"] = schema["maxItems"] = node.exact_length
    else:
        if node.min_length is not None:
            schema["minItems"] = node.min_length
        if node.max_length is not None:
            schema["maxItems"] = node.max_length
    return schema


def _object(node, sink) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for key, field in node.shape.items():
        properties[key] = translate(field, sink)
        if is_required(field):
            required.append(key)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required

    example = {key: prop["example"] for key, prop in properties.items() if "example" in prop}
    if example:
        schema["example"] = example
    return schema


def _nullable(node, sink) -> dict[str, Any]:
    return {**translate(node.inner, sink), "nullable": True}


def _default(node, sink) -> dict[str, Any]:
    schema = translate(node.inner, sink)
    try:
        default = node.resolve_default()
    except Exception as e:
        sink.emit("warning", f"Cannot resolve default value, leaving it out: {e!r}")
        return schema
    return {**schema, "default": default}


def _union(node, sink) -> dict[str, Any]:
    return {"anyOf": [translate(option, sink) for option in node.options]}


def _intersection(node, sink) -> dict[str, Any]:
    return {"allOf": [translate(node.left, sink), translate(node.right, sink)]}


def _record(node, sink) -> dict[str, Any]:
    value = translate(node.value_type, sink) if node.value_type is not None else _placeholder("value")
    return {"type": "object", "additionalProperties": value, "example": {"key": value.get("example")}}


def _tuple(node, sink) -> dict[str, Any]:
    items = [translate(item, sink) for item in node.items]
    schema: dict[str, Any] = {
        "type": "array",
        "items": items[0] if len(items) == 1 else {"anyOf": items},
        "minItems": len(items),
        "maxItems": len(items),
        "example": [item.get("example") for item in items],
    }
    if node.rest is not None:
        schema["additionalItems"] = translate(node.rest, sink)
        del schema["maxItems"]
    return schema


def _pipe(node, sink) -> dict[str, Any]:
    return translate(node.output, sink)


def _transform(node, sink) -> dict[str, Any]:
    # the output type of a transform is not statically known
    return translate(node.input, sink)


def _set(node, sink) -> dict[str, Any]:
    items = translate(node.value_type, sink)
    return {"type": "array", "items": items, "uniqueItems": True, "example": [items.get("example")]}


def _map(node, sink) -> dict[str, Any]:
    value = translate(node.value_type, sink)
    return {"type": "object", "additionalProperties": value, "example": {"key": value.get("example")}}


def _constant(schema: dict[str, Any]) -> Callable[[Any, DiagnosticSink], dict[str, Any]]:
    return lambda node, sink: dict(schema)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_HANDLERS: dict[Any, Callable[[Any, DiagnosticSink], dict[str, Any]]] = {
    "string": _string,
    "number": _number,
    "integer": _integer,
    "boolean": _boolean,
    "literal": _literal,
    "enum": _enum,
    "array": _array,
    "object": _object,
    "optional": _nullable,
    "nullable": _nullable,
    "default": _default,
    "union": _union,
    "intersection": _intersection,
    "record": _record,
    "tuple": _tuple,
    "pipe": _pipe,
    "transform": _transform,
    "any": _constant({"example": "any value"}),
    "unknown": _constant({"example": "unknown value"}),
    "void": _constant({"type": "null"}),
    "null": _constant({"type": "null", "example": None}),
    "undefined": _constant({"type": "null", "example": None}),
    "date": _constant({"type": "string", "format": "date-time", "example": DATE_EXAMPLE}),
    "bigint": _constant({"type": "integer", "format": "int64", "example": INT64_MAX}),
    "set": _set,
    "map": _map,
}
