"""Build one ``Endpoint`` per route registration.

The builder scans the handler entries of a route for a documentation entry
and any number of validator entries. Malformed validators or responses are
reported and skipped; the rest of the endpoint is still documented.
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from routedoc.diagnostics import DEFAULT_SINK, DiagnosticSink
from routedoc.errors import MalformedResponseEntry, MalformedValidatorMetadata
from routedoc.middleware import BODY_LOCATIONS, PARAMETER_LOCATIONS, find_docs, find_validators
from routedoc.models import Endpoint, EndpointDocs, Parameter, ResponseDoc
from routedoc.openapi.parameters import extract_parameters
from routedoc.openapi.paths import normalize_for_document
from routedoc.schema.nodes import ObjectNode
from routedoc.schema.translator import JSON_MEDIA_TYPE, translate

STATUS_CODE = re.compile(r"[1-5](\d\d|XX)|default")


def build_endpoint(
    path: str,
    method: str,
    handlers: list[Any],
    sink: DiagnosticSink | None = None,
) -> Endpoint | None:
    """Collect the documentation of one route.

    Returns ``None`` when the route is hidden from the document. Hiding never
    affects routing; the caller registers the route either way.
    """
    sink = sink or DEFAULT_SINK
    sink.emit("debug", f"Loading endpoint docs for {method.upper()} {path}", handlers=len(handlers))

    docs = _load_docs(handlers, sink)
    if docs.hide:
        sink.emit("debug", "Endpoint marked as hidden, skipping documentation", path=path, method=method)
        return None

    body_nodes: list[Any] = []
    parameters: list[Parameter] = []
    for entry in find_validators(handlers):
        location = entry.metadata.get("location")
        schema = entry.metadata.get("schema")
        try:
            if location is None or schema is None:
                raise MalformedValidatorMetadata(f"Validator {entry.name!r} is missing its location or schema")
            if location in BODY_LOCATIONS:
                body_nodes.append(schema)
            elif location in PARAMETER_LOCATIONS:
                parameters.extend(extract_parameters(location, schema, sink))
            else:
                raise MalformedValidatorMetadata(f"Unknown validation source: {location!r}")
        except MalformedValidatorMetadata as e:
            sink.emit("warning", f"Skipping validator: {e}", path=path, method=method)

    method = (docs.method or method).lower()
    return Endpoint(
        method=method,
        path=normalize_for_document(docs.path or path),
        summary=docs.summary or f"{method.upper()} {path}",
        description=docs.description or "",
        tags=list(docs.tags),
        parameters=_dedupe(parameters, sink),
        request_body=_request_body(body_nodes, sink),
        responses=normalize_responses(docs.responses or {}, sink),
    )


def normalize_responses(responses: Mapping[Any, Any], sink: DiagnosticSink | None = None) -> dict[str, dict[str, Any]]:
    """Normalize documented responses, dropping the ones that cannot be used."""
    sink = sink or DEFAULT_SINK
    result: dict[str, dict[str, Any]] = {}
    for status, response in responses.items():
        if response is None:
            continue
        try:
            result[str(status)] = _normalize_response(str(status), response)
        except MalformedResponseEntry as e:
            sink.emit("warning", f"Skipping response: {e}", status=str(status))
    return result


def _normalize_response(status: str, response: Any) -> dict[str, Any]:
    if not STATUS_CODE.fullmatch(status):
        raise MalformedResponseEntry(f"{status!r} is not an HTTP status code")
    if isinstance(response, ResponseDoc):
        response = response.model_dump(exclude_none=True)
    if not isinstance(response, Mapping):
        raise MalformedResponseEntry(f"response {status} is a {type(response).__name__}, not a mapping")

    entry: dict[str, Any] = {"description": response.get("description") or f"HTTP {status} response"}
    content = response.get("content")
    if content is None:
        return entry
    if not isinstance(content, Mapping):
        raise MalformedResponseEntry(f"content of response {status} is not a mapping")

    media = {
        media_type: {"schema": value["schema"]}
        for media_type, value in content.items()
        if isinstance(value, Mapping) and value.get("schema")
    }
    if media:
        entry["content"] = media
    return entry


def _load_docs(handlers: list[Any], sink: DiagnosticSink) -> EndpointDocs:
    docs = find_docs(handlers)
    if docs is None:
        return EndpointDocs()
    if isinstance(docs, EndpointDocs):
        return docs
    try:
        return EndpointDocs.model_validate(docs)
    except ValidationError as e:
        sink.emit("warning", f"Ignoring malformed endpoint docs: {e.error_count()} errors")
        return EndpointDocs()


def _request_body(nodes: list[Any], sink: DiagnosticSink) -> dict[str, Any] | None:
    if not nodes:
        return None
    if len(nodes) == 1:
        return {JSON_MEDIA_TYPE: {"schema": translate(nodes[0], sink)}}

    shape: dict[str, Any] = {}
    for node in nodes:
        if getattr(node, "type", None) != "object":
            sink.emit("warning", "Skipping non-object body validator while merging", node=repr(node))
            continue
        shape.update(node.shape)
    return {JSON_MEDIA_TYPE: {"schema": translate(ObjectNode(shape=shape), sink)}}


def _dedupe(parameters: list[Parameter], sink: DiagnosticSink) -> list[Parameter]:
    seen: dict[tuple[str, str], Parameter] = {}
    for parameter in parameters:
        key = (parameter.name, parameter.location)
        if key in seen:
            sink.emit("warning", f"Duplicate {parameter.location} parameter {parameter.name!r}, keeping the last")
        seen[key] = parameter
    return list(seen.values())
