"""Assemble endpoints into an OpenAPI document and serialize it."""

import copy
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from routedoc.diagnostics import DEFAULT_SINK, DiagnosticSink
from routedoc.models import ApiInfo, Endpoint
from routedoc.openapi.paths import normalize_for_document

OPENAPI_VERSION = "3.0.3"

DEFAULT_RESPONSES = {"200": {"description": "Successful response"}}


def assemble(info: ApiInfo, endpoints: Iterable[Endpoint], sink: DiagnosticSink | None = None) -> dict[str, Any]:
    """Fold endpoints into a full OpenAPI document.

    Hidden endpoints are skipped. When two endpoints share a path and method
    the later one wins. The endpoints are not modified and the result shares
    no mutable state with them.
    """
    sink = sink or DEFAULT_SINK
    paths: dict[str, dict[str, Any]] = {}
    for endpoint in endpoints:
        if endpoint.hidden:
            continue
        path = normalize_for_document(endpoint.path)
        operations = paths.setdefault(path, {})
        if endpoint.method in operations:
            sink.emit("warning", f"Duplicate operation {endpoint.method.upper()} {path}, keeping the last")
        operations[endpoint.method] = _operation(endpoint)

    return {
        "openapi": OPENAPI_VERSION,
        "info": info.model_dump(),
        "paths": paths,
    }


def _operation(endpoint: Endpoint) -> dict[str, Any]:
    operation: dict[str, Any] = {
        "summary": endpoint.summary,
        "description": endpoint.description,
        "tags": list(endpoint.tags),
    }
    if endpoint.parameters:
        operation["parameters"] = [copy.deepcopy(p.to_openapi()) for p in endpoint.parameters]
    if endpoint.request_body:
        operation["requestBody"] = {"required": True, "content": copy.deepcopy(endpoint.request_body)}
    operation["responses"] = copy.deepcopy(endpoint.responses or DEFAULT_RESPONSES)
    return operation


def detect_format(file_path: Path) -> str:
    """Pick ``yaml`` or ``json`` from an output file name.

    Returns: 'yaml' for .yaml/.yml files, 'json' otherwise.
    """
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def dump_document(document: dict[str, Any], fmt: str = "json") -> str:
    """Serialize a document as JSON or YAML.

    Values without a JSON form (default values such as enums or dates) are
    written as their string representation.
    """
    text = json.dumps(document, indent=2, default=str, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(json.loads(text), sort_keys=False, allow_unicode=True)
    return text + "\n"
