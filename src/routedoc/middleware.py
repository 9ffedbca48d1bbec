"""Handler entries that carry documentation metadata.

Route registration receives an ordered list of handler entries. Most are
plain callables; ``NamedMiddleware`` entries additionally carry metadata
tagged with keys such as ``openapi`` or ``requestValidation`` that the
endpoint builder reads.
"""

from typing import Any, Callable

from pydantic import BaseModel

from routedoc.diagnostics import DEFAULT_SINK, DiagnosticSink
from routedoc.models import EndpointDocs
from routedoc.schema.adapters import node_from_model
from routedoc.schema.nodes import UnknownNode

OPENAPI_KEY = "openapi"
VALIDATION_KEY = "requestValidation"

BODY_LOCATIONS = ("json", "form")
PARAMETER_LOCATIONS = ("query", "header", "cookie", "path", "param")
LOCATIONS = BODY_LOCATIONS + PARAMETER_LOCATIONS


def passthrough(context: Any, next_handler: Callable[[], Any]) -> Any:
    """Middleware that only hands over to the next handler."""
    return next_handler()


class NamedMiddleware:
    """A middleware handler with a name and metadata."""

    def __init__(self, name: str, handler: Callable[..., Any], metadata: dict[str, Any] | None = None):
        self.name = name
        self.handler = handler
        self.metadata = metadata or {}

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.handler(*args, **kwargs)

    def has_key(self, key: str) -> bool:
        return key in self.metadata.get("keys", ())

    def __repr__(self) -> str:
        return f"NamedMiddleware({self.name!r}, keys={self.metadata.get('keys', [])!r})"


def openapi(docs: EndpointDocs | None = None, **fields: Any) -> NamedMiddleware:
    """Attach documentation to a route.

    Accepts an ``EndpointDocs`` or its fields as keyword arguments::

        app.post("/tasks", openapi(summary="Create a task", tags=["tasks"]), create_task)
    """
    if docs is None:
        docs = EndpointDocs(**fields)
    return NamedMiddleware("openapi", passthrough, {"keys": [OPENAPI_KEY], "docs": docs})


def validator(
    location: str,
    schema: Any,
    handler: Callable[..., Any] | None = None,
    sink: DiagnosticSink | None = None,
) -> NamedMiddleware:
    """Attach a request validator description to a route.

    ``schema`` is a schema node or a pydantic model class. Validation itself
    is performed by ``handler`` (if any); only the metadata is documented. A
    model that cannot be converted is documented as an unknown value.
    """
    sink = sink or DEFAULT_SINK
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        try:
            schema = node_from_model(schema, sink)
        except Exception as e:
            sink.emit("warning", f"Cannot document {schema.__name__} validator: {e!r}", location=location)
            schema = UnknownNode()
    return NamedMiddleware(
        "validator",
        handler or passthrough,
        {"keys": [VALIDATION_KEY], "location": location, "schema": schema},
    )


def find_docs(handlers: list[Any]) -> EndpointDocs | None:
    """Return the documentation of the first ``openapi`` entry, if any."""
    for handler in handlers:
        if isinstance(handler, NamedMiddleware) and handler.has_key(OPENAPI_KEY):
            return handler.metadata.get("docs")
    return None


def find_validators(handlers: list[Any]) -> list[NamedMiddleware]:
    return [h for h in handlers if isinstance(h, NamedMiddleware) and h.has_key(VALIDATION_KEY)]
