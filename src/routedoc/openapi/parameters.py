"""Turn object-shaped validators for non-body locations into parameters."""

from typing import Any

from routedoc.diagnostics import DiagnosticSink
from routedoc.errors import MalformedValidatorMetadata
from routedoc.models import Parameter
from routedoc.schema.nodes import is_required
from routedoc.schema.translator import translate

# the routing layer calls path parameters "param"
LOCATION_ALIASES = {"param": "path"}
PARAMETER_LOCATIONS = ("query", "header", "cookie", "path")


def extract_parameters(location: str, node: Any, sink: DiagnosticSink | None = None) -> list[Parameter]:
    """Build one parameter per field of an object node, in declared order.

    Raises:
        MalformedValidatorMetadata: unknown location or a non-object node.
    """
    location = LOCATION_ALIASES.get(location, location)
    if location not in PARAMETER_LOCATIONS:
        raise MalformedValidatorMetadata(f"Unknown parameter location: {location!r}")
    if getattr(node, "type", None) != "object":
        raise MalformedValidatorMetadata(
            f"{location} validator must describe an object, got {getattr(node, 'type', type(node).__name__)!r}"
        )

    return [
        Parameter(
            name=name,
            location=location,
            required=is_required(field),
            schema=translate(field, sink),
        )
        for name, field in node.shape.items()
    ]
