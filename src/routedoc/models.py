"""Data models for route documentation.

Route registration turns handler metadata into these records; the document
assembler folds them into an OpenAPI document.
"""

from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ParameterLocation = Literal["query", "header", "cookie", "path"]


class Parameter(BaseModel):
    """A single OpenAPI parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")

    @model_validator(mode="after")
    def _path_is_required(self) -> "Parameter":
        # OpenAPI requires path parameters to be required
        if self.location == "path":
            self.required = True
        return self

    def to_openapi(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResponseDoc(BaseModel):
    """A documented response: description plus media-type content."""

    description: str = ""
    content: dict[str, Any] | None = None


class EndpointDocs(BaseModel):
    """Documentation attached to a route through ``routedoc.middleware.openapi``."""

    hide: bool = False
    method: str | None = None
    path: str | None = None
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    responses: dict[str | int, Any] | None = None


class Endpoint(BaseModel):
    """Documentation and validation metadata for one registered route."""

    method: str  # lower case: get / post / put ...
    path: str  # /items/{itemId}
    summary: str
    description: str = ""
    tags: list[str] = []
    hidden: bool = False
    parameters: list[Parameter] = []
    request_body: dict[str, Any] | None = None  # {media_type: {"schema": ...}}
    responses: dict[str, dict[str, Any]] = {}  # {status_code: {description, content}}


class ApiInfo(BaseModel):
    """The ``info`` section of the generated document."""

    title: str = "Routedoc API"
    description: str = "Routedoc API Documentation"
    version: str = "1.0.0"


class Route(BaseModel):
    """A route table entry handed to the dispatch engine."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: str  # upper case, "*" for middleware registered with ``use``
    path: str
    handlers: list[Callable[..., Any] | Any] = []
