"""Application: route registration, mounting and document retrieval.

``Application`` records routes for an external dispatch engine and documents
them as they are registered::

    app = Application()
    app.get("/items/:itemId", validator("param", ItemPath), get_item)
    app.route("/api", other_app)
    document = app.get_openapi()

Registration and document retrieval are synchronous. A call to
``get_openapi`` must not run concurrently with a registration call; the
endpoint collection is an immutable tuple replaced on every registration, so
a retrieval always works on a consistent snapshot.
"""

from typing import Any, Callable

from routedoc.config import AppConfig
from routedoc.diagnostics import DiagnosticSink, LoggingSink
from routedoc.errors import PathMergeAmbiguity
from routedoc.middleware import openapi
from routedoc.models import ApiInfo, Endpoint, Route
from routedoc.openapi.builder import build_endpoint
from routedoc.openapi.document import assemble
from routedoc.openapi.paths import merge_mount_path, normalize_for_document

DOCUMENTED_METHODS = ("post", "get", "put", "delete", "patch", "options")


class Application:
    """A documented route collection."""

    def __init__(
        self,
        config: AppConfig | None = None,
        info: ApiInfo | None = None,
        sink: DiagnosticSink | None = None,
    ):
        self.config = config or AppConfig()
        self.info = info or ApiInfo()
        self.sink = sink or LoggingSink(debug=self.config.debug)
        self._endpoints: tuple[Endpoint, ...] = ()
        self._routes: tuple[Route, ...] = ()

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def get(self, path: str, *handlers: Any) -> "Application":
        return self.on("get", path, *handlers)

    def post(self, path: str, *handlers: Any) -> "Application":
        return self.on("post", path, *handlers)

    def put(self, path: str, *handlers: Any) -> "Application":
        return self.on("put", path, *handlers)

    def delete(self, path: str, *handlers: Any) -> "Application":
        return self.on("delete", path, *handlers)

    def patch(self, path: str, *handlers: Any) -> "Application":
        return self.on("patch", path, *handlers)

    def options(self, path: str, *handlers: Any) -> "Application":
        return self.on("options", path, *handlers)

    def on(self, method: str, path: str, *handlers: Any) -> "Application":
        """Register ``handlers`` for ``method`` and document the route."""
        self.sink.emit("debug", f"Registering {method.upper()} route: {path}", handlers=len(handlers))
        self._document(path, method, list(handlers))
        self._add_route(method.upper(), path, handlers)
        return self

    def all(self, path: str, *handlers: Any) -> "Application":
        """Register ``handlers`` for every method; each common verb is documented."""
        for method in DOCUMENTED_METHODS:
            self._document(path, method, list(handlers))
        self._add_route("ALL", path, handlers)
        return self

    def use(self, path_or_handler: str | Callable[..., Any], *handlers: Any) -> "Application":
        """Record middleware. Middleware is routed but never documented."""
        if isinstance(path_or_handler, str):
            self._add_route("*", path_or_handler, handlers)
        else:
            self._add_route("*", "*", (path_or_handler, *handlers))
        return self

    def route(self, prefix: str, child: "Application") -> "Application":
        """Mount ``child`` under ``prefix``.

        The child's endpoints are copied with merged paths at mount time; the
        child keeps its own. Routes registered on the child afterwards are
        not picked up.
        """
        mounted = []
        for endpoint in child.endpoints:
            try:
                path = merge_mount_path(prefix, endpoint.path, strict=True)
            except PathMergeAmbiguity as e:
                self.sink.emit("debug", f"Mounting at /: {e}", prefix=prefix)
                path = "/"
            mounted.append(endpoint.model_copy(update={"path": normalize_for_document(path)}, deep=True))
        self._endpoints = self._endpoints + tuple(mounted)

        routes = [
            route.model_copy(update={"path": merge_mount_path(prefix, route.path)})
            for route in child.routes
        ]
        self._routes = self._routes + tuple(routes)
        self.sink.emit("info", f"Mounted {len(mounted)} endpoints under {prefix}")
        return self

    def set_info(self, title: str | None = None, description: str | None = None, version: str | None = None) -> "Application":
        updates = {"title": title, "description": description, "version": version}
        self.info = self.info.model_copy(update={k: v for k, v in updates.items() if v is not None})
        return self

    def get_openapi(self) -> dict[str, Any]:
        """Assemble the OpenAPI document for the routes registered so far."""
        return assemble(self.info, self._endpoints, self.sink)

    def expose_openapi(
        self,
        json_path: str = "/openapi.json",
        title: str | None = None,
        description: str | None = None,
    ) -> "Application":
        """Register a hidden GET route whose handler returns the current document."""
        self.set_info(title=title, description=description)
        return self.get(json_path, openapi(hide=True), lambda *args, **kwargs: self.get_openapi())

    def _document(self, path: str, method: str, handlers: list[Any]) -> None:
        endpoint = build_endpoint(path, method, handlers, self.sink)
        if endpoint is None:
            return
        self._endpoints = self._endpoints + (endpoint,)
        self.sink.emit(
            "info",
            f"Added endpoint to OpenAPI: {endpoint.method.upper()} {endpoint.path}",
            total=len(self._endpoints),
        )

    def _add_route(self, method: str, path: str, handlers: tuple[Any, ...]) -> None:
        self._routes = self._routes + (Route(method=method, path=path, handlers=list(handlers)),)
