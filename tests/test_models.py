from routedoc.models import ApiInfo, Endpoint, EndpointDocs, Parameter, Route


class TestParameter:
    def test_create_required_param(self):
        p = Parameter(name="id", location="query", required=True, schema={"type": "integer"})
        assert p.name == "id"
        assert p.required is True
        assert p.schema_ == {"type": "integer"}

    def test_path_param_forced_required(self):
        p = Parameter(name="id", location="path", required=False)
        assert p.required is True

    def test_openapi_aliases(self):
        p = Parameter.model_validate({"name": "q", "in": "query", "required": False, "schema": {"type": "string"}})
        assert p.to_openapi() == {"name": "q", "in": "query", "required": False, "schema": {"type": "string"}}


class TestEndpoint:
    def test_create_minimal_endpoint(self):
        ep = Endpoint(method="get", path="/api/users", summary="List users")
        assert ep.description == ""
        assert ep.hidden is False
        assert ep.parameters == []
        assert ep.request_body is None

    def test_endpoint_deep_copy_is_independent(self):
        ep = Endpoint(
            method="delete",
            path="/api/users/{id}",
            summary="Delete user",
            parameters=[Parameter(name="id", location="path", required=True)],
            responses={"204": {"description": "Deleted"}},
        )
        copied = ep.model_copy(update={"path": "/v2/api/users/{id}"}, deep=True)
        copied.responses["204"]["description"] = "Gone"
        assert ep.path == "/api/users/{id}"
        assert ep.responses["204"]["description"] == "Deleted"
        assert len(copied.parameters) == 1


class TestDocs:
    def test_endpoint_docs_defaults(self):
        docs = EndpointDocs()
        assert docs.hide is False
        assert docs.tags == []
        assert docs.responses is None

    def test_api_info_defaults(self):
        assert ApiInfo().version == "1.0.0"

    def test_route_keeps_handlers(self):
        def handler(context):
            return None

        route = Route(method="GET", path="/x", handlers=[handler])
        assert route.handlers[0] is handler
