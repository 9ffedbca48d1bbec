import json

import yaml

from routedoc.diagnostics import CollectingSink
from routedoc.models import ApiInfo, Endpoint, Parameter
from routedoc.openapi.document import assemble, detect_format, dump_document


def _endpoint(method: str, path: str, **kwargs) -> Endpoint:
    return Endpoint(method=method, path=path, summary=f"{method.upper()} {path}", **kwargs)


class TestAssemble:
    def test_groups_by_path_then_method(self):
        doc = assemble(
            ApiInfo(),
            [_endpoint("get", "/tasks"), _endpoint("post", "/tasks"), _endpoint("get", "/tasks/{id}")],
        )
        assert doc["openapi"] == "3.0.3"
        assert doc["info"] == {
            "title": "Routedoc API",
            "description": "Routedoc API Documentation",
            "version": "1.0.0",
        }
        assert set(doc["paths"]) == {"/tasks", "/tasks/{id}"}
        assert set(doc["paths"]["/tasks"]) == {"get", "post"}

    def test_operation_shape(self):
        endpoint = _endpoint(
            "post",
            "/tasks",
            tags=["tasks"],
            parameters=[Parameter(name="x", location="header", required=False, schema={"type": "string"})],
            request_body={"application/json": {"schema": {"type": "object"}}},
            responses={"201": {"description": "Created"}},
        )
        operation = assemble(ApiInfo(), [endpoint])["paths"]["/tasks"]["post"]
        assert operation == {
            "summary": "POST /tasks",
            "description": "",
            "tags": ["tasks"],
            "parameters": [{"name": "x", "in": "header", "required": False, "schema": {"type": "string"}}],
            "requestBody": {"required": True, "content": {"application/json": {"schema": {"type": "object"}}}},
            "responses": {"201": {"description": "Created"}},
        }

    def test_default_response_and_no_empty_sections(self):
        operation = assemble(ApiInfo(), [_endpoint("get", "/ping")])["paths"]["/ping"]["get"]
        assert operation["responses"] == {"200": {"description": "Successful response"}}
        assert "parameters" not in operation
        assert "requestBody" not in operation

    def test_colon_paths_normalized(self):
        doc = assemble(ApiInfo(), [_endpoint("get", "/items/:itemId")])
        assert list(doc["paths"]) == ["/items/{itemId}"]

    def test_hidden_endpoints_filtered(self):
        doc = assemble(ApiInfo(), [_endpoint("get", "/secret", hidden=True)])
        assert doc["paths"] == {}

    def test_duplicate_operation_last_wins(self):
        sink = CollectingSink()
        first = _endpoint("get", "/a", description="first")
        second = _endpoint("get", "/a", description="second")
        doc = assemble(ApiInfo(), [first, second], sink)
        assert doc["paths"]["/a"]["get"]["description"] == "second"
        assert sink.messages("warning")

    def test_repeatable_and_does_not_alias(self):
        endpoints = [_endpoint("post", "/t", request_body={"application/json": {"schema": {"type": "object"}}})]
        first = assemble(ApiInfo(), endpoints)
        first["paths"]["/t"]["post"]["requestBody"]["content"]["application/json"]["schema"]["type"] = "mutated"
        second = assemble(ApiInfo(), endpoints)
        assert second["paths"]["/t"]["post"]["requestBody"]["content"]["application/json"]["schema"] == {
            "type": "object"
        }
        assert endpoints[0].request_body == {"application/json": {"schema": {"type": "object"}}}


class TestDump:
    def test_detect_format(self, tmp_path):
        assert detect_format(tmp_path / "openapi.yaml") == "yaml"
        assert detect_format(tmp_path / "openapi.YML") == "yaml"
        assert detect_format(tmp_path / "openapi.json") == "json"

    def test_json_and_yaml_agree(self):
        doc = assemble(ApiInfo(title="T"), [_endpoint("get", "/ping")])
        assert json.loads(dump_document(doc, "json")) == yaml.safe_load(dump_document(doc, "yaml"))

    def test_non_json_values_stringified(self):
        import datetime

        doc = {"paths": {"/x": {"get": {"default": datetime.date(2024, 1, 2)}}}}
        assert yaml.safe_load(dump_document(doc, "yaml"))["paths"]["/x"]["get"]["default"] == "2024-01-02"
