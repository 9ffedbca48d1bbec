import json
import textwrap

import yaml
from click.testing import CliRunner

from routedoc.cli import main

SAMPLE_APP = textwrap.dedent(
    """
    from routedoc.app import Application
    from routedoc.middleware import openapi, validator
    from routedoc.schema.nodes import ObjectNode, StringNode

    def ok(context, next_handler=None):
        return {}

    app = Application()
    app.get("/items/:itemId", validator("param", ObjectNode(shape={"itemId": StringNode()})), ok)
    app.post("/items", openapi(summary="Create item"), ok)
    app.get("/hidden", openapi(hide=True), ok)

    def create_app():
        return app

    not_an_app = 42
    """
)


def _write_app(tmp_path, monkeypatch, module_name: str) -> str:
    (tmp_path / f"{module_name}.py").write_text(SAMPLE_APP)
    monkeypatch.syspath_prepend(str(tmp_path))
    return module_name


class TestCliExport:
    def test_export_json(self, tmp_path, monkeypatch):
        module = _write_app(tmp_path, monkeypatch, "cli_sample_json")
        output = tmp_path / "out" / "openapi.json"
        result = CliRunner().invoke(main, ["export", f"{module}:app", "-o", str(output)])

        assert result.exit_code == 0, result.output
        document = json.loads(output.read_text())
        assert set(document["paths"]) == {"/items/{itemId}", "/items"}
        assert "Documented 2 operations" in result.output

    def test_export_yaml_from_factory(self, tmp_path, monkeypatch):
        module = _write_app(tmp_path, monkeypatch, "cli_sample_yaml")
        output = tmp_path / "openapi.yaml"
        result = CliRunner().invoke(main, ["export", f"{module}:create_app", "-o", str(output)])

        assert result.exit_code == 0, result.output
        document = yaml.safe_load(output.read_text())
        assert document["paths"]["/items"]["post"]["summary"] == "Create item"

    def test_explicit_format_overrides_suffix(self, tmp_path, monkeypatch):
        module = _write_app(tmp_path, monkeypatch, "cli_sample_fmt")
        output = tmp_path / "openapi.txt"
        result = CliRunner().invoke(main, ["export", f"{module}:app", "-o", str(output), "--format", "yaml"])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(output.read_text())["openapi"] == "3.0.3"

    def test_bad_reference(self, tmp_path):
        result = CliRunner().invoke(main, ["export", "no_colon_here", "-o", str(tmp_path / "x.json")])
        assert result.exit_code != 0
        assert "module:attribute" in result.output

    def test_missing_module(self, tmp_path):
        result = CliRunner().invoke(main, ["export", "does_not_exist_xyz:app", "-o", str(tmp_path / "x.json")])
        assert result.exit_code != 0
        assert "Cannot import" in result.output

    def test_not_an_application(self, tmp_path, monkeypatch):
        module = _write_app(tmp_path, monkeypatch, "cli_sample_bad")
        result = CliRunner().invoke(main, ["export", f"{module}:not_an_app", "-o", str(tmp_path / "x.json")])
        assert result.exit_code != 0
        assert "is not a routedoc Application" in result.output


class TestCliPaths:
    def test_lists_operations(self, tmp_path, monkeypatch):
        module = _write_app(tmp_path, monkeypatch, "cli_sample_paths")
        result = CliRunner().invoke(main, ["--debug", "paths", f"{module}:app"])

        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert any(line.startswith("GET") and "/items/{itemId}" in line for line in lines)
        assert any("Create item" in line for line in lines)
        assert not any("/hidden" in line for line in lines)
