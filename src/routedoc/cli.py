"""CLI entry point for routedoc."""

import importlib
import logging
import sys
from pathlib import Path

import click

from routedoc.app import Application
from routedoc.openapi.document import detect_format, dump_document


def _load_app(app_ref: str) -> Application:
    """Import ``module:attribute`` and return the application it names.

    The attribute may also be a zero-argument factory returning an application.
    """
    module_name, _, attr = app_ref.partition(":")
    if not module_name or not attr:
        raise click.ClickException(f"Expected 'module:attribute', got {app_ref!r}")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Cannot import {module_name!r}: {e}") from e

    target = getattr(module, attr, None)
    if callable(target) and not isinstance(target, Application):
        target = target()
    if not isinstance(target, Application):
        raise click.ClickException(f"{app_ref!r} is not a routedoc Application")
    return target


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(debug: bool):
    """routedoc: export OpenAPI documents from documented route collections."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("app_ref")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Document format.")
def export(app_ref: str, output: Path, fmt: str):
    """Write the OpenAPI document of APP_REF (module:attribute) to a file."""
    if fmt == "auto":
        fmt = detect_format(output)

    app = _load_app(app_ref)
    document = app.get_openapi()

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_document(document, fmt), encoding="utf-8")
    click.echo(f"Documented {sum(len(ops) for ops in document['paths'].values())} operations in {output}")


@main.command()
@click.argument("app_ref")
def paths(app_ref: str):
    """List the documented operations of APP_REF."""
    document = _load_app(app_ref).get_openapi()
    for path, operations in document["paths"].items():
        for method, operation in operations.items():
            click.echo(f"{method.upper():7} {path}  {operation['summary']}")
