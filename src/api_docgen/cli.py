"""CLI entry point for api-docgen."""

import logging
from pathlib import Path

import click

from api_docgen.export import FORMATS, detect_format, render
from api_docgen.generator.base import Document
from api_docgen.generator.description import generate_api_description
from api_docgen.generator.openapi import generate_openapi
from api_docgen.generator.validator import validate_openapi
from api_docgen.manifest import ManifestError, load_registry
from api_docgen.registry import EndpointRegistry
from api_docgen.schema.reflector import DEFAULT_MAX_DEPTH, SchemaReflector

SOURCE_HELP = "Manifest file (.yaml/.json) or 'package.module:registry' reference."


def _load(source: str) -> EndpointRegistry:
    try:
        return load_registry(source)
    except ManifestError as e:
        raise click.ClickException(str(e)) from e


def _write(document: Document, output: Path | None, fmt: str) -> None:
    if fmt == "auto":
        fmt = detect_format(output)
    text = render(document, fmt)

    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Wrote {fmt} document to {output}", err=True)


output_option = click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path (default: stdout).")
format_option = click.option("--format", "fmt", default="auto", type=click.Choice(["auto", *FORMATS]), help="Output format.")
depth_option = click.option("--max-depth", default=DEFAULT_MAX_DEPTH, show_default=True, envvar="API_DOCGEN_MAX_DEPTH", type=click.IntRange(min=1), help="Maximum nesting depth reflected into schemas.")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Doc Gen: derive OpenAPI documents from registered endpoint types."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source")
@output_option
@format_option
@depth_option
def openapi(source: str, output: Path | None, fmt: str, max_depth: int):
    """Generate an OpenAPI 3.0 document."""
    registry = _load(source)
    document = generate_openapi(registry, SchemaReflector(max_depth=max_depth))
    _write(document, output, fmt)


@main.command()
@click.argument("source")
@output_option
@format_option
@depth_option
def describe(source: str, output: Path | None, fmt: str, max_depth: int):
    """Generate the simplified internal API description."""
    registry = _load(source)
    document = generate_api_description(registry, SchemaReflector(max_depth=max_depth))
    _write(document, output, fmt)


@main.command()
@click.argument("source")
@depth_option
def check(source: str, max_depth: int):
    """Lint the generated OpenAPI document; exits non-zero on problems."""
    registry = _load(source)
    document = generate_openapi(registry, SchemaReflector(max_depth=max_depth))
    errors = validate_openapi(document.to_dict())

    if not errors:
        click.echo(f"OK: {len(registry)} endpoints documented.")
        return
    for location, message in errors.items():
        click.echo(f"{location}: {message}", err=True)
    raise click.ClickException(f"{len(errors)} problem(s) found")
