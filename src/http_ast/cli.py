"""CLI entry point for http-ast."""

import json
import logging
from pathlib import Path

import click
import yaml

from http_ast.config import ParserOptions, load_options
from http_ast.exceptions import HttpAstError
from http_ast.parser.document import ParseResult, parse_http_bytes


def _options(config: Path | None, **overrides) -> ParserOptions:
    try:
        return load_options(config_path=config, overrides=overrides)
    except HttpAstError as e:
        error = click.ClickException(str(e))
        error.exit_code = e.exit_code
        raise error from e


def _parse_file(file_path: Path, options: ParserOptions) -> ParseResult:
    """Read and parse an .http file."""
    try:
        return parse_http_bytes(file_path.read_bytes(), options, name=str(file_path))
    except UnicodeDecodeError as e:
        raise click.ClickException(f"Cannot decode {file_path} as {options.encoding}: {e}") from e


def _dump(data: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """http-ast — parse .http request files into a structured AST."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("http_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the result to this file instead of stdout.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--ast-only", is_flag=True, help="Only output the AST, without lines and segments.")
@click.option("--strict", is_flag=True, help="Report orphaned and duplicate responses.")
@click.option("--encoding", default=None, help="Encoding of the input file.")
@click.option("--config", default=None, type=click.Path(path_type=Path), help="Path to an http-ast.yaml file.")
def parse(http_file: Path, output: Path | None, fmt: str, ast_only: bool, strict: bool, encoding: str | None, config: Path | None):
    """Parse an .http file and print the result."""
    options = _options(config, strict=strict or None, encoding=encoding)
    result = _parse_file(http_file, options)

    data = result.ast.model_dump(mode="json") if ast_only else result.model_dump(mode="json")
    text = _dump(data, fmt)

    if output is None:
        click.echo(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Parse result saved to {output}")

    for diagnostic in result.diagnostics:
        click.echo(f"{diagnostic.severity}: {diagnostic.message}", err=True)


@main.command()
@click.argument("http_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--encoding", default=None, help="Encoding of the input file.")
def requests(http_file: Path, encoding: str | None):
    """List the requests found in an .http file."""
    result = _parse_file(http_file, _options(None, encoding=encoding))
    click.echo(f"Found {len(result.ast.requests)} requests.")

    for request in result.ast.requests:
        line = f"  {request.method or '?'} {request.url}"
        if request.name:
            line += f"  [{request.name}]"
        if request.expected_response is not None:
            line += f"  -> {request.expected_response.status_code}"
        click.echo(line)
        for issue in request.errors:
            click.echo(f"    error (line {issue.line_number}): {issue.message}")


@main.command()
@click.argument("http_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--encoding", default=None, help="Encoding of the input file.")
def variables(http_file: Path, encoding: str | None):
    """Show file-scoped, global and per-request variables."""
    result = _parse_file(http_file, _options(None, encoding=encoding))
    ast = result.ast

    click.echo("File scope:")
    for v in ast.file_scoped_variables:
        click.echo(f"  @{v.key} = {v.value}  (line {v.line_number})")

    click.echo("Global:")
    for v in ast.global_variables:
        click.echo(f"  @{v.key} = {v.value}  (line {v.line_number})")

    for request in ast.requests:
        if not request.block_variables and not request.prompt_variables:
            continue
        click.echo(f"Request {request.name or request.url}:")
        for v in request.block_variables:
            click.echo(f"  @{v.key} = {v.value}  (line {v.line_number})")
        for p in request.prompt_variables:
            click.echo(f"  prompt {p.name}" + (f" ({p.description})" if p.description else ""))
