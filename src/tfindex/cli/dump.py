"""terraform-index ast command - single-file declaration dump.

Predates ``index``: reports variables, resources and outputs of one file
with their locations, without documentation or references.
"""

import json
from typing import Any

import click

from tfindex.cli.sources import STDIN, read_source
from tfindex.core.errors import HclSyntaxError, SourceReadError
from tfindex.index import Index
from tfindex.parsing import hcl

_FIELDS = {"type", "name", "location"}


@click.command()
@click.option("--file", "path", default=STDIN, show_default=True, help="File to parse")
@click.option("--raw-ast", is_flag=True, help="Include the raw syntax tree")
@click.pass_context
def ast_command(ctx: click.Context, path: str, raw_ast: bool) -> None:
    """Dump variable, resource and output declarations of one file."""
    try:
        content = read_source(path)
    except SourceReadError as e:
        click.echo(f"ERROR: {e.message}", err=True)
        ctx.exit(1)

    try:
        file = hcl.parse(content)
    except HclSyntaxError as e:
        click.echo(f"ERROR: Could not parse '{path}': {e.message}", err=True)
        ctx.exit(2)

    index = Index()
    index.collect(file, path)

    dump: dict[str, Any] = {
        "variables": _sections(index.variables),
        "resources": _sections(index.resources),
        "outputs": _sections(index.outputs),
        "rawAst": file.to_dict() if raw_ast else None,
    }
    click.echo(json.dumps(dump, indent=2))


def _sections(sections: list[Any]) -> list[dict[str, Any]]:
    return [section.model_dump(by_alias=True, include=_FIELDS) for section in sections]
