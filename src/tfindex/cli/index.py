"""terraform-index index command - index sources and print JSON."""

import click

from tfindex.cli.sources import expand_paths, read_source
from tfindex.config.models import TfIndexConfig
from tfindex.core.errors import SourceReadError
from tfindex.core.progress import pluralize, status, track_files
from tfindex.index import Index


@click.command()
@click.argument("paths", nargs=-1)
@click.option("--raw-ast", is_flag=True, help="Include the raw syntax tree of the last file")
@click.option("--compact", is_flag=True, help="Print JSON on a single line")
@click.pass_context
def index_command(ctx: click.Context, paths: tuple[str, ...], raw_ast: bool, compact: bool) -> None:
    """Extract references and declarations from Terraform files.

    PATHS are files, directories (searched for configured extensions) or
    '-' for stdin. All of them are merged into one index.
    """
    if not paths:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    config: TfIndexConfig = ctx.obj["config"]
    keep_raw_tree = raw_ast or config.index.include_raw_ast

    index = Index()
    failed = 0
    for path in track_files(expand_paths(paths, config.index)):
        try:
            content = read_source(path)
        except SourceReadError as e:
            click.echo(f"ERROR: {e.message}", err=True)
            ctx.exit(2)

        error = index.collect_bytes(
            content,
            path,
            keep_raw_tree,
            strict_references=config.index.strict_references,
        )
        if error is not None:
            failed += 1
            click.echo(f"ERROR: Could not parse '{path}': {error.message}", err=True)

    if failed:
        status(f"{pluralize(failed, 'file')} could not be parsed", style="warning")

    click.echo(index.to_json(indent=None if compact else 2))
