"""terraform-index CLI."""

from pathlib import Path

import click

from tfindex import __version__
from tfindex.cli.dump import ast_command
from tfindex.cli.index import index_command
from tfindex.config import load_config
from tfindex.core.errors import ConfigError
from tfindex.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="terraform-index")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Extract declarations and references from Terraform files."""
    try:
        config = load_config(Path.cwd())
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(index_command, name="index")
cli.add_command(ast_command, name="ast")


if __name__ == "__main__":
    cli()
