"""treediff CLI - treediff command."""

import click

from treediff.cli.compare import compare_command
from treediff.cli.config_cmd import config_command


@click.group()
@click.version_option(version="0.1.0", prog_name="treediff")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """treediff - Compare the source trees of two repository refs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


cli.add_command(compare_command, name="compare")
cli.add_command(config_command, name="config")


if __name__ == "__main__":
    cli()
