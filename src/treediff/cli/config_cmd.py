"""treediff config command - show the effective configuration."""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from treediff.config.loader import config_files, load_config
from treediff.core.errors import ConfigError


@click.command()
@click.option(
    "--repo",
    "repo_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository whose .treediff/config.yaml applies.",
)
def config_command(repo_dir: Path) -> None:
    """Print the effective configuration as YAML.

    Merges defaults, ~/.config/treediff/config.yaml, the repository's
    .treediff/config.yaml and TREEDIFF__* environment variables. The files
    that were read are listed as leading comments.
    """
    try:
        config = load_config(repo_dir)
    except ConfigError as e:
        raise click.ClickException(e.message) from e
    for path in config_files(repo_dir):
        click.echo(f"# from {path}")
    click.echo(yaml.safe_dump(config.model_dump(), default_flow_style=False, sort_keys=False), nl=False)
