"""treediff compare command - diff two repository refs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from treediff.cli.render import render_json, render_text
from treediff.config.loader import load_config
from treediff.config.models import CompareConfig, TreeDiffConfig
from treediff.core.errors import ConfigError
from treediff.core.logging import configure_logging
from treediff.core.progress import spinner
from treediff.diff.service import compare_refs
from treediff.git.errors import GitError
from treediff.git.models import RefSpec


def _apply_overrides(config: TreeDiffConfig, overrides: dict[str, Any]) -> TreeDiffConfig:
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    try:
        compare = CompareConfig.model_validate({**config.compare.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigError.from_validation_error(e, "compare") from e
    return config.model_copy(update={"compare": compare})


@click.command()
@click.argument("left_ref")
@click.argument("right_ref")
@click.option(
    "--left-repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository holding LEFT_REF.",
)
@click.option(
    "--right-repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository holding RIGHT_REF (default: --left-repo).",
)
@click.option("--left-label", default=None, help="Display name for the left side.")
@click.option("--right-label", default=None, help="Display name for the right side.")
@click.option(
    "--patch-mode",
    type=click.Choice(["eager", "deferred"]),
    default=None,
    help="Compute patches during the walk or in a second pass.",
)
@click.option("--workers", type=int, default=None, help="Threads for the deferred patch pass.")
@click.option("--context-lines", type=int, default=None, help="Context lines around changes.")
@click.option("--names-only", is_flag=True, help="List changed paths without patches.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def compare_command(
    ctx: click.Context,
    left_ref: str,
    right_ref: str,
    left_repo: Path,
    right_repo: Path | None,
    left_label: str | None,
    right_label: str | None,
    patch_mode: str | None,
    workers: int | None,
    context_lines: int | None,
    names_only: bool,
    as_json: bool,
) -> None:
    """Compare LEFT_REF and RIGHT_REF tree by tree.

    Each ref may be a tag, branch or commit. Paths present on one side only
    and modified files are listed, with a unified diff for modified text files.
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    try:
        config = _apply_overrides(
            load_config(left_repo),
            {
                "left_label": left_label,
                "right_label": right_label,
                "patch_mode": patch_mode,
                "patch_workers": workers,
                "context_lines": context_lines,
            },
        )
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    configure_logging(config=config.logging, verbose=verbose)

    left = RefSpec(left_repo, left_ref)
    right = RefSpec(right_repo or left_repo, right_ref)

    try:
        with spinner(f"Comparing {left} with {right}"):
            report = compare_refs(
                left, right, config=config.compare, include_patches=not names_only
            )
    except GitError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(render_json(report, left, right, config.compare))
    else:
        click.echo(render_text(report, left, right, config.compare), nl=False)
