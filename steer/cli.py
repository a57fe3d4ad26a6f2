"""CLI entrypoint for steer."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .errors import CatalogError, CatalogMismatchError
from .power import INDEX_FILENAME, load_power


def _auto_detect_power(start: Path) -> Path | None:
    """Find a directory holding POWER.md by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / INDEX_FILENAME).is_file():
            return p
    return None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, markup=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="steer")
@click.option(
    "--power",
    "-p",
    "power_path",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to power directory (defaults to nearest POWER.md, then the bundled power)",
)
@click.option("--verbose", is_flag=True, help="Log loading details")
@click.pass_context
def cli(ctx: click.Context, power_path: Path | None, verbose: bool) -> None:
    """steer - Catalog and steering-file retrieval for powers.

    List rules by category and priority, read steering documents, and check
    a power's index against its steering files.
    """
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    if power_path is None:
        power_path = _auto_detect_power(Path.cwd())
    if power_path is None:
        from .powers import builtin_power_path

        power_path = builtin_power_path("react-best-practices")

    if not power_path.exists() or not power_path.is_dir():
        raise click.BadParameter(f"Directory '{power_path}' does not exist.", param_hint="--power / -p")

    ctx.obj["power_path"] = power_path.resolve()


def _load(ctx: click.Context):
    try:
        return load_power(ctx.obj["power_path"])
    except (CatalogError, CatalogMismatchError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option("--category", "-c", default=None, help="Only rules in this category")
@click.option("--tier", "-t", default=None, help="Only rules at or above this tier (e.g. HIGH)")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def rules(ctx: click.Context, category: str | None, tier: str | None, output_json: bool) -> None:
    """List rules in priority order.

    Examples:

        steer rules --tier HIGH

        steer rules --category "Eliminating Waterfalls" --json
    """
    from .commands.catalog_cmd import run_rules

    sys.exit(run_rules(_load(ctx), category, tier, output_json))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def categories(ctx: click.Context, output_json: bool) -> None:
    """List categories from CRITICAL to LOW."""
    from .commands.catalog_cmd import run_categories

    sys.exit(run_categories(_load(ctx), output_json))


@cli.command()
@click.argument("steering_file")
@click.option("--raw", is_flag=True, help="Print Markdown source instead of rendering")
@click.pass_context
def show(ctx: click.Context, steering_file: str, raw: bool) -> None:
    """Show a steering document.

    Examples:

        steer show async-parallel.md

        steer show js-set-map-lookups --raw
    """
    from .commands.show import run_show

    sys.exit(run_show(_load(ctx), steering_file, raw))


@cli.command()
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default="error",
    help="Exit with error if this level or higher found",
)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.option(
    "--explain",
    "explain_rule",
    type=str,
    default=None,
    metavar="RULE_ID",
    help="Explain a specific lint rule and exit (e.g., --explain orphan-document)",
)
@click.pass_context
def lint(ctx: click.Context, fail_on: str, output_json: bool, explain_rule: str | None) -> None:
    """Check a power's index against its steering files."""
    from .commands.lint import run_explain, run_lint

    if explain_rule:
        sys.exit(run_explain(explain_rule))

    sys.exit(run_lint(_load(ctx), fail_on, output_json))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
