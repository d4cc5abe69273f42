"""Click CLI with rewrite, resolve, and owner subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from import_adjuster import __version__
from import_adjuster.config import load_config
from import_adjuster.errors import BuildError
from import_adjuster.packages.graph import PackageGraph
from import_adjuster.pipeline import run_rewrite
from import_adjuster.resolver.rewriter import SpecifierRewriter

_CONFIG_OPTION = click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON rewrite configuration",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log every rewrite decision")
def cli(verbose: bool):
    """import-adjuster: Rewrite module specifiers across a multi-package build."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_CONFIG_OPTION
@click.option("-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Write results here instead of in place")
def rewrite(files: tuple[Path, ...], config_path: Path, output_dir: Path | None):
    """Rewrite module references in FILES."""

    def progress(stage: str, current: int, total: int):
        click.echo(f"  {stage}: {current}/{total}", nl=(current == total))

    try:
        config = load_config(config_path)
        results = run_rewrite(files, config, output_dir=output_dir, progress=progress)
    except BuildError as e:
        raise click.ClickException(str(e))

    click.echo(f"\nDone! Processed {len(results)} file(s)")
    for result in results:
        click.echo(
            f"  {result.output_path}  "
            f"{click.style(f'{result.changed_count} rewritten', fg='green')}"
            + (f", {result.injected} injected" if result.injected else "")
        )


@cli.command()
@click.argument("specifier")
@click.option("--from", "from_file", type=click.Path(path_type=Path), required=True, help="File containing the reference")
@_CONFIG_OPTION
@click.option("--dynamic", is_flag=True, help="Treat the reference as a dynamic import")
def resolve(specifier: str, from_file: Path, config_path: Path, dynamic: bool):
    """Print what SPECIFIER becomes when referenced from a file."""
    try:
        rewriter = SpecifierRewriter(load_config(config_path))
        result = rewriter.rewrite(specifier, rewriter.open_file(from_file), is_dynamic=dynamic)
    except BuildError as e:
        raise click.ClickException(str(e))
    click.echo(result)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
def owner(path: Path):
    """Show the package that owns PATH."""
    try:
        pkg = PackageGraph().owner_of_file(path)
    except BuildError as e:
        raise click.ClickException(str(e))
    if pkg is None:
        click.echo("No owning package.")
        return
    click.echo(click.style(pkg.name or "(unnamed)", fg="cyan"))
    click.echo(f"  root: {pkg.root}")
    click.echo(f"  v2 format: {'yes' if pkg.is_v2_ember else 'no'}")
    click.echo(f"  auto-upgraded: {'yes' if pkg.auto_upgraded else 'no'}")
    if pkg.externals:
        click.echo(f"  externals: {', '.join(sorted(pkg.externals))}")


if __name__ == "__main__":
    cli()
