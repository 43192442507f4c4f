"""Entry point of the buildpack-release command line interface."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
from rich.console import Console

from buildpack_release import __version__
from buildpack_release.log import configure_logging

console = Console()
err_console = Console(stderr=True)

path_option = click.option(
    "--path",
    type=click.Path(file_okay=False),
    help="Project directory. Defaults to the current directory.",
)
github_output_option = click.option(
    "--github-output",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITHUB_OUTPUT",
    help="GitHub Actions step output file. Read from GITHUB_OUTPUT when unset.",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="buildpack-release")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(debug: bool) -> None:
    """Release automation for projects with many buildpacks."""
    configure_logging(debug)


@cli.command("generate-changelog")
@click.option("--unreleased", is_flag=True, help="Collect unreleased changes (default).")
@click.option(
    "--version",
    "version",
    metavar="VERSION",
    help="Collect the changes of a released version.",
)
@path_option
@github_output_option
def generate_changelog(
    unreleased: bool,
    version: str | None,
    path: str | None,
    github_output: Path | None,
) -> None:
    """Generate a changelog from the buildpacks in a project."""
    if unreleased and version is not None:
        raise click.UsageError("--unreleased and --version are mutually exclusive.")

    from buildpack_release.cli.commands.generate_changelog import run_generate_changelog

    run_generate_changelog(path, version, github_output, console, err_console)


@cli.command("generate-buildpack-matrix")
@path_option
@github_output_option
def generate_buildpack_matrix(path: str | None, github_output: Path | None) -> None:
    """List the releasable buildpacks as a JSON matrix."""
    from buildpack_release.cli.commands.generate_buildpack_matrix import (
        run_generate_buildpack_matrix,
    )

    run_generate_buildpack_matrix(path, github_output, console, err_console)


@cli.command("image-digest")
@click.argument("url")
@path_option
@github_output_option
def image_digest(url: str, path: str | None, github_output: Path | None) -> None:
    """Print the digest of the image at URL."""
    from buildpack_release.cli.commands.image_digest import run_image_digest

    run_image_digest(url, path, github_output, console, err_console)


@cli.command("prepare-release")
@click.option("--version", "version", required=True, metavar="VERSION", help="Version to release.")
@click.option(
    "--date",
    "release_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Release date (YYYY-MM-DD). Defaults to today.",
)
@click.option("--execute", is_flag=True, help="Write the changelogs instead of a dry run.")
@path_option
def prepare_release(
    version: str,
    release_date: datetime | None,
    execute: bool,
    path: str | None,
) -> None:
    """Move unreleased changes of every buildpack into a new release section."""
    from buildpack_release.cli.commands.prepare_release import run_prepare_release

    run_prepare_release(
        path,
        version,
        release_date.date() if release_date else None,
        execute,
        console,
        err_console,
    )


def main() -> None:
    cli()
