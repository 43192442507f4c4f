"""Implementation of the 'image-digest' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from buildpack_release.cli.commands.common import emit_output, fail, resolve_project_path
from buildpack_release.config import load_config
from buildpack_release.exceptions import BuildpackReleaseError, DigestError
from buildpack_release.project.digest import calculate_digest

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console


def run_image_digest(
    url: str,
    path: str | None,
    github_output: Path | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the image-digest command.

    Args:
        url: Image reference to resolve
        path: Optional path to project directory, used to find the configuration
        github_output: Step output file, None outside of GitHub Actions
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        config = load_config(resolve_project_path(path))
        digest = calculate_digest(url, config.image.crane_command)
        emit_output(config.output.digest_name, digest, github_output, console)
    except DigestError as e:
        if e.stderr:
            err_console.print(e.stderr.strip(), markup=False, highlight=False)
        raise fail(err_console, e) from e
    except BuildpackReleaseError as e:
        raise fail(err_console, e) from e
