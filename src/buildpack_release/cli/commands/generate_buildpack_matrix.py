"""Implementation of the 'generate-buildpack-matrix' command.

Lists the releasable buildpacks as a JSON matrix for CI jobs and checks
that they are all released under the same version.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from buildpack_release.cli.commands.common import emit_output, fail, resolve_project_path
from buildpack_release.config import load_config
from buildpack_release.exceptions import BuildpackReleaseError, FixedVersionError
from buildpack_release.project.buildpacks import (
    ReleasableBuildpack,
    find_releasable_buildpacks,
    load_releasable_buildpack,
)

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

logger = logging.getLogger(__name__)


def get_fixed_version(buildpacks: list[ReleasableBuildpack]) -> str | None:
    """Return the version shared by all *buildpacks*.

    Raises:
        FixedVersionError: If the buildpacks have different versions
    """
    versions = {buildpack.version for buildpack in buildpacks}
    if len(versions) > 1:
        raise FixedVersionError(versions)
    return next(iter(versions), None)


def run_generate_buildpack_matrix(
    path: str | None,
    github_output: Path | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the generate-buildpack-matrix command.

    Args:
        path: Optional path to project directory
        github_output: Step output file, None outside of GitHub Actions
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = resolve_project_path(path)

    try:
        config = load_config(project_path)
        buildpacks = sorted(
            (
                load_releasable_buildpack(directory, config)
                for directory in find_releasable_buildpacks(project_path, config)
            ),
            key=lambda buildpack: buildpack.id,
        )
        version = get_fixed_version(buildpacks)

        for buildpack in buildpacks:
            if buildpack.image_repository is None:
                logger.warning("%s has no image repository in its metadata", buildpack.id)
        if version is None:
            logger.warning("No releasable buildpacks found in %s", project_path)

        matrix = json.dumps([buildpack.to_dict() for buildpack in buildpacks])
        emit_output(config.output.buildpacks_name, matrix, github_output, console)
        emit_output(config.output.version_name, version or "", github_output, console)
    except BuildpackReleaseError as e:
        raise fail(err_console, e) from e
