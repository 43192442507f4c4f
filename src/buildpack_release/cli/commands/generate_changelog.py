"""Implementation of the 'generate-changelog' command.

Collects the unreleased (or a released version's) changes of every
releasable buildpack into one Markdown document.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from buildpack_release.cli.commands.common import emit_output, fail, resolve_project_path
from buildpack_release.config import load_config
from buildpack_release.core.changelog import parse_changelog, select_changes
from buildpack_release.core.render import generate_release_notes
from buildpack_release.exceptions import (
    BuildpackReleaseError,
    ChangelogParseError,
    ChangelogReadError,
)
from buildpack_release.project.buildpacks import (
    find_releasable_buildpacks,
    read_buildpack_descriptor,
)

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

logger = logging.getLogger(__name__)


def read_changelog_entry(path: Path, version: str | None) -> str | None:
    """Read the changes to publish from the changelog at *path*.

    Args:
        path: Changelog file
        version: Released version to select, or None for the Unreleased section

    Raises:
        ChangelogReadError: If the file cannot be read or parsed
    """
    try:
        changelog = parse_changelog(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ChangelogParseError) as e:
        raise ChangelogReadError(path, e) from e

    if version is not None and version not in changelog.releases:
        logger.debug("%s has no section for version %s", path, version)
    return select_changes(changelog, version)


def run_generate_changelog(
    path: str | None,
    version: str | None,
    github_output: Path | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the generate-changelog command.

    Args:
        path: Optional path to project directory
        version: Version to collect, None for unreleased changes
        github_output: Step output file, None outside of GitHub Actions
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = resolve_project_path(path)

    try:
        config = load_config(project_path)
        changes_by_buildpack: dict[str, str | None] = {}
        for directory in find_releasable_buildpacks(project_path, config):
            descriptor = read_buildpack_descriptor(directory, config.descriptor_filename)
            changes_by_buildpack[descriptor.buildpack.id] = read_changelog_entry(
                directory / config.changelog_filename, version
            )

        changelog = generate_release_notes(changes_by_buildpack)
        emit_output(config.output.changelog_name, changelog, github_output, console)
    except BuildpackReleaseError as e:
        raise fail(err_console, e) from e
