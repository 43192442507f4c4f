"""Implementation of the 'prepare-release' command.

Moves the unreleased changes of every releasable buildpack into a new
release section. The title and introduction of each changelog are kept
as written, the sections after them are rewritten in canonical form.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from buildpack_release.cli.commands.common import fail, resolve_project_path
from buildpack_release.config import load_config
from buildpack_release.core.changelog import document_preamble, parse_changelog
from buildpack_release.core.render import render_changelog
from buildpack_release.exceptions import (
    BuildpackReleaseError,
    ChangelogError,
    ChangelogParseError,
    ChangelogReadError,
    ChangelogUpdateError,
)
from buildpack_release.project.buildpacks import find_releasable_buildpacks

if TYPE_CHECKING:
    import datetime as dt
    from pathlib import Path

    from rich.console import Console

    from buildpack_release.core.changelog import Changelog


def prepare_changelog(
    changelog: Changelog,
    preamble: str,
    version: str,
    release_date: dt.date,
    title: str,
) -> str:
    """Render *changelog* with its unreleased changes released as *version*.

    Args:
        changelog: Parsed changelog
        preamble: Text the document had before its first section, kept verbatim
        version: Version to release
        release_date: Date of the release
        title: Title used when the document has no preamble of its own

    Raises:
        DuplicateVersionSectionError: If *version* is already released
    """
    released = changelog.promote_unreleased(version, release_date)
    if not preamble:
        return render_changelog(released, title=title)
    return f"{preamble}\n\n{render_changelog(released)}"


def run_prepare_release(
    path: str | None,
    version: str,
    release_date: dt.date | None,
    execute: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the prepare-release command.

    Args:
        path: Optional path to project directory
        version: Version to release
        release_date: Release date, defaults to today (UTC)
        execute: Whether to actually write the changelogs
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = resolve_project_path(path)
    release_date = release_date or datetime.now(UTC).date()

    try:
        config = load_config(project_path)
        changelog_paths = [
            directory / config.changelog_filename
            for directory in find_releasable_buildpacks(project_path, config)
        ]

        updates: dict[Path, str] = {}
        for changelog_path in changelog_paths:
            try:
                text = changelog_path.read_text(encoding="utf-8")
                changelog = parse_changelog(text)
            except (OSError, UnicodeDecodeError, ChangelogParseError) as e:
                raise ChangelogReadError(changelog_path, e) from e

            try:
                updates[changelog_path] = prepare_changelog(
                    changelog,
                    document_preamble(text),
                    version,
                    release_date,
                    config.changelog_title,
                )
            except ChangelogError as e:
                raise ChangelogUpdateError(changelog_path, e) from e
    except BuildpackReleaseError as e:
        raise fail(err_console, e) from e

    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    console.print(
        f"\n{mode_str} - Releasing [green]{escape(version)}[/] ({release_date.isoformat()})\n"
    )

    if not execute:
        listing = "\n".join(
            f"  • Release unreleased changes in [cyan]{escape(str(p))}[/]" for p in updates
        )
        console.print(
            Panel(
                f"[bold]Would make the following changes:[/]\n\n{listing or '  • Nothing'}",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    for changelog_path, content in updates.items():
        try:
            changelog_path.write_text(content, encoding="utf-8")
        except OSError as e:
            err_console.print(
                f"[red]Error writing {escape(str(changelog_path))}:[/] {escape(str(e))}"
            )
            raise SystemExit(1) from e
        console.print(f"  [green]✓[/] Updated {escape(str(changelog_path))}")
