"""Markdown rendering of changelogs and aggregated release notes.

render_changelog() produces the canonical form of a single changelog, which
parses back into an equal model. render_sections() is a plain text joiner
used to combine the changes of many buildpacks into one document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from buildpack_release.core.changelog import Changelog, ReleaseEntry

NO_CHANGES_PLACEHOLDER = "- No changes"
UNRELEASED_LABEL = "[Unreleased]"


def format_release_header(entry: ReleaseEntry) -> str:
    """Format the header text of a release entry, without the leading hashes."""
    header = f"[{entry.version}]"
    if entry.date is not None:
        header += f" - {entry.date.isoformat()}"
    if entry.yanked:
        header += " [YANKED]"
    return header


def _section(heading: str, body: str | None) -> str:
    if not body:
        return heading
    return f"{heading}\n\n{body}"


def _join(blocks: list[str]) -> str:
    if not blocks:
        return ""
    return "\n\n".join(blocks).rstrip("\r\n") + "\n"


def render_changelog(changelog: Changelog, *, title: str | None = None, level: int = 2) -> str:
    """Render a changelog to canonical Markdown.

    Args:
        changelog: Changelog to render
        title: Optional document title, rendered as a level 1 heading
        level: Heading level of the changelog sections

    Returns:
        Markdown text ending with exactly one newline, or an empty string
        for an empty changelog without title
    """
    prefix = "#" * level
    blocks: list[str] = []

    if title:
        blocks.append(f"# {title}")

    if changelog.unreleased is not None:
        blocks.append(_section(f"{prefix} {UNRELEASED_LABEL}", changelog.unreleased))

    for entry in changelog.releases.values():
        blocks.append(_section(f"{prefix} {format_release_header(entry)}", entry.body))

    return _join(blocks)


def render_sections(sections: Iterable[tuple[str, str | None]], *, level: int = 1) -> str:
    """Join already ordered sections into one Markdown document.

    Sections without a body get the "- No changes" placeholder so every
    heading is kept in the output.
    """
    prefix = "#" * level
    return _join(
        [f"{prefix} {heading}\n\n{body or NO_CHANGES_PLACEHOLDER}" for heading, body in sections]
    )


def generate_release_notes(changes_by_project: Mapping[str, str | None]) -> str:
    """Render the changes of several projects, sorted by project identifier.

    Args:
        changes_by_project: Selected changelog body per project identifier,
            None when the project has nothing to report

    Returns:
        Markdown with one level 1 heading per project
    """
    return render_sections(sorted(changes_by_project.items()))
