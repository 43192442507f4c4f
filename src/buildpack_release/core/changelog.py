"""Keep a Changelog parsing.

This module turns a changelog document following the "Keep a Changelog"
convention into an immutable Changelog model:

- scan_sections() splits the text into (header, level, body) sections
- classify_header() decides what a section header denotes
- parse_changelog() builds the model and enforces its invariants

The model is never edited in place. Callers derive new instances with
Changelog.replace() and re-render them with buildpack_release.core.render.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, NamedTuple

from buildpack_release.exceptions import (
    DuplicateUnreleasedSectionError,
    DuplicateVersionSectionError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)

# ATX heading indented by at most 3 spaces, closing hashes are optional
HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")

UNRELEASED_PATTERN = re.compile(r"^(?:\[unreleased\]|unreleased)$", re.IGNORECASE)
RELEASE_PATTERN = re.compile(
    r"^(?:\[(?P<bracketed>[^\[\]\s]+)\]|(?P<bare>v?\d[^\s\[\]]*))"
    r"(?:\s+-\s+(?P<date>.*?))?"
    r"(?:\s+\[(?P<yanked>yanked)\])?$",
    re.IGNORECASE,
)
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class RawSection(NamedTuple):
    """A section of a changelog document before classification."""

    header: str
    level: int
    body: str


@dataclass(frozen=True)
class Unreleased:
    """The header denotes the Unreleased section."""


@dataclass(frozen=True)
class Release:
    """The header denotes a released version."""

    version: str
    date: datetime.date | None = None
    yanked: bool = False


@dataclass(frozen=True)
class Unknown:
    """The header is not part of the changelog structure (e.g. a title)."""

    header: str


SectionKind = Unreleased | Release | Unknown


@dataclass(frozen=True)
class ReleaseEntry:
    """One released version of a changelog."""

    version: str
    date: datetime.date | None
    body: str
    yanked: bool = False


@dataclass(frozen=True)
class Changelog:
    """Structured, read-only view of a changelog document.

    Attributes:
        unreleased: Body of the Unreleased section. None if the document has
            no such section, an empty string if the section is empty.
        releases: Release entries keyed by version, in document order.
    """

    unreleased: str | None = None
    releases: Mapping[str, ReleaseEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        releases = dict(self.releases)
        for version, entry in releases.items():
            if version != entry.version:
                raise ValueError(f"Release key {version!r} does not match entry {entry.version!r}")
        object.__setattr__(self, "releases", MappingProxyType(releases))

    @classmethod
    def from_text(cls, text: str) -> Changelog:
        """Parse *text*, see parse_changelog()."""
        return parse_changelog(text)

    def unreleased_body(self) -> str | None:
        """Body of the Unreleased section, or None if it is missing or empty."""
        return self.unreleased or None

    def release_body(self, version: str) -> str | None:
        """Body of the release *version*, or None if it is unknown or empty.

        Use known_versions() to tell the two cases apart.
        """
        entry = self.releases.get(version)
        if entry is None:
            return None
        return entry.body or None

    def get_release(self, version: str) -> ReleaseEntry | None:
        """Release entry for *version*, or None if it is unknown."""
        return self.releases.get(version)

    def known_versions(self) -> list[str]:
        """Released versions in document order."""
        return list(self.releases)

    def replace(self, **changes: object) -> Changelog:
        """Return a copy with the given attributes replaced."""
        return dataclasses.replace(self, **changes)

    def promote_unreleased(
        self,
        version: str,
        release_date: datetime.date | None = None,
    ) -> Changelog:
        """Cut a release from the Unreleased section.

        The Unreleased body becomes the body of a new release entry that is
        placed before all existing releases. The returned changelog keeps an
        empty Unreleased section.

        Raises:
            DuplicateVersionSectionError: If *version* is already released
        """
        if version in self.releases:
            raise DuplicateVersionSectionError(version)
        entry = ReleaseEntry(version=version, date=release_date, body=self.unreleased or "")
        return self.replace(unreleased="", releases={version: entry, **self.releases})


def classify_header(header: str) -> SectionKind:
    """Classify a section header.

    Unparsable dates degrade to None and unrecognised headers are reported
    as Unknown. This function never raises.
    """
    text = header.strip()

    if UNRELEASED_PATTERN.match(text):
        return Unreleased()

    match = RELEASE_PATTERN.match(text)
    if match is None:
        return Unknown(header)

    version = match.group("bracketed") or match.group("bare")
    return Release(
        version=version,
        date=_parse_date(match.group("date")),
        yanked=match.group("yanked") is not None,
    )


def _parse_date(value: str | None) -> datetime.date | None:
    if value is None:
        return None
    value = value.strip()
    if not DATE_PATTERN.match(value):
        logger.debug("Ignoring unrecognised release date %r", value)
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring invalid release date %r", value)
        return None


def _iter_headings(lines: Sequence[str]) -> Iterator[tuple[int, int, str]]:
    """Yield (line index, level, text) for every heading outside fenced code."""
    fence: str | None = None
    for index, line in enumerate(lines):
        text = line.rstrip("\r\n")

        fence_match = FENCE_PATTERN.match(text)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue

        match = HEADING_PATTERN.match(text)
        if match:
            yield index, len(match.group(1)), match.group(2)


def _section_level(headings: Sequence[tuple[int, int, str]]) -> int:
    # The first Unreleased or version heading decides the section level.
    for _, level, header in headings:
        if not isinstance(classify_header(header), Unknown):
            return level
    return min(level for _, level, _ in headings)


def _trim_body(lines: Sequence[str]) -> str:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "".join(lines[start:end]).rstrip("\r\n")


def scan_sections(text: str) -> Iterator[RawSection]:
    """Split a changelog document into sections.

    Headings at the changelog section level (or shallower) start a new
    section, deeper headings stay in the body of the enclosing section.
    Text before the first section heading is ignored.

    Args:
        text: Full changelog document

    Yields:
        One RawSection per section, in document order
    """
    lines = text.splitlines(keepends=True)
    headings = list(_iter_headings(lines))
    if not headings:
        return

    section_level = _section_level(headings)
    boundaries = [heading for heading in headings if heading[1] <= section_level]

    for position, (index, level, header) in enumerate(boundaries):
        if position + 1 < len(boundaries):
            end = boundaries[position + 1][0]
        else:
            end = len(lines)
        yield RawSection(header=header, level=level, body=_trim_body(lines[index + 1 : end]))


def document_preamble(text: str) -> str:
    """Return the text before the first Unreleased or release heading.

    This is usually the title and introduction of the document, which the
    Changelog model does not keep. The whole text is returned when the
    document has no such heading.
    """
    lines = text.splitlines(keepends=True)
    for index, _, header in _iter_headings(lines):
        if not isinstance(classify_header(header), Unknown):
            return _trim_body(lines[:index])
    return _trim_body(lines)


def parse_changelog(text: str) -> Changelog:
    """Parse a changelog document into a Changelog.

    Args:
        text: Full changelog document

    Returns:
        The parsed changelog. An empty document gives an empty changelog.

    Raises:
        DuplicateUnreleasedSectionError: If there is more than one Unreleased section
        DuplicateVersionSectionError: If a version header repeats
    """
    unreleased: str | None = None
    releases: dict[str, ReleaseEntry] = {}

    for section in scan_sections(text):
        kind = classify_header(section.header)

        if isinstance(kind, Unreleased):
            if unreleased is not None:
                raise DuplicateUnreleasedSectionError(section.header)
            unreleased = section.body
        elif isinstance(kind, Release):
            if kind.version in releases:
                raise DuplicateVersionSectionError(kind.version, section.header)
            releases[kind.version] = ReleaseEntry(
                version=kind.version,
                date=kind.date,
                body=section.body,
                yanked=kind.yanked,
            )
        else:
            logger.debug("Skipping changelog section %r", section.header)

    return Changelog(unreleased=unreleased, releases=releases)


def select_changes(changelog: Changelog, version: str | None = None) -> str | None:
    """Select the changes to publish from a changelog.

    Args:
        changelog: Parsed changelog
        version: Release to select, or None for the Unreleased section

    Returns:
        The selected body, or None if there is nothing to publish
    """
    if version is None:
        return changelog.unreleased_body()
    return changelog.release_body(version)
