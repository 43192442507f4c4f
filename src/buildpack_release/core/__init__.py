"""Core business logic for buildpack-release.

This module contains the fundamental building blocks:
- Changelog parsing into an immutable, queryable model
- Canonical changelog rendering
- Aggregated release notes for many buildpacks
"""

from __future__ import annotations

from buildpack_release.core.changelog import (
    Changelog,
    RawSection,
    Release,
    ReleaseEntry,
    SectionKind,
    Unknown,
    Unreleased,
    classify_header,
    document_preamble,
    parse_changelog,
    scan_sections,
    select_changes,
)
from buildpack_release.core.render import (
    NO_CHANGES_PLACEHOLDER,
    format_release_header,
    generate_release_notes,
    render_changelog,
    render_sections,
)

__all__ = [
    # Rendering
    "NO_CHANGES_PLACEHOLDER",
    # Changelog
    "Changelog",
    "RawSection",
    "Release",
    "ReleaseEntry",
    "SectionKind",
    "Unknown",
    "Unreleased",
    "classify_header",
    "document_preamble",
    "format_release_header",
    "generate_release_notes",
    "parse_changelog",
    "render_changelog",
    "render_sections",
    "scan_sections",
    "select_changes",
]
