"""Unit tests for changelog parsing."""

from __future__ import annotations

import dataclasses
import datetime

import pytest

from buildpack_release.core.changelog import (
    Changelog,
    RawSection,
    Release,
    ReleaseEntry,
    Unknown,
    Unreleased,
    classify_header,
    document_preamble,
    parse_changelog,
    scan_sections,
    select_changes,
)
from buildpack_release.exceptions import (
    ChangelogParseError,
    DuplicateUnreleasedSectionError,
    DuplicateVersionSectionError,
)


class TestScanSections:
    """Tests for scan_sections()."""

    def test_empty_document(self):
        """An empty document has no sections."""
        assert list(scan_sections("")) == []

    def test_document_without_headings(self):
        """Text without headings has no sections."""
        assert list(scan_sections("Just some text\n\n- and a list\n")) == []

    def test_sections_and_levels(self):
        """Deeper headings stay in the body, shallower ones start sections."""
        text = "# Title\nintro\n## [Unreleased]\n- a\n### Sub\n- b\n## [1.0.0]\n"

        assert list(scan_sections(text)) == [
            RawSection(header="Title", level=1, body="intro"),
            RawSection(header="[Unreleased]", level=2, body="- a\n### Sub\n- b"),
            RawSection(header="[1.0.0]", level=2, body=""),
        ]

    def test_section_level_from_first_changelog_heading(self):
        """Level 1 changelog headings make level 2 headings part of the body."""
        text = "# Unreleased\n## Added\n- a\n# 1.0.0\n## Fixed\n- b\n"

        sections = list(scan_sections(text))

        assert [section.header for section in sections] == ["Unreleased", "1.0.0"]
        assert sections[0].body == "## Added\n- a"

    def test_headings_in_code_fences_are_ignored(self):
        """Lines inside fenced code blocks never start a section."""
        text = "## [Unreleased]\n```markdown\n## [1.0.0]\n```\n"

        sections = list(scan_sections(text))

        assert len(sections) == 1
        assert sections[0].body == "```markdown\n## [1.0.0]\n```"

    def test_hash_without_space_is_not_a_heading(self):
        """ATX headings need whitespace after the hashes."""
        sections = list(scan_sections("## [Unreleased]\n#hashtag\n"))

        assert sections == [RawSection(header="[Unreleased]", level=2, body="#hashtag")]

    def test_closing_hashes_are_stripped(self):
        """Optional closing hashes are not part of the header text."""
        sections = list(scan_sections("## [1.0.0] ##\n- a\n"))

        assert sections[0].header == "[1.0.0]"

    def test_indented_headings(self):
        """Up to three spaces of indentation are allowed before a heading."""
        text = "## [Unreleased]\n- a\n   ## [1.0.0]\n- b\n    ## [0.9.0]\n"

        sections = list(scan_sections(text))

        assert [section.header for section in sections] == ["[Unreleased]", "[1.0.0]"]
        assert sections[1].body == "- b\n    ## [0.9.0]"


    def test_restartable(self):
        """Scanning the same text twice gives the same sections."""
        text = "## [Unreleased]\n- a\n"
        assert list(scan_sections(text)) == list(scan_sections(text))


class TestClassifyHeader:
    """Tests for classify_header()."""

    @pytest.mark.parametrize("header", ["Unreleased", "[Unreleased]", "unreleased", "[UNRELEASED]"])
    def test_unreleased(self, header: str):
        """The Unreleased label is matched case-insensitively."""
        assert classify_header(header) == Unreleased()

    def test_bracketed_version_with_date(self):
        """Parse a bracketed version with an ISO date."""
        assert classify_header("[1.2.3] - 2024-01-01") == Release(
            version="1.2.3", date=datetime.date(2024, 1, 1)
        )

    def test_bare_version(self):
        """Parse a bare version without date."""
        assert classify_header("1.2.3") == Release(version="1.2.3")

    def test_bare_version_with_prefix_and_date(self):
        """Bare versions may carry a v prefix."""
        assert classify_header("v1.2.3 - 2024-02-03") == Release(
            version="v1.2.3", date=datetime.date(2024, 2, 3)
        )

    def test_unparsable_date(self):
        """An unparsable date degrades to None."""
        assert classify_header("[1.0.0] - someday") == Release(version="1.0.0")

    def test_invalid_calendar_date(self):
        """A well-formed but impossible date degrades to None."""
        assert classify_header("[1.0.0] - 2024-13-45") == Release(version="1.0.0")

    def test_yanked(self):
        """The [YANKED] marker is recognised."""
        assert classify_header("[0.0.5] - 2014-12-13 [YANKED]") == Release(
            version="0.0.5", date=datetime.date(2014, 12, 13), yanked=True
        )

    @pytest.mark.parametrize("header", ["My Project", "Changelog", "[Unreleased", "Notes 1.0"])
    def test_unknown(self, header: str):
        """Anything else is Unknown."""
        assert classify_header(header) == Unknown(header)


class TestParseChangelog:
    """Tests for parse_changelog()."""

    def test_unreleased_and_release(self):
        """Parse the Unreleased section and a dated release."""
        changelog = parse_changelog(
            "## [Unreleased]\n- change a\n\n## [1.0.0] - 2024-01-01\n- change b\n"
        )

        assert changelog.unreleased_body() == "- change a"
        assert changelog.release_body("1.0.0") == "- change b"
        assert changelog.get_release("1.0.0") == ReleaseEntry(
            version="1.0.0", date=datetime.date(2024, 1, 1), body="- change b"
        )

    def test_empty_document(self):
        """An empty document is an empty changelog, not an error."""
        changelog = parse_changelog("")

        assert changelog.unreleased_body() is None
        assert changelog.known_versions() == []

    def test_release_without_date(self):
        """A date-free release header parses with date None."""
        changelog = parse_changelog("## [2.0.0]\n- change\n")

        assert changelog.get_release("2.0.0").date is None
        assert changelog.release_body("2.0.0") == "- change"

    def test_unknown_sections_are_skipped(self):
        """Unrecognised headings and their content are not in the model."""
        changelog = parse_changelog("# My Project\n\nIntro text\n\n## [Unreleased]\n- a\n")

        assert changelog.unreleased_body() == "- a"
        assert changelog.known_versions() == []

    def test_full_document(self, keep_a_changelog: str):
        """Parse a complete Keep a Changelog document."""
        changelog = parse_changelog(keep_a_changelog)

        assert changelog.unreleased_body() == (
            "### Added\n\n- Support for the new stack\n  - including arm64"
        )
        assert changelog.known_versions() == ["1.1.0", "1.0.0"]
        assert changelog.release_body("1.1.0") == "### Fixed\n\n- Layer caching"
        assert changelog.release_body("1.0.0") == "- Initial release"

    def test_versions_keep_document_order(self):
        """Versions are listed in the order they appear."""
        changelog = parse_changelog("## 2.0.0\n## 1.0.0\n## 1.5.0\n")

        assert changelog.known_versions() == ["2.0.0", "1.0.0", "1.5.0"]

    def test_duplicate_version(self):
        """A repeated version fails the parse."""
        text = "## [1.0.0]\n- a\n\n## 1.0.0 - 2024-01-01\n- b\n"

        with pytest.raises(DuplicateVersionSectionError) as exc_info:
            parse_changelog(text)

        assert exc_info.value.version == "1.0.0"
        assert exc_info.value.header == "1.0.0 - 2024-01-01"

    def test_duplicate_unreleased(self):
        """A second Unreleased section fails the parse."""
        with pytest.raises(DuplicateUnreleasedSectionError) as exc_info:
            parse_changelog("## [Unreleased]\n- a\n\n## Unreleased\n- b\n")

        assert exc_info.value.header == "Unreleased"
        assert isinstance(exc_info.value, ChangelogParseError)

    def test_duplicate_empty_unreleased(self):
        """Empty Unreleased sections still count as sections."""
        with pytest.raises(DuplicateUnreleasedSectionError):
            parse_changelog("## [Unreleased]\n## [Unreleased]\n")

    def test_body_is_trimmed_but_verbatim(self):
        """Surrounding blank lines are trimmed, everything else is kept."""
        changelog = parse_changelog("## [Unreleased]\n\n\n- a\n\n    - nested  \n\n\n")

        assert changelog.unreleased_body() == "- a\n\n    - nested  "

    def test_crlf_line_endings_are_preserved(self):
        """Line endings inside the body are kept as they are."""
        changelog = parse_changelog("## [Unreleased]\r\n- a\r\n- b\r\n")

        assert changelog.unreleased_body() == "- a\r\n- b"

    def test_empty_sections(self):
        """Empty sections are present but report no body."""
        changelog = parse_changelog("## [Unreleased]\n\n## [1.0.0]\n")

        assert changelog.unreleased == ""
        assert changelog.unreleased_body() is None
        assert changelog.release_body("1.0.0") is None
        assert changelog.known_versions() == ["1.0.0"]

    def test_from_text(self):
        """Changelog.from_text is parse_changelog."""
        text = "## [Unreleased]\n- a\n"
        assert Changelog.from_text(text) == parse_changelog(text)


class TestChangelogModel:
    """Tests for the Changelog model."""

    def test_unknown_version(self):
        """Unknown versions have no body."""
        changelog = parse_changelog("## [1.0.0]\n- a\n")

        assert changelog.release_body("9.9.9") is None
        assert changelog.get_release("9.9.9") is None

    def test_immutable(self):
        """Neither the changelog nor its releases can be changed in place."""
        changelog = parse_changelog("## [1.0.0]\n- a\n")

        with pytest.raises(dataclasses.FrozenInstanceError):
            changelog.unreleased = "- b"  # type: ignore[misc]
        with pytest.raises(TypeError):
            changelog.releases["2.0.0"] = changelog.releases["1.0.0"]  # type: ignore[index]

    def test_replace_returns_copy(self):
        """replace() leaves the original untouched."""
        changelog = parse_changelog("## [Unreleased]\n- a\n")

        updated = changelog.replace(unreleased="- b")

        assert updated.unreleased_body() == "- b"
        assert changelog.unreleased_body() == "- a"

    def test_mismatched_release_key(self):
        """Release keys must match the entry versions."""
        entry = ReleaseEntry(version="1.0.0", date=None, body="")

        with pytest.raises(ValueError, match="does not match"):
            Changelog(releases={"2.0.0": entry})

    def test_promote_unreleased(self):
        """Promoting creates a new first release and empties Unreleased."""
        changelog = parse_changelog("## [Unreleased]\n- new\n\n## [1.0.0] - 2024-01-01\n- old\n")

        released = changelog.promote_unreleased("1.1.0", datetime.date(2024, 3, 1))

        assert released.known_versions() == ["1.1.0", "1.0.0"]
        assert released.release_body("1.1.0") == "- new"
        assert released.get_release("1.1.0").date == datetime.date(2024, 3, 1)
        assert released.unreleased == ""
        assert changelog.unreleased_body() == "- new"

    def test_promote_existing_version(self):
        """A version cannot be released twice."""
        changelog = parse_changelog("## [Unreleased]\n- new\n\n## [1.0.0]\n- old\n")

        with pytest.raises(DuplicateVersionSectionError):
            changelog.promote_unreleased("1.0.0")


class TestSelectChanges:
    """Tests for select_changes()."""

    def test_select_unreleased(self):
        """Without a version the Unreleased body is selected."""
        changelog = parse_changelog("## [Unreleased]\n- a\n\n## [1.0.0]\n- b\n")
        assert select_changes(changelog) == "- a"

    def test_select_version(self):
        """With a version that release body is selected."""
        changelog = parse_changelog("## [Unreleased]\n- a\n\n## [1.0.0]\n- b\n")
        assert select_changes(changelog, "1.0.0") == "- b"

    def test_select_missing_version(self):
        """A missing version selects nothing."""
        changelog = parse_changelog("## [Unreleased]\n- a\n")
        assert select_changes(changelog, "1.0.0") is None


class TestDocumentPreamble:
    """Tests for document_preamble()."""

    def test_title_and_introduction(self, keep_a_changelog: str):
        """Everything before the Unreleased section is the preamble."""
        assert document_preamble(keep_a_changelog) == (
            "# Changelog\n\n"
            "All notable changes to this project will be documented in this file.\n\n"
            "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/)."
        )

    def test_unknown_headings_are_part_of_the_preamble(self):
        """Headings that are not changelog sections do not end the preamble."""
        text = "# Changelog\n\n## Notes\n\nRead me.\n\n## [1.0.0]\n- a\n"
        assert document_preamble(text) == "# Changelog\n\n## Notes\n\nRead me."

    def test_no_preamble(self):
        """A document starting with a section has no preamble."""
        assert document_preamble("## [Unreleased]\n- a\n") == ""

    def test_no_sections(self):
        """Without sections the whole document is the preamble."""
        assert document_preamble("\n# Changelog\n\nNothing yet.\n") == "# Changelog\n\nNothing yet."
