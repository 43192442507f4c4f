"""Exception hierarchy for buildpack-release.

All errors raised by the library derive from BuildpackReleaseError so the
command layer can report them uniformly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class BuildpackReleaseError(Exception):
    """Base class for all buildpack-release errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# Changelog


class ChangelogError(BuildpackReleaseError):
    """Base class for changelog errors."""


class ChangelogParseError(ChangelogError):
    """A changelog document could not be turned into a model."""

    def __init__(self, message: str, header: str | None = None) -> None:
        super().__init__(message)
        self.header = header


class DuplicateUnreleasedSectionError(ChangelogParseError):
    """More than one Unreleased section was found."""

    def __init__(self, header: str) -> None:
        super().__init__(f"Duplicate Unreleased section: {header!r}", header=header)


class DuplicateVersionSectionError(ChangelogParseError):
    """A release version appears in more than one section header."""

    def __init__(self, version: str, header: str | None = None) -> None:
        super().__init__(
            f"Duplicate section for version {version}: {header or version!r}",
            header=header,
        )
        self.version = version


class MalformedDocumentError(ChangelogParseError):
    """The document structure cannot describe a changelog at all."""


class ChangelogReadError(ChangelogError):
    """Reading or parsing a changelog file failed."""

    def __init__(self, path: Path, error: Exception) -> None:
        action = "read" if isinstance(error, (OSError, UnicodeDecodeError)) else "parse"
        super().__init__(f"Could not {action} changelog\nPath: {path}\nError: {error}")
        self.path = path
        self.error = error


class ChangelogUpdateError(ChangelogError):
    """A parsed changelog could not be updated for a release."""

    def __init__(self, path: Path, error: Exception) -> None:
        super().__init__(f"Could not update changelog\nPath: {path}\nError: {error}")
        self.path = path
        self.error = error


# Configuration


class ConfigError(BuildpackReleaseError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """The configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """The configuration file is not valid."""


# Buildpacks


class ProjectError(BuildpackReleaseError):
    """Base class for errors related to the buildpacks in a project."""


class FindReleasableBuildpacksError(ProjectError):
    """Walking the project tree for buildpacks failed."""

    def __init__(self, path: Path, error: Exception) -> None:
        super().__init__(f"I/O error while finding buildpacks\nPath: {path}\nError: {error}")
        self.path = path
        self.error = error


class ReadBuildpackDescriptorError(ProjectError):
    """A buildpack descriptor could not be read or deserialized."""

    def __init__(self, path: Path, reason: str, error: Exception | None = None) -> None:
        super().__init__(f"Failed to {reason} buildpack\nPath: {path}\nError: {error}")
        self.path = path
        self.reason = reason
        self.error = error


class FixedVersionError(ProjectError):
    """Releasable buildpacks do not all share the same version."""

    def __init__(self, versions: Iterable[str]) -> None:
        self.versions = sorted(set(versions))
        listing = "\n".join(f"• {version}" for version in self.versions)
        super().__init__(
            "Expected all buildpacks to have the same version but multiple versions "
            f"were found:\n{listing}"
        )


# Image digests


class DigestError(BuildpackReleaseError):
    """Calculating an image digest failed."""

    def __init__(self, message: str, url: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.stderr = stderr


class DigestCommandError(DigestError):
    """The digest command could not be started."""


class DigestExitStatusError(DigestError):
    """The digest command exited with a non-zero status."""

    def __init__(self, url: str, returncode: int, stderr: str | None = None) -> None:
        super().__init__(
            f"Digest command for {url} failed with exit code {returncode}",
            url=url,
            stderr=stderr,
        )
        self.returncode = returncode


# CI


class ActionOutputError(BuildpackReleaseError):
    """Writing a GitHub Actions output failed."""

    def __init__(self, name: str, error: Exception) -> None:
        super().__init__(f"Could not set action output {name!r}\nError: {error}")
        self.name = name
        self.error = error
