"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


DESCRIPTOR_TEMPLATE = """\
api = "0.10"

[buildpack]
id = "{id}"
version = "{version}"

[[stacks]]
id = "*"
"""

IMAGE_METADATA_TEMPLATE = """
[metadata.release.{key}]
repository = "{repository}"
"""


@pytest.fixture
def make_buildpack(tmp_path: Path) -> Callable[..., Path]:
    """Create a buildpack directory inside ``tmp_path``.

    Returns a factory taking the relative directory, buildpack id and version.
    The changelog is only written when ``changelog`` is not None.
    """

    def factory(
        relative: str,
        buildpack_id: str,
        version: str = "1.0.0",
        changelog: str | None = "## [Unreleased]\n",
        repository: str | None = None,
        repository_key: str = "image",
    ) -> Path:
        directory = tmp_path / relative
        directory.mkdir(parents=True, exist_ok=True)

        descriptor = DESCRIPTOR_TEMPLATE.format(id=buildpack_id, version=version)
        if repository is not None:
            descriptor += IMAGE_METADATA_TEMPLATE.format(key=repository_key, repository=repository)
        (directory / "buildpack.toml").write_text(descriptor)

        if changelog is not None:
            (directory / "CHANGELOG.md").write_text(changelog)
        return directory

    return factory


@pytest.fixture
def keep_a_changelog() -> str:
    """A changelog with a title, an Unreleased section and two releases."""
    return """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/).

## [Unreleased]

### Added

- Support for the new stack
  - including arm64

## [1.1.0] - 2024-02-01

### Fixed

- Layer caching

## [1.0.0] - 2024-01-01

- Initial release
"""
