"""Discovery and metadata of the buildpacks in a project.

A buildpack is a directory containing a ``buildpack.toml`` descriptor.
It is releasable when it also has a changelog.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError

from buildpack_release.exceptions import (
    FindReleasableBuildpacksError,
    ReadBuildpackDescriptorError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from buildpack_release.config.models import BuildpackReleaseConfig

logger = logging.getLogger(__name__)


class BuildpackInfo(BaseModel):
    """The ``[buildpack]`` table of a descriptor."""

    model_config = ConfigDict(extra="allow")

    id: str
    version: str
    name: str | None = None


class BuildpackDescriptor(BaseModel):
    """A ``buildpack.toml`` file.

    Only the fields needed for releasing are modelled, everything else is
    kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    api: str
    buildpack: BuildpackInfo
    metadata: dict[str, Any] | None = None
    order: list[dict[str, Any]] | None = None

    @property
    def is_composite(self) -> bool:
        return self.order is not None


@dataclass(frozen=True)
class ReleasableBuildpack:
    """A buildpack with the metadata needed to release it."""

    id: str
    version: str
    path: Path
    image_repository: str | None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "path": str(self.path),
            "version": self.version,
            "image_repository": self.image_repository,
        }


def find_buildpack_dirs(
    start: Path,
    descriptor_filename: str = "buildpack.toml",
    ignore_dirs: Iterable[str] = (),
) -> list[Path]:
    """Find all directories under *start* that contain a buildpack descriptor.

    Hidden directories and directories named in *ignore_dirs* are not
    searched.

    Raises:
        FindReleasableBuildpacksError: If the tree cannot be walked
    """
    ignored = set(ignore_dirs)

    def _raise(error: OSError) -> None:
        raise FindReleasableBuildpacksError(start, error)

    found = []
    for dirpath, dirnames, filenames in os.walk(start, onerror=_raise):
        dirnames[:] = [
            name for name in dirnames if name not in ignored and not name.startswith(".")
        ]
        if descriptor_filename in filenames:
            found.append(Path(dirpath))

    return sorted(found)


def find_releasable_buildpacks(start: Path, config: BuildpackReleaseConfig) -> list[Path]:
    """Find buildpack directories under *start* that have a changelog."""
    dirs = [
        directory
        for directory in find_buildpack_dirs(start, config.descriptor_filename, config.ignore_dirs)
        if (directory / config.changelog_filename).is_file()
    ]
    logger.debug("Found %d releasable buildpack(s) in %s", len(dirs), start)
    return dirs


def read_buildpack_descriptor(
    directory: Path,
    descriptor_filename: str = "buildpack.toml",
) -> BuildpackDescriptor:
    """Read the descriptor of the buildpack in *directory*.

    Raises:
        ReadBuildpackDescriptorError: If the file cannot be read or is invalid
    """
    path = directory / descriptor_filename
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadBuildpackDescriptorError(path, "read", e) from e

    try:
        return BuildpackDescriptor.model_validate(tomllib.loads(content))
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ReadBuildpackDescriptorError(path, "deserialize", e) from e


def lookup_first(table: Mapping[str, Any], paths: Iterable[Sequence[str]]) -> Any | None:
    """Return the value at the first key path that exists in *table*.

    Each path is a sequence of keys into nested tables. Paths are tried in
    order and the first one that resolves wins.
    """
    for path in paths:
        value: Any = table
        for key in path:
            if not isinstance(value, dict) or key not in value:
                value = None
                break
            value = value[key]
        if value is not None:
            return value
    return None


def read_image_repository(
    descriptor: BuildpackDescriptor,
    keys: Iterable[str] = ("image", "docker"),
) -> str | None:
    """Read ``metadata.release.<key>.repository`` from a descriptor.

    Keys are tried in order, so renamed tables can be listed after the
    current name. A missing value at any level gives None.
    """
    paths = [("release", key, "repository") for key in keys]
    value = lookup_first(descriptor.metadata or {}, paths)
    if isinstance(value, str):
        return value
    return None


def load_releasable_buildpack(
    directory: Path,
    config: BuildpackReleaseConfig,
) -> ReleasableBuildpack:
    """Read the release metadata of the buildpack in *directory*."""
    descriptor = read_buildpack_descriptor(directory, config.descriptor_filename)
    return ReleasableBuildpack(
        id=descriptor.buildpack.id,
        version=descriptor.buildpack.version,
        path=directory,
        image_repository=read_image_repository(descriptor, config.image.repository_keys),
    )
