"""Buildpack discovery, descriptors and images."""

from __future__ import annotations

from buildpack_release.project.buildpacks import (
    BuildpackDescriptor,
    ReleasableBuildpack,
    find_buildpack_dirs,
    find_releasable_buildpacks,
    load_releasable_buildpack,
    read_buildpack_descriptor,
    read_image_repository,
)
from buildpack_release.project.digest import calculate_digest

__all__ = [
    "BuildpackDescriptor",
    "ReleasableBuildpack",
    "calculate_digest",
    "find_buildpack_dirs",
    "find_releasable_buildpacks",
    "load_releasable_buildpack",
    "read_buildpack_descriptor",
    "read_image_repository",
]
