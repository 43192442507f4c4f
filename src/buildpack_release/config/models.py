"""Configuration models.

Configuration lives in an optional ``.buildpack-release.toml`` file at the
root of the project. Every setting has a default, so the file only needs
to list what differs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ImageConfig(BaseModel):
    """Settings for container images of buildpacks."""

    model_config = ConfigDict(extra="forbid")

    repository_keys: list[str] = Field(
        default_factory=lambda: ["image", "docker"],
        description="Tables under metadata.release holding the image repository, "
        "tried in order",
    )
    crane_command: str = "crane"


class OutputConfig(BaseModel):
    """Names of the GitHub Actions outputs set by the commands."""

    model_config = ConfigDict(extra="forbid")

    changelog_name: str = "changelog"
    buildpacks_name: str = "buildpacks"
    version_name: str = "version"
    digest_name: str = "digest"


class BuildpackReleaseConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    changelog_filename: str = "CHANGELOG.md"
    descriptor_filename: str = "buildpack.toml"
    changelog_title: str = "Changelog"
    ignore_dirs: list[str] = Field(default_factory=lambda: [".git", "target", "node_modules"])

    image: ImageConfig = Field(default_factory=ImageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
