"""Configuration management for buildpack-release."""

from __future__ import annotations

from buildpack_release.config.loader import load_config
from buildpack_release.config.models import (
    BuildpackReleaseConfig,
    ImageConfig,
    OutputConfig,
)

__all__ = [
    "BuildpackReleaseConfig",
    "ImageConfig",
    "OutputConfig",
    "load_config",
]
