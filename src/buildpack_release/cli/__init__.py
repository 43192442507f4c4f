"""Command line interface for buildpack-release."""

from __future__ import annotations

from buildpack_release.cli.main import cli

__all__ = ["cli"]
