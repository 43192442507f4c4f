"""Release automation for projects with many buildpacks."""

from __future__ import annotations

__version__ = "0.1.0"
