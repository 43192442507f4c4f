"""Configuration loading.

The configuration file is searched from the project directory upwards.
A project without a configuration file uses the defaults.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from buildpack_release.config.models import BuildpackReleaseConfig
from buildpack_release.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".buildpack-release.toml"


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the configuration file in *start* or one of its parents.

    Args:
        start: Directory to search from. Defaults to the current directory.

    Returns:
        Path to the configuration file, or None if there is none
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Read the raw configuration table from *path*.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as fp:
            return tomllib.load(fp)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def load_config(start: Path | None = None) -> BuildpackReleaseConfig:
    """Load the configuration for the project at *start*.

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    path = find_config_file(start)
    if path is None:
        logger.debug("No %s found, using default configuration", CONFIG_FILENAME)
        return BuildpackReleaseConfig()

    logger.debug("Loading configuration from %s", path)
    data = load_config_file(path)
    try:
        return BuildpackReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {path}:\n{e}") from e
