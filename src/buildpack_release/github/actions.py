"""GitHub Actions step outputs."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from buildpack_release.exceptions import ActionOutputError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def format_output(name: str, value: str, delimiter: str | None = None) -> str:
    """Format an output entry in the multi-line ``name<<DELIMITER`` syntax."""
    delimiter = delimiter or f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in value:
        raise ValueError(f"Output value for {name!r} contains its delimiter")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def set_output(name: str, value: str, output_file: Path) -> None:
    """Append an output to the step output file.

    Args:
        name: Output name
        value: Output value, may span multiple lines
        output_file: File named by the ``GITHUB_OUTPUT`` variable

    Raises:
        ActionOutputError: If the output file cannot be written
    """
    logger.debug("Setting output %s in %s", name, output_file)
    try:
        with output_file.open("a", encoding="utf-8") as fp:
            fp.write(format_output(name, value))
    except OSError as e:
        raise ActionOutputError(name, e) from e
