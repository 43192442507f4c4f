"""Image digests via crane.

crane is called as a subprocess and its output is captured.
"""

from __future__ import annotations

import logging
import subprocess

from buildpack_release.exceptions import DigestCommandError, DigestExitStatusError

logger = logging.getLogger(__name__)


def calculate_digest(url: str, crane_command: str = "crane") -> str:
    """Calculate the digest of the image at *url*.

    Args:
        url: Image reference, e.g. ``docker.io/heroku/buildpack-foo:1.0.0``
        crane_command: crane executable to run

    Returns:
        The image digest, e.g. ``sha256:...``

    Raises:
        DigestCommandError: If crane cannot be started
        DigestExitStatusError: If crane fails
    """
    args = [crane_command, "digest", url]
    logger.debug("Running %s", " ".join(args))

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise DigestCommandError(
            f"{crane_command} not found. Install it from "
            "https://github.com/google/go-containerregistry",
            url=url,
        ) from e
    except subprocess.CalledProcessError as e:
        raise DigestExitStatusError(url, e.returncode, stderr=e.stderr) from e
    except OSError as e:
        raise DigestCommandError(f"Failed to run {crane_command}: {e}", url=url) from e

    return result.stdout.strip()
