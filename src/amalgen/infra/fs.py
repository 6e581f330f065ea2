from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and atomic artifact persistence. Artifacts are
staged in a temporary file next to their destination and moved into place
only once fully written, so a failed run never leaves a truncated output.
"""

import logging
import os
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def safe_mkdir(path: str) -> None:
    """Create a directory hierarchy if it does not exist yet."""
    os.makedirs(path, exist_ok=True)

# -----------------------------------------------------------------------------
# ARTIFACT PERSISTENCE
# -----------------------------------------------------------------------------

def write_artifact(output_dir: str, name: str, content: bytes) -> str:
    """
    Atomically write a generated artifact.

    Args:
        output_dir: Destination directory (created when missing).
        name: File name of the artifact.
        content: Complete artifact bytes.

    Returns:
        str: Absolute path of the written file.
    """
    safe_mkdir(output_dir)
    dest = os.path.abspath(os.path.join(output_dir, name))

    fd, tmp_path = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=os.path.dirname(dest))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.replace(tmp_path, dest)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    # mkstemp creates files readable by the owner only
    os.chmod(dest, 0o644)
    logger.debug(f"Wrote {len(content)} bytes to {dest}")
    return dest
