from __future__ import annotations

import hashlib

USER_AGENT = "amalgen/1.0.0"
DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192


def calculate_sha256(data: bytes) -> str:
    """Compute the SHA-256 digest of an in-memory archive payload."""
    return hashlib.sha256(data).hexdigest()
