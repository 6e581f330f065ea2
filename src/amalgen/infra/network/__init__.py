from __future__ import annotations

"""
Network Communication Infrastructure.

Retrieves the upstream source archive and unpacks it into a virtual file
set. This module acts as a Facade over the archive client.
"""

from amalgen.infra.network.archive_client import (
    download_archive,
    extract_tarball,
    fetch_file_set,
    read_local_archive,
)
from amalgen.infra.network.common import calculate_sha256

__all__ = [
    "download_archive",
    "extract_tarball",
    "fetch_file_set",
    "read_local_archive",
    "calculate_sha256",
]
