from __future__ import annotations

import io
import logging
import tarfile
from typing import Dict, Optional

import requests

from amalgen.domain.config import UpstreamSource
from amalgen.domain.errors import ArchiveLayoutError, RetrievalError
from amalgen.domain.file_set import VirtualFileSet
from amalgen.infra.network.common import CHUNK_SIZE, DEFAULT_TIMEOUT, USER_AGENT, calculate_sha256

logger = logging.getLogger(__name__)


def fetch_file_set(upstream: UpstreamSource, timeout: float = DEFAULT_TIMEOUT) -> VirtualFileSet:
    """Acquire the upstream archive (remote or local) and unpack it."""
    if upstream.archive_path:
        data = read_local_archive(upstream.archive_path)
    else:
        data = download_archive(upstream.url, timeout=timeout)

    logger.debug(f"Archive sha256: {calculate_sha256(data)}")
    files = extract_tarball(data, source=upstream.location)
    logger.info(f"Unpacked {len(files)} files ({files.total_bytes()} bytes) from {upstream.location}")
    return files


def download_archive(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download a tarball into memory using buffered streaming. No retries."""
    headers = {"User-Agent": USER_AGENT}
    logger.info(f"Downloading tarball from {url}")

    try:
        with requests.get(url, headers=headers, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            buf = io.BytesIO()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    buf.write(chunk)
            return buf.getvalue()
    except requests.exceptions.RequestException as e:
        raise RetrievalError(url, str(e)) from e


def read_local_archive(path: str) -> bytes:
    logger.info(f"Reading tarball from {path}")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise RetrievalError(path, str(e)) from e


def extract_tarball(data: bytes, source: str = "<memory>") -> VirtualFileSet:
    """
    Unpack a .tar.gz payload, stripping its single top-level directory.

    The prefix is taken from the first regular file; a leading './' segment
    counts as part of it. Directories and non-regular members are skipped.

    Raises:
        ArchiveLayoutError: If a file does not share the common prefix.
        RetrievalError: If the payload is not a readable gzip tarball.
    """
    prefix: Optional[str] = None
    files: Dict[str, bytes] = {}

    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            for member in tar:
                if not member.isfile():
                    continue

                if prefix is None:
                    prefix = _common_prefix(member.name)

                if not member.name.startswith(prefix):
                    raise ArchiveLayoutError(source, member.name, prefix)

                extracted = tar.extractfile(member)
                if extracted is None:
                    raise RetrievalError(source, f"extract file {member.name!r}: no content")
                name = member.name[len(prefix):]
                files[name] = extracted.read()
                logger.debug(f"  [D] {name}")
    except (tarfile.TarError, EOFError, OSError) as e:
        raise RetrievalError(source, f"decompress archive: {e}") from e

    return VirtualFileSet(files)


def _common_prefix(name: str) -> str:
    parts = name.split("/")
    if name.startswith("./") and len(parts) > 1:
        return "./" + parts[1] + "/"
    return parts[0] + "/"
