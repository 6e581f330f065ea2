from __future__ import annotations

"""
Integration tests for archive retrieval.

Utilizes mocking to verify the tarball download without making real
network calls, and builds real .tar.gz payloads in memory to exercise
prefix stripping and layout validation.
"""

import io
import tarfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from amalgen.domain.config import UpstreamSource
from amalgen.domain.errors import ArchiveLayoutError, RetrievalError
from amalgen.infra.network import (
    calculate_sha256,
    download_archive,
    extract_tarball,
    fetch_file_set,
    read_local_archive,
)


def _mock_response(chunks):
    response = MagicMock()
    response.status_code = 200
    response.iter_content.return_value = iter(chunks)
    response.__enter__.return_value = response
    return response

# -----------------------------------------------------------------------------
# EXTRACTION TESTS
# -----------------------------------------------------------------------------

def test_extract_strips_common_prefix(tarball_factory) -> None:
    """TC-01: The single top-level directory is removed from every key."""
    data = tarball_factory({"zlib.h": b"Z", "contrib/x.c": b"X"})

    files = extract_tarball(data)

    assert set(files) == {"zlib.h", "contrib/x.c"}
    assert files["contrib/x.c"] == b"X"


def test_extract_handles_dot_slash_prefix(tarball_factory) -> None:
    """TC-02: './libz-1/' counts as the prefix when members start with './'."""
    data = tarball_factory({"zlib.h": b"Z"}, prefix="./libz-1/")

    files = extract_tarball(data)

    assert set(files) == {"zlib.h"}


def test_extract_rejects_member_outside_prefix() -> None:
    """TC-03: A file outside the common prefix aborts extraction."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name in ("libz-1/zlib.h", "stray/evil.c"):
            info = tarfile.TarInfo(name)
            info.size = 1
            tar.addfile(info, io.BytesIO(b"x"))

    with pytest.raises(ArchiveLayoutError) as exc_info:
        extract_tarball(buf.getvalue(), source="test.tar.gz")

    assert exc_info.value.member == "stray/evil.c"
    assert exc_info.value.prefix == "libz-1/"
    assert "doesn't have common prefix" in str(exc_info.value)


def test_extract_rejects_corrupted_payload() -> None:
    with pytest.raises(RetrievalError):
        extract_tarball(b"definitely not gzip", source="broken.tar.gz")

# -----------------------------------------------------------------------------
# DOWNLOAD TESTS
# -----------------------------------------------------------------------------

def test_download_archive_streams_chunks() -> None:
    """TC-04: Chunks are concatenated and the user agent is sent."""
    response = _mock_response([b"abc", b"", b"def"])

    with patch("requests.get", return_value=response) as mock_get:
        data = download_archive("https://example.com/libz.tar.gz", timeout=3)

    assert data == b"abcdef"
    _, kwargs = mock_get.call_args
    assert kwargs["timeout"] == 3
    assert kwargs["stream"] is True
    assert "User-Agent" in kwargs["headers"]


def test_download_archive_wraps_http_errors() -> None:
    """TC-05: HTTP failures surface as RetrievalError naming the URL."""
    response = _mock_response([])
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")

    with patch("requests.get", return_value=response):
        with pytest.raises(RetrievalError) as exc_info:
            download_archive("https://example.com/missing.tar.gz")

    assert exc_info.value.source == "https://example.com/missing.tar.gz"
    assert "404" in str(exc_info.value)


def test_download_archive_wraps_connection_errors() -> None:
    with patch("requests.get", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(RetrievalError):
            download_archive("https://example.com/libz.tar.gz")

# -----------------------------------------------------------------------------
# FACADE TESTS
# -----------------------------------------------------------------------------

def test_fetch_file_set_downloads_and_extracts(tarball_factory) -> None:
    data = tarball_factory({"zlib.h": b"Z"})

    with patch("requests.get", return_value=_mock_response([data])):
        files = fetch_file_set(UpstreamSource(url="https://example.com/libz.tar.gz"))

    assert dict(files) == {"zlib.h": b"Z"}


def test_fetch_file_set_prefers_local_archive(tmp_path: Path, tarball_factory) -> None:
    archive = tmp_path / "libz.tar.gz"
    archive.write_bytes(tarball_factory({"zconf.h": b"C"}))

    with patch("requests.get") as mock_get:
        files = fetch_file_set(UpstreamSource(archive_path=str(archive)))

    mock_get.assert_not_called()
    assert dict(files) == {"zconf.h": b"C"}


def test_read_local_archive_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RetrievalError):
        read_local_archive(str(tmp_path / "missing.tar.gz"))


def test_sha256_of_payload() -> None:
    expected = "54e9a3fff273ffed2552165e6fb679a4cc3e0c3badb22dafd62c7dac289d2ef4"

    assert calculate_sha256(b"data_to_hash") == expected
