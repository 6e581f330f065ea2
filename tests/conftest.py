from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a small C source tree and an in-memory tarball builder.
"""

import io
import os
import sys
import tarfile
from typing import Callable, Dict, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def build_tarball(files: Dict[str, bytes], prefix: Optional[str] = "libz-1234/") -> bytes:
    """
    Pack files into an in-memory .tar.gz, each stored under ``prefix``.

    A directory entry for the prefix is written first, the way archive
    exports from code forges lay them out.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        if prefix:
            info = tarfile.TarInfo(prefix.rstrip("/"))
            info.type = tarfile.DIRTYPE
            tar.addfile(info)
        for name, content in files.items():
            info = tarfile.TarInfo((prefix or "") + name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def tarball_factory() -> Callable[..., bytes]:
    return build_tarball


@pytest.fixture
def mini_zlib_files() -> Dict[str, bytes]:
    """
    A miniature zlib-shaped source tree.

    Structure:
      zconf.h, zlib.h (includes zconf.h), zutil.h (includes zlib.h),
      adler32.c and crc32.c (both include zutil.h and a system header).
    """
    return {
        "zconf.h": b"typedef unsigned char Byte;\n",
        "zlib.h": b'#ifndef ZLIB_H\n#define ZLIB_H\n#include "zconf.h"\nint deflate(void);\n#endif\n',
        "zutil.h": b'#include "zlib.h"\n#include <string.h>\n#define local static\n',
        "adler32.c": b'#include "zutil.h"\nlocal int adler32(void) { return 1; }\n',
        "crc32.c": b'#include "zutil.h"\n#include <endian.h>\nlocal int crc32(void) { return 2; }\n',
        "README": b"zlib\n",
    }
