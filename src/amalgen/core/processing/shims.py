from __future__ import annotations

"""
Generic Source Shims.

Transforms that apply to every file of the archive rather than to a named
one: replacing the endianness-detection system header with compiler
builtins, and wrapping headers in generated include guards so they survive
being inlined more than once.
"""

import posixpath
import re
from typing import Final

ENDIAN_INCLUDE: Final[bytes] = b"#include <endian.h>"

ENDIAN_SHIM: Final[bytes] = (
    b"#ifndef ZLIBGEN_ENDIAN_SHIM_H\n"
    b"#define ZLIBGEN_ENDIAN_SHIM_H\n"
    b"#ifndef BYTE_ORDER\n"
    b"#define BYTE_ORDER __BYTE_ORDER__\n"
    b"#define LITTLE_ENDIAN __ORDER_LITTLE_ENDIAN__\n"
    b"#define BIG_ENDIAN __ORDER_BIG_ENDIAN__\n"
    b"#endif\n"
    b"#endif\n"
)

_NON_IDENTIFIER: Final[re.Pattern] = re.compile(r"[^A-Za-z0-9_]")

# -----------------------------------------------------------------------------
# ENDIANNESS
# -----------------------------------------------------------------------------

def replace_endian_include(content: bytes) -> bytes:
    """Swap every literal endian.h include for the builtin-based shim."""
    if ENDIAN_INCLUDE not in content:
        return content
    return content.replace(ENDIAN_INCLUDE, ENDIAN_SHIM)

# -----------------------------------------------------------------------------
# HEADER GUARDS
# -----------------------------------------------------------------------------

def guard_macro(path: str, prefix: str, suffix: str = ".h") -> str:
    """
    Derive the guard macro for a header from its base name.

    'zutil.h' becomes 'ZLIBGEN_ZUTIL_H' with the default prefix.
    """
    base = posixpath.basename(path)
    if suffix and base.endswith(suffix):
        base = base[: -len(suffix)]
    return prefix + _NON_IDENTIFIER.sub("_", base.upper()) + "_H"


def add_header_guard(content: bytes, macro: str) -> bytes:
    """Wrap content in an #ifndef/#define/#endif guard unless already wrapped."""
    opening = f"#ifndef {macro}\n#define {macro}\n".encode("ascii")
    if content.startswith(opening):
        return content
    body = content if not content or content.endswith(b"\n") else content + b"\n"
    return opening + body + b"#endif\n"


def strip_header_guard(content: bytes, macro: str) -> bytes:
    """Return the body of a guard added by add_header_guard(), or content as is."""
    opening = f"#ifndef {macro}\n#define {macro}\n".encode("ascii")
    closing = b"#endif\n"
    if content.startswith(opening) and content.endswith(closing):
        return content[len(opening):-len(closing)]
    return content
