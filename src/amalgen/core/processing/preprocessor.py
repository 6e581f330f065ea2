from __future__ import annotations

"""
Content Preprocessor.

Produces the "final" text the resolver works on. Transforms run per file
in a fixed order (targeted patches, endianness shim, header guards) and each
file only ever sees its own pre-transform content.
"""

import logging
import posixpath
from typing import Dict

from amalgen.core.processing.patches import apply_patch_ops
from amalgen.core.processing.shims import (
    add_header_guard,
    guard_macro,
    replace_endian_include,
    strip_header_guard,
)
from amalgen.domain.config import PreprocessOptions
from amalgen.domain.file_set import VirtualFileSet
from amalgen.domain.patch_models import PatchTable

logger = logging.getLogger(__name__)


def preprocess_file(
        path: str,
        content: bytes,
        patches: PatchTable,
        options: PreprocessOptions,
) -> bytes:
    """
    Apply every configured transform to a single file.

    Args:
        path: Relative path of the file inside the archive.
        content: Raw content as unpacked.
        patches: Table keyed by exact file name.
        options: Generic transform settings.

    Returns:
        bytes: Transformed content.
    """
    macro = None
    if _needs_guard(path, options):
        macro = guard_macro(path, options.guard_prefix, options.header_suffix)
        # Patches see the text inside a guard from an earlier run
        content = strip_header_guard(content, macro)

    ops = patches.get(path, ())
    if ops:
        content = apply_patch_ops(path, content, ops)

    if options.endian_shim:
        content = replace_endian_include(content)

    if macro:
        content = add_header_guard(content, macro)

    return content


def preprocess_files(
        files: VirtualFileSet,
        patches: PatchTable,
        options: PreprocessOptions,
) -> VirtualFileSet:
    """
    Run the preprocessor over a whole file set.

    Returns:
        VirtualFileSet: A new set; the input set is left untouched.
    """
    missing = sorted(name for name in patches if name not in files)
    for name in missing:
        logger.warning(f"Patch target not present in archive: {name}")

    changed: Dict[str, bytes] = {}
    for path, content in files.items():
        processed = preprocess_file(path, content, patches, options)
        if processed != content:
            changed[path] = processed

    logger.info(f"Preprocessed {len(files)} files ({len(changed)} modified).")
    return files.replace(changed)


def _needs_guard(path: str, options: PreprocessOptions) -> bool:
    if not options.header_suffix or not path.endswith(options.header_suffix):
        return False
    return path not in options.guard_exempt and posixpath.basename(path) not in options.guard_exempt
