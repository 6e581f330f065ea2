from __future__ import annotations

"""
Targeted Patch Interpreter.

Applies the declarative patch table to individual files. Every operation is
idempotent: re-applying a table to already patched content leaves it
unchanged.
"""

import logging
from typing import Iterable

from amalgen.domain.patch_models import InsertPrefix, PatchOp, ReplaceLiteral

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def apply_patch_ops(path: str, content: bytes, ops: Iterable[PatchOp]) -> bytes:
    """
    Apply an ordered sequence of patch operations to a file's content.

    Args:
        path: File name the operations are keyed by (for diagnostics).
        content: Current raw content.
        ops: Operations in application order.

    Returns:
        bytes: Patched content.
    """
    for op in ops:
        if isinstance(op, InsertPrefix):
            content = insert_prefix(content, op.text.encode("utf-8"))
        elif isinstance(op, ReplaceLiteral):
            before = content
            content = replace_literal(content, op.old.encode("utf-8"), op.new.encode("utf-8"))
            if content == before:
                logger.debug(f"Patch on {path} matched nothing: {op.old!r}")
        else:
            raise TypeError(f"Unsupported patch operation for {path}: {op!r}")
    return content


def insert_prefix(content: bytes, prefix: bytes) -> bytes:
    if content.startswith(prefix):
        return content
    return prefix + content


def replace_literal(content: bytes, old: bytes, new: bytes) -> bytes:
    """
    Replace ``old`` with ``new`` without touching earlier replacements.

    When the replacement itself contains the searched literal, existing
    occurrences of the replacement are kept intact and only the text between
    them is rewritten.
    """
    if not old:
        return content
    if old not in new:
        return content.replace(old, new)
    return new.join(part.replace(old, new) for part in content.split(new))
