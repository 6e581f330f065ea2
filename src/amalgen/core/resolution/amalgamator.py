from __future__ import annotations

"""
Amalgamation Driver.

Resolves a list of entry files one after another and concatenates their
output. Each entry starts from a fresh visited set and search path, so a
header inlined for one entry is inlined again if another entry needs it.
"""

import logging
from typing import List, Sequence

from amalgen.core.resolution.resolver import resolve_with_context
from amalgen.domain.config import AmalgamationUnit
from amalgen.domain.errors import AmalgamationError, MissingEntryError, ResolutionError
from amalgen.domain.file_set import VirtualFileSet
from amalgen.domain.include_models import ResolutionContext

logger = logging.getLogger(__name__)

BANNER_LINES = (
    "// AUTOMATICALLY GENERATED, DO NOT EDIT!",
    "// merged from {label} {version}.",
)

_ENTRY_SEPARATOR = b"\n\n"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def amalgamate(
        files: VirtualFileSet,
        entries: Sequence[str],
        include_dirs: Sequence[str] = (),
) -> bytes:
    """
    Merge the given entry files into a single body.

    Args:
        files: Preprocessed virtual file set.
        entries: Entry file paths, resolved and concatenated in this order.
        include_dirs: Extra search prefixes tried before each entry's own
            directory.

    Returns:
        bytes: Concatenated resolved content, each entry followed by two
        newlines.

    Raises:
        MissingEntryError: If any entry is absent (checked before resolving).
        AmalgamationError: If resolving an entry fails.
    """
    for entry in entries:
        if entry not in files:
            raise MissingEntryError(entry)

    logger.info(
        f"Resolving C* source files {list(entries)} (against: {list(include_dirs)}) "
        "(I = included, S = preserved because not found, R = skipped because already included)"
    )

    chunks: List[bytes] = []
    for entry in entries:
        logger.debug(f"  {entry}")
        ctx = ResolutionContext.for_entry(entry, tuple(include_dirs))
        try:
            resolved, _ = resolve_with_context(files.read(entry), ctx, files)
        except ResolutionError as e:
            raise AmalgamationError(entry, e) from e
        chunks.append(resolved)
        chunks.append(_ENTRY_SEPARATOR)

    return b"".join(chunks)


def render_unit(unit: AmalgamationUnit, label: str, version: str, body: bytes) -> bytes:
    """
    Wrap an amalgamated body with the banner and the unit's boilerplate.

    The unit's own label, when set, takes precedence over ``label``.

    Args:
        unit: Unit whose prologue and epilogue are emitted.
        label: Upstream library name for the banner.
        version: Upstream version label for the banner.
        body: Output of amalgamate().

    Returns:
        bytes: Complete artifact content.
    """
    label = unit.label or label
    head = [line.format(label=label, version=version) for line in BANNER_LINES]
    head.extend(unit.prologue)
    tail = [line.format(label=label, version=version) for line in unit.epilogue]

    return _lines(head) + body + _lines(tail)


def amalgamate_unit(files: VirtualFileSet, unit: AmalgamationUnit, label: str, version: str) -> bytes:
    """Amalgamate and render a configured unit in one step."""
    body = amalgamate(files, unit.entries, unit.include_dirs)
    logger.info(f"Generating {unit.name}")
    return render_unit(unit, label, version, body)


def _lines(lines: Sequence[str]) -> bytes:
    return "".join(f"{line}\n" for line in lines).encode("utf-8")
