from __future__ import annotations

"""
Recursive Include Resolver.

Replaces every include directive of a file with one of three outcomes:

- inline:   the name resolves to a file of the set that has not been
            inlined yet in this entry run; it is replaced by that file's
            fully resolved content framed by blank lines.
- suppress: the resolved candidate matches (glob) a path already inlined;
            it is replaced by nothing.
- preserve: no search prefix yields a file; the directive is kept as is.

Search prefixes are tried in order and the first prefix that is either
visited or present decides the outcome, even if a later prefix would point
at a different, unvisited file.

The search path only grows down a branch. The visited set is threaded
forward: each resolution returns the visited set it ended with and the next
directive continues from it, so later siblings see what earlier ones
inlined. Nothing is mutated in place.
"""

import logging
from typing import List, Sequence, Tuple, Union

from amalgen.core.resolution.directives import scan_includes
from amalgen.domain.errors import AmalgenError, ResolutionError
from amalgen.domain.file_set import VirtualFileSet
from amalgen.domain.include_models import IncludeDirective, ResolutionContext, join

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR = b"\n\n"

Visited = Tuple[str, ...]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def resolve(
        content: bytes,
        visited: Union[str, Sequence[str]],
        search_path: Sequence[str],
        files: VirtualFileSet,
) -> bytes:
    """
    Resolve every include directive of ``content`` against ``files``.

    Args:
        content: Text of the file being resolved.
        visited: Path (or glob patterns) already inlined, normally the
            resolved file's own path.
        search_path: Ordered directory prefixes, '.' being the archive root.
        files: Preprocessed virtual file set.

    Returns:
        bytes: Content with all directives inlined, suppressed or preserved.

    Raises:
        ResolutionError: If a matched candidate fails to resolve.
    """
    if isinstance(visited, str):
        visited = (visited,)
    ctx = ResolutionContext(visited=tuple(visited), search_path=tuple(search_path))
    resolved, _ = resolve_with_context(content, ctx, files)
    return resolved


def resolve_with_context(
        content: bytes,
        ctx: ResolutionContext,
        files: VirtualFileSet,
) -> Tuple[bytes, Visited]:
    """
    Resolve ``content`` using an explicit context.

    Returns:
        Tuple[bytes, Visited]: The resolved content and the visited set
        after every directive of ``content`` was processed.
    """
    out: List[bytes] = []
    pos = 0
    visited = ctx.visited

    for directive in scan_includes(content):
        out.append(content[pos:directive.start])
        replacement, visited = _resolve_directive(directive, ctx.with_visited(visited), files)
        out.append(replacement)
        pos = directive.end

    out.append(content[pos:])
    return b"".join(out), visited

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _resolve_directive(
        directive: IncludeDirective,
        ctx: ResolutionContext,
        files: VirtualFileSet,
) -> Tuple[bytes, Visited]:
    indent = "    " * (ctx.depth + 1)

    for prefix in ctx.search_path:
        candidate = join(prefix, directive.name)

        if ctx.is_visited(candidate):
            logger.debug(f"{indent}[R] {directive.name}")
            return b"", ctx.visited

        if candidate in files:
            logger.debug(f"{indent}[I] {directive.name} => {candidate}")
            try:
                nested, visited = resolve_with_context(
                    files.read(candidate), ctx.descend(candidate), files
                )
            except AmalgenError as e:
                raise ResolutionError(candidate, e) from e
            return _BLOCK_SEPARATOR + nested + _BLOCK_SEPARATOR, visited

    logger.debug(f"{indent}[S] {directive.name}")
    return directive.raw, ctx.visited
