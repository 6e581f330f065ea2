from __future__ import annotations

"""
Include Resolution Data Models.

Value objects shared by the directive scanner and the recursive resolver.
The resolution context is immutable: extending it returns a new instance,
so a search path extended for one branch never leaks into another.
"""

import fnmatch
import posixpath
from dataclasses import dataclass
from typing import Tuple

QUOTE_DELIMITER = '"'
ANGLE_DELIMITER = "<"


@dataclass(frozen=True)
class IncludeDirective:
    """
    A single ``#include`` line found in a file's content.

    Attributes:
        raw: Exact matched bytes, kept for byte-for-byte preservation.
        name: Path between the delimiters.
        delimiter: '"' for quoted includes, '<' for angle-bracket includes.
        start: Offset of the first matched byte.
        end: Offset one past the last matched byte.
    """
    raw: bytes
    name: str
    delimiter: str
    start: int
    end: int


@dataclass(frozen=True)
class ResolutionContext:
    """
    State carried through the recursive resolution.

    The search path is scoped to a branch; the visited set is handed from
    one directive to the next via with_visited().

    Attributes:
        visited: Glob patterns of files already inlined in this entry run.
        search_path: Ordered directory prefixes used to locate include names.
        depth: Nesting level, used for log indentation.
    """
    visited: Tuple[str, ...]
    search_path: Tuple[str, ...]
    depth: int = 0

    @classmethod
    def for_entry(cls, entry: str, include_dirs: Tuple[str, ...] = ()) -> "ResolutionContext":
        return cls(visited=(entry,), search_path=tuple(include_dirs) + (dirname(entry),))

    def descend(self, path: str) -> "ResolutionContext":
        """Return the context used to resolve the content of ``path``."""
        return ResolutionContext(
            visited=self.visited + (path,),
            search_path=self.search_path + (dirname(path),),
            depth=self.depth + 1,
        )

    def with_visited(self, visited: Tuple[str, ...]) -> "ResolutionContext":
        if visited == self.visited:
            return self
        return ResolutionContext(visited=visited, search_path=self.search_path, depth=self.depth)

    def is_visited(self, candidate: str) -> bool:
        return any(glob_match(pattern, candidate) for pattern in self.visited)


def join(prefix: str, name: str) -> str:
    """Join a search prefix and an include name, cleaning '.' and '..' segments."""
    return posixpath.normpath(posixpath.join(prefix, name))


def dirname(path: str) -> str:
    """Directory of a relative path, '.' for files at the archive root."""
    return posixpath.dirname(path) or "."


def glob_match(pattern: str, path: str) -> bool:
    """
    Shell-style match where wildcards never cross a '/'.

    Pattern and path must have the same number of segments, and each pair
    is matched on its own. '[^...]' is accepted as a negated class.
    """
    pattern_parts = pattern.split("/")
    path_parts = path.split("/")
    if len(pattern_parts) != len(path_parts):
        return False
    return all(
        fnmatch.fnmatchcase(part, pat.replace("[^", "[!"))
        for pat, part in zip(pattern_parts, path_parts)
    )
