from __future__ import annotations

"""
Virtual File Set.

Typed, read-only container for an unpacked source archive. Keys are
forward-slash relative paths without a leading './'; values are the raw
bytes of each file. The resolver only ever reads from it; the preprocessor
derives new sets through replace() instead of mutating one in place.
"""

from typing import Dict, Iterator, Mapping, Optional

from amalgen.domain.errors import FileNotInSetError


class VirtualFileSet(Mapping[str, bytes]):
    """Immutable mapping from relative path to raw file content."""

    __slots__ = ("_files",)

    def __init__(self, files: Optional[Mapping[str, bytes]] = None) -> None:
        self._files: Dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self._files[_normalize_key(path)] = bytes(content)

    def __getitem__(self, path: str) -> bytes:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __repr__(self) -> str:
        return f"VirtualFileSet({len(self._files)} files)"

    def read(self, path: str) -> bytes:
        """
        Return the content stored under ``path``.

        Raises:
            FileNotInSetError: If the path is not part of the set.
        """
        try:
            return self._files[path]
        except KeyError:
            raise FileNotInSetError(path) from None

    def replace(self, updates: Mapping[str, bytes]) -> "VirtualFileSet":
        """Return a new set where the given paths hold new content."""
        merged = dict(self._files)
        merged.update(updates)
        return VirtualFileSet(merged)

    def total_bytes(self) -> int:
        return sum(len(content) for content in self._files.values())


def _normalize_key(path: str) -> str:
    key = path.replace("\\", "/")
    while key.startswith("./"):
        key = key[2:]
    if not key:
        raise ValueError("Virtual file set keys must not be empty.")
    return key
