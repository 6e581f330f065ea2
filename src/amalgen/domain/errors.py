from __future__ import annotations

"""
Domain Exception Hierarchy.

Every failure the generator can raise derives from AmalgenError so that the
interface layer can translate it into a single human-readable message and a
non-zero exit status. Unresolvable includes are preserved in the output
and never reported.
"""

from typing import Optional


class AmalgenError(Exception):
    """Base class for all generator failures."""


class ConfigError(AmalgenError):
    """Raised when a configuration value or override is invalid."""


class RetrievalError(AmalgenError):
    """
    Raised when the upstream archive cannot be fetched or decompressed.

    Attributes:
        source: URL or local path the archive was read from.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"retrieve {source!r}: {reason}")


class ArchiveLayoutError(RetrievalError):
    """Raised when an archive member does not share the common top-level prefix."""

    def __init__(self, source: str, member: str, prefix: str) -> None:
        self.member = member
        self.prefix = prefix
        super().__init__(source, f"extract file {member!r}: doesn't have common prefix {prefix!r}")


class FileNotInSetError(AmalgenError, KeyError):
    """Raised when a path is looked up that the virtual file set does not hold."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(path)

    def __str__(self) -> str:
        return f"file {self.path!r}: not found"


class MissingEntryError(AmalgenError):
    """Raised before any resolution when a designated entry file is absent."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"file {path!r}: not found")


class ResolutionError(AmalgenError):
    """
    Raised when a matched include candidate fails to resolve.

    Nested failures are chained so the message names every candidate from
    the outermost to the innermost, e.g. ``resolve 'b.h': resolve 'c.h': ...``.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"resolve {path!r}{detail}")

    @property
    def chain(self) -> list[str]:
        """Candidate paths from the outermost failure to the innermost one."""
        paths = [self.path]
        cause = self.cause
        while isinstance(cause, ResolutionError):
            paths.append(cause.path)
            cause = cause.cause
        return paths


class AmalgamationError(AmalgenError):
    """Raised when resolving one entry file of a unit fails."""

    def __init__(self, entry: str, cause: BaseException) -> None:
        self.entry = entry
        self.cause = cause
        super().__init__(f"file {entry!r}: {cause}")
