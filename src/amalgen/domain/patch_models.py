from __future__ import annotations

"""
Declarative Patch Operations.

Upstream-specific fixes are described as data: a table mapping an exact file
name to an ordered tuple of operations. The preprocessor interprets the
table; the resolver never sees it.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union


@dataclass(frozen=True)
class InsertPrefix:
    """Prepend ``text`` to the file content."""
    text: str
    kind: str = "insert-prefix"


@dataclass(frozen=True)
class ReplaceLiteral:
    """Replace every literal occurrence of ``old`` with ``new``."""
    old: str
    new: str
    kind: str = "replace-literal"


PatchOp = Union[InsertPrefix, ReplaceLiteral]
PatchTable = Dict[str, Tuple[PatchOp, ...]]
