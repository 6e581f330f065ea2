from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the data structures and factory functions used to communicate
generation results between the pipeline engine and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class UnitReport:
    """
    Outcome of amalgamating a single output unit.

    Attributes:
        name: Output file name of the unit (e.g. 'zlib.c').
        ok: Whether the unit was generated.
        path: Absolute path of the written artifact, empty on dry runs.
        size_bytes: Size of the rendered artifact.
        line_count: Number of lines in the rendered artifact.
        error: Failure message when ok is False.
    """
    name: str
    ok: bool
    path: str = ""
    size_bytes: int = 0
    line_count: int = 0
    error: str = ""


@dataclass(frozen=True)
class GenerationResult:
    """
    Unified result object of a complete generation run.

    Attributes:
        ok: Flag indicating every requested unit was produced.
        error: Descriptive message of the first failure.
        version: Upstream version label merged from.
        source: URL or path the archive was read from.
        output_dir: Directory artifacts are written to.
        dry_run: Whether writing was skipped.
        file_count: Number of files in the unpacked archive.
        units: Per-unit reports in generation order.
        summary: Technical execution summary.
    """
    ok: bool
    error: str
    version: str
    source: str
    output_dir: str
    dry_run: bool = False
    file_count: int = 0
    units: List[UnitReport] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        version: str,
        source: str,
        output_dir: str,
        *,
        dry_run: bool = False,
        file_count: int = 0,
        units: Optional[List[UnitReport]] = None,
) -> GenerationResult:
    """
    Create a failed generation result.

    Units completed before the failure are kept so callers can report the
    artifacts that were already written.
    """
    units = list(units or [])
    return GenerationResult(
        ok=False,
        error=error,
        version=version,
        source=source,
        output_dir=output_dir,
        dry_run=dry_run,
        file_count=file_count,
        units=units,
        summary=_build_summary(units),
    )


def create_success_result(
        version: str,
        source: str,
        output_dir: str,
        units: List[UnitReport],
        *,
        dry_run: bool = False,
        file_count: int = 0,
) -> GenerationResult:
    """Create a successful generation result."""
    return GenerationResult(
        ok=True,
        error="",
        version=version,
        source=source,
        output_dir=output_dir,
        dry_run=dry_run,
        file_count=file_count,
        units=list(units),
        summary=_build_summary(units),
    )


def _build_summary(units: List[UnitReport]) -> Dict[str, Any]:
    return {
        "generated": [u.name for u in units if u.ok],
        "failed": [u.name for u in units if not u.ok],
        "total_bytes": sum(u.size_bytes for u in units),
        "total_lines": sum(u.line_count for u in units),
    }
