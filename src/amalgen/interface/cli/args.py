from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by domain.config.apply_overrides().
"""

import argparse
from typing import Any, Dict

from amalgen.domain.config import HEADER_UNIT, SOURCE_UNIT

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the amalgen CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="amalgen",
        description=(
            "Generate single-file zlib.c and zlib.h amalgamations from the "
            "upstream sortix libz archive."
        ),
    )

    # --- Source and destination ---
    p.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Directory the merged files are written to (default: current directory).",
    )
    p.add_argument(
        "--archive",
        dest="archive_path",
        default=None,
        help="Read the upstream .tar.gz from a local file instead of downloading it.",
    )
    p.add_argument(
        "--url",
        default=None,
        help="Override the upstream archive URL.",
    )
    p.add_argument(
        "--version-label",
        dest="version",
        default=None,
        help="Override the version label stamped into the banners.",
    )

    # --- Scope ---
    p.add_argument(
        "--unit",
        dest="units",
        action="append",
        choices=[SOURCE_UNIT, HEADER_UNIT],
        default=None,
        help="Generate only this unit (repeatable).",
    )

    # --- Runtime ---
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Network timeout in seconds for the archive download.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve everything but do not write any file.",
    )

    # --- Diagnostics and output format ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write a rotating diagnostic log to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG (shows every include decision).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the generation result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Overrides; unset options are None.
    """
    overrides: Dict[str, Any] = {
        "output_dir": args.output_dir,
        "archive_path": args.archive_path,
        "url": args.url,
        "version": args.version,
        "units": args.units,
        "timeout": args.timeout,
    }
    if args.dry_run:
        overrides["dry_run"] = True
    return overrides
