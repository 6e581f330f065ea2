from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(compiled-in defaults plus command-line overrides), pipeline execution and
result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import List, Optional

from amalgen.core.pipeline.engine import run_generation
from amalgen.domain.config import apply_overrides, get_default_config
from amalgen.domain.errors import ConfigError
from amalgen.domain.pipeline_models import GenerationResult
from amalgen.infra.logging import LoggingConfig, configure_logging, get_logger
from amalgen.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on generation failure, 2 on invalid
        configuration, 130 on interrupt.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    try:
        cfg = apply_overrides(get_default_config(), cli_args.args_to_overrides(args))
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        result = run_generation(cfg)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: GenerationResult) -> None:
    """Render a GenerationResult as a short terminal report."""
    for unit in result.units:
        if not unit.ok:
            continue
        where = unit.path or "(dry run, not written)"
        print(f"  - {unit.name}: {where} ({unit.line_count} lines, {unit.size_bytes:,} bytes)")

    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print(f"Merged from {result.source} ({result.version}, {result.file_count} files).")


if __name__ == "__main__":
    sys.exit(main())
