from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration overrides.
2. Repeatable unit selection and its allowed choices.
3. Handling of boolean flags (store_true).
"""

import pytest

from amalgen.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_defaults_produce_empty_overrides():
    overrides = args_to_overrides(parse_args([]))

    assert all(v is None for v in overrides.values())
    assert "dry_run" not in overrides


def test_cli_path_and_source_arguments():
    args = parse_args([
        "-o", "build/gen",
        "--archive", "libz.tar.gz",
        "--url", "https://example.com/libz.tar.gz",
        "--version-label", "deadbeef",
        "--timeout", "2.5",
    ])

    overrides = args_to_overrides(args)

    assert overrides["output_dir"] == "build/gen"
    assert overrides["archive_path"] == "libz.tar.gz"
    assert overrides["url"] == "https://example.com/libz.tar.gz"
    assert overrides["version"] == "deadbeef"
    assert overrides["timeout"] == 2.5


def test_cli_unit_selection_is_repeatable():
    overrides = args_to_overrides(parse_args(["--unit", "zlib.h", "--unit", "zlib.c"]))

    assert overrides["units"] == ["zlib.h", "zlib.c"]


def test_cli_rejects_unknown_unit():
    with pytest.raises(SystemExit):
        parse_args(["--unit", "zlib.cpp"])


def test_cli_boolean_flags():
    args = parse_args(["--dry-run", "--debug", "--json", "--log-file", "run.log"])

    overrides = args_to_overrides(args)

    assert overrides["dry_run"] is True
    assert args.debug is True
    assert args.json_output is True
    assert args.log_file == "run.log"
