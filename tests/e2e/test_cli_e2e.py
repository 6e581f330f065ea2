from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point script via subprocess against a local archive
laid out like the upstream release, validating exit codes, stream output
and the generated artifacts.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

import pytest

from amalgen.domain.config import SOURCE_ENTRIES

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "amalgen" / "main.py"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def _release_files() -> Dict[str, bytes]:
    files = {
        "zlib.h": b'#ifndef ZLIB_H\n#define ZLIB_H\n#include "zconf.h"\nint deflate(void);\n#endif\n',
        "zutil.h": b'#include "zlib.h"\n#define local static\n',
        "inffixed.h": b"static const int fixed[1] = {0};\n",
    }
    for entry in SOURCE_ENTRIES:
        if entry.endswith(".c"):
            files[entry] = f'#include "zutil.h"\nint {entry[:-2]}_fn(void) {{ return 0; }}\n'.encode()
    files["zconf.h"] = b"typedef unsigned char Byte;\n"
    files["inflate.c"] = b'#include "zutil.h"\n#include "inffixed.h"\nstatic void fixedtables(void);\n'
    return files


@pytest.fixture
def release_archive(tmp_path: Path, tarball_factory) -> Path:
    archive = tmp_path / "libz.tar.gz"
    archive.write_bytes(tarball_factory(_release_files()))
    return archive


def test_cli_generates_both_units(tmp_path: Path, release_archive: Path) -> None:
    """TC-01: A full run writes zlib.c and zlib.h and exits 0."""
    out_dir = tmp_path / "out"

    result = run_cli(["--archive", str(release_archive), "-o", str(out_dir)])

    assert result.returncode == 0, result.stderr
    source = (out_dir / "zlib.c").read_text(encoding="utf-8")
    header = (out_dir / "zlib.h").read_text(encoding="utf-8")

    assert source.startswith("// AUTOMATICALLY GENERATED, DO NOT EDIT!\n// merged from sortix zlib 752c1630.\n")
    assert "__attribute__((unused)) static void fixedtables_(void);" in source
    assert "#include \"zutil.h\"" not in source
    assert source.rstrip().endswith('#pragma GCC warning "Using generated built-in sortix zlib 752c1630."')
    assert header.startswith("// AUTOMATICALLY GENERATED, DO NOT EDIT!\n// merged from sortix libz 752c1630.\n")
    assert "typedef unsigned char Byte;" in header
    assert "zlib.c" in result.stdout


def test_cli_json_output_on_dry_run(tmp_path: Path, release_archive: Path) -> None:
    out_dir = tmp_path / "out"

    result = run_cli([
        "--archive", str(release_archive),
        "-o", str(out_dir),
        "--unit", "zlib.h",
        "--dry-run",
        "--json",
    ])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    assert payload["dry_run"] is True
    assert payload["summary"]["generated"] == ["zlib.h"]
    assert not out_dir.exists()


def test_cli_missing_entry_fails(tmp_path: Path, tarball_factory) -> None:
    """TC-02: An archive lacking an entry file exits 1 naming the file."""
    files = _release_files()
    del files["trees.c"]
    archive = tmp_path / "broken.tar.gz"
    archive.write_bytes(tarball_factory(files))

    result = run_cli(["--archive", str(archive), "-o", str(tmp_path / "out")])

    assert result.returncode == 1
    assert "trees.c" in result.stderr
    assert not (tmp_path / "out" / "zlib.c").exists()


def test_cli_rejects_missing_archive(tmp_path: Path) -> None:
    result = run_cli(["--archive", str(tmp_path / "nope.tar.gz")])

    assert result.returncode == 2
    assert "ERROR:" in result.stderr
