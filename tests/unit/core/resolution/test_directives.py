from __future__ import annotations

"""
Unit tests for the include directive scanner.
"""

from amalgen.core.resolution.directives import scan_includes


def test_scan_includes_extracts_names_and_delimiters():
    content = b'#include "zutil.h"\n#include <stdio.h>\nint x;\n'

    directives = scan_includes(content)

    assert [d.name for d in directives] == ["zutil.h", "stdio.h"]
    assert [d.delimiter for d in directives] == ['"', "<"]
    assert directives[0].raw == b'#include "zutil.h"'
    assert content[directives[1].start:directives[1].end] == b"#include <stdio.h>"


def test_scan_includes_tolerates_whitespace_and_indentation():
    content = b'   #   include   "a.h"\t\n\t#include<b.h>\n'

    assert [d.name for d in scan_includes(content)] == ["a.h", "b.h"]


def test_scan_includes_ignores_non_directive_lines():
    content = (
        b'// #include "a.h"\n'
        b'/* #include "b.h" */\n'
        b'#include "c.h" // trailing comment\n'
        b'printf("#include \\"d.h\\"");\n'
        b'#define INCLUDE "e.h"\n'
    )

    assert scan_includes(content) == []


def test_scan_includes_handles_crlf_line_endings():
    content = b'#include "a.h"\r\n#include <b.h>\r\n'

    directives = scan_includes(content)

    assert [d.name for d in directives] == ["a.h", "b.h"]
    assert all(not d.raw.endswith(b"\r") for d in directives)


def test_scan_includes_keeps_subdirectory_names():
    directives = scan_includes(b'#include "contrib/minizip/ioapi.h"\n')

    assert directives[0].name == "contrib/minizip/ioapi.h"
