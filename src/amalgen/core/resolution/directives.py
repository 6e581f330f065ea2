from __future__ import annotations

"""
Include Directive Scanner.

Recognizes ``#include "name"`` and ``#include <name>`` lines. A directive
must sit on its own line; leading indentation, whitespace around the '#'
and trailing whitespace are tolerated. Commented-out directives and lines
with trailing tokens are left alone.
"""

import re
from typing import Final, List

from amalgen.domain.include_models import ANGLE_DELIMITER, QUOTE_DELIMITER, IncludeDirective

INCLUDE_PATTERN: Final[re.Pattern] = re.compile(
    rb'^[ \t]*#[ \t]*include[ \t]*(?:"([^"\r\n]+)"|<([^>\r\n]+)>)[ \t]*(?=\r?$)',
    re.MULTILINE,
)


def _directive_from_match(match: "re.Match[bytes]") -> IncludeDirective:
    quoted, angled = match.group(1), match.group(2)
    raw_name = quoted if quoted is not None else angled
    return IncludeDirective(
        raw=match.group(0),
        name=raw_name.decode("utf-8", "surrogateescape"),
        delimiter=QUOTE_DELIMITER if quoted is not None else ANGLE_DELIMITER,
        start=match.start(),
        end=match.end(),
    )


def scan_includes(content: bytes) -> List[IncludeDirective]:
    """Return every include directive of ``content`` in textual order."""
    return [_directive_from_match(m) for m in INCLUDE_PATTERN.finditer(content)]
