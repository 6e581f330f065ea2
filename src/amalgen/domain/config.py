from __future__ import annotations

"""
Configuration Domain Management.

Holds the compiled-in description of the upstream library: where its
archive lives, which files form each output unit, the boilerplate wrapped
around them and the per-file patches needed to make the sources merge
cleanly. CLI overrides are validated and merged here.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from amalgen.domain.errors import ConfigError
from amalgen.domain.patch_models import InsertPrefix, PatchTable, ReplaceLiteral

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
UPSTREAM_COMMIT = "752c1630421502d6c837506d810f7918ac8cdd27"
UPSTREAM_URL = (
    "https://gitlab.com/sortix/libz/-/archive/"
    f"{UPSTREAM_COMMIT}/libz-{UPSTREAM_COMMIT}.tar.gz"
)
UPSTREAM_VERSION = UPSTREAM_COMMIT[:8]
UPSTREAM_LABEL = "sortix libz"
# Upstream stamps the merged source as zlib and the merged header as libz
SOURCE_LABEL = "sortix zlib"

GUARD_PREFIX = "ZLIBGEN_"
HEADER_SUFFIX = ".h"
GUARD_EXEMPT: Tuple[str, ...] = ("inffixed.h",)
DEFAULT_TIMEOUT = 30

SOURCE_UNIT = "zlib.c"
HEADER_UNIT = "zlib.h"

SOURCE_ENTRIES: Tuple[str, ...] = (
    "zconf.h",
    "adler32.c",
    "compress.c",
    "crc32.c",
    "deflate.c",
    "gzclose.c",
    "gzlib.c",
    "gzread.c",
    "gzwrite.c",
    "infback.c",
    "inffast.c",
    "inflate.c",
    "inftrees.c",
    "trees.c",
    "uncompr.c",
    "zutil.c",
)

HEADER_ENTRIES: Tuple[str, ...] = ("zlib.h",)

# Symbols and macros that collide once every translation unit shares one file
PATCHES: PatchTable = {
    "infback.c": (
        InsertPrefix("#undef COPY\n"),
    ),
    "deflate.c": (
        ReplaceLiteral(
            "static unsigned long saturateAddBound",
            "__attribute__((unused)) static unsigned long saturateAddBound_",
        ),
    ),
    "inflate.c": (
        ReplaceLiteral(
            "static void fixedtables",
            "__attribute__((unused)) static void fixedtables_",
        ),
        ReplaceLiteral("#define PULLBYTE", "#undef PULLBYTE\n#define PULLBYTE"),
        ReplaceLiteral("#define DROPBITS", "#undef DROPBITS\n#define DROPBITS"),
    ),
}

SOURCE_PROLOGUE: Tuple[str, ...] = (
    "#define _GNU_SOURCE",
    "#define Z_INSIDE_LIBZ",
    # Clang also recognizes the GCC pragmas
    '#pragma GCC diagnostic warning "-Wall"',
    '#pragma GCC diagnostic warning "-Wextra"',
    '#pragma GCC diagnostic ignored "-Wimplicit-fallthrough"',
)

SOURCE_EPILOGUE: Tuple[str, ...] = (
    '#line 1 "amalgen"',
    '#pragma GCC warning "Using generated built-in {label} {version}."',
)


# -----------------------------------------------------------------------------
# Configuration Models
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UpstreamSource:
    """
    Location and identity of the upstream archive.

    Attributes:
        url: Remote .tar.gz location.
        version: Short label stamped into the generated banners.
        label: Human-readable library name.
        archive_path: Local archive used instead of the URL when set.
    """
    url: str = UPSTREAM_URL
    version: str = UPSTREAM_VERSION
    label: str = UPSTREAM_LABEL
    archive_path: Optional[str] = None

    @property
    def location(self) -> str:
        return self.archive_path or self.url


@dataclass(frozen=True)
class AmalgamationUnit:
    """
    One merged output artifact.

    Attributes:
        name: Output file name.
        entries: Entry files resolved and concatenated in order.
        include_dirs: Extra search prefixes tried before each entry's directory.
        prologue: Lines emitted after the banner, before the merged body.
        epilogue: Lines emitted after the merged body. '{label}' and
            '{version}' placeholders are filled in at render time.
        preprocess: Whether the unit is built from the patched file set.
        label: Library name for this unit's banner and placeholders; the
            upstream label is used when unset.
    """
    name: str
    entries: Tuple[str, ...]
    include_dirs: Tuple[str, ...] = ()
    prologue: Tuple[str, ...] = ()
    epilogue: Tuple[str, ...] = ()
    preprocess: bool = True
    label: Optional[str] = None


@dataclass(frozen=True)
class PreprocessOptions:
    """Settings of the generic transforms applied to every file."""
    guard_prefix: str = GUARD_PREFIX
    header_suffix: str = HEADER_SUFFIX
    guard_exempt: Tuple[str, ...] = GUARD_EXEMPT
    endian_shim: bool = True


@dataclass(frozen=True)
class GeneratorConfig:
    """Complete runtime configuration of a generation run."""
    upstream: UpstreamSource = field(default_factory=UpstreamSource)
    units: Tuple[AmalgamationUnit, ...] = ()
    patches: PatchTable = field(default_factory=dict)
    preprocess: PreprocessOptions = field(default_factory=PreprocessOptions)
    output_dir: str = "."
    timeout: float = DEFAULT_TIMEOUT
    dry_run: bool = False

    def unit(self, name: str) -> AmalgamationUnit:
        for u in self.units:
            if u.name == name:
                return u
        raise ConfigError(f"Unknown unit: {name!r}")

    @property
    def unit_names(self) -> Tuple[str, ...]:
        return tuple(u.name for u in self.units)


def get_default_config() -> GeneratorConfig:
    """
    Generate the compiled-in configuration for sortix libz.

    The header unit is merged from the unpatched archive: it only needs
    zconf.h inlined, and zlib.h carries its own guards.

    Returns:
        GeneratorConfig: Default configuration values.
    """
    return GeneratorConfig(
        upstream=UpstreamSource(),
        units=(
            AmalgamationUnit(
                name=SOURCE_UNIT,
                entries=SOURCE_ENTRIES,
                prologue=SOURCE_PROLOGUE,
                epilogue=SOURCE_EPILOGUE,
                label=SOURCE_LABEL,
            ),
            AmalgamationUnit(
                name=HEADER_UNIT,
                entries=HEADER_ENTRIES,
                preprocess=False,
            ),
        ),
        patches=dict(PATCHES),
        preprocess=PreprocessOptions(),
        output_dir=os.getcwd(),
    )


# -----------------------------------------------------------------------------
# Override Merging
# -----------------------------------------------------------------------------
def apply_overrides(cfg: GeneratorConfig, overrides: Dict[str, Any]) -> GeneratorConfig:
    """
    Merge validated overrides into a configuration.

    None values are ignored so callers can pass every known key.

    Args:
        cfg: Base configuration.
        overrides: Keys among 'output_dir', 'archive_path', 'url',
            'version', 'units', 'timeout', 'dry_run'.

    Returns:
        GeneratorConfig: A new configuration instance.

    Raises:
        ConfigError: If a value is invalid or a key is unknown.
    """
    known = {"output_dir", "archive_path", "url", "version", "units", "timeout", "dry_run"}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    upstream = cfg.upstream
    result = cfg

    if overrides.get("url") is not None:
        url = str(overrides["url"]).strip()
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"Archive URL must use http or https: {url!r}")
        upstream = replace(upstream, url=url)

    if overrides.get("version") is not None:
        version = str(overrides["version"]).strip()
        if not version:
            raise ConfigError("Version label must not be empty.")
        upstream = replace(upstream, version=version)

    if overrides.get("archive_path") is not None:
        archive_path = os.path.abspath(os.path.expanduser(str(overrides["archive_path"])))
        if not os.path.isfile(archive_path):
            raise ConfigError(f"Archive file does not exist: {archive_path}")
        upstream = replace(upstream, archive_path=archive_path)

    if upstream is not cfg.upstream:
        result = replace(result, upstream=upstream)

    if overrides.get("output_dir") is not None:
        output_dir = str(overrides["output_dir"]).strip()
        if not output_dir:
            raise ConfigError("Output directory must not be empty.")
        result = replace(result, output_dir=os.path.abspath(os.path.expanduser(output_dir)))

    if overrides.get("units"):
        names = {cfg.unit(name).name for name in overrides["units"]}
        # Configured order wins so the source unit is always written first
        result = replace(result, units=tuple(u for u in cfg.units if u.name in names))

    if overrides.get("timeout") is not None:
        try:
            timeout = float(overrides["timeout"])
        except (TypeError, ValueError):
            raise ConfigError(f"Timeout must be a number: {overrides['timeout']!r}") from None
        if timeout <= 0:
            raise ConfigError("Timeout must be positive.")
        result = replace(result, timeout=timeout)

    if overrides.get("dry_run") is not None:
        result = replace(result, dry_run=bool(overrides["dry_run"]))

    logger.debug(f"Configuration resolved: units={result.unit_names}, source={result.upstream.location}")
    return result
