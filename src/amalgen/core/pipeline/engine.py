from __future__ import annotations

"""
Core generation pipeline.

This module coordinates a complete run:
1. Retrieves and unpacks the upstream archive.
2. Preprocesses the file set (patches, shims, header guards).
3. Amalgamates every configured unit in order.
4. Writes each unit atomically as soon as it is rendered.

A unit failure stops the run; units written before it are kept.
"""

import logging
import os
from typing import Callable, List, Optional

from amalgen.core.processing.preprocessor import preprocess_files
from amalgen.core.resolution.amalgamator import amalgamate_unit
from amalgen.domain.config import GeneratorConfig
from amalgen.domain.errors import AmalgenError
from amalgen.domain.file_set import VirtualFileSet
from amalgen.domain.pipeline_models import (
    GenerationResult,
    UnitReport,
    create_error_result,
    create_success_result,
)
from amalgen.infra.fs import normalize_path, write_artifact
from amalgen.infra.network import fetch_file_set

logger = logging.getLogger(__name__)

FileSetLoader = Callable[[GeneratorConfig], VirtualFileSet]


def run_generation(
        cfg: GeneratorConfig,
        *,
        loader: Optional[FileSetLoader] = None,
) -> GenerationResult:
    """
    Execute the full generation pipeline.

    Args:
        cfg: Resolved generator configuration.
        loader: Optional replacement for archive retrieval, returning the
            unpacked file set.

    Returns:
        GenerationResult: Status, per-unit reports and summary.
    """
    upstream = cfg.upstream
    output_dir = normalize_path(cfg.output_dir, os.getcwd())
    logger.info(f"Generation started for {upstream.label} {upstream.version}.")

    # -------------------------------------------------------------------------
    # 1) Retrieval
    # -------------------------------------------------------------------------
    try:
        if loader is not None:
            raw_files = loader(cfg)
        else:
            raw_files = fetch_file_set(upstream, timeout=cfg.timeout)
    except AmalgenError as e:
        logger.error(f"Download tarball {upstream.location!r}: {e}")
        return create_error_result(
            str(e), upstream.version, upstream.location, output_dir, dry_run=cfg.dry_run
        )

    # -------------------------------------------------------------------------
    # 2) Preprocessing (only computed if a unit needs it)
    # -------------------------------------------------------------------------
    patched_files: Optional[VirtualFileSet] = None
    if any(u.preprocess for u in cfg.units):
        patched_files = preprocess_files(raw_files, cfg.patches, cfg.preprocess)

    # -------------------------------------------------------------------------
    # 3) Amalgamation and writing, one unit at a time
    # -------------------------------------------------------------------------
    reports: List[UnitReport] = []
    for unit in cfg.units:
        files = patched_files if unit.preprocess and patched_files is not None else raw_files
        try:
            content = amalgamate_unit(files, unit, upstream.label, upstream.version)
            path = "" if cfg.dry_run else write_artifact(output_dir, unit.name, content)
        except (AmalgenError, OSError) as e:
            msg = f"generate {unit.name}: {e}"
            logger.error(msg)
            reports.append(UnitReport(name=unit.name, ok=False, error=str(e)))
            return create_error_result(
                msg,
                upstream.version,
                upstream.location,
                output_dir,
                dry_run=cfg.dry_run,
                file_count=len(raw_files),
                units=reports,
            )

        reports.append(UnitReport(
            name=unit.name,
            ok=True,
            path=path,
            size_bytes=len(content),
            line_count=content.count(b"\n"),
        ))
        if cfg.dry_run:
            logger.info(f"Dry run: {unit.name} resolved ({len(content)} bytes), not written.")
        else:
            logger.info(f"Wrote {unit.name} to {path}")

    logger.info("Generation finished successfully.")
    return create_success_result(
        upstream.version,
        upstream.location,
        output_dir,
        reports,
        dry_run=cfg.dry_run,
        file_count=len(raw_files),
    )
