from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from ..excel.reader import cell_to_label, load, resolve_source, sheet_to_grid
from ..models.config_models import ExtractConfig
from ..models.extraction import ColumnRoleAssignment, ExtractionResult, Grid, PricingMaps
from ..models.workbook import Workbook
from .artifact import read_existing_settings, write_artifact
from .pricing import build_pricing_maps
from .roles import infer_roles, locate_header_row
from .settings import extract_settings, merge_settings

"""Run orchestration for the calculator pricing extractor.

One run = one workbook in, one artifact out:

1. resolve the source workbook from the configured candidates
2. load every sheet (the only blocking I/O before the write)
3. settings: previous artifact settings, overwritten by the settings sheet
4. pricing: skip title banner rows, infer column roles, fold body rows into maps
5. write the artifact to every configured output

Nothing is written unless steps 1-4 succeed. Missing sheets and unresolved
roles only shrink the artifact.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    source: Path
    result: ExtractionResult
    roles: ColumnRoleAssignment
    header_row: int  # 0-based row index of the pricing header
    outputs: list[Path]
    elapsed_seconds: float


def _settings_from(workbook: Workbook, config: ExtractConfig) -> dict:
    base = read_existing_settings(config.existing_settings)
    sheet = workbook.sheet(config.settings_sheet)
    if sheet is None:
        logger.warning(f"settings sheet '{config.settings_sheet}' not found, keeping {len(base)} previous entries")
        return base
    extracted = extract_settings(sheet_to_grid(sheet))
    logger.debug(f"settings: previous={len(base)} sheet={len(extracted)}")
    return merge_settings(base, extracted)


def _pricing_from(
    workbook: Workbook, config: ExtractConfig
) -> tuple[PricingMaps, ColumnRoleAssignment, list[str], int]:
    sheet = workbook.sheet(config.pricing_sheet)
    grid: Grid = sheet_to_grid(sheet) if sheet is not None else []
    if sheet is None:
        logger.warning(f"pricing sheet '{config.pricing_sheet}' not found, pricing maps stay empty")

    header_row = locate_header_row(grid, config.header_scan_rows)
    table = grid[header_row:]
    header = table[0] if table else []
    roles = infer_roles(header, config.synonyms_by_role, config.fallback_index_by_role)
    logger.debug(f"header_row={header_row} roles: {roles.describe()}")
    for role in roles.unresolved:
        logger.info(f"column role '{role.value}' unresolved, skipping")

    maps = build_pricing_maps(table, roles)
    headers = [cell_to_label(v) for v in header]
    return maps, roles, headers, header_row


def extract(workbook: Workbook, config: ExtractConfig) -> tuple[ExtractionResult, ColumnRoleAssignment, int]:
    """Build the artifact for an already loaded workbook (no file writes)."""
    settings = _settings_from(workbook, config)
    maps, roles, headers, header_row = _pricing_from(workbook, config)
    return ExtractionResult(settings=settings, pricing=maps, headers=headers), roles, header_row


def run_extraction(config: ExtractConfig) -> RunResult:
    """Execute one full extraction run.

    Raises:
        SourceNotFound: no candidate workbook exists
        UnreadableFormat: the workbook cannot be parsed
        ArtifactError: an output cannot be written
    """
    start = time.perf_counter()
    source = resolve_source(Path(config.source_directory), config.source_candidates)
    logger.info(f"Using workbook: {source.name}")

    workbook = load(source)
    logger.debug(f"sheets: {workbook.sheet_names}")

    result, roles, header_row = extract(workbook, config)
    outputs = write_artifact(result, config.outputs)

    return RunResult(
        source=source,
        result=result,
        roles=roles,
        header_row=header_row,
        outputs=outputs,
        elapsed_seconds=time.perf_counter() - start,
    )
