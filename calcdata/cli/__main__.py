from __future__ import annotations

import argparse
import sys
from pathlib import Path

from calcdata.config.loader import ConfigError, load_config
from calcdata.excel.reader import WorkbookError, cell_to_label, load, resolve_source, sheet_to_grid
from calcdata.logging.init import log_summary, set_debug, setup_logging
from calcdata.services.artifact import ArtifactError
from calcdata.services.orchestrator import run_extraction
from calcdata.services.summary import render_summary_line

"""CLI entrypoint.

Runs one extraction with no arguments:
- Load config (config/extract.yml, else packaged default)
- Resolve and load the workbook
- Extract settings + pricing maps and write the artifact(s)
- Print a SUMMARY line

Exit code 1 on any fatal error (config, missing/unreadable workbook, write failure).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

INSPECT_ROWS = 40
INSPECT_COLS = 15


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Extract calculator pricing data from the pricing workbook")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="Path to extraction config (YAML)")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg) -> int:
    try:
        source = resolve_source(Path(cfg.source_directory), cfg.source_candidates)
        workbook = load(source)
    except WorkbookError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {source.name}")
    for i, name in enumerate(workbook.sheet_names, start=1):
        print(f"  {i}. {name}")
    for sheet in workbook.sheets:
        grid = sheet_to_grid(sheet)
        header = [cell_to_label(v) for v in grid[0]] if grid else []
        rows, cols = sheet.shape
        print(f"SHEET: {sheet.name} rows={rows} cols={cols}")
        print(f"  headers: {' | '.join(header)}")
        for r, row in enumerate(grid[:INSPECT_ROWS], start=1):
            print(f"  {r}\t" + "\t".join(cell_to_label(v) for v in row[:INSPECT_COLS]))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only None reads sys.argv; [] from tests must stay empty
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        run = run_extraction(cfg)
    except WorkbookError as e:
        logger.error(f"source: {e}")
        return EXIT_FATAL
    except ArtifactError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(
        run.source.name,
        run.result,
        unresolved_roles=len(run.roles.unresolved),
        outputs=len(run.outputs),
        elapsed_seconds=run.elapsed_seconds,
    )
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
