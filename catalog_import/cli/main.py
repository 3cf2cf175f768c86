from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.distribution import ProductStock
from ..services.backends import JsonFileBackend
from ..services.distribution import build_plan, distribute
from ..services.export import catalog_stock, export_distribution, write_template
from ..services.orchestrator import ProcessingError, import_file, submit_import
from ..services.summary import render_distribution_summary, render_export_summary, render_summary_line
from ..tabular.detector import detect_format
from ..tabular.errors import FileRejectedError
from ..tabular.reader import parse_rows, validate_header

"""CLI entrypoint.

Sub-commands:
- import FILE       run the import pipeline and hand the batch to the output backend
- distribute JSON   spread catalog stock over the configured warehouses
- export FILE       import a catalog and write one stock file per warehouse
- template PATH     write the CSV import template

Exit codes: 0 success, 2 partial failure (row errors / failed allocations),
1 fatal (config error, rejected file).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (values override the process environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="catalog-import", description="Catalog bulk import & stock distribution")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help="Config file (default: $CATALOG_IMPORT_CONFIG or config/import.yml)")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import a catalog file (.csv, .tsv, .txt, .xlsx, .xls)")
    imp.add_argument("file", type=Path)
    imp.add_argument("--inspect-data", action="store_true", help="Print header & first rows then exit")

    dist = sub.add_parser("distribute", help="Distribute catalog stock across warehouses")
    dist.add_argument("catalog", type=Path, help='JSON list of {"id": ..., "stock": ...}')

    exp = sub.add_parser("export", help="Write per-warehouse stock files (.xlsx) for a catalog file")
    exp.add_argument("file", type=Path)
    exp.add_argument("--out-dir", type=Path, default=None, help="Target directory (default: output_directory)")

    tpl = sub.add_parser("template", help="Write the CSV import template")
    tpl.add_argument("path", type=Path)
    return p.parse_args(argv)


def inspect_file(path: Path) -> int:
    try:
        payload = detect_format(path.name, path.read_bytes())
        columns = validate_header(payload.text, payload.delimiter)
        sheet = parse_rows(payload.text, payload.delimiter)
    except (OSError, FileRejectedError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    label = "tab" if payload.delimiter == "\t" else "comma"
    print(f"FILE: {path.name} source={payload.source_kind} delimiter={label}")
    print(f"  columns={columns}")
    for row in sheet.rows[:3]:
        filled = {k: c.raw for k, c in row.values.items() if c.raw}
        print(f"  row {row.row_number}: {filled}")
    return EXIT_SUCCESS_ALL


def _load_catalog_stock(path: Path) -> list[ProductStock]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("catalog must be a JSON list")
    return [
        ProductStock(product_id=item["id"], stock=int(item["stock"]) if item.get("stock") is not None else None)
        for item in data
    ]


def _run_import(args: argparse.Namespace, cfg, logger) -> int:
    path: Path = args.file
    if not path.exists():
        logger.error(f"file not found: {path}")
        return EXIT_FATAL
    if args.inspect_data:
        return inspect_file(path)

    start = time.perf_counter()
    error_log = ErrorLogBuffer()
    try:
        result = import_file(path, cfg.catalog, error_log)
    except (FileRejectedError, ProcessingError) as e:
        logger.error(f"import: {e}")
        error_log.flush()
        return EXIT_FATAL

    backend = JsonFileBackend(cfg.output_directory)
    committed = submit_import(result, backend, cfg.catalog.commit_policy)
    if committed:
        logger.info(f"batch written to {backend.last_batch_path}")
    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    summary_line = render_summary_line(result, committed, time.perf_counter() - start)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if result.has_errors else EXIT_SUCCESS_ALL


def _run_distribute(args: argparse.Namespace, cfg, logger) -> int:
    if not cfg.warehouses:
        logger.error("no warehouses configured")
        return EXIT_FATAL
    try:
        products = _load_catalog_stock(args.catalog)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"catalog: {e}")
        return EXIT_FATAL

    start = time.perf_counter()
    backend = JsonFileBackend(cfg.output_directory)
    plan, report = distribute(
        products,
        cfg.warehouses,
        backend,
        rounding=cfg.distribution.rounding,
        concurrency=cfg.distribution.concurrency,
    )
    out = backend.flush()
    logger.info(f"allocations written to {out} ({plan.total_quantity()} units)")
    summary_line = render_distribution_summary(plan, report, time.perf_counter() - start)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if report.has_failures else EXIT_SUCCESS_ALL


def _run_export(args: argparse.Namespace, cfg, logger) -> int:
    path: Path = args.file
    if not path.exists():
        logger.error(f"file not found: {path}")
        return EXIT_FATAL
    if not cfg.warehouses:
        logger.error("no warehouses configured")
        return EXIT_FATAL

    start = time.perf_counter()
    error_log = ErrorLogBuffer()
    try:
        result = import_file(path, cfg.catalog, error_log)
    except (FileRejectedError, ProcessingError) as e:
        logger.error(f"export: {e}")
        error_log.flush()
        return EXIT_FATAL

    plan = build_plan(catalog_stock(result.products), cfg.warehouses, cfg.distribution.rounding)
    out_dir = args.out_dir if args.out_dir is not None else Path(cfg.output_directory)
    written = export_distribution(out_dir, result.products, plan, cfg.warehouses)
    error_log.flush()

    summary_line = render_export_summary(
        len(written), sum(rows for _, rows in written), len(result.errors), time.perf_counter() - start
    )
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if result.has_errors else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    if args.command == "template":
        write_template(args.path)
        logger.info(f"template written to {args.path}")
        return EXIT_SUCCESS_ALL

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _run_import(args, cfg, logger)
    if args.command == "export":
        return _run_export(args, cfg, logger)
    return _run_distribute(args, cfg, logger)
