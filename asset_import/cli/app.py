from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from ..db.connection import db_cursor, db_disabled
from ..db.key_lookup import KeyLookupError, fetch_lookup_sets
from ..excel.reader import SheetReadError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.config_models import ImportConfig
from ..models.entity import EntityKind
from ..models.error_record import READ_ERROR, ErrorRecord
from ..models.lookups import LookupSets
from ..services.orchestrator import ImportStructureError, import_file
from ..services.summary import render_summary_line

"""CLI entrypoint.

    python -m asset_import.cli <entity> <file.xlsx> [--sheet NAME] [--config PATH]
                               [--output PATH] [--debug]

Exit codes:
    0  every row valid and committed
    2  rows rejected (skipped, or nothing committed under all_or_nothing)
    1  fatal: config, unreadable workbook, template structure, key lookup
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True により .env の値で既存環境変数を上書きし、PostgreSQL 接続情報を最優先化。
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="asset_import", description="Asset spreadsheet import validator")
    p.add_argument("entity", choices=[e.value for e in EntityKind], help="Entity type of the sheet")
    p.add_argument("file", type=Path, help="Excel workbook (.xlsx)")
    p.add_argument("--sheet", default=None, help="Sheet name (default: template setting or first sheet)")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--output", type=Path, default=None, help="Write committed records as JSON Lines")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(path: Path | None, logger: logging.Logger) -> ImportConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info(f"config not found ({DEFAULT_CONFIG_PATH}) -> built-in templates")
            return default_config()
        path = DEFAULT_CONFIG_PATH
    return load_config(path)


def _load_lookups(cfg: ImportConfig, entity: EntityKind, logger: logging.Logger) -> tuple[LookupSets, str]:
    """Key sets from the database, or empty sets in mock mode."""
    lookup_cfg = cfg.lookup(entity)
    if not lookup_cfg.existing and not lookup_cfg.references:
        logger.debug(f"no lookups configured for {entity.value} -> mock mode")
        return LookupSets.empty(), "mock"
    if db_disabled():
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        return LookupSets.empty(), "mock"
    try:
        with db_cursor(cfg.database) as cur:
            return fetch_lookup_sets(cur, lookup_cfg), "live"
    except KeyLookupError:
        raise
    except Exception as db_e:
        logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")
        return LookupSets.empty(), "mock"


def _write_records(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for rec in records:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む ([] を渡すテストで pytest の引数を拾わないため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    # .env を最優先で読み込む (DB 接続パラメータ優先順位保証)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args.config, logger)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    entity = EntityKind(args.entity)
    try:
        lookups, db_mode = _load_lookups(cfg, entity, logger)
    except KeyLookupError as e:
        logger.error(f"lookup: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    file_path: Path = args.file
    try:
        result = import_file(file_path, entity, cfg, lookups=lookups, sheet=args.sheet, error_log=error_log)
    except SheetReadError as e:
        logger.error(f"read: {e}")
        error_log.append(ErrorRecord.create(file_path.name, args.sheet or "", -1, READ_ERROR, str(e)))
        error_log.flush()
        return EXIT_FATAL
    except ImportStructureError as e:
        logger.error(f"structure: {e}")
        error_log.flush()
        return EXIT_FATAL

    logger.info(f"mode={db_mode} committed={result.committed} records={result.committed_rows}")

    if args.output is not None and result.committed:
        _write_records(args.output, result.records)
        logger.info(f"records written: {args.output}")

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    # log_summary が "SUMMARY " を付与するので除去して渡す
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.invalid_rows:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL

