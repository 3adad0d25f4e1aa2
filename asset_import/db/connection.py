from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..models.config_models import DatabaseConfig

"""PostgreSQL connection handling for key lookups.

接続情報の解決優先順位:
    1. DATABASE_URL / PGDSN (.env は CLI 起動時に override 読み込み済み)
    2. 個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. config/import.yml の database セクション (不足分のフォールバック)

The importer only reads from the database, so the connection is opened
read-only and closed on exit.
"""

__all__ = [
    "resolve_dsn",
    "db_disabled",
    "db_cursor",
]


def db_disabled() -> bool:
    """True when DISABLE_DB_CONNECT=1 forces mock mode."""
    return os.getenv("DISABLE_DB_CONNECT") == "1"


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_cursor(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """Yield a psycopg2 cursor on a read-only session."""
    import psycopg2

    conn = psycopg2.connect(resolve_dsn(db_cfg))
    try:
        conn.set_session(readonly=True, autocommit=True)
        cur = conn.cursor()
        try:
            yield cur
        finally:
            cur.close()
    finally:
        conn.close()
