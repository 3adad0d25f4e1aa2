from __future__ import annotations

import logging
import re
from typing import Any

from ..models.config_models import LookupConfig, LookupSource
from ..models.lookups import LookupSets
from ..validation.normalizers import normalize_phone_digits, to_half_width

"""Read persisted unique keys and reference codes from PostgreSQL.

Each configured ``LookupSource`` becomes one ``SELECT DISTINCT`` on a psycopg2
cursor. Keys are normalized the same way the validators normalize row values
(half-width, trimmed; phone numbers reduced to digits) so set membership
compares like with like.
"""

__all__ = [
    "KeyLookupError",
    "fetch_key_set",
    "fetch_lookup_sets",
]

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class KeyLookupError(Exception):
    pass


def _quote_identifier(name: str) -> str:
    # schema.table 形式は各パーツを個別にクォート
    parts = name.split(".")
    for part in parts:
        if not _IDENTIFIER.fullmatch(part):
            raise KeyLookupError(f"invalid identifier: {name!r}")
    return ".".join(f'"{p}"' for p in parts)


def _normalize_key(value: Any, normalize: str | None) -> str:
    text = to_half_width(str(value)).strip()
    if normalize == "phone":
        return normalize_phone_digits(text)
    return text


def fetch_key_set(cursor: Any, source: LookupSource) -> frozenset[str]:
    """Distinct non-empty normalized values of ``source.table.source.column``."""
    table = _quote_identifier(source.table)
    column = _quote_identifier(source.column)
    sql = f"SELECT DISTINCT {column} FROM {table} WHERE {column} IS NOT NULL"
    try:
        cursor.execute(sql)
        rows = cursor.fetchall()
    except Exception as e:  # psycopg2.Error 他 (ドライバ依存)
        raise KeyLookupError(f"lookup failed for {source.table}.{source.column}: {e}") from e
    keys = {_normalize_key(r[0], source.normalize) for r in rows}
    keys.discard("")
    logger.debug("lookup %s.%s -> %d keys", source.table, source.column, len(keys))
    return frozenset(keys)


def fetch_lookup_sets(cursor: Any | None, config: LookupConfig) -> LookupSets:
    """Load every configured source; mock mode (cursor None) yields empty sets."""
    if cursor is None:
        return LookupSets.empty()
    existing = {name: fetch_key_set(cursor, src) for name, src in config.existing.items()}
    references = {name: fetch_key_set(cursor, src) for name, src in config.references.items()}
    return LookupSets(existing=existing, references=references)
