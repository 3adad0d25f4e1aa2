from __future__ import annotations

from enum import Enum

__all__ = [
    "EntityKind",
    "CommitMode",
]


class EntityKind(str, Enum):
    """Importable entity types (CLI / config key)."""
    ADDRESS = "address"
    PHONE = "phone"
    ROUTER = "router"
    TABLET = "tablet"
    EMPLOYEE = "employee"


class CommitMode(str, Enum):
    # 1 行でもエラーがあれば何も登録しない
    ALL_OR_NOTHING = "all_or_nothing"
    # エラー行のみスキップし、正常行は登録する
    SKIP_INVALID = "skip_invalid"
