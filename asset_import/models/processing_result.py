from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .entity import CommitMode, EntityKind

"""Import result model.

Aggregates one import run: row counts, the commit decision, the operator-facing
error lines and the records that would be handed to persistence.
"""

__all__ = [
    "ImportResult",
]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing one sheet.

    ``records`` holds only what was committed: every valid row under
    skip_invalid, and either all rows or nothing under all_or_nothing.
    """
    entity: EntityKind
    file_name: str
    sheet_name: str
    commit_mode: CommitMode
    total_rows: int  # 空行を除いたデータ行数
    valid_rows: int
    invalid_rows: int
    blank_rows: int  # スキップした空行
    committed: bool
    errors: list[str] = field(default_factory=list)
    records: list[dict[str, Any]] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0

    @property
    def committed_rows(self) -> int:
        return len(self.records)

    @property
    def skipped_rows(self) -> int:
        """Non-blank rows that were not committed."""
        return self.total_rows - self.committed_rows
