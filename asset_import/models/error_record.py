from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per rejected row (or per file-level failure, with ``row=-1``).
Records follow ``asset_import/logging/error_log_schema.json``.
"""

__all__ = [
    "ErrorRecord",
    "ROW_ERROR",
    "STRUCTURE_ERROR",
    "READ_ERROR",
    "LOOKUP_ERROR",
]

# error_type 値 (UPPER_SNAKE)
ROW_ERROR = "ROW_VALIDATION"
STRUCTURE_ERROR = "TEMPLATE_STRUCTURE"
READ_ERROR = "FILE_READ"
LOOKUP_ERROR = "KEY_LOOKUP"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: spreadsheet file name
        sheet: sheet name within the file
        row: spreadsheet row number (1-based). -1 for file-level errors
        error_type: error classification in UPPER_SNAKE_CASE
        message: operator-facing message (row errors keep their "N行目: " prefix)
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int  # 行番号。不明な場合 -1 許容
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
