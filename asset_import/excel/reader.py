from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Spreadsheet reader.

Thin adapter over pandas/openpyxl turning one worksheet into
``(headers, rows)``. The header row is the last of the template's
``header_rows`` (1: header only, 2: title + header); everything below is data.
Cells are passed through raw (dtype=object); classification into text,
number, date or empty happens later in ``asset_import.models.cell``.
"""

__all__ = [
    "SheetReadError",
    "SheetHeaderError",
    "SheetData",
    "read_excel_file",
    "extract_table",
    "read_table",
]


class SheetReadError(Exception):
    """Raised when the workbook cannot be opened or the sheet does not exist."""


class SheetHeaderError(Exception):
    """Raised when the sheet is shorter than its header block."""


@dataclass
class SheetData:
    sheet_name: str
    headers: list[str]
    rows: list[list[Any]]  # データ行 (ヘッダ行は除外済み)


def read_excel_file(path: Path, sheet: str | None = None) -> tuple[str, pd.DataFrame]:
    """Read one worksheet without header interpretation.

    Parameters
    ----------
    path: Excel ファイルパス
    sheet: 対象シート名 (None なら先頭シート)
    """
    try:
        xls = pd.ExcelFile(path)
    except FileNotFoundError as e:
        raise SheetReadError(f"file not found: {path}") from e
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise SheetReadError(f"cannot read workbook {path.name}: {e}") from e

    with xls:
        names = [str(n) for n in xls.sheet_names]
        if not names:
            raise SheetReadError(f"workbook {path.name} has no sheets")
        name = sheet if sheet is not None else names[0]
        if name not in names:
            raise SheetReadError(f"sheet '{name}' not found in {path.name} (sheets: {', '.join(names)})")
        # "NA" 等の文字列を欠損値に変換させない
        df = xls.parse(name, header=None, dtype=object, keep_default_na=False)
    return name, df


def _header_label(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def extract_table(df: pd.DataFrame, header_rows: int, sheet_name: str = "") -> SheetData:
    """Split a raw sheet into header labels and data rows."""
    if header_rows < 1:
        raise ValueError("header_rows must be >= 1")
    if df.shape[0] < header_rows:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header row (expected {header_rows} header rows)")
    headers = [_header_label(v) for v in df.iloc[header_rows - 1].tolist()]
    rows = [list(r) for r in df.iloc[header_rows:].itertuples(index=False, name=None)]
    return SheetData(sheet_name=sheet_name, headers=headers, rows=rows)


def read_table(path: Path, header_rows: int, sheet: str | None = None) -> SheetData:
    name, df = read_excel_file(path, sheet)
    return extract_table(df, header_rows, sheet_name=name)
