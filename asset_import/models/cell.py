from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

import numpy as np
import pandas as pd

"""Spreadsheet cell model for the asset import validators.

A raw cell coming out of the Import Source is one of: text, number (possibly an
Excel date serial), a date/datetime, or nothing at all. Validators never coerce
raw values implicitly; they classify them once with ``to_cell`` and branch on
the resulting variant.
"""

__all__ = [
    "EmptyCell",
    "TextCell",
    "NumberCell",
    "DateCell",
    "Cell",
    "to_cell",
    "cell_text",
]


@dataclass(frozen=True)
class EmptyCell:
    """Absent / null / blank cell (None, NaN, NaT, "")."""


@dataclass(frozen=True)
class TextCell:
    value: str  # 生の文字列 (trim 前)


@dataclass(frozen=True)
class NumberCell:
    value: float | int  # 数値セル。日付列では Excel シリアル値として扱う


@dataclass(frozen=True)
class DateCell:
    value: date  # datetime / Timestamp は date に丸め済み


Cell = Union[EmptyCell, TextCell, NumberCell, DateCell]

EMPTY = EmptyCell()


def to_cell(raw: Any) -> Cell:
    """Classify a raw cell value into one of the Cell variants."""
    if raw is None:
        return EMPTY
    if isinstance(raw, (EmptyCell, TextCell, NumberCell, DateCell)):
        return raw
    if isinstance(raw, str):
        return TextCell(raw) if raw != "" else EMPTY
    # bool は int のサブクラスなので数値判定より先に文字列化
    if isinstance(raw, (bool, np.bool_)):
        return TextCell(str(bool(raw)))
    if raw is pd.NaT:
        return EMPTY
    if isinstance(raw, (datetime, pd.Timestamp)):
        return DateCell(raw.date())
    if isinstance(raw, date):
        return DateCell(raw)
    if isinstance(raw, (int, np.integer)):
        return NumberCell(int(raw))
    if isinstance(raw, (float, np.floating)):
        value = float(raw)
        if math.isnan(value):
            return EMPTY
        return NumberCell(value)
    return TextCell(str(raw))


def cell_text(cell: Cell) -> str:
    """Render a cell as the text a spreadsheet user typed (not trimmed).

    Integral floats lose their trailing ``.0`` (pandas widens integer columns
    containing blanks to float) and dates render as ISO ``YYYY-MM-DD``.
    """
    if isinstance(cell, TextCell):
        return cell.value
    if isinstance(cell, NumberCell):
        value = cell.value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(cell, DateCell):
        return cell.value.isoformat()
    return ""
