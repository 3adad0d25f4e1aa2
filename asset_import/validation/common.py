from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.header_index import HeaderIndex
from .messages import row_error
from .normalizers import to_half_width

"""Helpers shared by the row validators."""

__all__ = [
    "RowErrors",
    "trimmed",
    "half_width",
]


class RowErrors(list):
    """Ordered error lines for one spreadsheet row."""

    def __init__(self, row_number: int) -> None:
        super().__init__()
        self.row_number = row_number

    def add(self, reason: str, **fields: object) -> None:
        self.append(row_error(self.row_number, reason, **fields))


def trimmed(index: HeaderIndex, row: Sequence[Any], label: str) -> str:
    return index.text(row, label).strip()


def half_width(index: HeaderIndex, row: Sequence[Any], label: str) -> str:
    """Half-width normalized and trimmed cell text."""
    return to_half_width(index.text(row, label)).strip()
