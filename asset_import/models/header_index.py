from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .cell import EMPTY, Cell, cell_text, to_cell

"""Header-driven column lookup.

The header row of an import template is turned into a label -> column index
mapping once per import; every row is then read through that fixed mapping.
"""

__all__ = [
    "HeaderIndex",
]


class HeaderIndex:
    """Label -> column position mapping for one import.

    Labels are stripped of surrounding whitespace. If a label occurs twice the
    last column wins. Looking up a label that is not in the header, or a
    column beyond the end of a short row, yields an empty cell.
    """

    def __init__(self, headers: Iterable[Any]) -> None:
        self.labels: list[str] = [
            "" if h is None else str(h).strip() for h in headers
        ]
        self._positions: dict[str, int] = {}
        for position, label in enumerate(self.labels):
            if label:
                self._positions[label] = position

    @classmethod
    def coerce(cls, headers: HeaderIndex | Sequence[Any]) -> HeaderIndex:
        """Accept either a prepared index or a plain header list."""
        if isinstance(headers, HeaderIndex):
            return headers
        return cls(headers)

    def __contains__(self, label: object) -> bool:
        return label in self._positions

    def __len__(self) -> int:
        return len(self.labels)

    def position(self, label: str) -> int | None:
        return self._positions.get(label)

    def cell(self, row: Sequence[Any], label: str) -> Cell:
        position = self._positions.get(label)
        if position is None or position >= len(row):
            return EMPTY
        return to_cell(row[position])

    def text(self, row: Sequence[Any], label: str) -> str:
        """Cell text for ``label`` (untrimmed; empty string when absent)."""
        return cell_text(self.cell(row, label))

    def missing(self, required: Iterable[str]) -> list[str]:
        """Required labels absent from the header, in template order."""
        return [label for label in required if label not in self._positions]
