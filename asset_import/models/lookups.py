from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .outcome import KeySets

__all__ = [
    "LookupSets",
]


@dataclass(frozen=True)
class LookupSets:
    """Persisted keys and reference code sets for one import.

    ``existing`` keys become the read-only half of the validator KeySets.
    A reference set that was not loaded stays None so the matching
    foreign-key check is skipped (mock mode / not configured).
    """
    existing: Mapping[str, frozenset[str]] = field(default_factory=dict)
    references: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> LookupSets:
        return cls()

    def key_sets(self, names: Iterable[str]) -> dict[str, KeySets]:
        """Fresh KeySets (empty ``processed``) for each validator key."""
        return {name: KeySets(existing=self.existing.get(name, frozenset())) for name in names}

    def reference(self, name: str) -> frozenset[str] | None:
        return self.references.get(name)
