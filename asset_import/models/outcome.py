from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .records import AddressRecord, EmployeeRecord

"""Validation outcome types and the uniqueness key sets.

Office and employee validators return an outcome carrying a record; device
validators return a flag/metadata bag without one; the device caller builds
its record itself.
"""

__all__ = [
    "KeySets",
    "AddressValidationOutcome",
    "EmployeeValidationOutcome",
    "DeviceValidationResult",
]


@dataclass
class KeySets:
    """Persisted keys plus keys accepted earlier in the same import batch.

    Validators only read both sets. The orchestrator calls ``accept`` after a
    row validated without errors and before the next row is validated.
    """
    existing: frozenset[str] = field(default_factory=frozenset)
    processed: set[str] = field(default_factory=set)

    @classmethod
    def of(cls, existing: Iterable[str] = (), processed: Iterable[str] = ()) -> KeySets:
        return cls(existing=frozenset(existing), processed=set(processed))

    def is_existing(self, key: str) -> bool:
        return key in self.existing

    def is_processed(self, key: str) -> bool:
        return key in self.processed

    def accept(self, key: str) -> None:
        # 空キーは登録しない (任意項目の SIM 等)
        if key:
            self.processed.add(key)


def _check_record_invariant(errors: list[str], record: object | None) -> None:
    if errors and record is not None:
        raise ValueError("record must be absent when errors are present")
    if not errors and record is None:
        raise ValueError("record is required when there are no errors")


@dataclass(frozen=True)
class AddressValidationOutcome:
    errors: list[str]
    record: AddressRecord | None = None

    def __post_init__(self) -> None:
        _check_record_invariant(self.errors, self.record)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class EmployeeValidationOutcome:
    errors: list[str]
    record: EmployeeRecord | None = None

    def __post_init__(self) -> None:
        _check_record_invariant(self.errors, self.record)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class DeviceValidationResult:
    """Result of a phone / router / tablet row validation.

    Attributes:
        is_valid: True when ``errors`` is empty
        errors: ordered row error lines
        normalized_phone: phone (or router SIM) digits used as uniqueness key
        management_number: management number, or terminal code for router/tablet
    """
    is_valid: bool
    errors: list[str]
    normalized_phone: str = ""
    management_number: str = ""
