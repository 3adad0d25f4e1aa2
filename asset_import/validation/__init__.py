"""Row validation pipeline: normalizers, field predicates and per-entity row validators."""

from .address_validator import validate_address_import_row
from .device_validator import (
    validate_phone_import_row,
    validate_router_import_row,
    validate_tablet_import_row,
)
from .employee_validator import validate_employee_import_row

__all__ = [
    "validate_address_import_row",
    "validate_phone_import_row",
    "validate_router_import_row",
    "validate_tablet_import_row",
    "validate_employee_import_row",
]
