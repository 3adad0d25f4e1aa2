"""Domain models for the asset import tool."""

from .cell import Cell, DateCell, EmptyCell, NumberCell, TextCell, cell_text, to_cell
from .config_models import DatabaseConfig, ImportConfig, LookupConfig, LookupSource, TemplateConfig
from .entity import CommitMode, EntityKind
from .header_index import HeaderIndex
from .lookups import LookupSets
from .outcome import AddressValidationOutcome, DeviceValidationResult, EmployeeValidationOutcome, KeySets
from .records import AddressRecord, EmployeeRecord

__all__ = [
    # Cells / headers
    "Cell",
    "EmptyCell",
    "TextCell",
    "NumberCell",
    "DateCell",
    "to_cell",
    "cell_text",
    "HeaderIndex",
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "LookupConfig",
    "LookupSource",
    "TemplateConfig",
    "CommitMode",
    "EntityKind",
    # Validation models
    "KeySets",
    "LookupSets",
    "AddressRecord",
    "EmployeeRecord",
    "AddressValidationOutcome",
    "EmployeeValidationOutcome",
    "DeviceValidationResult",
]
