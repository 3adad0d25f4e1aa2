from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from ..excel.reader import SheetData, SheetHeaderError, read_table
from ..logging.error_log import ErrorLogBuffer
from ..models.cell import EmptyCell, cell_text, to_cell
from ..models.config_models import ImportConfig
from ..models.entity import CommitMode, EntityKind
from ..models.error_record import ROW_ERROR, STRUCTURE_ERROR, ErrorRecord
from ..models.header_index import HeaderIndex
from ..models.lookups import LookupSets
from ..models.outcome import KeySets
from ..models.processing_result import ImportResult
from ..validation import address_validator, device_validator, employee_validator
from ..validation.address_validator import ADDRESS_HEADERS, validate_address_import_row
from ..validation.device_validator import (
    PHONE_HEADERS,
    ROUTER_HEADERS,
    TABLET_HEADERS,
    validate_phone_import_row,
    validate_router_import_row,
    validate_tablet_import_row,
)
from ..validation.employee_validator import (
    EMPLOYEE_HEADER_ALIASES,
    EMPLOYEE_HEADERS,
    validate_employee_import_row,
)
from .device_records import build_device_record
from .progress import RowProgress

"""Import orchestration.

Runs the row validators over a sheet strictly in order:

1. structural checks (missing template columns, data outside the template)
2. per row: skip blank rows, validate, and for an error-free row accept its
   keys into the ``processed`` sets before the next row is looked at
3. commit policy: ``all_or_nothing`` keeps nothing when any row failed,
   ``skip_invalid`` keeps the valid rows

Rejected rows are logged and buffered into the JSON Lines error log.
"""

__all__ = [
    "ImportStructureError",
    "EntityTemplate",
    "ENTITY_TEMPLATES",
    "is_blank_row",
    "check_structure",
    "import_rows",
    "import_file",
]

logger = logging.getLogger(__name__)

MISSING_HEADERS_MESSAGE = "不足している項目があります: {labels}"
OUTSIDE_COLUMNS_MESSAGE = "定義された列の外側にデータが存在します。ファイルを確認してください。"


class ImportStructureError(Exception):
    """The sheet does not match the entity's template layout."""


@dataclass(frozen=True)
class _RowVerdict:
    errors: list[str]
    record: dict[str, Any] | None
    keys: dict[str, str]  # KeySets 名 -> 受理するキー


@dataclass(frozen=True)
class EntityTemplate:
    """Template columns and validator wiring of one entity."""
    headers: tuple[str, ...]
    key_names: tuple[str, ...]  # 一意性チェックに使う KeySets
    reference_names: tuple[str, ...]  # 参照整合性チェック用コード集合
    run: Callable[..., _RowVerdict]
    header_aliases: Mapping[str, tuple[str, ...]] = field(default_factory=dict)  # 旧テンプレートの見出し


def _run_address(
    row: Sequence[Any],
    index: HeaderIndex,
    row_index: int,
    key_sets: dict[str, KeySets],
    refs: dict[str, frozenset[str] | None],
    row_offset: int,
    today: date | None,
) -> _RowVerdict:
    outcome = validate_address_import_row(
        row,
        index,
        row_index,
        codes=key_sets["codes"],
        names=key_sets.get("names"),
        row_offset=row_offset,
    )
    if outcome.record is None:
        return _RowVerdict(outcome.errors, None, {})
    record = outcome.record
    return _RowVerdict([], record.to_dict(), {"codes": record.address_code, "names": record.office_name})


def _run_employee(
    row: Sequence[Any],
    index: HeaderIndex,
    row_index: int,
    key_sets: dict[str, KeySets],
    refs: dict[str, frozenset[str] | None],
    row_offset: int,
    today: date | None,
) -> _RowVerdict:
    outcome = validate_employee_import_row(row, index, row_index, codes=key_sets["codes"], row_offset=row_offset)
    if outcome.record is None:
        return _RowVerdict(outcome.errors, None, {})
    return _RowVerdict([], outcome.record.to_dict(), {"codes": outcome.record.code})


def _run_phone(
    row: Sequence[Any],
    index: HeaderIndex,
    row_index: int,
    key_sets: dict[str, KeySets],
    refs: dict[str, frozenset[str] | None],
    row_offset: int,
    today: date | None,
) -> _RowVerdict:
    result = validate_phone_import_row(
        row,
        index,
        row_index,
        phone_numbers=key_sets["phone_numbers"],
        management_numbers=key_sets["management_numbers"],
        employee_codes=refs.get("employee_codes"),
        office_codes=refs.get("office_codes"),
        row_offset=row_offset,
        today=today,
    )
    if not result.is_valid:
        return _RowVerdict(result.errors, None, {})
    return _RowVerdict(
        [],
        build_device_record(EntityKind.PHONE, row, index),
        {"phone_numbers": result.normalized_phone, "management_numbers": result.management_number},
    )


def _run_router(
    row: Sequence[Any],
    index: HeaderIndex,
    row_index: int,
    key_sets: dict[str, KeySets],
    refs: dict[str, frozenset[str] | None],
    row_offset: int,
    today: date | None,
) -> _RowVerdict:
    result = validate_router_import_row(
        row,
        index,
        row_index,
        sim_numbers=key_sets["sim_numbers"],
        terminal_codes=key_sets["terminal_codes"],
        employee_codes=refs.get("employee_codes"),
        office_codes=refs.get("office_codes"),
        row_offset=row_offset,
    )
    if not result.is_valid:
        return _RowVerdict(result.errors, None, {})
    return _RowVerdict(
        [],
        build_device_record(EntityKind.ROUTER, row, index),
        {"sim_numbers": result.normalized_phone, "terminal_codes": result.management_number},
    )


def _run_tablet(
    row: Sequence[Any],
    index: HeaderIndex,
    row_index: int,
    key_sets: dict[str, KeySets],
    refs: dict[str, frozenset[str] | None],
    row_offset: int,
    today: date | None,
) -> _RowVerdict:
    result = validate_tablet_import_row(
        row,
        index,
        row_index,
        terminal_codes=key_sets["terminal_codes"],
        employee_codes=refs.get("employee_codes"),
        office_codes=refs.get("office_codes"),
        row_offset=row_offset,
    )
    if not result.is_valid:
        return _RowVerdict(result.errors, None, {})
    return _RowVerdict(
        [],
        build_device_record(EntityKind.TABLET, row, index),
        {"terminal_codes": result.management_number},
    )


_DEVICE_REFERENCES = ("employee_codes", "office_codes")

_DEFAULT_ROW_OFFSETS: dict[EntityKind, int] = {
    EntityKind.ADDRESS: address_validator.DEFAULT_ROW_OFFSET,
    EntityKind.EMPLOYEE: employee_validator.DEFAULT_ROW_OFFSET,
    EntityKind.PHONE: device_validator.DEFAULT_ROW_OFFSET,
    EntityKind.ROUTER: device_validator.DEFAULT_ROW_OFFSET,
    EntityKind.TABLET: device_validator.DEFAULT_ROW_OFFSET,
}

ENTITY_TEMPLATES: dict[EntityKind, EntityTemplate] = {
    EntityKind.ADDRESS: EntityTemplate(ADDRESS_HEADERS, ("codes",), (), _run_address),
    EntityKind.EMPLOYEE: EntityTemplate(
        EMPLOYEE_HEADERS, ("codes",), (), _run_employee, EMPLOYEE_HEADER_ALIASES
    ),
    EntityKind.PHONE: EntityTemplate(
        PHONE_HEADERS, ("phone_numbers", "management_numbers"), _DEVICE_REFERENCES, _run_phone
    ),
    EntityKind.ROUTER: EntityTemplate(
        ROUTER_HEADERS, ("sim_numbers", "terminal_codes"), _DEVICE_REFERENCES, _run_router
    ),
    EntityKind.TABLET: EntityTemplate(TABLET_HEADERS, ("terminal_codes",), _DEVICE_REFERENCES, _run_tablet),
}


def is_blank_row(row: Sequence[Any]) -> bool:
    """True when every cell is empty or whitespace only."""
    for raw in row:
        cell = to_cell(raw)
        if not isinstance(cell, EmptyCell) and cell_text(cell).strip():
            return False
    return True


def check_structure(
    rows: Sequence[Sequence[Any]],
    headers: HeaderIndex | Sequence[Any],
    required_headers: Sequence[str],
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> None:
    """Reject sheets that do not follow the template layout.

    A required label is also satisfied by any of its ``aliases``.

    Raises:
        ImportStructureError: a template column is missing from the header row,
            or a data row carries a value right of the template's last column
    """
    index = HeaderIndex.coerce(headers)
    aliases = aliases or {}
    missing = [
        label for label in index.missing(required_headers)
        if not any(alt in index for alt in aliases.get(label, ()))
    ]
    if missing:
        raise ImportStructureError(MISSING_HEADERS_MESSAGE.format(labels=", ".join(missing)))

    width = len(required_headers)
    for row in rows:
        if len(row) > width and not is_blank_row(row[width:]):
            raise ImportStructureError(OUTSIDE_COLUMNS_MESSAGE)


def _key_sets_for(entity: EntityKind, template: EntityTemplate, lookups: LookupSets) -> dict[str, KeySets]:
    key_sets = lookups.key_sets(template.key_names)
    # 事業所名の一意性は既存名を読み込んだ場合のみ検査
    if entity is EntityKind.ADDRESS and "names" in lookups.existing:
        key_sets.update(lookups.key_sets(("names",)))
    return key_sets


def import_rows(
    entity: EntityKind,
    rows: Sequence[Sequence[Any]],
    headers: HeaderIndex | Sequence[Any],
    *,
    lookups: LookupSets | None = None,
    commit_mode: CommitMode = CommitMode.ALL_OR_NOTHING,
    row_offset: int | None = None,
    file_name: str = "",
    sheet_name: str = "",
    error_log: ErrorLogBuffer | None = None,
    today: date | None = None,
    show_progress: bool = True,
) -> ImportResult:
    """Validate ``rows`` in order and apply the commit policy.

    ``row_offset`` defaults to the validator's own default (address/employee 3,
    devices 2) when None.
    """
    template = ENTITY_TEMPLATES[entity]
    lookups = lookups or LookupSets.empty()
    index = HeaderIndex.coerce(headers)
    key_sets = _key_sets_for(entity, template, lookups)
    refs = {name: lookups.reference(name) for name in template.reference_names}
    if row_offset is None:
        row_offset = _DEFAULT_ROW_OFFSETS[entity]

    start = datetime.now(UTC)
    errors: list[str] = []
    records: list[dict[str, Any]] = []
    total = valid = invalid = blank = 0

    progress = RowProgress(len(rows), description=f"{entity.value}") if show_progress else None
    try:
        for row_index, row in enumerate(rows):
            if is_blank_row(row):
                blank += 1
            else:
                total += 1
                verdict = template.run(row, index, row_index, key_sets, refs, row_offset, today)
                if verdict.errors:
                    invalid += 1
                    errors.extend(verdict.errors)
                    for message in verdict.errors:
                        logger.warning(message)
                        if error_log is not None:
                            error_log.append(
                                ErrorRecord.create(
                                    file=file_name,
                                    sheet=sheet_name,
                                    row=row_index + row_offset,
                                    error_type=ROW_ERROR,
                                    message=message,
                                )
                            )
                else:
                    valid += 1
                    if verdict.record is not None:
                        records.append(verdict.record)
                    # 次の行の検証前に受理済みキーを登録 (ファイル内重複検出の前提)
                    for name, key in verdict.keys.items():
                        if name in key_sets:
                            key_sets[name].accept(key)
            if progress is not None:
                progress.advance(invalid=invalid)
    finally:
        if progress is not None:
            progress.close()

    if commit_mode is CommitMode.ALL_OR_NOTHING and invalid:
        committed = False
        logger.error("%d invalid row(s): nothing committed (all_or_nothing)", invalid)
        records = []
    else:
        committed = True
        if invalid:
            logger.info("%d invalid row(s) skipped", invalid)

    end = datetime.now(UTC)
    return ImportResult(
        entity=entity,
        file_name=file_name,
        sheet_name=sheet_name,
        commit_mode=commit_mode,
        total_rows=total,
        valid_rows=valid,
        invalid_rows=invalid,
        blank_rows=blank,
        committed=committed,
        errors=errors,
        records=records,
        start_time=start,
        end_time=end,
        elapsed_seconds=(end - start).total_seconds(),
    )


def import_file(
    path: Path,
    entity: EntityKind,
    config: ImportConfig,
    *,
    lookups: LookupSets | None = None,
    sheet: str | None = None,
    error_log: ErrorLogBuffer | None = None,
    today: date | None = None,
) -> ImportResult:
    """Read ``path`` with the entity's template layout and import its rows.

    Raises:
        SheetReadError: the workbook or sheet cannot be read
        ImportStructureError: header row missing or not matching the template
    """
    template_cfg = config.template(entity)
    template = ENTITY_TEMPLATES[entity]
    sheet_name = sheet or template_cfg.sheet

    try:
        data: SheetData = read_table(path, template_cfg.header_rows, sheet_name)
    except SheetHeaderError as e:
        raise ImportStructureError(str(e)) from e
    logger.info(
        "file=%s sheet=%s entity=%s data_rows=%d", path.name, data.sheet_name, entity.value, len(data.rows)
    )

    try:
        check_structure(data.rows, data.headers, template.headers, template.header_aliases)
    except ImportStructureError as e:
        if error_log is not None:
            error_log.append(ErrorRecord.create(path.name, data.sheet_name, -1, STRUCTURE_ERROR, str(e)))
        raise

    return import_rows(
        entity,
        data.rows,
        data.headers,
        lookups=lookups,
        commit_mode=template_cfg.commit_mode,
        row_offset=template_cfg.row_offset,
        file_name=path.name,
        sheet_name=data.sheet_name,
        error_log=error_log,
        today=today,
    )
