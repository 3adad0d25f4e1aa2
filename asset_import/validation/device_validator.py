from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import date
from typing import Any

from ..models.cell import TextCell
from ..models.header_index import HeaderIndex
from ..models.outcome import DeviceValidationResult, KeySets
from .common import RowErrors, half_width, trimmed
from .field_validators import (
    MIN_DATE,
    is_ascii_only,
    is_digits_and_hyphens_only,
    is_digits_only,
    is_eleven_digit_or_grouped_phone,
    is_enum_member,
    is_ipv4_shape,
    is_sim_number_shape,
    is_valid_date_shape,
    is_within_date_range,
    max_date,
    parse_date_value,
)
from .normalizers import (
    format_office_code,
    format_phone_number,
    normalize_phone_digits,
    to_half_width,
)

"""Device import row validators (phone, router, tablet).

Device templates have a single header row, so row numbers default to
``row_index + 2``. Unlike the office validator these functions do not build a
record: they return the verdict plus the normalized uniqueness keys, and the
caller assembles the record (``asset_import.services.device_records``).
"""

__all__ = [
    "DEFAULT_ROW_OFFSET",
    "PHONE_HEADERS",
    "ROUTER_HEADERS",
    "TABLET_HEADERS",
    "PHONE_CARRIERS",
    "ROUTER_CARRIERS",
    "DEVICE_STATUSES",
    "validate_phone_import_row",
    "validate_router_import_row",
    "validate_tablet_import_row",
]

DEFAULT_ROW_OFFSET = 2

PHONE_HEADERS: tuple[str, ...] = (
    "管理番号(必須)",
    "電話番号(必須)",
    "機種名",
    "契約年数",
    "キャリア",
    "状況",
    "社員コード",
    "事業所コード",
    "負担先",
    "受領書提出日",
    "貸与日",
    "返却日",
    "SMARTアドレス帳ID",
    "SMARTアドレス帳PW",
    "備考",
)

ROUTER_HEADERS: tuple[str, ...] = (
    "端末CD(必須)",
    "No.",
    "SIM電番(必須)",
    "機種型番",
    "通信キャリア",
    "通信容量",
    "契約状況",
    "契約年数",
    "状況",
    "社員コード",
    "事業所コード",
    "IPアドレス",
    "サブネットマスク",
    "開始IP",
    "終了IP",
    "請求元",
    "負担先",
    "費用",
    "費用振替",
    "貸与履歴",
    "備考(返却日)",
)

TABLET_HEADERS: tuple[str, ...] = (
    "端末CD(必須)",
    "型番(必須)",
    "メーカー",
    "契約年数",
    "状況",
    "社員コード",
    "事業所コード",
    "負担先",
    "過去貸与履歴",
    "備考",
)

PHONE_CARRIERS: tuple[str, ...] = ("KDDI", "SoftBank", "Docomo", "Rakuten", "その他")
ROUTER_CARRIERS: tuple[str, ...] = ("au・wimax2+", "au", "docomo(iij)", "SoftBank")
DEVICE_STATUSES: tuple[str, ...] = ("使用中", "予備機", "在庫", "故障", "修理中", "廃棄")

_PHONE_DATE_FIELDS: tuple[str, ...] = ("受領書提出日", "貸与日", "返却日")
_ROUTER_IP_FIELDS: tuple[str, ...] = ("IPアドレス", "サブネットマスク", "開始IP", "終了IP")
_ROUTER_COST_FIELDS: tuple[str, ...] = ("費用", "費用振替")


def _check_status(errors: RowErrors, index: HeaderIndex, row: Sequence[Any]) -> None:
    status = trimmed(index, row, "状況")
    if status and not is_enum_member(status, DEVICE_STATUSES):
        errors.add("invalid_value", label="状況", value=status)


def _check_assignment_codes(
    errors: RowErrors,
    index: HeaderIndex,
    row: Sequence[Any],
    employee_codes: Collection[str] | None,
    office_codes: Collection[str] | None,
) -> None:
    # 社員コード / 事業所コードは全角変換しない (全角数字は不正文字として報告)
    employee_code = trimmed(index, row, "社員コード")
    if employee_code:
        if not is_digits_and_hyphens_only(employee_code):
            errors.add("code_chars", label="社員コード", value=employee_code)
        elif employee_codes is not None and employee_code not in employee_codes:
            errors.add("not_found", label="社員コード", value=employee_code)

    office_code = trimmed(index, row, "事業所コード")
    if office_code:
        if not is_digits_and_hyphens_only(office_code):
            errors.add("code_chars", label="事業所コード", value=office_code)
        elif office_codes is not None and not (
            office_code in office_codes or format_office_code(office_code) in office_codes
        ):
            errors.add("not_found", label="事業所コード", value=office_code)


def _check_terminal_code(
    errors: RowErrors,
    index: HeaderIndex,
    row: Sequence[Any],
    terminal_codes: KeySets,
) -> str:
    raw = index.text(row, "端末CD(必須)")
    terminal_code = to_half_width(raw).strip()
    if not terminal_code:
        errors.add("empty", label="端末CD")
    elif not is_ascii_only(raw):
        errors.add("full_width", label="端末CD", value=raw.strip())
    elif terminal_codes.is_existing(terminal_code):
        errors.add("exists", label="端末CD", value=terminal_code)
    elif terminal_codes.is_processed(terminal_code):
        errors.add("duplicate_in_file", label="端末CD", value=terminal_code)
    return terminal_code


def _check_ascii_field(errors: RowErrors, index: HeaderIndex, row: Sequence[Any], label: str) -> None:
    value = trimmed(index, row, label)
    if value and not is_ascii_only(value):
        errors.add("full_width", label=label, value=value)


def validate_phone_import_row(
    row: Sequence[Any],
    headers: HeaderIndex | Sequence[Any],
    row_index: int,
    *,
    phone_numbers: KeySets | None = None,
    management_numbers: KeySets | None = None,
    employee_codes: Collection[str] | None = None,
    office_codes: Collection[str] | None = None,
    row_offset: int = DEFAULT_ROW_OFFSET,
    today: date | None = None,
) -> DeviceValidationResult:
    """Validate one mobile phone row.

    ``employee_codes`` / ``office_codes`` enable the reference checks; when
    None the codes are only checked for their shape.
    """
    index = HeaderIndex.coerce(headers)
    phone_numbers = phone_numbers if phone_numbers is not None else KeySets()
    management_numbers = management_numbers if management_numbers is not None else KeySets()
    errors = RowErrors(row_index + row_offset)

    raw_management = index.text(row, "管理番号(必須)")
    management_number = to_half_width(raw_management).strip()
    if not management_number:
        errors.add("empty", label="管理番号")
    elif not is_ascii_only(raw_management):
        errors.add("full_width_bare", label="管理番号")
    elif management_numbers.is_existing(management_number):
        errors.add("exists", label="管理番号", value=management_number)
    elif management_numbers.is_processed(management_number):
        errors.add("duplicate_in_file", label="管理番号", value=management_number)

    raw_phone = half_width(index, row, "電話番号(必須)")
    phone_number = format_phone_number(raw_phone)
    normalized_phone = normalize_phone_digits(phone_number)
    if not phone_number:
        errors.add("empty", label="電話番号")
    else:
        # 書式は入力値そのもので判定し、重複は正規化後の数字で判定する (両方出力しうる)
        if not is_eleven_digit_or_grouped_phone(raw_phone):
            errors.add("phone_format", label="電話番号", value=raw_phone)
        if normalized_phone:
            if phone_numbers.is_existing(normalized_phone):
                errors.add("exists", label="電話番号", value=phone_number)
            elif phone_numbers.is_processed(normalized_phone):
                errors.add("duplicate_in_file", label="電話番号", value=phone_number)

    carrier = trimmed(index, row, "キャリア")
    if carrier and not is_enum_member(carrier, PHONE_CARRIERS):
        errors.add("invalid_value", label="キャリア", value=carrier)

    _check_status(errors, index, row)
    _check_assignment_codes(errors, index, row, employee_codes, office_codes)

    upper = max_date(today)
    for label in _PHONE_DATE_FIELDS:
        cell = index.cell(row, label)
        if not is_valid_date_shape(cell):
            errors.add("date_format", label=label)
            continue
        parsed = parse_date_value(cell)
        if parsed is not None and not is_within_date_range(parsed, today):
            shown = cell.value.strip() if isinstance(cell, TextCell) else parsed.isoformat()
            errors.add(
                "date_range",
                label=label,
                value=shown,
                min=MIN_DATE.isoformat(),
                max=upper.isoformat(),
            )

    _check_ascii_field(errors, index, row, "SMARTアドレス帳ID")
    _check_ascii_field(errors, index, row, "SMARTアドレス帳PW")

    return DeviceValidationResult(
        is_valid=not errors,
        errors=list(errors),
        normalized_phone=normalized_phone,
        management_number=management_number,
    )


def validate_router_import_row(
    row: Sequence[Any],
    headers: HeaderIndex | Sequence[Any],
    row_index: int,
    *,
    sim_numbers: KeySets | None = None,
    terminal_codes: KeySets | None = None,
    employee_codes: Collection[str] | None = None,
    office_codes: Collection[str] | None = None,
    row_offset: int = DEFAULT_ROW_OFFSET,
) -> DeviceValidationResult:
    """Validate one router row.

    The SIM number is only validated when the cell is filled in, despite the
    ``(必須)`` marker in its header. The terminal code is returned as
    ``management_number`` and the SIM digits as ``normalized_phone``.
    """
    index = HeaderIndex.coerce(headers)
    sim_numbers = sim_numbers if sim_numbers is not None else KeySets()
    terminal_codes = terminal_codes if terminal_codes is not None else KeySets()
    errors = RowErrors(row_index + row_offset)

    terminal_code = _check_terminal_code(errors, index, row, terminal_codes)

    raw_sim = half_width(index, row, "SIM電番(必須)")
    normalized_sim = ""
    if raw_sim:
        sim_number = format_phone_number(raw_sim)
        normalized_sim = normalize_phone_digits(sim_number)
        # 先頭 0 が落ちた数値セルは整形後の値で救済する
        if not is_sim_number_shape(raw_sim) and not is_sim_number_shape(sim_number):
            errors.add("sim_format", label="SIM電番", value=raw_sim)
        if normalized_sim:
            if sim_numbers.is_existing(normalized_sim):
                errors.add("exists", label="SIM電番", value=raw_sim)
            elif sim_numbers.is_processed(normalized_sim):
                errors.add("duplicate_in_file", label="SIM電番", value=raw_sim)

    _check_ascii_field(errors, index, row, "機種型番")

    carrier = trimmed(index, row, "通信キャリア")
    if carrier and not is_enum_member(carrier, ROUTER_CARRIERS):
        errors.add(
            "invalid_choice",
            label="通信キャリア",
            value=carrier,
            choices=", ".join(ROUTER_CARRIERS),
        )

    _check_status(errors, index, row)
    _check_assignment_codes(errors, index, row, employee_codes, office_codes)

    for label in _ROUTER_IP_FIELDS:
        value = trimmed(index, row, label)
        if value and not is_ipv4_shape(value):
            errors.add("ip_format", label=label, value=value)

    for label in _ROUTER_COST_FIELDS:
        value = half_width(index, row, label)
        if value and not is_digits_only(value):
            errors.add("digits_only", label=label, value=value)

    return DeviceValidationResult(
        is_valid=not errors,
        errors=list(errors),
        normalized_phone=normalized_sim,
        management_number=terminal_code,
    )


def validate_tablet_import_row(
    row: Sequence[Any],
    headers: HeaderIndex | Sequence[Any],
    row_index: int,
    *,
    terminal_codes: KeySets | None = None,
    employee_codes: Collection[str] | None = None,
    office_codes: Collection[str] | None = None,
    row_offset: int = DEFAULT_ROW_OFFSET,
) -> DeviceValidationResult:
    index = HeaderIndex.coerce(headers)
    terminal_codes = terminal_codes if terminal_codes is not None else KeySets()
    errors = RowErrors(row_index + row_offset)

    terminal_code = _check_terminal_code(errors, index, row, terminal_codes)
    _check_ascii_field(errors, index, row, "型番(必須)")
    _check_status(errors, index, row)
    _check_assignment_codes(errors, index, row, employee_codes, office_codes)

    return DeviceValidationResult(
        is_valid=not errors,
        errors=list(errors),
        management_number=terminal_code,
    )
