from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.header_index import HeaderIndex
from ..models.outcome import AddressValidationOutcome, KeySets
from ..models.records import AddressRecord
from .common import RowErrors, half_width, trimmed
from .field_validators import (
    is_digits_and_hyphens_only,
    is_landline_or_mobile_phone,
    is_seven_digit_or_grouped_zip,
)
from .normalizers import format_zip_code

"""Office / address import row validator.

The office template has a title row and a header row above the data, so the
reported row number is ``row_index + 3`` unless the caller overrides it.
Every rule runs for every row; a row with at least one error yields no record.
"""

__all__ = [
    "ADDRESS_HEADERS",
    "DEFAULT_ROW_OFFSET",
    "validate_address_import_row",
]

DEFAULT_ROW_OFFSET = 3

ADDRESS_HEADERS: tuple[str, ...] = (
    "事業所コード(必須)",
    "事業所名(必須)",
    "エリアコード",
    "No.",
    "〒(必須)",
    "住所(必須)",
    "TEL",
    "FAX",
    "事業部",
    "経理コード",
    "エリアコード(確認用)",
    "主担当",
    "枝番",
    "※",
    "備考",
    "宛名ラベル用",
    "宛名ラベル用〒",
    "宛名ラベル用住所",
    "注意書き",
)

# 半角数字とハイフンのみ許可する任意項目 (エラー出力順)
_CODE_LIKE_FIELDS: tuple[str, ...] = (
    "エリアコード",
    "No.",
    "経理コード",
    "エリアコード(確認用)",
    "枝番",
)

_ZIP_FIELDS: tuple[str, ...] = ("〒(必須)", "宛名ラベル用〒")
_PHONE_FIELDS: tuple[str, ...] = ("TEL", "FAX")


def validate_address_import_row(
    row: Sequence[Any],
    headers: HeaderIndex | Sequence[Any],
    row_index: int,
    *,
    codes: KeySets | None = None,
    names: KeySets | None = None,
    row_offset: int = DEFAULT_ROW_OFFSET,
) -> AddressValidationOutcome:
    """Validate one office row and build its record when it is clean.

    Parameters:
        row: raw cell values in header order
        headers: header labels (or a prepared HeaderIndex)
        row_index: zero-based index into the data rows
        codes: persisted / already-imported office codes
        names: optional persisted / already-imported office names
        row_offset: added to row_index for the reported row number

    Returns:
        AddressValidationOutcome; ``record`` is set only when ``errors`` is empty
    """
    index = HeaderIndex.coerce(headers)
    codes = codes if codes is not None else KeySets()
    errors = RowErrors(row_index + row_offset)

    # 事業所コード: 空 -> 書式 -> 既存 -> ファイル内重複 (最初の 1 件のみ)
    office_code = half_width(index, row, "事業所コード(必須)")
    if not office_code:
        errors.add("empty", label="事業所コード")
    elif not is_digits_and_hyphens_only(office_code):
        errors.add("digits_hyphen", label="事業所コード(必須)", value=office_code)
    elif codes.is_existing(office_code):
        errors.add("exists", label="事業所コード", value=office_code)
    elif codes.is_processed(office_code):
        errors.add("duplicate_in_file", label="事業所コード", value=office_code)

    office_name = trimmed(index, row, "事業所名(必須)")
    if not office_name:
        errors.add("empty", label="事業所名")
    elif names is not None:
        if names.is_existing(office_name):
            errors.add("exists", label="事業所名", value=office_name)
        elif names.is_processed(office_name):
            errors.add("duplicate_in_file", label="事業所名", value=office_name)

    values: dict[str, str] = {}
    for label in _CODE_LIKE_FIELDS:
        value = half_width(index, row, label)
        values[label] = value
        if value and not is_digits_and_hyphens_only(value):
            errors.add("digits_hyphen", label=label, value=value)

    # 〒(必須) も空欄はエラーにしない (書式のみ検査)
    for label in _ZIP_FIELDS:
        value = half_width(index, row, label)
        values[label] = value
        if value and not is_seven_digit_or_grouped_zip(value):
            errors.add("zip_format", label=label, value=value)

    address = trimmed(index, row, "住所(必須)")
    if not address:
        errors.add("empty", label="住所")

    for label in _PHONE_FIELDS:
        value = half_width(index, row, label)
        values[label] = value
        if value and not is_landline_or_mobile_phone(value):
            errors.add("tel_format", label=label, value=value)

    if errors:
        return AddressValidationOutcome(errors=list(errors))

    record = AddressRecord(
        address_code=office_code,
        office_name=office_name,
        area=values["エリアコード"],
        no=values["No."],
        zip_code=format_zip_code(values["〒(必須)"]),
        address=address,
        tel=values["TEL"],
        fax=values["FAX"],
        division=trimmed(index, row, "事業部"),
        accounting_code=values["経理コード"],
        main_person=trimmed(index, row, "主担当"),
        branch_number=values["枝番"],
        special_note=trimmed(index, row, "※"),
        notes=trimmed(index, row, "備考"),
        label_name=trimmed(index, row, "宛名ラベル用"),
        label_zip=format_zip_code(values["宛名ラベル用〒"]),
        label_address=trimmed(index, row, "宛名ラベル用住所"),
        attention_note=trimmed(index, row, "注意書き"),
    )
    return AddressValidationOutcome(errors=[], record=record)
