from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from ..models.header_index import HeaderIndex
from ..models.outcome import EmployeeValidationOutcome, KeySets
from ..models.records import EmployeeRecord
from .common import RowErrors, half_width, trimmed
from .field_validators import (
    has_name_symbols,
    is_ascii_only,
    is_digits_only,
    is_email_shape,
    parse_date_value,
)
from .normalizers import format_date_value

"""Employee import row validator.

Employee import is an upsert keyed on 社員コード, so only duplicates within
the file are rejected; codes already in the database update the existing row.
"""

__all__ = [
    "DEFAULT_ROW_OFFSET",
    "EMPLOYEE_HEADERS",
    "EMPLOYEE_HEADER_ALIASES",
    "validate_employee_import_row",
]

DEFAULT_ROW_OFFSET = 3

EMPLOYEE_HEADERS: tuple[str, ...] = (
    "社員コード(必須)",
    "苗字(必須)",
    "名前(必須)",
    "苗字カナ",
    "名前カナ",
    "性別",
    "生年月日",
    "年齢",
    "エリアコード",
    "事業所コード",
    "入社年月日",
    "勤続年数",
    "勤続端数月数",
    "権限(必須)",
    "パスワード(必須)",
    "メールアドレス(必須)",
)
# 旧テンプレート (氏名 / 氏名カナ) の見出し
EMPLOYEE_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "苗字(必須)": ("氏名",),
    "苗字カナ": ("氏名カナ",),
}

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")
_WHITESPACE = re.compile(r"[\s　]+")


def _first_filled(index: HeaderIndex, row: Sequence[Any], label: str) -> str:
    for candidate in (label, *EMPLOYEE_HEADER_ALIASES.get(label, ())):
        value = trimmed(index, row, candidate)
        if value:
            return value
    return ""


def _parse_count(text: str) -> int:
    """Leading integer of ``text`` clamped at 0; 0 when there is none."""
    m = _LEADING_INT.match(text)
    if not m:
        return 0
    return max(0, int(m.group(1)))


def _join_name(last: str, first: str) -> str:
    return f"{_WHITESPACE.sub('', last)} {_WHITESPACE.sub('', first)}".strip()


def validate_employee_import_row(
    row: Sequence[Any],
    headers: HeaderIndex | Sequence[Any],
    row_index: int,
    *,
    codes: KeySets | None = None,
    row_offset: int = DEFAULT_ROW_OFFSET,
) -> EmployeeValidationOutcome:
    index = HeaderIndex.coerce(headers)
    codes = codes if codes is not None else KeySets()
    errors = RowErrors(row_index + row_offset)

    code = half_width(index, row, "社員コード(必須)")
    if not code:
        errors.add("code_missing", label="社員コード(必須)")
    elif codes.is_processed(code):
        errors.add("duplicate_in_file", label="社員コード", value=code)

    birth_cell = index.cell(row, "生年月日")
    join_cell = index.cell(row, "入社年月日")
    birth_date = parse_date_value(birth_cell)
    join_date = parse_date_value(join_cell)
    if birth_date and join_date and birth_date > join_date:
        errors.add("date_order", join=format_date_value(join_cell), birth=format_date_value(birth_cell))

    last_name = _first_filled(index, row, "苗字(必須)")
    first_name = trimmed(index, row, "名前(必須)")
    last_name_kana = _first_filled(index, row, "苗字カナ")
    first_name_kana = trimmed(index, row, "名前カナ")
    for label, value in (
        ("苗字", last_name),
        ("名前", first_name),
        ("苗字カナ", last_name_kana),
        ("名前カナ", first_name_kana),
    ):
        if value and has_name_symbols(value):
            errors.add("name_symbols", label=label, value=value)

    email = trimmed(index, row, "メールアドレス(必須)")
    if email:
        if not is_ascii_only(email):
            errors.add("email_full_width", label="メールアドレス")
        elif not is_email_shape(email):
            errors.add("email_format", label="メールアドレス")

    # 既存社員の更新ではパスワード未入力を許可する
    password = half_width(index, row, "パスワード(必須)")
    if password:
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            errors.add("password_length")
        if not is_digits_only(password):
            errors.add("password_digits")

    if errors:
        return EmployeeValidationOutcome(errors=list(errors))

    raw_role = trimmed(index, row, "権限(必須)")
    role = "admin" if raw_role == "管理者" or raw_role.lower() == "admin" else "user"

    record = EmployeeRecord(
        code=code,
        name=_join_name(last_name, first_name),
        name_kana=_join_name(last_name_kana, first_name_kana),
        gender=trimmed(index, row, "性別"),
        birth_date=format_date_value(birth_cell),
        age=_parse_count(index.text(row, "年齢")),
        area_code=half_width(index, row, "エリアコード"),
        address_code=half_width(index, row, "事業所コード"),
        join_date=format_date_value(join_cell),
        years_of_service=_parse_count(index.text(row, "勤続年数")),
        months_of_service=_parse_count(index.text(row, "勤続端数月数")),
        role=role,
        password=password,
        email=email,
    )
    return EmployeeValidationOutcome(errors=[], record=record)
