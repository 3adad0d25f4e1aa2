from __future__ import annotations

import re
from collections.abc import Collection
from datetime import date

from ..models.cell import Cell, DateCell, EmptyCell, NumberCell, TextCell
from .normalizers import excel_serial_to_date, normalize_phone_digits

"""Field-level predicates.

Callers pass values that are already half-width normalized and trimmed; the
predicates themselves do no normalization. Date predicates take a ``Cell``
because a spreadsheet date can arrive as text, a serial number or a real date.
"""

__all__ = [
    "MIN_DATE",
    "is_digits_and_hyphens_only",
    "is_digits_only",
    "is_eleven_digit_or_grouped_phone",
    "is_seven_digit_or_grouped_zip",
    "is_grouped_phone_flexible",
    "is_landline_or_mobile_phone",
    "is_sim_number_shape",
    "is_ipv4_shape",
    "is_enum_member",
    "is_ascii_only",
    "is_valid_date_shape",
    "parse_date_value",
    "max_date",
    "is_within_date_range",
    "is_email_shape",
    "has_name_symbols",
]

MIN_DATE = date(2000, 1, 1)
MAX_YEARS_AHEAD = 5

_DIGITS_HYPHENS = re.compile(r"[0-9-]+")
_DIGITS = re.compile(r"[0-9]+")
_PHONE_11_OR_344 = re.compile(r"(\d{11}|\d{3}-\d{4}-\d{4})")
_ZIP_7_OR_34 = re.compile(r"(\d{7}|\d{3}-\d{4})")
_PHONE_FLEXIBLE = re.compile(r"\d{2,4}-\d{2,4}-\d{2,4}")
_SIM = re.compile(r"(\d{11}|\d{3}-\d{4}-\d{4}|\d{14})")
_IPV4 = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")
_ASCII = re.compile(r"[\x20-\x7E]*")
_DATE_TEXT = re.compile(r"(\d{4})[-/](\d{1,2})[-/](\d{1,2})")
_EMAIL = re.compile(r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# 氏名に使えない文字: 数字 (半角/全角), ASCII 記号, 全角記号, 句読点
_NAME_SYMBOLS = re.compile(r"[0-9０-９!-/:-@\[-`{-~！-／：-＠［-｀｛-～、。,.?？]")


def is_digits_and_hyphens_only(value: str) -> bool:
    return bool(_DIGITS_HYPHENS.fullmatch(value))


def is_digits_only(value: str) -> bool:
    return bool(_DIGITS.fullmatch(value))


def is_eleven_digit_or_grouped_phone(value: str) -> bool:
    return bool(_PHONE_11_OR_344.fullmatch(value))


def is_seven_digit_or_grouped_zip(value: str) -> bool:
    return bool(_ZIP_7_OR_34.fullmatch(value))


def is_grouped_phone_flexible(value: str) -> bool:
    return bool(_PHONE_FLEXIBLE.fullmatch(value))


def is_landline_or_mobile_phone(value: str) -> bool:
    """TEL/FAX shape used by the office import.

    Mobile style numbers (11 digits or 3-4-4) are accepted as is. Landline
    numbers must be grouped in 2-4 digit blocks and carry 10 or 11 digits in
    total, so ``03-1234-5678`` passes while ``03-1234-567`` does not.
    """
    if is_eleven_digit_or_grouped_phone(value):
        return True
    return is_grouped_phone_flexible(value) and len(normalize_phone_digits(value)) in (10, 11)


def is_sim_number_shape(value: str) -> bool:
    return bool(_SIM.fullmatch(value))


def is_ipv4_shape(value: str) -> bool:
    """Four dot-separated groups of 1-3 digits. Octet values are not range checked."""
    return bool(_IPV4.fullmatch(value))


def is_enum_member(value: str, allowed: Collection[str]) -> bool:
    return value in allowed


def is_ascii_only(value: str) -> bool:
    """True when every character is printable ASCII (0x20-0x7E)."""
    return bool(_ASCII.fullmatch(value))


def is_valid_date_shape(cell: Cell) -> bool:
    """Empty, serial numbers and real dates always pass; text must be Y-M-D or Y/M/D."""
    if isinstance(cell, (EmptyCell, NumberCell, DateCell)):
        return True
    text = cell.value.strip()
    if not text:
        return True
    return bool(_DATE_TEXT.fullmatch(text))


def parse_date_value(cell: Cell) -> date | None:
    """Concrete date for a cell, or None when it is blank or not a real calendar date."""
    if isinstance(cell, DateCell):
        return cell.value
    if isinstance(cell, NumberCell):
        return excel_serial_to_date(cell.value)
    if isinstance(cell, TextCell):
        m = _DATE_TEXT.fullmatch(cell.value.strip())
        if not m:
            return None
        year, month, day = (int(g) for g in m.groups())
        try:
            return date(year, month, day)
        except ValueError:
            # 2024/02/30 のような形式上は正しい日付
            return None
    return None


def max_date(today: date | None = None) -> date:
    """Upper bound of accepted dates: today plus five years (Feb 29 -> Feb 28)."""
    base = today or date.today()
    year = base.year + MAX_YEARS_AHEAD
    try:
        return base.replace(year=year)
    except ValueError:
        return base.replace(year=year, day=28)


def is_within_date_range(value: date, today: date | None = None) -> bool:
    return MIN_DATE <= value <= max_date(today)


def is_email_shape(value: str) -> bool:
    return bool(_EMAIL.fullmatch(value))


def has_name_symbols(value: str) -> bool:
    return bool(_NAME_SYMBOLS.search(value))
