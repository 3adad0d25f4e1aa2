from __future__ import annotations

import re
from datetime import date, timedelta

from ..models.cell import Cell, DateCell, NumberCell, TextCell

"""Pure string normalizers used by the row validators and record builders.

All functions here are total: they never raise for odd input, they return the
input (or an empty string) when there is nothing to normalize.
"""

__all__ = [
    "to_half_width",
    "normalize_phone_digits",
    "format_phone_number",
    "format_zip_code",
    "normalize_contract_year",
    "strip_hyphens",
    "format_office_code",
    "excel_serial_to_date",
    "format_date_value",
]

# 全角英数字 (Ａ-Ｚ ａ-ｚ ０-９) のみを対象とする
_FULL_WIDTH_ALNUM = re.compile(r"[Ａ-Ｚａ-ｚ０-９]")
_FULL_WIDTH_OFFSET = 0xFEE0
_NON_DIGIT = re.compile(r"[^0-9]")

# Excel (1900 date system) のシリアル値 0 に相当する日付 (1900/2/29 バグ込み)
_EXCEL_EPOCH = date(1899, 12, 30)


def to_half_width(value: str) -> str:
    """Convert full-width Latin letters and digits to ASCII; others pass through."""
    return _FULL_WIDTH_ALNUM.sub(lambda m: chr(ord(m.group(0)) - _FULL_WIDTH_OFFSET), value)


def normalize_phone_digits(value: str) -> str:
    """Drop every non-digit character."""
    return _NON_DIGIT.sub("", value)


def format_phone_number(value: str) -> str:
    """Canonical hyphenated phone number.

    A 9 or 10 digit number that does not start with ``0`` gets one prepended
    (numeric spreadsheet cells lose the leading zero). Then:

    * 14 digits: returned unhyphenated (SIM numbers)
    * 11 digits: ``xxx-xxxx-xxxx``
    * 10 digits starting with 03 / 06: ``xx-xxxx-xxxx``
    * other 10 digits: ``xxx-xxx-xxxx``

    Anything else comes back digit-stripped, or unchanged when no digit is left.
    """
    digits = normalize_phone_digits(value)
    if digits and digits[0] != "0" and len(digits) in (9, 10):
        digits = "0" + digits

    if len(digits) == 14:
        return digits
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        if digits.startswith(("03", "06")):
            return f"{digits[:2]}-{digits[2:6]}-{digits[6:]}"
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return digits or value


def format_zip_code(value: str | None) -> str:
    """``1234567`` / ``123-4567`` -> ``123-4567``; anything else is returned as is."""
    if not value:
        return ""
    digits = normalize_phone_digits(value)
    if len(digits) == 7:
        return f"{digits[:3]}-{digits[3:]}"
    return value


def normalize_contract_year(value: str) -> str:
    """Remove the 年 unit marker (``2年`` -> ``2``) and surrounding whitespace."""
    return value.replace("年", "").strip()


def strip_hyphens(value: str) -> str:
    return value.replace("-", "")


def format_office_code(value: str) -> str:
    """Six digit office codes are stored as ``NNNN-NN``."""
    digits = strip_hyphens(value.strip())
    if len(digits) == 6 and digits.isdigit():
        return f"{digits[:4]}-{digits[4:]}"
    return value.strip()


def excel_serial_to_date(serial: float) -> date | None:
    """Excel date serial -> date. Out-of-range serials give None."""
    try:
        return _EXCEL_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError):
        return None


def format_date_value(cell: Cell) -> str:
    """Render a date-ish cell as ``YYYY-MM-DD`` text ('' when blank).

    Text dates are only rewritten (``/`` -> ``-``), not re-parsed.
    """
    if isinstance(cell, DateCell):
        return cell.value.isoformat()
    if isinstance(cell, NumberCell):
        converted = excel_serial_to_date(cell.value)
        return converted.isoformat() if converted else ""
    if isinstance(cell, TextCell):
        return cell.value.strip().replace("/", "-")
    return ""
