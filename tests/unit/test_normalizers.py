from __future__ import annotations

from datetime import date, datetime

import pytest

from asset_import.models.cell import DateCell, EmptyCell, NumberCell, TextCell
from asset_import.validation.normalizers import (
    excel_serial_to_date,
    format_date_value,
    format_office_code,
    format_phone_number,
    format_zip_code,
    normalize_contract_year,
    normalize_phone_digits,
    strip_hyphens,
    to_half_width,
)


def test_to_half_width_converts_full_width_alnum_only():
    assert to_half_width("ＡＢＣ１２３ａｂｃ") == "ABC123abc"
    # 全角ハイフン・全角スペース・かなは対象外
    assert to_half_width("０３－１２３４　テスト") == "03－1234　テスト"


@pytest.mark.parametrize("value", ["", "abc", "Ｔ００１", "混在ｍｉｘ９", "12-34"])
def test_to_half_width_idempotent(value: str):
    once = to_half_width(value)
    assert to_half_width(once) == once


def test_normalize_phone_digits():
    assert normalize_phone_digits("090-1234-5678") == "09012345678"
    assert normalize_phone_digits("(03) 1234 5678") == "0312345678"
    assert normalize_phone_digits("abc") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("09012345678", "090-1234-5678"),
        ("090-1234-5678", "090-1234-5678"),
        ("0312345678", "03-1234-5678"),
        ("0612345678", "06-1234-5678"),
        ("0451234567", "045-123-4567"),
        # 先頭 0 が落ちた数値セル
        ("9012345678", "090-1234-5678"),
        ("312345678", "03-1234-5678"),
        ("12345678901234", "12345678901234"),
        ("12-34", "1234"),
        ("電話なし", "電話なし"),
        ("", ""),
    ],
)
def test_format_phone_number(raw: str, expected: str):
    assert format_phone_number(raw) == expected


@pytest.mark.parametrize("raw", ["09012345678", "0312345678", "0451234567", "12345678901234", "9012345678"])
def test_format_phone_number_idempotent(raw: str):
    once = format_phone_number(raw)
    assert format_phone_number(once) == once


def test_format_zip_code():
    assert format_zip_code("1234567") == "123-4567"
    assert format_zip_code("123-4567") == "123-4567"
    assert format_zip_code("123-456") == "123-456"
    assert format_zip_code("") == ""
    assert format_zip_code(None) == ""


def test_normalize_contract_year():
    assert normalize_contract_year(" 2年 ") == "2"
    assert normalize_contract_year("3") == "3"
    assert normalize_contract_year("なし") == "なし"


def test_strip_hyphens_and_office_code():
    assert strip_hyphens("1234-56") == "123456"
    assert format_office_code("123456") == "1234-56"
    assert format_office_code("1234-56") == "1234-56"
    assert format_office_code(" 001 ") == "001"


def test_excel_serial_to_date():
    assert excel_serial_to_date(45292) == date(2024, 1, 1)
    assert excel_serial_to_date(36526.5) == date(2000, 1, 1)
    assert excel_serial_to_date(10**12) is None


def test_format_date_value_variants():
    assert format_date_value(TextCell(" 2024/04/01 ")) == "2024-04-01"
    assert format_date_value(NumberCell(45292)) == "2024-01-01"
    assert format_date_value(DateCell(datetime(2024, 5, 6).date())) == "2024-05-06"
    assert format_date_value(EmptyCell()) == ""
