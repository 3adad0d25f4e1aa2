from __future__ import annotations

from datetime import date, datetime

import pytest

from asset_import.models.cell import DateCell, EmptyCell, NumberCell, TextCell
from asset_import.validation.field_validators import (
    MIN_DATE,
    has_name_symbols,
    is_ascii_only,
    is_digits_and_hyphens_only,
    is_digits_only,
    is_eleven_digit_or_grouped_phone,
    is_email_shape,
    is_enum_member,
    is_grouped_phone_flexible,
    is_ipv4_shape,
    is_landline_or_mobile_phone,
    is_seven_digit_or_grouped_zip,
    is_sim_number_shape,
    is_valid_date_shape,
    is_within_date_range,
    max_date,
    parse_date_value,
)


def test_digits_and_hyphens():
    assert is_digits_and_hyphens_only("001")
    assert is_digits_and_hyphens_only("12-3")
    assert not is_digits_and_hyphens_only("A01")
    assert not is_digits_and_hyphens_only("")
    assert not is_digits_and_hyphens_only("1 2")


def test_digits_only():
    assert is_digits_only("5000")
    assert not is_digits_only("-5000")
    assert not is_digits_only("50.5")


@pytest.mark.parametrize(
    "value, ok",
    [("09012345678", True), ("090-1234-5678", True), ("03-1234-5678", False), ("0901234567", False)],
)
def test_eleven_digit_or_grouped_phone(value: str, ok: bool):
    assert is_eleven_digit_or_grouped_phone(value) is ok


def test_zip_shape():
    assert is_seven_digit_or_grouped_zip("1234567")
    assert is_seven_digit_or_grouped_zip("123-4567")
    assert not is_seven_digit_or_grouped_zip("123-456-7")
    assert not is_seven_digit_or_grouped_zip("12-34567")


def test_grouped_phone_flexible():
    assert is_grouped_phone_flexible("03-1234-5678")
    assert is_grouped_phone_flexible("0120-12-34")
    assert not is_grouped_phone_flexible("0312345678")
    assert not is_grouped_phone_flexible("03-12345-678")


@pytest.mark.parametrize(
    "value, ok",
    [
        ("03-1234-5678", True),
        ("045-123-4567", True),
        ("090-1234-5678", True),
        ("09012345678", True),
        ("03-1234-567", False),
        ("0120-12-34", False),
        ("0312345678", False),
    ],
)
def test_landline_or_mobile_phone(value: str, ok: bool):
    assert is_landline_or_mobile_phone(value) is ok


def test_sim_shape():
    assert is_sim_number_shape("09012345678")
    assert is_sim_number_shape("090-1234-5678")
    assert is_sim_number_shape("12345678901234")
    assert not is_sim_number_shape("0901234567")


def test_ipv4_shape():
    assert is_ipv4_shape("192.168.1.1")
    # 値の範囲は見ない
    assert is_ipv4_shape("999.999.999.999")
    assert not is_ipv4_shape("999.999.999.999.999")
    assert not is_ipv4_shape("192.168.1")
    assert not is_ipv4_shape("192.168.1.1a")


def test_enum_and_ascii():
    assert is_enum_member("KDDI", ("KDDI", "SoftBank"))
    assert not is_enum_member("kddi", ("KDDI", "SoftBank"))
    assert is_ascii_only("T-001 abc")
    assert is_ascii_only("")
    assert not is_ascii_only("Ｔ001")
    assert not is_ascii_only("T001　")
    assert not is_ascii_only("M001\n")
    assert not is_ascii_only("T-1\r\n")


@pytest.mark.parametrize(
    "check, value",
    [
        (is_digits_only, "123\n"),
        (is_eleven_digit_or_grouped_phone, "09012345678\n"),
        (is_ipv4_shape, "10.0.0.1\n"),
        (is_email_shape, "a@example.com\n"),
    ],
)
def test_trailing_newline_never_matches(check, value: str):
    assert not check(value)


@pytest.mark.parametrize(
    "cell, ok",
    [
        (EmptyCell(), True),
        (TextCell("   "), True),
        (NumberCell(45292), True),
        (DateCell(date(2024, 1, 1)), True),
        (TextCell("2024-01-01"), True),
        (TextCell("2024/1/5"), True),
        (TextCell("2024.01.01"), False),
        (TextCell("令和6年1月1日"), False),
        (TextCell("24-01-01"), False),
    ],
)
def test_valid_date_shape(cell, ok: bool):
    assert is_valid_date_shape(cell) is ok


def test_parse_date_value():
    assert parse_date_value(TextCell("2024/02/29")) == date(2024, 2, 29)
    assert parse_date_value(TextCell("2023/02/29")) is None
    assert parse_date_value(NumberCell(45292)) == date(2024, 1, 1)
    assert parse_date_value(DateCell(datetime(2024, 3, 1).date())) == date(2024, 3, 1)
    assert parse_date_value(EmptyCell()) is None
    assert parse_date_value(TextCell("not a date")) is None


def test_date_range_bounds():
    today = date(2025, 6, 15)
    assert max_date(today) == date(2030, 6, 15)
    assert is_within_date_range(MIN_DATE, today)
    assert not is_within_date_range(date(1999, 12, 31), today)
    assert is_within_date_range(date(2030, 6, 15), today)
    assert not is_within_date_range(date(2030, 6, 16), today)


def test_max_date_from_leap_day():
    assert max_date(date(2024, 2, 29)) == date(2029, 2, 28)


def test_email_and_name_symbols():
    assert is_email_shape("taro.yamada@example.co.jp")
    assert not is_email_shape("taro@example")
    assert not is_email_shape("taro example.com")
    assert has_name_symbols("山田1")
    assert has_name_symbols("山田！")
    assert has_name_symbols("山田、")
    assert not has_name_symbols("山田")
    assert not has_name_symbols("ヤマダ")
