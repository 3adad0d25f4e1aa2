from __future__ import annotations

from datetime import date

import pytest

from asset_import.models.outcome import KeySets
from asset_import.validation.device_validator import PHONE_HEADERS, validate_phone_import_row

TODAY = date(2025, 1, 1)


def phone_row(**values: object) -> list[object]:
    base: dict[str, object] = {
        "管理番号(必須)": "M001",
        "電話番号(必須)": "090-1234-5678",
        "機種名": "iPhone 15",
        "契約年数": "2年",
        "キャリア": "KDDI",
        "状況": "使用中",
        "社員コード": "100",
        "事業所コード": "1234-56",
        "受領書提出日": "2024/04/01",
    }
    base.update(values)
    return [base.get(label, "") for label in PHONE_HEADERS]


def validate(row: list[object], **kwargs):
    kwargs.setdefault("today", TODAY)
    return validate_phone_import_row(row, list(PHONE_HEADERS), 0, **kwargs)


def test_valid_phone_row():
    result = validate(phone_row())
    assert result.is_valid
    assert result.errors == []
    assert result.normalized_phone == "09012345678"
    assert result.management_number == "M001"


def test_missing_required_fields():
    result = validate(phone_row(**{"管理番号(必須)": "", "電話番号(必須)": None}))
    assert not result.is_valid
    assert result.errors == ["2行目: 管理番号が空です", "2行目: 電話番号が空です"]


def test_full_width_management_number():
    result = validate(phone_row(**{"管理番号(必須)": "Ｍ００１"}))
    assert result.errors == ["2行目: 管理番号に全角文字が含まれています"]


def test_ten_digit_phone_reports_raw_value():
    result = validate(phone_row(**{"電話番号(必須)": "0312345678"}))
    assert result.errors == [
        "2行目: 電話番号「0312345678」は不正な形式です (11桁の数値 または xxx-xxxx-xxxx)"
    ]
    assert result.normalized_phone == "0312345678"


def test_full_width_phone_is_normalized():
    result = validate(phone_row(**{"電話番号(必須)": "０９０１２３４５６７８"}))
    assert result.is_valid
    assert result.normalized_phone == "09012345678"


def test_existing_and_processed_phone():
    existing = KeySets.of(existing=["09012345678"])
    result = validate(phone_row(**{"電話番号(必須)": "09012345678"}), phone_numbers=existing)
    assert result.errors == ["2行目: 電話番号「090-1234-5678」は既に存在します"]

    processed = KeySets.of(processed=["09012345678"])
    result = validate(phone_row(), phone_numbers=processed)
    assert result.errors == ["2行目: 電話番号「090-1234-5678」がファイル内で重複しています"]


def test_duplicate_management_number():
    keys = KeySets.of(processed=["M001"])
    result = validate(phone_row(), management_numbers=keys)
    assert result.errors == ["2行目: 管理番号「M001」がファイル内で重複しています"]


def test_carrier_and_status_enums():
    result = validate(phone_row(キャリア="au", 状況="紛失"))
    assert result.errors == [
        "2行目: キャリア「au」は不正な値です",
        "2行目: 状況「紛失」は不正な値です",
    ]


def test_assignment_codes_shape_and_reference():
    result = validate(phone_row(社員コード="E01", 事業所コード="９９"))
    assert result.errors == [
        "2行目: 社員コード「E01」に不正な文字が含まれています。半角数字とハイフンのみ使用可能です。",
        "2行目: 事業所コード「９９」に不正な文字が含まれています。半角数字とハイフンのみ使用可能です。",
    ]

    result = validate(
        phone_row(社員コード="200", 事業所コード="123456"),
        employee_codes={"100"},
        office_codes={"1234-56"},
    )
    assert result.errors == ["2行目: 社員コード「200」は存在しません"]


def test_reference_checks_skipped_without_sets():
    result = validate(phone_row(社員コード="999"))
    assert result.is_valid


def test_date_shape_and_range():
    result = validate(phone_row(受領書提出日="2024.04.01", 貸与日="1999/12/31"))
    assert result.errors == [
        "2行目: 受領書提出日は「YYYY-MM-DD」または「YYYY/MM/DD」形式で入力してください",
        "2行目: 貸与日「1999/12/31」は2000-01-01から2030-01-01までの日付を入力してください",
    ]


def test_serial_date_range_shows_iso_date():
    # 73050 = 2099-12-31
    result = validate(phone_row(返却日=73050))
    assert result.errors == [
        "2行目: 返却日「2099-12-31」は2000-01-01から2030-01-01までの日付を入力してください"
    ]


@pytest.mark.parametrize("value", [45292, "2024-01-01", "2030/1/1"])
def test_dates_in_range(value):
    assert validate(phone_row(貸与日=value)).is_valid


def test_smart_address_book_ascii():
    result = validate(phone_row(**{"SMARTアドレス帳ID": "ｉｄ", "SMARTアドレス帳PW": "pass"}))
    assert result.errors == [
        "2行目: SMARTアドレス帳ID「ｉｄ」に全角文字が含まれています。半角文字のみ使用可能です。"
    ]


def test_management_number_with_line_break_is_rejected():
    result = validate(phone_row(**{"管理番号(必須)": "M001\n"}))
    assert result.errors == ["2行目: 管理番号に全角文字が含まれています"]
