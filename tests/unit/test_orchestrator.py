from __future__ import annotations

import pytest

from asset_import.logging.error_log import ErrorLogBuffer
from asset_import.models.entity import CommitMode, EntityKind
from asset_import.models.lookups import LookupSets
from asset_import.services.orchestrator import (
    ImportStructureError,
    check_structure,
    import_rows,
    is_blank_row,
)
from asset_import.validation.device_validator import ROUTER_HEADERS, TABLET_HEADERS
from asset_import.validation.employee_validator import EMPLOYEE_HEADER_ALIASES, EMPLOYEE_HEADERS


def _tablet(code: str, status: str = "") -> list[object]:
    values = {"端末CD(必須)": code, "型番(必須)": "MK2", "状況": status}
    return [values.get(label, "") for label in TABLET_HEADERS]


def test_is_blank_row():
    assert is_blank_row(["", None, "  ", float("nan")])
    assert not is_blank_row(["", 0])
    assert is_blank_row([])


def test_check_structure_missing_headers():
    headers = [h for h in TABLET_HEADERS if h != "状況"]
    with pytest.raises(ImportStructureError) as exc:
        check_structure([], headers, TABLET_HEADERS)
    assert "不足している項目があります: 状況" in str(exc.value)


def test_check_structure_data_outside_template():
    headers = list(TABLET_HEADERS) + [""]
    ok_rows = [_tablet("T-1") + ["  "]]
    check_structure(ok_rows, headers, TABLET_HEADERS)
    with pytest.raises(ImportStructureError):
        check_structure([_tablet("T-1") + ["x"]], headers, TABLET_HEADERS)


def test_check_structure_accepts_legacy_employee_headers():
    legacy = [{"苗字(必須)": "氏名", "苗字カナ": "氏名カナ"}.get(h, h) for h in EMPLOYEE_HEADERS]
    check_structure([], legacy, EMPLOYEE_HEADERS, EMPLOYEE_HEADER_ALIASES)
    with pytest.raises(ImportStructureError) as exc:
        check_structure([], legacy, EMPLOYEE_HEADERS)
    assert "不足している項目があります: 苗字(必須), 苗字カナ" in str(exc.value)


def test_skip_invalid_keeps_valid_rows():
    rows = [_tablet("T-1"), _tablet("T-2", "紛失"), _tablet("T-3")]
    result = import_rows(
        EntityKind.TABLET, rows, list(TABLET_HEADERS), commit_mode=CommitMode.SKIP_INVALID, show_progress=False
    )
    assert result.committed
    assert (result.total_rows, result.valid_rows, result.invalid_rows) == (3, 2, 1)
    assert [r["terminal_code"] for r in result.records] == ["T-1", "T-3"]
    assert result.errors == ["3行目: 状況「紛失」は不正な値です"]
    assert result.skipped_rows == 1


def test_all_or_nothing_drops_everything():
    rows = [_tablet("T-1"), _tablet("")]
    result = import_rows(
        EntityKind.TABLET, rows, list(TABLET_HEADERS), commit_mode=CommitMode.ALL_OR_NOTHING, show_progress=False
    )
    assert not result.committed
    assert result.records == []
    assert result.committed_rows == 0
    assert result.valid_rows == 1


def test_in_file_duplicates_detected_after_accept():
    rows = [_tablet("T-1"), _tablet("T-1"), _tablet("Ｔ-1")]
    result = import_rows(
        EntityKind.TABLET, rows, list(TABLET_HEADERS), commit_mode=CommitMode.SKIP_INVALID, show_progress=False
    )
    assert result.errors == [
        "3行目: 端末CD「T-1」がファイル内で重複しています",
        "4行目: 端末CD「Ｔ-1」に全角文字が含まれています。半角文字のみ使用可能です。",
    ]


def test_invalid_rows_do_not_register_keys():
    rows = [_tablet("T-1", "紛失"), _tablet("T-1")]
    result = import_rows(
        EntityKind.TABLET, rows, list(TABLET_HEADERS), commit_mode=CommitMode.SKIP_INVALID, show_progress=False
    )
    assert result.invalid_rows == 1
    assert [r["terminal_code"] for r in result.records] == ["T-1"]


def test_existing_keys_and_references_from_lookups():
    lookups = LookupSets(
        existing={"terminal_codes": frozenset({"T-9"})},
        references={"employee_codes": frozenset({"100"})},
    )
    row_unknown_employee = _tablet("T-2")
    row_unknown_employee[TABLET_HEADERS.index("社員コード")] = "200"
    result = import_rows(
        EntityKind.TABLET,
        [_tablet("T-9"), row_unknown_employee],
        list(TABLET_HEADERS),
        lookups=lookups,
        commit_mode=CommitMode.SKIP_INVALID,
        show_progress=False,
    )
    assert result.errors == [
        "2行目: 端末CD「T-9」は既に存在します",
        "3行目: 社員コード「200」は存在しません",
    ]


def test_blank_rows_are_counted_not_validated():
    rows = [_tablet("T-1"), [""] * len(TABLET_HEADERS), _tablet("T-2")]
    result = import_rows(EntityKind.TABLET, rows, list(TABLET_HEADERS), show_progress=False)
    assert result.blank_rows == 1
    assert result.total_rows == 2
    assert result.committed_rows == 2


def test_row_offset_and_error_log(tmp_path):
    buffer = ErrorLogBuffer(logs_dir=tmp_path)
    rows = [_tablet("")]
    result = import_rows(
        EntityKind.TABLET,
        rows,
        list(TABLET_HEADERS),
        row_offset=5,
        file_name="t.xlsx",
        sheet_name="端末",
        error_log=buffer,
        show_progress=False,
    )
    assert result.errors == ["5行目: 端末CDが空です"]
    assert len(buffer) == 1


def test_address_rows_all_or_nothing(valid_address_row, address_headers):
    dup = list(valid_address_row)
    dup[1] = "Other Office"
    result = import_rows(EntityKind.ADDRESS, [valid_address_row, dup], address_headers, show_progress=False)
    assert result.errors == ["4行目: 事業所コード「001」がファイル内で重複しています"]
    assert not result.committed
    assert result.records == []


def test_address_names_checked_when_loaded(valid_address_row, address_headers):
    second = list(valid_address_row)
    second[0] = "002"
    lookups = LookupSets(existing={"codes": frozenset(), "names": frozenset()})
    result = import_rows(
        EntityKind.ADDRESS,
        [valid_address_row, second],
        address_headers,
        lookups=lookups,
        commit_mode=CommitMode.SKIP_INVALID,
        show_progress=False,
    )
    assert result.errors == ["4行目: 事業所名「Test Office」がファイル内で重複しています"]


def test_router_sequence_records():
    def router(code: str, sim: object) -> list[object]:
        values = {"端末CD(必須)": code, "SIM電番(必須)": sim}
        return [values.get(label, "") for label in ROUTER_HEADERS]

    rows = [router("R-1", "09012345678"), router("R-2", "090-1234-5678"), router("R-3", "")]
    result = import_rows(
        EntityKind.ROUTER, rows, list(ROUTER_HEADERS), commit_mode=CommitMode.SKIP_INVALID, show_progress=False
    )
    assert result.errors == ["3行目: SIM電番「090-1234-5678」がファイル内で重複しています"]
    assert [r["sim_number"] for r in result.records] == ["090-1234-5678", ""]
