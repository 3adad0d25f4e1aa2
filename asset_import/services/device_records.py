from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.entity import EntityKind
from ..models.header_index import HeaderIndex
from ..validation.common import half_width, trimmed
from ..validation.normalizers import (
    format_date_value,
    format_office_code,
    format_phone_number,
    normalize_contract_year,
    normalize_phone_digits,
)

"""Record assembly for device rows that passed validation.

The device validators only report errors and keys; turning a clean row into
the dict handed to persistence happens here, on the caller side.
"""

__all__ = [
    "STATUS_CODES",
    "derive_status",
    "build_device_record",
]

# 状況ラベル -> 保存値
STATUS_CODES: dict[str, str] = {
    "使用中": "in-use",
    "予備機": "backup",
    "在庫": "available",
    "故障": "broken",
    "修理中": "repairing",
    "廃棄": "discarded",
}


def derive_status(label: str, employee_code: str, office_code: str) -> str:
    """Assigned devices are always in use; blank status means available."""
    if employee_code or office_code:
        return "in-use"
    if not label:
        return "available"
    return STATUS_CODES.get(label, "available")


def _to_int(text: str) -> int:
    digits = normalize_phone_digits(text)
    return int(digits) if digits else 0


def _assignment(index: HeaderIndex, row: Sequence[Any]) -> dict[str, str]:
    employee_code = trimmed(index, row, "社員コード")
    office_code = trimmed(index, row, "事業所コード")
    return {
        "employee_code": employee_code,
        "address_code": format_office_code(office_code) if office_code else "",
        "status": derive_status(trimmed(index, row, "状況"), employee_code, office_code),
    }


def _phone_record(index: HeaderIndex, row: Sequence[Any]) -> dict[str, Any]:
    return {
        "management_number": half_width(index, row, "管理番号(必須)"),
        "phone_number": format_phone_number(half_width(index, row, "電話番号(必須)")),
        "model_name": trimmed(index, row, "機種名"),
        "contract_years": normalize_contract_year(index.text(row, "契約年数")),
        "carrier": trimmed(index, row, "キャリア"),
        **_assignment(index, row),
        "cost_bearer": trimmed(index, row, "負担先"),
        "receipt_date": format_date_value(index.cell(row, "受領書提出日")),
        "lend_date": format_date_value(index.cell(row, "貸与日")),
        "return_date": format_date_value(index.cell(row, "返却日")),
        "smart_address_id": trimmed(index, row, "SMARTアドレス帳ID"),
        "smart_address_pw": trimmed(index, row, "SMARTアドレス帳PW"),
        "notes": trimmed(index, row, "備考"),
    }


def _router_record(index: HeaderIndex, row: Sequence[Any]) -> dict[str, Any]:
    sim = half_width(index, row, "SIM電番(必須)")
    return {
        "terminal_code": half_width(index, row, "端末CD(必須)"),
        "no": trimmed(index, row, "No."),
        "sim_number": format_phone_number(sim) if sim else "",
        "model_number": trimmed(index, row, "機種型番"),
        "carrier": trimmed(index, row, "通信キャリア"),
        "data_capacity": trimmed(index, row, "通信容量"),
        "contract_status": trimmed(index, row, "契約状況"),
        "contract_years": normalize_contract_year(index.text(row, "契約年数")),
        **_assignment(index, row),
        "ip_address": trimmed(index, row, "IPアドレス"),
        "subnet_mask": trimmed(index, row, "サブネットマスク"),
        "start_ip": trimmed(index, row, "開始IP"),
        "end_ip": trimmed(index, row, "終了IP"),
        "biller": trimmed(index, row, "請求元"),
        "cost_bearer": trimmed(index, row, "負担先"),
        "cost": _to_int(half_width(index, row, "費用")),
        "cost_transfer": _to_int(half_width(index, row, "費用振替")),
        "lending_history": trimmed(index, row, "貸与履歴"),
        "notes": trimmed(index, row, "備考(返却日)"),
    }


def _tablet_record(index: HeaderIndex, row: Sequence[Any]) -> dict[str, Any]:
    return {
        "terminal_code": half_width(index, row, "端末CD(必須)"),
        "model_number": trimmed(index, row, "型番(必須)"),
        "maker": trimmed(index, row, "メーカー"),
        "contract_years": normalize_contract_year(index.text(row, "契約年数")),
        **_assignment(index, row),
        "cost_bearer": trimmed(index, row, "負担先"),
        "lending_history": trimmed(index, row, "過去貸与履歴"),
        "notes": trimmed(index, row, "備考"),
    }


_BUILDERS = {
    EntityKind.PHONE: _phone_record,
    EntityKind.ROUTER: _router_record,
    EntityKind.TABLET: _tablet_record,
}


def build_device_record(
    entity: EntityKind, row: Sequence[Any], headers: HeaderIndex | Sequence[Any]
) -> dict[str, Any]:
    """Persistence-ready dict for a validated phone / router / tablet row."""
    try:
        builder = _BUILDERS[entity]
    except KeyError:
        raise ValueError(f"not a device entity: {entity.value}") from None
    return builder(HeaderIndex.coerce(headers), row)
