from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""Normalized records produced by the office and employee row validators.

Device rows do not get a record from their validator; see
``asset_import.services.device_records`` for the caller-side assembly.
"""

__all__ = [
    "AddressRecord",
    "EmployeeRecord",
]


@dataclass(frozen=True)
class AddressRecord:
    """One office / address row ready for persistence."""
    address_code: str  # 事業所コード
    office_name: str  # 事業所名
    area: str  # エリアコード
    no: str  # No.
    zip_code: str  # 〒 (xxx-xxxx に整形済)
    address: str  # 住所
    tel: str
    fax: str
    division: str  # 事業部
    accounting_code: str  # 経理コード
    main_person: str  # 主担当
    branch_number: str  # 枝番
    special_note: str  # ※
    notes: str  # 備考
    label_name: str  # 宛名ラベル用
    label_zip: str  # 宛名ラベル用〒 (整形済)
    label_address: str  # 宛名ラベル用住所
    attention_note: str  # 注意書き
    type: str = ""  # 区分 (予約: 現状は常に空)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EmployeeRecord:
    """One employee row ready for upsert."""
    code: str  # 社員コード
    name: str  # "苗字 名前" (各パーツ内の空白は除去)
    name_kana: str
    gender: str
    birth_date: str  # YYYY-MM-DD or ''
    age: int
    area_code: str
    address_code: str  # 事業所コード
    join_date: str  # YYYY-MM-DD or ''
    years_of_service: int
    months_of_service: int  # 勤続端数月数
    role: str  # admin / user
    password: str
    email: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
