from __future__ import annotations

"""Operator-facing row error messages.

Every row error is ``"<N>行目: " + TEMPLATES[reason].format(label=..., value=...)``.
The wording is consumed verbatim by the import screen and existing fixtures,
so templates are keyed by reason and never assembled ad hoc in validators.
"""

__all__ = [
    "TEMPLATES",
    "row_prefix",
    "row_error",
]

TEMPLATES: dict[str, str] = {
    # 必須 / 重複
    "empty": "{label}が空です",
    "exists": "{label}「{value}」は既に存在します",
    "duplicate_in_file": "{label}「{value}」がファイル内で重複しています",
    "not_found": "{label}「{value}」は存在しません",
    # 書式
    "digits_hyphen": "{label}「{value}」は半角数字とハイフンのみ入力可能です",
    "digits_only": "{label}「{value}」は半角数字のみ入力可能です",
    "code_chars": "{label}「{value}」に不正な文字が含まれています。半角数字とハイフンのみ使用可能です。",
    "zip_format": "{label}「{value}」は「xxxxxxx(7桁)」または「xxx-xxxx」の形式のみ入力可能です",
    "tel_format": "{label}「{value}」は「xxxxxxxxxxx(11桁)」または「xxx-xxxx-xxxx」の形式のみ入力可能です",
    "phone_format": "{label}「{value}」は不正な形式です (11桁の数値 または xxx-xxxx-xxxx)",
    "sim_format": "{label}「{value}」は不正な形式です (11桁, xxx-xxxx-xxxx, または14桁)",
    "ip_format": "{label}「{value}」の形式が正しくありません (xxx.xxx.xxx.xxx形式、各1-3桁で入力してください)",
    "full_width": "{label}「{value}」に全角文字が含まれています。半角文字のみ使用可能です。",
    "full_width_bare": "{label}に全角文字が含まれています",
    # 選択肢
    "invalid_value": "{label}「{value}」は不正な値です",
    "invalid_choice": "{label}「{value}」は不正です。プルダウンから選択するか、正しい値を入力してください。({choices})",
    # 日付
    "date_format": "{label}は「YYYY-MM-DD」または「YYYY/MM/DD」形式で入力してください",
    "date_range": "{label}「{value}」は{min}から{max}までの日付を入力してください",
    "date_order": "入社年月日（{join}）は生年月日（{birth}）以降である必要があります",
    # 社員
    "code_missing": "{label}が未入力です",
    "name_symbols": "{label}「{value}」に数字または記号が含まれています",
    "email_full_width": "{label}に全角文字が含まれています",
    "email_format": "{label}の形式が正しくありません",
    "password_length": "パスワードは8文字以上16文字以下である必要があります",
    "password_digits": "パスワードは半角数字のみ使用可能です",
}


def row_prefix(row_number: int) -> str:
    return f"{row_number}行目: "


def row_error(row_number: int, reason: str, **fields: object) -> str:
    """Build one row error line.

    Raises KeyError for an unknown reason (programming error, not row data).
    """
    return row_prefix(row_number) + TEMPLATES[reason].format(**fields)
