# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from asset_import.validation.address_validator import ADDRESS_HEADERS
from asset_import.validation.device_validator import PHONE_HEADERS, ROUTER_HEADERS, TABLET_HEADERS


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """templates:
  address:
    header_rows: 2
    commit_mode: all_or_nothing
  router:
    header_rows: 1
    commit_mode: skip_invalid
lookups:
  router:
    existing:
      sim_numbers: {table: routers, column: sim_number, normalize: phone}
      terminal_codes: {table: routers, column: terminal_code}
    references:
      employee_codes: {table: employees, column: code}
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def no_db(monkeypatch) -> None:
    """Force mock mode (no PostgreSQL connection attempt)."""
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


def make_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows (no pandas header/index) into an .xlsx workbook."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def workbook_factory(temp_workdir: Path) -> Callable[..., Path]:
    def _factory(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return make_workbook(temp_workdir / "data" / name, sheets)
    return _factory


@pytest.fixture()
def address_headers() -> list[str]:
    return list(ADDRESS_HEADERS)


@pytest.fixture()
def phone_headers() -> list[str]:
    return list(PHONE_HEADERS)


@pytest.fixture()
def router_headers() -> list[str]:
    return list(ROUTER_HEADERS)


@pytest.fixture()
def tablet_headers() -> list[str]:
    return list(TABLET_HEADERS)


@pytest.fixture()
def valid_address_row() -> list[object]:
    return [
        "001", "Test Office", "100", "1", "123-4567", "Tokyo", "03-1234-5678", "03-1234-5678",
        "Div1", "1000", "100", "Person", "1", "Note", "Memo", "Label", "123-4567", "Addr", "Attn",
    ]
