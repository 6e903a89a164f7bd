from __future__ import annotations

import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

pytest.importorskip("xlsxwriter")
openpyxl = pytest.importorskip("openpyxl")

from recordsheet import (  # noqa: E402
    EnumCellKind,
    clear_cache,
    column,
    general_style,
    get_export_function,
)
from recordsheet.io.xlsx import XlsxWorkbook  # noqa: E402
from recordsheet.io.xlsx.util import (  # noqa: E402
    calculate_column_width,
    create_unique_sheet_name,
    estimate_width_len,
    sanitize_sheet_name,
)
from recordsheet.spec import SpecAutofitCellsPolicy  # noqa: E402


@general_style()
@dataclass
class Order:
    code: str = column("code", EnumCellKind.STRING, order=1, auto_fit=True)
    amount: float | None = column(
        "amount", EnumCellKind.NUMERIC, order=2, data_styles="decimal"
    )
    paid: bool = column("paid", EnumCellKind.BOOLEAN, order=3)
    note: str | None = column(
        "note", EnumCellKind.STRING, order=4, header_styles="header", auto_fit=True
    )


@pytest.fixture(autouse=True)
def _isolated_default_cache() -> Iterator[None]:
    clear_cache()
    yield
    clear_cache()


def test_xlsx_workbook_writes_readable_file(tmp_path: Path) -> None:
    path_out = tmp_path / "orders.xlsx"
    l_orders = [
        Order("A-1", 12.5, True, "first"),
        Order("A-2", None, False, None),
        Order("A-3", -3.0, True, "订单备注"),
    ]

    with XlsxWorkbook(path_out) as wb:
        sheet = get_export_function(Order)(l_orders, wb, "Orders")

    assert path_out.exists()
    assert sheet.name == "Orders"
    assert sorted(sheet.widths_autofit) == [0, 3]

    wb_read = openpyxl.load_workbook(path_out)
    ws = wb_read["Orders"]
    assert [_cell.value for _cell in ws[1]] == ["code", "amount", "paid", "note"]
    assert ws["A2"].value == "A-1"
    assert ws["B2"].value == pytest.approx(12.5)
    assert ws["C2"].value is True
    assert ws["D2"].value == "first"
    assert ws["B3"].value is None
    assert ws["C3"].value is False
    assert ws["D3"].value is None
    assert ws["B4"].value == pytest.approx(-3.0)
    assert ws["D4"].value == "订单备注"
    assert ws.max_row == 4

    assert ws["D1"].font.bold
    assert not ws["A1"].font.bold
    assert ws["B2"].number_format == "0.0000"
    for _ref in ("A1", "D1", "A2", "C4"):
        assert ws[_ref].border.top.style == "thin"
        assert ws[_ref].border.left.style == "thin"


def test_xlsx_workbook_writes_nan_as_error(tmp_path: Path) -> None:
    path_out = tmp_path / "nan.xlsx"
    with XlsxWorkbook(path_out) as wb:
        get_export_function(Order)([Order("x", float("nan"), False, None)], wb, "s")

    ws = openpyxl.load_workbook(path_out)["s"]
    assert str(ws["B2"].value).lstrip("=") == "#NUM!"


def test_xlsx_workbook_sanitizes_and_bumps_sheet_names(tmp_path: Path) -> None:
    with XlsxWorkbook(tmp_path / "names.xlsx") as wb:
        sheet_a = wb.create_sheet("a/b")
        sheet_b = wb.create_sheet("a/b")
        sheet_c = wb.create_sheet("x" * 40)
        sheet_d = wb.create_sheet("   ")

    assert sheet_a.name == "a_b"
    assert sheet_b.name == "a_b__2"
    assert sheet_c.name == "x" * 31
    assert sheet_d.name == "Sheet"
    assert [_sheet.name for _sheet in wb.sheets] == ["a_b", "a_b__2", "x" * 31, "Sheet"]


def test_xlsx_workbook_rejects_out_of_range_indices(tmp_path: Path) -> None:
    with XlsxWorkbook(tmp_path / "range.xlsx") as wb:
        sheet = wb.create_sheet("s")
        with pytest.raises(ValueError, match="row range"):
            sheet.create_row(-1)
        with pytest.raises(ValueError, match="column range"):
            sheet.create_row(0).create_cell(16_384)


def test_xlsx_workbook_reuses_formats(tmp_path: Path) -> None:
    with XlsxWorkbook(tmp_path / "fmt.xlsx") as wb:
        get_export_function(Order)(
            [Order(str(_i), float(_i), True, "n") for _i in range(50)], wb, "s"
        )
        # border, border+decimal, border+header
        assert len(wb._format_cache) == 3


def test_sheet_name_helpers() -> None:
    assert sanitize_sheet_name("Q1: [draft]?") == "Q1_ _draft__"
    set_names = {"data"}
    assert create_unique_sheet_name("data", set_names) == "data__2"
    assert create_unique_sheet_name("data", set_names) == "data__3"
    assert create_unique_sheet_name("other", set_names) == "other"
    assert set_names == {"data", "data__2", "data__3", "other"}


def test_width_helpers() -> None:
    assert estimate_width_len(None, EnumCellKind.STRING) == 0
    assert estimate_width_len(True, EnumCellKind.BOOLEAN) == 4
    assert estimate_width_len(False, EnumCellKind.BOOLEAN) == 5
    assert estimate_width_len(12.0, EnumCellKind.NUMERIC) == 2
    assert estimate_width_len(1.25, EnumCellKind.NUMERIC) == 4
    assert estimate_width_len("abc", EnumCellKind.STRING) == 3
    assert estimate_width_len("中文", EnumCellKind.STRING) == 3

    policy = SpecAutofitCellsPolicy(width_cell_min=8, width_cell_max=20)
    assert calculate_column_width(0, policy) == 8
    assert calculate_column_width(10, policy) == 12
    assert calculate_column_width(100, policy) == 20
