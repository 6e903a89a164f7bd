from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import Any

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from recordsheet import (  # noqa: E402
    ConfigurationError,
    EnumCellKind,
    SpecCellFormat,
    column,
    extract_record_info,
    general_style,
)
from recordsheet.backend import CellLike  # noqa: E402
from recordsheet.compiler import compile_schema  # noqa: E402
from recordsheet.io.memory import MemoryWorkbook  # noqa: E402
from recordsheet.materializer import materialize_sheet  # noqa: E402


class RedFont:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return {"font_color": "red"}


@dataclass
class ClassNullable:
    text: str | None = column(
        "text", EnumCellKind.STRING, auto_fit=True, default=None
    )
    number: float | None = column("number", EnumCellKind.NUMERIC, default=None)
    flag: bool | None = column(
        "flag", EnumCellKind.BOOLEAN, auto_fit=True, default=None
    )
    empty: str | None = column("empty", EnumCellKind.BLANK, default=None)


@general_style()
@dataclass
class ClassStyled:
    value: float = column(
        "value",
        EnumCellKind.NUMERIC,
        header_styles=("header", RedFont),
        data_styles="decimal",
    )


def _materialize(record_type: type, records: list[Any]) -> Any:
    wb = MemoryWorkbook()
    schema = compile_schema(extract_record_info(record_type))
    return materialize_sheet(schema, records, wb, "sheet")


def test_null_values_render_blank_cells_for_every_kind() -> None:
    sheet = _materialize(ClassNullable, [ClassNullable(None, None, None, None)])

    assert sheet.get_row(0).values == ["text", "number", "flag", "empty"]
    for _col_idx in range(4):
        cell_ = sheet.get_cell(1, _col_idx)
        assert cell_.kind is EnumCellKind.BLANK
        assert cell_.value is None


def test_values_are_written_with_the_column_kind() -> None:
    sheet = _materialize(ClassNullable, [ClassNullable("a", 3, False, "ignored")])

    l_cells = [sheet.get_cell(1, _idx) for _idx in range(4)]
    assert [_cell.kind for _cell in l_cells] == [
        EnumCellKind.STRING,
        EnumCellKind.NUMERIC,
        EnumCellKind.BOOLEAN,
        EnumCellKind.BLANK,
    ]
    assert l_cells[1].value == 3.0
    assert isinstance(l_cells[1].value, float)
    assert l_cells[2].value is False


def test_auto_fit_only_targets_flagged_columns() -> None:
    sheet = _materialize(ClassNullable, [ClassNullable("a", 1.0, True, None)])
    assert sheet.autosized_columns == [0, 2]


def test_empty_records_still_write_header() -> None:
    sheet = _materialize(ClassNullable, [])
    assert sheet.height == 1
    assert sheet.get_row(0).values == ["text", "number", "flag", "empty"]
    assert sheet.autosized_columns == [0, 2]


@pytest.mark.parametrize(
    ("record", "pattern"),
    [
        (ClassNullable(text=12), 'Column "text"'),
        (ClassNullable(number="1.5"), 'Column "number"'),
        (ClassNullable(number=True), 'Column "number"'),
        (ClassNullable(flag=1), 'Column "flag"'),
    ],
)
def test_kind_mismatch_raises_type_error(record: ClassNullable, pattern: str) -> None:
    with pytest.raises(TypeError, match=pattern):
        _materialize(ClassNullable, [record])


def test_unknown_kind_fails_when_written() -> None:
    @dataclass
    class ClassUnknownKind:
        value: str = column("value", "percent")

    with pytest.raises(ConfigurationError, match='Unsupported cell kind "percent"'):
        _materialize(ClassUnknownKind, [ClassUnknownKind("x")])


def test_header_and_data_styles_layer_over_general_style() -> None:
    sheet = _materialize(ClassStyled, [ClassStyled(1.25)])
    fmt_border = SpecCellFormat(top=1, bottom=1, left=1, right=1)

    cell_header = sheet.get_cell(0, 0)
    assert cell_header.value == "value"
    assert cell_header.fmt == fmt_border.with_(
        bold=True, align="center", valign="vcenter", font_color="red"
    )

    cell_data = sheet.get_cell(1, 0)
    assert cell_data.value == 1.25
    assert cell_data.fmt == fmt_border.with_(num_format="0.0000")


def test_rows_follow_record_order() -> None:
    l_records = [ClassNullable(f"r{_i}", float(_i), _i % 2 == 0) for _i in range(5)]
    sheet = _materialize(ClassNullable, l_records)

    assert sheet.height == 6
    for _i, _row in enumerate(sheet.iter_rows()):
        if _i == 0:
            continue
        assert _row.values[:3] == [f"r{_i - 1}", float(_i - 1), (_i - 1) % 2 == 0]


def test_undecorated_subclass_gets_no_general_style() -> None:
    @dataclass
    class ClassStyledChild(ClassStyled):
        pass

    sheet = _materialize(ClassStyledChild, [ClassStyledChild(2.5)])
    assert sheet.get_cell(0, 0).fmt == SpecCellFormat(
        bold=True, align="center", valign="vcenter", font_color="red"
    )
    assert sheet.get_cell(1, 0).fmt == SpecCellFormat(num_format="0.0000")


def test_numeric_accepts_decimal_and_rejects_complex() -> None:
    sheet = _materialize(ClassNullable, [ClassNullable(number=Decimal("1.25"))])
    cell = sheet.get_cell(1, 1)
    assert cell.kind is EnumCellKind.NUMERIC
    assert cell.value == 1.25
    assert isinstance(cell.value, float)

    sheet = _materialize(ClassNullable, [ClassNullable(number=Fraction(1, 4))])
    assert sheet.get_cell(1, 1).value == 0.25

    with pytest.raises(TypeError, match='Column "number"'):
        _materialize(ClassNullable, [ClassNullable(number=1 + 2j)])
