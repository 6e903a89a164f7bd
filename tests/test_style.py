from __future__ import annotations

import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from recordsheet import (  # noqa: E402
    ConfigurationError,
    DefaultCellStyle,
    SpecCellFormat,
    compose_cell_format_properties,
)
from recordsheet.backend import CellLike  # noqa: E402
from recordsheet.conf import DEFAULT_CELL_FORMATS  # noqa: E402
from recordsheet.io.memory import MemoryCell, MemoryWorkbook  # noqa: E402
from recordsheet.materializer import _apply_cell_style  # noqa: E402
from recordsheet.registry import STYLE_PROVIDER_REGISTRY  # noqa: E402


class FormatProps:
    def __init__(self, **properties: Any) -> None:
        self.properties = properties

    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return self.properties


class StripedRows:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        if cell.row_idx % 2 == 0:
            return {"bg_color": "#EEEEEE"}
        return {}


def test_compose_later_provider_wins() -> None:
    cell = MemoryCell("sheet", 1, 0)
    dict_props = compose_cell_format_properties(
        [FormatProps(font_size=1, bold=True), FormatProps(font_size=2)], cell
    )
    assert dict_props == {"font_size": 2, "bold": True}

    dict_props = compose_cell_format_properties(
        [FormatProps(font_size=2), FormatProps(font_size=1, bold=True)], cell
    )
    assert dict_props == {"font_size": 1, "bold": True}


def test_compose_empty_provider_list_yields_nothing() -> None:
    assert compose_cell_format_properties([], MemoryCell("sheet", 0, 0)) == {}


def test_compose_passes_target_cell_to_providers() -> None:
    providers = [StripedRows()]
    assert compose_cell_format_properties(providers, MemoryCell("s", 2, 0)) == {
        "bg_color": "#EEEEEE"
    }
    assert compose_cell_format_properties(providers, MemoryCell("s", 3, 0)) == {}


def test_apply_cell_style_layers_properties_over_base_style() -> None:
    wb = MemoryWorkbook()
    style_base = DefaultCellStyle().create_cell_style(wb)
    cell = MemoryCell("sheet", 0, 0)

    _apply_cell_style(
        cell, style_base, [FormatProps(bold=True), FormatProps(top=2)]
    )

    assert cell.fmt == SpecCellFormat(top=2, bottom=1, left=1, right=1, bold=True)


def test_apply_cell_style_without_base_or_properties_keeps_default() -> None:
    cell = MemoryCell("sheet", 0, 0)
    _apply_cell_style(cell, None, [FormatProps()])
    assert cell.fmt == SpecCellFormat()


def test_unknown_format_property_is_rejected() -> None:
    cell = MemoryCell("sheet", 0, 0)
    with pytest.raises(ConfigurationError, match="font_weight"):
        _apply_cell_style(cell, None, [FormatProps(font_weight=700)])


def test_cell_format_merge_and_export() -> None:
    fmt = DEFAULT_CELL_FORMATS["border"].merge(DEFAULT_CELL_FORMATS["decimal"])
    assert fmt.to_xlsxwriter() == {
        "num_format": "0.0000",
        "top": 1,
        "bottom": 1,
        "left": 1,
        "right": 1,
    }
    assert fmt.with_(num_format=None) == DEFAULT_CELL_FORMATS["border"]
    # 格式值对象可作为缓存键
    assert hash(fmt) == hash(SpecCellFormat.from_properties(fmt.to_xlsxwriter()))


def test_all_xlsxwriter_format_keys_are_accepted() -> None:
    dict_props = {
        "font_script": 1,
        "font_outline": True,
        "font_shadow": True,
        "reading_order": 2,
        "text_justlast": True,
        "center_across": True,
        "diag_type": 3,
        "diag_border": 1,
        "diag_color": "#FF0000",
        "quote_prefix": True,
    }
    cell = MemoryCell("sheet", 1, 0)
    _apply_cell_style(cell, None, [FormatProps(**dict_props)])
    assert cell.fmt.to_xlsxwriter() == dict_props


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("text", {"align": "left", "valign": "vcenter"}),
        ("scientific", {"num_format": "0.00E+0"}),
    ],
)
def test_builtin_style_providers_by_key(key: str, expected: dict[str, Any]) -> None:
    provider = STYLE_PROVIDER_REGISTRY.get(key)()
    cell = MemoryCell("sheet", 1, 0)
    assert compose_cell_format_properties([provider], cell) == expected
