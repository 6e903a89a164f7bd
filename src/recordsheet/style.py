from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .backend import CellLike, WorkbookLike
from .conf import DEFAULT_CELL_FORMATS


class CellFormatPropertiesProvider(Protocol):
    """
    Per-column styling strategy.

    Called once per cell with the target cell, so the returned properties may
    depend on its position. Property names are XlsxWriter format keys, i.e.
    the fields of :class:`~recordsheet.spec.SpecCellFormat`; anything else
    raises ``ConfigurationError`` when applied.
    """

    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]: ...


class CellStyleProvider(Protocol):
    """Type-level base style, created once per sheet from the workbook."""

    def create_cell_style(self, workbook: WorkbookLike) -> Any: ...


class DefaultCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return {}


class HeaderCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return DEFAULT_CELL_FORMATS["header"].to_xlsxwriter()


class TextCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return DEFAULT_CELL_FORMATS["text"].to_xlsxwriter()


class IntegerCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return DEFAULT_CELL_FORMATS["integer"].to_xlsxwriter()


class DecimalCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return DEFAULT_CELL_FORMATS["decimal"].to_xlsxwriter()


class ScientificCellFormatProperties:
    def create_cell_format_properties(self, cell: CellLike) -> Mapping[str, Any]:
        return DEFAULT_CELL_FORMATS["scientific"].to_xlsxwriter()


class DefaultCellStyle:
    def create_cell_style(self, workbook: WorkbookLike) -> Any:
        return workbook.create_cell_style(DEFAULT_CELL_FORMATS["border"])


def compose_cell_format_properties(
    providers: Sequence[CellFormatPropertiesProvider], cell: CellLike
) -> dict[str, Any]:
    """
    Merge the properties of ``providers`` for ``cell``.

    Merge contract:
    - Providers are called in order, each with the same target cell.
    - If several providers set the same property, the later provider wins.
    - An empty provider list yields an empty mapping.
    """
    dict_properties: dict[str, Any] = {}
    for _provider in providers:
        dict_properties.update(_provider.create_cell_format_properties(cell))
    return dict_properties
