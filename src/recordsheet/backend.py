"""Workbook capabilities consumed by the sheet materializer.

The materializer only talks to these protocols; concrete document models live
in :mod:`recordsheet.io`. Implementations are not expected to be thread-safe:
callers must serialize concurrent materializations that target the same
workbook instance.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from .spec import SpecCellFormat


class CellLike(Protocol):
    """
    One cell of a sheet.

    Style calls happen before the value is set. ``set_cell_style`` replaces
    the current style with a style object created by the workbook, while
    ``set_cell_format_properties`` derives a new style from the current one with
    the given properties overridden.
    """

    @property
    def sheet_name(self) -> str: ...

    @property
    def row_idx(self) -> int: ...

    @property
    def col_idx(self) -> int: ...

    def set_cell_style(self, style: Any) -> None: ...

    def set_cell_format_properties(self, properties: Mapping[str, Any]) -> None: ...

    def set_blank(self) -> None: ...

    def set_string(self, value: str) -> None: ...

    def set_boolean(self, value: bool) -> None: ...

    def set_number(self, value: float) -> None: ...


class RowLike(Protocol):
    def create_cell(self, col_idx: int) -> CellLike: ...


class SheetLike(Protocol):
    @property
    def name(self) -> str: ...

    def create_row(self, row_idx: int) -> RowLike: ...

    def autosize_column(self, col_idx: int) -> None: ...


class WorkbookLike(Protocol):
    def create_sheet(self, name: str) -> SheetLike: ...

    def create_cell_style(self, fmt: SpecCellFormat) -> Any: ...
