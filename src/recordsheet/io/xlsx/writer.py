import os
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType
from typing import Any, Self

import xlsxwriter
import xlsxwriter.format
import xlsxwriter.worksheet

from ...conf import DEFAULT_AUTOFIT_POLICY, N_NCOLS_EXCEL_MAX, N_NROWS_EXCEL_MAX
from ...spec import EnumCellKind, SpecAutofitCellsPolicy, SpecCellFormat
from .util import (
    calculate_column_width,
    create_unique_sheet_name,
    estimate_width_len,
    sanitize_sheet_name,
)


class XlsxCell:
    """
    Cell handle buffering its format until the value is written.

    XlsxWriter writes value and format in one call, so style calls only update
    the pending :class:`SpecCellFormat` and ``set_*`` flushes the cell.
    """

    __slots__ = ("_sheet", "_row_idx", "_col_idx", "fmt")

    def __init__(self, sheet: "XlsxSheet", row_idx: int, col_idx: int) -> None:
        self._sheet = sheet
        self._row_idx = row_idx
        self._col_idx = col_idx
        self.fmt = SpecCellFormat()

    @property
    def sheet_name(self) -> str:
        return self._sheet.name

    @property
    def row_idx(self) -> int:
        return self._row_idx

    @property
    def col_idx(self) -> int:
        return self._col_idx

    def set_cell_style(self, style: SpecCellFormat) -> None:
        self.fmt = style

    def set_cell_format_properties(self, properties: Mapping[str, Any]) -> None:
        self.fmt = self.fmt.merge(SpecCellFormat.from_properties(properties))

    def set_blank(self) -> None:
        self._sheet.write_cell(self, EnumCellKind.BLANK, None)

    def set_string(self, value: str) -> None:
        self._sheet.write_cell(self, EnumCellKind.STRING, value)

    def set_boolean(self, value: bool) -> None:
        self._sheet.write_cell(self, EnumCellKind.BOOLEAN, value)

    def set_number(self, value: float) -> None:
        self._sheet.write_cell(self, EnumCellKind.NUMERIC, value)


class XlsxRow:
    __slots__ = ("_sheet", "row_idx")

    def __init__(self, sheet: "XlsxSheet", row_idx: int) -> None:
        self._sheet = sheet
        self.row_idx = row_idx

    def create_cell(self, col_idx: int) -> XlsxCell:
        if not 0 <= col_idx < N_NCOLS_EXCEL_MAX:
            raise ValueError(
                f"col_idx {col_idx} is outside the Excel column range "
                f"[0, {N_NCOLS_EXCEL_MAX})."
            )
        return XlsxCell(self._sheet, self.row_idx, col_idx)


class XlsxSheet:
    def __init__(
        self,
        workbook: "XlsxWorkbook",
        ws: xlsxwriter.worksheet.Worksheet,
        name: str,
    ) -> None:
        self._workbook = workbook
        self.ws = ws
        self._name = name
        self._width_lens: dict[int, int] = {}
        self.widths_autofit: dict[int, int] = {}

    @property
    def name(self) -> str:
        return self._name

    def create_row(self, row_idx: int) -> XlsxRow:
        if not 0 <= row_idx < N_NROWS_EXCEL_MAX:
            raise ValueError(
                f"row_idx {row_idx} is outside the Excel row range "
                f"[0, {N_NROWS_EXCEL_MAX})."
            )
        return XlsxRow(self, row_idx)

    def write_cell(self, cell: XlsxCell, kind: EnumCellKind, value: Any) -> None:
        cfg_fmt = self._workbook.create_format_cached(cell.fmt)
        n_row, n_col = cell.row_idx, cell.col_idx

        # Use write_* explicitly; generic write() would re-infer the type.
        if kind is EnumCellKind.BLANK:
            self.ws.write_blank(row=n_row, col=n_col, blank=None, cell_format=cfg_fmt)
        elif kind is EnumCellKind.STRING:
            self.ws.write_string(
                row=n_row, col=n_col, string=value, cell_format=cfg_fmt
            )
        elif kind is EnumCellKind.BOOLEAN:
            self.ws.write_boolean(
                row=n_row, col=n_col, boolean=value, cell_format=cfg_fmt
            )
        else:
            self.ws.write_number(
                row=n_row, col=n_col, number=value, cell_format=cfg_fmt
            )

        n_len = estimate_width_len(value, kind)
        if n_len > self._width_lens.get(n_col, 0):
            self._width_lens[n_col] = n_len

    def autosize_column(self, col_idx: int) -> None:
        n_width = calculate_column_width(
            self._width_lens.get(col_idx, 0), self._workbook.autofit_policy
        )
        self.ws.set_column(first_col=col_idx, last_col=col_idx, width=n_width)
        self.widths_autofit[col_idx] = n_width


class XlsxWorkbook:
    """
    Workbook collaborator writing an ``.xlsx`` file with ``xlsxwriter``.

    The workbook is created on initialization and closed via :meth:`close`
    or automatically when used in a ``with`` block::

        from recordsheet import get_export_function
        from recordsheet.io.xlsx import XlsxWorkbook

        with XlsxWorkbook("report.xlsx") as wb:
            get_export_function(Order)(orders, wb, "Orders")

    Parameters
    ----------
    file_out:
        Path to the output ``.xlsx`` file.
    if_constant_memory:
        If ``True`` (default), enables xlsxwriter's ``constant_memory`` mode.
        Rows must then be written in ascending order, which the materializer
        does.
    autofit_policy:
        Bounds and padding used when a column is auto-sized.

    Sheet names are sanitized and bumped (``name__2`` ...) when taken. Like the
    underlying ``xlsxwriter.Workbook`` this class is not thread-safe.
    """

    def __init__(
        self,
        file_out: os.PathLike[str] | str,
        *,
        if_constant_memory: bool = True,
        autofit_policy: SpecAutofitCellsPolicy = DEFAULT_AUTOFIT_POLICY,
    ):
        self.file_out = Path(file_out)
        self.wb = xlsxwriter.Workbook(
            self.file_out.as_posix(),
            {
                "constant_memory": if_constant_memory,
                # NaN/Inf reaching a numeric cell are written as Excel errors.
                "nan_inf_to_errors": True,
            },
        )
        self.autofit_policy = autofit_policy
        self._format_cache: dict[SpecCellFormat, xlsxwriter.format.Format] = {}
        self._existing_sheet_names: set[str] = set()
        self._sheets: list[XlsxSheet] = []

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def close(self) -> None:
        self.wb.close()

    @property
    def sheets(self) -> tuple[XlsxSheet, ...]:
        return tuple(self._sheets)

    def create_format_cached(
        self, spec: SpecCellFormat
    ) -> xlsxwriter.format.Format | None:
        dict_properties = spec.to_xlsxwriter()
        if not dict_properties:
            return None
        fmt = self._format_cache.get(spec)
        if fmt is None:
            fmt = self.wb.add_format(dict_properties)
            self._format_cache[spec] = fmt
        return fmt

    def create_sheet(self, name: str) -> XlsxSheet:
        c_sheet_name = create_unique_sheet_name(
            sanitize_sheet_name(name), self._existing_sheet_names
        )
        sheet = XlsxSheet(self, self.wb.add_worksheet(c_sheet_name), c_sheet_name)
        self._sheets.append(sheet)
        return sheet

    def create_cell_style(self, fmt: SpecCellFormat) -> SpecCellFormat:
        return fmt
