import decimal
import numbers
from collections.abc import Iterable, Sequence
from typing import Any

from .backend import CellLike, SheetLike, WorkbookLike
from .errors import ConfigurationError
from .spec import EnumCellKind, SpecCompiledColumn, SpecCompiledSchema
from .style import CellFormatPropertiesProvider, compose_cell_format_properties


def _apply_cell_style(
    cell: CellLike,
    style_base: Any | None,
    providers: Sequence[CellFormatPropertiesProvider],
) -> None:
    if style_base is not None:
        cell.set_cell_style(style_base)
    if dict_properties := compose_cell_format_properties(providers, cell):
        cell.set_cell_format_properties(dict_properties)


def write_cell_value(cell: CellLike, column: SpecCompiledColumn, value: Any) -> None:
    """
    Write a converted value through the accessor matching the column kind.

    Raises:
        ConfigurationError: If the column kind is not a known cell kind.
        TypeError: If ``value`` does not match the column kind.
    """
    if value is None:
        cell.set_blank()
        return

    kind = column.kind
    if kind == EnumCellKind.STRING:
        if not isinstance(value, str):
            raise _create_kind_mismatch_error(cell, column, value, "str")
        cell.set_string(value)
    elif kind == EnumCellKind.BOOLEAN:
        if not isinstance(value, bool):
            raise _create_kind_mismatch_error(cell, column, value, "bool")
        cell.set_boolean(value)
    elif kind == EnumCellKind.NUMERIC:
        if isinstance(value, bool) or not isinstance(
            value, (numbers.Real, decimal.Decimal)
        ):
            raise _create_kind_mismatch_error(cell, column, value, "real number")
        cell.set_number(float(value))
    elif kind == EnumCellKind.BLANK:
        cell.set_blank()
    else:
        raise ConfigurationError(
            f"Unsupported cell kind \"{kind}\" of column \"{column.name}\""
        )


def _create_kind_mismatch_error(
    cell: CellLike, column: SpecCompiledColumn, value: Any, expected: str
) -> TypeError:
    return TypeError(
        f"Column \"{column.name}\" ({column.kind}) expects a {expected} value, "
        f"got {type(value).__qualname__} at row {cell.row_idx}: {value!r}"
    )


def materialize_sheet(
    schema: SpecCompiledSchema,
    records: Iterable[Any],
    workbook: WorkbookLike,
    sheet_name: str,
) -> SheetLike:
    """
    Write a header row and one data row per record onto a new sheet.

    Row 0 holds the column names; record ``i`` lands on row ``i + 1``. Each cell
    gets the schema's base style first, then the composed header or data
    properties of its column. Columns declared with ``auto_fit`` are auto-sized
    once every row is written.

    The workbook is not locked here: concurrent calls against the same
    workbook must be serialized by the caller. On failure the partially written
    sheet is left to the caller.
    """
    ws = workbook.create_sheet(sheet_name)
    cfg_style_base = None
    if schema.general_style is not None:
        cfg_style_base = schema.general_style.create_cell_style(workbook)

    cfg_row_header = ws.create_row(0)
    for _column in schema.columns:
        cfg_cell_ = cfg_row_header.create_cell(_column.position)
        _apply_cell_style(cfg_cell_, cfg_style_base, _column.header_styles)
        cfg_cell_.set_string(_column.name)

    for _row_idx, _record in enumerate(records, start=1):
        cfg_row_ = ws.create_row(_row_idx)
        for _column in schema.columns:
            cfg_cell_ = cfg_row_.create_cell(_column.position)
            _apply_cell_style(cfg_cell_, cfg_style_base, _column.data_styles)
            write_cell_value(cfg_cell_, _column, _column.read_value(_record))

    for _column in schema.columns:
        if _column.auto_fit:
            ws.autosize_column(_column.position)

    return ws
