"""In-memory workbook keeping every cell value, kind and final format.

Useful to preview an export, to assert on it in tests, or to hand it over to
polars via :meth:`MemorySheet.to_polars`.
"""

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from .._optional_deps import import_optional_module
from ..spec import EnumCellKind, SpecCellFormat

if TYPE_CHECKING:
    import polars as pl


class MemoryCell:
    __slots__ = ("_sheet_name", "_row_idx", "_col_idx", "fmt", "kind", "value")

    def __init__(self, sheet_name: str, row_idx: int, col_idx: int) -> None:
        self._sheet_name = sheet_name
        self._row_idx = row_idx
        self._col_idx = col_idx
        self.fmt = SpecCellFormat()
        self.kind = EnumCellKind.BLANK
        self.value: Any = None

    @property
    def sheet_name(self) -> str:
        return self._sheet_name

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
        self.kind, self.value = EnumCellKind.BLANK, None

    def set_string(self, value: str) -> None:
        self.kind, self.value = EnumCellKind.STRING, value

    def set_boolean(self, value: bool) -> None:
        self.kind, self.value = EnumCellKind.BOOLEAN, value

    def set_number(self, value: float) -> None:
        self.kind, self.value = EnumCellKind.NUMERIC, value

    def __repr__(self) -> str:
        return (
            f"MemoryCell({self._row_idx}, {self._col_idx}, "
            f"kind={self.kind.value!r}, value={self.value!r})"
        )


class MemoryRow:
    def __init__(self, sheet_name: str, row_idx: int) -> None:
        self.sheet_name = sheet_name
        self.row_idx = row_idx
        self.cells: dict[int, MemoryCell] = {}

    def create_cell(self, col_idx: int) -> MemoryCell:
        if col_idx < 0:
            raise ValueError(f"col_idx must be >= 0, got {col_idx}")
        cell = MemoryCell(self.sheet_name, self.row_idx, col_idx)
        self.cells[col_idx] = cell
        return cell

    def get_cell(self, col_idx: int) -> MemoryCell | None:
        return self.cells.get(col_idx)

    @property
    def values(self) -> list[Any]:
        if not self.cells:
            return []
        return [
            None if (_cell := self.cells.get(_idx)) is None else _cell.value
            for _idx in range(max(self.cells) + 1)
        ]


class MemorySheet:
    def __init__(self, name: str) -> None:
        self._name = name
        self._rows: dict[int, MemoryRow] = {}
        self.autosized_columns: list[int] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def height(self) -> int:
        return 0 if not self._rows else max(self._rows) + 1

    def create_row(self, row_idx: int) -> MemoryRow:
        if row_idx < 0:
            raise ValueError(f"row_idx must be >= 0, got {row_idx}")
        row = MemoryRow(self._name, row_idx)
        self._rows[row_idx] = row
        return row

    def autosize_column(self, col_idx: int) -> None:
        self.autosized_columns.append(col_idx)

    def get_row(self, row_idx: int) -> MemoryRow | None:
        return self._rows.get(row_idx)

    def get_cell(self, row_idx: int, col_idx: int) -> MemoryCell | None:
        row = self._rows.get(row_idx)
        return None if row is None else row.get_cell(col_idx)

    def iter_rows(self) -> Iterator[MemoryRow]:
        for _row_idx in sorted(self._rows):
            yield self._rows[_row_idx]

    def to_polars(self) -> "pl.DataFrame":
        """
        Convert the sheet to a DataFrame, using row 0 as column names.

        Column dtypes follow the kind of the first non-blank data cell:
        STRING -> ``pl.String``, NUMERIC -> ``pl.Float64``, BOOLEAN ->
        ``pl.Boolean``; all-blank columns become ``pl.Null``.
        """
        pl = import_optional_module(
            module_name="polars",
            package=None,
            feature="recordsheet.io.memory.MemorySheet.to_polars",
            extras=("polars",),
            required_modules=("polars",),
        )
        dict_dtypes = {
            EnumCellKind.STRING: pl.String,
            EnumCellKind.NUMERIC: pl.Float64,
            EnumCellKind.BOOLEAN: pl.Boolean,
        }

        row_header = self._rows.get(0)
        if row_header is None or not row_header.cells:
            return pl.DataFrame()

        n_width = max(row_header.cells) + 1
        l_col_names = [
            "" if (_cell := row_header.get_cell(_idx)) is None else str(_cell.value)
            for _idx in range(n_width)
        ]
        l_col_values: list[list[Any]] = [[] for _ in range(n_width)]
        l_col_dtypes: list[Any] = [pl.Null] * n_width
        for _row_idx in range(1, self.height):
            row_ = self._rows.get(_row_idx)
            for _col_idx in range(n_width):
                cell_ = None if row_ is None else row_.get_cell(_col_idx)
                if cell_ is None or cell_.kind is EnumCellKind.BLANK:
                    l_col_values[_col_idx].append(None)
                    continue
                if l_col_dtypes[_col_idx] is pl.Null:
                    l_col_dtypes[_col_idx] = dict_dtypes[cell_.kind]
                l_col_values[_col_idx].append(cell_.value)

        return pl.DataFrame(
            [
                pl.Series(name=_name, values=_values, dtype=_dtype)
                for _name, _values, _dtype in zip(
                    l_col_names, l_col_values, l_col_dtypes, strict=True
                )
            ]
        )


class MemoryWorkbook:
    """
    Workbook collaborator backed by Python dicts.

    Sheet names must be unique; styles are plain :class:`SpecCellFormat`
    values. Not thread-safe.
    """

    def __init__(self) -> None:
        self._sheets: dict[str, MemorySheet] = {}

    def create_sheet(self, name: str) -> MemorySheet:
        if name in self._sheets:
            raise ValueError(f"Sheet already exists: {name!r}")
        sheet = MemorySheet(name)
        self._sheets[name] = sheet
        return sheet

    def create_cell_style(self, fmt: SpecCellFormat) -> SpecCellFormat:
        return fmt

    def get_sheet(self, name: str) -> MemorySheet:
        try:
            return self._sheets[name]
        except KeyError as e:
            raise KeyError(f"Sheet not found: {name!r}") from e

    def remove_sheet(self, name: str) -> None:
        self.get_sheet(name)
        del self._sheets[name]

    @property
    def sheet_names(self) -> list[str]:
        return list(self._sheets)
