# "Facts/Plans" describing how a record type is laid out on a sheet.

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, TypeAlias

from .errors import ConfigurationError

TypeFactoryRef: TypeAlias = str | Callable[[], Any]
TypeGetter: TypeAlias = Callable[[Any], Any]


class EnumCellKind(StrEnum):
    STRING = "string"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    BLANK = "blank"


################################################################################
# #region CellFormatSpecification
@dataclass(frozen=True, slots=True)
class SpecCellFormat:
    # 字段名严格对齐 XlsxWriter format properties keys
    font_name: str | None = None
    font_size: int | None = None
    font_color: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: int | None = None
    font_strikeout: bool | None = None
    font_script: int | None = None
    font_outline: bool | None = None
    font_shadow: bool | None = None

    align: str | None = None
    valign: str | None = None
    rotation: int | None = None
    text_wrap: bool | None = None
    shrink: bool | None = None
    indent: int | None = None
    reading_order: int | None = None
    text_justlast: bool | None = None
    center_across: bool | None = None

    num_format: str | None = None
    pattern: int | None = None
    bg_color: str | None = None
    fg_color: str | None = None

    border: int | None = None
    top: int | None = None
    bottom: int | None = None
    left: int | None = None
    right: int | None = None
    border_color: str | None = None
    top_color: str | None = None
    bottom_color: str | None = None
    left_color: str | None = None
    right_color: str | None = None
    diag_type: int | None = None
    diag_border: int | None = None
    diag_color: str | None = None

    locked: bool | None = None
    hidden: bool | None = None
    quote_prefix: bool | None = None

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "SpecCellFormat":
        set_unknown = set(properties) - set(cls.__dataclass_fields__)
        if set_unknown:
            raise ConfigurationError(
                f"Unknown cell format properties: {sorted(set_unknown)}. "
                f"Allowed properties: {sorted(cls.__dataclass_fields__)}"
            )
        return cls(**properties)

    def with_(self, **kwargs: Any) -> "SpecCellFormat":
        return replace(self, **kwargs)

    def merge(self, other: "SpecCellFormat") -> "SpecCellFormat":
        # 右侧非 None 覆盖左侧
        data = {
            k: (
                getattr(other, k) if getattr(other, k) is not None else getattr(self, k)
            )
            for k in self.__dataclass_fields__
        }
        return SpecCellFormat(**data)

    def to_xlsxwriter(self) -> dict[str, Any]:
        return {
            k: getattr(self, k)
            for k in self.__dataclass_fields__
            if getattr(self, k) is not None
        }


@dataclass(frozen=True, slots=True)
class SpecAutofitCellsPolicy:
    width_cell_min: int = 8
    width_cell_max: int = 60
    width_cell_padding: int = 2


# #endregion
################################################################################
# #region ColumnSpecification
@dataclass(frozen=True, slots=True)
class SpecColumn:
    """Export metadata declared on one record field via ``column(...)``."""

    name: str
    kind: EnumCellKind | str
    order: int = 0
    converter: TypeFactoryRef = "identity"
    header_styles: tuple[TypeFactoryRef, ...] = ("noop",)
    data_styles: tuple[TypeFactoryRef, ...] = ("noop",)
    auto_fit: bool = False
    getter: TypeGetter | str | None = None


@dataclass(frozen=True, slots=True)
class SpecFieldInfo:
    field_name: str
    owner: type
    column: SpecColumn
    getter: TypeGetter
    scan_idx: int  # discovery order, derived classes first


@dataclass(frozen=True, slots=True)
class SpecRecordInfo:
    record_type: type
    fields: tuple[SpecFieldInfo, ...]
    general_style: TypeFactoryRef | None = None


# #endregion
################################################################################
# #region CompiledSchema
@dataclass(frozen=True, slots=True)
class SpecCompiledColumn:
    position: int
    info: SpecFieldInfo
    converter: Any
    header_styles: tuple[Any, ...]
    data_styles: tuple[Any, ...]

    @property
    def name(self) -> str:
        return self.info.column.name

    @property
    def kind(self) -> EnumCellKind | str:
        return self.info.column.kind

    @property
    def auto_fit(self) -> bool:
        return self.info.column.auto_fit

    def read_value(self, record: Any) -> Any:
        return self.converter.convert(self.info.getter(record))


@dataclass(frozen=True, slots=True)
class SpecCompiledSchema:
    record_type: type
    columns: tuple[SpecCompiledColumn, ...]
    general_style: Any | None = None

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(_col.name for _col in self.columns)

    def create_positions_by_name(self) -> dict[str, int]:
        return {_col.name: _col.position for _col in self.columns}


@dataclass(frozen=True, slots=True)
class SpecCacheStats:
    hits: int
    misses: int
    size: int


# #endregion
################################################################################
