from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version
from types import ModuleType
from typing import TYPE_CHECKING, Any

from .cache import SchemaCache, clear_cache, resolve_schema
from .converter import (
    FloatValueConverter,
    IdentityValueConverter,
    StringValueConverter,
    ValueConverter,
)
from .errors import ConfigurationError, InstantiationError, RecordSheetError
from .export import SheetExporter, export_records, get_export_function
from .metadata import column, extract_record_info, general_style
from .registry import register_converter, register_style_provider
from .spec import EnumCellKind, SpecCellFormat, SpecCompiledSchema
from .style import (
    CellFormatPropertiesProvider,
    CellStyleProvider,
    DefaultCellFormatProperties,
    DefaultCellStyle,
    compose_cell_format_properties,
)

__all__ = [
    "__version__",
    "CellFormatPropertiesProvider",
    "CellStyleProvider",
    "ConfigurationError",
    "DefaultCellFormatProperties",
    "DefaultCellStyle",
    "EnumCellKind",
    "FloatValueConverter",
    "IdentityValueConverter",
    "InstantiationError",
    "RecordSheetError",
    "SchemaCache",
    "SheetExporter",
    "SpecCellFormat",
    "SpecCompiledSchema",
    "StringValueConverter",
    "ValueConverter",
    "clear_cache",
    "column",
    "compose_cell_format_properties",
    "export_records",
    "extract_record_info",
    "general_style",
    "get_export_function",
    "register_converter",
    "register_style_provider",
    "resolve_schema",
    "io_memory",
    "io_xlsx",
]

try:
    __version__ = version("recordsheet")
except PackageNotFoundError:
    __version__ = "0.0.0"

if TYPE_CHECKING:
    import recordsheet.io.memory as io_memory
    import recordsheet.io.xlsx as io_xlsx

_ALIAS_MODULES: dict[str, str] = {
    "io_memory": "recordsheet.io.memory",
    "io_xlsx": "recordsheet.io.xlsx",
}


def __getattr__(name: str) -> Any:
    module_name = _ALIAS_MODULES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_loaded: ModuleType = import_module(module_name)
    globals()[name] = module_loaded
    return module_loaded


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
