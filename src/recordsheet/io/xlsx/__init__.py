from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..._optional_deps import import_optional_attr

__all__ = [
    "XlsxWorkbook",
    "XlsxSheet",
    "XlsxCell",
]

if TYPE_CHECKING:
    from .writer import XlsxCell, XlsxSheet, XlsxWorkbook


def __getattr__(name: str) -> Any:
    if name in {"XlsxWorkbook", "XlsxSheet", "XlsxCell"}:
        return import_optional_attr(
            module_name=".writer",
            attr_name=name,
            package=__name__,
            feature="recordsheet.io.xlsx",
            extras=("xlsx",),
            required_modules=("xlsxwriter",),
        )
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
