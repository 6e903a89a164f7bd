from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .backend import SheetLike, WorkbookLike
from .cache import clear_cache, resolve_schema
from .errors import ConfigurationError
from .materializer import materialize_sheet
from .spec import SpecCompiledSchema

__all__ = ["SheetExporter", "clear_cache", "export_records", "get_export_function"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SheetExporter(Generic[T]):
    """
    Export function bound to the compiled schema of one record type.

    Calling it creates a sheet named ``sheet_name`` in ``workbook`` and fills it
    from ``records``. Workbooks are not thread-safe; serialize calls that share
    one workbook.
    """

    schema: SpecCompiledSchema

    def __call__(
        self, records: Iterable[T], workbook: WorkbookLike, sheet_name: str
    ) -> SheetLike:
        return materialize_sheet(self.schema, records, workbook, sheet_name)


def get_export_function(record_type: type[T]) -> SheetExporter[T]:
    """
    Return the export function of ``record_type``.

    The schema is compiled on first use and cached for the life of the process
    (see :func:`clear_cache`), so later calls reuse the same column layout.

    Raises:
        ConfigurationError: If the record type declaration is invalid.
        InstantiationError: If a converter or style provider can't be created.
    """
    return SheetExporter(schema=resolve_schema(record_type))


def export_records(
    records: Iterable[Any],
    workbook: WorkbookLike,
    sheet_name: str,
    *,
    record_type: type | None = None,
) -> SheetLike:
    """Export ``records``, inferring the record type from the first record."""
    l_records = list(records)
    if record_type is None:
        if not l_records:
            raise ConfigurationError(
                "record_type is required when exporting an empty record list"
            )
        record_type = type(l_records[0])
    return get_export_function(record_type)(l_records, workbook, sheet_name)
