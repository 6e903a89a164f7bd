from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from .spec import SpecAutofitCellsPolicy, SpecCellFormat

N_NROWS_EXCEL_MAX = 1_048_576
N_NCOLS_EXCEL_MAX = 16_384
N_LEN_EXCEL_SHEET_NAME_MAX = 31
TUP_EXCEL_ILLEGAL = ("*", ":", "?", "/", "\\", "[", "]")

# Declarative metadata locations on record types.
KEY_FIELD_METADATA_COLUMN = "recordsheet.column"
ATTR_GENERAL_STYLE = "__recordsheet_general_style__"

# Registry keys of the built-in strategies.
KEY_CONVERTER_DEFAULT = "identity"
KEY_STYLE_PROVIDER_DEFAULT = "noop"
KEY_GENERAL_STYLE_DEFAULT = "thin_border"

LIT_FMT_KEYS = Literal["border", "text", "integer", "decimal", "scientific", "header"]

DEFAULT_CELL_FORMATS: Mapping[LIT_FMT_KEYS, SpecCellFormat] = MappingProxyType(
    {
        "border": SpecCellFormat(top=1, bottom=1, left=1, right=1),
        "text": SpecCellFormat(align="left", valign="vcenter"),
        "header": SpecCellFormat(bold=True, align="center", valign="vcenter"),
        "integer": SpecCellFormat(num_format="0"),
        "decimal": SpecCellFormat(num_format="0.0000"),
        "scientific": SpecCellFormat(num_format="0.00E+0"),
    }
)

DEFAULT_AUTOFIT_POLICY = SpecAutofitCellsPolicy()
