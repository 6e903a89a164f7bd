import math
from typing import Any

from ...conf import N_LEN_EXCEL_SHEET_NAME_MAX, TUP_EXCEL_ILLEGAL
from ...spec import EnumCellKind, SpecAutofitCellsPolicy

################################################################################
# #region SheetNormalization


def sanitize_sheet_name(name: str, *, replace_to: str = "_") -> str:
    for ch in TUP_EXCEL_ILLEGAL:
        name = name.replace(ch, replace_to)
    name = name.strip() or "Sheet"
    return name[:N_LEN_EXCEL_SHEET_NAME_MAX]


def create_unique_sheet_name(name: str, existing_names: set[str]) -> str:
    """Return ``name`` or a deterministic ``name__2``, ``name__3`` ... bump.

    The returned name is added to ``existing_names``.
    """
    if name not in existing_names:
        existing_names.add(name)
        return name

    c_base_name = name[: max(1, N_LEN_EXCEL_SHEET_NAME_MAX - 3)]
    i = 2
    c_candidate_name = f"{c_base_name}__{i}"[:N_LEN_EXCEL_SHEET_NAME_MAX]
    while c_candidate_name in existing_names:
        i += 1
        c_candidate_name = f"{c_base_name}__{i}"[:N_LEN_EXCEL_SHEET_NAME_MAX]
    existing_names.add(c_candidate_name)
    return c_candidate_name


# #endregion
################################################################################
# #region ColumnWidth


def estimate_width_len(value: Any, kind: EnumCellKind) -> int:
    """Estimate display string length for column width calculation.

    Notes
    -----
    - Excel column width is not strictly character count; this is a pragmatic
      heuristic good enough for most reports.
    - Numbers are approximated by Excel's "General" display (10 significant
      digits), booleans by ``TRUE``/``FALSE``.
    """
    if value is None or kind is EnumCellKind.BLANK:
        return 0
    if kind is EnumCellKind.BOOLEAN:
        return len("TRUE") if value else len("FALSE")
    if kind is EnumCellKind.NUMERIC:
        n_val = float(value)
        if not math.isfinite(n_val):
            return len("#NUM!")
        if n_val.is_integer() and abs(n_val) < 1e15:
            return len(str(int(n_val)))
        return len(f"{n_val:.10g}")

    s = str(value)
    n_ascii = sum(1 for _chr in s if ord(_chr) < 128)
    n_non_ascii = len(s) - n_ascii
    return n_ascii + int(1.6 * n_non_ascii)


def calculate_column_width(n_len: int, policy: SpecAutofitCellsPolicy) -> int:
    n_min = max(1, int(policy.width_cell_min))
    n_max = min(255, max(n_min, int(policy.width_cell_max)))
    n_pad = max(0, int(policy.width_cell_padding))
    return min(n_max, max(n_min, n_len + n_pad))


# #endregion
################################################################################
