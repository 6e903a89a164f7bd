import math
from typing import Any, Protocol


class ValueConverter(Protocol):
    """
    Transform a raw field value into a cell-writable value.

    Returning ``None`` renders a blank cell. Any other result must match the
    column's cell kind: ``str`` for STRING, ``bool`` for BOOLEAN and a real
    number or ``decimal.Decimal`` for NUMERIC (written as ``float``; ``bool``
    and ``complex`` are rejected).
    """

    def convert(self, value: Any) -> Any: ...


class IdentityValueConverter:
    def convert(self, value: Any) -> Any:
        return value


class StringValueConverter:
    def convert(self, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


class FloatValueConverter:
    """Parse numbers and numeric strings; NaN/Inf become blank cells."""

    def convert(self, value: Any) -> float | None:
        if value is None:
            return None
        n_value = float(value)
        if not math.isfinite(n_value):
            return None
        return n_value
