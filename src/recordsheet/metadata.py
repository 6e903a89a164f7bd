"""Declarative column metadata and its extraction from record types.

Record types are dataclasses. Each exported field is declared with
:func:`column`, which stores a :class:`SpecColumn` in the field metadata, and
the type may carry a base style through :func:`general_style`::

    @general_style()
    @dataclass
    class Order:
        code: str = column("Code", EnumCellKind.STRING, order=1)
        _amount: float = column("Amount", EnumCellKind.NUMERIC, order=2)

        def get_amount(self) -> float:
            return self._amount
"""

import dataclasses
import inspect
import operator
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from loguru import logger

from .conf import (
    ATTR_GENERAL_STYLE,
    KEY_CONVERTER_DEFAULT,
    KEY_FIELD_METADATA_COLUMN,
    KEY_GENERAL_STYLE_DEFAULT,
    KEY_STYLE_PROVIDER_DEFAULT,
)
from .errors import ConfigurationError
from .spec import (
    EnumCellKind,
    SpecColumn,
    SpecFieldInfo,
    SpecRecordInfo,
    TypeFactoryRef,
    TypeGetter,
)

T = TypeVar("T")


def _ensure_refs(
    value: Sequence[TypeFactoryRef] | TypeFactoryRef | None,
) -> tuple[TypeFactoryRef, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or callable(value):
        return (value,)
    return tuple(value)


def _normalize_cell_kind(kind: EnumCellKind | str) -> EnumCellKind | str:
    # unknown kinds are kept as-is and rejected when a value is written
    try:
        return EnumCellKind(kind)
    except ValueError:
        return kind


def column(
    name: str,
    kind: EnumCellKind | str,
    *,
    order: int = 0,
    converter: TypeFactoryRef = KEY_CONVERTER_DEFAULT,
    header_styles: Sequence[TypeFactoryRef] | TypeFactoryRef | None = (
        KEY_STYLE_PROVIDER_DEFAULT,
    ),
    data_styles: Sequence[TypeFactoryRef] | TypeFactoryRef | None = (
        KEY_STYLE_PROVIDER_DEFAULT,
    ),
    auto_fit: bool = False,
    getter: TypeGetter | str | None = None,
    **kwargs: Any,
) -> Any:
    """
    Declare a dataclass field as an exported column.

    Args:
        name (str): Header text; must be unique within the record type.
        kind (EnumCellKind | str): Selects how converted values are written.
        order (int, optional): Ascending sort key for the column position.
            Defaults to 0.
        converter (TypeFactoryRef, optional): Converter class, zero-argument
            factory or registry key. Defaults to the identity converter.
        header_styles (Sequence[TypeFactoryRef] | TypeFactoryRef | None, optional):
            Style providers for the header cell, applied in order.
        data_styles (Sequence[TypeFactoryRef] | TypeFactoryRef | None, optional):
            Style providers for data cells, applied in order.
        auto_fit (bool, optional): Auto-size the column after all rows are
            written. Defaults to False.
        getter (TypeGetter | str | None, optional): Explicit accessor, either a
            callable taking the record or a method name. Defaults to the
            ``get_``/``is_`` naming convention.
        **kwargs: Forwarded to :func:`dataclasses.field` (``default``,
            ``default_factory``, ``repr``, ``metadata`` ...).

    Raises:
        ConfigurationError: If ``name`` is empty or ``order`` is not an int.

    Returns:
        Any: A :class:`dataclasses.Field` carrying the column metadata.
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError(
            f"Column name must be a non-empty string, got {name!r}"
        )
    if not isinstance(order, int) or isinstance(order, bool):
        raise ConfigurationError(
            f"Column order must be an int, got {order!r} for column {name!r}"
        )

    spec = SpecColumn(
        name=name,
        kind=_normalize_cell_kind(kind),
        order=order,
        converter=converter,
        header_styles=_ensure_refs(header_styles),
        data_styles=_ensure_refs(data_styles),
        auto_fit=auto_fit,
        getter=getter,
    )
    dict_metadata = dict(kwargs.pop("metadata", None) or {})
    dict_metadata[KEY_FIELD_METADATA_COLUMN] = spec
    return dataclasses.field(metadata=dict_metadata, **kwargs)


def general_style(
    provider: TypeFactoryRef = KEY_GENERAL_STYLE_DEFAULT,
) -> Callable[[type[T]], type[T]]:
    """Class decorator declaring the base style shared by every cell."""

    def _decorate(cls: type[T]) -> type[T]:
        setattr(cls, ATTR_GENERAL_STYLE, provider)
        return cls

    return _decorate


def _check_bool_field(fld: dataclasses.Field) -> bool:
    # plain `bool` only; Optional[bool] follows the `get_` convention
    return fld.type is bool or fld.type == "bool"


def _resolve_getter(
    owner: type, fld: dataclasses.Field, spec: SpecColumn
) -> TypeGetter:
    if spec.getter is not None:
        if callable(spec.getter):
            return spec.getter
        if not callable(getattr(owner, spec.getter, None)):
            raise ConfigurationError(
                f"Can't find public getter {spec.getter!r} of "
                f"{owner.__qualname__!r} for field {fld.name!r}"
            )
        return operator.methodcaller(spec.getter)

    c_name_public = fld.name.lstrip("_")
    c_getter_name = f"{'is' if _check_bool_field(fld) else 'get'}_{c_name_public}"
    if callable(getattr(owner, c_getter_name, None)):
        return operator.methodcaller(c_getter_name)
    if not fld.name.startswith("_"):
        return operator.attrgetter(fld.name)
    if isinstance(getattr(owner, c_name_public, None), property):
        return operator.attrgetter(c_name_public)

    raise ConfigurationError(
        f"Can't find public getter {c_getter_name!r} of "
        f"{owner.__qualname__!r} for field {fld.name!r}"
    )


def extract_record_info(record_type: type) -> SpecRecordInfo:
    """
    Collect the column declarations of ``record_type`` and its ancestors.

    Fields are scanned class by class along the MRO, starting at
    ``record_type`` itself, each class in declaration order. A field declared
    again in a subclass is only taken from the subclass. The result is sorted by
    ``(order, scan index)``, so equal orders keep discovery order and derived
    class columns come before base class columns.

    Raises:
        ConfigurationError: If ``record_type`` is not a dataclass type or an
            accessor can't be resolved.
    """
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise ConfigurationError(
            f"Record type must be a dataclass type, got {record_type!r}"
        )

    l_field_infos: list[SpecFieldInfo] = []
    set_names_seen: set[str] = set()
    for _cls in record_type.__mro__:
        dict_fields_ = _cls.__dict__.get("__dataclass_fields__")
        if not dict_fields_:
            continue
        for _name in inspect.get_annotations(_cls):
            if _name in set_names_seen or (fld_ := dict_fields_.get(_name)) is None:
                continue
            set_names_seen.add(_name)
            spec_ = fld_.metadata.get(KEY_FIELD_METADATA_COLUMN)
            if spec_ is None:
                continue
            l_field_infos.append(
                SpecFieldInfo(
                    field_name=_name,
                    owner=_cls,
                    column=spec_,
                    getter=_resolve_getter(_cls, fld_, spec_),
                    scan_idx=len(l_field_infos),
                )
            )

    l_field_infos.sort(key=lambda x: (x.column.order, x.scan_idx))
    if not l_field_infos:
        logger.warning(f"Record type `{record_type.__qualname__}` declares no column.")

    return SpecRecordInfo(
        record_type=record_type,
        fields=tuple(l_field_infos),
        # only the decorated class itself; subclasses do not inherit it
        general_style=record_type.__dict__.get(ATTR_GENERAL_STYLE),
    )
