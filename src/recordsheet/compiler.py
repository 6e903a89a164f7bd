from typing import Any

from loguru import logger

from .errors import ConfigurationError, InstantiationError
from .registry import CONVERTER_REGISTRY, STYLE_PROVIDER_REGISTRY, FactoryRegistry
from .spec import (
    EnumCellKind,
    SpecCompiledColumn,
    SpecCompiledSchema,
    SpecRecordInfo,
    TypeFactoryRef,
)


def _describe_factory(factory: Any) -> str:
    c_module = getattr(factory, "__module__", None)
    c_name = getattr(factory, "__qualname__", None) or repr(factory)
    return f"{c_module}.{c_name}" if c_module else c_name


def create_no_args_instance(ref: TypeFactoryRef, *, registry: FactoryRegistry) -> Any:
    """
    Create one strategy object from a class, zero-argument factory or key.

    Raises:
        InstantiationError: If the key is unknown, the reference isn't callable,
            or calling it without arguments fails.
    """
    if isinstance(ref, str):
        try:
            factory = registry.get(ref)
        except ValueError as e:
            raise InstantiationError(str(e)) from e
    else:
        factory = ref

    if not callable(factory):
        raise InstantiationError(
            f"Failed to instantiate {registry.kind} {factory!r}: it is not a class "
            "or a zero-argument factory"
        )
    try:
        return factory()
    except Exception as e:
        raise InstantiationError(
            f"Failed to instantiate {registry.kind} \"{_describe_factory(factory)}\" "
            "using no args constructor, either because it requires arguments, "
            f"or its construction failed: {e}"
        ) from e


def _validate_strategy(obj: Any, *, method: str, kind: str, column_name: str) -> Any:
    if not callable(getattr(obj, method, None)):
        raise ConfigurationError(
            f"{kind} {type(obj).__qualname__!r} of column {column_name!r} "
            f"must define `{method}()`"
        )
    return obj


def compile_schema(record_info: SpecRecordInfo) -> SpecCompiledSchema:
    """
    Turn sorted column declarations into an immutable compiled schema.

    Positions are assigned densely from 0 in the order of
    ``record_info.fields``. Every converter and style provider is created once
    here and shared by all later materializations.

    Raises:
        ConfigurationError: On duplicate column names or strategy objects that
            don't implement their protocol.
        InstantiationError: If a strategy can't be created.
    """
    dict_fields_by_name: dict[str, str] = {}
    l_columns: list[SpecCompiledColumn] = []
    for _position, _info in enumerate(record_info.fields):
        c_name_ = _info.column.name
        if c_name_ in dict_fields_by_name:
            raise ConfigurationError(
                f"Duplicate column name \"{c_name_}\" in "
                f"{record_info.record_type.__qualname__!r} "
                f"(fields {dict_fields_by_name[c_name_]!r} and {_info.field_name!r})"
            )
        dict_fields_by_name[c_name_] = _info.field_name

        if not isinstance(_info.column.kind, EnumCellKind):
            logger.warning(
                f"Column {c_name_!r} declares unsupported cell kind "
                f"{_info.column.kind!r}; writing its values will fail."
            )

        l_columns.append(
            SpecCompiledColumn(
                position=_position,
                info=_info,
                converter=_validate_strategy(
                    create_no_args_instance(
                        _info.column.converter, registry=CONVERTER_REGISTRY
                    ),
                    method="convert",
                    kind="Converter",
                    column_name=c_name_,
                ),
                header_styles=tuple(
                    _validate_strategy(
                        create_no_args_instance(_ref, registry=STYLE_PROVIDER_REGISTRY),
                        method="create_cell_format_properties",
                        kind="Style provider",
                        column_name=c_name_,
                    )
                    for _ref in _info.column.header_styles
                ),
                data_styles=tuple(
                    _validate_strategy(
                        create_no_args_instance(_ref, registry=STYLE_PROVIDER_REGISTRY),
                        method="create_cell_format_properties",
                        kind="Style provider",
                        column_name=c_name_,
                    )
                    for _ref in _info.column.data_styles
                ),
            )
        )

    cfg_general_style = None
    if record_info.general_style is not None:
        cfg_general_style = create_no_args_instance(
            record_info.general_style, registry=STYLE_PROVIDER_REGISTRY
        )
        if not callable(getattr(cfg_general_style, "create_cell_style", None)):
            raise ConfigurationError(
                f"General style {type(cfg_general_style).__qualname__!r} of "
                f"{record_info.record_type.__qualname__!r} must define "
                "`create_cell_style()`"
            )

    schema = SpecCompiledSchema(
        record_type=record_info.record_type,
        columns=tuple(l_columns),
        general_style=cfg_general_style,
    )
    logger.debug(
        f"Compiled schema for `{record_info.record_type.__qualname__}`: "
        f"{list(schema.column_names)}"
    )
    return schema
