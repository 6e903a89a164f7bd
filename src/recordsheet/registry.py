"""Named factories for converters and style providers.

Column metadata may reference a strategy either directly (a class or any
zero-argument factory) or by a registry key. Keys are validated with the same
token rule everywhere so they stay usable in declarations and messages.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .conf import (
    KEY_CONVERTER_DEFAULT,
    KEY_GENERAL_STYLE_DEFAULT,
    KEY_STYLE_PROVIDER_DEFAULT,
)
from .converter import FloatValueConverter, IdentityValueConverter, StringValueConverter
from .style import (
    DecimalCellFormatProperties,
    DefaultCellFormatProperties,
    DefaultCellStyle,
    HeaderCellFormatProperties,
    IntegerCellFormatProperties,
    ScientificCellFormatProperties,
    TextCellFormatProperties,
)

_RE_REGISTRY_TOKEN = re.compile(r"^[0-9A-Za-z][0-9A-Za-z._-]*$")


def _validate_registry_token(token: str, *, kind: str) -> None:
    if not token:
        raise ValueError(f"{kind} must be non-empty")
    if not _RE_REGISTRY_TOKEN.fullmatch(token):
        raise ValueError(
            f"Invalid {kind}: {token!r}. Allowed pattern: {_RE_REGISTRY_TOKEN.pattern}"
        )


@dataclass(slots=True)
class FactoryRegistry:
    """
    In-memory registry of zero-argument factories addressable by key.

    Attributes:
        kind (str): Human-readable strategy kind used in error messages.
        _items (dict[str, Callable[[], Any]]): Mapping from key to factory.
    """

    kind: str
    _items: dict[str, Callable[[], Any]]

    @classmethod
    def new(cls, kind: str) -> "FactoryRegistry":
        return cls(kind=kind, _items={})

    def register(
        self, key: str, factory: Callable[[], Any], *, if_replace: bool = False
    ) -> Callable[[], Any]:
        """
        Register ``factory`` under ``key``.

        Raises:
            ValueError: If ``key`` is malformed, ``factory`` is not callable, or
                ``key`` is taken and ``if_replace`` is false.

        Returns:
            Callable[[], Any]: The registered factory, so this works as a
            decorator helper.
        """
        _validate_registry_token(key, kind=f"{self.kind} key")
        if not callable(factory):
            raise ValueError(f"{self.kind} factory for {key!r} must be callable")
        if key in self._items and not if_replace:
            raise ValueError(f"{self.kind} already registered: {key!r}")
        self._items[key] = factory
        return factory

    def get(self, key: str) -> Callable[[], Any]:
        try:
            return self._items[key]
        except KeyError as e:
            raise ValueError(
                f"Unknown {self.kind}: {key!r}. Available keys: {self.list_keys()}."
            ) from e

    def list_keys(self) -> list[str]:
        return sorted(self._items.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._items


CONVERTER_REGISTRY = FactoryRegistry.new("converter")
CONVERTER_REGISTRY.register(KEY_CONVERTER_DEFAULT, IdentityValueConverter)
CONVERTER_REGISTRY.register("str", StringValueConverter)
CONVERTER_REGISTRY.register("float", FloatValueConverter)

STYLE_PROVIDER_REGISTRY = FactoryRegistry.new("style provider")
STYLE_PROVIDER_REGISTRY.register(
    KEY_STYLE_PROVIDER_DEFAULT, DefaultCellFormatProperties
)
STYLE_PROVIDER_REGISTRY.register("header", HeaderCellFormatProperties)
STYLE_PROVIDER_REGISTRY.register("integer", IntegerCellFormatProperties)
STYLE_PROVIDER_REGISTRY.register("decimal", DecimalCellFormatProperties)
STYLE_PROVIDER_REGISTRY.register("scientific", ScientificCellFormatProperties)
STYLE_PROVIDER_REGISTRY.register("text", TextCellFormatProperties)
STYLE_PROVIDER_REGISTRY.register(KEY_GENERAL_STYLE_DEFAULT, DefaultCellStyle)


def register_converter(
    key: str, factory: Callable[[], Any], *, if_replace: bool = False
) -> Callable[[], Any]:
    return CONVERTER_REGISTRY.register(key, factory, if_replace=if_replace)


def register_style_provider(
    key: str, factory: Callable[[], Any], *, if_replace: bool = False
) -> Callable[[], Any]:
    return STYLE_PROVIDER_REGISTRY.register(key, factory, if_replace=if_replace)
