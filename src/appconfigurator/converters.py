"""Type-directed conversion of single configuration values.

A :class:`PropertyHandler` reads one value from a configuration and converts
it to the type declared by the member it is bound to. The
:class:`DefaultPropertyHandler` dispatches on the exact declared type to a
table of :class:`ValueConverter` instances. Bare numeric and boolean types
are required; their ``Optional[...]`` spellings are not.

Custom handlers either implement :class:`PropertyHandler` directly or extend
the default table:

    >>> class PortHandler(DefaultPropertyHandler):
    ...     def __init__(self):
    ...         super().__init__()
    ...         self.register(Port, RequiredValueConverter(PortConverter()))
"""

import logging
import struct
import types
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional, Protocol, Union, get_args, get_origin

from appconfigurator.configuration import Configuration
from appconfigurator.errors import (
    ConversionError,
    MissingRequiredPropertyError,
    UnsupportedTypeError,
)
from appconfigurator.scalars import (
    Byte,
    Float,
    INTEGER_WIDTHS,
    Integer,
    Long,
    Short,
    type_name,
)
from appconfigurator.scope import qualified_path

__all__ = [
    "PropertyHandler",
    "ValueConverter",
    "RequiredValueConverter",
    "IntegerConverter",
    "FloatConverter",
    "BooleanConverter",
    "DecimalConverter",
    "StringConverter",
    "StringListConverter",
    "ListConverter",
    "DefaultPropertyHandler",
    "normalise_type",
]

logger = logging.getLogger(__name__)


class PropertyHandler(Protocol):
    """Reads a value from the configuration and converts it to a type."""

    def get_value(
        self, path: str, configuration: Configuration, name: str, value_type: Any
    ) -> Any:
        """Return the converted value, or ``None`` if it is absent.

        Args:
            path: Dotted path of ``configuration`` within the whole tree,
                used for error messages.
            configuration: The configuration to read from.
            name: The key to read, relative to ``configuration``.
            value_type: The declared type of the bound member.
        """
        ...


class ValueConverter(ABC):
    """Converts the value at one key to one specific type.

    Subclasses implement :meth:`get_value_impl` by calling the matching
    typed accessor of the configuration. Any coercion failure is reported as
    a :class:`ConversionError` carrying the full path of the key.
    """

    def get_value(
        self, path: str, configuration: Configuration, name: str, value_type: Any
    ) -> Any:
        try:
            return self.get_value_impl(configuration, name)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ConversionError(
                qualified_path(path, name), type_name(value_type)
            ) from e

    @abstractmethod
    def get_value_impl(self, configuration: Configuration, name: str) -> Any:
        pass


class RequiredValueConverter(ValueConverter):
    """Wraps a converter so that an absent value is an error."""

    def __init__(self, converter: ValueConverter):
        self._converter = converter

    def get_value(
        self, path: str, configuration: Configuration, name: str, value_type: Any
    ) -> Any:
        value = self._converter.get_value(path, configuration, name, value_type)
        if value is None:
            raise MissingRequiredPropertyError(
                qualified_path(path, name), type_name(value_type)
            )
        return value

    def get_value_impl(self, configuration: Configuration, name: str) -> Any:
        return self._converter.get_value_impl(configuration, name)


class IntegerConverter(ValueConverter):
    """Integers, optionally restricted to a signed two's complement width."""

    def __init__(self, bits: Optional[int] = None):
        self._bits = bits

    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[int]:
        value = configuration.get_int(name)
        if value is None or self._bits is None:
            return value
        limit = 1 << (self._bits - 1)
        if not -limit <= value < limit:
            raise ValueError(f"{value} does not fit in {self._bits} bits")
        return value


class FloatConverter(ValueConverter):
    def __init__(self, single_precision: bool = False):
        self._single_precision = single_precision

    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[float]:
        value = configuration.get_float(name)
        if value is None or not self._single_precision:
            return value
        # standard size packing raises OverflowError outside the single precision range
        return struct.unpack("<f", struct.pack("<f", value))[0]


class BooleanConverter(ValueConverter):
    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[bool]:
        return configuration.get_bool(name)


class DecimalConverter(ValueConverter):
    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[Decimal]:
        return configuration.get_decimal(name)


class StringConverter(ValueConverter):
    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[str]:
        return configuration.get_str(name)


class StringListConverter(ValueConverter):
    def get_value_impl(
        self, configuration: Configuration, name: str
    ) -> Optional[list[str]]:
        return configuration.get_str_list(name)


class ListConverter(ValueConverter):
    def get_value_impl(self, configuration: Configuration, name: str) -> Optional[list]:
        return configuration.get_list(name)


def normalise_type(value_type: Any) -> Any:
    """Bring equivalent spellings of a type to one canonical form.

    ``X | None`` becomes ``Optional[X]`` and ``typing.List[X]`` becomes
    ``list[X]``, so that both spellings hit the same table entry. No other
    matching is performed.
    """
    origin = get_origin(value_type)
    args = get_args(value_type)
    if origin in (Union, types.UnionType):
        return Union[tuple(normalise_type(arg) for arg in args)]
    if origin is list:
        return list[args] if args else list
    return value_type


class DefaultPropertyHandler:
    """Property handler dispatching on the exact declared type.

    Example:
        >>> handler = DefaultPropertyHandler()
        >>> handler.get_value("db", MapConfiguration({"port": "5432"}), "port", int)
        5432
    """

    def __init__(self):
        self._converters: dict[Any, ValueConverter] = {}

        for value_type, converter in (
            (int, IntegerConverter()),
            (Byte, IntegerConverter(INTEGER_WIDTHS[Byte])),
            (Short, IntegerConverter(INTEGER_WIDTHS[Short])),
            (Integer, IntegerConverter(INTEGER_WIDTHS[Integer])),
            (Long, IntegerConverter(INTEGER_WIDTHS[Long])),
            (float, FloatConverter()),
            (Float, FloatConverter(single_precision=True)),
            (bool, BooleanConverter()),
        ):
            self.register(value_type, RequiredValueConverter(converter))
            self.register(Optional[value_type], converter)

        for value_type, converter in (
            (Decimal, DecimalConverter()),
            (str, StringConverter()),
            (list[str], StringListConverter()),
            (list, ListConverter()),
        ):
            self.register(value_type, converter)
            self.register(Optional[value_type], converter)

    def register(self, value_type: Any, converter: ValueConverter):
        """Register ``converter`` for exactly ``value_type``, replacing any existing entry."""
        self._converters[normalise_type(value_type)] = converter

    def resolve(self, value_type: Any) -> ValueConverter:
        """Return the converter registered for exactly ``value_type``.

        Raises:
            UnsupportedTypeError: If no converter is registered for the type.
        """
        try:
            return self._converters[normalise_type(value_type)]
        except (KeyError, TypeError):
            raise UnsupportedTypeError(
                f"No property handler is defined for type {type_name(value_type)}"
            ) from None

    def get_value(
        self, path: str, configuration: Configuration, name: str, value_type: Any
    ) -> Any:
        converter = self.resolve(value_type)
        logger.debug(
            "Reading %s as %s", qualified_path(path, name), type_name(value_type)
        )
        return converter.get_value(path, configuration, name, value_type)
