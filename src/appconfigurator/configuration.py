"""Hierarchical key/value configuration consumed by the binding engine.

The engine only relies on the :class:`Configuration` protocol. Any store that
can answer typed lookups by dotted key and extract a sub-tree by prefix can be
bound from. :class:`MapConfiguration` adapts an OmegaConf ``DictConfig``,
so values loaded with ``OmegaConf.load``, merged CLI overrides or plain
Python mappings can all be bound, interpolations included.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Iterator, Optional, Protocol, Union, runtime_checkable

from omegaconf import DictConfig, ListConfig, OmegaConf

__all__ = ["Configuration", "MapConfiguration"]

_TRUE_STRINGS = frozenset({"true", "yes", "on", "y", "t"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "n", "f"})
_ABSENT = object()


@runtime_checkable
class Configuration(Protocol):
    """Read-only view over a hierarchical configuration.

    Typed accessors return ``None`` when the key is missing and raise
    ``ValueError``, ``TypeError`` or ``ArithmeticError`` when the stored
    value cannot be coerced.
    """

    def is_empty(self) -> bool: ...

    def contains_key(self, key: str) -> bool: ...

    def keys(self) -> Iterator[str]: ...

    def subset(self, prefix: str) -> "Configuration": ...

    def get_property(self, key: str) -> Any: ...

    def get_int(self, key: str) -> Optional[int]: ...

    def get_float(self, key: str) -> Optional[float]: ...

    def get_bool(self, key: str) -> Optional[bool]: ...

    def get_decimal(self, key: str) -> Optional[Decimal]: ...

    def get_str(self, key: str) -> Optional[str]: ...

    def get_str_list(self, key: str) -> Optional[list[str]]: ...

    def get_list(self, key: str) -> Optional[list]: ...


class MapConfiguration:
    """Configuration backed by an OmegaConf ``DictConfig``.

    A ``DictConfig`` is used as is. Any other mapping is built into one, with
    dotted keys expanded into nested nodes, so ``{"db": {"port": 5432}}`` and
    ``{"db.port": 5432}`` are equivalent. Values must be of a type OmegaConf
    accepts. String values read through a list accessor are split on
    ``list_delimiter``.

    Example:
        >>> config = MapConfiguration({"db": {"host": "localhost", "port": "5432"}})
        >>> config.subset("db").get_int("port")
        5432
    """

    def __init__(
        self,
        values: Union[DictConfig, Mapping[str, Any], None] = None,
        list_delimiter: str = ",",
    ):
        self._list_delimiter = list_delimiter
        if isinstance(values, DictConfig):
            self._config = values
        else:
            self._config = OmegaConf.create()
            for key, value in _dotted_items(values or {}, ""):
                OmegaConf.update(self._config, key, value, merge=True)

    def is_empty(self) -> bool:
        return next(self.keys(), None) is None

    def contains_key(self, key: str) -> bool:
        return self._select(key, _ABSENT) is not _ABSENT

    def keys(self) -> Iterator[str]:
        """Iterate over the dotted keys of every leaf value."""
        return _dotted_keys(OmegaConf.to_container(self._config, resolve=False), "")

    def subset(self, prefix: str) -> "MapConfiguration":
        """Return the sub-tree under ``prefix``, or an empty configuration."""
        node = self._select(prefix)
        if not isinstance(node, DictConfig):
            node = OmegaConf.create()
        return MapConfiguration(node, self._list_delimiter)

    def get_property(self, key: str) -> Any:
        value = self._select(key)
        if OmegaConf.is_config(value):
            return OmegaConf.to_container(value, resolve=True)
        return value

    def get_int(self, key: str) -> Optional[int]:
        value = self._scalar(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"Boolean {value!r} is not an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"{value!r} is not an integral number")
            return int(value)
        return _parse_int(str(value))

    def get_float(self, key: str) -> Optional[float]:
        value = self._scalar(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"Boolean {value!r} is not a number")
        if isinstance(value, (int, float)):
            return float(value)
        return float(str(value).strip())

    def get_bool(self, key: str) -> Optional[bool]:
        value = self._scalar(key)
        if value is None or isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"{value!r} is not a boolean")

    def get_decimal(self, key: str) -> Optional[Decimal]:
        value = self._scalar(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"Boolean {value!r} is not a number")
        return Decimal(str(value).strip())

    def get_str(self, key: str) -> Optional[str]:
        value = self._scalar(key)
        return None if value is None else str(value)

    def get_str_list(self, key: str) -> Optional[list[str]]:
        values = self.get_list(key)
        return None if values is None else [str(v) for v in values]

    def get_list(self, key: str) -> Optional[list]:
        value = self._select(key)
        if value is None or isinstance(value, DictConfig):
            return None
        if isinstance(value, ListConfig):
            return OmegaConf.to_container(value, resolve=True)
        if isinstance(value, str) and self._list_delimiter:
            return [item.strip() for item in value.split(self._list_delimiter)]
        return [value]

    def _select(self, key: str, default: Any = None) -> Any:
        return OmegaConf.select(self._config, key, default=default)

    def _scalar(self, key: str) -> Any:
        value = self._select(key)
        if isinstance(value, ListConfig):
            return value[0] if len(value) else None
        if isinstance(value, DictConfig):
            return None
        return value

    def __repr__(self) -> str:
        return f"MapConfiguration({OmegaConf.to_container(self._config, resolve=False)!r})"


def _dotted_items(values: Mapping[str, Any], prefix: str) -> Iterator[tuple[str, Any]]:
    for key, value in values.items():
        if isinstance(value, Mapping):
            yield from _dotted_items(value, f"{prefix}{key}.")
        else:
            yield f"{prefix}{key}", value


def _dotted_keys(container: Any, prefix: str) -> Iterator[str]:
    for key, value in container.items():
        if isinstance(value, dict):
            yield from _dotted_keys(value, f"{prefix}{key}.")
        else:
            yield f"{prefix}{key}"


def _parse_int(text: str) -> int:
    text = text.strip()
    digits = text.lstrip("+-").lower()
    if digits.startswith("0x"):
        return int(text, 16)
    if digits.startswith("0b"):
        return int(text, 2)
    return int(text)
