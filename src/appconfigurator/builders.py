"""High level entry point for building objects from configuration."""

from collections.abc import Mapping
from typing import Any, Optional, TypeVar, Union

from appconfigurator.configuration import Configuration, MapConfiguration
from appconfigurator.engine import BindingEngine
from appconfigurator.scope import ConfigurationScope

__all__ = ["instantiate"]

T = TypeVar("T")


def instantiate(
    configuration: Union[Configuration, Mapping[str, Any]],
    target_type: type[T],
) -> Optional[T]:
    """Construct an instance of ``target_type`` populated from ``configuration``.

    Members of ``target_type`` (and of its base classes) declared with
    :class:`~appconfigurator.domain.Property` receive converted values;
    members declared with :class:`~appconfigurator.domain.Nested` receive
    objects built recursively from the configuration sub-tree under their key.

    Args:
        configuration: The configuration to bind from. Plain mappings, nested
            or with dotted keys, and OmegaConf ``DictConfig`` objects are
            wrapped in a :class:`~appconfigurator.configuration.MapConfiguration`.
        target_type: The class to instantiate. It must be callable without
            arguments.

    Returns:
        The populated instance, or ``None`` if the configuration is empty.

    Raises:
        InstantiationError: If ``target_type`` cannot be constructed.
        BindingError: If any member cannot be bound. The underlying
            :class:`ConversionError`, :class:`MissingRequiredPropertyError`,
            :class:`UnsupportedTypeError`, :class:`TypeMismatchError`,
            :class:`InvalidSetterError` or :class:`InstantiationError` is
            available as ``__cause__``.

    Example:
        >>> @dataclass
        ... class Database:
        ...     host: Annotated[Optional[str], Property()] = None
        ...     port: Annotated[int, Property()] = 0
        >>>
        >>> @dataclass
        ... class Service:
        ...     name: Annotated[Optional[str], Property()] = None
        ...     db: Annotated[Optional[Database], Nested()] = None
        >>>
        >>> service = instantiate({"name": "svc", "db.host": "localhost", "db.port": "5432"}, Service)
        >>> service.db.port
        5432
    """
    if isinstance(configuration, Mapping):
        configuration = MapConfiguration(configuration)
    return BindingEngine().instantiate(ConfigurationScope(configuration), target_type)
