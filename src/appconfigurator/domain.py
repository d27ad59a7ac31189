"""Binding markers declared on target classes.

A marker is used in one of two ways. On a field it goes inside
``typing.Annotated``; on a setter it is applied as a decorator:

    >>> class Service:
    ...     name: Annotated[Optional[str], Property()] = None
    ...     db: Annotated[Optional[Database], Nested()] = None
    ...
    ...     @Property(name="retries")
    ...     def set_max_retries(self, value: int):
    ...         self.max_retries = value
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

__all__ = ["Binding", "Property", "Nested", "BINDINGS_ATTRIBUTE"]

BINDINGS_ATTRIBUTE = "__configurator_bindings__"


class Binding:
    """Base class of the binding markers."""

    name: Optional[str]

    def __call__(self, func: Callable) -> Callable:
        bindings = list(getattr(func, BINDINGS_ATTRIBUTE, []))
        bindings.append(self)
        setattr(func, BINDINGS_ATTRIBUTE, bindings)
        return func


@dataclass(frozen=True)
class Property(Binding):
    """Bind a member to a single converted value.

    Attributes:
        name: Configuration key to read; defaults to the member's name.
        handler: Optional property handler class used to read and convert the
            value. Defaults to :class:`~appconfigurator.converters.DefaultPropertyHandler`.
    """

    name: Optional[str] = None
    handler: Optional[type] = None


@dataclass(frozen=True)
class Nested(Binding):
    """Bind a member to an object built from the configuration sub-tree.

    Attributes:
        name: Configuration key of the sub-tree; defaults to the member's name.
        implementation: Optional class to instantiate instead of the declared
            type. Must be a subclass of the declared type.
    """

    name: Optional[str] = None
    implementation: Optional[Any] = None
