"""Recursive binding of configuration scopes onto target objects.

The :class:`BindingEngine` constructs a target class with no arguments, sets
every member declared with a :class:`~appconfigurator.domain.Property` marker
from a converted configuration value, and builds every member declared with a
:class:`~appconfigurator.domain.Nested` marker from the configuration sub-tree
named after it.

An engine caches property handler instances and scanned descriptors. It is
meant to serve a single top-level call; :func:`appconfigurator.builders.instantiate`
creates a fresh one each time.
"""

import inspect
import logging
import types
from typing import Any, Optional, TypeVar, Union, get_args, get_origin

from appconfigurator.converters import DefaultPropertyHandler, PropertyHandler
from appconfigurator.descriptors import BindableDescriptor
from appconfigurator.domain import Binding, Nested, Property
from appconfigurator.errors import BindingError, InstantiationError, TypeMismatchError
from appconfigurator.scalars import type_name
from appconfigurator.scanner import scan
from appconfigurator.scope import ConfigurationScope, qualified_path

__all__ = ["BindingEngine"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BindingEngine:
    """Builds objects from configuration scopes.

    Example:
        >>> engine = BindingEngine()
        >>> service = engine.instantiate(ConfigurationScope(config), Service)
    """

    def __init__(self):
        self._handlers: dict[type, PropertyHandler] = {}
        self._descriptors: dict[tuple[type, type], list[BindableDescriptor]] = {}

    def instantiate(self, scope: ConfigurationScope, target_type: type[T]) -> Optional[T]:
        """Create and populate an instance of ``target_type`` from ``scope``.

        Args:
            scope: The configuration sub-tree to bind from.
            target_type: The class to instantiate. It must be callable without
                arguments.

        Returns:
            The populated instance, or ``None`` if ``scope`` holds no keys.

        Raises:
            InstantiationError: If ``target_type`` cannot be constructed.
            BindingError: If any member cannot be bound. The failure that
                caused it is available as ``__cause__``.
        """
        if scope.configuration.is_empty():
            logger.debug(
                "No configuration at '%s', leaving %s unset",
                scope.path,
                type_name(target_type),
            )
            return None

        try:
            instance = target_type()
        except Exception as e:
            raise InstantiationError(
                f"Error creating instance of {type_name(target_type)}", target_type
            ) from e

        logger.debug("Binding %s from '%s'", type_name(target_type), scope.path)
        try:
            self._apply_properties(scope, target_type, instance)
            self._apply_nested(scope, target_type, instance)
        except BindingError as e:
            raise BindingError(
                f"Error setting properties of {type_name(target_type)}", target_type
            ) from (e.__cause__ or e)
        except Exception as e:
            raise BindingError(
                f"Error setting properties of {type_name(target_type)}", target_type
            ) from e

        return instance

    def _apply_properties(
        self, scope: ConfigurationScope, target_type: type, instance: Any
    ):
        for descriptor in self._scan(target_type, Property):
            binding = descriptor.get_binding(Property)
            name = binding.name or descriptor.name
            handler = self._handler(binding.handler or DefaultPropertyHandler)
            value = handler.get_value(
                scope.path, scope.configuration, name, descriptor.value_type
            )
            if value is None:
                continue
            descriptor.set_value(instance, value)
            logger.debug("Bound %s to %s", qualified_path(scope.path, name), descriptor)

    def _apply_nested(self, scope: ConfigurationScope, target_type: type, instance: Any):
        for descriptor in self._scan(target_type, Nested):
            binding = descriptor.get_binding(Nested)
            name = binding.name or descriptor.name
            implementation = _implementation_type(descriptor, binding)
            value = self.instantiate(scope.descend(name), implementation)
            descriptor.set_value(instance, value)

    def _scan(self, target_type: type, kind: type[Binding]) -> list[BindableDescriptor]:
        key = (target_type, kind)
        if key not in self._descriptors:
            self._descriptors[key] = scan(target_type, kind)
        return self._descriptors[key]

    def _handler(self, handler_type: type) -> PropertyHandler:
        handler = self._handlers.get(handler_type)
        if handler is None:
            logger.debug("Creating property handler %s", type_name(handler_type))
            handler = handler_type()
            self._handlers[handler_type] = handler
        return handler


def _implementation_type(descriptor: BindableDescriptor, binding: Nested) -> Any:
    declared = _strip_optional(descriptor.value_type)
    if binding.implementation is None:
        return declared
    if not _is_subclass(binding.implementation, declared):
        raise TypeMismatchError(
            f"Specified {type_name(declared)} can not be assigned from "
            f"{type_name(binding.implementation)}. Location: {descriptor}"
        )
    return binding.implementation


def _strip_optional(value_type: Any) -> Any:
    if get_origin(value_type) in (Union, types.UnionType):
        members = [arg for arg in get_args(value_type) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return value_type


def _is_subclass(implementation: Any, declared: Any) -> bool:
    if not (inspect.isclass(implementation) and inspect.isclass(declared)):
        return False
    try:
        return issubclass(implementation, declared)
    except TypeError:
        return False
