"""Uniform handles over bindable fields and setters."""

import inspect
import types
from typing import (
    Annotated,
    Any,
    Callable,
    Optional,
    TypeVar,
    get_args,
    get_origin,
    get_type_hints,
)

from appconfigurator.domain import Binding
from appconfigurator.errors import InvalidSetterError, UnsupportedTypeError

__all__ = [
    "BindableDescriptor",
    "FieldDescriptor",
    "SetterDescriptor",
    "setter_name",
    "resolve_annotation",
]

B = TypeVar("B", bound=Binding)


def setter_name(name: str) -> str:
    """Derive the binding name of a setter from its method name.

    Example:
        >>> setter_name("set_max_retries")  # "max_retries"
        >>> setter_name("setMaxRetries")    # "maxRetries"
        >>> setter_name("configure")        # "configure"
    """
    if name.startswith("set_") and len(name) > 4:
        return name[4:]
    if name.startswith("set") and len(name) > 3 and name[3].isupper():
        return name[3].lower() + name[4:]
    return name


def strip_annotated(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def resolve_annotation(
    annotation: Any, globalns: dict[str, Any], localns: Optional[dict[str, Any]] = None
) -> Any:
    """Evaluate a single annotation, including string forward references.

    Only the given annotation is resolved, so unrelated annotations on the
    same class or function cannot make it fail.

    Raises:
        NameError: If the annotation refers to an undefined name.
    """
    holder = types.SimpleNamespace(__annotations__={"value": annotation})
    hints = get_type_hints(holder, globalns=globalns, localns=localns, include_extras=True)
    return hints["value"]


class BindableDescriptor:
    """A field or setter of ``owner`` that receives a configured value.

    Attributes:
        owner: The class declaring the member.
        binding: The marker the member was declared with.
    """

    owner: type
    binding: Binding

    @property
    def value_type(self) -> Any:
        raise NotImplementedError

    @property
    def name(self) -> str:
        raise NotImplementedError

    def get_binding(self, kind: type[B]) -> Optional[B]:
        return self.binding if isinstance(self.binding, kind) else None

    def set_value(self, instance: Any, value: Any):
        raise NotImplementedError


class FieldDescriptor(BindableDescriptor):
    def __init__(self, owner: type, field_name: str, annotation: Any, binding: Binding):
        self.owner = owner
        self.binding = binding
        self._field_name = field_name
        self._value_type = strip_annotated(annotation)

    @property
    def value_type(self) -> Any:
        return self._value_type

    @property
    def name(self) -> str:
        return self._field_name

    def set_value(self, instance: Any, value: Any):
        # object.__setattr__ also writes frozen dataclasses
        object.__setattr__(instance, self._field_name, value)

    def __str__(self) -> str:
        return f"Object: {self.owner.__qualname__}, Field: {self._field_name}"

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.owner.__qualname__}.{self._field_name}, {self.binding!r})"


class SetterDescriptor(BindableDescriptor):
    """A single-argument method called with the configured value.

    Raises:
        InvalidSetterError: If the method does not take exactly one argument
            besides ``self``.
    """

    def __init__(
        self, owner: type, attribute_name: str, func: Callable, binding: Binding
    ):
        self.owner = owner
        self.binding = binding
        self._attribute_name = attribute_name
        self._func = func
        self._value_type = self._parameter_type(func)

    def _parameter_type(self, func: Callable) -> Any:
        parameters = list(inspect.signature(func).parameters.values())[1:]
        if len(parameters) != 1 or parameters[0].kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
            inspect.Parameter.KEYWORD_ONLY,
        ):
            raise InvalidSetterError(
                f"Method {func.__name__} in class {self.owner.__qualname__} "
                "is not a valid setter (must have exactly 1 argument)"
            )
        annotation = parameters[0].annotation
        if annotation is inspect.Parameter.empty:
            return Any
        try:
            return strip_annotated(resolve_annotation(annotation, func.__globals__))
        except NameError as e:
            raise UnsupportedTypeError(
                f"Parameter type of method {func.__name__} in class "
                f"{self.owner.__qualname__} cannot be resolved: {e}"
            ) from e

    @property
    def value_type(self) -> Any:
        return self._value_type

    @property
    def name(self) -> str:
        return setter_name(self._func.__name__)

    def set_value(self, instance: Any, value: Any):
        # looked up on the instance type so that undecorated overrides run
        getattr(type(instance), self._attribute_name)(instance, value)

    def __str__(self) -> str:
        return f"Object: {self.owner.__qualname__}, Method: {self._func.__name__}"

    def __repr__(self) -> str:
        return f"SetterDescriptor({self.owner.__qualname__}.{self._func.__name__}, {self.binding!r})"
