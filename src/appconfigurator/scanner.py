"""Discovery of bindable members on a class and its ancestors."""

import inspect
import sys
from typing import Annotated, Any, Iterator, get_args, get_origin

from appconfigurator.descriptors import (
    BindableDescriptor,
    FieldDescriptor,
    SetterDescriptor,
    resolve_annotation,
)
from appconfigurator.domain import BINDINGS_ATTRIBUTE, Binding
from appconfigurator.errors import ConflictingBindingError, UnsupportedTypeError

__all__ = ["scan"]


def scan(target_type: type, kind: type[Binding]) -> list[BindableDescriptor]:
    """Collect the members of ``target_type`` bound with a marker of ``kind``.

    Classes are visited in method resolution order, stopping before
    ``object``. Within a class, fields come first in declaration order,
    followed by decorated methods in definition order. A member redeclared by
    a subclass is only collected from the subclass.

    Args:
        target_type: The class to scan.
        kind: :class:`~appconfigurator.domain.Property` or
            :class:`~appconfigurator.domain.Nested`.

    Returns:
        Descriptors for the matching members, subclass members first.

    Raises:
        ConflictingBindingError: If a member carries more than one marker.
        InvalidSetterError: If a decorated method is not a valid setter.
    """
    return [
        descriptor
        for descriptor in _bindable_members(target_type)
        if descriptor.get_binding(kind) is not None
    ]


def _bindable_members(target_type: type) -> Iterator[BindableDescriptor]:
    seen: set[str] = set()

    for klass in target_type.__mro__:
        if klass is object:
            break

        for field_name, annotation in inspect.get_annotations(klass).items():
            if field_name in seen:
                continue
            seen.add(field_name)
            annotation = _resolve_field(klass, field_name, annotation)
            binding = _single_binding(
                klass, field_name, _annotated_bindings(annotation)
            )
            if binding:
                yield FieldDescriptor(klass, field_name, annotation, binding)

        for attribute_name, attribute in vars(klass).items():
            bindings = getattr(attribute, BINDINGS_ATTRIBUTE, None)
            if not bindings or not inspect.isfunction(attribute):
                continue
            if attribute_name in seen:
                continue
            seen.add(attribute_name)
            yield SetterDescriptor(
                klass,
                attribute_name,
                attribute,
                _single_binding(klass, attribute_name, bindings),
            )


def _resolve_field(klass: type, field_name: str, annotation: Any) -> Any:
    # only annotations that can carry a marker are evaluated
    if not isinstance(annotation, str) and get_origin(annotation) is not Annotated:
        return annotation
    module = sys.modules.get(klass.__module__)
    globalns = vars(module) if module else {}
    try:
        return resolve_annotation(annotation, globalns, dict(vars(klass)))
    except NameError as e:
        if isinstance(annotation, str) and "Annotated" not in annotation:
            return annotation
        raise UnsupportedTypeError(
            f"Annotation of {field_name} in class {klass.__qualname__} "
            f"cannot be resolved: {e}"
        ) from e


def _annotated_bindings(annotation: Any) -> list[Binding]:
    if get_origin(annotation) is not Annotated:
        return []
    _, *metadata = get_args(annotation)
    return [m for m in metadata if isinstance(m, Binding)]


def _single_binding(klass: type, member_name: str, bindings: list[Binding]):
    if len(bindings) > 1:
        raise ConflictingBindingError(
            f"Member {member_name} of class {klass.__qualname__} carries "
            f"more than one binding: {bindings}"
        )
    return bindings[0] if bindings else None
