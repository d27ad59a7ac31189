from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Optional

import pytest

from appconfigurator.descriptors import FieldDescriptor, SetterDescriptor, setter_name
from appconfigurator.domain import Nested, Property
from appconfigurator.errors import (
    ConflictingBindingError,
    InvalidSetterError,
    UnsupportedTypeError,
)
from appconfigurator.scanner import scan

if TYPE_CHECKING:
    from decimal import Context


class Base:
    base_field: Annotated[Optional[str], Property()] = None
    unbound: Optional[str] = None

    @Property()
    def set_base_value(self, value: int):
        self.base_value = value


class Child(Base):
    child_field: Annotated[int, Property(name="renamed")] = 0
    nested: Annotated[Optional[Base], Nested()] = None

    @Property()
    def setChildValue(self, value: Annotated[Optional[str], "doc"]):
        self.child_value = value


class Tuned:
    context: "Optional[Context]" = None
    port: Annotated[int, Property()] = 0

    @Property()
    def set_label(self, value: Optional[str]) -> "Context":
        self.label = value


def names(descriptors):
    return [d.name for d in descriptors]


@pytest.mark.parametrize(
    "method_name,expected",
    [
        ("set_max_retries", "max_retries"),
        ("setMaxRetries", "maxRetries"),
        ("setup", "setup"),
        ("set", "set"),
        ("configure", "configure"),
    ],
)
def test_setter_name_strips_mutator_prefix(method_name, expected):
    assert setter_name(method_name) == expected


def test_subclass_members_come_before_ancestor_members():
    assert names(scan(Child, Property)) == [
        "child_field",
        "childValue",
        "base_field",
        "base_value",
    ]


def test_scan_separates_binding_kinds():
    nested = scan(Child, Nested)

    assert names(nested) == ["nested"]
    assert nested[0].value_type == Optional[Base]


def test_unannotated_members_are_ignored():
    assert "unbound" not in names(scan(Base, Property))


def test_descriptor_types_and_bindings():
    child_field, child_value, base_field, base_value = scan(Child, Property)

    assert isinstance(child_field, FieldDescriptor)
    assert child_field.value_type is int
    assert child_field.get_binding(Property) == Property(name="renamed")
    assert child_field.get_binding(Nested) is None
    assert child_field.owner is Child

    assert isinstance(child_value, SetterDescriptor)
    assert child_value.value_type == Optional[str]
    assert base_value.value_type is int
    assert base_value.owner is Base
    assert str(base_value) == "Object: Base, Method: set_base_value"
    assert str(base_field) == "Object: Base, Field: base_field"


def test_descriptors_set_values():
    instance = Child()
    child_field, child_value, _, _ = scan(Child, Property)

    child_field.set_value(instance, 7)
    child_value.set_value(instance, "hello")

    assert instance.child_field == 7
    assert instance.child_value == "hello"


def test_field_descriptor_writes_frozen_dataclasses():
    @dataclass(frozen=True)
    class Frozen:
        value: Annotated[Optional[str], Property()] = None

    instance = Frozen()
    scan(Frozen, Property)[0].set_value(instance, "set")

    assert instance.value == "set"


def test_redeclared_member_is_taken_from_subclass():
    class Override(Base):
        base_field: Annotated[Optional[str], Property(name="other")] = None

    descriptors = scan(Override, Property)

    assert names(descriptors) == ["base_field", "base_value"]
    assert descriptors[0].binding == Property(name="other")
    assert descriptors[0].owner is Override


def test_scanning_stops_before_object():
    class Empty:
        pass

    assert scan(Empty, Property) == []


def test_setter_with_two_arguments_is_invalid():
    class Invalid:
        @Property()
        def set_pair(self, first: int, second: int):
            pass

    with pytest.raises(InvalidSetterError, match="set_pair in class .*Invalid is not a valid setter"):
        scan(Invalid, Property)


def test_setter_without_arguments_is_invalid():
    class Invalid:
        @Nested()
        def set_nothing(self):
            pass

    with pytest.raises(InvalidSetterError):
        scan(Invalid, Property)


def test_unannotated_setter_parameter_is_any():
    class Untyped:
        @Property()
        def set_value(self, value):
            pass

    assert scan(Untyped, Property)[0].value_type is Any


def test_field_with_both_binding_kinds_is_rejected():
    class Ambiguous:
        value: Annotated[Optional[Base], Property(), Nested()] = None

    with pytest.raises(ConflictingBindingError, match="value of class .*Ambiguous"):
        scan(Ambiguous, Nested)


def test_setter_with_both_binding_kinds_is_rejected():
    class Ambiguous:
        @Nested()
        @Property()
        def set_value(self, value: Optional[str]):
            pass

    with pytest.raises(ConflictingBindingError):
        scan(Ambiguous, Property)


def test_unbound_fields_may_use_type_checking_only_names():
    assert names(scan(Tuned, Property)) == ["port", "label"]


def test_setter_return_annotation_is_not_resolved():
    setter = scan(Tuned, Property)[1]
    tuned = Tuned()

    setter.set_value(tuned, "primary")

    assert setter.value_type == Optional[str]
    assert tuned.label == "primary"


def test_unresolvable_bound_field_is_unsupported():
    class Broken:
        context: Annotated[Optional["Context"], Nested()] = None

    with pytest.raises(UnsupportedTypeError, match="context in class .*Broken"):
        scan(Broken, Nested)


def test_unresolvable_setter_parameter_is_unsupported():
    class Broken:
        @Property()
        def set_context(self, value: "Context"):
            pass

    with pytest.raises(UnsupportedTypeError, match="set_context in class .*Broken"):
        scan(Broken, Property)
