"""Exceptions raised while binding configuration onto objects."""

from typing import Any, Optional

__all__ = [
    "ConfiguratorError",
    "UnsupportedTypeError",
    "ConversionError",
    "MissingRequiredPropertyError",
    "InvalidSetterError",
    "TypeMismatchError",
    "ConflictingBindingError",
    "InstantiationError",
    "BindingError",
]


class ConfiguratorError(Exception):
    """Base class for every failure raised by the configurator."""

    pass


class UnsupportedTypeError(ConfiguratorError):
    """Raised when no converter is registered for the exact requested type."""

    pass


class ConversionError(ConfiguratorError):
    """Raised when a configured value exists but cannot be converted.

    Attributes:
        path: The full dotted path of the offending key.
        type_name: The name of the type the value was converted to.
    """

    def __init__(self, path: str, type_name: str):
        super().__init__(f"Error parsing property {path} as {type_name}")
        self.path = path
        self.type_name = type_name


class MissingRequiredPropertyError(ConfiguratorError):
    """Raised when a required scalar value is absent from the configuration.

    Attributes:
        path: The full dotted path of the missing key.
        type_name: The name of the required type.
    """

    def __init__(self, path: str, type_name: str):
        super().__init__(f"Error parsing missing property {path} as {type_name}")
        self.path = path
        self.type_name = type_name


class InvalidSetterError(ConfiguratorError):
    """Raised when a decorated setter does not take exactly one argument."""

    pass


class TypeMismatchError(ConfiguratorError):
    """Raised when a nested implementation is not a subclass of the declared type."""

    pass


class ConflictingBindingError(ConfiguratorError):
    """Raised when one member carries more than one binding marker."""

    pass


class InstantiationError(ConfiguratorError):
    """Raised when a target class cannot be constructed without arguments."""

    def __init__(self, message: str, target_type: Optional[Any] = None):
        super().__init__(message)
        self.target_type = target_type


class BindingError(ConfiguratorError):
    """Raised once per target object when any of its bindings fails.

    The failure that triggered it is available as ``__cause__``.
    """

    def __init__(self, message: str, target_type: Optional[Any] = None):
        super().__init__(message)
        self.target_type = target_type
