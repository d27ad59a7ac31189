"""Width-specific scalar types for declaring bindable members.

Python's ``int`` and ``float`` are arbitrary precision and double precision
respectively. The types below let a member declare a narrower range; the
matching converters reject configured values that do not fit.

Example:
    >>> class Pool:
    ...     size: Annotated[Short, Property()] = Short(4)
"""

from typing import NewType, Any

__all__ = ["Byte", "Short", "Integer", "Long", "Float", "type_name"]

Byte = NewType("Byte", int)
Short = NewType("Short", int)
Integer = NewType("Integer", int)
Long = NewType("Long", int)
Float = NewType("Float", float)

INTEGER_WIDTHS = {Byte: 8, Short: 16, Integer: 32, Long: 64}


def type_name(value_type: Any) -> str:
    """Return a readable name for a type, used in error messages.

    Example:
        >>> type_name(int)            # "int"
        >>> type_name(Short)          # "Short"
        >>> type_name(Optional[int])  # "typing.Optional[int]"
        >>> type_name(Database)       # "myapp.db.Database"
    """
    if isinstance(value_type, type) and not getattr(value_type, "__args__", None):
        if value_type.__module__ == "builtins":
            return value_type.__qualname__
        return f"{value_type.__module__}.{value_type.__qualname__}"
    if isinstance(value_type, NewType):
        return value_type.__name__
    return repr(value_type)
