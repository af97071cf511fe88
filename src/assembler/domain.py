"""Domain models used throughout the framework."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = ["CONSTRUCTOR", "PLACEHOLDER_PREFIX", "DataType", "TypedArg"]


CONSTRUCTOR = "__construct"
"""Method name under which constructor arguments are collected."""

PLACEHOLDER_PREFIX = ":"
"""Leading character marking a bound placeholder inside an argument."""


class DataType(Enum):
    """The kinds of value an argument can carry."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    OBJECT = "object"

    @classmethod
    def of(cls, value: Any) -> "DataType":
        """Infer the data type of a live Python value.

        ``bool`` is checked before ``int`` because it is a subclass of it.

        Example:
            >>> DataType.of(None)
            <DataType.NULL: 'null'>
            >>> DataType.of("localhost")
            <DataType.STRING: 'string'>
            >>> DataType.of(object())
            <DataType.OBJECT: 'object'>
        """
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        return cls.OBJECT


@dataclass(frozen=True)
class TypedArg:
    """A single argument waiting to be passed to a constructor or setter.

    Attributes:
        data_type: How ``data`` is turned into the value that is passed.
        data: For OBJECT arguments, a live object or the name of a component to
            resolve. For everything else, a raw value coerced to ``data_type``,
            or a bound placeholder such as ``":host"``.
        literal: True when the value came from a quoted token. Literal values
            are never treated as placeholders.
    """

    data_type: DataType
    data: Any
    literal: bool = False

    @property
    def is_reference(self) -> bool:
        return self.data_type is DataType.OBJECT and isinstance(self.data, str)

    @property
    def is_placeholder(self) -> bool:
        return (
            self.data_type is not DataType.OBJECT
            and not self.literal
            and isinstance(self.data, str)
            and self.data.startswith(PLACEHOLDER_PREFIX)
        )
