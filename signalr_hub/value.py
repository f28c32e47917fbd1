"""Dynamically typed values exchanged with a hub, and invocation results."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class ValueType(enum.Enum):
    """The kind of data a :class:`SignalRValue` holds."""

    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NULL = "null"
    BOOLEAN = "boolean"
    BINARY = "binary"


@dataclass(frozen=True)
class SignalRValue:
    """A value of one of the hub's data kinds.

    Numbers are stored as floats, objects as dicts of string keys to values,
    arrays as tuples of values and binary data as bytes.
    """

    type: ValueType = ValueType.NULL
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> "SignalRValue":
        """Build a value from a plain Python object.

        Accepts None, bool, int, float, str, bytes, bytearray, mappings with
        string keys, lists and tuples, nested freely, and existing values.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, SignalRValue):
            return cls(value.type, value.value)
        if value is None:
            return cls(ValueType.NULL, None)
        # bool must be checked before int: bool is a subclass of int.
        if isinstance(value, bool):
            return cls(ValueType.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ValueType.NUMBER, float(value))
        if isinstance(value, str):
            return cls(ValueType.STRING, value)
        if isinstance(value, (bytes, bytearray)):
            return cls(ValueType.BINARY, bytes(value))
        if isinstance(value, Mapping):
            items = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"object keys must be strings, not {type(key).__name__}")
                items[key] = SignalRValue.of(item)
            return cls(ValueType.OBJECT, items)
        if isinstance(value, (list, tuple)):
            return cls(ValueType.ARRAY, tuple(SignalRValue.of(item) for item in value))
        raise TypeError(f"cannot convert {type(value).__name__} to a hub value")

    def to_python(self) -> Any:
        """Return the plain Python object this value represents."""
        if self.type is ValueType.OBJECT:
            return {key: item.to_python() for key, item in self.value.items()}
        if self.type is ValueType.ARRAY:
            return [item.to_python() for item in self.value]
        if self.type is ValueType.NUMBER:
            return float(self.value)
        if self.type is ValueType.BINARY:
            return bytes(self.value)
        return self.value


@dataclass(frozen=True)
class InvokeResult(SignalRValue):
    """The outcome of a hub method invocation: a value or an error."""

    is_error: bool = False
    error_message: str = ""

    @classmethod
    def error(cls, message: str) -> "InvokeResult":
        """Build a failed result carrying ``message`` and a null value."""
        return cls(ValueType.NULL, None, True, message)

    def has_error(self) -> bool:
        """True when the invocation failed."""
        return self.is_error