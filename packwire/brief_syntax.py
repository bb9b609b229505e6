"""Brief syntax: serialize values by their Python type.

``Serializer.__call__`` routes every argument through :func:`process_brief_syntax`.
Booleans take one byte (or one bit when bit packing is enabled), integers and
enum members eight bytes, floats eight bytes (double precision).  Objects with
a ``serialize(s)`` method are serialized through it.  Tuples behave as
fixed-size arrays.  A tuple of integers is rejected: wrap it with
:func:`as_text` or :func:`as_container` to say how it should be written.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

_INT_SIZE = 8
_FLOAT_SIZE = 8


@dataclass(frozen=True)
class AsText:
    """A fixed, NUL-terminated buffer of code units to be written as text."""

    obj: Any
    element_size: int = 1


@dataclass(frozen=True)
class AsContainer:
    """A fixed-size sequence to be written as a container, without a size prefix.

    With ``element_size`` set, the elements are written as values of that many
    bytes; otherwise each element goes through the brief syntax.
    """

    obj: Any
    element_size: Optional[int] = None


@dataclass(frozen=True)
class MaxSize:
    """A resizable sequence or string together with the largest size allowed."""

    obj: Any
    limit: int


def as_text(obj) -> AsText:
    """Mark a fixed buffer of one-byte code units as NUL-terminated text."""
    return AsText(obj)


def as_container(obj) -> AsContainer:
    """Mark a fixed-size sequence as a container of brief-syntax elements."""
    return AsContainer(obj)


def max_size(obj, limit: int) -> MaxSize:
    """Attach a maximum size to a resizable sequence or string."""
    return MaxSize(obj, limit)


def _is_integral(value) -> bool:
    return isinstance(value, int) and not isinstance(value, enum.Enum)


def process_brief_syntax(s, obj) -> None:
    """Serialize ``obj`` with ``s`` according to its type."""
    if isinstance(obj, AsText):
        s.text(obj.element_size, obj.obj)
    elif isinstance(obj, AsContainer):
        if obj.element_size is not None:
            s.container_values(obj.element_size, obj.obj)
        else:
            s.container(obj.obj, fnc=process_brief_syntax)
    elif isinstance(obj, MaxSize):
        if isinstance(obj.obj, str):
            s.text(1, obj.obj, obj.limit)
        else:
            s.container(obj.obj, obj.limit, process_brief_syntax)
    elif callable(getattr(obj, "serialize", None)):
        s.object(obj)
    elif isinstance(obj, bool):
        s.bool_value(obj)
    elif isinstance(obj, (int, enum.Enum)):
        s.value(_INT_SIZE, obj)
    elif isinstance(obj, float):
        s.value(_FLOAT_SIZE, obj)
    elif isinstance(obj, tuple):
        if any(_is_integral(item) for item in obj):
            raise TypeError(
                "use as_text(obj) or as_container(obj) for a tuple of integers"
            )
        s.container(obj, fnc=process_brief_syntax)
    else:
        raise TypeError(f"no serialization defined for {type(obj).__name__}")