"""Overload sets for composite types such as tuples and unions.

An overload set maps value types to callables ``f(s, v)``. When a value is
processed, an overload registered for its exact type wins. Otherwise the
first one whose type it is an instance of is used. Each call returns what the
chosen overload returns, so the same set works for writing and reading.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional


class OverloadValue:
    """Overload that processes values of ``value_type`` as ``size``-byte values."""

    def __init__(self, value_type: type, size: int) -> None:
        self.value_type = value_type
        self.size = size

    def __call__(self, s, v):
        return s.value(self.size, v)


class OverloadExtValue:
    """Overload that applies ``extension`` with ``size``-byte inner values."""

    def __init__(self, value_type: type, size: int, extension) -> None:
        self.value_type = value_type
        self.size = size
        self.extension = extension

    def __call__(self, s, v):
        return s.ext_value(self.size, v, self.extension)


class OverloadExtObject:
    """Overload that applies ``extension`` using its object overload."""

    def __init__(self, value_type: type, extension) -> None:
        self.value_type = value_type
        self.extension = extension

    def __call__(self, s, v):
        return s.ext(v, self.extension)


class CompositeTypeOverloads:
    """A set of overloads, each given as an object with ``value_type`` or a
    ``(type, callable)`` pair."""

    def __init__(self, *args) -> None:
        overloads = []
        for arg in args:
            if isinstance(arg, tuple):
                if len(arg) != 2:
                    raise TypeError("an overload pair must be (type, callable)")
                value_type, fnc = arg
            else:
                value_type = getattr(arg, "value_type", None)
                fnc = arg
            if not isinstance(value_type, type):
                raise TypeError("every overload needs a value type")
            if not callable(fnc):
                raise TypeError("every overload must be callable")
            overloads.append((value_type, fnc))
        self._overloads = tuple(overloads)

    def _find(self, value) -> Optional[Callable]:
        for value_type, fnc in self._overloads:
            if type(value) is value_type:
                return fnc
        for value_type, fnc in self._overloads:
            if isinstance(value, value_type):
                return fnc
        return None

    def has_overload(self, value) -> bool:
        """True if some overload accepts ``value``."""
        return self._find(value) is not None

    def __call__(self, s, v):
        fnc = self._find(v)
        if fnc is None:
            raise TypeError(f"no overload for {type(v).__name__}")
        return fnc(s, v)

    def serialize_type(self, s, v):
        """Use an overload if one matches, otherwise process ``v`` as an object."""
        fnc = self._find(v)
        if fnc is not None:
            return fnc(s, v)
        return s.object(v)