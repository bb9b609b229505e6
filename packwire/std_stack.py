"""Serialization of stacks through their underlying sequence.

A stack is represented by a mutable sequence (a list or a deque) whose last
element is the top; it is written and read as a sized container.
"""

from __future__ import annotations

import sys

_UNLIMITED = sys.maxsize


class StdStack:
    """Extension that treats a stack as a container of at most ``max_size``."""

    supports_value_overload = True
    supports_object_overload = True
    supports_lambda_overload = True

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size

    def serialize(self, ser, obj, fnc) -> None:
        ser.container(obj, self.max_size, fnc)

    def deserialize(self, des, obj, fnc) -> None:
        des.container(obj, self.max_size, fnc)


def serialize_stack(s, obj, max_size: int = _UNLIMITED) -> None:
    """Serialize or deserialize ``obj`` as a stack with each element as an object."""
    s.ext(obj, StdStack(max_size))