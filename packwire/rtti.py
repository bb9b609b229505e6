"""Run-time type information used to identify polymorphic objects."""

from __future__ import annotations

from typing import Optional

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK64 = (1 << 64) - 1

_VALUE_TYPES = (bool, int, float, complex, str, bytes, bytearray, type(None))


def _fnv1a(text: str) -> int:
    result = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        result ^= byte
        result = (result * _FNV_PRIME) & _MASK64
    return result


class StandardRTTI:
    """Type identification based on a class's qualified name."""

    @staticmethod
    def type_id(cls) -> int:
        """Return a 64-bit identifier for ``cls``, stable across processes."""
        if not isinstance(cls, type):
            raise TypeError(f"expected a class, not {type(cls).__name__}")
        return _fnv1a(f"{cls.__module__}.{cls.__qualname__}")

    @staticmethod
    def get(obj) -> int:
        """Return the identifier of ``obj``'s run-time type."""
        return StandardRTTI.type_id(type(obj))

    @staticmethod
    def cast(obj, cls) -> Optional[object]:
        """Return ``obj`` if it is an instance of ``cls``, else ``None``."""
        return obj if isinstance(obj, cls) else None

    @staticmethod
    def is_polymorphic(cls) -> bool:
        """True for classes whose instances may have a different run-time type.

        Plain value types (numbers, strings, bytes, ``None``) are not.
        """
        return isinstance(cls, type) and not issubclass(cls, _VALUE_TYPES)