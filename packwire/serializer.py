"""The serializer: writes values, text, containers and extensions to an adapter."""

from __future__ import annotations

import enum
import struct
from collections.abc import Callable, Iterable
from typing import Any, Optional

from .brief_syntax import process_brief_syntax

_FLOAT_FORMATS = {4: ("<f", "<I"), 8: ("<d", "<Q")}


def _to_integral(size: int, value) -> int:
    """Turn a bool, int, enum member or float into an unsigned ``size``-byte int."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, float):
        try:
            float_fmt, int_fmt = _FLOAT_FORMATS[size]
        except KeyError:
            raise TypeError(f"floats can only be written as 4 or 8 bytes, not {size}") from None
        return struct.unpack(int_fmt, struct.pack(float_fmt, value))[0]
    if not isinstance(value, int):
        raise TypeError(f"value must be an integer, float, bool or enum, not {type(value).__name__}")
    bits = size * 8
    if not -(1 << (bits - 1)) <= value < (1 << bits):
        raise OverflowError(f"value {value} does not fit in {size} bytes")
    return value & ((1 << bits) - 1)


def _code_units(size: int, text) -> list[int]:
    if isinstance(text, str):
        if size == 1:
            return list(text.encode("utf-8"))
        if size == 2:
            data = text.encode("utf-16-le")
            return list(struct.unpack(f"<{len(data) // 2}H", data))
        if size == 4:
            return [ord(ch) for ch in text]
        raise ValueError(f"unsupported code unit size {size}")
    return list(text)


class Serializer:
    """Writes data through an output adapter, optionally carrying a context."""

    def __init__(self, adapter, context: Any = None) -> None:
        self._adapter = adapter
        self._context = context
        self._bit_packing = callable(getattr(adapter, "write_bits", None))

    def adapter(self):
        return self._adapter

    def context(self):
        return self._context

    def object(self, obj, fnc: Optional[Callable] = None) -> None:
        """Serialize ``obj`` with ``fnc``, its ``serialize`` method, or by type."""
        if fnc is not None:
            fnc(self, obj)
            return
        serialize = getattr(obj, "serialize", None)
        if callable(serialize):
            serialize(self)
        else:
            process_brief_syntax(self, obj)

    def __call__(self, *args) -> Serializer:
        for arg in args:
            process_brief_syntax(self, arg)
        return self

    def value(self, size: int, v) -> None:
        self._adapter.write_bytes(size, _to_integral(size, v))

    def value1b(self, v) -> None:
        self.value(1, v)

    def value2b(self, v) -> None:
        self.value(2, v)

    def value4b(self, v) -> None:
        self.value(4, v)

    def value8b(self, v) -> None:
        self.value(8, v)

    def value16b(self, v) -> None:
        self.value(16, v)

    def enable_bit_packing(self, fnc: Callable) -> None:
        """Call ``fnc`` with a bit-packing serializer; aligns when it returns."""
        if self._bit_packing:
            fnc(self)
            return
        with self._adapter.bit_packing_wrapper() as wrapper:
            fnc(Serializer(wrapper, self._context))

    def ext(self, obj, extension, fnc: Optional[Callable] = None) -> None:
        """Serialize through ``extension``, using ``fnc`` or the object overload."""
        if fnc is not None:
            if not getattr(extension, "supports_lambda_overload", True):
                raise TypeError("extension doesn't support overload with a function")
            extension.serialize(self, obj, fnc)
            return
        if not getattr(extension, "supports_object_overload", True):
            raise TypeError("extension doesn't support overload with `object`")
        extension.serialize(self, obj, lambda s, v: s.object(v))

    def ext_value(self, size: int, obj, extension) -> None:
        """Serialize through ``extension``, writing inner values as ``size`` bytes."""
        if not getattr(extension, "supports_value_overload", True):
            raise TypeError("extension doesn't support overload with `value`")
        extension.serialize(self, obj, lambda s, v: s.value(size, v))

    def ext1b(self, obj, extension) -> None:
        self.ext_value(1, obj, extension)

    def ext2b(self, obj, extension) -> None:
        self.ext_value(2, obj, extension)

    def ext4b(self, obj, extension) -> None:
        self.ext_value(4, obj, extension)

    def ext8b(self, obj, extension) -> None:
        self.ext_value(8, obj, extension)

    def ext16b(self, obj, extension) -> None:
        self.ext_value(16, obj, extension)

    def bool_value(self, v: bool) -> None:
        """Write a bool as one bit when bit packing is enabled, else one byte."""
        bit = 1 if v else 0
        if self._bit_packing:
            self._adapter.write_bits(bit, 1)
        else:
            self._adapter.write_bytes(1, bit)

    def text(self, size: int, text, max_size: Optional[int] = None) -> None:
        """Write text as a length prefix and ``size``-byte code units.

        With ``max_size``, ``text`` is a resizable string (a ``str`` is encoded
        as UTF-8, UTF-16 or code points for sizes 1, 2 and 4) and all of it is
        written.  Without it, ``text`` is a fixed buffer of code units and only
        the part before the first NUL is written.
        """
        if max_size is None:
            if isinstance(text, str):
                raise TypeError("resizable text needs max_size")
            units = list(text)
            try:
                length = units.index(0)
            except ValueError:
                raise ValueError("fixed text buffer is not NUL-terminated") from None
            if length + 1 > len(units):
                raise ValueError("text does not fit in its buffer")
            units = units[:length]
        else:
            units = _code_units(size, text)
            if len(units) > max_size:
                raise ValueError(f"text length {len(units)} exceeds maximum {max_size}")
        self._write_size(len(units))
        self._write_values(size, units)

    def text1b(self, text, max_size: Optional[int] = None) -> None:
        self.text(1, text, max_size)

    def text2b(self, text, max_size: Optional[int] = None) -> None:
        self.text(2, text, max_size)

    def text4b(self, text, max_size: Optional[int] = None) -> None:
        self.text(4, text, max_size)

    def container(self, obj, max_size: Optional[int] = None, fnc: Optional[Callable] = None) -> None:
        """Write each element with ``fnc`` (or as an object).

        With ``max_size`` the container is resizable and its size is written
        first; without it, the container is fixed-size and no size is written.
        """
        if max_size is not None:
            self._check_and_write_size(len(obj), max_size)
        for item in obj:
            self.object(item, fnc)

    def container_values(self, size: int, obj, max_size: Optional[int] = None) -> None:
        """Write every element as a ``size``-byte value."""
        if size <= 0:
            raise ValueError("value size must be positive")
        if max_size is not None:
            self._check_and_write_size(len(obj), max_size)
        self._write_values(size, obj)

    def container1b(self, obj, max_size: Optional[int] = None) -> None:
        self.container_values(1, obj, max_size)

    def container2b(self, obj, max_size: Optional[int] = None) -> None:
        self.container_values(2, obj, max_size)

    def container4b(self, obj, max_size: Optional[int] = None) -> None:
        self.container_values(4, obj, max_size)

    def container8b(self, obj, max_size: Optional[int] = None) -> None:
        self.container_values(8, obj, max_size)

    def container16b(self, obj, max_size: Optional[int] = None) -> None:
        self.container_values(16, obj, max_size)

    def _check_and_write_size(self, size: int, max_size: int) -> None:
        if size > max_size:
            raise ValueError(f"container size {size} exceeds maximum {max_size}")
        self._write_size(size)

    def _write_values(self, size: int, values: Iterable) -> None:
        converted = [_to_integral(size, v) for v in values]
        if converted:
            self._adapter.write_buffer(size, converted)

    def _write_size(self, size: int) -> None:
        write = self._adapter.write_bytes
        if size < 0x80:
            write(1, size)
        elif size < 0x4000:
            write(1, (size >> 8) | 0x80)
            write(1, size & 0xFF)
        elif size < 0x40000000:
            write(1, (size >> 24) | 0xC0)
            write(1, (size >> 16) & 0xFF)
            write(2, size & 0xFFFF)
        else:
            raise ValueError(f"size {size} is too large to serialize")


def quick_serialization(adapter, value, context: Any = None) -> int:
    """Serialize ``value``, flush, and return the number of bytes written."""
    ser = Serializer(adapter, context)
    ser.object(value)
    adapter.flush()
    return adapter.written_bytes_count()