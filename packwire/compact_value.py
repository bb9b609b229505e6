"""Variable-length integer encoding.

Values wider than one byte are written seven bits per byte. The low bits come
first, and the high bit of each byte marks that another byte follows. Signed
values are zigzag-encoded first, so that small negative numbers stay short.
One-byte values are written as they are.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Optional

from .bit_packing import ReaderError


@dataclass(frozen=True)
class CompactValue:
    """Extension that writes an integer of ``size`` bytes in compact form.

    ``signed`` selects zigzag encoding. With ``enum_type`` set, the value is
    written as its enum's value and read back as a member of that enum.
    Reading does not check whether the encoded value fits in ``size`` bytes.
    """

    size: int = 8
    signed: bool = True
    enum_type: Optional[type] = None

    supports_value_overload: ClassVar[bool] = True
    supports_object_overload: ClassVar[bool] = False
    supports_lambda_overload: ClassVar[bool] = False
    _check_overflow: ClassVar[bool] = False

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("size must be positive")

    @property
    def _bits(self) -> int:
        return self.size * 8

    def _check_range(self, value: int) -> None:
        bits = self._bits
        if self.signed:
            low, high = -(1 << (bits - 1)), 1 << (bits - 1)
        else:
            low, high = 0, 1 << bits
        if not low <= value < high:
            raise OverflowError(f"value {value} does not fit in {self.size} bytes")

    def serialize(self, ser, obj, fnc=None) -> None:
        """Write ``obj`` through the serializer's adapter."""
        value = obj.value if isinstance(obj, enum.Enum) else obj
        if not isinstance(value, int):
            raise TypeError(f"compact value must be an integer, not {type(value).__name__}")
        self._check_range(value)
        writer = ser.adapter()
        bits = self._bits
        if self.size == 1:
            writer.write_bytes(1, value & 0xFF)
            return
        if self.signed:
            value = ((value << 1) ^ (value >> (bits - 1))) & ((1 << bits) - 1)
        while value > 0x7F:
            writer.write_bytes(1, (value & 0x7F) | 0x80)
            value >>= 7
        writer.write_bytes(1, value)

    def deserialize(self, des, obj=None, fnc=None):
        """Read and return a value; ``obj`` is not modified.

        Raises ValueError if ``enum_type`` is set and the value read is not
        one of its members.
        """
        reader = des.adapter()
        bits = self._bits
        mask = (1 << bits) - 1
        if self.size == 1:
            raw = reader.read_bytes(1) & 0xFF
            value = raw - 0x100 if self.signed and raw & 0x80 else raw
        else:
            raw = 0
            shift = 0
            byte = 0x80
            while shift < bits and byte > 0x7F:
                byte = reader.read_bytes(1)
                raw += (byte & 0x7F) << shift
                shift += 7
            raw &= mask
            if (
                self._check_overflow
                and getattr(reader, "check_data_errors", True)
                and shift > bits
                and byte >> (bits + 7 - shift)
            ):
                reader.set_error(ReaderError.INVALID_DATA)
            value = (raw >> 1) ^ -(raw & 1) if self.signed else raw
        if self.enum_type is not None:
            return self.enum_type(value)
        return value


@dataclass(frozen=True)
class CompactValueAsObject(CompactValue):
    """Compact value used through the object overload.

    While reading, this variant reports invalid data when the encoded value
    does not fit in ``size`` bytes.
    """

    supports_value_overload: ClassVar[bool] = False
    supports_object_overload: ClassVar[bool] = True
    supports_lambda_overload: ClassVar[bool] = False
    _check_overflow: ClassVar[bool] = True