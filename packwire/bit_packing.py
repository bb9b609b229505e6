"""Bit-level packing layered over byte-oriented readers and writers.

The wrapped adapters work in whole bytes.  The wrappers here keep a small
scratch register so that values can be written or read using any number of
bits; whole-byte operations pass straight through while the register is
empty.  Bits are packed little-endian: the first bit written is the lowest
bit of the first byte.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from typing import Protocol

_UNIT_BITS = 8


class ReaderError(enum.Enum):
    """Error state reported by input adapters."""

    NO_ERROR = enum.auto()
    DATA_OVERFLOW = enum.auto()
    INVALID_DATA = enum.auto()
    INVALID_POINTER = enum.auto()


class _InputAdapter(Protocol):
    def read_bytes(self, size: int) -> int: ...

    def read_buffer(self, size: int, count: int) -> Sequence[int]: ...

    def current_read_pos(self) -> int: ...

    def set_read_pos(self, pos: int) -> None: ...

    def current_read_end_pos(self) -> int: ...

    def set_read_end_pos(self, pos: int) -> None: ...

    def is_completed_successfully(self) -> bool: ...

    def error(self) -> ReaderError: ...

    def set_error(self, error: ReaderError) -> None: ...


class _OutputAdapter(Protocol):
    def write_bytes(self, size: int, value: int) -> None: ...

    def write_buffer(self, size: int, values: Sequence[int]) -> None: ...

    def current_write_pos(self) -> int: ...

    def set_write_pos(self, pos: int) -> None: ...

    def flush(self) -> None: ...

    def written_bytes_count(self) -> int: ...


def _low_bits(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


class InputBitPackingWrapper:
    """Reads bit-packed data from a byte-oriented input adapter.

    Used as a context manager, it aligns to the next byte boundary on exit.
    """

    def __init__(self, adapter: _InputAdapter) -> None:
        self._wrapped = adapter
        self._scratch = 0
        self._scratch_bits = 0
        self._check_data_errors = bool(getattr(adapter, "check_data_errors", True))

    def __enter__(self) -> InputBitPackingWrapper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.align()

    def read_bytes(self, size: int) -> int:
        """Read an unsigned value of ``size`` bytes."""
        if not self._scratch_bits:
            return self._wrapped.read_bytes(size)
        return self._read_bits_internal(size * _UNIT_BITS)

    def read_buffer(self, size: int, count: int) -> list[int]:
        """Read ``count`` unsigned values of ``size`` bytes each."""
        if not self._scratch_bits:
            return list(self._wrapped.read_buffer(size, count))
        return [self._read_bits_internal(size * _UNIT_BITS) for _ in range(count)]

    def read_bits(self, bits_count: int) -> int:
        """Read an unsigned value stored in ``bits_count`` bits."""
        if bits_count < 0:
            raise ValueError("bits_count must not be negative")
        return self._read_bits_internal(bits_count)

    def align(self) -> None:
        """Skip to the next byte boundary; non-zero padding is invalid data."""
        if self._scratch_bits:
            padding = self._read_bits_internal(self._scratch_bits)
            if self._check_data_errors and padding:
                self.set_error(ReaderError.INVALID_DATA)

    def current_read_pos(self) -> int:
        return self._wrapped.current_read_pos()

    def set_read_pos(self, pos: int) -> None:
        self.align()
        self._wrapped.set_read_pos(pos)

    def current_read_end_pos(self) -> int:
        return self._wrapped.current_read_end_pos()

    def set_read_end_pos(self, pos: int) -> None:
        self._wrapped.set_read_end_pos(pos)

    def is_completed_successfully(self) -> bool:
        return self._wrapped.is_completed_successfully()

    def error(self) -> ReaderError:
        return self._wrapped.error()

    def set_error(self, error: ReaderError) -> None:
        self._wrapped.set_error(error)

    def _read_bits_internal(self, size: int) -> int:
        result = 0
        bits_left = size
        while bits_left > 0:
            bits = min(bits_left, _UNIT_BITS)
            if self._scratch_bits < bits:
                byte = self._wrapped.read_bytes(1)
                self._scratch |= byte << self._scratch_bits
                self._scratch_bits += _UNIT_BITS
            result |= _low_bits(self._scratch, bits) << (size - bits_left)
            self._scratch >>= bits
            self._scratch_bits -= bits
            bits_left -= bits
        return result


class OutputBitPackingWrapper:
    """Writes bit-packed data to a byte-oriented output adapter.

    Used as a context manager, it pads to the next byte boundary on exit.
    """

    def __init__(self, adapter: _OutputAdapter) -> None:
        self._wrapped = adapter
        self._scratch = 0
        self._scratch_bits = 0

    def __enter__(self) -> OutputBitPackingWrapper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.align()

    def bit_packing_wrapper(self) -> OutputBitPackingWrapper:
        """Bit packing is already enabled, so this is the wrapper itself."""
        return self

    def write_bytes(self, size: int, value: int) -> None:
        """Write ``value`` as ``size`` bytes (two's complement if negative)."""
        if not self._scratch_bits:
            self._wrapped.write_bytes(size, value)
        else:
            bits = size * _UNIT_BITS
            self._write_bits_internal(_low_bits(value, bits), bits)

    def write_buffer(self, size: int, values: Iterable[int]) -> None:
        """Write every value in ``values`` as ``size`` bytes."""
        if not self._scratch_bits:
            self._wrapped.write_buffer(size, list(values))
        else:
            bits = size * _UNIT_BITS
            for value in values:
                self._write_bits_internal(_low_bits(value, bits), bits)

    def write_bits(self, value: int, bits_count: int) -> None:
        """Write an unsigned ``value`` using exactly ``bits_count`` bits."""
        if bits_count <= 0:
            raise ValueError("bits_count must be positive")
        if value < 0 or value >> bits_count:
            raise ValueError(f"value {value} does not fit in {bits_count} bits")
        self._write_bits_internal(value, bits_count)

    def align(self) -> None:
        """Pad with zero bits up to the next byte boundary."""
        self._write_bits_internal(0, (_UNIT_BITS - self._scratch_bits) % _UNIT_BITS)

    def current_write_pos(self) -> int:
        return self._wrapped.current_write_pos()

    def set_write_pos(self, pos: int) -> None:
        self.align()
        self._wrapped.set_write_pos(pos)

    def flush(self) -> None:
        self.align()
        self._wrapped.flush()

    def written_bytes_count(self) -> int:
        return self._wrapped.written_bytes_count()

    def _write_bits_internal(self, value: int, size: int) -> None:
        bits_left = size
        while bits_left > 0:
            bits = min(bits_left, _UNIT_BITS)
            self._scratch |= _low_bits(value, bits) << self._scratch_bits
            self._scratch_bits += bits
            if self._scratch_bits >= _UNIT_BITS:
                self._wrapped.write_bytes(1, _low_bits(self._scratch, _UNIT_BITS))
                self._scratch >>= _UNIT_BITS
                self._scratch_bits -= _UNIT_BITS
            value >>= bits
            bits_left -= bits


class MeasureSizeBitPackingWrapper:
    """Counts the bytes that bit-packed output would take, writing nothing."""

    def __init__(self, adapter) -> None:
        self._wrapped = adapter
        self._scratch_bits = 0

    def __enter__(self) -> MeasureSizeBitPackingWrapper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.align()

    def bit_packing_wrapper(self) -> MeasureSizeBitPackingWrapper:
        """Bit packing is already enabled, so this is the wrapper itself."""
        return self

    def write_bytes(self, size: int, value: int) -> None:
        self._wrapped.write_bytes(size, value)

    def write_buffer(self, size: int, values: Sequence[int]) -> None:
        self._wrapped.write_buffer(size, values)

    def write_bits(self, value: int, bits_count: int) -> None:
        self._scratch_bits += bits_count
        while self._scratch_bits >= _UNIT_BITS:
            self._write_one_byte()
            self._scratch_bits -= _UNIT_BITS

    def align(self) -> None:
        if self._scratch_bits > 0:
            self._scratch_bits = 0
            self._write_one_byte()

    def current_write_pos(self) -> int:
        return self._wrapped.current_write_pos()

    def set_write_pos(self, pos: int) -> None:
        self.align()
        self._wrapped.set_write_pos(pos)

    def flush(self) -> None:
        self.align()
        self._wrapped.flush()

    def written_bytes_count(self) -> int:
        return self._wrapped.written_bytes_count()

    def _write_one_byte(self) -> None:
        self._wrapped.write_bytes(1, 0)