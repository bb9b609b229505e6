"""An output adapter that only measures how many bytes would be written."""

from __future__ import annotations

from collections.abc import Sequence

from .bit_packing import MeasureSizeBitPackingWrapper


class MeasureSize:
    """Tracks the write position and the furthest byte ever written."""

    def __init__(self) -> None:
        self._furthest = 0
        self._pos = 0

    def write_bytes(self, size: int, value: int) -> None:
        """Advance by one value of ``size`` bytes; the value itself is ignored."""
        self._pos += size

    def write_buffer(self, size: int, values: Sequence[int]) -> None:
        """Advance by ``len(values)`` values of ``size`` bytes each."""
        self._pos += size * len(values)

    def current_write_pos(self) -> int:
        return self._pos

    def set_write_pos(self, pos: int) -> None:
        self._furthest = max(self._furthest, self._pos, pos)
        self._pos = pos

    def align(self) -> None:
        """Positions are whole bytes already; record the furthest one reached."""
        self._furthest = max(self._furthest, self._pos)

    def flush(self) -> None:
        """Nothing is buffered; record the furthest position reached."""
        self.align()

    def written_bytes_count(self) -> int:
        """Size in bytes of everything measured so far."""
        return max(self._pos, self._furthest)

    def bit_packing_wrapper(self) -> MeasureSizeBitPackingWrapper:
        return MeasureSizeBitPackingWrapper(self)