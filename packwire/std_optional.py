"""Serialization of optional values, where ``None`` means absent."""

from __future__ import annotations


class StdOptional:
    """Extension that writes a presence flag followed by the value, if any.

    ``align_before_data`` only matters when bit packing is enabled: the stream
    is then aligned to a byte boundary after the presence flag.
    """

    supports_value_overload = True
    supports_object_overload = True
    supports_lambda_overload = True

    def __init__(self, align_before_data: bool = True) -> None:
        self.align_before_data = align_before_data

    def serialize(self, ser, obj, fnc) -> None:
        ser.bool_value(obj is not None)
        if self.align_before_data:
            ser.adapter().align()
        if obj is not None:
            fnc(ser, obj)

    def deserialize(self, des, obj, fnc):
        """Read and return the optional value.

        When a value is present, ``fnc`` receives the current ``obj`` (``None``
        if there is none yet) and returns the value read.
        """
        exists = des.bool_value()
        if self.align_before_data:
            des.adapter().align()
        if exists:
            return fnc(des, obj)
        return None