"""Compact binary serialization: a serializer, a size-measuring adapter, bit packing and extensions."""

__version__ = "5.2.4"