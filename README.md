# packwire

A compact binary serialization library. Every value is written with an explicit
byte size. Containers and text carry their length. Parts of the stream can be
bit-packed, so that small values take only the bits they need.

## Installation

```
pip install packwire
```

To run the tests:

```
pip install "packwire[test]"
pytest
```

## Writing data

`packwire.serializer.Serializer(adapter, context)` writes through an output
adapter. An output adapter is any object with `write_bytes(size, value)`,
`write_buffer(size, values)`, `current_write_pos()`, `set_write_pos(pos)`,
`flush()` and `written_bytes_count()`.

- `value(size, v)` and `value1b` … `value16b` write a bool, int, enum member or
  float as `size` little-endian bytes. A float can only be written as 4 or 8
  bytes. A value that does not fit raises `OverflowError`.
- `bool_value(v)` writes one byte. Inside a bit-packed section it writes one bit.
- `text(size, text, max_size)` and `text1b`/`text2b`/`text4b` write a length
  prefix and then `size`-byte code units.
  - With `max_size`, a `str` is encoded as UTF-8 (size 1), UTF-16 (size 2) or
    code points (size 4).
  - Without `max_size`, `text` is a fixed buffer of code units. Only the part
    before the first NUL is written. A buffer with no NUL raises `ValueError`.
- `container(obj, max_size, fnc)` writes each element with `fnc`, or as an
  object if `fnc` is not given. `container_values(size, obj, max_size)` and
  `container1b` … `container16b` write each element as a `size`-byte value.
  - With `max_size`, the size is written first. If the container is larger
    than `max_size`, `ValueError` is raised.
  - Without `max_size`, the container is treated as fixed-size and no size is
    written.
- How sizes are encoded:

  | Size | Bytes written |
  | --- | --- |
  | below 0x80 | 1 |
  | below 0x4000 | 2 |
  | below 0x40000000 | 4 |
  | larger | `ValueError` |

- `object(obj, fnc)` calls, in order of preference:
  1. `fnc(s, obj)` if `fnc` is given;
  2. `obj.serialize(s)` if the object has that method;
  3. the brief syntax otherwise.
- `ext(obj, extension, fnc)`, `ext_value(size, obj, extension)` and `ext1b` …
  `ext16b` hand `obj` to an extension's `serialize(ser, obj, fnc)`.
- `enable_bit_packing(fnc)` calls `fnc` with a serializer whose adapter packs
  bits. The adapter comes from the output adapter's `bit_packing_wrapper()`.
  The stream is aligned to a whole byte when `fnc` returns.
- `quick_serialization(adapter, value, context)` serializes one object, flushes
  the adapter and returns `written_bytes_count()`.

## Adapters and bit packing

`packwire.measure_size.MeasureSize` is an output adapter that only counts
bytes. Use it to find out how large a value will be before you write it.

`packwire.bit_packing` provides:

- `OutputBitPackingWrapper` packs bits little-endian: the first bit written is
  the lowest bit of the first byte. `align()` pads with zero bits.
- `InputBitPackingWrapper` reads such data. On `align()`, non-zero padding sets
  `ReaderError.INVALID_DATA` on the wrapped reader.
- `MeasureSizeBitPackingWrapper` counts the bytes that bit-packed output would
  take.
- `ReaderError` is the error state of a reader: `NO_ERROR`, `DATA_OVERFLOW`,
  `INVALID_DATA` or `INVALID_POINTER`.

Each wrapper can be used as a context manager, and aligns on exit.

## Extensions

- **`packwire.compact_value.CompactValue(size, signed, enum_type)`** writes
  integers seven bits per byte, low bits first. Signed values are zigzag-encoded
  first. One-byte values are written as they are. `deserialize` reads and
  returns the value.
- **`packwire.compact_value.CompactValueAsObject`** is used through the object
  overload. While reading, it also sets `ReaderError.INVALID_DATA` when the
  encoded value does not fit in `size` bytes.
- **`packwire.std_optional.StdOptional(align_before_data=True)`** writes a
  presence flag, where `None` means absent, and then the value if there is one.
  It aligns after the flag by default.
- **`packwire.std_stack.StdStack(max_size)`** writes a list or deque, whose last
  element is the top, as a container of at most `max_size` elements.
  `serialize_stack(s, obj, max_size)` is the short form.
- **`packwire.composite_overloads`** selects how each element of a composite
  value is handled:
  - `CompositeTypeOverloads` is the overload set. An exact type match wins;
    otherwise the first `isinstance` match is used.
  - `OverloadValue`, `OverloadExtValue` and `OverloadExtObject` are ready-made
    overloads.
- **`packwire.rtti.StandardRTTI`** provides:
  - `type_id` and `get`: a stable 64-bit type identifier;
  - `cast`;
  - `is_polymorphic`.

## Brief syntax

`packwire.brief_syntax` lets you call a serializer directly, as in
`s(a, b, c)`. Each argument is handled by its type:

- bools are written with `bool_value`;
- ints and enum members are written as 8 bytes;
- floats are written as 8-byte doubles;
- objects with a `serialize` method are written through that method;
- tuples are written as fixed-size arrays. A tuple of integers raises
  `TypeError`.

Three wrappers control how a sequence is written:

- `as_text(obj)` writes a NUL-terminated buffer;
- `as_container(obj)` writes a fixed-size container;
- `max_size(obj, limit)` writes a resizable sequence or string with a size
  prefix.

## What the package does not do

packwire has no deserializer and ships no byte-buffer or stream adapters.

You supply:

- the output adapter, unless `MeasureSize` is enough;
- the reader that the extensions' `deserialize` methods are given.

Those methods use the reader as follows:

- `CompactValue.deserialize` reads through `des.adapter().read_bytes(1)`.
- `StdOptional.deserialize` calls `des.bool_value()` and
  `des.adapter().align()`.
- `StdStack.deserialize` calls `des.container(obj, max_size, fnc)`.

## Example

```python
from packwire.measure_size import MeasureSize
from packwire.serializer import Serializer

adapter = MeasureSize()
ser = Serializer(adapter, None)
ser.value4b(456)
ser.container2b([45, 98, 189, 4], 10)
print(adapter.written_bytes_count())  # 13
```