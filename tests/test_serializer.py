import enum

import pytest
from hypothesis import given
from hypothesis import strategies as st

from packwire.bit_packing import OutputBitPackingWrapper
from packwire.measure_size import MeasureSize
from packwire.serializer import Serializer, quick_serialization
from packwire.std_stack import StdStack


class _Writer(bytearray):
    """Growable byte array that acts as an output adapter."""

    @property
    def data(self):
        return bytes(self)

    def write_bytes(self, size, value):
        self.extend(value.to_bytes(size, "little"))

    def write_buffer(self, size, values):
        for value in values:
            self.extend(value.to_bytes(size, "little"))

    def current_write_pos(self):
        return len(self)

    def flush(self):
        pass

    def written_bytes_count(self):
        return len(self)

    def bit_packing_wrapper(self):
        return OutputBitPackingWrapper(self)


def _new(context=None):
    writer = _Writer()
    return writer, Serializer(writer, context)


def _written(action):
    writer, ser = _new()
    action(ser)
    return writer.data


class _TestData:
    def __init__(self, b4, vb2):
        self.b4 = b4
        self.vb2 = vb2

    def serialize(self, s):
        s.value4b(self.b4)

        def packed(sbp):
            sbp.adapter().write_bits(self.b4, 10)
            sbp.value4b(self.b4)
            sbp.container(self.vb2, 10, lambda s2, d: s2.adapter().write_bits(d, 8))

        s.enable_bit_packing(packed)
        s.container2b(self.vb2, 10)


class _Doubler:
    supports_value_overload = True
    supports_object_overload = False
    supports_lambda_overload = False

    def serialize(self, ser, obj, fnc):
        fnc(ser, obj * 2)


class _Mode(enum.Enum):
    A = 1
    B = 258


def test_measure_size_matches_written_size():
    data = _TestData(456, [45, 98, 189, 4])
    measured = quick_serialization(MeasureSize(), data)
    assert measured == 24
    assert measured == quick_serialization(_Writer(), data)


@pytest.mark.parametrize(
    "size,encoded",
    [
        (1, "some random text".encode()),
        (2, "some random text".encode("utf-16-le")),
        (4, "some random text".encode("utf-32-le")),
    ],
)
def test_text_units(size, encoded):
    assert _written(lambda s: s.text(size, "some random text", 1000)) == b"\x10" + encoded


def test_text_uses_size_not_nul_terminated_length():
    assert _written(lambda s: s.text4b("some random text\0xxx", 1000))[0] == 20
    t2 = "\0no one ca"
    assert _written(lambda s: s.text1b(t2, 1000)) == b"\x0a" + t2.encode()
    t3 = "never ending buffer"[:10]
    assert _written(lambda s: s.text1b(t3, 1000)) == b"\x0a" + t3.encode()


def test_c_array_serializes_text_length():
    t1 = bytearray(b"some text\0")
    assert _written(lambda s: s.text(1, t1)) == b"\x09some text"
    t1[0] = 0
    assert _written(lambda s: s.text(1, t1)) == b"\x00"


@pytest.mark.parametrize(
    "action,error",
    [
        (lambda s: s.text(2, [ord(c) for c in "some text"] + [ord("x")]), ValueError),
        (lambda s: s.text1b("larger text then allowed", 10), ValueError),
        (lambda s: s.text1b("abc"), TypeError),
        (lambda s: s.value1b(256), OverflowError),
        (lambda s: s.value4b("x"), TypeError),
        (lambda s: s.container4b([1, 2, 3], 2), ValueError),
        (lambda s: s.ext(21, _Doubler()), TypeError),
        (lambda s: s.ext(21, _Doubler(), lambda s2, v: s2.value1b(v)), TypeError),
    ],
)
def test_errors(action, error):
    writer, ser = _new()
    with pytest.raises(error):
        action(ser)
    assert writer.data == b""


def test_values_little_endian_and_twos_complement():
    result = _written(lambda s: (s.value2b(7549), s.value1b(-1), s.value4b(0.5)))
    assert result == (7549).to_bytes(2, "little") + b"\xff" + b"\x00\x00\x00\x3f"


def test_value_enum_uses_its_value():
    assert _written(lambda s: s.value2b(_Mode.B)) == b"\x02\x01"


def test_value16b_writes_sixteen_bytes():
    assert _written(lambda s: s.value16b(1)) == b"\x01" + b"\x00" * 15


def test_bool_value_without_bit_packing_is_byte():
    assert _written(lambda s: (s.bool_value(True), s.bool_value(False))) == b"\x01\x00"


def test_bool_value_with_bit_packing_is_bit():
    def packed(sbp):
        for flag in (True, False, True):
            sbp.bool_value(flag)

    assert _written(lambda s: s.enable_bit_packing(packed)) == b"\x05"


def test_enable_bit_packing_nested_reuses_serializer():
    seen = []

    def inner(nested):
        seen.append(nested)
        nested.bool_value(True)

    def outer(sbp):
        sbp.enable_bit_packing(inner)
        seen.append(sbp)
        sbp.bool_value(True)

    assert _written(lambda s: s.enable_bit_packing(outer)) == b"\x03"
    assert len(seen) == 2
    assert seen[0] is seen[1]


def test_dynamic_container_writes_size_then_elements():
    result = _written(lambda s: s.container([1, 2, 3], 10, lambda s2, v: s2.value1b(v)))
    assert result == b"\x03\x01\x02\x03"


def test_fixed_container_writes_no_size():
    result = _written(lambda s: s.container([1, 2], fnc=lambda s2, v: s2.value2b(v)))
    assert result == b"\x01\x00\x02\x00"


def test_container_two_byte_size_prefix():
    result = _written(lambda s: s.container1b([0] * 200, 1000))
    assert result[:2] == b"\x80\xc8"
    assert len(result) == 202


def test_container_values_fixed():
    assert _written(lambda s: s.container8b([1])) == b"\x01" + b"\x00" * 7


def test_container_values_with_other_widths():
    result = _written(lambda s: (s.container2b([1], 1), s.container16b([], 1)))
    assert result == b"\x01\x01\x00\x00"


@given(st.lists(st.integers(min_value=0, max_value=255), max_size=127))
def test_container1b_round_trip_bytes(values):
    assert _written(lambda s: s.container1b(values, 127)) == bytes([len(values)] + values)


def test_ext_value_overload():
    assert _written(lambda s: s.ext2b(21, _Doubler())) == b"\x2a\x00"


def test_ext4b_with_std_stack():
    expected = (
        b"\x02" + (3).to_bytes(4, "little") + (-4854 & 0xFFFFFFFF).to_bytes(4, "little")
    )
    assert _written(lambda s: s.ext4b([3, -4854], StdStack(10))) == expected


def test_ext_with_lambda_on_std_stack():
    result = _written(lambda s: s.ext([5, 6], StdStack(10), lambda s2, v: s2.value1b(v)))
    assert result == b"\x02\x05\x06"


def test_ext8b_ext1b_ext16b():
    result = _written(
        lambda s: (s.ext1b(1, _Doubler()), s.ext8b(1, _Doubler()), s.ext16b(0, _Doubler()))
    )
    assert len(result) == 1 + 8 + 16
    assert result[0] == 2


def test_call_processes_arguments_and_returns_self():
    writer, ser = _new()
    assert ser(True, False) is ser
    assert writer.data == b"\x01\x00"


def test_object_with_function():
    assert _written(lambda s: s.object(9, lambda s2, v: s2.value1b(v))) == b"\x09"


def test_adapter_and_context_are_returned():
    ctx = {"k": 1}
    writer, ser = _new(ctx)
    assert ser.adapter() is writer
    assert ser.context() is ctx


def test_context_passed_into_bit_packing_serializer():
    ctx = object()
    _, ser = _new(ctx)
    seen = []
    ser.enable_bit_packing(lambda sbp: seen.append(sbp.context()))
    assert seen == [ctx]


def test_quick_serialization_with_context():
    seen = []

    class _Obj:
        def serialize(self, s):
            seen.append(s.context())
            s.value1b(1)

    assert quick_serialization(_Writer(), _Obj(), "ctx") == 1
    assert seen == ["ctx"]