import struct

import deal
import pytest

from h5animate.errors import FileTruncated, SizeMismatch
from h5animate.kernel.buffer import splice
from h5animate.kernel.stream import BinaryReader, BinaryWriter


def test_read_u32le_is_little_endian():
    reader = BinaryReader(struct.pack('<2I', 1, 0xDEADBEEF))
    assert reader.read_u32le() == 1
    assert reader.read_u32le() == 0xDEADBEEF
    assert reader.offset == 8
    assert not reader.has_more()


def test_read_ascii_string_and_bytes():
    reader = BinaryReader(b'ANIMxyz')
    assert reader.read_ascii_string(4) == 'ANIM'
    view = reader.read_bytes(3)
    assert isinstance(view, memoryview)
    assert bytes(view) == b'xyz'
    assert reader.remaining == 0


def test_read_ascii_string_keeps_length_for_non_ascii_bytes():
    reader = BinaryReader(b'\xff\xd8AB')
    text = reader.read_ascii_string(4)
    assert len(text) == 4
    assert text != 'ANIM'


def test_read_past_end_raises_with_offset():
    reader = BinaryReader(b'\x01\x00\x00\x00\x02\x00')
    reader.read_u32le()
    with pytest.raises(FileTruncated) as excinfo:
        reader.read_u32le()
    assert excinfo.value.position == 4
    assert excinfo.value.expected == 4
    assert excinfo.value.available == 2
    # failed read does not move the cursor
    assert reader.offset == 4


def test_read_zero_bytes_at_end():
    reader = BinaryReader(b'ab')
    reader.read_bytes(2)
    assert bytes(reader.read_bytes(0)) == b''


def test_splice_rejects_negative_size():
    with pytest.raises(deal.PreContractError):
        splice(b'abc', 0, -1)


def test_writer_fills_exact_buffer():
    writer = BinaryWriter(12)
    writer.write_ascii_string('ANIM')
    writer.write_u32le(7)
    writer.write_bytes(b'\x01\x02\x03\x04')
    assert writer.offset == 12
    assert writer.getvalue() == b'ANIM\x07\x00\x00\x00\x01\x02\x03\x04'


def test_writer_does_not_grow():
    writer = BinaryWriter(4)
    writer.write_u32le(1)
    with pytest.raises(SizeMismatch):
        writer.write_bytes(b'x')


def test_writer_refuses_partial_result():
    writer = BinaryWriter(8)
    writer.write_u32le(1)
    with pytest.raises(SizeMismatch):
        writer.getvalue()
