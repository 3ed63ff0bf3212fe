import struct

from h5animate.errors import SizeMismatch

from .buffer import BufferLike, splice

UINT32LE = struct.Struct('<I')
U32_MAX = 0xFFFFFFFF


class BinaryReader:
    """Sequential little-endian reader over an in-memory buffer.

    Every read is bounds checked against the buffer length and raises
    FileTruncated carrying the offset the read started at.
    """

    def __init__(self, buffer: BufferLike) -> None:
        self._buffer = memoryview(buffer).cast('B')
        self._offset = 0

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._offset

    def has_more(self) -> bool:
        return self._offset < len(self._buffer)

    def read_bytes(self, size: int) -> memoryview:
        data = splice(self._buffer, self._offset, size)
        self._offset += size
        return data

    def read_u32le(self) -> int:
        return UINT32LE.unpack(self.read_bytes(UINT32LE.size))[0]

    def read_ascii_string(self, size: int) -> str:
        # non-ascii bytes are replaced, so the char count always matches `size`
        return bytes(self.read_bytes(size)).decode('ascii', errors='replace')


class BinaryWriter:
    """Sequential little-endian writer into a buffer of exact, fixed size."""

    def __init__(self, total_size: int) -> None:
        self._buffer = bytearray(total_size)
        self._offset = 0

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def offset(self) -> int:
        return self._offset

    def _reserve(self, size: int) -> int:
        offset = self._offset
        if offset + size > len(self._buffer):
            raise SizeMismatch('output buffer', len(self._buffer), offset + size, offset)
        self._offset += size
        return offset

    def write_bytes(self, data: BufferLike) -> None:
        offset = self._reserve(len(data))
        self._buffer[offset : offset + len(data)] = data

    def write_u32le(self, value: int) -> None:
        UINT32LE.pack_into(self._buffer, self._reserve(UINT32LE.size), value)

    def write_ascii_string(self, value: str) -> None:
        self.write_bytes(value.encode('ascii', errors='replace'))

    def getvalue(self) -> bytes:
        if self._offset != len(self._buffer):
            raise SizeMismatch('output buffer', len(self._buffer), self._offset)
        return bytes(self._buffer)
