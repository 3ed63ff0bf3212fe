from typing import Union

import deal

from h5animate.errors import FileTruncated

BufferLike = Union[bytes, bytearray, memoryview]


def is_buffer(value: object) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


@deal.chain(
    deal.pre(lambda _: _.size >= 0),
    deal.pre(lambda _: 0 <= _.offset <= len(_.buffer)),
    deal.raises(FileTruncated),
    deal.reason(FileTruncated, lambda _: _.offset + _.size > len(_.buffer)),
    deal.has(),
)
def splice(buffer: BufferLike, offset: int, size: int) -> memoryview:
    """Zero-copy view of `size` bytes at `offset`."""
    if offset + size > len(buffer):
        raise FileTruncated(offset, size, len(buffer) - offset)
    return memoryview(buffer)[offset : offset + size]
