import deal

from h5animate.errors import FileTruncated
from h5animate.kernel.stream import BinaryReader, BinaryWriter

from .types import SpriteDimension, SpriteInfo

COUNT_SIZE = 4
DIMENSION_SIZE = 8


@deal.pre(lambda _: _.count >= 0)
@deal.ensure(lambda _: _.result == COUNT_SIZE + DIMENSION_SIZE * _.count)
@deal.has()
def sprite_table_size(count: int) -> int:
    return COUNT_SIZE + DIMENSION_SIZE * count


def decode_sprite_table(reader: BinaryReader) -> SpriteInfo:
    count = reader.read_u32le()
    if DIMENSION_SIZE * count > reader.remaining:
        raise FileTruncated(reader.offset, DIMENSION_SIZE * count, reader.remaining)
    dimensions = [
        SpriteDimension(width=reader.read_u32le(), height=reader.read_u32le())
        for _ in range(count)
    ]
    return SpriteInfo(count=count, dimensions=dimensions)


def encode_sprite_table(writer: BinaryWriter, info: SpriteInfo) -> None:
    writer.write_u32le(info.count)
    for dimension in info.dimensions:
        writer.write_u32le(dimension.width)
        writer.write_u32le(dimension.height)
