from h5animate.errors import SizeMismatch
from h5animate.kernel.buffer import BufferLike
from h5animate.kernel.stream import BinaryReader
from h5animate.settings import DEFAULT, CodecSetting
from h5animate.validation import validate_sprite_info

from .header import HEADER_SIZE, decode_header
from .meta import unpack_metadata
from .sprite import decode_sprite_table, sprite_table_size
from .types import DecodedAnimation


def decode(buffer: BufferLike, cfg: CodecSetting = DEFAULT) -> DecodedAnimation:
    reader = BinaryReader(buffer)
    header = decode_header(reader, cfg)
    sprite_info = validate_sprite_info(decode_sprite_table(reader))

    table_size = sprite_table_size(sprite_info.count)
    payload_size = header.image_data_size - table_size
    if payload_size < 0:
        raise SizeMismatch(
            'imageDataSize', header.image_data_size, table_size, HEADER_SIZE
        )
    pixel_payload = bytes(reader.read_bytes(payload_size))

    meta_offset = reader.offset
    metadata = unpack_metadata(reader.read_bytes(header.meta_data_size), meta_offset)

    if reader.has_more():
        if cfg.strict:
            raise SizeMismatch('file', reader.offset, len(reader), reader.offset)
        cfg.logger.warning(
            f'ignoring {reader.remaining} trailing bytes at offset {reader.offset}'
        )

    cfg.logger.debug(
        f'decoded {len(metadata.frame)} frames, {sprite_info.count} sprite sheets,'
        f' {payload_size} pixel bytes, {header.meta_data_size} metadata bytes'
    )
    return DecodedAnimation(metadata, sprite_info, pixel_payload)
