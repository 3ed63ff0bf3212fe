from typing import Any

from h5animate.errors import SizeMismatch
from h5animate.kernel.stream import U32_MAX, BinaryWriter
from h5animate.settings import DEFAULT, CodecSetting
from h5animate.validation import (
    check_encode_input,
    validate_metadata,
    validate_pixel_payload,
    validate_sprite_info,
)

from .header import HEADER_SIZE, SIGNATURE, VERSION, encode_header
from .meta import pack_metadata
from .sprite import encode_sprite_table, sprite_table_size
from .types import FormatHeader


def _check_u32(field: str, size: int) -> int:
    if size > U32_MAX:
        raise SizeMismatch(field, U32_MAX, size)
    return size


def encode(
    meta: Any, sprite_info: Any, pixel_payload: Any, cfg: CodecSetting = DEFAULT
) -> bytes:
    check_encode_input(meta, sprite_info, pixel_payload)
    metadata = validate_metadata(meta)
    info = validate_sprite_info(sprite_info)
    payload = validate_pixel_payload(pixel_payload)

    meta_bytes = pack_metadata(metadata)
    image_data_size = sprite_table_size(info.count) + len(payload)
    header = FormatHeader(
        signature=SIGNATURE,
        version=VERSION,
        image_data_size=_check_u32('imageDataSize', image_data_size),
        meta_data_size=_check_u32('metaDataSize', len(meta_bytes)),
    )

    writer = BinaryWriter(HEADER_SIZE + image_data_size + len(meta_bytes))
    encode_header(writer, header)
    encode_sprite_table(writer, info)
    writer.write_bytes(payload)
    writer.write_bytes(meta_bytes)

    cfg.logger.debug(
        f'encoded {len(metadata.frame)} frames into {len(writer)} bytes'
        f' (image data {image_data_size}, metadata {len(meta_bytes)})'
    )
    return writer.getvalue()
