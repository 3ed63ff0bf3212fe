"""Entry points most callers need.

    animation = decode(buffer)
    buffer = encode(animation.metadata, animation.sprite_info, animation.pixel_payload)
    buffer = await convert_legacy(json.loads(text))
    frame = await extract_frame(animation, 0, frame_height=100)
"""

from typing import Any, List, Optional, Union

from h5animate.anim import decode as _decode
from h5animate.anim import encode as _encode
from h5animate.anim.types import DecodedAnimation, LegacyAnimateFile
from h5animate.graphics import sheet
from h5animate.graphics.codec import PillowCodec, PixelCodec
from h5animate.kernel.buffer import BufferLike
from h5animate.legacy import convert as _convert
from h5animate.settings import DEFAULT, PACK, CodecSetting, PackSetting


def decode(buffer: BufferLike, cfg: CodecSetting = DEFAULT) -> DecodedAnimation:
    return _decode.decode(buffer, cfg)


def encode(
    metadata: Any, sprite_info: Any, pixel_payload: Any, cfg: CodecSetting = DEFAULT
) -> bytes:
    return _encode.encode(metadata, sprite_info, pixel_payload, cfg)


async def convert_legacy(
    legacy_data: Any,
    setting: PackSetting = PACK,
    codec: Optional[PixelCodec] = None,
) -> bytes:
    return await _convert.convert_to_new_format(legacy_data, setting, codec)


async def convert_from_json(
    text: Union[str, bytes],
    setting: PackSetting = PACK,
    codec: Optional[PixelCodec] = None,
) -> bytes:
    return await _convert.convert_from_json(text, setting, codec)


def parse_legacy(text: Union[str, bytes]) -> LegacyAnimateFile:
    return _convert.parse_legacy(text)


async def extract_frame(
    animation: DecodedAnimation,
    frame_index: int,
    frame_height: int,
    frame_width: Optional[int] = None,
    codec: Optional[PixelCodec] = None,
) -> bytes:
    return await sheet.extract_frame_by_index(
        codec or PillowCodec(),
        animation.pixel_payload,
        frame_index,
        frame_height,
        frame_width,
    )


async def extract_frames(
    animation: DecodedAnimation,
    frame_height: int,
    frame_count: Optional[int] = None,
    codec: Optional[PixelCodec] = None,
) -> List[bytes]:
    return await sheet.extract_all_frames(
        codec or PillowCodec(), animation.pixel_payload, frame_height, frame_count
    )
