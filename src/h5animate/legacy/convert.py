import base64
import json
from typing import Any, List, Optional, Sequence, Union

from h5animate.anim.encode import encode
from h5animate.anim.meta import expand_object
from h5animate.anim.types import (
    AnimatedObject,
    AnimationMetadata,
    Frame,
    LegacyAnimateFile,
    PackedSheet,
    Sound,
)
from h5animate.errors import Base64DecodeError, ConversionFailed, TypeMismatch
from h5animate.graphics.codec import PillowCodec, PixelCodec
from h5animate.graphics.sheet import pack
from h5animate.settings import PACK, PackSetting
from h5animate.validation import (
    is_array,
    type_name,
    validate_animated_object,
    validate_legacy,
)

LEGACY_PATH = 'legacyData'


def parse_legacy(text: Union[str, bytes]) -> LegacyAnimateFile:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise ConversionFailed(f'cannot parse JSON: {exc}') from exc
    return validate_legacy(data, LEGACY_PATH)


def convert_frame_layer(layer: Any, path: str = 'layer') -> AnimatedObject:
    if not is_array(layer):
        raise TypeMismatch(path, 'array', type_name(layer))
    return validate_animated_object(expand_object(layer, path), path)


def convert_sound_data(
    legacy: LegacyAnimateFile, frame_index: int
) -> Optional[List[Sound]]:
    if not legacy.se:
        return None

    if isinstance(legacy.se, str):
        # a single global sound plays on the first frame only
        return [Sound(name=legacy.se)] if frame_index == 0 else None

    name = legacy.se.get(frame_index)
    if not name:
        return None
    pitch = (legacy.pitch or {}).get(frame_index)
    return [Sound(name=name, pitch=pitch)]


def convert_metadata(legacy: LegacyAnimateFile) -> AnimationMetadata:
    frames = []
    for idx in range(legacy.frame_max):
        layers = legacy.frames[idx] if idx < len(legacy.frames) else None
        objects = [
            convert_frame_layer(layer, f'{LEGACY_PATH}.frames[{idx}][{lidx}]')
            for lidx, layer in enumerate(layers)
        ] if layers else None
        frames.append(Frame(sound=convert_sound_data(legacy, idx), objects=objects))
    return AnimationMetadata(ratio=legacy.ratio, frame=frames)


def decode_bitmap(bitmap: str, path: str = 'bitmap') -> bytes:
    """Decode a Base64 image, with or without a data URI prefix."""
    content = bitmap.split(',', 1)[1] if ',' in bitmap else bitmap
    content = ''.join(content.split())
    try:
        data = base64.b64decode(content, validate=True)
    except ValueError as exc:
        raise Base64DecodeError(str(exc), path) from exc
    if not data:
        raise Base64DecodeError('no image data', path)
    return data


async def convert_images(
    codec: PixelCodec, bitmaps: Sequence[str], setting: PackSetting = PACK
) -> PackedSheet:
    images = [
        decode_bitmap(bitmap, f'{LEGACY_PATH}.bitmaps[{idx}]')
        for idx, bitmap in enumerate(bitmaps)
        if bitmap
    ]
    if not images:
        raise ConversionFailed('no valid bitmap to convert')
    setting.logger.debug(
        f'converting {len(images)} bitmaps, skipped {len(bitmaps) - len(images)} empty'
    )
    return await pack(codec, images, setting)


async def convert_to_new_format(
    legacy_data: Any,
    setting: PackSetting = PACK,
    codec: Optional[PixelCodec] = None,
) -> bytes:
    legacy = validate_legacy(legacy_data, LEGACY_PATH)
    sheet = await convert_images(codec or PillowCodec(), legacy.bitmaps, setting)
    metadata = convert_metadata(legacy)
    return encode(metadata, sheet.sprite_info, sheet.pixel_payload, setting)


async def convert_from_json(
    text: Union[str, bytes],
    setting: PackSetting = PACK,
    codec: Optional[PixelCodec] = None,
) -> bytes:
    return await convert_to_new_format(parse_legacy(text), setting, codec)
