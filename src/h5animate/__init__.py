from h5animate.anim.types import (
    AnimatedObject,
    AnimationMetadata,
    DecodedAnimation,
    FormatHeader,
    Frame,
    LegacyAnimateFile,
    PackedSheet,
    Sound,
    SpriteDimension,
    SpriteInfo,
)
from h5animate.api import (
    convert_from_json,
    convert_legacy,
    decode,
    encode,
    extract_frame,
    extract_frames,
    parse_legacy,
)
from h5animate.errors import ErrorCode, H5AnimateError, describe_code
from h5animate.graphics.codec import PillowCodec, PixelCodec
from h5animate.settings import DEFAULT, PACK, CodecSetting, PackSetting

__all__ = [
    'AnimatedObject',
    'AnimationMetadata',
    'CodecSetting',
    'DEFAULT',
    'DecodedAnimation',
    'ErrorCode',
    'FormatHeader',
    'Frame',
    'H5AnimateError',
    'LegacyAnimateFile',
    'PACK',
    'PackSetting',
    'PackedSheet',
    'PillowCodec',
    'PixelCodec',
    'Sound',
    'SpriteDimension',
    'SpriteInfo',
    'convert_from_json',
    'convert_legacy',
    'decode',
    'describe_code',
    'encode',
    'extract_frame',
    'extract_frames',
    'parse_legacy',
]
