import asyncio
from typing import List, Optional, Sequence

from h5animate.anim.types import PackedSheet, SpriteDimension, SpriteInfo
from h5animate.errors import FrameExtractionError, ImageMergeError
from h5animate.graphics.codec import Layer, PixelCodec
from h5animate.graphics.image import ImageRegion
from h5animate.kernel.buffer import BufferLike
from h5animate.settings import PACK, PackSetting


async def encode_image(
    codec: PixelCodec, image: BufferLike, setting: PackSetting = PACK
) -> bytes:
    """Re-encode a single image through the codec, no compositing."""
    return await codec.encode(image, setting)


def stack_layers(images: Sequence[BufferLike], heights: Sequence[int]) -> List[Layer]:
    layers = []
    top = 0
    for image, height in zip(images, heights):
        layers.append(Layer(image, top=top, left=0))
        top += height
    return layers


async def pack(
    codec: PixelCodec, images: Sequence[BufferLike], setting: PackSetting = PACK
) -> PackedSheet:
    """Stack images top to bottom, in order, into a single sprite sheet."""
    if not images:
        raise ImageMergeError('no images to process')

    sizes = await asyncio.gather(*(codec.measure(image) for image in images))

    if len(images) == 1:
        width, height = sizes[0]
        pixel_payload = await encode_image(codec, images[0], setting)
    else:
        width = max(w for w, _ in sizes)
        height = sum(h for _, h in sizes)
        layers = stack_layers(images, [h for _, h in sizes])
        setting.logger.debug(f'packing {len(images)} images into {width}x{height} sheet')
        pixel_payload = await codec.composite(width, height, layers, setting)

    sprite_info = SpriteInfo(count=1, dimensions=[SpriteDimension(width, height)])
    return PackedSheet(pixel_payload, sprite_info)


async def extract_frame_by_position(
    codec: PixelCodec, sheet: BufferLike, top: int, left: int, width: int, height: int
) -> bytes:
    region = ImageRegion(top, left, width, height)
    size = await codec.measure(sheet)
    if not region.fits(size):
        raise FrameExtractionError(f'area {region.box} is outside sheet of size {size}')
    return await codec.crop(sheet, region)


async def extract_frame_by_index(
    codec: PixelCodec,
    sheet: BufferLike,
    index: int,
    height: int,
    width: Optional[int] = None,
) -> bytes:
    if height <= 0:
        raise FrameExtractionError(f'frame height must be positive, got {height}', index)
    if index < 0:
        raise FrameExtractionError('frame index must not be negative', index)

    sheet_width, sheet_height = await codec.measure(sheet)
    top = index * height
    if top + height > sheet_height:
        raise FrameExtractionError(
            f'frame rows {top}..{top + height} exceed sheet height {sheet_height}', index
        )
    region = ImageRegion(top, 0, sheet_width if width is None else width, height)
    if not region.fits((sheet_width, sheet_height)):
        raise FrameExtractionError(
            f'frame width {region.width} does not fit sheet width {sheet_width}', index
        )
    return await codec.crop(sheet, region)


async def extract_all_frames(
    codec: PixelCodec, sheet: BufferLike, height: int, count: Optional[int] = None
) -> List[bytes]:
    if height <= 0:
        raise FrameExtractionError(f'frame height must be positive, got {height}')
    if count is None:
        _, sheet_height = await codec.measure(sheet)
        count = sheet_height // height
    return [
        await extract_frame_by_index(codec, sheet, index, height)
        for index in range(count)
    ]
