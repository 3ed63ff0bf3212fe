"""Pixel codec capability used by the sprite sheet processor.

The processor only depends on the `PixelCodec` protocol; `PillowCodec` is the
default implementation and runs Pillow work in an executor so that calls can
be awaited concurrently.
"""

import asyncio
import io
import struct
from concurrent.futures import Executor
from functools import partial
from typing import Any, Callable, Dict, NamedTuple, Optional, Protocol, Sequence, Tuple, TypeVar

from PIL import Image

from h5animate.errors import PixelCodecError
from h5animate.graphics.image import (
    ImageRegion,
    composite_over,
    convert_to_pil_image,
    new_canvas,
    open_image,
    save_image,
    to_rgba_array,
)
from h5animate.kernel.buffer import BufferLike
from h5animate.settings import PACK, PackSetting

T = TypeVar('T')

PILLOW_ERRORS = (
    OSError,
    ValueError,
    SyntaxError,
    EOFError,
    struct.error,
    Image.DecompressionBombError,
)


class Layer(NamedTuple):
    image: BufferLike
    top: int
    left: int = 0


class PixelCodec(Protocol):
    async def encode(self, image: BufferLike, setting: PackSetting = PACK) -> bytes:
        ...

    async def composite(
        self,
        width: int,
        height: int,
        layers: Sequence[Layer],
        setting: PackSetting = PACK,
    ) -> bytes:
        ...

    async def measure(self, image: BufferLike) -> Tuple[int, int]:
        ...

    async def crop(self, image: BufferLike, region: ImageRegion) -> bytes:
        ...


def _save_params(image_format: str, setting: PackSetting) -> Dict[str, Any]:
    if image_format.upper() != 'WEBP':
        return {}
    if setting.lossless:
        return {'lossless': True, 'method': setting.method}
    return {'lossless': False, 'quality': setting.quality, 'method': setting.method}


def _encode(image: BufferLike, image_format: str, setting: PackSetting) -> bytes:
    im = open_image(image)
    if im.mode != 'RGBA':
        im = im.convert('RGBA')
    return save_image(im, image_format, **_save_params(image_format, setting))


def _composite(
    width: int,
    height: int,
    layers: Sequence[Layer],
    image_format: str,
    setting: PackSetting,
) -> bytes:
    canvas = new_canvas(width, height)
    for layer in layers:
        composite_over(canvas, to_rgba_array(open_image(layer.image)), layer.top, layer.left)
    im = convert_to_pil_image(canvas)
    return save_image(im, image_format, **_save_params(image_format, setting))


def _measure(image: BufferLike) -> Tuple[int, int]:
    with Image.open(io.BytesIO(bytes(image))) as im:
        return im.size


def _crop(image: BufferLike, region: ImageRegion, image_format: str) -> bytes:
    im = open_image(image)
    if not region.fits(im.size):
        raise ValueError(f'bad extract area {region.box} for image of size {im.size}')
    out_format = im.format or image_format
    cropped = im.crop(region.box)
    return save_image(cropped, out_format, **_save_params(out_format, PACK))


class PillowCodec(object):
    """PixelCodec backed by Pillow and numpy.

    image_format: output format for encode and composite (default WEBP)

    executor: executor for blocking Pillow calls, None for the loop default
    """

    def __init__(
        self, image_format: str = 'WEBP', executor: Optional[Executor] = None
    ) -> None:
        self.image_format = image_format
        self._executor = executor

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, partial(func, *args))
        except PILLOW_ERRORS as exc:
            raise PixelCodecError(f'{func.__name__.lstrip("_")} failed: {exc}') from exc

    async def encode(self, image: BufferLike, setting: PackSetting = PACK) -> bytes:
        return await self._run(_encode, image, self.image_format, setting)

    async def composite(
        self,
        width: int,
        height: int,
        layers: Sequence[Layer],
        setting: PackSetting = PACK,
    ) -> bytes:
        return await self._run(
            _composite, width, height, list(layers), self.image_format, setting
        )

    async def measure(self, image: BufferLike) -> Tuple[int, int]:
        return await self._run(_measure, image)

    async def crop(self, image: BufferLike, region: ImageRegion) -> bytes:
        return await self._run(_crop, image, region, self.image_format)
