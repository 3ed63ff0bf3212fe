import io
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
from PIL import Image

from h5animate.kernel.buffer import BufferLike

Box = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ImageRegion:
    top: int = 0
    left: int = 0
    width: int = 0
    height: int = 0

    @property
    def box(self) -> Box:
        return (self.left, self.top, self.left + self.width, self.top + self.height)

    def fits(self, size: Tuple[int, int]) -> bool:
        width, height = size
        x1, y1, x2, y2 = self.box
        return 0 <= x1 < x2 <= width and 0 <= y1 < y2 <= height


def open_image(data: BufferLike) -> Image.Image:
    im = Image.open(io.BytesIO(bytes(data)))
    im.load()
    return im


def to_rgba_array(im: Image.Image) -> np.ndarray:
    return np.asarray(im.convert('RGBA'), dtype=np.uint8)


def new_canvas(width: int, height: int) -> np.ndarray:
    # fully transparent RGBA
    return np.zeros((height, width, 4), dtype=np.uint8)


def composite_over(canvas: np.ndarray, layer: np.ndarray, top: int, left: int) -> None:
    """Blend RGBA `layer` onto `canvas` in place (source-over), clipped to canvas."""
    layer = layer[: canvas.shape[0] - top, : canvas.shape[1] - left]
    height, width = layer.shape[:2]
    target = canvas[top : top + height, left : left + width]

    src = layer.astype(np.float64) / 255
    dst = target.astype(np.float64) / 255
    src_alpha = src[..., 3:]
    dst_alpha = dst[..., 3:] * (1 - src_alpha)
    alpha = src_alpha + dst_alpha
    with np.errstate(divide='ignore', invalid='ignore'):
        color = np.where(
            alpha > 0, (src[..., :3] * src_alpha + dst[..., :3] * dst_alpha) / alpha, 0
        )
    blended = np.concatenate([color, alpha], axis=-1)
    target[...] = np.rint(blended * 255).astype(np.uint8)


def convert_to_pil_image(canvas: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(canvas, dtype=np.uint8))


def save_image(im: Image.Image, image_format: str, **params: Any) -> bytes:
    with io.BytesIO() as stream:
        im.save(stream, format=image_format, **params)
        return stream.getvalue()
