import base64
import io
import json
import struct
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import pytest
from PIL import Image

from h5animate.graphics.image import ImageRegion
from h5animate.settings import PACK

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def make_png(width: int, height: int, color: Tuple[int, ...] = RED) -> bytes:
    with io.BytesIO() as stream:
        Image.new('RGBA', (width, height), color).save(stream, format='PNG')
        return stream.getvalue()


def to_data_uri(data: bytes) -> str:
    return 'data:image/png;base64,' + base64.b64encode(data).decode('ascii')


def open_rgba(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data)).convert('RGBA')


def build_container(
    meta: Any,
    payload: bytes = b'payload',
    dimensions: Sequence[Tuple[int, int]] = ((100, 100),),
    signature: bytes = b'ANIM',
    version: int = 1,
    image_data_size: Optional[int] = None,
    trailing: bytes = b'',
) -> bytes:
    meta_bytes = meta if isinstance(meta, bytes) else json.dumps(meta).encode('utf-8')
    table = struct.pack('<I', len(dimensions)) + b''.join(
        struct.pack('<2I', w, h) for w, h in dimensions
    )
    if image_data_size is None:
        image_data_size = len(table) + len(payload)
    header = signature + struct.pack('<3I', version, image_data_size, len(meta_bytes))
    return header + table + payload + meta_bytes + trailing


class FakeCodec(object):
    """PixelCodec double recording what the sheet processor asks for."""

    def __init__(self, sizes: Mapping[bytes, Tuple[int, int]]) -> None:
        self.sizes = dict(sizes)
        self.calls: Dict[str, Any] = {}

    async def measure(self, image: bytes) -> Tuple[int, int]:
        return self.sizes[bytes(image)]

    async def encode(self, image: bytes, setting=PACK) -> bytes:
        self.calls['encode'] = (bytes(image), setting)
        return b'encoded:' + bytes(image)

    async def composite(self, width, height, layers, setting=PACK) -> bytes:
        self.calls['composite'] = (width, height, list(layers))
        return b'sheet'

    async def crop(self, image: bytes, region: ImageRegion) -> bytes:
        self.calls['crop'] = region
        return b'crop'


@pytest.fixture
def simple_meta() -> Dict[str, Any]:
    return {
        'ratio': 2,
        'frame': [
            {
                'objects': [
                    {'index': 0, 'x': 10, 'y': 20, 'scale': 100, 'opacity': 255},
                ],
            },
        ],
    }


@pytest.fixture
def simple_sprite_info() -> Dict[str, Any]:
    return {'count': 1, 'dimensions': [{'width': 100, 'height': 100}]}


@pytest.fixture
def legacy_data() -> Dict[str, Any]:
    return {
        'ratio': 2,
        'se': {'0': 'attack.mp3', '2': 'hit.mp3'},
        'pitch': {'2': 1.5},
        'bitmaps': [
            to_data_uri(make_png(80, 50, RED)),
            '',
            base64.b64encode(make_png(120, 50, GREEN)).decode('ascii'),
        ],
        'frame_max': 3,
        'frames': [
            [[0, 0, 0, 100, 255]],
            [],
            [[2, -10, 5.5, 80, 128, 1, 90], [0, 1, 2, 100, 255, 0]],
        ],
    }
