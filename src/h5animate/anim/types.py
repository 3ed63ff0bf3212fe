from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Union


@dataclass(frozen=True)
class FormatHeader:
    signature: str
    version: int
    image_data_size: int
    meta_data_size: int


@dataclass
class SpriteDimension:
    width: int
    height: int


@dataclass
class SpriteInfo:
    """Sprite table

    count: number of sprite sheets

    dimensions: (width, height) of each sheet, exactly `count` entries
    """

    count: int
    dimensions: List[SpriteDimension] = field(default_factory=list)


@dataclass
class Sound:
    name: str
    volume: Optional[float] = None
    pitch: Optional[float] = None


@dataclass
class AnimatedObject:
    """Positioned sprite slot within a frame

    index: bitmap slot, stored on disk as [index, x, y, scale, opacity, mirror, rotate]
    """

    index: int
    x: float
    y: float
    scale: float
    opacity: int
    mirror: int = 0
    rotate: float = 0


@dataclass
class Frame:
    """One animation step; None fields are absent, which differs from empty lists."""

    sound: Optional[List[Sound]] = None
    objects: Optional[List[AnimatedObject]] = None


@dataclass
class AnimationMetadata:
    ratio: float
    frame: List[Frame] = field(default_factory=list)


class DecodedAnimation(NamedTuple):
    metadata: AnimationMetadata
    sprite_info: SpriteInfo
    pixel_payload: bytes


class PackedSheet(NamedTuple):
    pixel_payload: bytes
    sprite_info: SpriteInfo


FrameLayer = Sequence[float]


@dataclass
class LegacyAnimateFile:
    """Predecessor JSON animation file, consumed only

    se: global sound name (frame 0 only) or sparse frame index -> sound name

    pitch: sparse frame index -> pitch, used only where `se` has an entry

    bitmaps: Base64 (optionally data-URI) images, "" for unused slots

    frames: `frame_max` lists of raw [index, x, y, scale, opacity, mirror?, rotate?] layers
    """

    ratio: float
    bitmaps: List[str]
    frame_max: int
    frames: List[Optional[List[FrameLayer]]]
    se: Union[None, str, Dict[int, str]] = None
    pitch: Optional[Dict[int, float]] = None
