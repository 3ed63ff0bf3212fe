"""Metadata block: UTF-8 JSON with objects compacted to fixed arrays.

On disk each animated object is `[index, x, y, scale, opacity, mirror, rotate]`;
5 and 6 element arrays are read with mirror and rotate defaulting to 0.
"""

import json
from typing import Any, Dict, List, Optional

from h5animate.errors import InvalidArrayLength, InvalidMetadata
from h5animate.validation import is_array, validate_metadata

from .types import AnimatedObject, AnimationMetadata, Frame, Sound

OBJECT_LAYOUT = ('index', 'x', 'y', 'scale', 'opacity', 'mirror', 'rotate')
MIN_OBJECT_LENGTH = 5


def compact_object(obj: AnimatedObject) -> List[Any]:
    return [obj.index, obj.x, obj.y, obj.scale, obj.opacity, obj.mirror, obj.rotate]


def expand_object(values: Any, path: str) -> Dict[str, Any]:
    if not MIN_OBJECT_LENGTH <= len(values) <= len(OBJECT_LAYOUT):
        raise InvalidArrayLength(
            path, f'{MIN_OBJECT_LENGTH}..{len(OBJECT_LAYOUT)}', len(values)
        )
    obj = {'mirror': 0, 'rotate': 0}
    obj.update(zip(OBJECT_LAYOUT, values))
    return obj


def _sound_to_json(sound: Sound) -> Dict[str, Any]:
    out: Dict[str, Any] = {'name': sound.name}
    if sound.volume is not None:
        out['volume'] = sound.volume
    if sound.pitch is not None:
        out['pitch'] = sound.pitch
    return out


def _frame_to_json(frame: Frame) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if frame.sound is not None:
        out['sound'] = [_sound_to_json(sound) for sound in frame.sound]
    if frame.objects is not None:
        out['objects'] = [compact_object(obj) for obj in frame.objects]
    return out


def pack_metadata(meta: AnimationMetadata) -> bytes:
    tree = {
        'ratio': meta.ratio,
        'frame': [_frame_to_json(frame) for frame in meta.frame],
    }
    return json.dumps(
        tree, ensure_ascii=False, separators=(',', ':'), allow_nan=False
    ).encode('utf-8')


def _expand_frames(tree: Dict[str, Any], path: str) -> None:
    frames = tree.get('frame')
    if not is_array(frames):
        return
    for fidx, frame in enumerate(frames):
        objects = frame.get('objects') if isinstance(frame, dict) else None
        if not is_array(objects):
            continue
        frame['objects'] = [
            expand_object(obj, f'{path}.frame[{fidx}].objects[{oidx}]')
            if is_array(obj)
            else obj
            for oidx, obj in enumerate(objects)
        ]


def unpack_metadata(
    data: bytes, position: Optional[int] = None, path: str = 'meta'
) -> AnimationMetadata:
    try:
        tree = json.loads(bytes(data).decode('utf-8'))
    except (ValueError, RecursionError) as exc:
        raise InvalidMetadata(f'cannot parse JSON: {exc}', position) from exc
    if not isinstance(tree, dict):
        raise InvalidMetadata('expected a JSON object', position)
    missing = [key for key in ('ratio', 'frame') if key not in tree]
    if missing:
        raise InvalidMetadata('missing required fields', position, missing)
    _expand_frames(tree, path)
    return validate_metadata(tree, path)
