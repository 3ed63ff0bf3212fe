"""Structural, type and range checks for every model entity.

Validators accept plain JSON trees (mappings and lists) as well as the model
dataclasses, and return the typed model value. Every failure carries the
field path of the offending value.
"""

import math
from dataclasses import fields, is_dataclass
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    TypeVar,
)

from h5animate.anim.types import (
    AnimatedObject,
    AnimationMetadata,
    Frame,
    LegacyAnimateFile,
    Sound,
    SpriteDimension,
    SpriteInfo,
)
from h5animate.errors import (
    H5AnimateError,
    InvalidArrayLength,
    MissingField,
    TypeMismatch,
    ValidationError,
    ValueOutOfRange,
)
from h5animate.kernel.buffer import is_buffer
from h5animate.kernel.stream import U32_MAX

T = TypeVar('T')

OBJECT_FIELDS = ('index', 'x', 'y', 'scale', 'opacity')
LEGACY_FIELDS = ('ratio', 'bitmaps', 'frame_max', 'frames')


class ValidationResult(NamedTuple):
    valid: bool
    errors: List[str]


def _is_record(value: Any) -> bool:
    return is_dataclass(value) and not isinstance(value, type)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def type_name(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if is_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if is_array(value):
        return 'array'
    if isinstance(value, Mapping) or _is_record(value):
        return 'object'
    return type(value).__name__


def as_mapping(value: Any, path: str) -> Mapping[str, Any]:
    """View a JSON object or model dataclass as a mapping, None fields dropped."""
    if isinstance(value, Mapping):
        return value
    if _is_record(value):
        attrs = ((f.name, getattr(value, f.name)) for f in fields(value))
        return {name: attr for name, attr in attrs if attr is not None}
    raise TypeMismatch(path, 'object', type_name(value))


def require(data: Mapping[str, Any], required: Sequence[str], path: str) -> None:
    missing = [key for key in required if key not in data]
    if missing:
        raise MissingField(missing, path)


def _array(value: Any, path: str) -> Sequence[Any]:
    if not is_array(value):
        raise TypeMismatch(path, 'array', type_name(value))
    return value


def _number(value: Any, path: str) -> float:
    if not is_number(value):
        raise TypeMismatch(path, 'number', type_name(value))
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # int beyond float range
        raise ValueOutOfRange(path, math.inf if value > 0 else -math.inf) from None
    if not finite:
        raise ValueOutOfRange(path, value)
    return value


def _integer(
    value: Any, path: str, lower: Optional[int] = None, upper: Optional[int] = None
) -> int:
    value = _number(value, path)
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeMismatch(path, 'integer', 'number')
        value = int(value)
    if (lower is not None and value < lower) or (upper is not None and value > upper):
        raise ValueOutOfRange(path, value, lower, upper)
    return value


def _optional(
    data: Mapping[str, Any], key: str, check: Callable[[Any, str], T], path: str
) -> Optional[T]:
    value = data.get(key)
    if value is None:
        return None
    return check(value, f'{path}.{key}')


def _each(
    values: Sequence[Any], check: Callable[[Any, str], T], path: str
) -> List[T]:
    return [check(value, f'{path}[{idx}]') for idx, value in enumerate(values)]


def validate_sound(value: Any, path: str) -> Sound:
    data = as_mapping(value, path)
    require(data, ('name',), path)
    name = data['name']
    if not isinstance(name, str):
        raise TypeMismatch(f'{path}.name', 'string', type_name(name))
    if not name:
        raise ValidationError('sound name must not be empty', field_path=f'{path}.name')
    return Sound(
        name=name,
        volume=_optional(data, 'volume', _number, path),
        pitch=_optional(data, 'pitch', _number, path),
    )


def validate_animated_object(value: Any, path: str) -> AnimatedObject:
    data = as_mapping(value, path)
    require(data, OBJECT_FIELDS, path)
    mirror = _optional(data, 'mirror', lambda v, p: _integer(v, p, 0, 1), path)
    rotate = _optional(data, 'rotate', _number, path)
    return AnimatedObject(
        index=_integer(data['index'], f'{path}.index', lower=0),
        x=_number(data['x'], f'{path}.x'),
        y=_number(data['y'], f'{path}.y'),
        scale=_number(data['scale'], f'{path}.scale'),
        opacity=_integer(data['opacity'], f'{path}.opacity', 0, 255),
        mirror=mirror if mirror is not None else 0,
        rotate=rotate if rotate is not None else 0,
    )


def validate_frame(value: Any, path: str) -> Frame:
    data = as_mapping(value, path)
    sound = _optional(
        data, 'sound', lambda v, p: _each(_array(v, p), validate_sound, p), path
    )
    objects = _optional(
        data,
        'objects',
        lambda v, p: _each(_array(v, p), validate_animated_object, p),
        path,
    )
    return Frame(sound=sound, objects=objects)


def _metadata_root(value: Any, path: str) -> Mapping[str, Any]:
    data = as_mapping(value, path)
    require(data, ('ratio', 'frame'), path)
    ratio = _number(data['ratio'], f'{path}.ratio')
    if ratio <= 0:
        raise ValueOutOfRange(f'{path}.ratio', ratio, lower=0, exclusive=True)
    _array(data['frame'], f'{path}.frame')
    return data


def validate_metadata(value: Any, path: str = 'meta') -> AnimationMetadata:
    data = _metadata_root(value, path)
    return AnimationMetadata(
        ratio=data['ratio'],
        frame=_each(data['frame'], validate_frame, f'{path}.frame'),
    )


def validate_sprite_dimension(value: Any, path: str) -> SpriteDimension:
    data = as_mapping(value, path)
    require(data, ('width', 'height'), path)
    return SpriteDimension(
        width=_integer(data['width'], f'{path}.width', 1, U32_MAX),
        height=_integer(data['height'], f'{path}.height', 1, U32_MAX),
    )


def _sprite_info_root(value: Any, path: str) -> Mapping[str, Any]:
    data = as_mapping(value, path)
    require(data, ('count', 'dimensions'), path)
    _integer(data['count'], f'{path}.count', 0, U32_MAX)
    _array(data['dimensions'], f'{path}.dimensions')
    return data


def validate_sprite_info(value: Any, path: str = 'spriteInfo') -> SpriteInfo:
    data = _sprite_info_root(value, path)
    count = _integer(data['count'], f'{path}.count')
    dimensions = _each(
        data['dimensions'], validate_sprite_dimension, f'{path}.dimensions'
    )
    if len(dimensions) != count:
        raise InvalidArrayLength(f'{path}.dimensions', count, len(dimensions))
    return SpriteInfo(count=count, dimensions=dimensions)


def validate_pixel_payload(value: Any, path: str = 'pixelPayload') -> bytes:
    if not is_buffer(value):
        raise TypeMismatch(path, 'bytes', type_name(value))
    if len(value) == 0:
        raise ValidationError('pixel payload must not be empty', field_path=path)
    return bytes(value)


def check_encode_input(meta: Any, sprite_info: Any, pixel_payload: Any) -> None:
    """Presence check over all encode inputs, reporting every gap at once."""
    missing: List[str] = []

    if isinstance(meta, Mapping) or _is_record(meta):
        data = as_mapping(meta, 'meta')
        if not is_number(data.get('ratio')):
            missing.append('meta.ratio')
        if not is_array(data.get('frame')):
            missing.append('meta.frame')
    else:
        missing.append('meta')

    if isinstance(sprite_info, Mapping) or _is_record(sprite_info):
        data = as_mapping(sprite_info, 'spriteInfo')
        if not is_number(data.get('count')):
            missing.append('spriteInfo.count')
        if not is_array(data.get('dimensions')):
            missing.append('spriteInfo.dimensions')
    else:
        missing.append('spriteInfo')

    if not is_buffer(pixel_payload):
        missing.append('pixelPayload')

    if missing:
        raise ValidationError('input is missing required fields', missing)


def _frame_key(key: Any, path: str) -> int:
    if isinstance(key, int) and not isinstance(key, bool):
        return key
    if isinstance(key, str) and key.isdecimal():
        return int(key)
    raise TypeMismatch(f'{path}.{key}', 'frame index', type_name(key))


def _frame_map(
    value: Any, path: str, check: Callable[[Any, str], T]
) -> Dict[int, T]:
    if not isinstance(value, Mapping):
        raise TypeMismatch(path, 'object', type_name(value))
    return {
        _frame_key(key, path): check(item, f'{path}.{key}')
        for key, item in value.items()
    }


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise TypeMismatch(path, 'string', type_name(value))
    return value


def _sound_source(value: Any, path: str) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return _frame_map(value, path, _string)
    raise TypeMismatch(path, 'string | object', type_name(value))


def _layers(value: Any, path: str) -> Optional[List[Any]]:
    if value is None:
        return None
    return list(_array(value, path))


def validate_legacy(value: Any, path: str = 'legacyData') -> LegacyAnimateFile:
    data = as_mapping(value, path)
    require(data, LEGACY_FIELDS, path)
    ratio = _number(data['ratio'], f'{path}.ratio')
    bitmaps = _each(_array(data['bitmaps'], f'{path}.bitmaps'), _string, f'{path}.bitmaps')
    frame_max = _integer(data['frame_max'], f'{path}.frame_max', lower=0)
    frames = _each(_array(data['frames'], f'{path}.frames'), _layers, f'{path}.frames')
    return LegacyAnimateFile(
        ratio=ratio,
        bitmaps=bitmaps,
        frame_max=frame_max,
        frames=frames,
        se=_optional(data, 'se', _sound_source, path),
        pitch=_optional(data, 'pitch', lambda v, p: _frame_map(v, p, _number), path),
    )


def _check(checks: Sequence[Callable[[], Any]]) -> ValidationResult:
    errors = []
    for check in checks:
        try:
            check()
        except H5AnimateError as exc:
            errors.append(exc.describe())
    return ValidationResult(not errors, errors)


def check_metadata(value: Any, path: str = 'meta') -> ValidationResult:
    """Non-throwing variant of validate_metadata, reporting each bad frame."""
    try:
        data = _metadata_root(value, path)
    except H5AnimateError as exc:
        return ValidationResult(False, [exc.describe()])
    return _check(
        [
            lambda frame=frame, idx=idx: validate_frame(frame, f'{path}.frame[{idx}]')
            for idx, frame in enumerate(data['frame'])
        ]
    )


def check_sprite_info(value: Any, path: str = 'spriteInfo') -> ValidationResult:
    return _check([lambda: validate_sprite_info(value, path)])


def check_legacy(value: Any, path: str = 'legacyData') -> ValidationResult:
    return _check([lambda: validate_legacy(value, path)])
