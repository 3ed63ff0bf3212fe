import json
import logging
import struct

import pytest

from h5animate.anim.encode import _check_u32, encode
from h5animate.anim.meta import pack_metadata
from h5animate.anim.types import (
    AnimatedObject,
    AnimationMetadata,
    Frame,
    Sound,
    SpriteDimension,
    SpriteInfo,
)
from h5animate.errors import (
    InvalidArrayLength,
    SizeMismatch,
    TypeMismatch,
    ValidationError,
    ValueOutOfRange,
)


def split(data: bytes):
    signature = data[:4]
    version, image_data_size, meta_data_size = struct.unpack_from('<3I', data, 4)
    return signature, version, image_data_size, meta_data_size


def test_layout(simple_meta, simple_sprite_info):
    data = encode(simple_meta, simple_sprite_info, b'\xaa\xbb')
    signature, version, image_data_size, meta_data_size = split(data)
    assert signature == b'ANIM'
    assert version == 1
    assert image_data_size == 4 + 8 + 2
    assert len(data) == 16 + image_data_size + meta_data_size
    assert struct.unpack_from('<3I', data, 16) == (1, 100, 100)
    assert data[28:30] == b'\xaa\xbb'
    assert json.loads(data[30:].decode('utf-8')) == {
        'ratio': 2,
        'frame': [{'objects': [[0, 10, 20, 100, 255, 0, 0]]}],
    }


def test_metadata_is_compact_utf8():
    meta = AnimationMetadata(1, [Frame(sound=[Sound('attaque-é.mp3', volume=0.5)])])
    packed = pack_metadata(meta)
    assert b' ' not in packed
    assert 'é'.encode('utf-8') in packed
    assert json.loads(packed) == {
        'ratio': 1,
        'frame': [{'sound': [{'name': 'attaque-é.mp3', 'volume': 0.5}]}],
    }


def test_absent_fields_are_omitted():
    packed = pack_metadata(AnimationMetadata(1, [Frame(), Frame(objects=[])]))
    assert json.loads(packed)['frame'] == [{}, {'objects': []}]


def test_encode_accepts_dataclasses():
    meta = AnimationMetadata(
        ratio=1.5,
        frame=[Frame(objects=[AnimatedObject(1, 2.5, 3, 50, 10, mirror=1, rotate=90)])],
    )
    info = SpriteInfo(2, [SpriteDimension(10, 20), SpriteDimension(30, 40)])
    data = encode(meta, info, bytearray(b'x'))
    _, _, image_data_size, _ = split(data)
    assert image_data_size == 4 + 16 + 1
    assert struct.unpack_from('<5I', data, 16) == (2, 10, 20, 30, 40)


def test_missing_inputs_are_reported_together():
    with pytest.raises(ValidationError) as excinfo:
        encode(None, None, None)
    assert excinfo.value.missing_fields == ['meta', 'spriteInfo', 'pixelPayload']


def test_invalid_opacity(simple_sprite_info):
    meta = {'ratio': 1, 'frame': [{'objects': [
        {'index': 0, 'x': 0, 'y': 0, 'scale': 100, 'opacity': 300},
    ]}]}
    with pytest.raises(ValueOutOfRange) as excinfo:
        encode(meta, simple_sprite_info, b'x')
    assert excinfo.value.field_path == 'meta.frame[0].objects[0].opacity'


def test_wrong_type(simple_meta, simple_sprite_info):
    simple_meta['frame'][0]['objects'][0]['x'] = '10'
    with pytest.raises(TypeMismatch):
        encode(simple_meta, simple_sprite_info, b'x')


def test_count_must_match_dimensions(simple_meta):
    with pytest.raises(InvalidArrayLength):
        encode(simple_meta, {'count': 2, 'dimensions': [{'width': 1, 'height': 1}]}, b'x')


def test_empty_payload_rejected(simple_meta, simple_sprite_info):
    with pytest.raises(ValidationError):
        encode(simple_meta, simple_sprite_info, b'')


def test_payload_must_be_bytes(simple_meta, simple_sprite_info):
    with pytest.raises(ValidationError) as excinfo:
        encode(simple_meta, simple_sprite_info, 'not bytes')
    assert excinfo.value.missing_fields == ['pixelPayload']


def test_non_finite_ratio(simple_sprite_info):
    with pytest.raises(ValueOutOfRange):
        encode({'ratio': float('inf'), 'frame': []}, simple_sprite_info, b'x')


def test_encode_logs_debug(simple_meta, simple_sprite_info, caplog):
    with caplog.at_level(logging.DEBUG, logger='h5animate'):
        encode(simple_meta, simple_sprite_info, b'x')
    assert 'encoded 1 frames' in caplog.text


def test_section_size_must_fit_u32():
    assert _check_u32('metaDataSize', 2 ** 32 - 1) == 2 ** 32 - 1
    with pytest.raises(SizeMismatch) as excinfo:
        _check_u32('imageDataSize', 2 ** 32)
    assert excinfo.value.field == 'imageDataSize'


def test_dimension_must_fit_u32(simple_meta):
    info = {'count': 1, 'dimensions': [{'width': 2 ** 32, 'height': 1}]}
    with pytest.raises(ValueOutOfRange) as excinfo:
        encode(simple_meta, info, b'x')
    assert excinfo.value.field_path == 'spriteInfo.dimensions[0].width'
