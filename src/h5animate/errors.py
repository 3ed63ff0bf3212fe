from enum import Enum
from typing import Any, Dict, Optional, Sequence


class ErrorCode(str, Enum):
    """Stable error codes.

    H5A001-H5A099: file format
    H5A100-H5A199: validation
    H5A200-H5A299: conversion
    H5A300-H5A399: processing

    Codes are never reassigned. H5A008 was the old generic validation code
    and stays reserved. H5A004 and H5A201 are reserved for callers and are
    not raised by this package: bad pixel data surfaces as H5A300 and bad
    legacy JSON as H5A200.
    """

    INVALID_SIGNATURE = 'H5A001'
    INVALID_VERSION = 'H5A002'
    CORRUPTED_HEADER = 'H5A003'
    INVALID_IMAGE_DATA = 'H5A004'
    INVALID_METADATA = 'H5A005'
    FILE_TRUNCATED = 'H5A006'
    SIZE_MISMATCH = 'H5A007'
    VALIDATION_ERROR_LEGACY = 'H5A008'

    VALIDATION_ERROR = 'H5A100'
    TYPE_MISMATCH = 'H5A101'
    MISSING_REQUIRED_FIELD = 'H5A102'
    VALUE_OUT_OF_RANGE = 'H5A103'
    INVALID_ARRAY_LENGTH = 'H5A104'

    CONVERSION_FAILED = 'H5A200'
    JSON_PARSE_ERROR = 'H5A201'
    BASE64_DECODE_ERROR = 'H5A202'

    PIXEL_CODEC_ERROR = 'H5A300'
    IMAGE_MERGE_ERROR = 'H5A301'
    FRAME_EXTRACTION_ERROR = 'H5A302'


_DESCRIPTIONS = {
    ErrorCode.INVALID_SIGNATURE: 'file signature is not a valid animation container',
    ErrorCode.INVALID_VERSION: 'file version is not supported',
    ErrorCode.CORRUPTED_HEADER: 'file header is corrupted',
    ErrorCode.INVALID_IMAGE_DATA: 'image data is invalid or corrupted',
    ErrorCode.INVALID_METADATA: 'metadata block is invalid',
    ErrorCode.FILE_TRUNCATED: 'file is incomplete, data was truncated',
    ErrorCode.SIZE_MISMATCH: 'declared data size does not match actual size',
    ErrorCode.VALIDATION_ERROR_LEGACY: 'validation failed (retired code)',
    ErrorCode.VALIDATION_ERROR: 'validation failed',
    ErrorCode.TYPE_MISMATCH: 'value has the wrong type',
    ErrorCode.MISSING_REQUIRED_FIELD: 'required field is missing',
    ErrorCode.VALUE_OUT_OF_RANGE: 'value is out of the valid range',
    ErrorCode.INVALID_ARRAY_LENGTH: 'array has an invalid length',
    ErrorCode.CONVERSION_FAILED: 'format conversion failed',
    ErrorCode.JSON_PARSE_ERROR: 'JSON parsing failed',
    ErrorCode.BASE64_DECODE_ERROR: 'Base64 decoding failed',
    ErrorCode.PIXEL_CODEC_ERROR: 'pixel codec failed to process image',
    ErrorCode.IMAGE_MERGE_ERROR: 'images could not be merged into a sprite sheet',
    ErrorCode.FRAME_EXTRACTION_ERROR: 'frame could not be extracted from sprite sheet',
}


def describe_code(code: ErrorCode) -> str:
    return _DESCRIPTIONS.get(ErrorCode(code), 'unknown error')


class H5AnimateError(Exception):
    """Base for every error raised by the codec.

    code: stable ErrorCode

    position: byte offset in the container, when known

    expected_type / actual_type: type names for mismatches

    missing_fields: every missing field found by an aggregated check

    field_path: location of the offending value, e.g. meta.frame[2].objects[0].opacity
    """

    code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        position: Optional[int] = None,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
        missing_fields: Optional[Sequence[str]] = None,
        field_path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position
        self.expected_type = expected_type
        self.actual_type = actual_type
        self.missing_fields = list(missing_fields) if missing_fields else None
        self.field_path = field_path

    def describe(self) -> str:
        parts = [f'[{self.code.value}] {self.message}']
        if self.position is not None:
            parts.append(f'(position: {self.position} bytes)')
        if self.expected_type:
            parts.append(f'(expected type: {self.expected_type})')
        if self.actual_type:
            parts.append(f'(actual type: {self.actual_type})')
        if self.missing_fields:
            parts.append(f'(missing fields: {", ".join(self.missing_fields)})')
        if self.field_path:
            parts.append(f'(field path: {self.field_path})')
        return ' '.join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': type(self).__name__,
            'code': self.code.value,
            'message': self.message,
            'position': self.position,
            'expected_type': self.expected_type,
            'actual_type': self.actual_type,
            'missing_fields': self.missing_fields,
            'field_path': self.field_path,
        }


# file format


class InvalidSignature(H5AnimateError):
    code = ErrorCode.INVALID_SIGNATURE

    def __init__(self, actual: str, expected: str = 'ANIM') -> None:
        super().__init__(
            f'invalid file signature: expected "{expected}" but got "{actual}"',
            position=0,
            expected_type=expected,
            actual_type=actual,
        )
        self.actual = actual


class InvalidVersion(H5AnimateError):
    code = ErrorCode.INVALID_VERSION

    def __init__(self, version: int, position: int = 4) -> None:
        super().__init__(f'unsupported version: {version}', position=position)
        self.version = version


class CorruptedHeader(H5AnimateError):
    code = ErrorCode.CORRUPTED_HEADER

    def __init__(self, position: int, reason: str) -> None:
        super().__init__(f'corrupted file header: {reason}', position=position)
        self.reason = reason


class InvalidImageData(H5AnimateError):
    code = ErrorCode.INVALID_IMAGE_DATA

    def __init__(self, reason: str, field_path: Optional[str] = None) -> None:
        super().__init__(f'invalid image data: {reason}', field_path=field_path)
        self.reason = reason


class InvalidMetadata(H5AnimateError):
    code = ErrorCode.INVALID_METADATA

    def __init__(
        self,
        reason: str,
        position: Optional[int] = None,
        missing_fields: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(
            f'invalid metadata: {reason}',
            position=position,
            missing_fields=missing_fields,
        )
        self.reason = reason


class FileTruncated(H5AnimateError):
    code = ErrorCode.FILE_TRUNCATED

    def __init__(self, position: int, expected: int, available: int) -> None:
        super().__init__(
            f'file truncated: expected {expected} bytes at position {position}'
            f' but only {available} available',
            position=position,
        )
        self.expected = expected
        self.available = available


class SizeMismatch(H5AnimateError):
    code = ErrorCode.SIZE_MISMATCH

    def __init__(
        self, field: str, expected: int, actual: int, position: Optional[int] = None
    ) -> None:
        super().__init__(
            f'size mismatch: {field} declares {expected} bytes but got {actual} bytes',
            position=position,
        )
        self.field = field
        self.expected = expected
        self.actual = actual


# validation


class ValidationError(H5AnimateError):
    code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        reason: str,
        missing_fields: Optional[Sequence[str]] = None,
        field_path: Optional[str] = None,
    ) -> None:
        super().__init__(
            f'validation failed: {reason}',
            missing_fields=missing_fields,
            field_path=field_path,
        )
        self.reason = reason


class TypeMismatch(H5AnimateError):
    code = ErrorCode.TYPE_MISMATCH

    def __init__(self, field_path: str, expected_type: str, actual_type: str) -> None:
        super().__init__(
            f'type mismatch: field "{field_path}" expected {expected_type}'
            f' but got {actual_type}',
            field_path=field_path,
            expected_type=expected_type,
            actual_type=actual_type,
        )


class MissingField(H5AnimateError):
    code = ErrorCode.MISSING_REQUIRED_FIELD

    def __init__(
        self, missing_fields: Sequence[str], field_path: Optional[str] = None
    ) -> None:
        prefix = f'in "{field_path}" ' if field_path else ''
        super().__init__(
            f'{prefix}missing required fields: {", ".join(missing_fields)}',
            missing_fields=missing_fields,
            field_path=field_path,
        )


class ValueOutOfRange(H5AnimateError):
    code = ErrorCode.VALUE_OUT_OF_RANGE

    def __init__(
        self,
        field_path: str,
        value: Any,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
        exclusive: bool = False,
    ) -> None:
        if lower is not None and upper is not None:
            bounds = f'[{lower}, {upper}]'
        elif lower is not None:
            bounds = f'> {lower}' if exclusive else f'>= {lower}'
        elif upper is not None:
            bounds = f'<= {upper}'
        else:
            bounds = 'finite'
        super().__init__(
            f'value out of range: field "{field_path}" value {value} is not {bounds}',
            field_path=field_path,
        )
        self.value = value
        self.lower = lower
        self.upper = upper


class InvalidArrayLength(H5AnimateError):
    code = ErrorCode.INVALID_ARRAY_LENGTH

    def __init__(self, field_path: str, expected: Any, actual: int) -> None:
        super().__init__(
            f'invalid array length: field "{field_path}" expected length {expected}'
            f' but got {actual}',
            field_path=field_path,
            expected_type=f'array[{expected}]',
            actual_type=f'array[{actual}]',
        )
        self.expected = expected
        self.actual = actual


# conversion


class ConversionFailed(H5AnimateError):
    code = ErrorCode.CONVERSION_FAILED

    def __init__(self, reason: str) -> None:
        super().__init__(f'conversion failed: {reason}')
        self.reason = reason


class JsonParseError(H5AnimateError):
    code = ErrorCode.JSON_PARSE_ERROR

    def __init__(self, reason: str, position: Optional[int] = None) -> None:
        super().__init__(f'JSON parsing failed: {reason}', position=position)
        self.reason = reason


class Base64DecodeError(H5AnimateError):
    code = ErrorCode.BASE64_DECODE_ERROR

    def __init__(self, reason: str, field_path: Optional[str] = None) -> None:
        super().__init__(f'Base64 decoding failed: {reason}', field_path=field_path)
        self.reason = reason


# processing


class PixelCodecError(H5AnimateError):
    code = ErrorCode.PIXEL_CODEC_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(f'pixel codec error: {reason}')
        self.reason = reason


class ImageMergeError(H5AnimateError):
    code = ErrorCode.IMAGE_MERGE_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(f'image merge error: {reason}')
        self.reason = reason


class FrameExtractionError(H5AnimateError):
    code = ErrorCode.FRAME_EXTRACTION_ERROR

    def __init__(self, reason: str, frame_index: Optional[int] = None) -> None:
        suffix = f' (frame index: {frame_index})' if frame_index is not None else ''
        super().__init__(f'frame extraction error: {reason}{suffix}')
        self.reason = reason
        self.frame_index = frame_index
