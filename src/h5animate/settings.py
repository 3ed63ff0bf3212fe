import logging
from dataclasses import dataclass, replace
from typing import Any, TypeVar

_SettingT = TypeVar('_SettingT', bound='_DefaultOverride')


@dataclass(frozen=True)
class _DefaultOverride(object):
    def __call__(self: _SettingT, **kwargs: Any) -> _SettingT:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class CodecSetting(_DefaultOverride):
    """Setting for container encode/decode

    strict: bool (default False) -
        if set to True, throws error on unknown header version or trailing
        bytes after the metadata block, otherwise log warning

    logger: logger used for diagnostics
    """

    strict: bool = False
    logger: logging.Logger = logging.getLogger('h5animate')


@dataclass(frozen=True)
class PackSetting(CodecSetting):
    """Setting for sprite sheet pixel encoding

    contains all fields from CodecSetting, and the following:

    lossless: bool (default True) - lossless WebP encoding

    quality: int (default 80) - lossy quality 0..100, ignored when lossless

    method: int (default 6) - encoder effort, 0 (fast) to 6 (smallest)
    """

    lossless: bool = True
    quality: int = 80
    method: int = 6

    def __post_init__(self) -> None:
        if not 0 <= self.quality <= 100:
            raise ValueError(f'quality must be in [0, 100], got {self.quality}')
        if not 0 <= self.method <= 6:
            raise ValueError(f'method must be in [0, 6], got {self.method}')


DEFAULT = CodecSetting()
PACK = PackSetting()
