from h5animate.errors import CorruptedHeader, FileTruncated, InvalidSignature, InvalidVersion
from h5animate.kernel.stream import BinaryReader, BinaryWriter
from h5animate.settings import DEFAULT, CodecSetting

from .types import FormatHeader

SIGNATURE = 'ANIM'
VERSION = 1
SUPPORTED_VERSIONS = frozenset({VERSION})
HEADER_SIZE = 16


def decode_header(reader: BinaryReader, cfg: CodecSetting = DEFAULT) -> FormatHeader:
    try:
        signature = reader.read_ascii_string(len(SIGNATURE))
        if signature != SIGNATURE:
            raise InvalidSignature(signature, SIGNATURE)
        header = FormatHeader(
            signature=signature,
            version=reader.read_u32le(),
            image_data_size=reader.read_u32le(),
            meta_data_size=reader.read_u32le(),
        )
    except FileTruncated as exc:
        raise CorruptedHeader(
            exc.position or 0, f'expected {HEADER_SIZE} header bytes'
        ) from exc

    # version is not gated by default, newer files may still decode
    if header.version not in SUPPORTED_VERSIONS:
        if cfg.strict:
            raise InvalidVersion(header.version)
        cfg.logger.warning(f'unsupported version {header.version}, decoding anyway')
    return header


def encode_header(writer: BinaryWriter, header: FormatHeader) -> None:
    writer.write_ascii_string(header.signature)
    writer.write_u32le(header.version)
    writer.write_u32le(header.image_data_size)
    writer.write_u32le(header.meta_data_size)
