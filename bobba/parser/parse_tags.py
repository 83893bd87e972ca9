# Credits: Bobba Research Team - 2026

# Split a SWF bundle into its tag records.
#
# Header:
# char[3]: "FWS" (plain), "CWS" (zlib) or "ZWS" (lzma)
# uint8: Version
# uint32_le: File length, header included, after decompression
#
# The (decompressed) body starts with:
# RECT: Frame size, bit packed
# uint16_le: Frame rate, 8.8 fixed point
# uint16_le: Frame count
#
# followed by tag records:
# uint16_le: code << 6 | length (length 0x3F means a uint32_le length follows)
# uint8[length]: tag body
import logging
import lzma
import struct
import zlib
from dataclasses import dataclass, field

from bobba.external_knowledge import BitmapFormat, SwfSignature, SwfTagCode
from bobba.swf_reader import BufferUnderrun, SwfReader

logger = logging.getLogger()


class TagStreamError(Exception):
    pass


class MalformedContainer(TagStreamError):
    def __init__(self, message: str, offset: int):
        super().__init__(message, offset)
        self.message = message
        self.offset = offset

    def __str__(self):
        return f"{self.message} (at offset 0x{self.offset:x})"


@dataclass(frozen=True)
class MovieHeader:
    signature: bytes
    version: int
    declared_length: int
    frame_size: tuple
    frame_rate: float
    frame_count: int


@dataclass(frozen=True)
class SymbolClassDeclaration:
    entries: tuple  # (asset_id, qualified_name) pairs in stream order
    offset: int = 0


@dataclass(frozen=True)
class BinaryDataAsset:
    asset_id: int
    payload: memoryview = field(repr=False)
    offset: int = 0


@dataclass(frozen=True)
class LosslessBitmapAsset:
    asset_id: int
    width: int
    height: int
    pixel_format: int
    packed_data: memoryview = field(repr=False)
    has_alpha: bool = True
    color_table_size: int = 0
    offset: int = 0

    @property
    def format_name(self):
        return BitmapFormat.name(self.pixel_format)


@dataclass(frozen=True)
class OtherTag:
    code: int
    length: int
    offset: int = 0


@dataclass(frozen=True)
class SwfMovie:
    header: MovieHeader
    tags: tuple


def read_swf(data) -> SwfMovie:
    """Parse a whole bundle. Raises MalformedContainer when any length does not fit."""
    data = memoryview(data)
    body, header_fields = _read_body(data)
    reader = SwfReader(body, base_offset=SwfSignature.header_size)

    try:
        frame_size = reader.bget_rect()
        frame_rate = reader.bget_u16() / 256.0
        frame_count = reader.bget_u16()
    except BufferUnderrun as e:
        raise MalformedContainer("Truncated movie header", e.offset) from e

    header = MovieHeader(*header_fields, frame_size, frame_rate, frame_count)
    logger.debug("Got a valid %s v%i with %i frames", header.signature.decode("ascii"), header.version, frame_count)

    return SwfMovie(header, tuple(_read_tags(reader)))


def read_tags(data) -> tuple:
    return read_swf(data).tags


def _read_body(data: memoryview):
    if len(data) < SwfSignature.header_size:
        raise MalformedContainer(f"Expected an {SwfSignature.header_size} byte header, got {len(data)} bytes", 0)

    signature = bytes(data[0:3])
    if signature not in (SwfSignature.uncompressed, SwfSignature.zlib, SwfSignature.lzma):
        raise MalformedContainer(f"Expected FWS, CWS or ZWS, got {signature!r}", 0)

    version, declared_length = struct.unpack_from("<BI", data, 3)
    body_length = declared_length - SwfSignature.header_size
    if body_length < 0:
        raise MalformedContainer(f"Declared length {declared_length} is smaller than the header", 4)

    if signature == SwfSignature.uncompressed:
        if len(data) < declared_length:
            raise MalformedContainer(f"Header declares {declared_length} bytes, got {len(data)}", len(data))
        body = data[SwfSignature.header_size:declared_length]

    elif signature == SwfSignature.zlib:
        try:
            body = zlib.decompress(data[SwfSignature.header_size:])
        except zlib.error as e:
            raise MalformedContainer(f"Compressed body is corrupt: {e}", SwfSignature.header_size) from e

    else:
        if len(data) < SwfSignature.lzma_header_size:
            raise MalformedContainer("Truncated LZMA header", len(data))
        # Rebuild an .lzma ("alone") header: properties followed by the uint64 decompressed size.
        # The size is left unknown since producers don't agree on writing an end marker
        properties = bytes(data[12:17])
        alone = properties + struct.pack("<q", -1) + bytes(data[SwfSignature.lzma_header_size:])
        try:
            body = lzma.LZMADecompressor(format=lzma.FORMAT_ALONE).decompress(alone)
        except lzma.LZMAError as e:
            raise MalformedContainer(f"Compressed body is corrupt: {e}", SwfSignature.lzma_header_size) from e

    if len(body) < body_length:
        raise MalformedContainer(f"Header declares a {body_length} byte body, got {len(body)}",
                                 SwfSignature.header_size + len(body))

    return memoryview(body)[:body_length], (signature, version, declared_length)


def _read_tags(reader: SwfReader):
    while reader.remaining() > 0:
        tag_offset = reader.btell()
        try:
            code_and_length = reader.bget_u16()
            code = code_and_length >> 6
            length = code_and_length & SwfTagCode.long_length_marker
            if length == SwfTagCode.long_length_marker:
                length = reader.bget_u32()
            tag_body = reader.bget(length)
        except BufferUnderrun as e:
            raise MalformedContainer(f"Tag record does not fit ({e})", tag_offset) from e

        if code == SwfTagCode.end:
            return

        body_offset = reader.btell() - length
        try:
            yield _read_tag(code, SwfReader(tag_body, base_offset=body_offset), tag_offset)
        except BufferUnderrun as e:
            raise MalformedContainer(f"Tag {code} body is truncated ({e})", e.offset) from e


def _read_tag(code: int, tag: SwfReader, tag_offset: int):
    if code == SwfTagCode.symbol_class:
        # uint16: count
        # count * (uint16 id, char[] name)
        count = tag.bget_u16()
        entries = tuple((tag.bget_u16(), tag.bget_string_c()) for _ in range(count))
        return SymbolClassDeclaration(entries, tag_offset)

    if code == SwfTagCode.define_binary_data:
        # uint16: id
        # uint32: reserved, always 0
        asset_id = tag.bget_u16()
        tag.bget_u32()
        return BinaryDataAsset(asset_id, tag.bget_rest(), tag_offset)

    if code in (SwfTagCode.define_bits_lossless, SwfTagCode.define_bits_lossless_2):
        # uint16: id
        # uint8: format
        # uint16: width, uint16: height
        # uint8: colour table size - 1, colour mapped images only
        asset_id = tag.bget_u16()
        pixel_format = tag.bget_u8()
        width = tag.bget_u16()
        height = tag.bget_u16()
        color_table_size = 0
        if pixel_format == BitmapFormat.color_mapped_8:
            color_table_size = tag.bget_u8() + 1
        return LosslessBitmapAsset(
            asset_id,
            width,
            height,
            pixel_format,
            tag.bget_rest(),
            has_alpha=code == SwfTagCode.define_bits_lossless_2,
            color_table_size=color_table_size,
            offset=tag_offset)

    return OtherTag(code, tag.remaining(), tag_offset)
