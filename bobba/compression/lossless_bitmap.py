# Credits: Bobba Research Team - 2026

# Lossless bitmaps keep their pixels zlib packed in ARGB order,
# they get unpacked to RGBA and written out as PNG.
import io
import logging
import zlib
from typing import Optional

import numpy
from PIL import Image

from bobba.external_knowledge import BitmapFormat

logger = logging.getLogger()


class PixelCodecError(Exception):
    pass


class DecompressionFailed(PixelCodecError):
    pass


class UnsupportedPixelFormat(PixelCodecError):
    def __init__(self, pixel_format: int):
        super().__init__(pixel_format)
        self.pixel_format = pixel_format

    def __str__(self):
        return f"Unsupported bitmap format {BitmapFormat.name(self.pixel_format)}"


class EncodingFailed(PixelCodecError):
    pass


def decompress_pixels(packed_data, expected_length: Optional[int] = None) -> bytes:
    if expected_length is None:
        try:
            return zlib.decompress(packed_data)
        except zlib.error as e:
            raise DecompressionFailed(f"Pixel data is corrupt: {e}") from e

    # Inflate at most one byte past the bitmap size, anything longer is rejected without unpacking it all
    decompressor = zlib.decompressobj()
    try:
        pixel_data = decompressor.decompress(packed_data, expected_length + 1)
    except zlib.error as e:
        raise DecompressionFailed(f"Pixel data is corrupt: {e}") from e

    if len(pixel_data) > expected_length or decompressor.unconsumed_tail:
        raise DecompressionFailed(f"Pixel data unpacks past the expected {expected_length} bytes")
    if not decompressor.eof:
        raise DecompressionFailed("Pixel data is corrupt: incomplete or truncated stream")
    return pixel_data


def argb_to_rgba(pixel_data, opaque: bool = False) -> bytes:
    if len(pixel_data) % 4 != 0:
        raise DecompressionFailed(f"Got {len(pixel_data)} bytes of pixel data, not a whole number of 32-bit pixels")

    argb = numpy.frombuffer(pixel_data, dtype=numpy.uint8).reshape(-1, 4)
    # [a, r, g, b] -> [r, g, b, a]
    rgba = argb[:, [1, 2, 3, 0]]
    if opaque:
        rgba[:, 3] = 0xFF
    return rgba.tobytes()


def decode_pixels(packed_data, pixel_format: int, width: int, height: int, has_alpha: bool = True) -> bytes:
    """Unpack a lossless bitmap into a flat, row major RGBA buffer."""
    if pixel_format != BitmapFormat.rgb_32:
        raise UnsupportedPixelFormat(pixel_format)

    pixel_data = decompress_pixels(packed_data, width * height * 4)
    logger.debug("Unpacked %i bytes of pixels for a %ix%i bitmap", len(pixel_data), width, height)

    # Version 1 bitmaps have no alpha, the first byte of each pixel is padding
    return argb_to_rgba(pixel_data, opaque=not has_alpha)


def encode_png(rgba_data, width: int, height: int) -> bytes:
    expected_length = width * height * 4
    if width <= 0 or height <= 0:
        raise EncodingFailed(f"Cannot encode a {width}x{height} image")
    if len(rgba_data) != expected_length:
        raise EncodingFailed(f"A {width}x{height} image needs {expected_length} bytes, got {len(rgba_data)}")

    try:
        image = Image.frombytes("RGBA", (width, height), bytes(rgba_data))
        output = io.BytesIO()
        image.save(output, "PNG")
    except (OSError, ValueError) as e:
        raise EncodingFailed(f"PNG encoding failed: {e}") from e

    return output.getvalue()


def convert_bitmap(bitmap) -> bytes:
    rgba_data = decode_pixels(bitmap.packed_data, bitmap.pixel_format, bitmap.width, bitmap.height, bitmap.has_alpha)
    return encode_png(rgba_data, bitmap.width, bitmap.height)
