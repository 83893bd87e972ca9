# Credits: Bobba Research Team - 2026

# Knowledge about the SWF container used for furniture bundles.
# Tag layouts are documented next to the parsers in bobba/parser/parse_tags.py

class SwfSignature:
    uncompressed = b"FWS"
    zlib = b"CWS"
    lzma = b"ZWS"

    header_size = 8
    lzma_header_size = 17 # header + u32 compressed length + 5 bytes of LZMA properties


class SwfTagCode:
    end = 0
    define_bits_lossless = 20
    define_bits_lossless_2 = 36
    symbol_class = 76
    define_binary_data = 87

    long_length_marker = 0x3F


class BitmapFormat:
    color_mapped_8 = 3
    rgb_15 = 4
    rgb_32 = 5

    names = {
        color_mapped_8: "ColorMap8",
        rgb_15: "Rgb15",
        rgb_32: "Rgb32",
    }

    @staticmethod
    def name(pixel_format: int) -> str:
        return BitmapFormat.names.get(pixel_format, f"Other({pixel_format})")


# Class names are emitted as <bundle>_<asset>, e.g. "chair_polyfon_chair_polyfon_32_a_0_0"
symbol_name_separator = "_"

# Only the head of an unregistered asset is kept for diagnostics
unregistered_sample_size = 100

binary_data_extension = "xml"
bitmap_extension = "png"

default_data_path = "./data/"
bundle_folder_name = "furniture"
extracted_folder_name = "extracted"
bundle_extensions = ["swf"]
