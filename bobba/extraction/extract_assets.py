# Credits: Bobba Research Team - 2026

# Second pass over a bundle: write every named binary blob and bitmap to the output folder.
# Assets that already exist are left alone, so an interrupted extraction can simply be rerun.
import logging
import os
from typing import Optional

from bobba import util
from bobba.compression.lossless_bitmap import PixelCodecError, convert_bitmap
from bobba.external_knowledge import binary_data_extension, bitmap_extension, unregistered_sample_size
from bobba.extraction.bundle_outcome import AssetFailure, BundleOutcome
from bobba.parser.parse_tags import BinaryDataAsset, LosslessBitmapAsset

logger = logging.getLogger()


class MaterializeError(Exception):
    pass


class UnregisteredAsset(MaterializeError):
    def __init__(self, asset_id: int, tag_kind: str, sample: bytes):
        super().__init__(asset_id, tag_kind, sample)
        self.asset_id = asset_id
        self.tag_kind = tag_kind
        self.sample = sample

    def __str__(self):
        return f"{self.tag_kind.upper()}: Asset id ({self.asset_id}) was not registered! Bytes: {util.hex_preview(self.sample)}"


class AssetWriteFailed(MaterializeError):
    def __init__(self, path: str, reason: str):
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self):
        return f"Could not write {self.path}: {self.reason}"


def extract_assets(tags, symbols: dict, output_folder: str, base_name: Optional[str] = None) -> BundleOutcome:
    outcome = BundleOutcome(base_name or os.path.basename(os.path.normpath(output_folder)))

    os.makedirs(output_folder, exist_ok=True)

    for tag in tags:
        if isinstance(tag, BinaryDataAsset):
            _extract_asset(outcome, tag, "binary", tag.payload, binary_data_extension, symbols, output_folder,
                           lambda asset: asset.payload)
        elif isinstance(tag, LosslessBitmapAsset):
            _extract_asset(outcome, tag, "bitmap", tag.packed_data, bitmap_extension, symbols, output_folder,
                           convert_bitmap)

    return outcome


def _extract_asset(outcome: BundleOutcome, tag, tag_kind: str, raw_data, extension: str, symbols: dict, output_folder: str, convert):
    try:
        file_stem = symbols.get(tag.asset_id)
        if file_stem is None:
            raise UnregisteredAsset(tag.asset_id, tag_kind, bytes(raw_data[:unregistered_sample_size]))

        target_path = _target_path(output_folder, file_stem, extension)
        if os.path.exists(target_path):
            logger.debug("Skipping %s, already extracted", target_path)
            outcome.skipped.append(target_path)
            return

        data = convert(tag)
        try:
            util.write_file_atomic(target_path, data)
        except OSError as e:
            raise AssetWriteFailed(target_path, str(e)) from e

    except UnregisteredAsset as e:
        outcome.failures.append(AssetFailure.from_exception(tag.asset_id, tag_kind, e, e.sample))
        return
    except (PixelCodecError, AssetWriteFailed) as e:
        outcome.failures.append(AssetFailure.from_exception(tag.asset_id, tag_kind, e))
        return

    logger.debug("Wrote %s (%i bytes)", target_path, len(data))
    outcome.written.append(target_path)


def _target_path(output_folder: str, file_stem: str, extension: str) -> str:
    file_name = f"{file_stem}.{extension}"
    if "/" in file_stem or "\\" in file_stem or file_stem in (".", ".."):
        raise AssetWriteFailed(os.path.join(output_folder, file_name), "file name leaves the output folder")
    return os.path.join(output_folder, file_name)
