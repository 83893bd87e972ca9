# Credits: Bobba Research Team - 2026

import logging
import os

from bobba.extraction.bundle_outcome import BundleFailure, BundleOutcome
from bobba.extraction.extract_assets import extract_assets
from bobba.parser.parse_symbols import SymbolTableError, build_symbol_table
from bobba.parser.parse_tags import TagStreamError, read_tags

logger = logging.getLogger()


def extract_bundle(bundle_data, base_name: str, output_root: str) -> BundleOutcome:
    """Extract every named asset of one bundle into <output_root>/<base_name>.

    A bundle that can't be parsed or named produces no files at all,
    everything after that is reported per asset.
    """
    try:
        tags = read_tags(bundle_data)
    except TagStreamError as e:
        return BundleOutcome(base_name, fatal=BundleFailure.from_exception("read", e))

    try:
        symbols = build_symbol_table(tags, base_name)
    except SymbolTableError as e:
        return BundleOutcome(base_name, fatal=BundleFailure.from_exception("symbols", e))

    logger.debug("Bundle %s has %i tags and %i symbols", base_name, len(tags), len(symbols))

    output_folder = os.path.join(output_root, base_name)
    try:
        return extract_assets(tags, symbols, output_folder, base_name)
    except OSError as e:
        # Only the output folder itself can fail here, asset writes are recorded per asset
        return BundleOutcome(base_name, fatal=BundleFailure.from_exception("io", e))


def extract_bundle_file(bundle_path: str, output_root: str) -> BundleOutcome:
    base_name = os.path.splitext(os.path.basename(bundle_path))[0]
    try:
        with open(bundle_path, "rb") as f:
            bundle_data = f.read()
    except OSError as e:
        return BundleOutcome(base_name, fatal=BundleFailure.from_exception("io", e))

    return extract_bundle(bundle_data, base_name, output_root)
