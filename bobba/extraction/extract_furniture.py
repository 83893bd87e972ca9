# Credits: Bobba Research Team - 2026

import glob
import logging
import os
from multiprocessing import Pool
from typing import Optional

from bobba.external_knowledge import bundle_extensions
from bobba.extraction.bundle_outcome import BundleOutcome
from bobba.extraction.extract_bundle import extract_bundle_file

logger = logging.getLogger()


def find_bundles(bundle_folder: str) -> list:
    bundle_files = set()
    for extension in bundle_extensions:
        bundle_files.update(glob.glob(os.path.join(bundle_folder, f"*.{extension}")))
        bundle_files.update(glob.glob(os.path.join(bundle_folder, f"*.{extension.upper()}")))

    # "##" marks scratch copies that should not be extracted
    candidates = sorted(file for file in bundle_files if not os.path.basename(file).startswith("##"))

    # Each bundle owns <output>/<stem>, so only one file per stem gets extracted
    bundles = {}
    for file in candidates:
        stem = os.path.splitext(os.path.basename(file))[0]
        if stem in bundles:
            logger.warning("Ignoring %s, bundle %s is already taken by %s", file, stem, bundles[stem])
            continue
        bundles[stem] = file

    return list(bundles.values())


def extract_furniture(bundle_folder: str, output_folder: str, workers: Optional[int] = None) -> list:
    logger.info("Unpacking furniture bundles from %s", bundle_folder)

    bundle_files = find_bundles(bundle_folder)
    if len(bundle_files) == 0:
        logger.warning("No bundles found in %s", bundle_folder)
        return []

    workers = workers or os.cpu_count() or 1
    jobs = [(file, output_folder) for file in bundle_files]

    # Decompressing and encoding is CPU bound, one process per core
    if workers == 1:
        outcomes = [extract_bundle_file(*job) for job in jobs]
    else:
        with Pool(processes=min(workers, len(jobs))) as pool:
            outcomes = pool.starmap(extract_bundle_file, jobs)

    for outcome in outcomes:
        report_outcome(outcome)

    written = sum(outcome.written_count for outcome in outcomes)
    skipped = sum(outcome.skipped_count for outcome in outcomes)
    failed = sum(outcome.failed_count for outcome in outcomes)
    logger.info("Extracted %i bundles: %i written, %i skipped, %i failed", len(outcomes), written, skipped, failed)
    return outcomes


def report_outcome(outcome: BundleOutcome):
    if not outcome.ok:
        logger.error("FAIL; Bundle `%s` (%s): %s: %s", outcome.base_name, outcome.fatal.stage, outcome.fatal.error, outcome.fatal.reason)
        return

    for failure in outcome.failures:
        logger.warning("Bundle `%s`, asset %i: %s", outcome.base_name, failure.asset_id, failure.reason)

    logger.info("OK; Bundle `%s`: %i written, %i skipped, %i failed",
                outcome.base_name, outcome.written_count, outcome.skipped_count, outcome.failed_count)
