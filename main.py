#!/usr/bin/env python3
# Credits: Bobba Research Team - 2026

import argparse
import logging
import os
import sys

from bobba import external_knowledge
from bobba.extraction.extract_furniture import extract_furniture

logger = logging.getLogger()

TOOL_VERSION = "0.1.0"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='BobbaTools')
    parser.add_argument('-dp', '--data-path', default=external_knowledge.default_data_path)
    parser.add_argument('-bf', '--bundle-folder', help="defaults to <data-path>/furniture")
    parser.add_argument('-of', '--output-folder', help="defaults to <data-path>/extracted")
    parser.add_argument('-w', '--workers', type=int, default=os.cpu_count())
    parser.add_argument('-v', '--verbose', action="store_true")
    args = parser.parse_args(argv)

    if args.bundle_folder is None:
        args.bundle_folder = os.path.join(args.data_path, external_knowledge.bundle_folder_name)
    if args.output_folder is None:
        args.output_folder = os.path.join(args.data_path, external_knowledge.extracted_folder_name)
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    return args


def run(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(asctime)s] [%(module)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S')

    logger.info("Running the Bobba tool v%s", TOOL_VERSION)

    if not os.path.isdir(args.bundle_folder):
        logger.warning("Bundle folder %s does not exist, quitting", args.bundle_folder)
        return 0

    if not os.path.exists(args.output_folder):
        os.makedirs(args.output_folder)

    outcomes = extract_furniture(args.bundle_folder, args.output_folder, args.workers)
    return 0 if all(outcome.ok for outcome in outcomes) else 1


if __name__ == '__main__':
    sys.exit(run())
