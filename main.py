"""Command-line interface for building a normalized image corpus."""
from __future__ import annotations

import logging
import sys
from typing import List

from image_corpus.config import CorpusConfig, UsageError, build_parser, resolve_config
from image_corpus.processor import FatalProcessingError, process_images
from image_corpus.walker import walk_directory


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        force=True,
    )


def run(config: CorpusConfig) -> int:
    """Mirror ``config.source_dir`` and process every image found in it."""

    logging.info("Selected resolution: %s", config.target)
    logging.info("Output type: %s", config.output_type or "same as source")
    logging.info("Output directory: %s", config.output_dir)

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.error("Cannot create output directory %s: %s", config.output_dir, exc)
        return 1
    files = walk_directory(config.source_dir, config.output_dir)
    logging.info("Found %d file(s) under %s", len(files), config.source_dir)

    try:
        summary = process_images(files, config)
    except FatalProcessingError as exc:
        logging.error("Error: %s: %s", exc.path, exc.cause)
        logging.error(
            "A fatal error occurred, please review the error message, make changes, and try again"
        )
        return 1

    logging.info(
        "Processed %d image(s), skipped %d file(s). Report: %s",
        summary.processed,
        summary.skipped,
        summary.report_path,
    )
    logging.info("Thanks for using Image Corpus!")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = resolve_config(args)
    except UsageError as exc:
        if exc.exit_code:
            logging.error("%s", exc)
        else:
            parser.print_help()
        return exc.exit_code

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
