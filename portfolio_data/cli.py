"""Command line entry point: rebuild every content document from the CSV tables."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigError, describe, load_config
from .normalize import build_from_directory
from .writer import DocumentWriteError, write_documents

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert portfolio CSV tables into the JSON documents the site imports.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration (defaults to $PORTFOLIO_CONFIG when set).",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the source CSV tables.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory where the JSON documents will be written.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build and report, but do not write any document.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail (and write nothing) when any row had to be skipped.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (repeatable).",
    )
    return parser.parse_args(argv)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config, data_dir=args.data_dir, output_dir=args.output_dir)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG
    LOGGER.debug("Configuration: %s", describe(config))

    LOGGER.info("Building data from CSV files in %s", config.data_dir)
    documents, report = build_from_directory(config.data_dir, config.sources, config.aliases)

    if args.strict and report.errors:
        for diagnostic in report.errors:
            LOGGER.error("%s", diagnostic)
        LOGGER.error("Strict mode: %d malformed row(s); no documents written", len(report.errors))
        return EXIT_FAILED

    if args.dry_run:
        LOGGER.info("Dry run: skipping writes to %s", config.output_dir)
        return EXIT_OK

    try:
        written = write_documents(documents.to_documents(), config.output_dir, config.outputs)
    except DocumentWriteError as exc:
        LOGGER.error("Error writing %s: %s", exc.path, exc)
        return EXIT_FAILED

    LOGGER.info("Data build complete: %d documents in %s", len(written), config.output_dir)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> None:
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
