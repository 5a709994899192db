#!/usr/bin/env python3

import argparse
import logging
from pathlib import Path

from camt_downgrade.config import ConverterConfig
from camt_downgrade.converter import convert_file
from camt_downgrade.errors import ConversionError
from camt_downgrade.schema import SOURCE_VERSION, TARGET_VERSION

logger = logging.getLogger(__name__)


def configure_logging(level) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="camt-downgrade",
        description=f"Convert CAMT files from {SOURCE_VERSION} to {TARGET_VERSION}",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        metavar="INPUT",
        help=f"Path to a {SOURCE_VERSION} file to convert",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output path (only with a single input). "
        "Defaults to <input stem>_08.xml next to the input.",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="YAML configuration file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debugging output"
    )
    args = parser.parse_args(argv)

    if args.output is not None and len(args.inputs) > 1:
        parser.error("--output can only be used with a single input file")

    if args.verbose:
        configure_logging(logging.DEBUG)
    try:
        config = ConverterConfig.from_yaml(args.config) if args.config else None
    except (OSError, TypeError, ValueError) as e:
        parser.error(f"invalid configuration {args.config}: {e}")
    config = config or ConverterConfig()
    if not args.verbose:
        configure_logging(config.log_level.upper())

    failed = 0
    for path in args.inputs:
        if not path.is_file():
            logger.error(f"Input file does not exist: {path}")
            failed += 1
            continue
        try:
            output = convert_file(path, output=args.output, config=config)
        except (ConversionError, OSError) as e:
            logger.error(f"Could not convert {path}: {e}")
            failed += 1
            continue
        print(f"Converted {path} -> {output}")

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
