"""Command-line entry point: ``python -m seed [--data GLOB]``."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from seed.errors import SeedError
from seed.seed import run
from storefront.config import Settings

logger = logging.getLogger("seed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m seed",
        description="Reset the storefront tables and fill them with sample data.",
    )
    parser.add_argument(
        "--data",
        metavar="GLOB",
        default=None,
        help="fixture files to load (default: SEEDS_DATA_GLOB or seed/data/*.yml)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("invalid configuration: %s", exc)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(settings, data_glob=args.data))
    except SeedError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
