#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Render a star map from a Tycho-2 catalog

    python -m StarFinder.main data/tycho2/catalog.dat --max-magnitude 6 -o map.png

Anything not given on the command line comes from the config file
(-c) or the packaged defaults.
"""

import argparse
import datetime
import logging
import sys
from typing import List, Optional

from StarFinder import config, logconf, utils
from StarFinder.catalog import read_stars
from StarFinder.render import OVERLAP_POLICIES, render_stars, save_image
from StarFinder.stars import SkyRegion, filter_stars
from StarFinder.utils import Timer

logger = logging.getLogger("StarFinder.Main")

# argparse dest -> config option
CONFIG_OPTIONS = [
    "catalog_path",
    "output",
    "width",
    "height",
    "min_ra",
    "max_ra",
    "min_dec",
    "max_dec",
    "max_magnitude",
    "workers",
    "max_reported_skips",
    "overlap",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a grayscale star map from a Tycho-2 catalog"
    )
    parser.add_argument(
        "catalog_path",
        metavar="FILE",
        nargs="?",
        default=None,
        help="Path to the Tycho-2 catalog file",
    )

    general = parser.add_argument_group("General options")
    general.add_argument(
        "-W", "--width", type=int, default=None, help="Output image width in pixels"
    )
    general.add_argument(
        "-H", "--height", type=int, default=None, help="Output image height in pixels"
    )
    general.add_argument(
        "-o", "--output", default=None, help="Output image file name"
    )
    general.add_argument(
        "--overlap",
        choices=OVERLAP_POLICIES,
        default=None,
        help="Which star keeps a pixel several stars land on",
    )
    general.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Processes used to tokenize the catalog",
    )
    general.add_argument(
        "--max-reported-skips",
        type=int,
        default=None,
        help="Number of skipped rows reported individually",
    )
    general.add_argument(
        "-c", "--config", default=None, help="JSON config file with option values"
    )
    general.add_argument(
        "--logconf",
        default=None,
        help="JSON5 logging configuration file (default: the packaged one)",
    )
    general.add_argument(
        "-x", "--verbose", help="Set logging to debug mode", action="store_true"
    )
    general.add_argument("-l", "--log", help="Log to file", action="store_true")
    general.add_argument(
        "--progress", help="Show a progress bar while decoding", action="store_true"
    )

    filters = parser.add_argument_group("Filter options")
    filters.add_argument(
        "--min-ra", type=float, default=None, help="Minimum Right Ascension (degrees)"
    )
    filters.add_argument(
        "--max-ra", type=float, default=None, help="Maximum Right Ascension (degrees)"
    )
    filters.add_argument(
        "--min-dec", type=float, default=None, help="Minimum Declination (degrees)"
    )
    filters.add_argument(
        "--max-dec", type=float, default=None, help="Maximum Declination (degrees)"
    )
    filters.add_argument(
        "--max-magnitude",
        type=float,
        default=None,
        help="Maximum visual magnitude (lower is brighter)",
    )
    return parser


def apply_args(args: argparse.Namespace, cfg: config.Config) -> None:
    """Command line values win over the config file, kept for this run only"""
    for option in CONFIG_OPTIONS:
        value = getattr(args, option, None)
        if value is not None:
            cfg.override_option(option, value)


def run(cfg: config.Config, progress: bool = False) -> int:
    catalog_path = cfg.get_option("catalog_path")
    output = cfg.get_option("output")
    width = int(cfg.get_option("width"))
    height = int(cfg.get_option("height"))
    max_magnitude = float(cfg.get_option("max_magnitude"))
    region: SkyRegion = cfg.region()

    logger.info("Reading stars from: %s", catalog_path)
    logger.info("RA range: %s to %s", region.min_ra, region.max_ra)
    logger.info("Dec range: %s to %s", region.min_dec, region.max_dec)
    logger.info("Max magnitude: %s", max_magnitude)

    try:
        loaded = read_stars(
            catalog_path,
            workers=int(cfg.get_option("workers")),
            max_reported_skips=int(cfg.get_option("max_reported_skips")),
            progress=progress,
        )
    except OSError as e:
        logger.error("Cannot read catalog %s: %s", catalog_path, e)
        return 1

    with Timer("filter") as filtering:
        stars = filter_stars(loaded.stars, region, max_magnitude)
    logger.info("Time taken to filtering: %.6fs", filtering.elapsed)
    logger.info("Total stars: %d", len(stars))

    with Timer("render and save") as rendering:
        raster = render_stars(
            stars, width, height, region, overlap=cfg.get_option("overlap")
        )
        try:
            save_image(raster, output)
        except (OSError, ValueError) as e:
            # ValueError: Pillow has no encoder for the suffix
            logger.error("Cannot write image %s: %s", output, e)
            return 1
    logger.info("Time taken to render and save image: %.3fs", rendering.elapsed)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_file = None
    if args.log:
        datenow = datetime.datetime.now()
        log_file = f"StarFinder-{datenow:%Y%m%d-%H_%M_%S}.log"
    try:
        logconf.setup_logging(
            args.logconf or utils.default_logconf_file,
            verbose=args.verbose,
            log_file=log_file,
        )
    except FileNotFoundError as e:
        logging.getLogger().warning("%s, proceeding with basic configuration.", e)

    cfg = config.Config(args.config)
    apply_args(args, cfg)

    if int(cfg.get_option("width")) <= 0 or int(cfg.get_option("height")) <= 0:
        parser.error("width and height must be positive")

    return run(cfg, progress=args.progress)


if __name__ == "__main__":
    sys.exit(main())
