#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Magnitude rasterizer

Plots stars into a single channel 8 bit raster.  RA maps linearly to x and
Dec to y across the SkyRegion window (no projection), and pixel brightness
encodes magnitude relative to the brightest and dimmest star plotted:

    normalized = (max_mag - mag) / (max_mag - min_mag)
    brightness = round(normalized ** 2.5 * 255)

so the brightest star is 255 and the dimmest is 0.
"""

import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np
from PIL import Image

from StarFinder.stars import FULL_SKY, SkyRegion, Star
from StarFinder.utils import create_path

logger = logging.getLogger("StarFinder.Render")

BRIGHTNESS_EXPONENT = 2.5

OVERLAP_LAST = "last"
OVERLAP_BRIGHTEST = "brightest"
OVERLAP_POLICIES = (OVERLAP_LAST, OVERLAP_BRIGHTEST)


def magnitude_to_brightness(
    mags: np.ndarray, min_mag: float, max_mag: float
) -> np.ndarray:
    """
    Pixel values (uint8) for an array of magnitudes

    If every magnitude is the same, all stars get full brightness.
    """
    mags = np.asarray(mags, dtype=np.float64)
    mag_range = max_mag - min_mag
    if mag_range == 0:
        normalized = np.ones_like(mags)
    else:
        # Inverse the magnitude scale (brighter stars have lower magnitudes)
        normalized = (max_mag - mags) / mag_range

    # Non-linear scaling to emphasize brighter stars
    brightness = np.rint(np.power(normalized, BRIGHTNESS_EXPONENT) * 255)
    return np.clip(brightness, 0, 255).astype(np.uint8)


def render_stars(
    stars: Sequence[Star],
    width: int,
    height: int,
    region: SkyRegion = FULL_SKY,
    overlap: str = OVERLAP_LAST,
) -> np.ndarray:
    """
    Rasterize stars onto a black (height, width) uint8 array

    Args:
        stars: Stars to plot, usually already filtered with region
        width: Raster width in pixels
        height: Raster height in pixels
        region: RA/Dec window mapped onto the raster.  Pixel mapping is
            half open, a star on max_ra or max_dec falls off the raster.
        overlap: What happens when several stars land on one pixel,
            "last" keeps the last one in catalog order, "brightest"
            keeps the highest value

    Returns:
        numpy array, row index is y (Dec), column index is x (RA)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster size must be positive, got {width}x{height}")
    if overlap not in OVERLAP_POLICIES:
        raise ValueError(
            f"Unknown overlap policy {overlap!r}, expected one of {OVERLAP_POLICIES}"
        )

    raster = np.zeros((height, width), dtype=np.uint8)
    if len(stars) == 0:
        return raster

    stars_array = np.array([(s.ra, s.dec, s.mag) for s in stars], dtype=np.float64)
    ra_arr = stars_array[:, 0]
    dec_arr = stars_array[:, 1]
    mag_arr = stars_array[:, 2]

    # Zero width windows give nan/inf here, those never pass the mask below
    with np.errstate(divide="ignore", invalid="ignore"):
        x_screen = np.floor((ra_arr - region.min_ra) / region.ra_span * width)
        y_screen = np.floor((dec_arr - region.min_dec) / region.dec_span * height)

    mask = (
        np.isfinite(x_screen)
        & np.isfinite(y_screen)
        & (x_screen >= 0)
        & (x_screen < width)
        & (y_screen >= 0)
        & (y_screen < height)
    )

    brightness = magnitude_to_brightness(mag_arr, mag_arr.min(), mag_arr.max())

    ix = x_screen[mask].astype(np.intp)
    iy = y_screen[mask].astype(np.intp)
    values = brightness[mask]
    logger.debug("Render: %d of %d stars on the raster", len(ix), len(stars))

    if overlap == OVERLAP_BRIGHTEST:
        np.maximum.at(raster, (iy, ix), values)
    else:
        # Fancy assignment doesn't guarantee which duplicate wins, so keep
        # only the last occurrence of every pixel
        pixels = iy * width + ix
        _, last_from_end = np.unique(pixels[::-1], return_index=True)
        keep = len(pixels) - 1 - last_from_end
        raster.flat[pixels[keep]] = values[keep]

    return raster


def raster_to_image(raster: np.ndarray) -> Image.Image:
    """Grayscale PIL image of a raster"""
    return Image.fromarray(np.ascontiguousarray(raster, dtype=np.uint8))


def save_image(raster: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Encode raster to path, format picked from the suffix (PNG if none)
    """
    path = Path(path)
    create_path(path.parent)
    image = raster_to_image(raster)
    image_format = None if path.suffix else "PNG"
    image.save(path, format=image_format)
    logger.info("Image saved as: %s", path)
    return path
