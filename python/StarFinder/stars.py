#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Star value type and the RA/Dec/magnitude window used to select stars

The same SkyRegion is used twice in a render: once to filter the
catalog, once as the projection window of the raster.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

logger = logging.getLogger("StarFinder.Stars")


@dataclass(frozen=True)
class Star:
    """A decoded catalog star, all values in degrees / visual magnitude"""

    ra: float
    dec: float
    mag: float


@dataclass(frozen=True)
class SkyRegion:
    """
    Rectangular RA/Dec window, bounds inclusive on all sides.

    An inverted window (min > max) is legal and simply contains nothing.
    """

    min_ra: float = 0.0
    max_ra: float = 360.0
    min_dec: float = -90.0
    max_dec: float = 90.0

    @property
    def ra_span(self) -> float:
        return self.max_ra - self.min_ra

    @property
    def dec_span(self) -> float:
        return self.max_dec - self.min_dec

    def contains(self, star: Star) -> bool:
        return (
            self.min_ra <= star.ra <= self.max_ra
            and self.min_dec <= star.dec <= self.max_dec
        )

    def __str__(self):
        return (
            f"RA {self.min_ra} to {self.max_ra}, Dec {self.min_dec} to {self.max_dec}"
        )


FULL_SKY = SkyRegion()


def filter_stars(
    stars: Iterable[Star], region: SkyRegion, max_magnitude: float
) -> List[Star]:
    """
    Select the stars inside region that are at least as bright as max_magnitude

    Lower magnitude is brighter, so stars with mag <= max_magnitude are kept.
    Catalog order is preserved.
    """
    filtered = [
        star for star in stars if region.contains(star) and star.mag <= max_magnitude
    ]
    logger.debug("Filter %s, mag <= %s: %d stars", region, max_magnitude, len(filtered))
    return filtered
