"""
Ignore region mask

Answers "is this pixel excluded from comparison?" for a fixed set of
ignore regions. Containment is a union, so overlapping regions never
double-count a pixel.
"""

import logging
from collections.abc import Iterable

import numpy as np

from visual_diff_toolkit.visual_testing.models import IgnoreRegion

logger = logging.getLogger(__name__)


class RegionMask:
    """
    Immutable set of ignore regions.

    Uses a linear scan over regions; rasterize() produces the boolean tile
    consumed by the comparison loop.
    """

    def __init__(self, regions: Iterable[IgnoreRegion] = ()):
        self._regions: tuple[IgnoreRegion, ...] = tuple(regions)

    @property
    def regions(self) -> tuple[IgnoreRegion, ...]:
        return self._regions

    def __len__(self) -> int:
        return len(self._regions)

    def __bool__(self) -> bool:
        return bool(self._regions)

    def contains(self, x: int, y: int) -> bool:
        """True if (x, y) lies inside at least one region"""
        return any(region.contains(x, y) for region in self._regions)

    def rasterize(
        self,
        width: int,
        height: int,
        row_start: int = 0,
        row_stop: int | None = None,
    ) -> np.ndarray:
        """
        Boolean mask for rows [row_start, row_stop) of a width x height image.

        Regions reaching past the image edges are clipped.

        Returns:
            Array of shape (row_stop - row_start, width), True = ignored
        """
        if row_stop is None:
            row_stop = height
        mask = np.zeros((row_stop - row_start, width), dtype=bool)

        for region in self._regions:
            top = max(region.y, row_start)
            bottom = min(region.bottom, row_stop)
            left = max(region.x, 0)
            right = min(region.right, width)
            if top >= bottom or left >= right:
                continue
            mask[top - row_start : bottom - row_start, left:right] = True

        return mask

    def ignored_count(self, width: int, height: int) -> int:
        """Number of distinct pixels of a width x height image covered by the mask"""
        if not self._regions:
            return 0
        return int(self.rasterize(width, height).sum())
