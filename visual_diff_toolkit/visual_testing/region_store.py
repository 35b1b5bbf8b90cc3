"""
Ignore region store

Session-scoped list of ignore regions. Mutated only through explicit
add/remove/clear calls; comparison runs read an immutable snapshot.
"""

import logging
import threading
from collections.abc import Iterable

from visual_diff_toolkit.core.exceptions import ValidationError
from visual_diff_toolkit.visual_testing.models import IgnoreRegion

logger = logging.getLogger(__name__)


class IgnoreRegionStore:
    """
    Thread-safe ignore region list bound to one baseline image.

    Replacing the baseline clears the list, since regions are expressed in
    that baseline's pixel space.
    """

    def __init__(self, baseline_size: tuple[int, int] | None = None):
        self._regions: list[IgnoreRegion] = []
        self._baseline_size = baseline_size
        self._lock = threading.Lock()

    @property
    def baseline_size(self) -> tuple[int, int] | None:
        return self._baseline_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._regions)

    def add(self, region: IgnoreRegion) -> None:
        with self._lock:
            self._regions.append(region)
            count = len(self._regions)
        logger.debug(f"Added ignore region {region.to_dict()} ({count} total)")

    def extend(self, regions: Iterable[IgnoreRegion]) -> None:
        regions = list(regions)
        with self._lock:
            self._regions.extend(regions)

    def remove(self, index: int) -> IgnoreRegion:
        with self._lock:
            try:
                return self._regions.pop(index)
            except IndexError:
                raise ValidationError(
                    f"No ignore region at index {index} ({len(self._regions)} stored)"
                )

    def clear(self) -> None:
        with self._lock:
            self._regions.clear()

    def replace_baseline(self, width: int, height: int) -> None:
        """Bind to a new baseline image and drop all regions"""
        with self._lock:
            dropped = len(self._regions)
            self._regions.clear()
            self._baseline_size = (width, height)
        if dropped:
            logger.info(f"Baseline replaced ({width}x{height}); cleared {dropped} ignore region(s)")

    def snapshot(self) -> tuple[IgnoreRegion, ...]:
        """Copy of the current regions, unaffected by later edits"""
        with self._lock:
            return tuple(self._regions)
