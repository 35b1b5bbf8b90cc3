"""
Screenshot Comparison Engine

Pixel-by-pixel comparison of a baseline and a candidate image with ignore
regions, a selectable metric and a pass/fail threshold.

A run is a pure function of its inputs:
(baseline, candidate, regions, method, threshold) -> ComparisonOutcome
"""

import asyncio
import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import numpy as np

from visual_diff_toolkit.core.config import Settings, get_settings
from visual_diff_toolkit.core.exceptions import ComparisonCancelledError, DimensionMismatchError
from visual_diff_toolkit.visual_testing.cancellation import CancellationToken
from visual_diff_toolkit.visual_testing.metrics import PixelComparator, create_metric
from visual_diff_toolkit.visual_testing.models import (
    CHANNELS,
    ComparisonMethod,
    DiffResult,
    IgnoreRegion,
    RasterImage,
)
from visual_diff_toolkit.visual_testing.region_mask import RegionMask
from visual_diff_toolkit.visual_testing.region_store import IgnoreRegionStore
from visual_diff_toolkit.visual_testing.renderer import DiffRenderer
from visual_diff_toolkit.visual_testing.report import ComparisonReport
from visual_diff_toolkit.visual_testing.threshold import ThresholdEvaluator

logger = logging.getLogger(__name__)

RegionsInput = IgnoreRegionStore | Iterable[IgnoreRegion | dict[str, Any]]


@dataclass(frozen=True)
class ComparisonOutcome:
    """Result of a comparison plus the verdict and the inputs that produced it"""

    result: DiffResult
    passed: bool
    method: ComparisonMethod
    threshold: float
    regions: tuple[IgnoreRegion, ...]

    @property
    def diff_percentage(self) -> float:
        return self.result.diff_percentage

    @property
    def diff_image(self) -> RasterImage:
        return self.result.diff_image

    def to_report(self) -> ComparisonReport:
        return ComparisonReport(
            diff_percentage=self.result.diff_percentage,
            is_passed=self.passed,
            method=self.method,
            threshold=self.threshold,
            ignored_regions_count=len(self.regions),
            differing_pixels=self.result.differing_pixels,
            total_pixels=self.result.total_pixels,
            width=self.result.diff_image.width,
            height=self.result.diff_image.height,
        )


class DiffEngine:
    """
    Compares screenshots tile by tile.

    Features:
    - PIXEL / STRICT / LUMINANCE metrics
    - Ignore regions (snapshotted when a run starts)
    - Diff image: red mismatches, faded matches, grayscale ignored zones
    - Optional worker threads over disjoint row tiles
    - Cancellation token / deadline checked at tile boundaries
    """

    def __init__(
        self,
        settings: Settings | None = None,
        max_workers: int | None = None,
        tile_rows: int | None = None,
        renderer: DiffRenderer | None = None,
    ):
        """
        Initialize engine.

        Args:
            settings: Settings to read defaults from (default: get_settings())
            max_workers: Worker threads per run (default: settings.max_workers)
            tile_rows: Rows per tile (default: settings.tile_rows)
            renderer: Diff image renderer (default: DiffRenderer())
        """
        self.settings = settings or get_settings()
        self.max_workers = max(1, max_workers or self.settings.max_workers)
        self.tile_rows = max(1, tile_rows or self.settings.tile_rows)
        self.renderer = renderer or DiffRenderer()

    def compare(
        self,
        baseline: RasterImage,
        candidate: RasterImage,
        regions: RegionsInput = (),
        method: ComparisonMethod | str | None = None,
        threshold: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ComparisonOutcome:
        """
        Compare two images.

        Args:
            baseline: Expected image
            candidate: Image under test, same size as baseline
            regions: Ignore regions (IgnoreRegion, {x, y, width, height} dicts, or a store)
            method: Comparison method (default: settings.default_method)
            threshold: Max diff percentage that passes (default: settings.default_threshold)
            cancel_token: Optional cancellation signal

        Returns:
            ComparisonOutcome with the diff result and pass/fail verdict

        Raises:
            DimensionMismatchError: If the images differ in size
            InvalidRegionError: If a region has non-positive size
            ComparisonCancelledError: If cancelled before completion
        """
        if baseline.size != candidate.size:
            logger.error(f"Image size mismatch: baseline={baseline.size}, candidate={candidate.size}")
            raise DimensionMismatchError(baseline.size, candidate.size)

        snapshot = self.snapshot_regions(regions)
        method = ComparisonMethod.parse(method or self.settings.default_method)
        evaluator = ThresholdEvaluator(
            self.settings.default_threshold if threshold is None else threshold
        )
        comparator = PixelComparator(
            create_metric(
                method,
                pixel_distance_threshold=self.settings.pixel_distance_threshold,
                luminance_threshold=self.settings.luminance_threshold,
            )
        )
        mask = RegionMask(snapshot)
        token = cancel_token or CancellationToken()

        width, height = baseline.size
        tiles = self._tile_bounds(height)
        logger.info(
            f"Comparing {width}x{height} images: method={method.value}, "
            f"threshold={evaluator.threshold}, regions={len(snapshot)}, tiles={len(tiles)}"
        )

        base_data = baseline.as_array()
        cand_data = candidate.as_array()
        output = np.empty((height, width, CHANNELS), dtype=np.uint8)
        completed = [0]
        completed_lock = threading.Lock()

        def run_tile(index: int) -> tuple[int, int]:
            token.raise_if_cancelled(completed_tiles=completed[0])
            start, stop = tiles[index]
            ignored = mask.rasterize(width, height, start, stop) if mask else None
            differing, count = comparator.compare_tile(
                base_data[start:stop], cand_data[start:stop], ignored
            )
            # tiles own disjoint row slices of the output
            output[start:stop] = self.renderer.render_tile(base_data[start:stop], differing, ignored)
            ignored_count = int(np.count_nonzero(ignored)) if ignored is not None else 0
            logger.debug(f"Tile {index} rows {start}-{stop}: {count} differing, {ignored_count} ignored")
            with completed_lock:
                completed[0] += 1
            return count, ignored_count

        if self.max_workers == 1 or len(tiles) == 1:
            tile_counts = [run_tile(index) for index in range(len(tiles))]
        else:
            tile_counts = self._run_parallel(run_tile, len(tiles))

        token.raise_if_cancelled(completed_tiles=len(tiles))

        differing_pixels = sum(count for count, _ in tile_counts)
        ignored_pixels = sum(ignored for _, ignored in tile_counts)
        total_pixels = baseline.total_pixels
        diff_percentage = comparator.diff_percentage(differing_pixels, total_pixels)
        passed = evaluator.is_passed(diff_percentage)

        logger.info(
            f"Comparison complete: diff={diff_percentage:.4f}%, threshold={evaluator.threshold:.2f}%, "
            f"passed={passed}, diff_pixels={differing_pixels}/{total_pixels}"
        )

        result = DiffResult(
            diff_percentage=diff_percentage,
            diff_image=RasterImage.from_array(output),
            differing_pixels=differing_pixels,
            total_pixels=total_pixels,
            ignored_pixels=ignored_pixels,
        )
        return ComparisonOutcome(
            result=result,
            passed=passed,
            method=method,
            threshold=evaluator.threshold,
            regions=snapshot,
        )

    async def compare_async(
        self,
        baseline: RasterImage,
        candidate: RasterImage,
        regions: RegionsInput = (),
        method: ComparisonMethod | str | None = None,
        threshold: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ComparisonOutcome:
        """
        Run compare() in a worker thread.

        Cancelling the awaiting task trips the token so the worker stops at
        its next tile boundary.

        Raises:
            asyncio.CancelledError: If the awaiting task is cancelled
        """
        token = cancel_token or CancellationToken()
        snapshot = self.snapshot_regions(regions)
        try:
            return await asyncio.to_thread(
                self.compare, baseline, candidate, snapshot, method, threshold, token
            )
        except asyncio.CancelledError:
            token.cancel("Comparison task cancelled")
            logger.info("Comparison task cancelled; worker will stop at next tile")
            raise

    @staticmethod
    def snapshot_regions(regions: RegionsInput) -> tuple[IgnoreRegion, ...]:
        """Freeze the region list for one run"""
        if isinstance(regions, IgnoreRegionStore):
            return regions.snapshot()
        return tuple(
            region if isinstance(region, IgnoreRegion) else IgnoreRegion.from_dict(region)
            for region in list(regions)
        )

    def _tile_bounds(self, height: int) -> list[tuple[int, int]]:
        return [
            (start, min(start + self.tile_rows, height))
            for start in range(0, height, self.tile_rows)
        ]

    def _run_parallel(self, run_tile, tile_count: int) -> list[tuple[int, int]]:
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="visual-diff"
        ) as pool:
            futures = [pool.submit(run_tile, index) for index in range(tile_count)]
            try:
                return [future.result() for future in futures]
            except ComparisonCancelledError:
                for future in futures:
                    future.cancel()
                raise
