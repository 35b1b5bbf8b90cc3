"""
Pixel comparison metrics

Each ComparisonMethod maps to a PixelMetric strategy that classifies a
whole tile of pixel pairs at once. The strategy is picked once per run and
applied uniformly to every tile.
"""

import logging

import numpy as np

from visual_diff_toolkit.visual_testing.models import ComparisonMethod

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_THRESHOLD = 10.0


def luma(pixels: np.ndarray) -> np.ndarray:
    """Perceived brightness (0.299r + 0.587g + 0.114b) of an (..., 4) uint8 array"""
    rgb = pixels[..., :3].astype(np.float64)
    return 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]


class PixelMetric:
    """Base strategy: decides which pixel pairs differ"""

    method: ComparisonMethod

    def differs(self, baseline: np.ndarray, candidate: np.ndarray) -> np.ndarray:
        """
        Classify pixel pairs.

        Args:
            baseline: (rows, width, 4) uint8 tile
            candidate: tile of the same shape

        Returns:
            (rows, width) bool array, True = differing
        """
        raise NotImplementedError

    def pixel_differs(
        self, baseline_pixel: tuple[int, int, int, int], candidate_pixel: tuple[int, int, int, int]
    ) -> bool:
        """Classify a single RGBA pair"""
        base = np.array([[baseline_pixel]], dtype=np.uint8)
        cand = np.array([[candidate_pixel]], dtype=np.uint8)
        return bool(self.differs(base, cand)[0, 0])

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EuclideanMetric(PixelMetric):
    """Euclidean distance over (dr, dg, db, da) above a threshold"""

    method = ComparisonMethod.PIXEL

    def __init__(self, threshold: float = DEFAULT_DISTANCE_THRESHOLD):
        self.threshold = threshold

    def differs(self, baseline: np.ndarray, candidate: np.ndarray) -> np.ndarray:
        delta = baseline.astype(np.int32) - candidate.astype(np.int32)
        # compare squared distances so integer inputs stay exact
        distance_sq = np.einsum("...c,...c->...", delta, delta)
        return distance_sq > self.threshold * self.threshold

    def __repr__(self) -> str:
        return f"EuclideanMetric(threshold={self.threshold})"


class StrictMetric(PixelMetric):
    """Any channel difference at all"""

    method = ComparisonMethod.STRICT

    def differs(self, baseline: np.ndarray, candidate: np.ndarray) -> np.ndarray:
        return np.any(baseline != candidate, axis=-1)


class LuminanceMetric(PixelMetric):
    """Brightness delta above a threshold; alpha and chroma are ignored"""

    method = ComparisonMethod.LUMINANCE

    def __init__(self, threshold: float = DEFAULT_DISTANCE_THRESHOLD):
        self.threshold = threshold

    def differs(self, baseline: np.ndarray, candidate: np.ndarray) -> np.ndarray:
        return np.abs(luma(baseline) - luma(candidate)) > self.threshold

    def __repr__(self) -> str:
        return f"LuminanceMetric(threshold={self.threshold})"


def create_metric(
    method: ComparisonMethod,
    pixel_distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
    luminance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
) -> PixelMetric:
    """Build the strategy for a comparison method"""
    method = ComparisonMethod.parse(method)
    if method is ComparisonMethod.PIXEL:
        return EuclideanMetric(pixel_distance_threshold)
    if method is ComparisonMethod.STRICT:
        return StrictMetric()
    return LuminanceMetric(luminance_threshold)


class PixelComparator:
    """
    Counts differing pixels between two equally sized images.

    Ignored pixels are never counted as differing but remain part of the
    total used for the percentage.
    """

    def __init__(self, metric: PixelMetric):
        self.metric = metric

    def compare_tile(
        self,
        baseline: np.ndarray,
        candidate: np.ndarray,
        ignored: np.ndarray | None = None,
    ) -> tuple[np.ndarray, int]:
        """
        Classify one tile.

        Returns:
            (differing map with ignored pixels cleared, differing count)
        """
        differing = self.metric.differs(baseline, candidate)
        if ignored is not None:
            differing &= ~ignored
        return differing, int(np.count_nonzero(differing))

    @staticmethod
    def diff_percentage(differing_pixels: int, total_pixels: int) -> float:
        if total_pixels <= 0:
            return 0.0
        return differing_pixels / total_pixels * 100
