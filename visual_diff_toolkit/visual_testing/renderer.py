"""
Diff image rendering

Paints the visual output of a comparison:
- differing pixels in solid red
- matching pixels faded toward white (washed-out baseline silhouette)
- ignored pixels as baseline grayscale
"""

import numpy as np

from visual_diff_toolkit.visual_testing.metrics import luma

DIFF_COLOR = (255, 0, 0, 255)
FADE = 0.1  # share of the original color kept for matching pixels


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half to even and clamp into 0..255"""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


class DiffRenderer:
    """Builds the diff buffer tile by tile; tiles never overlap"""

    def __init__(self, fade: float = FADE, diff_color: tuple[int, int, int, int] = DIFF_COLOR):
        self.fade = fade
        self.diff_color = np.array(diff_color, dtype=np.uint8)

    def render_tile(
        self,
        baseline: np.ndarray,
        differing: np.ndarray,
        ignored: np.ndarray | None = None,
    ) -> np.ndarray:
        """
        Render one tile.

        Args:
            baseline: (rows, width, 4) uint8 baseline pixels
            differing: (rows, width) bool, already cleared where ignored
            ignored: (rows, width) bool or None

        Returns:
            (rows, width, 4) uint8 output tile
        """
        out = np.empty(baseline.shape, dtype=np.uint8)

        faded = baseline[..., :3].astype(np.float64) * self.fade + 255 * (1 - self.fade)
        out[..., :3] = to_uint8(faded)
        out[..., 3] = 255

        if ignored is not None and ignored.any():
            gray = to_uint8(luma(baseline[ignored]))
            out[ignored, 0] = gray
            out[ignored, 1] = gray
            out[ignored, 2] = gray

        out[differing] = self.diff_color
        return out
