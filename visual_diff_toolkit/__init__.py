"""
Visual Diff Toolkit

Pixel-level visual regression engine for UI screenshots.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from visual_diff_toolkit.visual_testing import (
    ComparisonMethod,
    DiffEngine,
    IgnoreRegion,
    RasterImage,
)

__all__ = [
    "ComparisonMethod",
    "DiffEngine",
    "IgnoreRegion",
    "RasterImage",
]
