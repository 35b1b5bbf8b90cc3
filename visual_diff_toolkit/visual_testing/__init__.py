"""
Visual Testing Module

Provides the visual diff engine: pixel metrics, ignore regions, coordinate
mapping for drawn regions, diff rendering and threshold verdicts.
"""

from visual_diff_toolkit.visual_testing.cancellation import CancellationToken
from visual_diff_toolkit.visual_testing.comparison import ComparisonOutcome, DiffEngine
from visual_diff_toolkit.visual_testing.coordinates import CoordinateMapper, DisplayRect
from visual_diff_toolkit.visual_testing.editing import RegionEditingSession
from visual_diff_toolkit.visual_testing.metrics import PixelComparator, create_metric
from visual_diff_toolkit.visual_testing.models import (
    ComparisonMethod,
    DiffResult,
    IgnoreRegion,
    RasterImage,
    ToleranceConfig,
)
from visual_diff_toolkit.visual_testing.region_mask import RegionMask
from visual_diff_toolkit.visual_testing.region_store import IgnoreRegionStore
from visual_diff_toolkit.visual_testing.renderer import DiffRenderer
from visual_diff_toolkit.visual_testing.report import ComparisonReport
from visual_diff_toolkit.visual_testing.threshold import ThresholdEvaluator

__all__ = [
    "CancellationToken",
    "ComparisonMethod",
    "ComparisonOutcome",
    "ComparisonReport",
    "CoordinateMapper",
    "DiffEngine",
    "DiffRenderer",
    "DiffResult",
    "DisplayRect",
    "IgnoreRegion",
    "IgnoreRegionStore",
    "PixelComparator",
    "RasterImage",
    "RegionEditingSession",
    "RegionMask",
    "ThresholdEvaluator",
    "ToleranceConfig",
    "create_metric",
]
