"""
Display to intrinsic coordinate mapping

Ignore regions are drawn on a copy of the baseline rendered at some display
size. This module converts those rectangles to the image's true pixel grid.

Rounding is round-half-to-even (Python's round()).
"""

from dataclasses import dataclass

from visual_diff_toolkit.core.exceptions import ValidationError
from visual_diff_toolkit.visual_testing.models import IgnoreRegion

# Rectangles smaller than this (display pixels, either side) are accidental clicks
MIN_REGION_DISPLAY_SIZE = 5


@dataclass(frozen=True)
class DisplayRect:
    """Rectangle in display coordinates (may be fractional)"""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CoordinateMapper:
    """
    Maps display-space rectangles onto the intrinsic pixel grid.

    Attributes:
        display_width, display_height: Rendered size of the baseline copy
        intrinsic_width, intrinsic_height: True pixel size of the baseline
    """

    display_width: float
    display_height: float
    intrinsic_width: int
    intrinsic_height: int

    def __post_init__(self):
        if self.display_width <= 0 or self.display_height <= 0:
            raise ValidationError(
                f"Display size must be positive, got {self.display_width}x{self.display_height}"
            )
        if self.intrinsic_width <= 0 or self.intrinsic_height <= 0:
            raise ValidationError(
                f"Intrinsic size must be positive, got {self.intrinsic_width}x{self.intrinsic_height}"
            )

    @property
    def scale_x(self) -> float:
        return self.intrinsic_width / self.display_width

    @property
    def scale_y(self) -> float:
        return self.intrinsic_height / self.display_height

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x <= self.display_width and 0 <= y <= self.display_height

    def clamp(self, x: float, y: float) -> tuple[float, float]:
        """Clamp a raw pointer position to [0, display_width] x [0, display_height]"""
        return (
            max(0.0, min(x, self.display_width)),
            max(0.0, min(y, self.display_height)),
        )

    def to_intrinsic(self, rect: DisplayRect) -> IgnoreRegion:
        """
        Scale and round a display rectangle.

        The result is trimmed so it never extends past the intrinsic image.

        Raises:
            InvalidRegionError: If the mapped width or height is not positive
        """
        x = round(rect.x * self.scale_x)
        y = round(rect.y * self.scale_y)
        width = min(round(rect.width * self.scale_x), self.intrinsic_width - x)
        height = min(round(rect.height * self.scale_y), self.intrinsic_height - y)
        return IgnoreRegion(x=x, y=y, width=width, height=height)

    def map_rect(self, rect: DisplayRect) -> IgnoreRegion | None:
        """Map a completed rectangle, or None if it is too small to be intentional"""
        if rect.width < MIN_REGION_DISPLAY_SIZE or rect.height < MIN_REGION_DISPLAY_SIZE:
            return None
        return self.to_intrinsic(rect)
