"""
Visual testing data models

Value types shared by every stage of a comparison run. All of them are
immutable once constructed.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from visual_diff_toolkit.core.exceptions import InvalidRegionError, ValidationError

CHANNELS = 4  # RGBA8


class ComparisonMethod(str, Enum):
    """Algorithm used to classify a pixel pair as matching or differing"""

    PIXEL = "PIXEL"  # Euclidean RGBA distance
    STRICT = "STRICT"  # exact channel equality
    LUMINANCE = "LUMINANCE"  # perceived-brightness delta only

    @classmethod
    def parse(cls, value: "str | ComparisonMethod") -> "ComparisonMethod":
        """Accept enum members or case-insensitive names"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValidationError(
                f"Unknown comparison method: {value!r}",
                recovery_hint=f"Use one of: {choices}",
            )


@dataclass(frozen=True)
class RasterImage:
    """
    Fixed-size grid of RGBA8 pixels stored row-major.

    Attributes:
        width: Width in pixels (> 0)
        height: Height in pixels (> 0)
        pixels: width * height * 4 bytes, RGBA order
    """

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValidationError(f"Image size must be positive, got {self.width}x{self.height}")
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ValidationError(
                f"Pixel buffer holds {len(self.pixels)} bytes, expected {expected} "
                f"for a {self.width}x{self.height} RGBA image"
            )

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view over the buffer"""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValidationError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[offset : offset + CHANNELS]
        return (r, g, b, a)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build from a (height, width, 4) array of values in 0..255"""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValidationError(f"Expected an array of shape (height, width, 4), got {array.shape}")
        height, width = array.shape[:2]
        data = np.ascontiguousarray(array, dtype=np.uint8)
        return cls(width=width, height=height, pixels=data.tobytes())

    @classmethod
    def solid(
        cls, width: int, height: int, color: tuple[int, int, int, int] = (0, 0, 0, 255)
    ) -> "RasterImage":
        return cls(width=width, height=height, pixels=bytes(color) * (width * height))


@dataclass(frozen=True)
class IgnoreRegion:
    """Rectangle in the baseline's intrinsic pixel space excluded from scoring"""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidRegionError(
                f"Region at ({self.x}, {self.y}) has non-positive size {self.width}x{self.height}"
            )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IgnoreRegion":
        missing = [key for key in ("x", "y", "width", "height") if key not in data]
        if missing:
            raise InvalidRegionError(f"Region is missing keys: {', '.join(missing)}")
        return cls(**{key: _pixel_coordinate(key, data[key]) for key in ("x", "y", "width", "height")})


def _pixel_coordinate(key: str, value: Any) -> int:
    """Whole-pixel value from JSON-ish input; 2.0 and "2" pass, 2.9 does not"""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRegionError(f"Region {key} must be a number, got {value!r}") from None
    if not number.is_integer():
        raise InvalidRegionError(f"Region {key} must be a whole number of pixels, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class ToleranceConfig:
    """Maximum diff percentage that still passes"""

    threshold: float = 0.1

    def __post_init__(self):
        if not math.isfinite(self.threshold) or self.threshold < 0:
            raise ValidationError(
                f"Threshold must be a finite, non-negative percentage, got {self.threshold}"
            )


@dataclass(frozen=True)
class DiffResult:
    """Result of one comparison run"""

    diff_percentage: float  # 0.0 to 100.0
    diff_image: RasterImage
    differing_pixels: int
    total_pixels: int
    ignored_pixels: int = 0
