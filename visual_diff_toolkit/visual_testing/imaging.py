"""
Image loading and saving

Pillow adapters between image files and RasterImage, plus the padding
policy used to reconcile images of different sizes before comparison.
"""

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from visual_diff_toolkit.core.exceptions import ValidationError
from visual_diff_toolkit.visual_testing.models import CHANNELS, RasterImage

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)

ImageSource = Path | str | bytes | Image.Image


def load_raster(source: ImageSource) -> RasterImage:
    """
    Decode an image into an RGBA RasterImage.

    Args:
        source: File path, encoded bytes, or an open Pillow image

    Raises:
        ValidationError: If the image cannot be decoded
    """
    if isinstance(source, Image.Image):
        return _from_pil(source)

    try:
        if isinstance(source, bytes):
            img = Image.open(io.BytesIO(source))
        else:
            img = Image.open(Path(source))
        with img:
            img.load()
            return _from_pil(img)
    except OSError as e:
        logger.error(f"Failed to load image: {e}")
        raise ValidationError(f"Failed to load image: {e}") from e


def _from_pil(img: Image.Image) -> RasterImage:
    rgba = img if img.mode == "RGBA" else img.convert("RGBA")
    width, height = rgba.size
    return RasterImage(width=width, height=height, pixels=rgba.tobytes())


def to_pil(raster: RasterImage) -> Image.Image:
    return Image.frombytes("RGBA", raster.size, raster.pixels)


def encode_png(raster: RasterImage) -> bytes:
    buf = io.BytesIO()
    to_pil(raster).save(buf, format="PNG")
    return buf.getvalue()


def save_raster(raster: RasterImage, path: Path) -> Path:
    """Write a RasterImage as PNG, creating parent directories"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_pil(raster).save(path, "PNG")
    logger.info(f"Saved diff image to: {path}")
    return path


def reconcile_dimensions(
    baseline: RasterImage,
    candidate: RasterImage,
    fill: tuple[int, int, int, int] = TRANSPARENT,
) -> tuple[RasterImage, RasterImage]:
    """
    Pad both images to a common canvas.

    The canvas takes the larger width and the larger height; images are
    anchored top-left and the uncovered area uses `fill` (transparent black
    by default). Padded pixels compare against real content, so they count
    as differences wherever the other image is not `fill` there.
    """
    if baseline.size == candidate.size:
        return baseline, candidate

    width = max(baseline.width, candidate.width)
    height = max(baseline.height, candidate.height)
    logger.warning(
        f"Image size mismatch: baseline={baseline.size}, candidate={candidate.size}; "
        f"padding both to {width}x{height} with fill={fill}"
    )
    return _pad(baseline, width, height, fill), _pad(candidate, width, height, fill)


def _pad(raster: RasterImage, width: int, height: int, fill: tuple[int, int, int, int]) -> RasterImage:
    if raster.size == (width, height):
        return raster
    canvas = np.empty((height, width, CHANNELS), dtype=np.uint8)
    canvas[:] = np.array(fill, dtype=np.uint8)
    canvas[: raster.height, : raster.width] = raster.as_array()
    return RasterImage.from_array(canvas)
