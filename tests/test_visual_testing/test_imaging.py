"""
Tests for image loading, saving and dimension reconciliation
"""

import io

import pytest
from PIL import Image

from visual_diff_toolkit.core.exceptions import ValidationError
from visual_diff_toolkit.visual_testing.imaging import (
    encode_png,
    load_raster,
    reconcile_dimensions,
    save_raster,
    to_pil,
)
from visual_diff_toolkit.visual_testing.models import RasterImage


def _png_bytes(width, height, color, mode="RGBA"):
    img = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class TestRasterImage:
    """Tests for RasterImage construction"""

    def test_wrong_buffer_length_rejected(self):
        """Test a buffer of the wrong size raises ValidationError"""
        with pytest.raises(ValidationError):
            RasterImage(width=2, height=2, pixels=b"\x00" * 15)

    def test_non_positive_size_rejected(self):
        """Test zero-sized images raise ValidationError"""
        with pytest.raises(ValidationError):
            RasterImage(width=0, height=2, pixels=b"")

    def test_pixel_lookup_is_row_major(self):
        """Test pixel(x, y) reads row-major RGBA"""
        pixels = bytes(range(16))
        img = RasterImage(width=2, height=2, pixels=pixels)
        assert img.pixel(1, 0) == (4, 5, 6, 7)
        assert img.pixel(0, 1) == (8, 9, 10, 11)

    def test_array_view_is_read_only(self):
        """Test as_array() cannot mutate the image"""
        img = RasterImage.solid(2, 2)
        with pytest.raises(ValueError):
            img.as_array()[0, 0, 0] = 1


class TestLoadRaster:
    """Tests for decoding images"""

    def test_load_from_bytes(self):
        """Test PNG bytes decode to RGBA"""
        raster = load_raster(_png_bytes(3, 2, (10, 20, 30, 40)))
        assert raster.size == (3, 2)
        assert raster.pixel(2, 1) == (10, 20, 30, 40)

    def test_rgb_converted_to_rgba(self):
        """Test RGB images gain an opaque alpha channel"""
        raster = load_raster(_png_bytes(2, 2, (1, 2, 3), mode="RGB"))
        assert raster.pixel(0, 0) == (1, 2, 3, 255)

    def test_load_from_path(self, tmp_path):
        """Test loading from a file path"""
        path = tmp_path / "shot.png"
        path.write_bytes(_png_bytes(4, 4, (0, 0, 0, 255)))
        assert load_raster(path).size == (4, 4)

    def test_load_from_pil_image(self):
        """Test an open Pillow image is accepted"""
        raster = load_raster(Image.new("RGBA", (5, 1), (9, 9, 9, 9)))
        assert raster.pixel(4, 0) == (9, 9, 9, 9)

    def test_garbage_rejected(self):
        """Test undecodable bytes raise ValidationError"""
        with pytest.raises(ValidationError):
            load_raster(b"not an image")

    def test_missing_file_rejected(self, tmp_path):
        """Test a missing path raises ValidationError"""
        with pytest.raises(ValidationError):
            load_raster(tmp_path / "missing.png")


class TestSaveRaster:
    """Tests for encoding images"""

    def test_encode_png_decodes_back(self):
        """Test encoded PNG bytes load back to the same pixels"""
        raster = RasterImage(width=2, height=1, pixels=bytes([1, 2, 3, 4, 5, 6, 7, 8]))
        assert load_raster(encode_png(raster)) == raster

    def test_save_creates_parent_dirs(self, tmp_path):
        """Test save_raster creates missing directories"""
        path = tmp_path / "out" / "diff.png"
        save_raster(RasterImage.solid(2, 2), path)
        assert path.exists()

    def test_to_pil(self):
        """Test conversion to a Pillow image keeps mode and size"""
        img = to_pil(RasterImage.solid(3, 2))
        assert img.mode == "RGBA"
        assert img.size == (3, 2)


class TestReconcileDimensions:
    """Tests for the padding policy"""

    def test_same_size_unchanged(self):
        """Test equally sized images are returned as-is"""
        a = RasterImage.solid(2, 2)
        b = RasterImage.solid(2, 2)
        assert reconcile_dimensions(a, b) == (a, b)

    def test_pads_to_larger_canvas_with_transparent_fill(self):
        """Test both images are padded to the max width and height"""
        small = RasterImage.solid(2, 3, (10, 10, 10, 255))
        wide = RasterImage.solid(4, 1, (20, 20, 20, 255))
        a, b = reconcile_dimensions(small, wide)

        assert a.size == b.size == (4, 3)
        assert a.pixel(1, 2) == (10, 10, 10, 255)
        assert a.pixel(3, 0) == (0, 0, 0, 0)
        assert b.pixel(3, 0) == (20, 20, 20, 255)
        assert b.pixel(0, 2) == (0, 0, 0, 0)

    def test_opaque_fill(self):
        """Test a custom fill color is used for the padding"""
        a, _ = reconcile_dimensions(
            RasterImage.solid(1, 1), RasterImage.solid(2, 1), fill=(255, 255, 255, 255)
        )
        assert a.pixel(1, 0) == (255, 255, 255, 255)
