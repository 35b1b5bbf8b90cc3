"""
Tests for display-to-intrinsic coordinate mapping and region drawing
"""

import pytest

from visual_diff_toolkit.core.exceptions import InvalidRegionError, ValidationError
from visual_diff_toolkit.visual_testing.coordinates import CoordinateMapper, DisplayRect
from visual_diff_toolkit.visual_testing.editing import RegionEditingSession
from visual_diff_toolkit.visual_testing.models import IgnoreRegion


class TestCoordinateMapper:
    """Tests for CoordinateMapper"""

    def test_scale_factors(self):
        """Test scale is intrinsic / display"""
        mapper = CoordinateMapper(400, 300, 1600, 600)
        assert mapper.scale_x == 4.0
        assert mapper.scale_y == 2.0

    def test_maps_by_scale(self):
        """Test every component is scaled and rounded"""
        mapper = CoordinateMapper(400, 300, 1600, 600)
        region = mapper.to_intrinsic(DisplayRect(10, 20, 50, 40))
        assert region == IgnoreRegion(x=40, y=40, width=200, height=80)

    def test_rounds_half_to_even(self):
        """Test .5 results round to the even neighbour"""
        mapper = CoordinateMapper(200, 200, 100, 100)  # scale 0.5
        region = mapper.to_intrinsic(DisplayRect(5, 7, 21, 23))
        # 2.5 -> 2, 3.5 -> 4, 10.5 -> 10, 11.5 -> 12
        assert region == IgnoreRegion(x=2, y=4, width=10, height=12)

    @pytest.mark.parametrize(
        "display,intrinsic,rect",
        [
            ((333, 217), (1920, 1080), (17.3, 41.9, 120.6, 77.1)),
            ((1024, 768), (1366, 911), (0.4, 500.5, 300.25, 100.75)),
            ((50, 50), (49, 51), (10, 10, 20, 20)),
        ],
    )
    def test_within_one_pixel_of_scaled(self, display, intrinsic, rect):
        """Test mapped values stay within 1px of display * scale"""
        mapper = CoordinateMapper(*display, *intrinsic)
        region = mapper.to_intrinsic(DisplayRect(*rect))
        x, y, w, h = rect
        assert abs(region.x - x * mapper.scale_x) <= 1
        assert abs(region.y - y * mapper.scale_y) <= 1
        assert abs(region.width - w * mapper.scale_x) <= 1
        assert abs(region.height - h * mapper.scale_y) <= 1

    def test_clamp(self):
        """Test pointer positions are clamped to the display bounds"""
        mapper = CoordinateMapper(100, 50, 200, 100)
        assert mapper.clamp(-5, 70) == (0.0, 50)
        assert mapper.clamp(120, -1) == (100, 0.0)
        assert mapper.clamp(30, 20) == (30, 20)

    def test_full_display_rect_stays_in_bounds(self):
        """Test a rectangle covering the whole display never exceeds the image"""
        mapper = CoordinateMapper(300, 300, 1000, 1000)
        region = mapper.to_intrinsic(DisplayRect(0.2, 0.2, 299.8, 299.8))
        assert region.right <= 1000
        assert region.bottom <= 1000

    def test_small_rect_discarded(self):
        """Test rectangles under 5 display px are treated as clicks"""
        mapper = CoordinateMapper(100, 100, 1000, 1000)
        assert mapper.map_rect(DisplayRect(10, 10, 4.9, 50)) is None
        assert mapper.map_rect(DisplayRect(10, 10, 50, 4)) is None
        assert mapper.map_rect(DisplayRect(10, 10, 5, 5)) == IgnoreRegion(100, 100, 50, 50)

    def test_region_collapsing_to_zero_rejected(self):
        """Test a mapping that rounds to zero size raises InvalidRegionError"""
        mapper = CoordinateMapper(1000, 1000, 10, 10)  # scale 0.01
        with pytest.raises(InvalidRegionError):
            mapper.to_intrinsic(DisplayRect(10, 10, 20, 20))

    def test_non_positive_sizes_rejected(self):
        """Test the mapper rejects empty display or image sizes"""
        with pytest.raises(ValidationError):
            CoordinateMapper(0, 100, 10, 10)
        with pytest.raises(ValidationError):
            CoordinateMapper(100, 100, 10, 0)


class TestRegionEditingSession:
    """Tests for the immutable drag state"""

    @pytest.fixture
    def session(self):
        return RegionEditingSession(CoordinateMapper(200, 100, 800, 400))

    def test_full_drag_produces_region(self, session):
        """Test begin -> update -> commit yields an intrinsic region"""
        drawing = session.begin(10, 10).update(60, 35)
        idle, region = drawing.commit()
        assert region == IgnoreRegion(x=40, y=40, width=200, height=100)
        assert idle.drawing is False
        assert idle.draft is None

    def test_transitions_do_not_mutate(self, session):
        """Test transitions return new sessions"""
        started = session.begin(10, 10)
        assert session.drawing is False
        assert started.drawing is True
        assert started.draft == DisplayRect(10, 10, 0, 0)

    def test_drag_up_left_is_normalized(self, session):
        """Test dragging toward the origin normalizes the draft"""
        drawing = session.begin(100, 80).update(40, 20)
        assert drawing.draft == DisplayRect(40, 20, 60, 60)

    def test_update_clamps_to_display(self, session):
        """Test dragging past the edge clamps to the display"""
        drawing = session.begin(150, 50).update(500, -40)
        assert drawing.draft == DisplayRect(150, 0, 50, 50)
        _, region = drawing.commit()
        assert region.right <= 800
        assert region.y == 0

    def test_begin_outside_is_ignored(self, session):
        """Test presses outside the image do not start a drag"""
        assert session.begin(-1, 10) is session
        assert session.begin(10, 101) is session

    def test_update_without_begin_is_noop(self, session):
        """Test update before begin changes nothing"""
        assert session.update(50, 50) is session

    def test_tiny_drag_discarded(self, session):
        """Test an accidental click commits no region"""
        idle, region = session.begin(10, 10).update(12, 30).commit()
        assert region is None
        assert idle.drawing is False

    def test_commit_when_idle(self, session):
        """Test committing without a drag returns no region"""
        idle, region = session.commit()
        assert region is None
        assert idle.drawing is False

    def test_cancel(self, session):
        """Test cancel drops the draft"""
        cancelled = session.begin(10, 10).update(90, 90).cancel()
        assert cancelled.drawing is False
        assert cancelled.start is None
        assert cancelled.draft is None
