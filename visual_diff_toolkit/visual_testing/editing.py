"""
Region editing session

Immutable drag state for drawing ignore regions. Every transition returns a
new session, so the state can live in any UI layer (or none).

Example:
    session = RegionEditingSession(mapper)
    session = session.begin(10, 10)
    session = session.update(80, 40)
    session, region = session.commit()
"""

from dataclasses import dataclass, replace

from visual_diff_toolkit.visual_testing.coordinates import CoordinateMapper, DisplayRect
from visual_diff_toolkit.visual_testing.models import IgnoreRegion


@dataclass(frozen=True)
class RegionEditingSession:
    """Drag state: start point and normalized draft rectangle in display space"""

    mapper: CoordinateMapper
    drawing: bool = False
    start: tuple[float, float] | None = None
    draft: DisplayRect | None = None

    def idle(self) -> "RegionEditingSession":
        return replace(self, drawing=False, start=None, draft=None)

    def begin(self, x: float, y: float) -> "RegionEditingSession":
        """Start a drag; presses outside the displayed image are ignored"""
        if not self.mapper.contains(x, y):
            return self
        return replace(self, drawing=True, start=(x, y), draft=DisplayRect(x, y, 0, 0))

    def update(self, x: float, y: float) -> "RegionEditingSession":
        """Move the drag corner, clamped to the displayed image"""
        if not self.drawing or self.start is None:
            return self
        current_x, current_y = self.mapper.clamp(x, y)
        start_x, start_y = self.start
        draft = DisplayRect(
            x=min(current_x, start_x),
            y=min(current_y, start_y),
            width=abs(current_x - start_x),
            height=abs(current_y - start_y),
        )
        return replace(self, draft=draft)

    def commit(self) -> tuple["RegionEditingSession", IgnoreRegion | None]:
        """
        Finish the drag.

        Returns:
            (idle session, intrinsic region or None for clicks under 5px)
        """
        if not self.drawing or self.draft is None:
            return self.idle(), None
        return self.idle(), self.mapper.map_rect(self.draft)

    def cancel(self) -> "RegionEditingSession":
        return self.idle()
