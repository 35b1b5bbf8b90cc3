"""Pass/fail verdict against a tolerance"""

from visual_diff_toolkit.visual_testing.models import ToleranceConfig


class ThresholdEvaluator:
    """A run passes when its diff percentage does not exceed the threshold"""

    def __init__(self, tolerance: ToleranceConfig | float = ToleranceConfig()):
        if not isinstance(tolerance, ToleranceConfig):
            tolerance = ToleranceConfig(threshold=float(tolerance))
        self.tolerance = tolerance

    @property
    def threshold(self) -> float:
        return self.tolerance.threshold

    def is_passed(self, diff_percentage: float) -> bool:
        # equality passes
        return diff_percentage <= self.tolerance.threshold
