"""
Base exception hierarchy

Provides a consistent exception structure across the toolkit
with clear error messages and recovery hints.
"""


class ToolkitError(Exception):
    """
    Base exception for all toolkit errors

    Attributes:
        message: Error message
        component: Component that raised the error
        recovery_hint: Optional hint for recovery
    """

    def __init__(self, message: str, component: str = "", recovery_hint: str = ""):
        self.component = component
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.component:
            msg = f"[{self.component}] {msg}"
        if self.recovery_hint:
            msg += f"\nRecovery: {self.recovery_hint}"
        return msg


class ConfigurationError(ToolkitError):
    """Configuration-related errors"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Configuration",
            recovery_hint=recovery_hint or "Check your .env file and VISUAL_DIFF_* variables",
        )


class ValidationError(ToolkitError):
    """Validation errors (parameters, input, etc.)"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="Validation", recovery_hint=recovery_hint)


class DiffEngineError(ToolkitError):
    """Errors raised by a comparison run"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="DiffEngine", recovery_hint=recovery_hint)


class DimensionMismatchError(DiffEngineError):
    """Baseline and candidate do not share the same width and height"""

    def __init__(self, baseline_size: tuple[int, int], candidate_size: tuple[int, int]):
        self.baseline_size = baseline_size
        self.candidate_size = candidate_size
        super().__init__(
            f"Image size mismatch: baseline={baseline_size[0]}x{baseline_size[1]}, "
            f"candidate={candidate_size[0]}x{candidate_size[1]}",
            recovery_hint="Reconcile the images first, e.g. imaging.reconcile_dimensions()",
        )


class InvalidRegionError(DiffEngineError):
    """Ignore region with a non-positive width or height"""

    def __init__(self, message: str):
        super().__init__(message, recovery_hint="Ignore regions need width > 0 and height > 0")


class ComparisonCancelledError(DiffEngineError):
    """Comparison stopped through its cancellation token or deadline"""

    def __init__(self, message: str = "Comparison cancelled", completed_tiles: int = 0):
        self.completed_tiles = completed_tiles
        super().__init__(message)
