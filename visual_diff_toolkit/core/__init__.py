"""
Core module - Base abstractions

Provides foundational components used across the toolkit:
- Base exception hierarchy
- Configuration management (visual_diff_toolkit.core.config)
"""

from visual_diff_toolkit.core.exceptions import (
    ComparisonCancelledError,
    ConfigurationError,
    DiffEngineError,
    DimensionMismatchError,
    InvalidRegionError,
    ToolkitError,
    ValidationError,
)

__all__ = [
    "ToolkitError",
    "ConfigurationError",
    "ValidationError",
    "DiffEngineError",
    "DimensionMismatchError",
    "InvalidRegionError",
    "ComparisonCancelledError",
]
