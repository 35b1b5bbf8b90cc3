"""
Tests for settings and the exception hierarchy
"""

import pytest

from visual_diff_toolkit.core import config
from visual_diff_toolkit.core.config import Settings, get_settings, reset_settings
from visual_diff_toolkit.core.exceptions import (
    ComparisonCancelledError,
    ConfigurationError,
    DiffEngineError,
    DimensionMismatchError,
    InvalidRegionError,
    ToolkitError,
)
from visual_diff_toolkit.visual_testing.models import ComparisonMethod


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    """Tests for Settings"""

    def test_defaults(self, monkeypatch):
        """Test default values"""
        for name in ("DEFAULT_METHOD", "DEFAULT_THRESHOLD", "MAX_WORKERS", "TILE_ROWS"):
            monkeypatch.delenv(f"VISUAL_DIFF_{name}", raising=False)
        settings = Settings()
        assert settings.default_method is ComparisonMethod.PIXEL
        assert settings.default_threshold == 0.1
        assert settings.pixel_distance_threshold == 10.0
        assert settings.luminance_threshold == 10.0
        assert settings.max_workers == 1

    def test_environment_override(self, monkeypatch):
        """Test VISUAL_DIFF_* variables override defaults"""
        monkeypatch.setenv("VISUAL_DIFF_DEFAULT_METHOD", "STRICT")
        monkeypatch.setenv("VISUAL_DIFF_MAX_WORKERS", "4")
        settings = get_settings()
        assert settings.default_method is ComparisonMethod.STRICT
        assert settings.max_workers == 4

    def test_singleton(self):
        """Test get_settings caches its instance"""
        assert get_settings() is get_settings()

    @pytest.mark.parametrize(
        "name,value",
        [
            ("TILE_ROWS", "0"),
            ("PIXEL_DISTANCE_THRESHOLD", "nan"),
            ("LUMINANCE_THRESHOLD", "inf"),
            ("DEFAULT_THRESHOLD", "-1"),
        ],
    )
    def test_invalid_environment_raises_configuration_error(self, monkeypatch, name, value):
        """Test bad values surface as ConfigurationError"""
        monkeypatch.setenv(f"VISUAL_DIFF_{name}", value)
        with pytest.raises(ConfigurationError):
            get_settings()
        assert config._settings is None


class TestExceptions:
    """Tests for the exception hierarchy"""

    def test_engine_errors_share_base(self):
        """Test engine errors derive from DiffEngineError and ToolkitError"""
        for error in (
            DimensionMismatchError((1, 1), (2, 2)),
            InvalidRegionError("bad"),
            ComparisonCancelledError(),
        ):
            assert isinstance(error, DiffEngineError)
            assert isinstance(error, ToolkitError)

    def test_message_includes_component_and_hint(self):
        """Test str() prefixes the component and appends the hint"""
        message = str(DimensionMismatchError((10, 20), (30, 40)))
        assert message.startswith("[DiffEngine]")
        assert "10x20" in message
        assert "30x40" in message
        assert "Recovery:" in message
