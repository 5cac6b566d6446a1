"""Unit tests for feature flag management."""

import os
from unittest.mock import patch

import pytest

from echotrail.shared.feature_flags import (
    FeatureFlagManager,
    FeatureFlags,
    get_feature_flags,
    is_ambient_sound_cues_enabled,
    is_live_weather_enabled,
)


@pytest.fixture(autouse=True)
def fresh_singleton():
    """Give each test its own manager and leave a clean one behind."""
    FeatureFlagManager._instance = None
    get_feature_flags.cache_clear()
    yield
    FeatureFlagManager._instance = None
    get_feature_flags.cache_clear()


class TestFeatureFlags:
    """Tests for FeatureFlags enum."""

    def test_env_key_format(self):
        """Test that env_key returns correct format."""
        assert FeatureFlags.USE_LIVE_WEATHER.env_key == "FF_USE_LIVE_WEATHER"
        assert FeatureFlags.ENABLE_AMBIENT_SOUND_CUES.env_key == "FF_ENABLE_AMBIENT_SOUND_CUES"

    def test_settings_field(self):
        assert FeatureFlags.USE_LIVE_WEATHER.settings_field == "ff_use_live_weather"

    def test_all_flags_have_unique_values(self):
        """Test that all flags have unique values."""
        values = [f.value for f in FeatureFlags]
        assert len(values) == len(set(values))


class TestFeatureFlagManager:
    """Tests for FeatureFlagManager."""

    @pytest.fixture
    def manager(self):
        return FeatureFlagManager()

    def test_settings_defaults(self, manager):
        """Test that flags fall back to the Settings defaults."""
        with patch.dict(os.environ, {}, clear=True):
            assert manager.is_enabled(FeatureFlags.USE_LIVE_WEATHER) is False
            assert manager.is_enabled(FeatureFlags.ENABLE_AMBIENT_SOUND_CUES) is True

    def test_enable_via_env_variations(self, manager):
        """Test various truthy env values."""
        for value in ["true", "True", "TRUE", "1", "yes", "on"]:
            with patch.dict(os.environ, {"FF_USE_LIVE_WEATHER": value}):
                assert manager.is_enabled(FeatureFlags.USE_LIVE_WEATHER) is True, f"Failed for {value}"

    def test_disable_via_env_variations(self, manager):
        """Test various falsy env values."""
        for value in ["false", "0", "no", "off", "random"]:
            with patch.dict(os.environ, {"FF_ENABLE_AMBIENT_SOUND_CUES": value}):
                assert manager.is_enabled(FeatureFlags.ENABLE_AMBIENT_SOUND_CUES) is False, f"Failed for {value}"

    def test_runtime_override_beats_env(self, manager):
        with patch.dict(os.environ, {"FF_USE_LIVE_WEATHER": "false"}):
            manager.enable(FeatureFlags.USE_LIVE_WEATHER)
            assert manager.is_enabled(FeatureFlags.USE_LIVE_WEATHER) is True

            manager.disable(FeatureFlags.USE_LIVE_WEATHER)
            assert manager.is_enabled(FeatureFlags.USE_LIVE_WEATHER) is False

    def test_clear_override(self, manager):
        """Test clearing a runtime override."""
        with patch.dict(os.environ, {"FF_USE_LIVE_WEATHER": "true"}):
            manager.disable(FeatureFlags.USE_LIVE_WEATHER)
            manager.clear_override(FeatureFlags.USE_LIVE_WEATHER)
            assert manager.is_enabled(FeatureFlags.USE_LIVE_WEATHER) is True

    def test_clear_all_overrides(self, manager):
        with patch.dict(os.environ, {}, clear=True):
            manager.enable(FeatureFlags.USE_LIVE_WEATHER)
            manager.disable(FeatureFlags.ENABLE_AMBIENT_SOUND_CUES)

            manager.clear_all_overrides()

            assert manager.get_all_states() == {
                "use_live_weather": False,
                "enable_ambient_sound_cues": True,
            }


class TestConvenienceFunctions:
    """Tests for convenience functions."""

    def test_is_live_weather_enabled(self):
        with patch.dict(os.environ, {"FF_USE_LIVE_WEATHER": "true"}):
            assert is_live_weather_enabled() is True

    def test_is_ambient_sound_cues_enabled(self):
        with patch.dict(os.environ, {"FF_ENABLE_AMBIENT_SOUND_CUES": "off"}):
            assert is_ambient_sound_cues_enabled() is False


class TestSingleton:
    """Tests for singleton behavior."""

    def test_same_instance(self):
        assert FeatureFlagManager() is FeatureFlagManager()
        assert get_feature_flags() is get_feature_flags()
