"""Feature flags for optional EchoTrail behavior.

Flags resolve in order: runtime override, ``FF_<NAME>`` environment
variable, then the ``ff_<name>`` field on Settings.

    flags = get_feature_flags()
    if flags.is_enabled(FeatureFlags.USE_LIVE_WEATHER):
        provider = OpenMeteoWeatherProvider(...)

Environment Variables:
    FF_USE_LIVE_WEATHER: Query Open-Meteo instead of simulating weather (default: false)
    FF_ENABLE_AMBIENT_SOUND_CUES: Open audio scripts with an ambience cue (default: true)
"""

from enum import Enum
from functools import lru_cache
import logging
import os

from echotrail.shared.config import get_settings

logger = logging.getLogger(__name__)

TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})


class FeatureFlags(str, Enum):
    """Known flags. Values double as env and settings suffixes."""

    USE_LIVE_WEATHER = "use_live_weather"
    ENABLE_AMBIENT_SOUND_CUES = "enable_ambient_sound_cues"

    @property
    def env_key(self) -> str:
        return f"FF_{self.value.upper()}"

    @property
    def settings_field(self) -> str:
        return f"ff_{self.value}"


def _env_flag(flag: FeatureFlags) -> bool | None:
    raw = os.getenv(flag.env_key)
    if raw is None:
        return None
    return raw.strip().lower() in TRUTHY_VALUES


class FeatureFlagManager:
    """Process-wide flag state with runtime overrides.

    Overrides exist for tests and the CLI; they never touch the
    environment.
    """

    _instance: "FeatureFlagManager | None" = None

    def __new__(cls) -> "FeatureFlagManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._overrides = {}
            logger.debug("Feature flag manager created")
        return cls._instance

    def is_enabled(self, flag: FeatureFlags) -> bool:
        """Resolve a flag (override, then environment, then settings)."""
        override = self._overrides.get(flag)
        if override is not None:
            return override

        from_env = _env_flag(flag)
        if from_env is not None:
            return from_env

        return bool(getattr(get_settings(), flag.settings_field, False))

    def set_override(self, flag: FeatureFlags, enabled: bool) -> None:
        self._overrides[flag] = enabled
        logger.info(f"Feature flag {flag.value} forced {'on' if enabled else 'off'}")

    def enable(self, flag: FeatureFlags) -> None:
        self.set_override(flag, True)

    def disable(self, flag: FeatureFlags) -> None:
        self.set_override(flag, False)

    def clear_override(self, flag: FeatureFlags) -> None:
        """Drop the runtime override so env and settings apply again."""
        if self._overrides.pop(flag, None) is not None:
            logger.info(f"Feature flag override cleared: {flag.value}")

    def clear_all_overrides(self) -> None:
        self._overrides.clear()

    def get_all_states(self) -> dict[str, bool]:
        """Map of flag value to resolved state."""
        return {flag.value: self.is_enabled(flag) for flag in FeatureFlags}

    def __repr__(self) -> str:
        enabled = [name for name, on in self.get_all_states().items() if on]
        return f"FeatureFlagManager(enabled={enabled})"


@lru_cache
def get_feature_flags() -> FeatureFlagManager:
    """Shared FeatureFlagManager."""
    return FeatureFlagManager()


def is_live_weather_enabled() -> bool:
    return get_feature_flags().is_enabled(FeatureFlags.USE_LIVE_WEATHER)


def is_ambient_sound_cues_enabled() -> bool:
    return get_feature_flags().is_enabled(FeatureFlags.ENABLE_AMBIENT_SOUND_CUES)
