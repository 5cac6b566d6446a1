"""Test configuration and fixtures."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Load environment variables before any imports that need them
from dotenv import load_dotenv
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Ensure the package is importable without installation
sys.path.insert(0, str(project_root))

import random

import pytest

from echotrail.modules.context.interface import (
    ContextualEnvironment,
    ContextualInsights,
    GeoSample,
    LocationContext,
    MovementAnalysis,
    PointOfInterest,
    WeatherData,
)
from echotrail.modules.library.interface import ContentMetadata, Geofence, StoryContent
from echotrail.shared.feature_flags import get_feature_flags
from echotrail.shared.models import (
    ActivityContext,
    AttentionLevel,
    AvailableTime,
    ContentPreference,
    ContentType,
    EnvironmentType,
    Level,
    MovementMode,
    NoiseLevel,
    Season,
    TimeOfDay,
    WeatherCondition,
)

# Saturday afternoon in summer
FIXED_NOW = datetime(2024, 6, 15, 15, 0)

STORY_TEXT = (
    "The old fortress was built in the thirteenth century to guard the harbor entrance. "
    "Its thick stone walls have survived several sieges and one remarkable winter storm. "
    "However, the most important chapter of its history began much later. "
    "During the war the garrison would utilize the tunnels to move supplies in secret. "
    "Local families still tell stories about the colonel who commanded the guard. "
    "He was known for his patience and for his fondness for fresh bread. "
    "Every Wednesday he walked down to the market to talk with the fishermen. "
    "Many visitors today start their walk at the main gate near the water. "
    "From the ramparts you can see the islands scattered across the fjord. "
    "The fortress remains a fascinating place to imagine the lives of those who lived here."
)


class MutableClock:
    """Clock that tests can pin and advance."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def reset_feature_flags():
    """Drop runtime flag overrides between tests."""
    get_feature_flags().clear_all_overrides()
    yield
    get_feature_flags().clear_all_overrides()


@pytest.fixture
def clock() -> MutableClock:
    """Clock pinned to a summer afternoon."""
    return MutableClock()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def story() -> StoryContent:
    """A ten-sentence historical story."""
    return StoryContent(
        id="fortress",
        title="The Harbor Fortress",
        original_text=STORY_TEXT,
        metadata=ContentMetadata(
            type=ContentType.HISTORICAL,
            themes=frozenset({"history", "outdoor"}),
        ),
        geofence=Geofence(latitude=59.9075, longitude=10.7365, radius=300),
    )


@pytest.fixture
def insights() -> ContextualInsights:
    """Insights without suggestions."""
    return ContextualInsights(primary_context="test context")


@pytest.fixture
def make_weather():
    """Factory for weather readings."""

    def _make(
        condition: WeatherCondition = WeatherCondition.CLEAR,
        is_fallback: bool = False,
    ) -> WeatherData:
        return WeatherData(
            condition=condition,
            temperature=18.0,
            humidity=55.0,
            wind_speed=8.0,
            visibility=10.0,
            pressure=1015.0,
            uv_index=4.0,
            last_updated=FIXED_NOW,
            is_fallback=is_fallback,
        )

    return _make


@pytest.fixture
def make_context():
    """Factory for ContextualEnvironment with neutral defaults."""

    def _make(
        mode: MovementMode = MovementMode.WALKING,
        available_time: AvailableTime = AvailableTime.MEDIUM,
        attention: AttentionLevel = AttentionLevel.MEDIUM,
        environment: EnvironmentType = EnvironmentType.SUBURBAN,
        activity: ActivityContext = ActivityContext.LEISURE,
        preference: ContentPreference = ContentPreference.DETAILED,
        time_of_day: TimeOfDay = TimeOfDay.AFTERNOON,
        weather: WeatherData | None = None,
        position: GeoSample | None = None,
        pois: tuple[PointOfInterest, ...] = (),
        noise: NoiseLevel = NoiseLevel.MODERATE,
        speed: float = 4.0,
    ) -> ContextualEnvironment:
        return ContextualEnvironment(
            time_of_day=time_of_day,
            season=Season.SUMMER,
            weather=weather,
            location=LocationContext(
                environment_type=environment,
                elevation=10.0,
                nearby_pois=pois,
                population_density=Level.MEDIUM,
                noise_level=noise,
                safety_level=Level.HIGH,
            ),
            movement=MovementAnalysis(
                movement_mode=mode,
                average_speed=speed,
                confidence=0.8,
            ),
            activity_context=activity,
            available_time=available_time,
            attention_level=attention,
            content_preference=preference,
            position=position,
        )

    return _make
