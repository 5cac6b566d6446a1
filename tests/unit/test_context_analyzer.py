"""Tests for the context analyzer service."""

from unittest.mock import AsyncMock

import pytest

from echotrail.modules.context.interface import GeoSample, MovementAnalysis
from echotrail.modules.context.location import (
    CatalogEntry,
    CatalogPoiProvider,
    LocationContextResolver,
)
from echotrail.modules.context.service import create_context_analyzer
from echotrail.modules.context.weather import WeatherResolver
from echotrail.shared.exceptions import LocationProviderError
from echotrail.shared.models import (
    ActivityContext,
    AdaptationAspect,
    Adjustment,
    AttentionLevel,
    AvailableTime,
    ContentPreference,
    ContentType,
    EnvironmentType,
    InteractionLevel,
    MovementMode,
    PoiType,
    Priority,
    Season,
    SpeedTrend,
    TimeOfDay,
    WeatherCondition,
)

# Suburban spot with a historical landmark about 110 m away
VILLAGE = GeoSample(latitude=59.0, longitude=8.0)
QUIET_FIELD = GeoSample(latitude=59.5, longitude=8.0)
CITY_CENTER = GeoSample(latitude=59.9139, longitude=10.7522)
FOREST_TRAIL = GeoSample(latitude=60.1, longitude=10.7)

CATALOG = [CatalogEntry(PoiType.HISTORICAL, "Old Church", 59.001, 8.0, relevance=0.8)]


@pytest.fixture
def weather_provider(make_weather) -> AsyncMock:
    provider = AsyncMock()
    provider.get_weather = AsyncMock(return_value=make_weather(WeatherCondition.CLEAR))
    return provider


@pytest.fixture
def analyzer(weather_provider, clock):
    return create_context_analyzer(
        weather_resolver=WeatherResolver(weather_provider, clock=clock),
        location_resolver=LocationContextResolver(CatalogPoiProvider(CATALOG), clock=clock),
        clock=clock,
    )


class TestAnalyzeContext:
    """Tests for building ContextualEnvironment snapshots."""

    @pytest.mark.asyncio
    async def test_slow_walk_near_landmark(self, analyzer):
        """Test a sightseeing walk in a suburban area."""
        movement = MovementAnalysis(MovementMode.WALKING, average_speed=3.0, confidence=0.8)

        context = await analyzer.analyze_context(VILLAGE, movement)

        assert context.time_of_day == TimeOfDay.AFTERNOON
        assert context.season == Season.SUMMER
        assert context.location.environment_type == EnvironmentType.SUBURBAN
        assert context.location.nearby_pois[0].name == "Old Church"
        assert context.activity_context == ActivityContext.SIGHTSEEING
        assert context.available_time == AvailableTime.LONG
        assert context.attention_level == AttentionLevel.MEDIUM
        assert context.content_preference == ContentPreference.DETAILED
        assert context.position == VILLAGE

    @pytest.mark.asyncio
    async def test_long_daytime_stop(self, analyzer):
        """Test that a long stationary stop reads as work with high attention."""
        movement = MovementAnalysis(MovementMode.STATIONARY, stationary_duration=45)

        context = await analyzer.analyze_context(QUIET_FIELD, movement)

        assert context.activity_context == ActivityContext.WORK
        assert context.available_time == AvailableTime.SHORT
        assert context.attention_level == AttentionLevel.HIGH
        assert context.content_preference == ContentPreference.BRIEF

    @pytest.mark.asyncio
    async def test_driving_through_city(self, analyzer):
        movement = MovementAnalysis(MovementMode.DRIVING, average_speed=45, confidence=0.9)

        context = await analyzer.analyze_context(CITY_CENTER, movement)

        assert context.location.environment_type == EnvironmentType.URBAN
        assert context.activity_context == ActivityContext.LEISURE
        assert context.available_time == AvailableTime.SHORT
        assert context.attention_level == AttentionLevel.LOW
        assert context.content_preference == ContentPreference.BRIEF

    @pytest.mark.asyncio
    async def test_supplied_weather_skips_lookup(self, analyzer, weather_provider, make_weather):
        rain = make_weather(WeatherCondition.RAINY)
        movement = MovementAnalysis(MovementMode.WALKING, trend=SpeedTrend.DECELERATING)

        context = await analyzer.analyze_context(FOREST_TRAIL, movement, weather=rain)

        assert context.weather is rain
        weather_provider.get_weather.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_records_activity_history(self, analyzer):
        movement = MovementAnalysis(MovementMode.WALKING, average_speed=3.0)

        await analyzer.analyze_context(VILLAGE, movement)
        await analyzer.analyze_context(QUIET_FIELD, movement)

        assert analyzer.recent_activities == [
            ActivityContext.SIGHTSEEING,
            ActivityContext.LEISURE,
        ]


class TestAnalyzeCurrent:
    """Tests for analysis straight from device providers."""

    @pytest.fixture
    def motion_provider(self) -> AsyncMock:
        provider = AsyncMock()
        provider.get_movement_analysis = AsyncMock(return_value=MovementAnalysis(
            MovementMode.WALKING, average_speed=4.5, confidence=0.8,
        ))
        return provider

    @pytest.mark.asyncio
    async def test_uses_provider_sample(self, analyzer, motion_provider):
        location_provider = AsyncMock()
        location_provider.get_current_sample = AsyncMock(return_value=VILLAGE)

        context = await analyzer.analyze_current(location_provider, motion_provider)

        assert context.position == VILLAGE
        assert context.location.is_fallback is False

    @pytest.mark.asyncio
    async def test_location_failure_degrades(self, analyzer, motion_provider, weather_provider):
        """Test that a missing fix still yields a usable context."""
        location_provider = AsyncMock()
        location_provider.get_current_sample = AsyncMock(
            side_effect=LocationProviderError("no fix")
        )

        context = await analyzer.analyze_current(location_provider, motion_provider)

        assert context.position is None
        assert context.location.is_fallback is True
        assert context.location.environment_type == EnvironmentType.SUBURBAN
        assert context.weather.is_fallback is True
        assert context.activity_context == ActivityContext.LEISURE
        weather_provider.get_weather.assert_not_awaited()

        insights = analyzer.generate_insights(context)
        assert insights.confidence == pytest.approx(0.84)


class TestGenerateInsights:
    """Tests for suggestions, factors and recommendations."""

    @pytest.mark.asyncio
    async def test_sightseeing_insights(self, analyzer):
        movement = MovementAnalysis(MovementMode.WALKING, average_speed=3.0, confidence=0.8)
        context = await analyzer.analyze_context(VILLAGE, movement)

        insights = analyzer.generate_insights(context)

        assert insights.primary_context == (
            "walking user, in suburban environment, during afternoon, "
            "engaging in sightseeing activity"
        )
        assert len(insights.content_suggestions) == 1
        suggestion = insights.content_suggestions[0]
        assert suggestion.type == ContentType.HISTORICAL
        assert suggestion.priority == Priority.HIGH
        assert suggestion.time_required == 10
        assert suggestion.interaction_level == InteractionLevel.PASSIVE
        assert insights.environmental_factors == []
        assert insights.adaptation_recommendations == []
        assert insights.confidence == 1.0

    @pytest.mark.asyncio
    async def test_driving_insights(self, analyzer):
        movement = MovementAnalysis(MovementMode.DRIVING, average_speed=45, confidence=0.9)
        context = await analyzer.analyze_context(CITY_CENTER, movement)

        insights = analyzer.generate_insights(context)

        assert "Driving requires primary attention for safety" in insights.environmental_factors
        assert "High noise environment may affect audio clarity" in insights.environmental_factors
        aspects = {
            (rec.aspect, rec.adjustment) for rec in insights.adaptation_recommendations
        }
        assert aspects == {
            (AdaptationAspect.VOLUME, Adjustment.INCREASE),
            (AdaptationAspect.SPEED, Adjustment.DECREASE),
            (AdaptationAspect.DURATION, Adjustment.DECREASE),
            (AdaptationAspect.COMPLEXITY, Adjustment.DECREASE),
        }
        assert insights.content_suggestions == []

    @pytest.mark.asyncio
    async def test_rainy_forest_leisure(self, analyzer, make_weather):
        movement = MovementAnalysis(MovementMode.WALKING, trend=SpeedTrend.DECELERATING)
        context = await analyzer.analyze_context(
            FOREST_TRAIL, movement, weather=make_weather(WeatherCondition.RAINY)
        )

        insights = analyzer.generate_insights(context)

        assert "in rainy weather" in insights.primary_context
        assert "Adverse weather may reduce user attention to device" in insights.environmental_factors
        types = [s.type for s in insights.content_suggestions]
        assert types == [ContentType.NATURAL, ContentType.PERSONAL]
        assert insights.content_suggestions[0].time_required == 5

    @pytest.mark.asyncio
    async def test_inconsistent_history_lowers_confidence(self, analyzer):
        """Test that a change of activity drops the consistency bonus."""
        await analyzer.analyze_context(
            VILLAGE, MovementAnalysis(MovementMode.WALKING, average_speed=3.0)
        )
        context = await analyzer.analyze_context(
            QUIET_FIELD,
            MovementAnalysis(MovementMode.STATIONARY, stationary_duration=45, confidence=0.8),
        )

        insights = analyzer.generate_insights(context)

        # base + movement + weather, no POIs and no consistency bonus
        assert insights.confidence == pytest.approx(0.84)


class TestCacheManagement:
    """Tests for cache statistics and clearing."""

    @pytest.mark.asyncio
    async def test_stats_and_clear(self, analyzer):
        await analyzer.analyze_context(VILLAGE, MovementAnalysis(MovementMode.WALKING))

        assert analyzer.get_cache_stats() == {
            "weather_cache_size": 1,
            "location_cache_size": 1,
            "activity_history_size": 1,
        }

        analyzer.clear_caches()

        assert analyzer.get_cache_stats() == {
            "weather_cache_size": 0,
            "location_cache_size": 0,
            "activity_history_size": 0,
        }
