"""Integration tests for context analysis feeding story adaptation."""

import itertools
import random
from unittest.mock import AsyncMock

import pytest

from echotrail.modules.adaptation.service import create_adaptive_content_engine
from echotrail.modules.adaptation.strategy import generate_context_hash
from echotrail.modules.adaptation.transformer import ContentTransformer, split_sentences
from echotrail.modules.context.interface import GeoSample, MovementAnalysis
from echotrail.modules.context.location import CatalogEntry, CatalogPoiProvider
from echotrail.modules.library.interface import ContentMetadata, StoryContent
from echotrail.modules.library.service import InMemoryStoryLibrary
from echotrail.shared.config import Settings
from echotrail.shared.exceptions import WeatherProviderError
from echotrail.shared.feature_flags import FeatureFlags, get_feature_flags
from echotrail.shared.models import (
    ActivityContext,
    AttentionLevel,
    AvailableTime,
    ContentComplexity,
    ContentFormat,
    ContentLength,
    ContentType,
    DeliveryTiming,
    MovementMode,
    PoiType,
    Priority,
)
from echotrail.shared.service_registry import ServiceRegistry

CITY_CENTER = GeoSample(latitude=59.9139, longitude=10.7522)
COUNTRYSIDE = GeoSample(latitude=59.0, longitude=8.0)
NEAR_FORTRESS = GeoSample(latitude=59.9078, longitude=10.7370)

CATALOG = [
    CatalogEntry(PoiType.HISTORICAL, "Akershus Fortress", 59.9075, 10.7365, relevance=0.9),
]


@pytest.fixture
def settings() -> Settings:
    return Settings(random_seed=42)


@pytest.fixture
def registry(settings, story, clock) -> ServiceRegistry:
    get_feature_flags().disable(FeatureFlags.USE_LIVE_WEATHER)
    return ServiceRegistry(
        settings,
        poi_provider=CatalogPoiProvider(CATALOG),
        library=InMemoryStoryLibrary([story]),
        clock=clock,
    )


async def _analyze(registry: ServiceRegistry, sample: GeoSample, movement: MovementAnalysis):
    analyzer = registry.get_context_analyzer()
    context = await analyzer.analyze_context(sample, movement)
    return context, analyzer.generate_insights(context)


class TestDrivingThroughCity:
    """A driver with little time and attention gets a short spoken story."""

    @pytest.mark.asyncio
    async def test_adaptation(self, registry, story):
        context, insights = await _analyze(
            registry, CITY_CENTER, MovementAnalysis(MovementMode.DRIVING, average_speed=45)
        )
        engine = registry.get_content_engine()

        adapted = await engine.adapt_content(story.id, context, insights)

        assert generate_context_hash(context) == "driving_short_low_brief_urban_leisure"
        assert len(split_sentences(adapted.text)) == 3
        assert adapted.complexity == ContentComplexity.SIMPLE
        assert adapted.format == ContentFormat.AUDIO
        assert adapted.length == ContentLength.MICRO
        assert adapted.interaction_points == ()
        assert adapted.audio_script is not None

    @pytest.mark.asyncio
    async def test_recommendation_reuses_adaptation(self, registry, story):
        context, insights = await _analyze(
            registry, CITY_CENTER, MovementAnalysis(MovementMode.DRIVING, average_speed=45)
        )
        engine = registry.get_content_engine()
        adapted = await engine.adapt_content(story.id, context, insights)

        recommendations = engine.get_content_recommendations(context, insights)

        assert [r.content.id for r in recommendations] == [story.id]
        assert recommendations[0].adapted_version is adapted
        assert recommendations[0].delivery_timing == DeliveryTiming.OPPORTUNISTIC


class TestResting:
    """A resting listener with time to spare gets the whole, interactive story."""

    @pytest.mark.asyncio
    async def test_adaptation(self, registry, story):
        context, insights = await _analyze(
            registry,
            COUNTRYSIDE,
            MovementAnalysis(MovementMode.STATIONARY, stationary_duration=10),
        )
        engine = registry.get_content_engine()

        adapted = await engine.adapt_content(story.id, context, insights)

        assert context.activity_context == ActivityContext.LEISURE
        assert context.available_time == AvailableTime.LONG
        assert context.attention_level == AttentionLevel.HIGH
        assert len(split_sentences(adapted.text)) == 10
        assert adapted.complexity == ContentComplexity.COMPLEX
        assert adapted.format == ContentFormat.INTERACTIVE
        assert len(adapted.interaction_points) == 3


class TestSightseeing:
    @pytest.mark.asyncio
    async def test_fortress_is_top_recommendation(self, registry, story):
        context, insights = await _analyze(
            registry, NEAR_FORTRESS, MovementAnalysis(MovementMode.WALKING, average_speed=3.0)
        )
        engine = registry.get_content_engine()

        recommendations = engine.get_content_recommendations(context, insights)

        assert context.activity_context == ActivityContext.SIGHTSEEING
        top = recommendations[0]
        assert top.content.id == story.id
        assert top.relevance_score == 1.0
        assert top.priority == Priority.URGENT
        assert top.reason.startswith("You are near this location")
        assert top.adapted_version.adaptation_context == "quick_adaptation"


class TestInsightConfidence:
    """Real weather readings are worth more confidence than defaults."""

    @pytest.mark.asyncio
    async def test_fallback_weather_lowers_confidence(self, settings, clock):
        movement = MovementAnalysis(MovementMode.WALKING, average_speed=4.5, confidence=0.5)
        failing_weather = AsyncMock()
        failing_weather.get_weather = AsyncMock(side_effect=WeatherProviderError("down"))
        get_feature_flags().disable(FeatureFlags.USE_LIVE_WEATHER)

        live = ServiceRegistry(settings, poi_provider=CatalogPoiProvider([]), clock=clock)
        degraded = ServiceRegistry(
            settings,
            weather_provider=failing_weather,
            poi_provider=CatalogPoiProvider([]),
            clock=clock,
        )

        _, live_insights = await _analyze(live, COUNTRYSIDE, movement)
        degraded_context, degraded_insights = await _analyze(degraded, COUNTRYSIDE, movement)

        assert degraded_context.weather.is_fallback is True
        assert live_insights.confidence == pytest.approx(0.85)
        assert degraded_insights.confidence == pytest.approx(0.75)


class TestEquivalentContexts:
    """Nearby samples with the same situation share strategy and adaptation."""

    @pytest.mark.asyncio
    async def test_second_walk_is_cache_hit(self, registry, story):
        movement = MovementAnalysis(MovementMode.WALKING, average_speed=4.5)
        engine = registry.get_content_engine()

        first_context, first_insights = await _analyze(
            registry, GeoSample(59.0001, 8.0001), movement
        )
        first = await engine.adapt_content(story.id, first_context, first_insights)
        assert engine.get_metrics().cache_hit_rate == 0.0

        second_context, second_insights = await _analyze(
            registry, GeoSample(59.0002, 8.0002), movement
        )
        second = await engine.adapt_content(story.id, second_context, second_insights)

        assert generate_context_hash(first_context) == generate_context_hash(second_context)
        assert engine.create_strategy(first_context, first_insights, story) is (
            engine.create_strategy(second_context, second_insights, story)
        )
        assert second is first
        assert engine.get_metrics().cache_hit_rate == pytest.approx(0.5)


class TestAdaptationProperties:
    """Invariants that hold for every combination of situation factors."""

    @pytest.mark.asyncio
    async def test_every_situation(self, story, make_context, insights):
        engine = create_adaptive_content_engine(
            InMemoryStoryLibrary([story]),
            transformer=ContentTransformer(rng=random.Random(3)),
        )
        original_sentences = len(split_sentences(story.original_text))

        for mode, available_time, attention in itertools.product(
            MovementMode, AvailableTime, AttentionLevel
        ):
            context = make_context(mode=mode, available_time=available_time, attention=attention)
            adapted = await engine.adapt_content(story.id, context, insights)

            label = f"{mode.value}/{available_time.value}/{attention.value}"
            assert 1 <= len(split_sentences(adapted.text)) <= original_sentences, label
            assert 0.0 <= adapted.confidence <= 1.0, label
            assert adapted.adaptation_context == generate_context_hash(context), label
            if mode == MovementMode.DRIVING:
                assert adapted.format == ContentFormat.AUDIO, label
                assert adapted.interaction_points == (), label

            timestamps = [p.timestamp for p in adapted.interaction_points]
            assert timestamps == sorted(timestamps), label
            assert all(0 < t < adapted.duration for t in timestamps), label

        assert engine.get_metrics().total_adaptations == 36
        assert story.original_text.startswith("The old fortress")

    @pytest.mark.asyncio
    async def test_long_story_has_no_prompts_for_driver(self, make_context, insights):
        long_story = StoryContent(
            id="coastline",
            title="The Long Coastline",
            original_text=" ".join(
                f"Mile {i} of the coast road passes another quiet fishing village." for i in range(120)
            ),
            metadata=ContentMetadata(type=ContentType.NATURAL),
        )
        engine = create_adaptive_content_engine(
            InMemoryStoryLibrary([long_story]),
            transformer=ContentTransformer(rng=random.Random(3)),
        )
        context = make_context(
            mode=MovementMode.DRIVING,
            available_time=AvailableTime.SHORT,
            attention=AttentionLevel.LOW,
        )

        adapted = await engine.adapt_content(long_story.id, context, insights)

        assert len(split_sentences(adapted.text)) == 36
        assert adapted.format == ContentFormat.AUDIO
        assert adapted.interaction_points == ()
