"""Adaptive Content Engine - Stories tailored to the listener's situation.

This service provides:
- Context-specific adaptation of library stories, cached per context hash
- Ranked recommendations of which stories to deliver now
- Running metrics on adaptation confidence, latency and cache hits
"""

import logging
import time

from echotrail.modules.adaptation.cache import AdaptationCache, CacheEntry, MetricsTracker
from echotrail.modules.adaptation.interface import (
    AdaptationMetrics,
    AdaptationStrategy,
    AdaptedContent,
    ContentRecommendation,
    IAdaptationEngine,
    UserContentPreferences,
)
from echotrail.modules.adaptation.ranker import RecommendationRanker
from echotrail.modules.adaptation.strategy import StrategyBuilder, generate_context_hash
from echotrail.modules.adaptation.transformer import ContentTransformer
from echotrail.modules.context.interface import ContextualEnvironment, ContextualInsights
from echotrail.modules.library.interface import IStoryLibrary, StoryContent
from echotrail.shared.constants import DEFAULT_MAX_RECOMMENDATIONS

logger = logging.getLogger(__name__)


class AdaptiveContentEngine(IAdaptationEngine):
    """Adapts library stories to contexts and recommends what to deliver.

    One instance per application; collaborators are injected so tests can
    build isolated engines.
    """

    def __init__(
        self,
        library: IStoryLibrary,
        transformer: ContentTransformer | None = None,
        strategy_builder: StrategyBuilder | None = None,
        cache_size: int = 100,
        success_threshold: float = 0.7,
    ) -> None:
        self.library = library
        self.transformer = transformer or ContentTransformer()
        self.strategies = strategy_builder or StrategyBuilder(max_size=cache_size)
        self.cache = AdaptationCache(cache_size)
        self.metrics = MetricsTracker(success_threshold)
        self.ranker = RecommendationRanker(library, self.cache, self.transformer)

    # ===================
    # Adaptation
    # ===================

    async def adapt_content(
        self,
        content_id: str,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        user_preferences: UserContentPreferences | None = None,
    ) -> AdaptedContent | None:
        start = time.perf_counter()

        story = self.library.get_story(content_id)
        if story is None:
            logger.info(f"Story {content_id} not in library, skipping adaptation")
            return None

        context_hash = generate_context_hash(context)

        cached = self.cache.get(content_id, context_hash)
        if cached is not None:
            logger.debug(f"Adaptation cache hit: {content_id}_{context_hash}")
            self._record(start, True, cached.confidence, context)
            return cached

        strategy = self.create_strategy(context, insights, story, user_preferences)
        adapted = self.transformer.adapt(story, strategy, context)

        evicted = self.cache.put(content_id, context_hash, adapted)
        if evicted is not None:
            self._forget_memoized(evicted)
        story.adapted_versions[context_hash] = adapted

        self._record(start, False, adapted.confidence, context)
        logger.debug(
            f"Adapted {content_id} for {context_hash}: format={adapted.format.value} "
            f"length={adapted.length.value} confidence={adapted.confidence:.2f}"
        )
        return adapted

    def create_strategy(
        self,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        content: StoryContent,
        user_preferences: UserContentPreferences | None = None,
    ) -> AdaptationStrategy:
        """Get the (memoized) strategy for a context and preferences."""
        return self.strategies.create_strategy(context, insights, content, user_preferences)

    def get_content_recommendations(
        self,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        max_recommendations: int = DEFAULT_MAX_RECOMMENDATIONS,
    ) -> list[ContentRecommendation]:
        return self.ranker.recommend(context, insights, max_recommendations)

    # ===================
    # Library
    # ===================

    def add_story(self, story: StoryContent) -> None:
        self.library.add_story(story)

    def remove_story(self, content_id: str) -> bool:
        """Remove a story and every cached adaptation of it."""
        removed = self.library.remove_story(content_id)
        if removed:
            dropped = self.cache.discard_content(content_id)
            logger.info(f"Removed story {content_id} ({dropped} cached adaptations dropped)")
        return removed

    # ===================
    # Metrics & caches
    # ===================

    def get_metrics(self) -> AdaptationMetrics:
        return self.metrics.snapshot()

    def clear_caches(self) -> None:
        """Drop cached adaptations and strategies. Metrics are kept."""
        for story in self.library.list_stories():
            story.adapted_versions.clear()
        self.cache.clear()
        self.strategies.clear()

    def reset(self) -> None:
        """Clear caches and metrics."""
        self.clear_caches()
        self.metrics.reset()
        logger.info("Adaptive content engine reset")

    def get_cache_stats(self) -> dict[str, int]:
        return {
            "adaptation_cache_size": len(self.cache),
            "strategy_cache_size": len(self.strategies),
            "content_library_size": len(self.library),
        }

    def _record(
        self,
        start: float,
        cache_hit: bool,
        confidence: float,
        context: ContextualEnvironment,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        self.metrics.record(latency_ms, cache_hit, confidence, context.activity_context)

    def _forget_memoized(self, entry: CacheEntry) -> None:
        story = self.library.get_story(entry.content_id)
        if story is not None:
            story.adapted_versions.pop(entry.context_hash, None)


def create_adaptive_content_engine(
    library: IStoryLibrary,
    transformer: ContentTransformer | None = None,
    cache_size: int = 100,
    success_threshold: float = 0.7,
) -> AdaptiveContentEngine:
    """Create an engine with a fresh strategy builder."""
    return AdaptiveContentEngine(
        library,
        transformer=transformer,
        cache_size=cache_size,
        success_threshold=success_threshold,
    )
