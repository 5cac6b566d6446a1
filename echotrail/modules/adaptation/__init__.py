"""Adaptation Module - Context-tailored story versions and recommendations.

Usage:
    from echotrail.shared.service_registry import create_service_registry

    registry = create_service_registry()
    engine = registry.get_content_engine()
    adapted = await engine.adapt_content("story-1", context, insights)
    ranked = engine.get_content_recommendations(context, insights)
"""

from echotrail.modules.adaptation.cache import AdaptationCache, CacheEntry, MetricsTracker
from echotrail.modules.adaptation.interface import (
    AdaptationMetrics,
    AdaptationStrategy,
    AdaptedContent,
    ContentRecommendation,
    IAdaptationEngine,
    InteractionPoint,
    UserContentPreferences,
)
from echotrail.modules.adaptation.ranker import RecommendationRanker
from echotrail.modules.adaptation.service import (
    AdaptiveContentEngine,
    create_adaptive_content_engine,
)
from echotrail.modules.adaptation.strategy import StrategyBuilder, generate_context_hash
from echotrail.modules.adaptation.transformer import ContentTransformer

__all__ = [
    # Interface types
    "AdaptationMetrics",
    "AdaptationStrategy",
    "AdaptedContent",
    "ContentRecommendation",
    "IAdaptationEngine",
    "InteractionPoint",
    "UserContentPreferences",
    # Components
    "AdaptationCache",
    "CacheEntry",
    "ContentTransformer",
    "MetricsTracker",
    "RecommendationRanker",
    "StrategyBuilder",
    "generate_context_hash",
    # Service
    "AdaptiveContentEngine",
    "create_adaptive_content_engine",
]
