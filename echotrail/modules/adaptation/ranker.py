"""Recommendation ranking.

Scores every library story against the current context and pairs each
relevant story with a version ready to deliver.
"""

import logging

from echotrail.modules.adaptation.cache import AdaptationCache
from echotrail.modules.adaptation.interface import AdaptedContent, ContentRecommendation
from echotrail.modules.adaptation.strategy import generate_context_hash
from echotrail.modules.adaptation.transformer import ContentTransformer
from echotrail.modules.context.interface import ContextualEnvironment, ContextualInsights
from echotrail.modules.library.interface import IStoryLibrary, StoryContent
from echotrail.shared.constants import (
    DEFAULT_MAX_RECOMMENDATIONS,
    GEOFENCE_RELEVANCE_BONUS,
    MIN_RELEVANCE_SCORE,
)
from echotrail.shared.geo import haversine_distance
from echotrail.shared.models import (
    ActivityContext,
    AttentionLevel,
    AvailableTime,
    ContentType,
    DeliveryTiming,
    MovementMode,
    Priority,
    TimeOfDay,
    WeatherCondition,
)

logger = logging.getLogger(__name__)

SUGGESTION_PRIORITY_WEIGHTS: dict[Priority, float] = {
    Priority.URGENT: 0.3,
    Priority.HIGH: 0.3,
    Priority.MEDIUM: 0.2,
    Priority.LOW: 0.1,
}

ACTIVITY_RELEVANCE: dict[ContentType, dict[ActivityContext, float]] = {
    ContentType.HISTORICAL: {
        ActivityContext.SIGHTSEEING: 0.3,
        ActivityContext.LEISURE: 0.2,
        ActivityContext.COMMUTING: 0.1,
    },
    ContentType.NATURAL: {
        ActivityContext.EXERCISE: 0.3,
        ActivityContext.LEISURE: 0.2,
        ActivityContext.SIGHTSEEING: 0.2,
    },
    ContentType.CULTURAL: {
        ActivityContext.SIGHTSEEING: 0.3,
        ActivityContext.LEISURE: 0.2,
    },
}

TIME_RELEVANCE: dict[ContentType, dict[TimeOfDay, float]] = {
    ContentType.HISTORICAL: {
        TimeOfDay.AFTERNOON: 0.1,
        TimeOfDay.EVENING: 0.05,
    },
    ContentType.NATURAL: {
        TimeOfDay.MORNING: 0.1,
        TimeOfDay.EVENING: 0.1,
    },
}

# (theme, condition) pairs worth a small bonus
WEATHER_THEMES: dict[str, WeatherCondition] = {
    "indoor": WeatherCondition.RAINY,
    "outdoor": WeatherCondition.CLEAR,
}
WEATHER_THEME_BONUS = 0.1


def is_location_relevant(story: StoryContent, context: ContextualEnvironment) -> bool:
    """Check whether the context position is inside the story's geofence."""
    if story.geofence is None or context.position is None:
        return False
    distance = haversine_distance(
        context.position.latitude,
        context.position.longitude,
        story.geofence.latitude,
        story.geofence.longitude,
    )
    return distance <= story.geofence.radius


class RecommendationRanker:
    """Ranks library stories for a context."""

    def __init__(
        self,
        library: IStoryLibrary,
        cache: AdaptationCache,
        transformer: ContentTransformer,
    ) -> None:
        self.library = library
        self.cache = cache
        self.transformer = transformer

    def recommend(
        self,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        max_results: int = DEFAULT_MAX_RECOMMENDATIONS,
    ) -> list[ContentRecommendation]:
        """Score, filter, sort and truncate recommendations."""
        context_hash = generate_context_hash(context)
        recommendations = []

        for story in self.library.list_stories():
            relevance = self.calculate_relevance(story, context, insights)
            if relevance < MIN_RELEVANCE_SCORE:
                continue

            adapted = self.cache.get(story.id, context_hash) or self._quick_adaptation(story, context)
            recommendations.append(
                ContentRecommendation(
                    content=story,
                    adapted_version=adapted,
                    relevance_score=relevance,
                    delivery_timing=self.determine_delivery_timing(story, context),
                    priority=self.calculate_priority(relevance, context),
                    reason=self.generate_reason(story, context, insights),
                    estimated_engagement=self.estimate_engagement(story, context),
                )
            )

        recommendations.sort(key=lambda r: (-r.priority.rank, -r.relevance_score))
        logger.debug(
            f"Ranked {len(recommendations)} of {len(self.library)} stories for {context_hash}"
        )
        return recommendations[:max_results]

    def calculate_relevance(
        self,
        story: StoryContent,
        context: ContextualEnvironment,
        insights: ContextualInsights,
    ) -> float:
        """Relevance of a story in [0, 1]."""
        content_type = story.metadata.type
        score = 0.0

        if is_location_relevant(story, context):
            score += GEOFENCE_RELEVANCE_BONUS

        for suggestion in insights.content_suggestions:
            if suggestion.type == content_type:
                score += SUGGESTION_PRIORITY_WEIGHTS[suggestion.priority]

        score += ACTIVITY_RELEVANCE.get(content_type, {}).get(context.activity_context, 0.0)
        score += TIME_RELEVANCE.get(content_type, {}).get(context.time_of_day, 0.0)

        # A substituted default reading says nothing about the real sky
        weather = context.weather
        if weather is not None and not weather.is_fallback:
            for theme, condition in WEATHER_THEMES.items():
                if theme in story.metadata.themes and weather.condition == condition:
                    score += WEATHER_THEME_BONUS

        return max(0.0, min(1.0, score))

    def determine_delivery_timing(
        self,
        story: StoryContent,
        context: ContextualEnvironment,
    ) -> DeliveryTiming:
        if context.movement.movement_mode == MovementMode.DRIVING:
            return DeliveryTiming.OPPORTUNISTIC
        if context.attention_level == AttentionLevel.LOW:
            return DeliveryTiming.QUEUED
        if is_location_relevant(story, context):
            return DeliveryTiming.IMMEDIATE
        return DeliveryTiming.SCHEDULED

    def calculate_priority(self, relevance: float, context: ContextualEnvironment) -> Priority:
        if relevance > 0.8 and context.available_time != AvailableTime.SHORT:
            return Priority.URGENT
        if relevance > 0.6:
            return Priority.HIGH
        if relevance > 0.4:
            return Priority.MEDIUM
        return Priority.LOW

    def generate_reason(
        self,
        story: StoryContent,
        context: ContextualEnvironment,
        insights: ContextualInsights,
    ) -> str:
        reasons = []

        if is_location_relevant(story, context):
            reasons.append("You are near this location")
        if context.activity_context == ActivityContext.SIGHTSEEING:
            reasons.append("Perfect for sightseeing")
        if context.available_time == AvailableTime.LONG:
            reasons.append("You have time for a detailed story")
        if any(s.type == story.metadata.type for s in insights.content_suggestions):
            reasons.append("Matches your current interests")

        return ", ".join(reasons) if reasons else "Recommended based on your context"

    def estimate_engagement(self, story: StoryContent, context: ContextualEnvironment) -> float:
        engagement = 0.5

        if (
            context.activity_context == ActivityContext.SIGHTSEEING
            and story.metadata.type == ContentType.HISTORICAL
        ):
            engagement += 0.2

        if context.attention_level == AttentionLevel.HIGH:
            engagement += 0.2
        elif context.attention_level == AttentionLevel.LOW:
            engagement -= 0.1

        if context.available_time == AvailableTime.LONG:
            engagement += 0.1
        elif context.available_time == AvailableTime.SHORT:
            engagement -= 0.1

        return max(0.0, min(1.0, engagement))

    def _quick_adaptation(self, story: StoryContent, context: ContextualEnvironment) -> AdaptedContent:
        return self.transformer.quick_adapt(story, context)
