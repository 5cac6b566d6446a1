"""Context Analyzer - Fuses situational signals into a structured model.

This service provides:
- ContextualEnvironment snapshots from location, movement, time and weather
- Derived estimates of available time, attention and content depth
- ContextualInsights: content suggestions, risk factors, delivery adjustments
"""

import logging

from echotrail.modules.context.activity import ActivityInferrer
from echotrail.modules.context.classifier import (
    OUTDOOR_ENVIRONMENTS,
    determine_season,
    determine_time_of_day,
    is_severe_weather,
)
from echotrail.modules.context.interface import (
    AdaptationRecommendation,
    ContentSuggestion,
    ContextualEnvironment,
    ContextualInsights,
    GeoSample,
    IContextAnalyzer,
    ILocationProvider,
    IMotionProvider,
    LocationContext,
    MovementAnalysis,
    WeatherData,
)
from echotrail.modules.context.location import LocationContextResolver, build_location_context
from echotrail.modules.context.weather import WeatherResolver, fallback_weather
from echotrail.shared.constants import (
    ATTENTION_BASE_SCORE,
    ATTENTION_HIGH_THRESHOLD,
    ATTENTION_LOW_THRESHOLD,
)
from echotrail.shared.datetime_utils import Clock, local_now
from echotrail.shared.models import (
    ActivityContext,
    AdaptationAspect,
    Adjustment,
    AttentionLevel,
    AvailableTime,
    ContentPreference,
    ContentType,
    InteractionLevel,
    Level,
    MovementMode,
    NoiseLevel,
    PoiType,
    Priority,
    TimeOfDay,
    WeatherCondition,
)

logger = logging.getLogger(__name__)

# Attention score adjustments per signal
_MOVEMENT_ATTENTION = {
    MovementMode.DRIVING: -0.4,
    MovementMode.CYCLING: -0.2,
    MovementMode.WALKING: 0.0,
    MovementMode.STATIONARY: 0.3,
}
_LOUD_PENALTY = 0.2
_UNSAFE_PENALTY = 0.2
_WEATHER_PENALTY = 0.2


class ContextAnalyzer(IContextAnalyzer):
    """Service for understanding the user's current situation.

    Combines environmental, temporal and behavioral factors. The only state
    it keeps is the weather and location caches and a short activity
    history used for consistency scoring.
    """

    def __init__(
        self,
        weather_resolver: WeatherResolver,
        location_resolver: LocationContextResolver,
        activity_inferrer: ActivityInferrer | None = None,
        clock: Clock = local_now,
    ) -> None:
        self._weather = weather_resolver
        self._location = location_resolver
        self._activity = activity_inferrer or ActivityInferrer()
        self._clock = clock

    @property
    def recent_activities(self) -> list[ActivityContext]:
        return self._activity.history

    async def analyze_context(
        self,
        location: GeoSample,
        movement: MovementAnalysis,
        weather: WeatherData | None = None,
    ) -> ContextualEnvironment:
        """Build a situational snapshot.

        Missing or failing weather and POI data degrade to defaults instead
        of failing the call.

        Args:
            location: Current location fix
            movement: Movement analysis from the motion provider
            weather: Already-fetched weather, skips the weather lookup

        Returns:
            ContextualEnvironment for this instant
        """
        location_context = await self._location.resolve(location)
        if weather is None:
            weather = await self._weather.resolve(location)

        return self._build_environment(location, location_context, movement, weather)

    async def analyze_current(
        self,
        location_provider: ILocationProvider,
        motion_provider: IMotionProvider,
    ) -> ContextualEnvironment:
        """Build a snapshot from the device's providers.

        A failing location provider yields a degraded context with a
        fallback location and no position.

        Args:
            location_provider: Source of location fixes
            motion_provider: Source of movement analysis

        Returns:
            ContextualEnvironment for this instant
        """
        movement = await motion_provider.get_movement_analysis()

        try:
            sample = await location_provider.get_current_sample()
        except Exception as e:
            logger.warning(f"Location unavailable, analyzing without position: {e}")
            now = self._clock()
            return self._build_environment(
                None,
                build_location_context(None, [], is_fallback=True),
                movement,
                fallback_weather(now),
            )

        return await self.analyze_context(sample, movement)

    def generate_insights(self, context: ContextualEnvironment) -> ContextualInsights:
        """Derive suggestions, risk factors and recommendations.

        Args:
            context: Snapshot from analyze_context

        Returns:
            ContextualInsights with a confidence in [0, 1]
        """
        return ContextualInsights(
            primary_context=self._identify_primary_context(context),
            content_suggestions=self._generate_content_suggestions(context),
            environmental_factors=self._identify_environmental_factors(context),
            adaptation_recommendations=self._generate_adaptation_recommendations(context),
            confidence=self._calculate_insight_confidence(context),
        )

    def clear_caches(self) -> None:
        """Clear caches and activity history."""
        self._weather.clear()
        self._location.clear()
        self._activity.clear()
        logger.info("Context caches cleared")

    def get_cache_stats(self) -> dict[str, int]:
        """Get current cache sizes."""
        return {
            "weather_cache_size": self._weather.cache_size,
            "location_cache_size": self._location.cache_size,
            "activity_history_size": len(self._activity.history),
        }

    # --- Snapshot assembly ---

    def _build_environment(
        self,
        sample: GeoSample | None,
        location_context: LocationContext,
        movement: MovementAnalysis,
        weather: WeatherData,
    ) -> ContextualEnvironment:
        now = self._clock()
        time_of_day = determine_time_of_day(now)

        activity = self._activity.infer(movement, location_context, time_of_day)
        self._activity.record(activity)

        available_time = self._estimate_available_time(movement, activity, time_of_day)
        attention = self._assess_attention_level(movement, location_context, weather)
        preference = self._determine_content_preference(attention, available_time, activity)

        logger.debug(
            f"Context: {movement.movement_mode.value} / {activity.value} / "
            f"{available_time.value} time / {attention.value} attention"
        )

        return ContextualEnvironment(
            time_of_day=time_of_day,
            season=determine_season(now),
            weather=weather,
            location=location_context,
            movement=movement,
            activity_context=activity,
            available_time=available_time,
            attention_level=attention,
            content_preference=preference,
            position=sample,
        )

    def _estimate_available_time(
        self,
        movement: MovementAnalysis,
        activity: ActivityContext,
        time_of_day: TimeOfDay,
    ) -> AvailableTime:
        if activity == ActivityContext.COMMUTING or movement.movement_mode == MovementMode.DRIVING:
            return AvailableTime.SHORT

        if activity == ActivityContext.WORK or time_of_day == TimeOfDay.MORNING:
            return AvailableTime.SHORT

        if activity in (ActivityContext.SIGHTSEEING, ActivityContext.LEISURE):
            return AvailableTime.LONG

        return AvailableTime.MEDIUM

    def _assess_attention_level(
        self,
        movement: MovementAnalysis,
        location: LocationContext,
        weather: WeatherData | None,
    ) -> AttentionLevel:
        score = ATTENTION_BASE_SCORE + _MOVEMENT_ATTENTION[movement.movement_mode]

        if location.noise_level == NoiseLevel.LOUD:
            score -= _LOUD_PENALTY
        if location.safety_level == Level.LOW:
            score -= _UNSAFE_PENALTY
        if is_severe_weather(weather):
            score -= _WEATHER_PENALTY

        if score < ATTENTION_LOW_THRESHOLD:
            return AttentionLevel.LOW
        if score > ATTENTION_HIGH_THRESHOLD:
            return AttentionLevel.HIGH
        return AttentionLevel.MEDIUM

    def _determine_content_preference(
        self,
        attention: AttentionLevel,
        available_time: AvailableTime,
        activity: ActivityContext,
    ) -> ContentPreference:
        if attention == AttentionLevel.LOW or available_time == AvailableTime.SHORT:
            return ContentPreference.BRIEF

        if (
            activity == ActivityContext.SIGHTSEEING
            and attention == AttentionLevel.HIGH
            and available_time == AvailableTime.LONG
        ):
            return ContentPreference.IMMERSIVE

        return ContentPreference.DETAILED

    # --- Insights ---

    def _identify_primary_context(self, context: ContextualEnvironment) -> str:
        factors = [
            f"{context.movement.movement_mode.value.lower()} user",
            f"in {context.location.environment_type.value.lower()} environment",
            f"during {context.time_of_day.value.lower()}",
        ]

        weather = context.weather
        if weather is not None and weather.condition != WeatherCondition.CLEAR:
            factors.append(f"in {weather.condition.value.lower().replace('_', ' ')} weather")

        factors.append(f"engaging in {context.activity_context.value.lower()} activity")
        return ", ".join(factors)

    def _generate_content_suggestions(
        self, context: ContextualEnvironment
    ) -> list[ContentSuggestion]:
        suggestions: list[ContentSuggestion] = []

        if context.location.has_poi(PoiType.HISTORICAL):
            suggestions.append(ContentSuggestion(
                type=ContentType.HISTORICAL,
                priority=(
                    Priority.HIGH
                    if context.activity_context == ActivityContext.SIGHTSEEING
                    else Priority.MEDIUM
                ),
                reason="Historical points of interest nearby",
                time_required=10 if context.available_time == AvailableTime.LONG else 3,
                interaction_level=(
                    InteractionLevel.INTERACTIVE
                    if context.attention_level == AttentionLevel.HIGH
                    else InteractionLevel.PASSIVE
                ),
            ))

        if context.location.environment_type in OUTDOOR_ENVIRONMENTS:
            suggestions.append(ContentSuggestion(
                type=ContentType.NATURAL,
                priority=Priority.HIGH,
                reason="Natural environment detected",
                time_required=2 if context.available_time == AvailableTime.SHORT else 5,
                interaction_level=InteractionLevel.PASSIVE,
            ))

        if (
            context.activity_context == ActivityContext.LEISURE
            and context.available_time == AvailableTime.LONG
        ):
            suggestions.append(ContentSuggestion(
                type=ContentType.PERSONAL,
                priority=Priority.MEDIUM,
                reason="Leisure time detected, good for personal stories",
                time_required=8,
                interaction_level=InteractionLevel.IMMERSIVE,
            ))

        return suggestions

    def _identify_environmental_factors(self, context: ContextualEnvironment) -> list[str]:
        factors: list[str] = []

        if context.location.noise_level == NoiseLevel.LOUD:
            factors.append("High noise environment may affect audio clarity")

        if is_severe_weather(context.weather):
            factors.append("Adverse weather may reduce user attention to device")

        if context.movement.movement_mode == MovementMode.DRIVING:
            factors.append("Driving requires primary attention for safety")

        if context.time_of_day == TimeOfDay.NIGHT:
            factors.append("Low light conditions may affect visual content")

        return factors

    def _generate_adaptation_recommendations(
        self, context: ContextualEnvironment
    ) -> list[AdaptationRecommendation]:
        recommendations: list[AdaptationRecommendation] = []

        if context.location.noise_level == NoiseLevel.LOUD:
            recommendations.append(AdaptationRecommendation(
                aspect=AdaptationAspect.VOLUME,
                adjustment=Adjustment.INCREASE,
                reason="High ambient noise level detected",
                importance=0.8,
            ))

        if context.movement.movement_mode == MovementMode.DRIVING:
            recommendations.append(AdaptationRecommendation(
                aspect=AdaptationAspect.SPEED,
                adjustment=Adjustment.DECREASE,
                reason="User is driving and needs brief, clear information",
                importance=0.9,
            ))

        if context.available_time == AvailableTime.SHORT:
            recommendations.append(AdaptationRecommendation(
                aspect=AdaptationAspect.DURATION,
                adjustment=Adjustment.DECREASE,
                reason="Limited time availability detected",
                importance=0.7,
            ))

        if context.attention_level == AttentionLevel.LOW:
            recommendations.append(AdaptationRecommendation(
                aspect=AdaptationAspect.COMPLEXITY,
                adjustment=Adjustment.DECREASE,
                reason="Low attention level, prefer simple content",
                importance=0.8,
            ))

        return recommendations

    def _calculate_insight_confidence(self, context: ContextualEnvironment) -> float:
        confidence = 0.5
        confidence += context.movement.confidence * 0.3

        location = context.location
        if location.nearby_pois and not location.is_fallback:
            confidence += 0.1

        if context.weather is not None and not context.weather.is_fallback:
            confidence += 0.1

        if self._activity.is_consistent(context.activity_context):
            confidence += 0.1

        return max(0.0, min(1.0, confidence))


def create_context_analyzer(
    weather_resolver: WeatherResolver,
    location_resolver: LocationContextResolver,
    history_size: int = 10,
    clock: Clock = local_now,
) -> ContextAnalyzer:
    """Create a ContextAnalyzer with a fresh activity history."""
    return ContextAnalyzer(
        weather_resolver=weather_resolver,
        location_resolver=location_resolver,
        activity_inferrer=ActivityInferrer(history_size),
        clock=clock,
    )
