"""Context Module - Situational signals and the structures derived from them."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

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
    Level,
    MovementMode,
    NoiseLevel,
    PoiType,
    Priority,
    Season,
    SpeedTrend,
    TimeOfDay,
    WeatherCondition,
)


@dataclass(frozen=True)
class GeoSample:
    """A single location fix from the location provider."""

    latitude: float
    longitude: float
    altitude: float | None = None


@dataclass(frozen=True)
class MovementAnalysis:
    """Movement summary supplied by the motion/speed provider."""

    movement_mode: MovementMode
    average_speed: float = 0.0  # km/h over recent readings
    trend: SpeedTrend = SpeedTrend.STABLE
    confidence: float = 0.5  # 0-1
    stationary_duration: float = 0.0  # minutes at current location
    current_speed: float = 0.0  # km/h


@dataclass(frozen=True)
class WeatherData:
    """A weather reading for a coordinate."""

    condition: WeatherCondition
    temperature: float  # Celsius
    humidity: float  # 0-100
    wind_speed: float  # km/h
    visibility: float  # km
    pressure: float  # hPa
    uv_index: float
    last_updated: datetime
    is_fallback: bool = False  # default substituted for a missing reading


@dataclass(frozen=True)
class PointOfInterest:
    """A nearby place that stories can relate to."""

    type: PoiType
    name: str
    distance: float  # meters
    relevance: float  # 0-1
    description: str | None = None


@dataclass(frozen=True)
class LocationContext:
    """What surrounds a coordinate."""

    environment_type: EnvironmentType
    elevation: float  # meters above sea level
    nearby_pois: tuple[PointOfInterest, ...] = ()
    population_density: Level = Level.MEDIUM
    noise_level: NoiseLevel = NoiseLevel.MODERATE
    safety_level: Level = Level.HIGH
    is_fallback: bool = False

    def has_poi(self, *types: PoiType) -> bool:
        """Check whether any nearby POI has one of the given types."""
        return any(poi.type in types for poi in self.nearby_pois)


@dataclass(frozen=True)
class ContextualEnvironment:
    """Complete situational snapshot, rebuilt on every analysis call."""

    time_of_day: TimeOfDay
    season: Season
    weather: WeatherData | None
    location: LocationContext
    movement: MovementAnalysis
    activity_context: ActivityContext
    available_time: AvailableTime
    attention_level: AttentionLevel
    content_preference: ContentPreference
    position: GeoSample | None = None


@dataclass(frozen=True)
class ContentSuggestion:
    """A kind of story worth offering in the current context."""

    type: ContentType
    priority: Priority
    reason: str
    time_required: int  # minutes
    interaction_level: InteractionLevel


@dataclass(frozen=True)
class AdaptationRecommendation:
    """A delivery adjustment the situation calls for."""

    aspect: AdaptationAspect
    adjustment: Adjustment
    reason: str
    importance: float  # 0-1


@dataclass
class ContextualInsights:
    """Actionable interpretation of a ContextualEnvironment."""

    primary_context: str
    content_suggestions: list[ContentSuggestion] = field(default_factory=list)
    environmental_factors: list[str] = field(default_factory=list)
    adaptation_recommendations: list[AdaptationRecommendation] = field(default_factory=list)
    confidence: float = 0.5  # 0-1


class ILocationProvider(Protocol):
    """Supplies location samples from the device."""

    async def get_current_sample(self) -> GeoSample:
        """Get the latest location fix.

        Raises:
            LocationProviderError: If no fix is available
        """
        ...


class IMotionProvider(Protocol):
    """Supplies movement analysis from the speed/motion detector."""

    async def get_movement_analysis(self) -> MovementAnalysis:
        """Get the current movement classification."""
        ...


class IWeatherProvider(Protocol):
    """Supplies weather readings for a coordinate."""

    async def get_weather(self, latitude: float, longitude: float) -> WeatherData:
        """Fetch a weather reading.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            Current weather at the coordinate

        Raises:
            WeatherProviderError: If the reading cannot be obtained
        """
        ...


class IPoiProvider(Protocol):
    """Supplies points of interest near a coordinate."""

    async def find_nearby(self, sample: GeoSample) -> list[PointOfInterest]:
        """Find points of interest near a location, nearest first.

        Raises:
            PoiProviderError: If the lookup fails
        """
        ...


class IContextAnalyzer(Protocol):
    """Interface for the context analyzer.

    Fuses raw signals into a ContextualEnvironment and derives insights.
    """

    async def analyze_context(
        self,
        location: GeoSample,
        movement: MovementAnalysis,
        weather: WeatherData | None = None,
    ) -> ContextualEnvironment:
        """Build a situational snapshot.

        Args:
            location: Current location fix
            movement: Movement analysis from the motion provider
            weather: Already-fetched weather, skips the weather lookup

        Returns:
            ContextualEnvironment for this instant
        """
        ...

    def generate_insights(self, context: ContextualEnvironment) -> ContextualInsights:
        """Derive suggestions, risk factors and recommendations.

        Args:
            context: Snapshot from analyze_context

        Returns:
            ContextualInsights with a confidence in [0, 1]
        """
        ...
