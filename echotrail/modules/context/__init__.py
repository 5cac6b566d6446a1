"""Context Module - Situational analysis from location, movement, time and weather.

Usage:
    from echotrail.shared.service_registry import create_service_registry

    registry = create_service_registry()
    analyzer = registry.get_context_analyzer()
    context = await analyzer.analyze_context(sample, movement)
    insights = analyzer.generate_insights(context)
"""

from echotrail.modules.context.activity import ActivityInferrer
from echotrail.modules.context.interface import (
    AdaptationRecommendation,
    ContentSuggestion,
    ContextualEnvironment,
    ContextualInsights,
    GeoSample,
    IContextAnalyzer,
    ILocationProvider,
    IMotionProvider,
    IPoiProvider,
    IWeatherProvider,
    LocationContext,
    MovementAnalysis,
    PointOfInterest,
    WeatherData,
)
from echotrail.modules.context.location import (
    CatalogEntry,
    CatalogPoiProvider,
    LocationContextResolver,
    SimulatedPoiProvider,
)
from echotrail.modules.context.service import ContextAnalyzer, create_context_analyzer
from echotrail.modules.context.weather import (
    OpenMeteoWeatherProvider,
    SimulatedWeatherProvider,
    WeatherResolver,
)

__all__ = [
    # Interface types
    "AdaptationRecommendation",
    "ContentSuggestion",
    "ContextualEnvironment",
    "ContextualInsights",
    "GeoSample",
    "LocationContext",
    "MovementAnalysis",
    "PointOfInterest",
    "WeatherData",
    # Collaborator protocols
    "IContextAnalyzer",
    "ILocationProvider",
    "IMotionProvider",
    "IPoiProvider",
    "IWeatherProvider",
    # Implementations
    "ActivityInferrer",
    "CatalogEntry",
    "CatalogPoiProvider",
    "ContextAnalyzer",
    "LocationContextResolver",
    "OpenMeteoWeatherProvider",
    "SimulatedPoiProvider",
    "SimulatedWeatherProvider",
    "WeatherResolver",
    # Factory
    "create_context_analyzer",
]
