"""Service registry for dependency injection.

This module is the composition root: it builds the context analyzer and
the adaptive content engine from settings, picking collaborator
implementations based on feature flags.

Usage:
    from echotrail.shared.service_registry import create_service_registry

    registry = create_service_registry()
    analyzer = registry.get_context_analyzer()
    engine = registry.get_content_engine()

The registry:
- Uses Open-Meteo for weather when FF_USE_LIVE_WEATHER=true, else simulated weather
- Creates services lazily and reuses them for its own lifetime
- Is not a singleton, so tests can build isolated instances
- Logs service creation for debugging
"""

from datetime import timedelta
import logging
import random
from typing import TYPE_CHECKING

from echotrail.shared.config import Settings, get_settings
from echotrail.shared.datetime_utils import Clock, local_now
from echotrail.shared.feature_flags import FeatureFlags, get_feature_flags

if TYPE_CHECKING:
    from echotrail.modules.adaptation.service import AdaptiveContentEngine
    from echotrail.modules.context.interface import IPoiProvider, IWeatherProvider
    from echotrail.modules.context.service import ContextAnalyzer
    from echotrail.modules.library.interface import IStoryLibrary

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Builds and holds the core services for one application instance.

    Collaborators passed to the constructor take precedence over the ones
    the registry would create itself.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        weather_provider: "IWeatherProvider | None" = None,
        poi_provider: "IPoiProvider | None" = None,
        library: "IStoryLibrary | None" = None,
        rng: random.Random | None = None,
        clock: Clock = local_now,
    ) -> None:
        self.settings = settings or get_settings()
        self._flags = get_feature_flags()
        self._rng = rng or random.Random(self.settings.random_seed)
        self._clock = clock
        self._weather_provider = weather_provider
        self._poi_provider = poi_provider
        self._library = library
        self._context_analyzer: "ContextAnalyzer | None" = None
        self._content_engine: "AdaptiveContentEngine | None" = None
        logger.info("ServiceRegistry initialized")

    def get_story_library(self) -> "IStoryLibrary":
        """Get the story library, creating an empty in-memory one if none was given."""
        if self._library is None:
            from echotrail.modules.library.service import InMemoryStoryLibrary

            logger.info("Creating InMemoryStoryLibrary")
            self._library = InMemoryStoryLibrary()
        return self._library

    def get_context_analyzer(self) -> "ContextAnalyzer":
        """Get the context analyzer instance."""
        if self._context_analyzer is None:
            self._context_analyzer = self._create_context_analyzer()
        return self._context_analyzer

    def get_content_engine(self) -> "AdaptiveContentEngine":
        """Get the adaptive content engine instance."""
        if self._content_engine is None:
            self._content_engine = self._create_content_engine()
        return self._content_engine

    def _create_weather_provider(self) -> "IWeatherProvider":
        """Create weather provider based on feature flags."""
        if self._weather_provider is not None:
            return self._weather_provider

        if self._flags.is_enabled(FeatureFlags.USE_LIVE_WEATHER):
            from echotrail.modules.context.weather import OpenMeteoWeatherProvider

            logger.info("Creating OpenMeteoWeatherProvider")
            return OpenMeteoWeatherProvider(
                base_url=self.settings.open_meteo_url,
                timeout=self.settings.weather_request_timeout,
                clock=self._clock,
            )

        from echotrail.modules.context.weather import SimulatedWeatherProvider

        logger.info("Creating SimulatedWeatherProvider")
        return SimulatedWeatherProvider(rng=self._rng, clock=self._clock)

    def _create_poi_provider(self) -> "IPoiProvider":
        if self._poi_provider is not None:
            return self._poi_provider

        from echotrail.modules.context.location import SimulatedPoiProvider

        logger.info("Creating SimulatedPoiProvider")
        return SimulatedPoiProvider(rng=self._rng)

    def _create_context_analyzer(self) -> "ContextAnalyzer":
        from echotrail.modules.context.location import LocationContextResolver
        from echotrail.modules.context.service import create_context_analyzer
        from echotrail.modules.context.weather import WeatherResolver

        settings = self.settings
        weather = WeatherResolver(
            self._create_weather_provider(),
            ttl=timedelta(minutes=settings.weather_cache_ttl_minutes),
            capacity=settings.context_cache_size,
            clock=self._clock,
        )
        location = LocationContextResolver(
            self._create_poi_provider(),
            ttl=timedelta(minutes=settings.location_cache_ttl_minutes),
            capacity=settings.context_cache_size,
            clock=self._clock,
        )

        logger.info("Creating ContextAnalyzer")
        return create_context_analyzer(
            weather,
            location,
            history_size=settings.activity_history_size,
            clock=self._clock,
        )

    def _create_content_engine(self) -> "AdaptiveContentEngine":
        from echotrail.modules.adaptation.service import create_adaptive_content_engine
        from echotrail.modules.adaptation.transformer import ContentTransformer

        settings = self.settings
        transformer = ContentTransformer(
            words_per_minute=settings.words_per_minute,
            confidence_base=settings.confidence_base,
            confidence_weights=settings.confidence_weights,
            rng=self._rng,
            ambient_cues_enabled=lambda: self._flags.is_enabled(
                FeatureFlags.ENABLE_AMBIENT_SOUND_CUES
            ),
        )

        logger.info("Creating AdaptiveContentEngine")
        return create_adaptive_content_engine(
            self.get_story_library(),
            transformer=transformer,
            cache_size=settings.adaptation_cache_size,
            success_threshold=settings.success_confidence_threshold,
        )

    def clear_cache(self) -> None:
        """Drop service instances so they are rebuilt with current flags."""
        self._context_analyzer = None
        self._content_engine = None
        logger.info("ServiceRegistry cache cleared")

    def get_service_info(self) -> dict[str, str]:
        """Get the implementation type of each instantiated service."""
        info = {}
        if self._library is not None:
            info["library"] = type(self._library).__name__
        if self._context_analyzer is not None:
            info["context"] = type(self._context_analyzer).__name__
        if self._content_engine is not None:
            info["adaptation"] = type(self._content_engine).__name__
        return info

    def __repr__(self) -> str:
        live = self._flags.is_enabled(FeatureFlags.USE_LIVE_WEATHER)
        return f"ServiceRegistry(live_weather={live}, services={self.get_service_info()})"


def create_service_registry(
    settings: Settings | None = None,
    library: "IStoryLibrary | None" = None,
) -> ServiceRegistry:
    """Create a registry from settings, seeding the random source if configured."""
    return ServiceRegistry(settings=settings, library=library)
