"""Location Context Resolver - Surroundings of a coordinate.

Derives environment type, elevation, nearby points of interest, population
density, noise level and safety level, cached per ~100 m bucket.
"""

import logging
import random
from dataclasses import dataclass
from datetime import timedelta

from echotrail.modules.context.cache import TimedCache
from echotrail.modules.context.classifier import (
    DEFAULT_REGIONS,
    EnvironmentRegion,
    assess_safety_level,
    classify_environment_type,
    estimate_noise_level,
    estimate_population_density,
)
from echotrail.modules.context.interface import (
    GeoSample,
    IPoiProvider,
    LocationContext,
    PointOfInterest,
)
from echotrail.shared.constants import LOCATION_CACHE_PRECISION
from echotrail.shared.datetime_utils import Clock, local_now
from echotrail.shared.geo import bucket_key, haversine_distance
from echotrail.shared.models import EnvironmentType, PoiType

logger = logging.getLogger(__name__)


class SimulatedPoiProvider(IPoiProvider):
    """Randomly surfaces a historic site and a park area.

    Stands in for a POI database during development. Seed the random
    source for repeatable results.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def find_nearby(self, sample: GeoSample) -> list[PointOfInterest]:
        rng = self._rng
        candidates = [
            PointOfInterest(
                type=PoiType.HISTORICAL,
                name="Historic Site",
                distance=150 + rng.random() * 300,
                relevance=0.7 + rng.random() * 0.3,
                description="A place of historical significance",
            ),
            PointOfInterest(
                type=PoiType.NATURAL,
                name="Park Area",
                distance=80 + rng.random() * 200,
                relevance=0.6 + rng.random() * 0.4,
                description="Natural area with scenic views",
            ),
        ]
        nearby = [poi for poi in candidates if rng.random() > 0.5]
        return sorted(nearby, key=lambda poi: poi.distance)


@dataclass(frozen=True)
class CatalogEntry:
    """A known point of interest with fixed coordinates."""

    type: PoiType
    name: str
    latitude: float
    longitude: float
    relevance: float = 0.5
    description: str | None = None


class CatalogPoiProvider(IPoiProvider):
    """Looks up points of interest from a fixed catalog.

    Returns every entry within `radius_m` of the sample, nearest first.
    """

    def __init__(self, entries: list[CatalogEntry], radius_m: float = 500.0) -> None:
        self._entries = list(entries)
        self._radius_m = radius_m

    async def find_nearby(self, sample: GeoSample) -> list[PointOfInterest]:
        nearby: list[PointOfInterest] = []
        for entry in self._entries:
            distance = haversine_distance(
                sample.latitude, sample.longitude, entry.latitude, entry.longitude
            )
            if distance <= self._radius_m:
                nearby.append(PointOfInterest(
                    type=entry.type,
                    name=entry.name,
                    distance=distance,
                    relevance=entry.relevance,
                    description=entry.description,
                ))
        return sorted(nearby, key=lambda poi: poi.distance)


def build_location_context(
    sample: GeoSample | None,
    pois: list[PointOfInterest],
    regions: tuple[EnvironmentRegion, ...] = DEFAULT_REGIONS,
    is_fallback: bool = False,
) -> LocationContext:
    """Assemble a LocationContext from a sample and its POIs.

    Without a sample the surroundings are assumed suburban.
    """
    if sample is None:
        environment = EnvironmentType.SUBURBAN
        elevation = 0.0
    else:
        environment = classify_environment_type(
            sample.latitude, sample.longitude, sample.altitude, regions
        )
        elevation = sample.altitude or 0.0

    density = estimate_population_density(environment)
    return LocationContext(
        environment_type=environment,
        elevation=elevation,
        nearby_pois=tuple(pois),
        population_density=density,
        noise_level=estimate_noise_level(environment, density),
        safety_level=assess_safety_level(environment, density),
        is_fallback=is_fallback,
    )


class LocationContextResolver:
    """Resolves LocationContext for a sample with a ~100 m bucket cache.

    The cache TTL is independent from the weather cache. A failed POI lookup
    yields a fallback context without POIs, which is not cached.
    """

    def __init__(
        self,
        poi_provider: IPoiProvider,
        ttl: timedelta = timedelta(minutes=60),
        capacity: int = 256,
        clock: Clock = local_now,
        regions: tuple[EnvironmentRegion, ...] = DEFAULT_REGIONS,
    ) -> None:
        self._poi_provider = poi_provider
        self._cache: TimedCache[LocationContext] = TimedCache(ttl, capacity)
        self._clock = clock
        self._regions = regions

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def resolve(self, sample: GeoSample) -> LocationContext:
        """Get the location context for a sample.

        Args:
            sample: Location fix to resolve

        Returns:
            Cached or freshly built LocationContext
        """
        key = bucket_key(sample.latitude, sample.longitude, LOCATION_CACHE_PRECISION)
        now = self._clock()

        cached = self._cache.get(key, now)
        if cached is not None:
            logger.debug(f"Location cache hit: {key}")
            return cached

        try:
            pois = await self._poi_provider.find_nearby(sample)
        except Exception as e:
            logger.warning(f"POI lookup failed for {key}, using fallback: {e}")
            return build_location_context(sample, [], self._regions, is_fallback=True)

        context = build_location_context(sample, pois, self._regions)
        self._cache.set(key, context, now)
        return context

    def clear(self) -> None:
        self._cache.clear()
