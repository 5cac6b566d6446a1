"""Weather resolution - cached lookups through a weather provider.

Provides:
- WeatherResolver: ~1 km bucket cache in front of any IWeatherProvider
- SimulatedWeatherProvider: deterministic-per-seed readings for development
- OpenMeteoWeatherProvider: live readings from the Open-Meteo API
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any

import httpx

from echotrail.modules.context.cache import TimedCache
from echotrail.modules.context.classifier import condition_from_wmo_code, determine_season
from echotrail.modules.context.interface import GeoSample, IWeatherProvider, WeatherData
from echotrail.shared.constants import WEATHER_CACHE_PRECISION
from echotrail.shared.datetime_utils import Clock, local_now
from echotrail.shared.exceptions import WeatherProviderError
from echotrail.shared.geo import bucket_key
from echotrail.shared.models import Season, WeatherCondition

logger = logging.getLogger(__name__)


def fallback_weather(now: datetime) -> WeatherData:
    """Neutral reading used when no real weather is available."""
    return WeatherData(
        condition=WeatherCondition.CLEAR,
        temperature=15.0,
        humidity=60.0,
        wind_speed=5.0,
        visibility=10.0,
        pressure=1013.0,
        uv_index=0.0,
        last_updated=now,
        is_fallback=True,
    )


class SimulatedWeatherProvider(IWeatherProvider):
    """Plausible weather derived from season and hour.

    Used in development and tests, where no weather API is reachable.
    """

    def __init__(self, rng: random.Random | None = None, clock: Clock = local_now) -> None:
        self._rng = rng or random.Random()
        self._clock = clock

    async def get_weather(self, latitude: float, longitude: float) -> WeatherData:
        now = self._clock()
        hour = now.hour
        season = determine_season(now)

        temperature = 15.0
        if season == Season.SUMMER:
            temperature += 10
        if season == Season.WINTER:
            temperature -= 10
        if hour < 6 or hour > 20:
            temperature -= 5

        daylight = 6 <= hour <= 18
        return WeatherData(
            condition=WeatherCondition.CLEAR if daylight else WeatherCondition.PARTLY_CLOUDY,
            temperature=temperature,
            humidity=60 + self._rng.random() * 20,
            wind_speed=5 + self._rng.random() * 10,
            visibility=8 + self._rng.random() * 2,
            pressure=1013 + (self._rng.random() - 0.5) * 40,
            uv_index=round(3 + self._rng.random() * 5) if 10 <= hour <= 16 else 0,
            last_updated=now,
        )


class OpenMeteoWeatherProvider(IWeatherProvider):
    """Adapter for current conditions from the Open-Meteo forecast API.

    No API key is required. Wind speed is returned in km/h and visibility
    in meters, which is converted to kilometers.
    """

    CURRENT_FIELDS = (
        "temperature_2m",
        "relative_humidity_2m",
        "weather_code",
        "surface_pressure",
        "wind_speed_10m",
        "uv_index",
        "visibility",
    )

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1/forecast",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = local_now,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._clock = clock

    async def get_weather(self, latitude: float, longitude: float) -> WeatherData:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(self.CURRENT_FIELDS),
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self._base_url,
                    params=params,
                    timeout=self._timeout,
                )
                response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise WeatherProviderError(f"Open-Meteo request failed: {e}") from e
        except ValueError as e:
            raise WeatherProviderError(f"Open-Meteo returned invalid JSON: {e}") from e

        return self._parse_current(payload)

    def _parse_current(self, payload: dict[str, Any]) -> WeatherData:
        """Convert the `current` block of a forecast response."""
        current = payload.get("current")
        if not isinstance(current, dict) or "weather_code" not in current:
            raise WeatherProviderError("Open-Meteo response has no current conditions")

        try:
            return WeatherData(
                condition=condition_from_wmo_code(int(current["weather_code"])),
                temperature=float(current.get("temperature_2m", 15.0)),
                humidity=float(current.get("relative_humidity_2m", 60.0)),
                wind_speed=float(current.get("wind_speed_10m", 0.0)),
                visibility=float(current.get("visibility", 10000.0)) / 1000,
                pressure=float(current.get("surface_pressure", 1013.0)),
                uv_index=float(current.get("uv_index", 0.0)),
                last_updated=self._clock(),
            )
        except (TypeError, ValueError) as e:
            raise WeatherProviderError(f"Malformed Open-Meteo value: {e}") from e


class WeatherResolver:
    """Resolves weather for a location through a bucketed cache.

    Readings are cached per ~1 km bucket and reused until they are older
    than the TTL. Provider failures produce a fallback reading, which is
    never cached.
    """

    def __init__(
        self,
        provider: IWeatherProvider,
        ttl: timedelta = timedelta(minutes=30),
        capacity: int = 256,
        clock: Clock = local_now,
    ) -> None:
        self._provider = provider
        self._cache: TimedCache[WeatherData] = TimedCache(ttl, capacity)
        self._clock = clock

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def resolve(self, sample: GeoSample) -> WeatherData:
        """Get weather for a location, using the cache when fresh.

        Args:
            sample: Location to resolve weather for

        Returns:
            Cached or fetched reading, or a fallback when the provider fails
        """
        key = bucket_key(sample.latitude, sample.longitude, WEATHER_CACHE_PRECISION)
        now = self._clock()

        cached = self._cache.get(key, now)
        if cached is not None:
            logger.debug(f"Weather cache hit: {key}")
            return cached

        try:
            reading = await self._provider.get_weather(sample.latitude, sample.longitude)
        except Exception as e:
            logger.warning(f"Weather lookup failed for {key}, using fallback: {e}")
            return fallback_weather(now)

        self._cache.set(key, reading, now)
        return reading

    def clear(self) -> None:
        self._cache.clear()
