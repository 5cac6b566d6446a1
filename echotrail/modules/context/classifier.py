"""Environment Classifier - Pure mappings from raw samples to categories.

Every function here is deterministic and side-effect free so the rule
tables can be tested in isolation from caches and providers.
"""

from dataclasses import dataclass
from datetime import datetime

from echotrail.modules.context.interface import WeatherData
from echotrail.shared.constants import COASTAL_MIN_LATITUDE, MOUNTAIN_MIN_ALTITUDE_M
from echotrail.shared.models import (
    EnvironmentType,
    Level,
    NoiseLevel,
    Season,
    TimeOfDay,
    WeatherCondition,
)


@dataclass(frozen=True)
class EnvironmentRegion:
    """A coordinate box with a known environment type."""

    name: str
    environment_type: EnvironmentType
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


# Checked in order, first match wins
DEFAULT_REGIONS: tuple[EnvironmentRegion, ...] = (
    EnvironmentRegion("Frognerparken", EnvironmentType.PARK, 59.922, 59.932, 10.692, 10.712),
    EnvironmentRegion("Oslo", EnvironmentType.URBAN, 59.8, 60.0, 10.6, 10.9),
    EnvironmentRegion("Nordmarka", EnvironmentType.FOREST, 60.0, 60.2, 10.55, 10.85),
)

# (start hour inclusive, end hour exclusive, band); anything else is NIGHT
_TIME_BANDS: tuple[tuple[int, int, TimeOfDay], ...] = (
    (5, 7, TimeOfDay.DAWN),
    (7, 11, TimeOfDay.MORNING),
    (11, 14, TimeOfDay.MIDDAY),
    (14, 18, TimeOfDay.AFTERNOON),
    (18, 21, TimeOfDay.EVENING),
)

_SEASON_BY_MONTH: dict[int, Season] = {
    3: Season.SPRING, 4: Season.SPRING, 5: Season.SPRING,
    6: Season.SUMMER, 7: Season.SUMMER, 8: Season.SUMMER,
    9: Season.AUTUMN, 10: Season.AUTUMN, 11: Season.AUTUMN,
    12: Season.WINTER, 1: Season.WINTER, 2: Season.WINTER,
}

DAYTIME = frozenset({TimeOfDay.MORNING, TimeOfDay.MIDDAY, TimeOfDay.AFTERNOON})
OUTDOOR_ENVIRONMENTS = frozenset({
    EnvironmentType.FOREST,
    EnvironmentType.COASTAL,
    EnvironmentType.MOUNTAIN,
    EnvironmentType.PARK,
})
SEVERE_WEATHER = frozenset({WeatherCondition.RAINY, WeatherCondition.STORMY})


def determine_time_of_day(moment: datetime) -> TimeOfDay:
    """Map a wall-clock time to a time-of-day band."""
    hour = moment.hour
    for start, end, band in _TIME_BANDS:
        if start <= hour < end:
            return band
    return TimeOfDay.NIGHT


def determine_season(moment: datetime) -> Season:
    """Map a date to its northern hemisphere season."""
    return _SEASON_BY_MONTH[moment.month]


def classify_environment_type(
    latitude: float,
    longitude: float,
    altitude: float | None = None,
    regions: tuple[EnvironmentRegion, ...] = DEFAULT_REGIONS,
) -> EnvironmentType:
    """Classify the surroundings of a coordinate.

    Known regions win, then the simplified coastline and altitude rules.
    Everything else is treated as suburban.
    """
    for region in regions:
        if region.contains(latitude, longitude):
            return region.environment_type

    if latitude > COASTAL_MIN_LATITUDE:
        return EnvironmentType.COASTAL

    if (altitude or 0) > MOUNTAIN_MIN_ALTITUDE_M:
        return EnvironmentType.MOUNTAIN

    return EnvironmentType.SUBURBAN


def estimate_population_density(environment: EnvironmentType) -> Level:
    """Estimate population density from the environment type."""
    if environment == EnvironmentType.URBAN:
        return Level.HIGH
    if environment in (EnvironmentType.SUBURBAN, EnvironmentType.PARK):
        return Level.MEDIUM
    return Level.LOW


def estimate_noise_level(environment: EnvironmentType, density: Level) -> NoiseLevel:
    """Estimate ambient noise."""
    if environment == EnvironmentType.URBAN and density == Level.HIGH:
        return NoiseLevel.LOUD
    if environment in (EnvironmentType.FOREST, EnvironmentType.MOUNTAIN):
        return NoiseLevel.QUIET
    return NoiseLevel.MODERATE


def assess_safety_level(environment: EnvironmentType, density: Level) -> Level:
    """Assess how safe it is to engage with a device here."""
    if environment in (EnvironmentType.PARK, EnvironmentType.SUBURBAN):
        return Level.HIGH
    if environment == EnvironmentType.URBAN and density == Level.HIGH:
        return Level.MEDIUM
    if environment in (EnvironmentType.FOREST, EnvironmentType.MOUNTAIN):
        return Level.MEDIUM
    return Level.HIGH


def is_severe_weather(weather: WeatherData | None) -> bool:
    """Check whether weather is bad enough to pull attention away."""
    return weather is not None and weather.condition in SEVERE_WEATHER


def condition_from_wmo_code(code: int) -> WeatherCondition:
    """Map a WMO weather interpretation code to a condition.

    See https://open-meteo.com/en/docs for the code table.
    """
    if code == 0:
        return WeatherCondition.CLEAR
    if code in (1, 2):
        return WeatherCondition.PARTLY_CLOUDY
    if code == 3:
        return WeatherCondition.CLOUDY
    if code in (45, 48):
        return WeatherCondition.FOGGY
    if 71 <= code <= 77 or code in (85, 86):
        return WeatherCondition.SNOWY
    if code >= 95:
        return WeatherCondition.STORMY
    if 51 <= code <= 67 or 80 <= code <= 82:
        return WeatherCondition.RAINY
    return WeatherCondition.CLOUDY
