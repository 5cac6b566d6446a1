"""Base models and common types used across modules."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


# Situational enums


class TimeOfDay(str, Enum):
    """Coarse local time bands."""

    DAWN = "DAWN"
    MORNING = "MORNING"
    MIDDAY = "MIDDAY"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


class Season(str, Enum):
    """Northern hemisphere seasons."""

    SPRING = "SPRING"
    SUMMER = "SUMMER"
    AUTUMN = "AUTUMN"
    WINTER = "WINTER"


class WeatherCondition(str, Enum):
    """Categorical weather."""

    CLEAR = "CLEAR"
    PARTLY_CLOUDY = "PARTLY_CLOUDY"
    CLOUDY = "CLOUDY"
    RAINY = "RAINY"
    STORMY = "STORMY"
    FOGGY = "FOGGY"
    SNOWY = "SNOWY"


class EnvironmentType(str, Enum):
    """Kind of surroundings at a coordinate."""

    URBAN = "URBAN"
    SUBURBAN = "SUBURBAN"
    RURAL = "RURAL"
    FOREST = "FOREST"
    COASTAL = "COASTAL"
    MOUNTAIN = "MOUNTAIN"
    PARK = "PARK"


class PoiType(str, Enum):
    """Point of interest categories."""

    HISTORICAL = "HISTORICAL"
    NATURAL = "NATURAL"
    CULTURAL = "CULTURAL"
    COMMERCIAL = "COMMERCIAL"
    TRANSPORT = "TRANSPORT"
    RECREATIONAL = "RECREATIONAL"


class Level(str, Enum):
    """Three-step scale shared by population density and safety."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AttentionLevel(str, Enum):
    """How much attention the user can give to content."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class NoiseLevel(str, Enum):
    """Ambient noise."""

    QUIET = "QUIET"
    MODERATE = "MODERATE"
    LOUD = "LOUD"


class MovementMode(str, Enum):
    """Movement classification supplied by the motion provider."""

    STATIONARY = "STATIONARY"
    WALKING = "WALKING"
    CYCLING = "CYCLING"
    DRIVING = "DRIVING"


class SpeedTrend(str, Enum):
    """Direction of recent speed change."""

    ACCELERATING = "ACCELERATING"
    DECELERATING = "DECELERATING"
    STABLE = "STABLE"


class ActivityContext(str, Enum):
    """What the user is most likely doing."""

    COMMUTING = "COMMUTING"
    LEISURE = "LEISURE"
    EXERCISE = "EXERCISE"
    SIGHTSEEING = "SIGHTSEEING"
    SHOPPING = "SHOPPING"
    WORK = "WORK"
    UNKNOWN = "UNKNOWN"


class AvailableTime(str, Enum):
    """Estimated time the user can spend on a story."""

    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"


class ContentPreference(str, Enum):
    """Depth of content the situation calls for."""

    BRIEF = "BRIEF"
    DETAILED = "DETAILED"
    IMMERSIVE = "IMMERSIVE"


# Insight enums


class InteractionLevel(str, Enum):
    """How much a suggested story asks of the user."""

    PASSIVE = "PASSIVE"
    INTERACTIVE = "INTERACTIVE"
    IMMERSIVE = "IMMERSIVE"


class AdaptationAspect(str, Enum):
    """Delivery aspect an adaptation recommendation targets."""

    VOLUME = "VOLUME"
    SPEED = "SPEED"
    COMPLEXITY = "COMPLEXITY"
    DURATION = "DURATION"
    INTERACTION = "INTERACTION"


class Adjustment(str, Enum):
    """Direction of an adaptation recommendation."""

    INCREASE = "INCREASE"
    DECREASE = "DECREASE"
    MAINTAIN = "MAINTAIN"


# Content enums


class ContentType(str, Enum):
    """Story categories."""

    HISTORICAL = "HISTORICAL"
    NATURAL = "NATURAL"
    CULTURAL = "CULTURAL"
    PERSONAL = "PERSONAL"
    INFORMATIONAL = "INFORMATIONAL"


class Difficulty(str, Enum):
    """Reading difficulty of a story."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class EmotionalTone(str, Enum):
    """Dominant tone of a story."""

    NEUTRAL = "NEUTRAL"
    INSPIRING = "INSPIRING"
    MYSTERIOUS = "MYSTERIOUS"
    DRAMATIC = "DRAMATIC"
    PEACEFUL = "PEACEFUL"


class ContentFormat(str, Enum):
    """Delivery format of adapted content."""

    AUDIO = "AUDIO"
    TEXT = "TEXT"
    VISUAL = "VISUAL"
    INTERACTIVE = "INTERACTIVE"


class ContentLength(str, Enum):
    """Length category of adapted content."""

    MICRO = "MICRO"
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"
    EXTENDED = "EXTENDED"


class ContentComplexity(str, Enum):
    """Complexity category of adapted content."""

    SIMPLE = "SIMPLE"
    MODERATE = "MODERATE"
    COMPLEX = "COMPLEX"
    EXPERT = "EXPERT"


class InteractionType(str, Enum):
    """Kinds of interaction points."""

    QUESTION = "QUESTION"
    CHOICE = "CHOICE"
    PAUSE = "PAUSE"
    REFLECTION = "REFLECTION"
    ACTION = "ACTION"


class InteractionFrequency(str, Enum):
    """How often a user wants to be prompted."""

    MINIMAL = "MINIMAL"
    MODERATE = "MODERATE"
    FREQUENT = "FREQUENT"


class DeliveryTiming(str, Enum):
    """When a recommended story should be delivered."""

    IMMEDIATE = "IMMEDIATE"
    QUEUED = "QUEUED"
    SCHEDULED = "SCHEDULED"
    OPPORTUNISTIC = "OPPORTUNISTIC"


class Priority(str, Enum):
    """Recommendation priority."""

    URGENT = "URGENT"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort rank, higher is more important."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}
