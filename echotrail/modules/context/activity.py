"""Activity Inferrer - What the user is most likely doing."""

from collections import deque

from echotrail.modules.context.classifier import DAYTIME
from echotrail.modules.context.interface import LocationContext, MovementAnalysis
from echotrail.shared.constants import (
    ACTIVITY_CONSISTENCY_WINDOW,
    SHOPPING_MIN_STATIONARY_MINUTES,
    SIGHTSEEING_MAX_SPEED_KMH,
    WORK_MIN_STATIONARY_MINUTES,
)
from echotrail.shared.models import (
    ActivityContext,
    EnvironmentType,
    MovementMode,
    PoiType,
    SpeedTrend,
    TimeOfDay,
)


class ActivityInferrer:
    """Infers an activity label and keeps a short rolling history.

    Rules are evaluated in a fixed order and the first match wins:
    COMMUTING, EXERCISE, SIGHTSEEING, SHOPPING, WORK, then LEISURE.
    """

    def __init__(self, history_size: int = 10) -> None:
        self._history: deque[ActivityContext] = deque(maxlen=history_size)

    @property
    def history(self) -> list[ActivityContext]:
        """Recorded activities, oldest first."""
        return list(self._history)

    def infer(
        self,
        movement: MovementAnalysis,
        location: LocationContext,
        time_of_day: TimeOfDay,
    ) -> ActivityContext:
        """Classify the current activity.

        Args:
            movement: Movement analysis
            location: Resolved location context
            time_of_day: Current time band

        Returns:
            The first matching ActivityContext
        """
        mode = movement.movement_mode
        environment = location.environment_type

        if (
            time_of_day in (TimeOfDay.MORNING, TimeOfDay.EVENING)
            and mode in (MovementMode.DRIVING, MovementMode.CYCLING)
            and environment == EnvironmentType.URBAN
        ):
            return ActivityContext.COMMUTING

        if mode == MovementMode.CYCLING and environment == EnvironmentType.PARK:
            return ActivityContext.EXERCISE

        if (
            mode == MovementMode.WALKING
            and movement.trend in (SpeedTrend.STABLE, SpeedTrend.ACCELERATING)
            and environment in (EnvironmentType.PARK, EnvironmentType.FOREST)
        ):
            return ActivityContext.EXERCISE

        if (
            mode == MovementMode.WALKING
            and movement.average_speed < SIGHTSEEING_MAX_SPEED_KMH
            and location.has_poi(PoiType.HISTORICAL, PoiType.CULTURAL)
        ):
            return ActivityContext.SIGHTSEEING

        if (
            mode == MovementMode.WALKING
            and environment == EnvironmentType.URBAN
            and movement.stationary_duration > SHOPPING_MIN_STATIONARY_MINUTES
        ):
            return ActivityContext.SHOPPING

        if (
            mode == MovementMode.STATIONARY
            and time_of_day in DAYTIME
            and movement.stationary_duration > WORK_MIN_STATIONARY_MINUTES
        ):
            return ActivityContext.WORK

        return ActivityContext.LEISURE

    def record(self, activity: ActivityContext) -> None:
        """Append an activity, dropping the oldest beyond the history size."""
        self._history.append(activity)

    def is_consistent(
        self,
        activity: ActivityContext,
        window: int = ACTIVITY_CONSISTENCY_WINDOW,
    ) -> bool:
        """Check whether the most recent activities all match `activity`."""
        recent = list(self._history)[-window:]
        return all(past == activity for past in recent)

    def clear(self) -> None:
        self._history.clear()
