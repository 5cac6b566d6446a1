"""Adaptation strategy construction.

Strategies are built from the context by a fixed rule order. Each later
rule only tightens or loosens earlier values with max/min:

1. Movement mode sets the base values and format preference
2. Available time raises the length reduction floor
3. Attention level clamps complexity and interaction
4. User preferences adjust within what movement allows

Strategies are memoized per (context hash, preferences) pair.
"""

from collections import OrderedDict
from dataclasses import dataclass
import logging

from echotrail.modules.adaptation.interface import AdaptationStrategy, UserContentPreferences
from echotrail.modules.context.interface import ContextualEnvironment, ContextualInsights
from echotrail.modules.library.interface import StoryContent
from echotrail.shared.exceptions import InvariantViolationError
from echotrail.shared.models import (
    AttentionLevel,
    AvailableTime,
    ContentFormat,
    InteractionFrequency,
    MovementMode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _MovementProfile:
    length_reduction: float
    complexity_adjustment: int
    interaction_level: float
    delivery_speed: float
    formats: tuple[ContentFormat, ...]
    focus: tuple[str, ...] = ()
    avoid: tuple[str, ...] = ()


_MOVEMENT_PROFILES: dict[MovementMode, _MovementProfile] = {
    MovementMode.DRIVING: _MovementProfile(
        0.7, -2, 0.1, 0.8, (ContentFormat.AUDIO,),
        avoid=("complex-details", "visual-elements"),
    ),
    MovementMode.CYCLING: _MovementProfile(
        0.5, -1, 0.2, 0.9, (ContentFormat.AUDIO,),
        avoid=("long-descriptions",),
    ),
    MovementMode.WALKING: _MovementProfile(
        0.2, 0, 0.7, 1.0, (ContentFormat.AUDIO, ContentFormat.VISUAL),
        focus=("immersive-details",),
    ),
    MovementMode.STATIONARY: _MovementProfile(
        0.0, 1, 1.0, 1.0,
        (ContentFormat.INTERACTIVE, ContentFormat.VISUAL, ContentFormat.TEXT),
        focus=("detailed-exploration",),
    ),
}

# (reduction floor, focus tags, avoid tags)
_TIME_RULES: dict[AvailableTime, tuple[float, tuple[str, ...], tuple[str, ...]]] = {
    AvailableTime.SHORT: (
        0.6,
        ("key-points", "highlights"),
        ("background-context", "detailed-explanations"),
    ),
    AvailableTime.MEDIUM: (0.3, ("main-story", "context"), ()),
    AvailableTime.LONG: (0.0, ("full-narrative", "rich-details", "exploration"), ()),
}

# Preferences that would loosen the safety limits set while driving
_PREFERENCE_LOCKED_MODES = frozenset({MovementMode.DRIVING})

MAX_COMPLEXITY_ADJUSTMENT = 2


def generate_context_hash(context: ContextualEnvironment) -> str:
    """Build the adaptation-equivalence key for a context.

    Contexts agreeing on movement mode, available time, attention,
    content preference, environment type and activity share a hash.
    """
    factors = [
        context.movement.movement_mode.value,
        context.available_time.value,
        context.attention_level.value,
        context.content_preference.value,
        context.location.environment_type.value,
        context.activity_context.value,
    ]
    return "_".join(factors).lower()


def validate_strategy(strategy: AdaptationStrategy) -> None:
    """Check that every strategy value is within its range.

    Raises:
        InvariantViolationError: If a value is out of range
    """
    if not 0.0 <= strategy.length_reduction <= 1.0:
        raise InvariantViolationError(
            "strategy.length_reduction", f"{strategy.length_reduction} not in [0, 1]"
        )
    if abs(strategy.complexity_adjustment) > MAX_COMPLEXITY_ADJUSTMENT:
        raise InvariantViolationError(
            "strategy.complexity_adjustment",
            f"{strategy.complexity_adjustment} not in [-2, 2]",
        )
    if not 0.0 <= strategy.interaction_level <= 1.0:
        raise InvariantViolationError(
            "strategy.interaction_level", f"{strategy.interaction_level} not in [0, 1]"
        )
    if strategy.delivery_speed <= 0:
        raise InvariantViolationError(
            "strategy.delivery_speed", f"{strategy.delivery_speed} must be positive"
        )
    if not strategy.format_preference:
        raise InvariantViolationError("strategy.format_preference", "must not be empty")


class StrategyBuilder:
    """Builds and memoizes adaptation strategies.

    The memo holds at most `max_size` strategies; the oldest is dropped first.
    """

    def __init__(self, max_size: int = 100) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._cache: OrderedDict[tuple[str, UserContentPreferences | None], AdaptationStrategy] = (
            OrderedDict()
        )

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    def create_strategy(
        self,
        context: ContextualEnvironment,
        insights: ContextualInsights,
        content: StoryContent,
        user_preferences: UserContentPreferences | None = None,
    ) -> AdaptationStrategy:
        """Get the strategy for a context, building it on first use.

        The strategy depends only on the context hash and the preferences;
        insights and content are accepted so callers need not know that.

        Raises:
            InvariantViolationError: If the built strategy is out of range
        """
        context_hash = generate_context_hash(context)
        key = (context_hash, user_preferences)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Strategy cache hit: {context_hash}")
            return cached

        strategy = self._build(context, context_hash, user_preferences)
        validate_strategy(strategy)
        if len(self._cache) >= self.max_size:
            self._cache.popitem(last=False)
        self._cache[key] = strategy
        logger.debug(
            f"Built strategy {context_hash}: reduction={strategy.length_reduction} "
            f"complexity={strategy.complexity_adjustment} "
            f"interaction={strategy.interaction_level}"
        )
        return strategy

    def _build(
        self,
        context: ContextualEnvironment,
        context_hash: str,
        preferences: UserContentPreferences | None,
    ) -> AdaptationStrategy:
        mode = context.movement.movement_mode
        profile = _MOVEMENT_PROFILES[mode]

        reduction = profile.length_reduction
        complexity = profile.complexity_adjustment
        interaction = profile.interaction_level
        focus = list(profile.focus)
        avoid = list(profile.avoid)
        formats = list(profile.formats)

        floor, time_focus, time_avoid = _TIME_RULES[context.available_time]
        reduction = max(reduction, floor)
        focus.extend(time_focus)
        avoid.extend(time_avoid)

        if context.attention_level == AttentionLevel.LOW:
            complexity = min(complexity, -1)
            interaction = min(interaction, 0.2)
            focus.extend(["simple-concepts", "clear-narrative"])
            avoid.extend(["complex-analysis", "multiple-themes"])
        elif context.attention_level == AttentionLevel.HIGH:
            complexity = max(complexity, 0)
            interaction = max(interaction, 0.6)
            focus.extend(["deep-analysis", "connections", "implications"])

        if preferences is not None:
            locked = mode in _PREFERENCE_LOCKED_MODES

            if preferences.prefers_brief_content:
                reduction = max(reduction, 0.4)
            if preferences.interaction_frequency == InteractionFrequency.MINIMAL:
                interaction = min(interaction, 0.2)

            if not locked:
                if preferences.prefers_detailed_content:
                    reduction = min(reduction, 0.2)
                    complexity = max(complexity, 0)
                if preferences.prefers_interactive:
                    interaction = max(interaction, 0.6)
                if preferences.interaction_frequency == InteractionFrequency.FREQUENT:
                    interaction = max(interaction, 0.6)

            if preferences.preferred_formats:
                formats = _reorder_formats(formats, preferences.preferred_formats)

        return AdaptationStrategy(
            context_hash=context_hash,
            length_reduction=reduction,
            complexity_adjustment=complexity,
            interaction_level=interaction,
            delivery_speed=profile.delivery_speed,
            format_preference=tuple(formats),
            focus_areas=tuple(focus),
            avoid_areas=tuple(avoid),
        )


def _reorder_formats(
    formats: list[ContentFormat],
    preferred: tuple[ContentFormat, ...],
) -> list[ContentFormat]:
    """Move the user's preferred formats to the front.

    Only formats the movement mode already allows are kept, so preferences
    never introduce a format the situation rules out.
    """
    front = [fmt for fmt in preferred if fmt in formats]
    rest = [fmt for fmt in formats if fmt not in front]
    return front + rest
