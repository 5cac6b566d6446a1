"""Content transformation.

Applies an AdaptationStrategy to a story: sentence selection, vocabulary
substitution, interaction points, duration and category estimates, format
selection, audio script generation and confidence scoring.

The heuristics here are deliberately simple text rules; none of them needs
a language model.
"""

from collections.abc import Callable, Iterable
import logging
import math
import random
import re

from echotrail.modules.adaptation.interface import (
    AdaptationStrategy,
    AdaptedContent,
    InteractionPoint,
)
from echotrail.modules.adaptation.strategy import generate_context_hash
from echotrail.modules.context.interface import ContextualEnvironment
from echotrail.modules.library.interface import StoryContent
from echotrail.shared.constants import (
    CHOICE_DRAW_THRESHOLD,
    INTERACTION_DENSITY,
    KEYWORD_DENSITY_LIMIT,
    LENGTH_RATIO_PENALTY,
    LONG_MAX_SECONDS,
    LONG_MAX_WORDS,
    MAX_LENGTH_RATIO,
    MAX_PREFERRED_SENTENCE_WORDS,
    MEDIUM_MAX_SECONDS,
    MEDIUM_MAX_WORDS,
    MICRO_MAX_SECONDS,
    MICRO_MAX_WORDS,
    MIN_LENGTH_RATIO,
    MIN_PREFERRED_SENTENCE_WORDS,
    POSITION_BONUS_RATIO,
    QUESTION_DRAW_THRESHOLD,
    QUICK_ADAPTATION_CONFIDENCE,
    QUICK_ADAPTATION_CONTEXT,
    SHORT_MAX_SECONDS,
    SHORT_MAX_WORDS,
)
from echotrail.shared.exceptions import InvariantViolationError
from echotrail.shared.feature_flags import is_ambient_sound_cues_enabled
from echotrail.shared.models import (
    AttentionLevel,
    AvailableTime,
    ContentComplexity,
    ContentFormat,
    ContentLength,
    EnvironmentType,
    InteractionType,
    MovementMode,
    TimeOfDay,
)

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")

FOCUS_AREA_KEYWORDS: dict[str, tuple[str, ...]] = {
    "key-points": ("important", "significant", "notable", "crucial", "main"),
    "highlights": ("remarkable", "fascinating", "unique", "special", "extraordinary"),
    "historical-context": ("history", "historical", "past", "ancient", "era"),
    "cultural-significance": ("culture", "tradition", "heritage", "customs", "society"),
    "natural-features": ("natural", "landscape", "environment", "wildlife", "scenic"),
}

_SIMPLIFY_CONNECTIVES = re.compile(
    r"\b(however|nevertheless|furthermore|consequently)\b", re.IGNORECASE
)
_SIMPLIFY_VERBS = re.compile(r"\b(utilize|commence|terminate)\b", re.IGNORECASE)
_SIMPLER_VERBS = {"utilize": "use", "commence": "start", "terminate": "end"}

_FORMAL_SUBSTITUTIONS = (
    (re.compile(r"\bbut\b", re.IGNORECASE), "however"),
    (re.compile(r"\bstart\b", re.IGNORECASE), "commence"),
    (re.compile(r"\bend\b", re.IGNORECASE), "conclude"),
)

_SPEECH_PAUSE = re.compile(r"([.!?])\s+")
_EMPHASIS = re.compile(r"\b(important|significant|remarkable|fascinating)\b", re.IGNORECASE)
_PRONUNCIATION_GUIDES = (
    (re.compile(r"\bqueue\b", re.IGNORECASE), "queue (cue)"),
    (re.compile(r"\bcolonel\b", re.IGNORECASE), "colonel (kernel)"),
    (re.compile(r"\bWednesday\b", re.IGNORECASE), "Wednesday (WENZ-day)"),
)
AMBIENT_CUES: dict[EnvironmentType, str] = {
    EnvironmentType.FOREST: "[Sound: Gentle forest ambience] ",
    EnvironmentType.COASTAL: "[Sound: Ocean waves] ",
}

CHOICE_OPTIONS = ("Continue story", "Learn more details", "Skip to end")


# ===================
# Text helpers
# ===================

def split_sentences(text: str) -> list[str]:
    """Split text on sentence terminators, dropping empty fragments."""
    return [part.strip() for part in _SENTENCE_SPLIT.split(text) if part.strip()]


def count_words(text: str) -> int:
    return len(text.split())


def target_sentence_count(sentence_count: int, length_reduction: float) -> int:
    """Number of sentences kept for a reduction fraction, at least 1.

    The product is rounded before ceil so float noise (10 * 0.3 becoming
    3.0000000000000004) cannot add a sentence.
    """
    if sentence_count == 0:
        return 0
    kept = math.ceil(round(sentence_count * (1 - length_reduction), 9))
    return max(1, kept)


def keyword_density(sentence: str) -> float:
    """Ratio of unique words to total words."""
    words = sentence.lower().split()
    if not words:
        return 0.0
    return len(set(words)) / len(words)


def score_sentence(
    sentence: str,
    focus_areas: Iterable[str],
    position: int,
    total_sentences: int,
) -> float:
    """Score how worth keeping a sentence is when shortening a story."""
    score = 1.0

    position_ratio = position / total_sentences
    if position_ratio < POSITION_BONUS_RATIO or position_ratio > 1 - POSITION_BONUS_RATIO:
        score += 0.5

    if MIN_PREFERRED_SENTENCE_WORDS <= count_words(sentence) <= MAX_PREFERRED_SENTENCE_WORDS:
        score += 0.3

    lowered = sentence.lower()
    for area in focus_areas:
        for keyword in FOCUS_AREA_KEYWORDS.get(area, ()):
            if keyword in lowered:
                score += 0.4

    if keyword_density(sentence) > KEYWORD_DENSITY_LIMIT:
        score -= 0.2

    return max(0.0, score)


def reduce_length(text: str, length_reduction: float, focus_areas: Iterable[str]) -> str:
    """Keep the highest scoring sentences, in their original order."""
    sentences = split_sentences(text)
    if not sentences:
        return text

    focus_areas = tuple(focus_areas)
    keep = target_sentence_count(len(sentences), length_reduction)
    scores = [
        score_sentence(sentence, focus_areas, index, len(sentences))
        for index, sentence in enumerate(sentences)
    ]
    # sorted() is stable, so equal scores keep the earlier sentence
    ranked = sorted(range(len(sentences)), key=lambda i: scores[i], reverse=True)
    selected = sorted(ranked[:keep])

    return ". ".join(sentences[i] for i in selected) + "."


def adjust_complexity(text: str, adjustment: int) -> str:
    """Swap connectives and verbs toward simpler or more formal vocabulary."""
    if adjustment == 0:
        return text

    if adjustment < 0:
        text = _SIMPLIFY_CONNECTIVES.sub("but", text)
        return _SIMPLIFY_VERBS.sub(lambda m: _SIMPLER_VERBS[m.group(1).lower()], text)

    for pattern, replacement in _FORMAL_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


def categorize_length(word_count: int, duration: int) -> ContentLength:
    if word_count < MICRO_MAX_WORDS or duration < MICRO_MAX_SECONDS:
        return ContentLength.MICRO
    if word_count < SHORT_MAX_WORDS or duration < SHORT_MAX_SECONDS:
        return ContentLength.SHORT
    if word_count < MEDIUM_MAX_WORDS or duration < MEDIUM_MAX_SECONDS:
        return ContentLength.MEDIUM
    if word_count < LONG_MAX_WORDS or duration < LONG_MAX_SECONDS:
        return ContentLength.LONG
    return ContentLength.EXTENDED


def categorize_complexity(adjustment: int) -> ContentComplexity:
    if adjustment <= -2:
        return ContentComplexity.SIMPLE
    if adjustment <= 0:
        return ContentComplexity.MODERATE
    if adjustment <= 1:
        return ContentComplexity.COMPLEX
    return ContentComplexity.EXPERT


def is_format_appropriate(fmt: ContentFormat, context: ContextualEnvironment) -> bool:
    """Check whether a format is safe and sensible in a context."""
    mode = context.movement.movement_mode
    attention = context.attention_level

    if fmt == ContentFormat.VISUAL:
        return (
            mode != MovementMode.DRIVING
            and attention != AttentionLevel.LOW
            and context.time_of_day != TimeOfDay.NIGHT
        )
    if fmt == ContentFormat.INTERACTIVE:
        return (
            mode == MovementMode.STATIONARY
            and attention == AttentionLevel.HIGH
            and context.available_time != AvailableTime.SHORT
        )
    if fmt == ContentFormat.TEXT:
        return mode == MovementMode.STATIONARY and attention != AttentionLevel.LOW
    return True


def select_format(
    preferences: Iterable[ContentFormat],
    context: ContextualEnvironment,
) -> ContentFormat:
    """Pick the first appropriate preferred format, falling back to AUDIO.

    Driving always gets AUDIO whatever the preference order.
    """
    if context.movement.movement_mode == MovementMode.DRIVING:
        return ContentFormat.AUDIO

    for fmt in preferences:
        if is_format_appropriate(fmt, context):
            return fmt
    return ContentFormat.AUDIO


def lexical_quality(original: str, adapted: str) -> float:
    """Jaccard overlap of word sets, penalized for extreme length ratios."""
    original_words = set(original.lower().split())
    adapted_words = set(adapted.lower().split())
    union = original_words | adapted_words
    if not union:
        return 1.0

    similarity = len(original_words & adapted_words) / len(union)
    ratio = _length_ratio(original, adapted)
    penalty = LENGTH_RATIO_PENALTY if ratio > MAX_LENGTH_RATIO or ratio < MIN_LENGTH_RATIO else 0.0
    return _clamp(similarity - penalty)


def strategy_appropriateness(
    strategy: AdaptationStrategy,
    context: ContextualEnvironment,
) -> float:
    """Score how well a strategy fits a context."""
    score = 0.5
    mode = context.movement.movement_mode

    if strategy.format_preference and is_format_appropriate(strategy.format_preference[0], context):
        score += 0.2

    if context.available_time == AvailableTime.SHORT and strategy.length_reduction > 0.4:
        score += 0.2
    if context.available_time == AvailableTime.LONG and strategy.length_reduction < 0.3:
        score += 0.2

    if mode == MovementMode.STATIONARY and strategy.interaction_level > 0.6:
        score += 0.1
    if mode == MovementMode.DRIVING and strategy.interaction_level < 0.3:
        score += 0.1

    return _clamp(score)


def _length_ratio(original: str, adapted: str) -> float:
    if not original:
        return 1.0 if not adapted else MAX_LENGTH_RATIO + 1
    return len(adapted) / len(original)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# ===================
# Transformer
# ===================

class ContentTransformer:
    """Applies adaptation strategies to stories.

    Holds the tunable parameters (speech rate, confidence weights) and the
    random source used to pick interaction point types.
    """

    def __init__(
        self,
        words_per_minute: int = 160,
        confidence_base: float = 0.5,
        confidence_weights: tuple[float, float, float] = (0.3, 0.4, 0.3),
        rng: random.Random | None = None,
        ambient_cues_enabled: Callable[[], bool] = is_ambient_sound_cues_enabled,
    ) -> None:
        self.words_per_minute = words_per_minute
        self.confidence_base = confidence_base
        self.confidence_weights = confidence_weights
        self._rng = rng or random.Random()
        self._ambient_cues_enabled = ambient_cues_enabled

    def adapt(
        self,
        story: StoryContent,
        strategy: AdaptationStrategy,
        context: ContextualEnvironment,
    ) -> AdaptedContent:
        """Produce the adapted version of a story.

        Raises:
            InvariantViolationError: If the strategy was built for another context
        """
        expected_hash = generate_context_hash(context)
        if strategy.context_hash != expected_hash:
            raise InvariantViolationError(
                "strategy.context_hash",
                f"strategy for '{strategy.context_hash}' applied to '{expected_hash}'",
            )

        original = story.original_text
        text = original
        if strategy.length_reduction > 0:
            text = reduce_length(text, strategy.length_reduction, strategy.focus_areas)
        text = adjust_complexity(text, strategy.complexity_adjustment)

        duration = self.estimate_duration(text, strategy.delivery_speed)
        interaction_points = self.generate_interaction_points(
            text, strategy.interaction_level, duration, context
        )
        fmt = select_format(strategy.format_preference, context)

        return AdaptedContent(
            text=text,
            duration=duration,
            format=fmt,
            length=categorize_length(count_words(text), duration),
            complexity=categorize_complexity(strategy.complexity_adjustment),
            adaptation_context=strategy.context_hash,
            confidence=self.calculate_confidence(original, text, strategy, context),
            interaction_points=tuple(interaction_points),
            audio_script=self.generate_audio_script(text, context) if fmt == ContentFormat.AUDIO else None,
        )

    def quick_adapt(self, story: StoryContent, context: ContextualEnvironment) -> AdaptedContent:
        """Cheap preview adaptation used for recommendations.

        Shortens the story with a fixed reduction and no interaction points.
        """
        reduction = 0.5 if context.available_time == AvailableTime.SHORT else 0.2
        text = reduce_length(story.original_text, reduction, ("key-points",))
        duration = self.estimate_duration(text, 1.0)
        fmt = select_format((ContentFormat.TEXT,), context)

        return AdaptedContent(
            text=text,
            duration=duration,
            format=fmt,
            length=categorize_length(count_words(text), duration),
            complexity=categorize_complexity(0),
            adaptation_context=QUICK_ADAPTATION_CONTEXT,
            confidence=QUICK_ADAPTATION_CONFIDENCE,
            audio_script=self.generate_audio_script(text, context) if fmt == ContentFormat.AUDIO else None,
        )

    def estimate_duration(self, text: str, delivery_speed: float) -> int:
        """Estimated speaking time in whole seconds."""
        minutes = count_words(text) / self.words_per_minute
        return math.ceil(round(minutes * 60 / delivery_speed, 9))

    def generate_interaction_points(
        self,
        text: str,
        interaction_level: float,
        duration: int,
        context: ContextualEnvironment,
    ) -> list[InteractionPoint]:
        """Spread interaction points evenly across the content.

        A draw above CHOICE_DRAW_THRESHOLD makes a CHOICE when stationary;
        otherwise a draw above QUESTION_DRAW_THRESHOLD makes a QUESTION when
        attention is high; everything else is a PAUSE.
        Drivers never get interaction points.
        """
        if context.movement.movement_mode == MovementMode.DRIVING:
            return []

        count = math.floor(round(len(split_sentences(text)) * interaction_level * INTERACTION_DENSITY, 9))
        points = []

        for i in range(count):
            timestamp = (i + 1) / (count + 1) * duration

            if (
                context.movement.movement_mode == MovementMode.STATIONARY
                and self._rng.random() > CHOICE_DRAW_THRESHOLD
            ):
                point = InteractionPoint(
                    timestamp=timestamp,
                    type=InteractionType.CHOICE,
                    content="What would you like to explore next?",
                    options=CHOICE_OPTIONS,
                    expected_duration=10,
                )
            elif (
                context.attention_level == AttentionLevel.HIGH
                and self._rng.random() > QUESTION_DRAW_THRESHOLD
            ):
                point = InteractionPoint(
                    timestamp=timestamp,
                    type=InteractionType.QUESTION,
                    content="Can you imagine what this place looked like back then?",
                    expected_duration=5,
                )
            else:
                point = InteractionPoint(
                    timestamp=timestamp,
                    type=InteractionType.PAUSE,
                    content="Take a moment to look around...",
                    expected_duration=3,
                )
            points.append(point)

        return points

    def generate_audio_script(self, text: str, context: ContextualEnvironment) -> str:
        """Prepare text for speech: pauses, emphasis, pronunciation, ambience."""
        script = _SPEECH_PAUSE.sub(r"\1... ", text)
        script = _EMPHASIS.sub(r"**\1**", script)
        for pattern, guide in _PRONUNCIATION_GUIDES:
            script = pattern.sub(guide, script)

        if self._ambient_cues_enabled():
            cue = AMBIENT_CUES.get(context.location.environment_type)
            if cue:
                script = cue + script

        return script

    def calculate_confidence(
        self,
        original: str,
        adapted: str,
        strategy: AdaptationStrategy,
        context: ContextualEnvironment,
    ) -> float:
        """Weighted confidence that the adaptation fits the context, in [0, 1]."""
        length_weight, strategy_weight, quality_weight = self.confidence_weights

        expected_ratio = 1 - strategy.length_reduction
        length_score = 1 - abs(_length_ratio(original, adapted) - expected_ratio)

        confidence = (
            self.confidence_base
            + length_score * length_weight
            + strategy_appropriateness(strategy, context) * strategy_weight
            + lexical_quality(original, adapted) * quality_weight
        )
        return _clamp(confidence)
