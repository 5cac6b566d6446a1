"""Library Module - Stories available for adaptation."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from echotrail.shared.models import ContentType, Difficulty, EmotionalTone

if TYPE_CHECKING:
    from echotrail.modules.adaptation.interface import AdaptedContent


@dataclass(frozen=True)
class Geofence:
    """Area within which a story is location-relevant."""

    latitude: float
    longitude: float
    radius: float  # meters


@dataclass(frozen=True)
class ContentMetadata:
    """Descriptive metadata used for ranking and adaptation."""

    type: ContentType
    themes: frozenset[str] = frozenset()
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    estimated_read_time: int = 5  # minutes
    emotional_tone: EmotionalTone = EmotionalTone.NEUTRAL
    age_appropriate: bool = True
    era: str | None = None
    keywords: tuple[str, ...] = ()


@dataclass
class StoryContent:
    """A story in the library.

    The original text never changes; the only mutation is memoizing
    adaptations in `adapted_versions`, keyed by context hash.
    """

    id: str
    title: str
    original_text: str
    metadata: ContentMetadata
    tags: list[str] = field(default_factory=list)
    geofence: Geofence | None = None
    adapted_versions: dict[str, "AdaptedContent"] = field(default_factory=dict, repr=False)


class IStoryLibrary(Protocol):
    """Interface for the story repository.

    The core reads stories from the library; persistence is owned by the
    implementation.
    """

    def add_story(self, story: StoryContent) -> None:
        """Add or replace a story."""
        ...

    def remove_story(self, content_id: str) -> bool:
        """Remove a story.

        Returns:
            True if the story existed
        """
        ...

    def get_story(self, content_id: str) -> StoryContent | None:
        """Get a story by id, or None if absent."""
        ...

    def list_stories(self) -> list[StoryContent]:
        """Get all stories in insertion order."""
        ...

    def __len__(self) -> int:
        ...
