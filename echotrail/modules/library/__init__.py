"""Library Module - The stories available for adaptation."""

from echotrail.modules.library.interface import (
    ContentMetadata,
    Geofence,
    IStoryLibrary,
    StoryContent,
)
from echotrail.modules.library.schemas import StoryCreateRequest, load_stories
from echotrail.modules.library.service import InMemoryStoryLibrary

__all__ = [
    # Interface types
    "ContentMetadata",
    "Geofence",
    "IStoryLibrary",
    "StoryContent",
    # Schemas
    "StoryCreateRequest",
    "load_stories",
    # Implementations
    "InMemoryStoryLibrary",
]
