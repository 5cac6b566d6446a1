"""Pydantic schemas for loading stories from JSON."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from echotrail.modules.library.interface import ContentMetadata, Geofence, StoryContent
from echotrail.shared.exceptions import ValidationError
from echotrail.shared.models import BaseSchema, ContentType, Difficulty, EmotionalTone


class GeofenceSchema(BaseSchema):
    """Geofence in a story file."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius: float = Field(..., gt=0)


class ContentMetadataSchema(BaseSchema):
    """Story metadata in a story file."""

    type: ContentType
    themes: list[str] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    estimated_read_time: int = Field(default=5, ge=0)
    emotional_tone: EmotionalTone = EmotionalTone.NEUTRAL
    age_appropriate: bool = True
    era: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)


class StoryCreateRequest(BaseSchema):
    """A story to ingest into the library."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    text: str
    metadata: ContentMetadataSchema
    tags: list[str] = Field(default_factory=list)
    location: Optional[GeofenceSchema] = None

    def to_story(self) -> StoryContent:
        """Convert to the domain StoryContent."""
        meta = self.metadata
        return StoryContent(
            id=self.id,
            title=self.title,
            original_text=self.text,
            metadata=ContentMetadata(
                type=meta.type,
                themes=frozenset(theme.lower() for theme in meta.themes),
                difficulty=meta.difficulty,
                estimated_read_time=meta.estimated_read_time,
                emotional_tone=meta.emotional_tone,
                age_appropriate=meta.age_appropriate,
                era=meta.era,
                keywords=tuple(meta.keywords),
            ),
            tags=list(self.tags),
            geofence=(
                Geofence(
                    latitude=self.location.latitude,
                    longitude=self.location.longitude,
                    radius=self.location.radius,
                )
                if self.location
                else None
            ),
        )


class StoryFile(BaseModel):
    """A JSON document holding a list of stories."""

    stories: list[StoryCreateRequest] = Field(default_factory=list)


def load_stories(path: Path) -> list[StoryContent]:
    """Load and validate stories from a JSON file.

    The file may be either `{"stories": [...]}` or a bare list.

    Raises:
        ValidationError: If the file is not valid JSON or a story is malformed
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(str(path), f"invalid JSON: {e}") from e

    if isinstance(raw, list):
        raw = {"stories": raw}

    try:
        story_file = StoryFile.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(str(path), str(e)) from e

    return [request.to_story() for request in story_file.stories]
