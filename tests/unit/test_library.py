"""Tests for the story library and story file loading."""

import json

import pytest

from echotrail.modules.library.schemas import StoryCreateRequest, load_stories
from echotrail.modules.library.service import InMemoryStoryLibrary
from echotrail.shared.exceptions import ContentNotFoundError, ValidationError
from echotrail.shared.models import ContentType, Difficulty, EmotionalTone

STORY_PAYLOAD = {
    "id": "fortress",
    "title": "The Harbor Fortress",
    "text": "The fortress guards the harbor. It is very old.",
    "metadata": {
        "type": "HISTORICAL",
        "themes": ["History", "Outdoor"],
        "difficulty": "BEGINNER",
        "emotional_tone": "DRAMATIC",
        "era": "medieval",
    },
    "tags": ["castle"],
    "location": {"latitude": 59.9075, "longitude": 10.7365, "radius": 300},
}


class TestInMemoryStoryLibrary:
    """Tests for the in-memory library."""

    def test_add_get_list(self, story):
        library = InMemoryStoryLibrary()

        library.add_story(story)

        assert library.get_story("fortress") is story
        assert library.list_stories() == [story]
        assert len(library) == 1

    def test_replace_keeps_single_entry(self, story):
        library = InMemoryStoryLibrary([story])
        replacement = StoryCreateRequest.model_validate(STORY_PAYLOAD).to_story()

        library.add_story(replacement)

        assert len(library) == 1
        assert library.get_story("fortress") is replacement

    def test_remove(self, story):
        library = InMemoryStoryLibrary([story])

        assert library.remove_story("fortress") is True
        assert library.remove_story("fortress") is False
        assert library.get_story("fortress") is None

    def test_require_story_raises(self):
        library = InMemoryStoryLibrary()

        with pytest.raises(ContentNotFoundError) as exc_info:
            library.require_story("missing")

        assert "missing" in str(exc_info.value)


class TestStorySchemas:
    """Tests for converting validated requests into stories."""

    def test_to_story(self):
        story = StoryCreateRequest.model_validate(STORY_PAYLOAD).to_story()

        assert story.original_text == STORY_PAYLOAD["text"]
        assert story.metadata.type == ContentType.HISTORICAL
        assert story.metadata.themes == frozenset({"history", "outdoor"})
        assert story.metadata.difficulty == Difficulty.BEGINNER
        assert story.metadata.emotional_tone == EmotionalTone.DRAMATIC
        assert story.metadata.era == "medieval"
        assert story.geofence.radius == 300
        assert story.tags == ["castle"]
        assert story.adapted_versions == {}

    def test_story_without_location(self):
        payload = {key: value for key, value in STORY_PAYLOAD.items() if key != "location"}

        story = StoryCreateRequest.model_validate(payload).to_story()

        assert story.geofence is None


class TestLoadStories:
    """Tests for loading story files."""

    def test_wrapped_document(self, tmp_path):
        path = tmp_path / "stories.json"
        path.write_text(json.dumps({"stories": [STORY_PAYLOAD]}), encoding="utf-8")

        stories = load_stories(path)

        assert [s.id for s in stories] == ["fortress"]

    def test_bare_list(self, tmp_path):
        path = tmp_path / "stories.json"
        path.write_text(json.dumps([STORY_PAYLOAD]), encoding="utf-8")

        assert len(load_stories(path)) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "stories.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_stories(path)

    def test_bad_radius(self, tmp_path):
        payload = dict(STORY_PAYLOAD, location={"latitude": 59.9, "longitude": 10.7, "radius": 0})
        path = tmp_path / "stories.json"
        path.write_text(json.dumps([payload]), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_stories(path)

    def test_unknown_content_type(self, tmp_path):
        payload = dict(STORY_PAYLOAD, metadata={"type": "GOSSIP"})
        path = tmp_path / "stories.json"
        path.write_text(json.dumps([payload]), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_stories(path)
