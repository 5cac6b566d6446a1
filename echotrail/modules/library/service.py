"""In-memory story library."""

import logging

from echotrail.modules.library.interface import IStoryLibrary, StoryContent
from echotrail.shared.exceptions import ContentNotFoundError

logger = logging.getLogger(__name__)


class InMemoryStoryLibrary(IStoryLibrary):
    """Story library held in process memory (use a real store in production)."""

    def __init__(self, stories: list[StoryContent] | None = None) -> None:
        self._stories: dict[str, StoryContent] = {}
        for story in stories or []:
            self.add_story(story)

    def add_story(self, story: StoryContent) -> None:
        if story.id in self._stories:
            logger.info(f"Replacing story {story.id}")
        self._stories[story.id] = story

    def remove_story(self, content_id: str) -> bool:
        return self._stories.pop(content_id, None) is not None

    def get_story(self, content_id: str) -> StoryContent | None:
        return self._stories.get(content_id)

    def require_story(self, content_id: str) -> StoryContent:
        """Get a story by id.

        Raises:
            ContentNotFoundError: If the story is not in the library
        """
        story = self._stories.get(content_id)
        if story is None:
            raise ContentNotFoundError(content_id)
        return story

    def list_stories(self) -> list[StoryContent]:
        return list(self._stories.values())

    def __len__(self) -> int:
        return len(self._stories)
