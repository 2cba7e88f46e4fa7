from __future__ import annotations

from typing import List, Optional, Sequence

from .models import FormattedStory


class StorySession:
    """
    The last story list returned to one MCP host, for lookups by position.

    Every list call replaces the whole list. There is no locking: if two list
    calls overlap, whichever finishes last wins.
    """

    def __init__(self) -> None:
        self._stories: List[FormattedStory] = []

    def replace(self, stories: Sequence[FormattedStory]) -> None:
        self._stories = list(stories)

    @property
    def stories(self) -> List[FormattedStory]:
        return list(self._stories)

    def __len__(self) -> int:
        return len(self._stories)

    def story_at(self, index: int) -> Optional[FormattedStory]:
        """1-based lookup; None when out of range."""
        if index < 1 or index > len(self._stories):
            return None
        return self._stories[index - 1]
