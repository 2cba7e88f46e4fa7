from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .errors import InvalidArgumentError, NotFoundError, UnknownToolError
from .fetcher import StoryFetcher
from .formatting import (
    DEFAULT_TIME_FORMAT,
    render_comment_list,
    render_story_detail,
    render_story_list,
    to_formatted_comment,
    to_formatted_story,
)
from .models import StoryCategory
from .session import StorySession


DEFAULT_LIMIT = 10

LIST_TOOLS: Dict[str, StoryCategory] = {
    "hn_latest": StoryCategory.NEWEST,
    "hn_top": StoryCategory.TOP,
    "hn_best": StoryCategory.BEST,
}
STORY_TOOL = "hn_story"
COMMENTS_TOOL = "hn_comments"
TOOL_NAMES = tuple(LIST_TOOLS) + (STORY_TOOL, COMMENTS_TOOL)


@dataclass(frozen=True)
class ListStoriesRequest:
    category: StoryCategory
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class GetStoryRequest:
    story_id: int


@dataclass(frozen=True)
class GetCommentsRequest:
    story_id: Optional[int] = None
    story_index: Optional[int] = None


ToolRequest = Union[ListStoriesRequest, GetStoryRequest, GetCommentsRequest]


def _as_number(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is a JSON number with no fractional part."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def _as_limit(value: Any, default: int) -> int:
    # limits are truncated, not rounded, and never clamped here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def decode_request(
    name: str,
    arguments: Optional[Mapping[str, Any]],
    default_limit: int = DEFAULT_LIMIT,
) -> ToolRequest:
    """
    Turn a tool name and its raw argument bag into a typed request.

    Raises UnknownToolError for names outside TOOL_NAMES and
    InvalidArgumentError when hn_story gets no usable id.
    """
    args = arguments or {}
    if name in LIST_TOOLS:
        return ListStoriesRequest(
            category=LIST_TOOLS[name],
            limit=_as_limit(args.get("limit"), default_limit),
        )
    if name == STORY_TOOL:
        story_id = _as_number(args.get("story_id"))
        if story_id is None:
            raise InvalidArgumentError("Story ID must be a number")
        return GetStoryRequest(story_id=story_id)
    if name == COMMENTS_TOOL:
        return GetCommentsRequest(
            story_id=_as_number(args.get("story_id")),
            story_index=_as_number(args.get("story_index")),
        )
    raise UnknownToolError(name)


class ToolDispatcher:
    def __init__(
        self,
        fetcher: StoryFetcher,
        default_limit: int = DEFAULT_LIMIT,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        self.fetcher = fetcher
        self.default_limit = default_limit
        self.time_format = time_format

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]], session: StorySession) -> str:
        request = decode_request(name, arguments, default_limit=self.default_limit)
        return await self.dispatch(request, session)

    async def dispatch(self, request: ToolRequest, session: StorySession) -> str:
        if isinstance(request, ListStoriesRequest):
            return await self._list_stories(request, session)
        if isinstance(request, GetStoryRequest):
            return await self._get_story(request)
        if isinstance(request, GetCommentsRequest):
            return await self._get_comments(request, session)
        raise UnknownToolError(type(request).__name__)

    async def _list_stories(self, request: ListStoriesRequest, session: StorySession) -> str:
        stories = await self.fetcher.fetch_stories(request.category, request.limit)
        formatted = [to_formatted_story(story, self.time_format) for story in stories]
        session.replace(formatted)
        return render_story_list(formatted)

    async def _get_story(self, request: GetStoryRequest) -> str:
        story = await self.fetcher.fetch_story(request.story_id)
        if story is None:
            raise NotFoundError(request.story_id)
        return render_story_detail(to_formatted_story(story, self.time_format, include_text=True))

    def _resolve_story_id(self, request: GetCommentsRequest, session: StorySession) -> int:
        if request.story_id is None and request.story_index is None:
            raise InvalidArgumentError("Either a story ID or a story index is required")
        if request.story_id is not None:
            return request.story_id
        target = session.story_at(request.story_index)
        if target is None:
            raise InvalidArgumentError("Invalid story index or ID provided")
        return target.id

    async def _get_comments(self, request: GetCommentsRequest, session: StorySession) -> str:
        story_id = self._resolve_story_id(request, session)
        story = await self.fetcher.fetch_story(story_id)
        if story is None:
            raise NotFoundError(story_id)
        if not story.kids:
            return f'No comments found for story "{story.title}" (ID: {story.id})'
        comments = await self.fetcher.fetch_comments(story.kids)
        formatted = [to_formatted_comment(comment, self.time_format) for comment in comments]
        return render_comment_list(story.title, formatted)
