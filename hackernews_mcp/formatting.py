"""
Projection of raw Hacker News items into display records, and rendering of
those records into the plain-text blocks returned by the tools.

Everything here is pure: no I/O, no logging.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional, Sequence

from .models import Comment, FormattedComment, FormattedStory, Story


DIVIDER = "-" * 30
DEFAULT_TIME_FORMAT = "%c"

# Only these four, in this order. Anything else is left encoded.
_ENTITIES = (
    ("&gt;", ">"),
    ("&lt;", "<"),
    ("&amp;", "&"),
    ("&quot;", '"'),
)
_TAG_RE = re.compile(r"<[^>]*>?")


def format_time(timestamp: int, fmt: str = DEFAULT_TIME_FORMAT) -> str:
    """Render unix seconds in local time; the default format follows the process locale."""
    return datetime.fromtimestamp(timestamp).strftime(fmt)


def clean_text(text: Optional[str]) -> str:
    """
    Decode a handful of HTML entities and strip tag-like substrings.

    Entities are decoded first, so encoded markup such as ``&lt;b&gt;`` is
    stripped as well. This is not an HTML sanitizer: malformed or nested tags
    and entities like ``&#x27;`` pass through untouched.
    """
    if not text:
        return ""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return _TAG_RE.sub("", text)


def to_formatted_story(
    story: Story,
    time_format: str = DEFAULT_TIME_FORMAT,
    include_text: bool = False,
) -> FormattedStory:
    return FormattedStory(
        id=story.id,
        title=story.title,
        by=story.by,
        time=format_time(story.time, time_format),
        url=story.url,
        score=story.score,
        comments_count=len(story.kids),
        text=clean_text(story.text) if include_text else None,
    )


def to_formatted_comment(comment: Comment, time_format: str = DEFAULT_TIME_FORMAT) -> FormattedComment:
    return FormattedComment(
        id=comment.id,
        by=comment.by,
        time=format_time(comment.time, time_format),
        text=clean_text(comment.text),
        replies=len(comment.kids),
    )


def render_story_list(stories: Sequence[FormattedStory]) -> str:
    if not stories:
        return "No stories found."

    blocks = []
    for index, story in enumerate(stories, start=1):
        blocks.append(
            f"{index}. {story.title}\n"
            f"   ID: {story.id}\n"
            f"   By: {story.by}\n"
            f"   Published: {story.time}\n"
            f"   Score: {story.score}\n"
            f"   Comments: {story.comments_count}\n"
            f"   URL: {story.url or 'N/A'}\n"
            f"   {DIVIDER}"
        )
    return "\n\n".join(blocks)


def render_story_detail(story: Optional[FormattedStory]) -> str:
    if story is None:
        return "Story not found."

    result = (
        f"Title: {story.title}\n"
        f"ID: {story.id}\n"
        f"By: {story.by}\n"
        f"Published: {story.time}\n"
        f"Score: {story.score}\n"
        f"Comments: {story.comments_count}\n"
        f"URL: {story.url or 'N/A'}"
    )
    if story.text:
        result += f"\n\nContent:\n{story.text}"
    return result


def render_comment_list(story_title: str, comments: Sequence[FormattedComment]) -> str:
    if not comments:
        return "No comments found."

    header = f'Comments for "{story_title}" (Total: {len(comments)}):\n'
    blocks = []
    for index, comment in enumerate(comments, start=1):
        replies = f"({comment.replies} replies)" if comment.replies > 0 else "(no replies)"
        blocks.append(
            f"{index}. Comment by {comment.by} at {comment.time}:\n"
            f'   "{comment.text}"\n'
            f"   {replies}\n"
            f"   {DIVIDER}"
        )
    return header + "\n" + "\n\n".join(blocks)
