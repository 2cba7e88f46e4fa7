from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class StoryCategory(str, Enum):
    NEWEST = "newest"
    TOP = "top"
    BEST = "best"

    @property
    def endpoint(self) -> str:
        return {
            StoryCategory.NEWEST: "newstories.json",
            StoryCategory.TOP: "topstories.json",
            StoryCategory.BEST: "beststories.json",
        }[self]


def _kids(data: Dict[str, Any]) -> Tuple[int, ...]:
    return tuple(data.get("kids") or ())


@dataclass(frozen=True)
class Story:
    id: int
    title: str
    by: str
    time: int
    score: int = 0
    url: Optional[str] = None
    kids: Tuple[int, ...] = ()
    text: Optional[str] = None
    type: str = "story"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Story":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            by=data.get("by") or "unknown",
            time=int(data.get("time") or 0),
            score=int(data.get("score") or 0),
            url=data.get("url") or None,
            kids=_kids(data),
            text=data.get("text"),
            type=data.get("type") or "story",
        )


@dataclass(frozen=True)
class Comment:
    id: int
    by: str
    time: int
    text: Optional[str] = None
    kids: Tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        # deleted comments come back without "by" and "text"
        return cls(
            id=int(data["id"]),
            by=data.get("by") or "unknown",
            time=int(data.get("time") or 0),
            text=data.get("text"),
            kids=_kids(data),
        )


@dataclass(frozen=True)
class FormattedStory:
    id: int
    title: str
    by: str
    time: str
    score: int
    comments_count: int
    url: Optional[str] = None
    text: Optional[str] = None


@dataclass(frozen=True)
class FormattedComment:
    id: int
    by: str
    time: str
    text: str
    replies: int
