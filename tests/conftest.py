from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from hackernews_mcp.client import HackerNewsClient
from hackernews_mcp.dispatcher import ToolDispatcher
from hackernews_mcp.fetcher import StoryFetcher


BASE_URL = "https://hn.test/v0"


def make_story(item_id: int, kids: Optional[List[int]] = None, **fields: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": item_id,
        "type": "story",
        "title": f"Story {item_id}",
        "by": f"author{item_id}",
        "time": 1700000000 + item_id,
        "score": item_id * 10,
        "url": f"https://example.com/{item_id}",
    }
    if kids is not None:
        data["kids"] = kids
    data.update(fields)
    return data


def make_comment(item_id: int, text: str = "hello", kids: Optional[List[int]] = None, **fields: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": item_id,
        "type": "comment",
        "by": f"commenter{item_id}",
        "time": 1700000500 + item_id,
        "text": text,
    }
    if kids is not None:
        data["kids"] = kids
    data.update(fields)
    return data


class FakeHackerNews:
    """In-memory stand-in for the Firebase API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.lists: Dict[str, Any] = {
            "newstories.json": [],
            "topstories.json": [],
            "beststories.json": [],
        }
        self.items: Dict[int, Dict[str, Any]] = {}
        self.failing: Set[str] = set()
        self.requests: List[str] = []

    def add(self, *items: Dict[str, Any]) -> None:
        for item in items:
            self.items[item["id"]] = item

    @property
    def item_requests(self) -> List[str]:
        return [path for path in self.requests if path.startswith("item/")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.split("/v0/", 1)[1]
        self.requests.append(path)
        if path in self.failing:
            return httpx.Response(503)
        if path in self.lists:
            return httpx.Response(200, content=json.dumps(self.lists[path]).encode())
        if path.startswith("item/"):
            item_id = int(path[len("item/"):-len(".json")])
            return httpx.Response(200, content=json.dumps(self.items.get(item_id)).encode())
        return httpx.Response(404)


@pytest.fixture
def fake_hn() -> FakeHackerNews:
    return FakeHackerNews()


@pytest.fixture
def hn_client(fake_hn: FakeHackerNews) -> HackerNewsClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_hn.handler))
    return HackerNewsClient(http_client, base_url=BASE_URL)


@pytest.fixture
def fetcher(hn_client: HackerNewsClient) -> StoryFetcher:
    return StoryFetcher(hn_client, max_concurrency=5)


@pytest.fixture
def dispatcher(fetcher: StoryFetcher) -> ToolDispatcher:
    return ToolDispatcher(fetcher)
