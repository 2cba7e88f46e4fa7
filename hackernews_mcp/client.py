from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

import httpx

from .models import StoryCategory


logger = logging.getLogger("hackernews_mcp.client")

DEFAULT_BASE_URL = "https://hacker-news.firebaseio.com/v0"

T = TypeVar("T")


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of a single upstream request.

    EMPTY means upstream answered with no data (``null`` or ``[]``), ERROR
    means it could not be reached or answered with garbage.
    """

    status: FetchStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    def value_or(self, default: T) -> T:
        return self.value if self.value is not None else default

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(status=FetchStatus.OK, value=value)

    @classmethod
    def empty(cls) -> "FetchResult[T]":
        return cls(status=FetchStatus.EMPTY)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(status=FetchStatus.ERROR, error=error)


class HackerNewsClient:
    """Thin async wrapper around the Hacker News Firebase API. Never raises."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def _get_json(self, path: str) -> FetchResult[Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            return FetchResult.failure(f"{type(exc).__name__}: {exc}")
        if data is None:
            return FetchResult.empty()
        return FetchResult.success(data)

    async def list_ids(self, category: StoryCategory) -> FetchResult[List[int]]:
        result = await self._get_json(category.endpoint)
        if result.status is FetchStatus.ERROR:
            logger.warning(f"Error fetching {category.value} stories: {result.error}")
            return result
        if not result.ok:
            return result
        if not isinstance(result.value, list):
            error = f"unexpected payload for {category.endpoint}: {type(result.value).__name__}"
            logger.warning(f"Error fetching {category.value} stories: {error}")
            return FetchResult.failure(error)
        if not result.value:
            return FetchResult.empty()
        return FetchResult.success([item_id for item_id in result.value if isinstance(item_id, int)])

    async def fetch_item(self, item_id: int) -> FetchResult[Dict[str, Any]]:
        result = await self._get_json(f"item/{item_id}.json")
        if result.status is FetchStatus.ERROR:
            logger.warning(f"Error fetching item {item_id}: {result.error}")
            return result
        if result.ok and not isinstance(result.value, dict):
            error = f"unexpected payload for item {item_id}: {type(result.value).__name__}"
            logger.warning(error)
            return FetchResult.failure(error)
        return result
