from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from .client import FetchResult, FetchStatus, HackerNewsClient
from .models import Comment, Story, StoryCategory


logger = logging.getLogger("hackernews_mcp.fetcher")

MAX_STORIES = 50


class StoryFetcher:
    """
    Fan-out/fan-in over item ids.

    Every id in a batch is fetched concurrently (bounded by ``max_concurrency``)
    and the caller waits for all of them. Results keep the order of the input
    ids; failed and empty fetches are dropped.
    """

    def __init__(self, client: HackerNewsClient, max_concurrency: int = MAX_STORIES) -> None:
        self.client = client
        self.max_concurrency = max(1, int(max_concurrency))

    async def _fetch_all(self, ids: Sequence[int]) -> List[Dict[str, Any]]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch_one(item_id: int) -> FetchResult[Dict[str, Any]]:
            async with semaphore:
                return await self.client.fetch_item(item_id)

        results = await asyncio.gather(*(fetch_one(item_id) for item_id in ids))
        failed = sum(1 for r in results if r.status is FetchStatus.ERROR)
        if failed:
            logger.warning(f"Dropped {failed} of {len(ids)} items that failed to load")
        return [r.value for r in results if r.ok and r.value is not None]

    async def fetch_stories(self, category: StoryCategory, limit: int = MAX_STORIES) -> List[Story]:
        listing = await self.client.list_ids(category)
        if listing.status is FetchStatus.ERROR:
            logger.warning(f"Upstream unavailable for {category.value} stories, returning no results")
            return []
        ids = listing.value_or([])[:limit]
        if not ids:
            return []
        items = await self._fetch_all(ids)
        return [Story.from_dict(item) for item in items if item.get("type") == "story"]

    async def fetch_comments(self, ids: Optional[Sequence[int]]) -> List[Comment]:
        if not ids:
            return []
        items = await self._fetch_all(ids)
        return [Comment.from_dict(item) for item in items]

    async def fetch_story(self, story_id: int) -> Optional[Story]:
        result = await self.client.fetch_item(story_id)
        if not result.ok or result.value is None:
            return None
        return Story.from_dict(result.value)
